"""
Flush trigger: delivers the accumulated batch and resets accumulation state.

States are IDLE and FLUSHING. A flush starts when the accumulator reaches
the threshold or on a manual request with a non-empty batch. While a flush
is in flight every other request is a no-op, so at most one delivery runs
at a time. The guard is a plain flag: the process is single-threaded and
the flag is checked and set without an await in between.

Accumulated contacts are removed only after the delivery channel confirms
success. On failure the batch is kept for the next threshold crossing or
manual trigger, and the state returns to IDLE either way.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from contactq.config import FLUSH_THRESHOLD
from contactq.contacts.batch import BatchAccumulator
from contactq.contacts.ledger import ContactLedger
from contactq.contacts.models import ContactRecord
from contactq.contacts.vcard import render_bundle
from contactq.errors import RecordStoreError
from contactq.observability.logging import get_logger
from contactq.observability.telemetry import counter, log_event

if TYPE_CHECKING:
    from contactq.delivery import DeliveryChannel, DeliveryReceipt
    from contactq.storage.records import ContactRecordStore

logger = get_logger(__name__)


class FlushState(str, Enum):
    IDLE = "idle"
    FLUSHING = "flushing"


class FlushStatus(str, Enum):
    """Outcome of one flush request."""

    SENT = "sent"
    EMPTY = "empty"  # nothing to send
    BUSY = "busy"  # another flush is in flight
    FAILED = "failed"  # delivery failed, batch kept
    NOT_DUE = "not_due"  # threshold not reached


@dataclass(frozen=True)
class FlushResult:
    status: FlushStatus
    count: int = 0
    message: str = ""
    receipt: DeliveryReceipt | None = None

    @property
    def ok(self) -> bool:
        return self.status in (FlushStatus.SENT, FlushStatus.EMPTY, FlushStatus.NOT_DUE)


class FlushTrigger:
    """Threshold/manual flush state machine around a delivery channel."""

    def __init__(
        self,
        accumulator: BatchAccumulator,
        delivery: DeliveryChannel,
        threshold: int = FLUSH_THRESHOLD,
        ledger: ContactLedger | None = None,
        store: ContactRecordStore | None = None,
        reset_ledger_on_flush: bool = False,
        clear_files_on_flush: bool = False,
    ) -> None:
        if threshold < 1:
            raise ValueError(f"threshold must be >= 1, got {threshold}")
        if reset_ledger_on_flush and ledger is None:
            raise ValueError("reset_ledger_on_flush requires a ledger")
        self.accumulator = accumulator
        self.delivery = delivery
        self.threshold = threshold
        self.ledger = ledger
        self.store = store
        self.reset_ledger_on_flush = reset_ledger_on_flush
        self.clear_files_on_flush = clear_files_on_flush
        self.state = FlushState.IDLE
        self.last_result: FlushResult | None = None

    @property
    def is_flushing(self) -> bool:
        return self.state is FlushState.FLUSHING

    def threshold_reached(self) -> bool:
        return self.accumulator.new_since_flush >= self.threshold

    async def maybe_flush(self) -> FlushResult:
        """Flush if the threshold has been reached; otherwise NOT_DUE."""
        if not self.threshold_reached():
            return FlushResult(FlushStatus.NOT_DUE, self.accumulator.size())
        return await self.flush(reason="threshold")

    async def flush(self, reason: str = "manual") -> FlushResult:
        """
        Deliver the current batch.

        Side Effects:
            - Calls the delivery channel (network I/O)
            - On success: drops delivered records from the accumulator and,
              per policy, clears the ledger and the record files
            - Updates telemetry counters
        """
        if self.state is FlushState.FLUSHING:
            logger.info("Flush already in progress, ignoring %s request", reason)
            return FlushResult(
                FlushStatus.BUSY, self.accumulator.size(), "Flush already in progress"
            )

        batch = self.accumulator.snapshot()
        if not batch:
            return FlushResult(FlushStatus.EMPTY, 0, "No contacts in the current batch to send.")

        self.state = FlushState.FLUSHING
        try:
            result = await self._deliver(batch, reason)
        finally:
            self.state = FlushState.IDLE
        self.last_result = result
        return result

    async def _deliver(self, batch: list[ContactRecord], reason: str) -> FlushResult:
        count = len(batch)
        bundle = render_bundle(batch)
        log_event("flush.start", reason=reason, count=count)

        try:
            receipt = await self.delivery.deliver(bundle)
        except Exception as e:
            counter("flush.failed")
            logger.error("Error sending batch of %d contacts (%s): %s", count, reason, e)
            log_event("flush.failed", reason=reason, count=count, error=type(e).__name__)
            return FlushResult(FlushStatus.FAILED, count, f"Error sending batch: {e}")

        self.accumulator.drop_sent(count)
        self._apply_reset_policy()

        counter("flush.sent")
        logger.info("Email sent with %d contacts (%s)", count, reason)
        log_event("flush.sent", reason=reason, count=count, remaining=self.accumulator.size())
        return FlushResult(FlushStatus.SENT, count, f"Successfully sent {count} contacts.", receipt)

    def _apply_reset_policy(self) -> None:
        if self.reset_ledger_on_flush and self.ledger is not None:
            self.ledger.clear()
            # Contacts queued during delivery are still pending
            self.ledger.seed(r.identifier for r in self.accumulator.snapshot())

        if self.clear_files_on_flush and self.store is not None:
            try:
                self.store.clear()
                for record in self.accumulator.snapshot():
                    self.store.append(record)
            except RecordStoreError as e:
                counter("store.clear_failed")
                logger.error("Batch was sent but the record files could not be cleared: %s", e)
