"""
Event intake: routes contact-arrival events through cutoff, dedup, store,
ledger and batch, then checks the flush threshold.

The durable write happens first. Only when it succeeds is the identifier
recorded in the ledger and appended to the batch, so a crash or write
failure never leaves a contact marked as seen without a stored record.
No await happens between the ledger check and the ledger/batch mutation.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from contactq.contacts.batch import BatchAccumulator
from contactq.contacts.dedup import DedupFilter, DedupReason
from contactq.contacts.flush import FlushResult, FlushTrigger
from contactq.contacts.ledger import ContactLedger
from contactq.contacts.models import ContactRecord, normalize_identifier
from contactq.errors import RecordStoreError
from contactq.observability.logging import get_logger
from contactq.observability.telemetry import counter, log_event
from contactq.utils.redaction import mask_identifier, redact

if TYPE_CHECKING:
    from contactq.storage.records import ContactRecordStore
    from contactq.transport.events import ContactArrival

logger = get_logger(__name__)


class IntakeOutcome(str, Enum):
    BEFORE_CUTOFF = "before_cutoff"
    SAVED_CONTACT = "saved_contact"
    DUPLICATE = "duplicate"
    INVALID = "invalid"  # no usable identifier
    STORE_FAILED = "store_failed"
    ACCEPTED = "accepted"


class EventIntake:
    """Single consumer of contact-arrival events."""

    def __init__(
        self,
        ledger: ContactLedger,
        accumulator: BatchAccumulator,
        flush_trigger: FlushTrigger,
        cutoff: float,
        store: ContactRecordStore | None = None,
    ) -> None:
        self.ledger = ledger
        self.accumulator = accumulator
        self.flush_trigger = flush_trigger
        self.cutoff = cutoff
        self.store = store
        self.dedup = DedupFilter(ledger)
        self.last_flush: FlushResult | None = None

    async def handle(self, event: ContactArrival) -> IntakeOutcome:
        """
        Process one event.

        Side Effects:
            - Appends to the record store (file I/O) for new contacts
            - Mutates ledger and accumulator
            - May run a flush (network I/O)
        """
        if event.timestamp < self.cutoff:
            counter("contacts.before_cutoff")
            return IntakeOutcome.BEFORE_CUTOFF

        identifier = normalize_identifier(event.identifier)
        if not identifier:
            counter("contacts.invalid")
            logger.warning("Skipped event without a sender identifier")
            return IntakeOutcome.INVALID

        canonical_name = event.canonical_name.strip() if event.canonical_name else None
        decision = self.dedup.evaluate(canonical_name, identifier, event.nickname)

        if decision.reason is DedupReason.SAVED_CONTACT:
            counter("contacts.ignored_saved")
            logger.info("Ignored saved contact: %s", canonical_name)
            return IntakeOutcome.SAVED_CONTACT

        if decision.reason is DedupReason.DUPLICATE:
            counter("contacts.duplicate")
            logger.info(
                "Skipped duplicate: %s (%s)",
                decision.display_name,
                mask_identifier(identifier),
            )
            return IntakeOutcome.DUPLICATE

        record = ContactRecord(display_name=decision.display_name, identifier=identifier)

        if self.store is not None:
            try:
                self.store.append(record)
            except RecordStoreError as e:
                counter("store.write_failed")
                logger.error(
                    "Error writing contact %s (%s), not marking as seen: %s",
                    record.display_name,
                    mask_identifier(record.identifier),
                    e,
                )
                return IntakeOutcome.STORE_FAILED

        self.ledger.record(record.identifier)
        self.accumulator.append(record)
        counter("contacts.accepted")

        logger.info("New contact: %s (%s)", record.display_name, mask_identifier(record.identifier))
        logger.info(
            "Batch size: %d, Total contacts: %d", self.accumulator.size(), len(self.ledger)
        )
        log_event("contact.accepted", contact=redact(record.identifier))

        if self.flush_trigger.threshold_reached():
            self.last_flush = await self.flush_trigger.maybe_flush()
        return IntakeOutcome.ACCEPTED
