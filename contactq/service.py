"""
Service composition for the contact saver.

All mutable state (ledger, batch, flush state) lives on one
ContactSaverService built once at process start and shared by the intake
consumer and the HTTP surface.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

from contactq.config import Settings
from contactq.contacts.batch import BatchAccumulator
from contactq.contacts.flush import FlushResult, FlushTrigger
from contactq.contacts.intake import EventIntake
from contactq.contacts.ledger import ContactLedger
from contactq.delivery import DeliveryChannel
from contactq.delivery.email import BatchEmailDelivery
from contactq.observability.logging import get_logger
from contactq.storage.records import ContactRecordStore

logger = get_logger(__name__)


@dataclass
class ContactSaverService:
    settings: Settings
    ledger: ContactLedger
    accumulator: BatchAccumulator
    flush_trigger: FlushTrigger
    intake: EventIntake
    store: ContactRecordStore | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        delivery: DeliveryChannel | None = None,
        store: ContactRecordStore | None = None,
        cutoff: float | None = None,
    ) -> ContactSaverService:
        """
        Wire up the pipeline and seed the ledger from stored records.

        ``cutoff`` defaults to now, so messages older than process start are
        never processed.

        Side Effects:
            - Creates the CSV store with its header if missing
            - Reads stored identifiers into the ledger
        """
        if store is None and settings.persist_records:
            store = ContactRecordStore(settings.csv_path, settings.vcf_path)

        ledger = ContactLedger()
        if store is not None:
            ledger.seed(store.load_identifiers())

        if delivery is None:
            delivery = BatchEmailDelivery.from_settings(settings)

        accumulator = BatchAccumulator()
        flush_trigger = FlushTrigger(
            accumulator,
            delivery,
            threshold=settings.flush_threshold,
            ledger=ledger,
            store=store,
            reset_ledger_on_flush=settings.reset_ledger_on_flush,
            clear_files_on_flush=settings.clear_files_on_flush,
        )
        if cutoff is None:
            cutoff = int(time.time())
        intake = EventIntake(ledger, accumulator, flush_trigger, cutoff=cutoff, store=store)

        logger.info(
            "Contact saver ready: %d known contacts, flush every %d",
            len(ledger),
            settings.flush_threshold,
        )
        return cls(
            settings=settings,
            ledger=ledger,
            accumulator=accumulator,
            flush_trigger=flush_trigger,
            intake=intake,
            store=store,
        )

    async def send_batch(self) -> FlushResult:
        """Manual flush request."""
        return await self.flush_trigger.flush(reason="manual")

    def status(self) -> dict[str, Any]:
        last = self.flush_trigger.last_result
        return {
            "batch_size": self.accumulator.size(),
            "ledger_size": len(self.ledger),
            "flush_state": self.flush_trigger.state.value,
            "threshold": self.flush_trigger.threshold,
            "last_flush": last.status.value if last else None,
        }
