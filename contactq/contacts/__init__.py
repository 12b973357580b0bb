"""Contacts - dedup, batching and flush state for first-contact senders"""

from __future__ import annotations

from contactq.contacts.batch import BatchAccumulator
from contactq.contacts.dedup import DedupDecision, DedupFilter, DedupReason
from contactq.contacts.flush import FlushResult, FlushState, FlushStatus, FlushTrigger
from contactq.contacts.intake import EventIntake, IntakeOutcome
from contactq.contacts.ledger import ContactLedger
from contactq.contacts.models import ContactRecord

__all__ = [
    "BatchAccumulator",
    "ContactLedger",
    "ContactRecord",
    "DedupDecision",
    "DedupFilter",
    "DedupReason",
    "EventIntake",
    "FlushResult",
    "FlushState",
    "FlushStatus",
    "FlushTrigger",
    "IntakeOutcome",
]
