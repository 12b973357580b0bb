"""
Dedup filter: decides whether an incoming sender is a new, unsaved contact.

A sender qualifies only when the address book has no distinct name for it
(name absent, or equal to the number itself) and the ledger has not seen
its identifier yet.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from contactq.contacts.ledger import ContactLedger

DISPLAY_PREFIX = "Customer"
UNKNOWN_NICKNAME = "Unknown"


class DedupReason(str, Enum):
    """Why a sender was accepted or skipped."""

    NEW = "new"
    DUPLICATE = "duplicate"  # unsaved, but already in the ledger
    SAVED_CONTACT = "saved_contact"  # address book already has a distinct name


@dataclass(frozen=True)
class DedupDecision:
    """Outcome of the dedup filter for one sender."""

    eligible: bool
    reason: DedupReason
    display_name: str


def display_label(nickname: str | None) -> str:
    """Card label for a sender: 'Customer <nickname>' or 'Customer Unknown'."""
    name = (nickname or "").strip() or UNKNOWN_NICKNAME
    return f"{DISPLAY_PREFIX} {name}"


def is_unsaved(canonical_name: str | None, identifier: str) -> bool:
    """True when the address book holds no distinct name for this sender."""
    return not canonical_name or canonical_name == identifier


def classify(
    canonical_name: str | None, identifier: str, already_seen: bool, nickname: str | None = None
) -> DedupDecision:
    """Pure decision function over (canonical name, identifier, ledger membership)."""
    label = display_label(nickname)
    if not is_unsaved(canonical_name, identifier):
        return DedupDecision(False, DedupReason.SAVED_CONTACT, label)
    if already_seen:
        return DedupDecision(False, DedupReason.DUPLICATE, label)
    return DedupDecision(True, DedupReason.NEW, label)


class DedupFilter:
    """Binds the classify() rule to a ledger."""

    def __init__(self, ledger: ContactLedger) -> None:
        self.ledger = ledger

    def evaluate(
        self, canonical_name: str | None, identifier: str, nickname: str | None = None
    ) -> DedupDecision:
        return classify(canonical_name, identifier, self.ledger.contains(identifier), nickname)
