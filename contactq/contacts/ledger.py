"""
Ledger of identifiers that were already persisted or queued.

Seeded once at start-up from the durable record store, then only grows
until an explicit clear() (the reset-after-flush policy).
"""

from __future__ import annotations

from collections.abc import Iterable

from contactq.observability.logging import get_logger

logger = get_logger(__name__)


class ContactLedger:
    """In-memory set of seen identifiers."""

    def __init__(self, identifiers: Iterable[str] | None = None) -> None:
        self._seen: set[str] = set()
        if identifiers is not None:
            self.seed(identifiers)

    def contains(self, identifier: str) -> bool:
        return identifier in self._seen

    def record(self, identifier: str) -> None:
        """Mark an identifier as seen. Recording twice is a no-op."""
        self._seen.add(identifier)

    def seed(self, identifiers: Iterable[str]) -> int:
        """Add many identifiers at once, skipping blanks. Returns how many were new."""
        before = len(self._seen)
        self._seen.update(i for i in identifiers if i)
        return len(self._seen) - before

    def clear(self) -> None:
        """Forget every identifier.

        Side Effects:
            - Empties the in-memory set
        """
        logger.info("Ledger cleared (%d identifiers dropped)", len(self._seen))
        self._seen.clear()

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._seen

    def __len__(self) -> int:
        return len(self._seen)
