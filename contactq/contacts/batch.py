"""
Batch accumulator for contacts accepted since the last successful flush.
"""

from __future__ import annotations

from contactq.contacts.models import ContactRecord


class BatchAccumulator:
    """Ordered buffer of new contacts plus a 'new since last flush' counter."""

    def __init__(self) -> None:
        self._records: list[ContactRecord] = []
        self._new_since_flush = 0

    def append(self, record: ContactRecord) -> None:
        self._records.append(record)
        self._new_since_flush += 1

    def size(self) -> int:
        return len(self._records)

    @property
    def new_since_flush(self) -> int:
        return self._new_since_flush

    def snapshot(self) -> list[ContactRecord]:
        """Copy of the current contents; later appends do not affect it."""
        return list(self._records)

    def clear(self) -> None:
        """Empty the batch and reset the counter. Only call after a confirmed delivery."""
        self._records.clear()
        self._new_since_flush = 0

    def drop_sent(self, count: int) -> None:
        """
        Remove the first ``count`` records (the ones that were just delivered).

        Records appended while delivery was in flight stay queued and the
        counter is reset to their number.
        """
        if count >= len(self._records):
            self.clear()
            return
        del self._records[:count]
        self._new_since_flush = len(self._records)

    def __len__(self) -> int:
        return len(self._records)
