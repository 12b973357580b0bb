"""Tests for the batch accumulator"""

from __future__ import annotations

from contactq.contacts.batch import BatchAccumulator
from contactq.contacts.models import ContactRecord


def _record(n: int) -> ContactRecord:
    return ContactRecord(display_name=f"Customer {n}", identifier=f"1555000{n:04d}")


def test_append_tracks_size_and_counter():
    batch = BatchAccumulator()
    batch.append(_record(1))
    batch.append(_record(2))

    assert batch.size() == 2
    assert batch.new_since_flush == 2


def test_snapshot_is_a_copy():
    """Appends after a snapshot do not show up in it"""
    batch = BatchAccumulator()
    batch.append(_record(1))

    snap = batch.snapshot()
    batch.append(_record(2))

    assert [r.identifier for r in snap] == ["15550000001"]
    assert batch.size() == 2


def test_clear_resets_counter():
    batch = BatchAccumulator()
    batch.append(_record(1))

    batch.clear()

    assert batch.size() == 0
    assert batch.new_since_flush == 0


def test_drop_sent_keeps_late_arrivals():
    """Only the delivered prefix is removed; later records stay queued"""
    batch = BatchAccumulator()
    for n in range(3):
        batch.append(_record(n))

    batch.drop_sent(2)

    assert [r.identifier for r in batch.snapshot()] == ["15550000002"]
    assert batch.new_since_flush == 1
