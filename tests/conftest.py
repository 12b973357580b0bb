"""
Shared fixtures for contactq tests.

Delivery and transport are replaced by in-memory fakes (tests/fixtures/fakes.py);
the record store uses pytest's tmp_path.
"""

from __future__ import annotations

import pytest

from contactq.contacts.batch import BatchAccumulator
from contactq.contacts.flush import FlushTrigger
from contactq.contacts.intake import EventIntake
from contactq.contacts.ledger import ContactLedger
from contactq.observability.telemetry import reset_counters
from contactq.storage.records import ContactRecordStore
from tests.fixtures.fakes import CUTOFF, FakeDelivery


@pytest.fixture(autouse=True)
def _reset_telemetry():
    reset_counters()
    yield
    reset_counters()


@pytest.fixture
def store(tmp_path):
    return ContactRecordStore(tmp_path / "contacts.csv", tmp_path / "contacts.vcf")


@pytest.fixture
def delivery():
    return FakeDelivery()


@pytest.fixture
def pipeline(store, delivery):
    """Ledger, accumulator, flush trigger and intake wired like the service does."""
    ledger = ContactLedger(store.load_identifiers())
    accumulator = BatchAccumulator()
    trigger = FlushTrigger(accumulator, delivery, threshold=7, ledger=ledger, store=store)
    return EventIntake(ledger, accumulator, trigger, cutoff=CUTOFF, store=store)
