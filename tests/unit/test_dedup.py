"""Tests for the dedup filter"""

from __future__ import annotations

import pytest

from contactq.contacts.dedup import DedupFilter, DedupReason, classify, display_label
from contactq.contacts.ledger import ContactLedger


@pytest.mark.parametrize("canonical_name", [None, "", "15551234567"])
def test_unsaved_sender_is_eligible(canonical_name):
    """No saved name, or a name equal to the number, counts as unsaved"""
    decision = classify(canonical_name, "15551234567", already_seen=False, nickname="Ana")

    assert decision.eligible
    assert decision.reason is DedupReason.NEW
    assert decision.display_name == "Customer Ana"


def test_saved_contact_is_ignored_even_if_unseen():
    """A distinct address-book name means the sender is already known"""
    decision = classify("Aunt May", "15551234567", already_seen=False)

    assert not decision.eligible
    assert decision.reason is DedupReason.SAVED_CONTACT


def test_seen_identifier_is_duplicate():
    decision = classify(None, "15551234567", already_seen=True)

    assert not decision.eligible
    assert decision.reason is DedupReason.DUPLICATE


@pytest.mark.parametrize(
    "nickname,expected",
    [("Ana", "Customer Ana"), (None, "Customer Unknown"), ("   ", "Customer Unknown")],
)
def test_display_label(nickname, expected):
    assert display_label(nickname) == expected


def test_filter_is_deterministic_for_same_inputs():
    """Same (name, identifier, membership) always gives the same answer"""
    ledger = ContactLedger(["999"])
    dedup = DedupFilter(ledger)

    first = dedup.evaluate(None, "999")
    second = dedup.evaluate(None, "999")

    assert first == second
    assert first.reason is DedupReason.DUPLICATE
