"""
vCard 3.0 rendering for contact batches.

Each contact becomes one block:

    BEGIN:VCARD
    VERSION:3.0
    FN:<display name>
    TEL;TYPE=CELL:<identifier>
    END:VCARD
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass

from contactq.contacts.models import ContactRecord


@dataclass(frozen=True)
class CardBundle:
    """Transportable bundle handed to the delivery channel."""

    content: str
    count: int
    filename: str


def escape_text(value: str) -> str:
    """Escape a vCard text value (backslash, comma, semicolon)."""
    return value.replace("\\", "\\\\").replace(",", "\\,").replace(";", "\\;")


def render_card(record: ContactRecord) -> str:
    """Render one contact as a vCard block (no trailing newline)."""
    return "\n".join(
        [
            "BEGIN:VCARD",
            "VERSION:3.0",
            f"FN:{escape_text(record.display_name)}",
            f"TEL;TYPE=CELL:{record.identifier}",
            "END:VCARD",
        ]
    )


def bundle_filename(now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"contacts_{now_ms}.vcf"


def render_bundle(records: Sequence[ContactRecord], now_ms: int | None = None) -> CardBundle:
    """Concatenate one card per record, in batch order."""
    content = "\n".join(render_card(r) for r in records)
    return CardBundle(content=content, count=len(records), filename=bundle_filename(now_ms))
