"""Delivery - hands rendered contact bundles to an outbound channel"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from contactq.contacts.vcard import CardBundle


@dataclass(frozen=True)
class DeliveryReceipt:
    """Confirmation that a bundle left the process."""

    recipient: str
    count: int
    filename: str
    sent_at: datetime


class DeliveryChannel(Protocol):
    """Anything that can deliver a card bundle. Raises DeliveryError on failure."""

    async def deliver(self, bundle: CardBundle) -> DeliveryReceipt: ...


__all__ = ["DeliveryChannel", "DeliveryReceipt"]
