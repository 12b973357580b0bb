"""Transport - seam to the external messaging session"""

from __future__ import annotations

from contactq.transport.events import (
    ContactArrival,
    EventQueue,
    MessagingTransport,
    TransportListener,
)
from contactq.transport.supervisor import TransportSupervisor

__all__ = [
    "ContactArrival",
    "EventQueue",
    "MessagingTransport",
    "TransportListener",
    "TransportSupervisor",
]
