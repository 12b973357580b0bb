"""Exception hierarchy for contactq.

Collaborator failures are wrapped in these so callers can tell a failed
durable write from a failed delivery without inspecting library errors.
"""

from __future__ import annotations


class ContactQError(RuntimeError):
    """Base class for all contactq errors."""


class ConfigurationError(ContactQError):
    """Raised when required configuration is missing and strict mode is on."""


class RecordStoreError(ContactQError):
    """Raised when the durable record store cannot be read or written."""


class DeliveryError(ContactQError):
    """Raised when a batch could not be handed to the delivery channel."""

    def __init__(self, message: str, recipient: str | None = None):
        super().__init__(message)
        self.recipient = recipient
