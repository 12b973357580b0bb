"""contactq - save first-contact WhatsApp senders and email them in batches"""

from __future__ import annotations

__version__ = "1.0.0"


# Lazy imports so lightweight modules don't pull in FastAPI
def __getattr__(name: str):
    if name == "ContactSaverService":
        from contactq.service import ContactSaverService

        return ContactSaverService
    if name == "Settings":
        from contactq.config import Settings

        return Settings
    if name == "create_app":
        from contactq.api.app import create_app

        return create_app

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = ["ContactSaverService", "Settings", "create_app"]
