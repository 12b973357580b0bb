"""Storage - durable CSV/vCard record files"""

from __future__ import annotations

from contactq.storage.records import ContactRecordStore

__all__ = ["ContactRecordStore"]
