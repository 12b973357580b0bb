"""
Contact domain models.

A ContactRecord is what gets persisted, batched and rendered into a card.
The identifier (phone-style address) is the only dedup key.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def normalize_identifier(identifier: str | None) -> str:
    """Canonical form of a sender identifier (the dedup key). Empty if absent."""
    return (identifier or "").strip()


class ContactRecord(BaseModel):
    """A newly seen contact, ready to be stored and delivered."""

    model_config = ConfigDict(frozen=True)

    display_name: str = Field(..., description="Label shown in the card, e.g. 'Customer Ana'")
    identifier: str = Field(..., description="Canonical phone-style address (dedup key)")

    @field_validator("identifier")
    @classmethod
    def identifier_not_empty(cls, v: str) -> str:
        identifier = normalize_identifier(v)
        if not identifier:
            raise ValueError("identifier cannot be empty")
        return identifier

    @field_validator("display_name")
    @classmethod
    def single_line_name(cls, v: str) -> str:
        # Card and CSV formats are line-based
        return " ".join(v.split())
