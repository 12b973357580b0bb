"""Centralized configuration for the contact saver.

Typed constants plus a frozen ``Settings`` object built from environment
variables.  ``.env`` files are loaded by the application entry point
(``contactq.api.app.main``) via python-dotenv before ``Settings.from_env``
is called, so every value below can come from either place.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from contactq.errors import ConfigurationError

# --- App ---
APP_VERSION: str = "1.0.0"

# --- Batching ---
FLUSH_THRESHOLD: int = 7

# --- Transport ---
TRANSPORT_RETRY_SECONDS: float = 30.0

# --- Storage ---
CSV_HEADER: tuple[str, str] = ("Name", "Number")
DEFAULT_CSV_PATH: str = "contacts.csv"
DEFAULT_VCF_PATH: str = "contacts.vcf"

# --- HTTP ---
DEFAULT_PORT: int = 3000


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_first(*keys: str, default: str | None = None) -> str | None:
    """Return the first non-empty env var among ``keys``."""
    for key in keys:
        value = os.getenv(key)
        if value:
            return value
    return default


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, constructed once at start-up."""

    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    recipient_email: str | None = None
    port: int = DEFAULT_PORT
    csv_path: Path = Path(DEFAULT_CSV_PATH)
    vcf_path: Path = Path(DEFAULT_VCF_PATH)
    flush_threshold: int = FLUSH_THRESHOLD
    persist_records: bool = True
    reset_ledger_on_flush: bool = False
    clear_files_on_flush: bool = False
    allowed_account: str | None = None
    session_path: str = ".wwebjs_auth"
    strict: bool = False

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from the current environment."""
        threshold = int(os.getenv("CONTACTQ_FLUSH_THRESHOLD", str(FLUSH_THRESHOLD)))
        if threshold < 1:
            raise ConfigurationError(f"CONTACTQ_FLUSH_THRESHOLD must be >= 1, got {threshold}")

        allowed = (os.getenv("ALLOWED_WA_USER") or "").strip() or None

        return cls(
            smtp_host=os.getenv("SMTP_HOST", "smtp.gmail.com"),
            smtp_port=int(os.getenv("SMTP_PORT", "587")),
            smtp_user=_env_first("GMAIL_USER", "SMTP_USER"),
            smtp_password=_env_first("GMAIL_APP_PASSWORD", "SMTP_PASSWORD"),
            recipient_email=os.getenv("RECIPIENT_EMAIL") or None,
            port=int(os.getenv("PORT", str(DEFAULT_PORT))),
            csv_path=Path(os.getenv("CONTACTQ_CSV_PATH", DEFAULT_CSV_PATH)),
            vcf_path=Path(os.getenv("CONTACTQ_VCF_PATH", DEFAULT_VCF_PATH)),
            flush_threshold=threshold,
            persist_records=_env_bool("CONTACTQ_PERSIST_RECORDS", True),
            reset_ledger_on_flush=_env_bool("CONTACTQ_RESET_LEDGER_ON_FLUSH", False),
            clear_files_on_flush=_env_bool("CONTACTQ_CLEAR_FILES_ON_FLUSH", False),
            allowed_account=allowed,
            session_path=os.getenv("WWEBJS_AUTH_PATH", ".wwebjs_auth"),
            strict=_env_bool("CONTACTQ_STRICT_CONFIG", False),
        )

    def missing_delivery_fields(self) -> list[str]:
        """Names of delivery settings that are absent."""
        missing = []
        if not self.smtp_user:
            missing.append("GMAIL_USER")
        if not self.smtp_password:
            missing.append("GMAIL_APP_PASSWORD")
        if not self.recipient_email:
            missing.append("RECIPIENT_EMAIL")
        return missing

    def validate(self) -> list[str]:
        """
        Check delivery configuration.

        Returns the missing field names. Raises ConfigurationError instead
        when strict mode is on and anything is missing.
        """
        missing = self.missing_delivery_fields()
        if missing and self.strict:
            raise ConfigurationError(
                "Missing required delivery configuration: " + ", ".join(missing)
            )
        return missing
