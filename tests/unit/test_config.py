"""Tests for environment-driven settings"""

from __future__ import annotations

from pathlib import Path

import pytest

from contactq.config import FLUSH_THRESHOLD, Settings
from contactq.errors import ConfigurationError

_ENV_KEYS = [
    "GMAIL_USER",
    "SMTP_USER",
    "GMAIL_APP_PASSWORD",
    "SMTP_PASSWORD",
    "RECIPIENT_EMAIL",
    "PORT",
    "SMTP_HOST",
    "CONTACTQ_CSV_PATH",
    "CONTACTQ_VCF_PATH",
    "CONTACTQ_PERSIST_RECORDS",
    "CONTACTQ_CLEAR_FILES_ON_FLUSH",
    "CONTACTQ_FLUSH_THRESHOLD",
    "CONTACTQ_RESET_LEDGER_ON_FLUSH",
    "CONTACTQ_STRICT_CONFIG",
    "ALLOWED_WA_USER",
]


@pytest.fixture
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings.from_env()

    assert settings.flush_threshold == FLUSH_THRESHOLD == 7
    assert settings.port == 3000
    assert settings.csv_path == Path("contacts.csv")
    assert settings.persist_records is True
    assert settings.reset_ledger_on_flush is False
    assert settings.allowed_account is None


def test_reads_gmail_variables_and_overrides(clean_env):
    clean_env.setenv("GMAIL_USER", "bot@gmail.com")
    clean_env.setenv("GMAIL_APP_PASSWORD", "pw")
    clean_env.setenv("RECIPIENT_EMAIL", "owner@example.com")
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("CONTACTQ_FLUSH_THRESHOLD", "3")
    clean_env.setenv("CONTACTQ_RESET_LEDGER_ON_FLUSH", "true")
    clean_env.setenv("ALLOWED_WA_USER", "  +1 555 000 1111 ")

    settings = Settings.from_env()

    assert settings.smtp_user == "bot@gmail.com"
    assert settings.port == 8080
    assert settings.flush_threshold == 3
    assert settings.reset_ledger_on_flush is True
    assert settings.allowed_account == "+1 555 000 1111"
    assert settings.validate() == []


def test_missing_credentials_warn_by_default(clean_env):
    missing = Settings.from_env().validate()

    assert missing == ["GMAIL_USER", "GMAIL_APP_PASSWORD", "RECIPIENT_EMAIL"]


def test_strict_mode_makes_missing_credentials_fatal(clean_env):
    clean_env.setenv("CONTACTQ_STRICT_CONFIG", "1")

    with pytest.raises(ConfigurationError):
        Settings.from_env().validate()


def test_invalid_threshold_rejected(clean_env):
    clean_env.setenv("CONTACTQ_FLUSH_THRESHOLD", "0")

    with pytest.raises(ConfigurationError):
        Settings.from_env()
