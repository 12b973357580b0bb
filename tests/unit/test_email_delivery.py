"""Tests for SMTP batch delivery"""

from __future__ import annotations

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from contactq.config import Settings
from contactq.contacts.models import ContactRecord
from contactq.contacts.vcard import render_bundle
from contactq.delivery.email import BatchEmailDelivery
from contactq.errors import DeliveryError


def _delivery(**overrides) -> BatchEmailDelivery:
    params = {
        "smtp_user": "bot@gmail.com",
        "smtp_password": "app-password",
        "recipient": "owner@example.com",
    }
    params.update(overrides)
    return BatchEmailDelivery(**params)


def _bundle():
    records = [
        ContactRecord(display_name="Customer Ana", identifier="111"),
        ContactRecord(display_name="Customer Bo", identifier="222"),
    ]
    return render_bundle(records, now_ms=1700000000000)


def test_disabled_without_credentials():
    delivery = BatchEmailDelivery(smtp_user=None, smtp_password=None, recipient=None)

    assert delivery.enabled is False
    with pytest.raises(DeliveryError):
        delivery.send_bundle(_bundle())


def test_message_has_subject_body_and_vcf_attachment():
    msg = _delivery().build_message(_bundle())

    assert msg["Subject"] == "New WhatsApp Contacts (2)"
    assert msg["To"] == "owner@example.com"
    parts = msg.get_payload()
    assert "You have 2 new WhatsApp contacts." in parts[0].get_payload(decode=True).decode()
    assert parts[1].get_content_type() == "text/vcard"
    assert parts[1].get_filename() == "contacts_1700000000000.vcf"
    assert "TEL;TYPE=CELL:222" in parts[1].get_payload(decode=True).decode()


@patch("contactq.delivery.email.smtplib.SMTP")
def test_send_bundle_logs_in_and_sends(mock_smtp):
    server = MagicMock()
    mock_smtp.return_value.__enter__.return_value = server

    receipt = _delivery().send_bundle(_bundle())

    server.starttls.assert_called_once()
    server.login.assert_called_once_with("bot@gmail.com", "app-password")
    server.send_message.assert_called_once()
    assert receipt.count == 2
    assert receipt.recipient == "owner@example.com"


@patch("contactq.delivery.email.smtplib.SMTP")
def test_smtp_errors_become_delivery_errors(mock_smtp):
    server = MagicMock()
    server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")
    mock_smtp.return_value.__enter__.return_value = server

    with pytest.raises(DeliveryError):
        _delivery().send_bundle(_bundle())


@pytest.mark.asyncio
@patch("contactq.delivery.email.smtplib.SMTP")
async def test_async_deliver_runs_send(mock_smtp):
    mock_smtp.return_value.__enter__.return_value = MagicMock()

    receipt = await _delivery().deliver(_bundle())

    assert receipt.filename == "contacts_1700000000000.vcf"


def test_from_settings_and_config_status_hide_password():
    settings = Settings(
        smtp_user="bot@gmail.com", smtp_password="secret", recipient_email="owner@example.com"
    )

    status = BatchEmailDelivery.from_settings(settings).get_config_status()

    assert status["enabled"] is True
    assert status["smtp_password_set"] is True
    assert "secret" not in status.values()
