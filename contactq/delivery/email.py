"""
Batch Email Delivery

SMTP delivery of contact batches as a vCard attachment.
"""

from __future__ import annotations

import asyncio
import smtplib
from datetime import UTC, datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formatdate
from typing import Any

from contactq.config import Settings
from contactq.contacts.vcard import CardBundle
from contactq.delivery import DeliveryReceipt
from contactq.errors import DeliveryError
from contactq.observability.logging import get_logger

logger = get_logger(__name__)


class BatchEmailDelivery:
    """Sends contact bundles to a fixed recipient over SMTP"""

    def __init__(
        self,
        smtp_host: str = "smtp.gmail.com",
        smtp_port: int = 587,
        smtp_user: str | None = None,
        smtp_password: str | None = None,
        recipient: str | None = None,
        from_email: str | None = None,
        timeout: float = 30.0,
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.recipient = recipient
        self.from_email = from_email or smtp_user
        self.timeout = timeout

        if not all([self.smtp_host, self.smtp_user, self.smtp_password, self.recipient]):
            logger.warning(
                "Email delivery not fully configured. "
                "Set GMAIL_USER, GMAIL_APP_PASSWORD and RECIPIENT_EMAIL."
            )
            self.enabled = False
        else:
            self.enabled = True
            logger.info(
                "SMTP delivery configured: %s@%s:%s -> %s",
                self.smtp_user,
                self.smtp_host,
                self.smtp_port,
                self.recipient,
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> BatchEmailDelivery:
        return cls(
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_user=settings.smtp_user,
            smtp_password=settings.smtp_password,
            recipient=settings.recipient_email,
        )

    def build_message(self, bundle: CardBundle) -> MIMEMultipart:
        """Compose the email: short text body plus the bundle as a .vcf attachment."""
        msg = MIMEMultipart()
        msg["Subject"] = f"New WhatsApp Contacts ({bundle.count})"
        msg["From"] = self.from_email or ""
        msg["To"] = self.recipient or ""
        msg["Date"] = formatdate(localtime=True)

        msg.attach(MIMEText(f"You have {bundle.count} new WhatsApp contacts.", "plain", "utf-8"))

        attachment = MIMEText(bundle.content, "vcard", "utf-8")
        attachment.add_header("Content-Disposition", "attachment", filename=bundle.filename)
        msg.attach(attachment)
        return msg

    def send_bundle(self, bundle: CardBundle) -> DeliveryReceipt:
        """
        Send a bundle, blocking until the SMTP server accepts it.

        Raises:
            DeliveryError: if delivery is not configured or the SMTP exchange fails
        """
        if not self.enabled:
            raise DeliveryError("Email delivery not enabled", recipient=self.recipient)

        assert self.smtp_user is not None
        assert self.smtp_password is not None
        assert self.recipient is not None

        msg = self.build_message(bundle)
        logger.info("Connecting to %s:%s", self.smtp_host, self.smtp_port)
        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                server.starttls()
                server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(f"SMTP delivery failed: {e}", recipient=self.recipient) from e

        logger.info("Sent %d contacts to %s (%s)", bundle.count, self.recipient, bundle.filename)
        return DeliveryReceipt(
            recipient=self.recipient,
            count=bundle.count,
            filename=bundle.filename,
            sent_at=datetime.now(UTC),
        )

    async def deliver(self, bundle: CardBundle) -> DeliveryReceipt:
        """Async entry point; the SMTP exchange runs in a worker thread."""
        return await asyncio.to_thread(self.send_bundle, bundle)

    def get_config_status(self) -> dict[str, Any]:
        """Get SMTP configuration status"""
        return {
            "enabled": self.enabled,
            "smtp_host": self.smtp_host,
            "smtp_port": self.smtp_port,
            "smtp_user": self.smtp_user,
            "smtp_password_set": bool(self.smtp_password),
            "recipient": self.recipient,
        }
