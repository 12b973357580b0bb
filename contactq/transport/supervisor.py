"""
Transport supervisor: keeps the messaging session alive.

Start-up failures (automation engine missing, session errors) are not
fatal: they are logged and retried after a fixed delay, indefinitely.
Also owns the pairing-challenge, ready and disconnect callbacks and the
optional allow-list check on the paired account.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from contactq.config import TRANSPORT_RETRY_SECONDS
from contactq.observability.logging import get_logger
from contactq.observability.telemetry import counter, log_event
from contactq.transport.events import ContactArrival, EventQueue, MessagingTransport
from contactq.utils.redaction import digits_only, mask_identifier

logger = get_logger(__name__)


class TransportSupervisor:
    """Starts the transport with retries and forwards its events to the queue."""

    def __init__(
        self,
        transport: MessagingTransport,
        queue: EventQueue,
        allowed_account: str | None = None,
        retry_seconds: float = TRANSPORT_RETRY_SECONDS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.transport = transport
        self.queue = queue
        self.allowed_account = allowed_account
        self.retry_seconds = retry_seconds
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None
        self.attempts = 0
        self.account: str | None = None
        # None until the session reports ready
        self.allowed: bool | None = None
        self.last_pairing_challenge: str | None = None

    @property
    def connected(self) -> bool:
        return bool(self.transport.is_connected)

    def session_info(self) -> dict[str, Any] | None:
        if not self.connected:
            return None
        return {"account": self.account or self.transport.account_id, "allowed": self.allowed}

    async def initialize_once(self) -> None:
        """Single start attempt; raises whatever the transport raises."""
        self.attempts += 1
        await self.transport.initialize(self)

    async def run(self) -> None:
        """Start the transport, retrying every ``retry_seconds`` until it succeeds."""
        while True:
            try:
                await self.initialize_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                counter("transport.start_failed")
                logger.error(
                    "Failed to initialize messaging transport, retrying in %.0fs: %s",
                    self.retry_seconds,
                    e,
                )
                await self._sleep(self.retry_seconds)
                continue
            logger.info("Messaging transport initialized after %d attempt(s)", self.attempts)
            return

    def start(self) -> asyncio.Task[None]:
        """Run the retry loop in the background."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="contactq-transport")
        return self._task

    async def stop(self) -> None:
        await self._cancel_retry_loop()
        await self.transport.close()

    async def restart(self) -> None:
        """
        Manual re-initialization.

        Tries once in the foreground. On failure the background retry loop
        takes over and the error is re-raised to the caller.
        """
        await self._cancel_retry_loop()
        try:
            await self.transport.close()
        except Exception as e:
            logger.warning("Error closing transport before restart: %s", e)
        try:
            await self.initialize_once()
        except Exception:
            counter("transport.start_failed")
            self.start()
            raise

    async def _cancel_retry_loop(self) -> None:
        if self._task is None or self._task.done():
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    # --- TransportListener -------------------------------------------------

    def on_pairing_challenge(self, payload: str) -> None:
        """Show the pairing code so it can be scanned out of band."""
        self.last_pairing_challenge = payload
        logger.info("Scan this QR to login:\n%s", payload)

    def on_ready(self) -> None:
        self.account = self.transport.account_id or "unknown"
        self.last_pairing_challenge = None
        logger.info("Messaging session is ready, logged in as %s", mask_identifier(self.account))

        if not self.allowed_account:
            self.allowed = True
            return

        self.allowed = digits_only(self.account) == digits_only(self.allowed_account)
        if not self.allowed:
            logger.error(
                "Logged in account does not match ALLOWED_WA_USER. Expected: %s Got: %s",
                mask_identifier(digits_only(self.allowed_account)),
                mask_identifier(digits_only(self.account)),
            )
        log_event("transport.ready", allowed=self.allowed)

    def on_disconnected(self, reason: str) -> None:
        logger.warning("Messaging session disconnected: %s", reason)

    def on_auth_failure(self, message: str) -> None:
        counter("transport.auth_failure")
        logger.error("Auth failure: %s", message)

    def on_contact(self, event: ContactArrival) -> None:
        if self.allowed is False:
            counter("transport.rejected_session")
            logger.warning("Dropping event from a session that is not on the allow-list")
            return
        self.queue.put_nowait(event)
