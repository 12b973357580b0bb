"""
Contact-arrival events and the single-consumer queue that feeds intake.

The messaging transport calls back into a TransportListener from its own
callbacks; the listener only enqueues, and one consumer task drains the
queue into EventIntake so events are handled strictly one at a time.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from contactq.observability.logging import get_logger
from contactq.observability.telemetry import counter

if TYPE_CHECKING:
    from contactq.contacts.intake import EventIntake

logger = get_logger(__name__)


@dataclass(frozen=True)
class ContactArrival:
    """A message from some sender, reduced to the sender metadata we need."""

    timestamp: float  # epoch seconds
    identifier: str
    canonical_name: str | None = None
    nickname: str | None = None


class TransportListener(Protocol):
    """Callbacks a messaging transport invokes."""

    def on_pairing_challenge(self, payload: str) -> None: ...

    def on_ready(self) -> None: ...

    def on_disconnected(self, reason: str) -> None: ...

    def on_auth_failure(self, message: str) -> None: ...

    def on_contact(self, event: ContactArrival) -> None: ...


class MessagingTransport(Protocol):
    """
    External messaging session (pairing, persistence, automation live behind it).

    initialize() raises when the session cannot be started; the supervisor
    retries.
    """

    @property
    def is_connected(self) -> bool: ...

    @property
    def account_id(self) -> str | None: ...

    async def initialize(self, listener: TransportListener) -> None: ...

    async def close(self) -> None: ...


class EventQueue:
    """Serial event pump between the transport and EventIntake."""

    def __init__(self, intake: EventIntake, maxsize: int = 0) -> None:
        self.intake = intake
        self._queue: asyncio.Queue[ContactArrival] = asyncio.Queue(maxsize=maxsize)
        self._task: asyncio.Task[None] | None = None

    def put_nowait(self, event: ContactArrival) -> None:
        self._queue.put_nowait(event)

    def pending(self) -> int:
        return self._queue.qsize()

    async def run(self) -> None:
        """Consume events forever. Errors in one event never stop the pump."""
        while True:
            event = await self._queue.get()
            try:
                await self.intake.handle(event)
            except Exception:
                counter("intake.errors")
                logger.exception("Error processing message")
            finally:
                self._queue.task_done()

    async def join(self) -> None:
        """Wait until every queued event has been handled."""
        await self._queue.join()

    def start(self) -> asyncio.Task[None]:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="contactq-intake")
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
