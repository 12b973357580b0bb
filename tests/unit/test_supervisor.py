"""Tests for the messaging transport supervisor"""

from __future__ import annotations

import pytest

from contactq.observability.telemetry import get_counter
from contactq.transport.events import EventQueue
from contactq.transport.supervisor import TransportSupervisor
from tests.fixtures.fakes import FakeTransport, arrival


class _Sleeps:
    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def _supervisor(pipeline, transport, allowed=None, sleep=None):
    return TransportSupervisor(
        transport,
        EventQueue(pipeline),
        allowed_account=allowed,
        retry_seconds=30.0,
        sleep=sleep or _Sleeps(),
    )


@pytest.mark.asyncio
async def test_start_failures_are_retried_every_30_seconds(pipeline):
    sleeps = _Sleeps()
    transport = FakeTransport(failures=2)
    supervisor = _supervisor(pipeline, transport, sleep=sleeps)

    await supervisor.run()

    assert transport.init_calls == 3
    assert sleeps.calls == [30.0, 30.0]
    assert supervisor.connected
    assert get_counter("transport.start_failed") == 2


@pytest.mark.asyncio
async def test_allow_list_matches_on_digits(pipeline):
    transport = FakeTransport(account="15550001111@c.us")
    supervisor = _supervisor(pipeline, transport, allowed="+1 (555) 000-1111")

    await supervisor.run()
    supervisor.on_ready()

    assert supervisor.allowed is True
    assert supervisor.session_info() == {"account": "15550001111@c.us", "allowed": True}


@pytest.mark.asyncio
async def test_events_from_other_account_are_dropped(pipeline):
    transport = FakeTransport(account="15559999999@c.us")
    supervisor = _supervisor(pipeline, transport, allowed="15550001111")

    await supervisor.run()
    supervisor.on_ready()
    supervisor.on_contact(arrival("15551234567"))

    assert supervisor.allowed is False
    assert supervisor.queue.pending() == 0
    assert get_counter("transport.rejected_session") == 1


@pytest.mark.asyncio
async def test_events_are_queued_when_no_allow_list(pipeline):
    supervisor = _supervisor(pipeline, FakeTransport())
    await supervisor.run()
    supervisor.on_ready()

    supervisor.on_contact(arrival("15551234567"))

    assert supervisor.queue.pending() == 1


def test_pairing_challenge_is_kept_until_ready(pipeline):
    supervisor = _supervisor(pipeline, FakeTransport())

    supervisor.on_pairing_challenge("2@abc,def")

    assert supervisor.last_pairing_challenge == "2@abc,def"


@pytest.mark.asyncio
async def test_restart_reinitializes(pipeline):
    transport = FakeTransport()
    supervisor = _supervisor(pipeline, transport)
    await supervisor.run()

    await supervisor.restart()

    assert transport.closed == 1
    assert transport.init_calls == 2


@pytest.mark.asyncio
async def test_failed_restart_raises_and_falls_back_to_retry_loop(pipeline):
    transport = FakeTransport(failures=2)
    supervisor = _supervisor(pipeline, transport)

    with pytest.raises(RuntimeError):
        await supervisor.restart()

    await supervisor.start()
    assert transport.init_calls == 3
    assert supervisor.connected
