from __future__ import annotations

import asyncio

import pytest

from scriptchat.domain.models import EventType, RunState
from scriptchat.engine.adapters.scripted import QueuedRun, ScriptedEngine, ScriptedRun
from scriptchat.execution.pump import EventPump
from scriptchat.execution.schemas import ErrorKind, ProgressEvent, RunConcluded, RunFailed
from scriptchat.execution.session import SessionModel, drive
from scriptchat.state.models import RunStatus

from tests.utils import make_event


@pytest.mark.asyncio
async def test_advance_yields_events_then_concludes() -> None:
    events = [make_event(EventType.CALL_START), make_event(EventType.CALL_FINISH, content="ok")]
    run = ScriptedRun(script=events, final_text="ok")
    pump = EventPump(run)

    first = await pump.advance()
    second = await pump.advance()
    last = await pump.advance()

    assert isinstance(first, ProgressEvent) and first.event is events[0]
    assert isinstance(second, ProgressEvent) and second.event is events[1]
    assert first.pump is pump
    assert isinstance(last, RunConcluded)
    assert last.text == "ok"
    assert last.handle is run
    assert pump.exhausted


@pytest.mark.asyncio
async def test_empty_stream_concludes_immediately() -> None:
    pump = EventPump(ScriptedRun(final_text="nothing happened"))

    envelope = await pump.advance()

    assert isinstance(envelope, RunConcluded)
    assert envelope.text == "nothing happened"


@pytest.mark.asyncio
async def test_text_failure_is_a_finalize_error() -> None:
    pump = EventPump(ScriptedRun(text_error=RuntimeError("text unavailable")))

    envelope = await pump.advance()

    assert isinstance(envelope, RunFailed)
    assert envelope.kind == ErrorKind.FINALIZE
    assert str(envelope.error) == "text unavailable"
    assert envelope.pump is pump


@pytest.mark.asyncio
async def test_stream_failure_after_events() -> None:
    run = ScriptedRun(script=[make_event(EventType.CALL_START)], stream_error=ConnectionError("socket closed"))
    pump = EventPump(run)

    assert isinstance(await pump.advance(), ProgressEvent)
    envelope = await pump.advance()

    assert isinstance(envelope, RunFailed)
    assert envelope.kind == ErrorKind.STREAM
    assert str(envelope.error) == "socket closed"


@pytest.mark.asyncio
async def test_advance_after_exhaustion_raises() -> None:
    pump = EventPump(ScriptedRun())
    await pump.advance()

    with pytest.raises(RuntimeError):
        await pump.advance()


@pytest.mark.asyncio
async def test_advance_waits_for_one_live_event() -> None:
    run = QueuedRun()
    pump = EventPump(run)

    pending = asyncio.create_task(pump.advance())
    await asyncio.sleep(0)
    assert not pending.done()

    run.push(make_event(EventType.CALL_PROGRESS, content="hello"))
    envelope = await asyncio.wait_for(pending, timeout=1)
    assert isinstance(envelope, ProgressEvent)
    assert envelope.event.content == "hello"

    run.close("hello", state=RunState.CONTINUE, chat_state="ctx-1")
    envelope = await asyncio.wait_for(pump.advance(), timeout=1)
    assert isinstance(envelope, RunConcluded)
    assert envelope.handle.state() == RunState.CONTINUE
    assert envelope.handle.chat_state() == "ctx-1"


@pytest.mark.asyncio
async def test_queued_run_failure_is_a_stream_error() -> None:
    run = QueuedRun()
    run.fail(RuntimeError("engine crashed"))

    envelope = await EventPump(run).advance()

    assert isinstance(envelope, RunFailed)
    assert envelope.kind == ErrorKind.STREAM


class _UnopenableRun(ScriptedRun):
    def events(self):
        raise ConnectionError("cannot open stream")


@pytest.mark.asyncio
async def test_failure_opening_the_stream_is_a_stream_error() -> None:
    pump = EventPump(_UnopenableRun())

    envelope = await pump.advance()

    assert isinstance(envelope, RunFailed)
    assert envelope.kind == ErrorKind.STREAM
    assert str(envelope.error) == "cannot open stream"
    assert pump.exhausted


@pytest.mark.asyncio
async def test_drive_records_failure_opening_the_stream() -> None:
    session = SessionModel(ScriptedEngine(_UnopenableRun()), "chat.gpt")

    run = await drive(session, "hello")

    assert run.status == RunStatus.ERRORED
    assert run.error_text == "cannot open stream"
