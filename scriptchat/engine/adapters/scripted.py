"""
In-memory engine adapters.

ScriptedEngine replays prepared runs in order, which is what tests and local
development use in place of a live engine. QueuedRun is a live handle whose
events are pushed by a producer while the session waits on them. EchoEngine
is the stub wired into the HTTP app by default.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import AsyncIterator, Callable, List, Optional

from ...domain.models import CallContext, EngineEvent, EventType, RunState
from ..interface import ExecutionEngine, RunHandle, RunOptions

logger = logging.getLogger(__name__)


@dataclass
class ScriptedRun(RunHandle):
    """
    A run with a fixed outcome.

    Attributes:
        script: Events yielded in order before the stream closes.
        final_text: Returned by text().
        final_state: Reported by state() once the events are exhausted.
        final_chat_state: Reported by chat_state().
        final_error_output: Reported by error_output().
        stream_error: Raised after the scripted events instead of closing.
        text_error: Raised by text() instead of returning final_text.
    """
    script: List[EngineEvent] = field(default_factory=list)
    final_text: str = ""
    final_state: RunState = RunState.FINISHED
    final_chat_state: str = ""
    final_error_output: str = ""
    stream_error: Optional[Exception] = None
    text_error: Optional[Exception] = None
    options: Optional[RunOptions] = None
    _closed: bool = field(default=False, init=False)

    async def _stream(self) -> AsyncIterator[EngineEvent]:
        for event in self.script:
            yield event
        if self.stream_error is not None:
            raise self.stream_error
        self._closed = True

    def events(self) -> AsyncIterator[EngineEvent]:
        return self._stream()

    async def text(self) -> str:
        if self.text_error is not None:
            raise self.text_error
        return self.final_text

    def state(self) -> RunState:
        if not self._closed:
            return RunState.RUNNING if self.script else RunState.CREATING
        return self.final_state

    def chat_state(self) -> str:
        return self.final_chat_state

    def error_output(self) -> str:
        return self.final_error_output


class ScriptedEngine(ExecutionEngine):
    """
    Hands out queued runs, one per start_run call.

    An exception queued in place of a run is raised by start_run.
    """

    def __init__(self, *runs):
        self._runs = list(runs)
        self.started: List[tuple] = []

    def enqueue(self, run) -> None:
        self._runs.append(run)

    async def start_run(self, tool_path: str, options: RunOptions) -> RunHandle:
        self.started.append((tool_path, options))
        if not self._runs:
            raise RuntimeError(f"No scripted run left for '{tool_path}'")

        run = self._runs.pop(0)
        if isinstance(run, Exception):
            raise run

        run.options = options
        logger.debug(f"Replaying scripted run for {tool_path} ({len(run.script)} events)")
        return run


class QueuedRun(RunHandle):
    """
    A live run fed through an asyncio.Queue.

    The producer calls push() for each event and close() (or fail()) when
    the event phase ends. The consumer blocks for at most one event.
    """

    _CLOSED = object()

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()
        self._state = RunState.CREATING
        self._text = ""
        self._chat_state = ""
        self._error_output = ""

    def push(self, event: EngineEvent) -> None:
        self._state = RunState.RUNNING
        self._queue.put_nowait(event)

    def close(
        self,
        text: str,
        state: RunState = RunState.FINISHED,
        chat_state: str = "",
        error_output: str = "",
    ) -> None:
        self._text = text
        self._state = state
        self._chat_state = chat_state
        self._error_output = error_output
        self._queue.put_nowait(self._CLOSED)

    def fail(self, error: Exception) -> None:
        self._queue.put_nowait(error)

    async def _stream(self) -> AsyncIterator[EngineEvent]:
        while True:
            item = await self._queue.get()
            if item is self._CLOSED:
                return
            if isinstance(item, Exception):
                raise item
            yield item

    def events(self) -> AsyncIterator[EngineEvent]:
        return self._stream()

    async def text(self) -> str:
        return self._text

    def state(self) -> RunState:
        return self._state

    def chat_state(self) -> str:
        return self._chat_state

    def error_output(self) -> str:
        return self._error_output


class EchoEngine(ExecutionEngine):
    """
    Temporary Stub: every run makes a single root call that echoes the input
    back, then finishes. The chat state counts the turns.
    """

    def __init__(self, clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self._clock = clock

    async def start_run(self, tool_path: str, options: RunOptions) -> RunHandle:
        turn = int(options.chat_state or 0) + 1
        call = CallContext(id=f"call-{turn}", tool_name=tool_path, display_text=tool_path)
        script = [
            EngineEvent(EventType.CALL_START, self._clock(), call, options.input),
            EngineEvent(EventType.CALL_PROGRESS, self._clock(), call, options.input),
            EngineEvent(EventType.CALL_FINISH, self._clock(), call, options.input),
        ]
        return ScriptedRun(
            script=script,
            final_text=options.input,
            final_state=RunState.FINISHED,
            final_chat_state=str(turn),
            options=options,
        )
