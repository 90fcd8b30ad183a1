"""
Event Pump - One Step at a Time over a Run's Event Stream

The pump is a cursor over a single run. Each call to advance() waits for
exactly one unit of work: the next event, or (once the stream has closed)
the run's final text. It never loops on its own; the caller decides when
to advance again.
"""

import logging
from typing import AsyncIterator, Optional

from ..domain.models import EngineEvent
from ..engine.interface import RunHandle
from .schemas.envelopes import Envelope, ErrorKind, ProgressEvent, RunConcluded, RunFailed

logger = logging.getLogger(__name__)


class EventPump:
    def __init__(self, handle: RunHandle):
        self.handle = handle
        self._events: Optional[AsyncIterator[EngineEvent]] = None
        self._exhausted = False

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    async def advance(self) -> Envelope:
        """
        Waits for the next event and wraps it as a ProgressEvent. When the
        stream has closed, fetches the final text instead and returns
        RunConcluded, or RunFailed if either wait raised.
        """
        if self._exhausted:
            raise RuntimeError("Event pump already reached the end of its run")

        try:
            if self._events is None:
                self._events = aiter(self.handle.events())
            event = await anext(self._events)
        except StopAsyncIteration:
            return await self._finalize()
        except Exception as e:
            self._exhausted = True
            logger.error(f"Event stream failed: {e}")
            return RunFailed(error=e, kind=ErrorKind.STREAM, pump=self)

        return ProgressEvent(pump=self, event=event)

    async def _finalize(self) -> Envelope:
        self._exhausted = True
        try:
            text = await self.handle.text()
        except Exception as e:
            logger.error(f"Retrieving final run text failed: {e}")
            return RunFailed(error=e, kind=ErrorKind.FINALIZE, pump=self)

        return RunConcluded(pump=self, handle=self.handle, text=text)
