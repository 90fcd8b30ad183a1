"""
Envelopes and Steps - Event Pump Results and Continuations

An envelope is the outcome of advancing the event pump by one unit of work.
The three variants are mutually exclusive. A step is the explicit value the
session hands back to its caller saying what to await next.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

from ...domain.models import EngineEvent
from ...engine.interface import RunHandle

if TYPE_CHECKING:
    from ..pump import EventPump


class ErrorKind(str, Enum):
    BUSY = "busy"  # Submit while a run is in progress
    START = "start"  # Engine rejected the run
    STREAM = "stream"  # Event stream broke mid-run
    FINALIZE = "finalize"  # Final text retrieval failed


@dataclass(frozen=True)
class ProgressEvent:
    """One engine event belonging to the pump's run."""
    pump: EventPump
    event: EngineEvent


@dataclass(frozen=True)
class RunConcluded:
    """The event stream closed and the final text was retrieved."""
    pump: EventPump
    handle: RunHandle
    text: str


@dataclass(frozen=True)
class RunFailed:
    """
    The run could not proceed. 'pump' is None when no pump exists yet
    (busy rejection or start failure).
    """
    error: Exception
    kind: ErrorKind
    pump: Optional[EventPump] = None


Envelope = Union[ProgressEvent, RunConcluded, RunFailed]


class NoFurtherAction:
    """The run has concluded or processing stopped; nothing to await."""

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NoFurtherAction()"

    async def run(self) -> Envelope:
        raise RuntimeError("NoFurtherAction has nothing to run")


@dataclass(frozen=True)
class ResumeEventPump:
    """Advance the pump by one event (or one final-text fetch)."""
    pump: EventPump

    async def run(self) -> Envelope:
        return await self.pump.advance()


@dataclass(frozen=True)
class DeliverEnvelope:
    """An envelope that is already known; awaiting it returns it as is."""
    envelope: Envelope

    async def run(self) -> Envelope:
        return self.envelope


Step = Union[NoFurtherAction, ResumeEventPump, DeliverEnvelope]

NO_FURTHER_ACTION = NoFurtherAction()
