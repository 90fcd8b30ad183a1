"""
Script Chat Sessions

Tracks an interactive, turn-based session with an execution engine that runs
a scripted tool and streams progress events. Each turn is a run; the events
of a run are folded into a record of nested tool calls one step at a time.
"""

from scriptchat.domain import (
    CallContext,
    EngineEvent,
    EventType,
    RunState,
)
from scriptchat.state import (
    CallRecord,
    RunRecord,
    RunStatus,
)
from scriptchat.execution.schemas import (
    DeliverEnvelope,
    Envelope,
    ErrorKind,
    NoFurtherAction,
    ProgressEvent,
    ResumeEventPump,
    RunConcluded,
    RunFailed,
    Step,
)
from scriptchat.execution import EventPump, SessionModel, drive, fold_event

__all__ = [
    # Domain Layer
    "CallContext",
    "EngineEvent",
    "EventType",
    "RunState",
    # State Layer
    "CallRecord",
    "RunRecord",
    "RunStatus",
    # Envelopes & Steps
    "DeliverEnvelope",
    "Envelope",
    "ErrorKind",
    "NoFurtherAction",
    "ProgressEvent",
    "ResumeEventPump",
    "RunConcluded",
    "RunFailed",
    "Step",
    # Execution Layer
    "EventPump",
    "SessionModel",
    "drive",
    "fold_event",
]
