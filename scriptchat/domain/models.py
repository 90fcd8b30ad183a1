"""
Domain Layer - Execution Engine Contract Types

This module defines the values the execution engine hands us while a run is
in progress: the run state, the kind of each progress event, and the call
context that identifies which (possibly nested) tool invocation an event
belongs to. They mirror the engine's wire vocabulary and are never mutated
by the session.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class RunState(str, Enum):
    """
    The engine's own view of a run.

    CONTINUE and FINISHED both carry a chat state that can seed the next run.
    ERROR carries error output. CREATING and RUNNING are never valid once the
    event stream has closed.
    """
    CREATING = "creating"
    RUNNING = "running"
    CONTINUE = "continue"
    FINISHED = "finished"
    ERROR = "error"


class EventType(str, Enum):
    RUN_START = "runStart"
    RUN_FINISH = "runFinish"
    CALL_START = "callStart"
    CALL_CHAT = "callChat"
    CALL_SUB_CALLS = "callSubCalls"
    CALL_PROGRESS = "callProgress"
    CALL_CONFIRM = "callConfirm"
    CALL_CONTINUE = "callContinue"
    CALL_FINISH = "callFinish"
    PROMPT = "prompt"


@dataclass(frozen=True)
class CallContext:
    """
    Identifies one tool invocation inside a run.

    Attributes:
        id: Unique within the run. Empty means the event is not tied to a call.
        parent_id: Identifier of the calling invocation; empty for root calls.
        tool_name: Name of the tool being invoked.
        display_text: Human-readable description for the rendering layer.
    """
    id: str
    parent_id: str = ""
    tool_name: str = ""
    display_text: str = ""

    @property
    def is_root(self) -> bool:
        return not self.parent_id


@dataclass(frozen=True)
class EngineEvent:
    """A single progress event emitted by the engine during a run."""
    type: EventType
    time: datetime
    call_context: Optional[CallContext] = None
    content: str = ""
