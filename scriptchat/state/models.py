"""
State Layer - Runtime Data Models

This module defines the records the session keeps while it drives the
execution engine. A RunRecord is one top-level turn; it owns a flat mapping
of CallRecords, and the call hierarchy is recovered through each call's
parent identifier (a call with no parent is a root call).
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..domain.models import CallContext


class RunStatus(str, Enum):
    """
    Lifecycle of a RunRecord.

    CREATING: The run was requested but no event has been folded yet.
    RUNNING: Events are being folded.
    CONTINUABLE: The engine expects more input; chat state was captured.
    FINISHED: The run completed; chat state was captured.
    ERRORED: The run failed; error_text explains why.
    """
    CREATING = "CREATING"
    RUNNING = "RUNNING"
    CONTINUABLE = "CONTINUABLE"
    FINISHED = "FINISHED"
    ERRORED = "ERRORED"

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.CONTINUABLE, RunStatus.FINISHED, RunStatus.ERRORED)


class CallRecord(BaseModel):
    """
    Local bookkeeping for one tool invocation.

    The engine's call context is stored as received; start/end/input/output
    are updated as events for this call identifier arrive.
    """
    context: CallContext = Field(default_factory=lambda: CallContext(id=""))
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    input: str = ""
    output: str = ""

    @property
    def id(self) -> str:
        return self.context.id

    @property
    def parent_id(self) -> str:
        return self.context.parent_id

    @property
    def is_root(self) -> bool:
        return self.context.is_root


class RunRecord(BaseModel):
    """
    One top-level turn of the session.
    """
    input: str = ""
    output: str = ""
    error_text: str = ""
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    status: RunStatus = RunStatus.CREATING
    calls: Dict[str, CallRecord] = Field(default_factory=dict)

    @property
    def duration(self) -> Optional[timedelta]:
        if self.start is None or self.end is None:
            return None
        return self.end - self.start

    def root_calls(self) -> List[CallRecord]:
        return [call for call in self.calls.values() if call.is_root]

    def children_of(self, call_id: str) -> List[CallRecord]:
        return [call for call in self.calls.values() if call.parent_id == call_id]
