"""
State Layer - Runtime Data Models

Defines the run and call records that track a session's progress through
the execution engine.
"""

from scriptchat.state.models import (
    CallRecord,
    RunRecord,
    RunStatus,
)

__all__ = [
    "CallRecord",
    "RunRecord",
    "RunStatus",
]
