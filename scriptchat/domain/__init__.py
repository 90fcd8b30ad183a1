"""
Domain Layer - Execution Engine Contract Types

Defines the run states, event kinds and call context reported by the
execution engine.
"""

from scriptchat.domain.models import (
    CallContext,
    EngineEvent,
    EventType,
    RunState,
)

__all__ = [
    "CallContext",
    "EngineEvent",
    "EventType",
    "RunState",
]
