"""
Execution Layer - Session State Machine and Event Pump

Defines the SessionModel (run lifecycle state machine) and the EventPump
(one-step cursor over a run's event stream) that together track a session
with the execution engine.
"""

from scriptchat.execution.folding import fold_event
from scriptchat.execution.pump import EventPump
from scriptchat.execution.session import SessionModel, drive


__all__ = [
    "EventPump",
    "SessionModel",
    "drive",
    "fold_event",
]
