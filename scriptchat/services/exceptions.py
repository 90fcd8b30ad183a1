"""
Service Layer Exceptions

Custom exceptions for the session model and related orchestration logic.
"""


class SessionError(Exception):
    """Base class for errors raised by the session layer."""
    pass


class RunBusyError(SessionError):
    """Raised when input is submitted while the active run is still in progress."""

    def __init__(self, message: str = "run already running"):
        super().__init__(message)


class EngineContractError(SessionError):
    """
    Raised when the engine reports something it promised never to report,
    such as a non-terminal state after the event stream closed.

    This is a defect in the engine, not a failed run, and is never recorded
    on a RunRecord.
    """
    pass


class SessionNotFoundError(SessionError):
    """Raised when a session id is unknown to the repository."""
    pass
