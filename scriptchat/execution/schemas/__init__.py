from scriptchat.execution.schemas.envelopes import (
    NO_FURTHER_ACTION,
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

__all__ = [
    "NO_FURTHER_ACTION",
    "DeliverEnvelope",
    "Envelope",
    "ErrorKind",
    "NoFurtherAction",
    "ProgressEvent",
    "ResumeEventPump",
    "RunConcluded",
    "RunFailed",
    "Step",
]
