from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from scriptchat.domain.models import CallContext, EngineEvent, EventType

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class TickingClock:
    """Returns a strictly increasing time on every call."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> datetime:
        self.calls += 1
        return BASE_TIME + timedelta(seconds=self.calls)


def make_event(
    kind: EventType,
    call_id: Optional[str] = "A",
    parent_id: str = "",
    content: str = "",
    seconds: int = 0,
) -> EngineEvent:
    context = None
    if call_id is not None:
        context = CallContext(id=call_id, parent_id=parent_id, tool_name="tool")
    return EngineEvent(
        type=kind,
        time=BASE_TIME + timedelta(seconds=seconds),
        call_context=context,
        content=content,
    )
