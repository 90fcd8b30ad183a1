"""
Call Folding.

Applies one engine progress event to a RunRecord's call map. Calls are kept
flat, keyed by identifier; nesting is carried by each call's parent id.
"""

import logging

from ..domain.models import EngineEvent, EventType
from ..state.models import CallRecord, RunRecord

logger = logging.getLogger(__name__)


def fold_event(run: RunRecord, event: EngineEvent) -> bool:
    """
    Folds 'event' into 'run'. Returns False when the event is not tied to a
    call and was ignored.

    The stored CallRecord is replaced, never edited in place, so a reader
    holding the previous record never observes a half-applied update.
    """
    context = event.call_context
    if context is None or not context.id:
        return False

    previous = run.calls.get(context.id)
    call = previous.model_copy() if previous is not None else CallRecord()
    call.context = context

    if event.type == EventType.CALL_START:
        call.start = event.time
        call.input = event.content
    elif event.type == EventType.CALL_PROGRESS:
        call.output = event.content
        if call.is_root:
            # Root output is what the run shows to the user
            run.output = call.output
    elif event.type == EventType.CALL_FINISH:
        call.end = event.time
        call.output = event.content

    run.calls[context.id] = call
    logger.debug(f"Folded {event.type.value} for call {context.id}")
    return True
