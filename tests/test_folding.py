from __future__ import annotations

from scriptchat.domain.models import CallContext, EngineEvent, EventType
from scriptchat.execution.folding import fold_event
from scriptchat.state.models import RunRecord

from tests.utils import BASE_TIME, make_event


def test_event_without_call_context_is_ignored() -> None:
    run = RunRecord()
    event = EngineEvent(type=EventType.RUN_START, time=BASE_TIME)

    assert fold_event(run, event) is False
    assert run.calls == {}


def test_event_with_empty_call_id_is_ignored() -> None:
    run = RunRecord()

    assert fold_event(run, make_event(EventType.CALL_START, call_id="")) is False
    assert run.calls == {}


def test_call_start_sets_start_and_input() -> None:
    run = RunRecord()
    fold_event(run, make_event(EventType.CALL_START, content="ls -la", seconds=3))

    call = run.calls["A"]
    assert call.start == make_event(EventType.CALL_START, seconds=3).time
    assert call.input == "ls -la"
    assert call.end is None
    assert call.context.tool_name == "tool"


def test_root_progress_mirrors_output_onto_run() -> None:
    run = RunRecord()
    fold_event(run, make_event(EventType.CALL_PROGRESS, content="partial"))

    assert run.calls["A"].output == "partial"
    assert run.output == "partial"


def test_nested_progress_does_not_touch_run_output() -> None:
    run = RunRecord(output="root says hi")
    fold_event(run, make_event(EventType.CALL_PROGRESS, call_id="B", parent_id="A", content="child"))

    assert run.calls["B"].output == "child"
    assert run.output == "root says hi"


def test_call_finish_sets_end_and_output() -> None:
    run = RunRecord()
    fold_event(run, make_event(EventType.CALL_START, seconds=1))
    fold_event(run, make_event(EventType.CALL_FINISH, content="done", seconds=5))

    call = run.calls["A"]
    assert call.start is not None
    assert call.end == make_event(EventType.CALL_FINISH, seconds=5).time
    assert call.output == "done"


def test_finish_of_root_call_leaves_run_output_alone() -> None:
    run = RunRecord()
    fold_event(run, make_event(EventType.CALL_FINISH, content="final"))

    assert run.calls["A"].output == "final"
    assert run.output == ""


def test_fold_replaces_stored_record() -> None:
    run = RunRecord()
    fold_event(run, make_event(EventType.CALL_START, content="in"))
    before = run.calls["A"]

    fold_event(run, make_event(EventType.CALL_PROGRESS, content="out"))

    assert run.calls["A"] is not before
    assert before.output == ""
    assert run.calls["A"].input == "in"


def test_other_event_kinds_refresh_context_only() -> None:
    run = RunRecord()
    fold_event(run, make_event(EventType.CALL_START, content="in"))

    updated = CallContext(id="A", tool_name="tool", display_text="Listing files")
    fold_event(run, EngineEvent(type=EventType.CALL_CONTINUE, time=BASE_TIME, call_context=updated, content="x"))

    call = run.calls["A"]
    assert call.context.display_text == "Listing files"
    assert call.input == "in"
    assert call.output == ""


def test_root_output_tracks_every_progress_event() -> None:
    run = RunRecord()
    events = [
        make_event(EventType.CALL_START, content="q"),
        make_event(EventType.CALL_PROGRESS, content="a"),
        make_event(EventType.CALL_PROGRESS, call_id="B", parent_id="A", content="nested"),
        make_event(EventType.CALL_PROGRESS, content="ab"),
        make_event(EventType.CALL_PROGRESS, content="abc"),
    ]

    for event in events:
        fold_event(run, event)
        if event.type == EventType.CALL_PROGRESS and not event.call_context.parent_id:
            assert run.calls["A"].output == run.output

    assert run.output == "abc"


def test_call_hierarchy_helpers() -> None:
    run = RunRecord()
    fold_event(run, make_event(EventType.CALL_START, call_id="A"))
    fold_event(run, make_event(EventType.CALL_START, call_id="B", parent_id="A"))
    fold_event(run, make_event(EventType.CALL_START, call_id="C", parent_id="A"))
    fold_event(run, make_event(EventType.CALL_START, call_id="D", parent_id="B"))

    assert [c.id for c in run.root_calls()] == ["A"]
    assert sorted(c.id for c in run.children_of("A")) == ["B", "C"]
    assert [c.id for c in run.children_of("B")] == ["D"]
