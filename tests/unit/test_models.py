"""Unit tests for the path data model and report helpers."""

import pytest

from ui_mbt.errors import AssertionFailure, InvalidPathError
from ui_mbt.models import Event, ModelState, Outcome, Path, PathReport, StepKind, StepReport


def test_model_state_label_for_flat_name():
    assert ModelState("Single todo").label == 'Assert state "Single todo"'


def test_model_state_label_for_compound_value():
    state = ModelState({"TodoMVC": "Single todo"})
    assert state.label == 'Assert state {"TodoMVC":"Single todo"}'
    assert state.name == "TodoMVC.Single todo"


def test_model_state_does_not_keep_caller_mapping():
    raw = {"TodoMVC": {"List": "Single todo"}}
    state = ModelState(raw)
    raw["TodoMVC"]["List"] = "Multiple todos"
    assert state.name == "TodoMVC.List.Single todo"


def test_model_state_from_value_with_context():
    state = ModelState.from_value({"value": "New todo", "context": {"todos": 0}})
    assert state.value == "New todo"
    assert state.context["todos"] == 0


def test_event_label_matches_compact_json():
    assert Event("add todo").label == 'Execute event {"type":"add todo"}'


def test_model_state_region_named_value_is_not_a_wrapper():
    state = ModelState.from_value({"value": "on", "sync": "idle"})
    assert state.paths == (("value", "on"), ("sync", "idle"))
    assert dict(state.context) == {}


def test_event_label_keeps_flat_keys_next_to_type():
    event = Event.from_value({"type": "add todo", "text": "milk"})
    assert event.payload == {"text": "milk"}
    assert event.label == 'Execute event {"type":"add todo","text":"milk"}'


def test_event_label_nests_explicit_payload():
    event = Event.from_value({"type": "add todo", "payload": {"text": "milk"}})
    assert event.label == 'Execute event {"type":"add todo","payload":{"text":"milk"}}'


@pytest.mark.parametrize(
    "payload, expected",
    [
        ([1, 2], '{"type":"go","payload":[1,2]}'),
        ("hello", '{"type":"go","payload":"hello"}'),
        (3, '{"type":"go","payload":3}'),
    ],
)
def test_event_label_accepts_any_payload(payload, expected):
    event = Event("go", payload)
    assert event.payload == payload
    assert event.label == f"Execute event {expected}"


def test_event_equality_is_on_type_only():
    assert Event("add todo", {"text": "a"}) == Event("add todo", {"text": "b"})


def test_event_requires_type():
    with pytest.raises(InvalidPathError):
        Event.from_value({"text": "milk"})


def test_path_of_coerces_by_position():
    path = Path.of("Empty todo form", "fill out todo", "New todo")
    assert [type(e) for e in path] == [ModelState, Event, ModelState]
    assert [s.value for s in path.states] == ["Empty todo form", "New todo"]
    assert [e.type for e in path.events] == ["fill out todo"]
    assert path.final_state.value == "New todo"


def test_single_state_path_is_valid():
    assert len(Path.of("Empty todo form")) == 1


@pytest.mark.parametrize(
    "elements",
    [
        (),
        (ModelState("A"), Event("go")),
        (Event("go"),),
        (ModelState("A"), ModelState("B"), ModelState("C")),
        (ModelState("A"), Event("go"), Event("again")),
    ],
)
def test_invalid_paths_are_rejected(elements):
    with pytest.raises(InvalidPathError):
        Path(elements)


def test_invalid_path_error_is_a_value_error():
    with pytest.raises(ValueError):
        Path.of("A", "go")


def test_from_steps_appends_final_state():
    path = Path.from_steps(
        [("Empty todo form", "fill out todo"), ("New todo", {"type": "add todo"})],
        {"TodoMVC": "Single todo"},
        name="single",
    )
    assert path.name == "single"
    assert len(path) == 5
    assert path.description == "Reaches state TodoMVC.Single todo"


def _step(index, outcome, error=None):
    return StepReport(index, StepKind.STATE, f"step {index}", outcome, error)


def test_path_report_helpers_for_failure():
    error = AssertionFailure("Single todo", AssertionError("boom"))
    report = PathReport(
        Outcome.FAILED, [_step(0, Outcome.PASSED), _step(1, Outcome.FAILED, error)], "p"
    )
    assert not report.passed
    assert report.failed_step.index == 1
    assert report.error is error
    assert report.labels == ["step 0", "step 1"]
    assert "✗ step 1" in report.summary()
    with pytest.raises(AssertionFailure):
        report.raise_for_outcome()


def test_path_report_raise_for_outcome_on_pass_is_noop():
    report = PathReport(Outcome.PASSED, [_step(0, Outcome.PASSED)])
    report.raise_for_outcome()
    assert report.failed_step is None
    assert report.error is None
