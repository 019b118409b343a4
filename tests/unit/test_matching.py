"""Unit tests for hierarchical state matching."""

import pytest

from ui_mbt.matching import active_paths, ancestors, freeze_state_value, matches_state
from ui_mbt.models import ModelState
from ui_mbt.todomvc import TodoState

COMPOUND = {"TodoMVC": {"List": "Single todo"}}
PARALLEL = {"Editor": "Dirty", "Sync": {"Online": "Idle"}}


def test_active_paths_flat_name():
    assert active_paths("Single todo") == (("Single todo",),)


def test_active_paths_dotted_name():
    assert active_paths("TodoMVC.Single todo") == (("TodoMVC", "Single todo"),)


def test_active_paths_compound_value():
    assert active_paths(COMPOUND) == (("TodoMVC", "List", "Single todo"),)


def test_active_paths_parallel_regions():
    assert active_paths(PARALLEL) == (("Editor", "Dirty"), ("Sync", "Online", "Idle"))


def test_active_paths_region_without_active_child():
    assert active_paths({"TodoMVC": {}}) == (("TodoMVC",),)


@pytest.mark.parametrize("value", ["", {}])
def test_active_paths_rejects_empty_values(value):
    with pytest.raises(ValueError):
        active_paths(value)


def test_active_paths_rejects_unsupported_types():
    with pytest.raises(TypeError):
        active_paths(42)


def test_ancestors_lists_every_prefix():
    assert ancestors(COMPOUND) == {"TodoMVC", "TodoMVC.List", "TodoMVC.List.Single todo"}


def test_matches_exact_flat_name():
    assert matches_state("Single todo", "Single todo")


def test_matches_ancestor_of_compound_value():
    assert matches_state("TodoMVC", COMPOUND)
    assert matches_state("TodoMVC.List", COMPOUND)


def test_matches_active_leaf_of_compound_value():
    assert matches_state("Single todo", COMPOUND)
    assert matches_state("List.Single todo", COMPOUND)


def test_does_not_match_unrelated_name():
    assert not matches_state("Multiple todos", "Single todo")
    assert not matches_state("Multiple todos", COMPOUND)


def test_does_not_match_non_contiguous_segments():
    assert not matches_state("TodoMVC.Single todo", COMPOUND)


def test_does_not_match_partial_segment_name():
    assert not matches_state("Single", "Single todo")


def test_matches_each_parallel_region():
    assert matches_state("Editor.Dirty", PARALLEL)
    assert matches_state("Online", PARALLEL)
    assert not matches_state("Editor.Idle", PARALLEL)


def test_matches_accepts_model_state_and_enum():
    state = ModelState({"TodoMVC": "Single todo"})
    assert matches_state(TodoState.SINGLE_TODO, state)
    assert not matches_state(TodoState.MULTIPLE_TODOS, state)


def test_flat_and_dotted_values_are_treated_alike():
    assert matches_state("TodoMVC", "TodoMVC.Single todo") == matches_state(
        "TodoMVC", {"TodoMVC": "Single todo"}
    )


def test_frozen_state_value_is_read_only():
    frozen = freeze_state_value({"TodoMVC": {"List": "Single todo"}})
    with pytest.raises(TypeError):
        frozen["TodoMVC"] = "Empty todo form"
