"""
tests/test_plan_extractor.py

Unit tests for turning search paths into arm plans.

Tests cover:
- Action labels per transition
- No-op sentinel for single-state paths
- Error paths (empty path, disconnected states)
- Narration of plans
"""

import pytest

from common.constants import NOOP_SENTINEL
from component_31_action_graph import BlocksWorldGraph, replay_plan
from component_31_plan_extractor import extract_plan, narrate_plan
from component_31_world_state import make_state
from planner_exceptions import PlanExtractionError


def walk(state, actions):
    """States visited when executing actions from state."""
    graph = BlocksWorldGraph()
    path = [state]
    for action in actions:
        path.append(replay_plan(path[-1], [action], graph))
    return path


class TestExtractPlan:
    def test_labels_each_transition(self, two_stack_world):
        path = walk(two_stack_world, ["p", "r", "d"])

        assert extract_plan(BlocksWorldGraph(), path) == ["p", "r", "d"]

    def test_single_state_is_noop(self, two_stack_world):
        assert extract_plan(BlocksWorldGraph(), [two_stack_world]) == [NOOP_SENTINEL]

    def test_empty_path(self):
        with pytest.raises(PlanExtractionError):
            extract_plan(BlocksWorldGraph(), [])

    def test_disconnected_states(self, two_stack_world):
        far_away = make_state([[], ["b", "a"]], arm=1)

        with pytest.raises(PlanExtractionError) as exc_info:
            extract_plan(BlocksWorldGraph(), [two_stack_world, far_away])

        assert exc_info.value.context["step"] == 0

    def test_plan_replays_to_path_end(self, small_world):
        path = walk(small_world, ["p", "r", "r", "d", "l", "p"])

        plan = extract_plan(BlocksWorldGraph(), path)

        assert replay_plan(small_world, plan) == path[-1]


class TestNarratePlan:
    def test_narration(self, small_world):
        path = walk(small_world, ["p", "r", "r", "d"])

        narrated = narrate_plan(["p", "r", "r", "d"], path)

        assert narrated == [
            "Picking up the small white ball",
            "p",
            "Moving right",
            "r",
            "r",
            "Dropping the small white ball",
            "d",
        ]

    def test_direction_change_announced(self, small_world):
        path = walk(small_world, ["r", "l"])

        assert narrate_plan(["r", "l"], path) == ["Moving right", "r", "Moving left", "l"]

    def test_unknown_objects_use_ids(self, two_stack_world):
        path = walk(two_stack_world, ["p"])

        assert narrate_plan(["p"], path) == ["Picking up the a", "p"]

    def test_noop_unchanged(self, two_stack_world):
        assert narrate_plan([NOOP_SENTINEL], [two_stack_world]) == [NOOP_SENTINEL]
