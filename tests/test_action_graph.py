"""
tests/test_action_graph.py

Unit tests for the blocks-world action graph.

Tests cover:
- Edge generation order (l, r, then d or p)
- Preconditions of each action
- Physical-law placement checks
- apply_action / replay_plan
"""

import pytest

from component_31_action_graph import (
    ACTION_TOKENS,
    Action,
    AnnotatedEdge,
    BlocksWorldGraph,
    apply_action,
    replay_plan,
)
from component_31_physical_laws import can_place
from component_31_world_state import make_state
from planner_exceptions import IllegalActionError


def actions_of(graph, state):
    return [edge.action for edge in graph.outgoing_edges(state)]


class TestEdgeGeneration:
    """outgoing_edges enumerates the legal arm actions."""

    def test_order_left_right_pick(self):
        state = make_state([["a"], ["b"], []], arm=1)

        assert actions_of(BlocksWorldGraph(), state) == ["l", "r", "p"]

    def test_order_left_right_drop(self):
        state = make_state([["a"], [], []], arm=1, holding="b")

        assert actions_of(BlocksWorldGraph(), state) == ["l", "r", "d"]

    def test_no_left_at_first_stack(self):
        state = make_state([["a"], ["b"]], arm=0)

        assert actions_of(BlocksWorldGraph(), state) == ["r", "p"]

    def test_no_right_at_last_stack(self):
        state = make_state([["a"], ["b"]], arm=1)

        assert actions_of(BlocksWorldGraph(), state) == ["l", "p"]

    def test_no_pick_from_empty_stack(self):
        state = make_state([[], ["b"]], arm=0)

        assert actions_of(BlocksWorldGraph(), state) == ["r"]

    def test_single_empty_stack_has_no_edges(self):
        assert actions_of(BlocksWorldGraph(), make_state([[]])) == []

    def test_edges_cost_one_and_start_at_node(self):
        state = make_state([["a"], ["b"]])

        for edge in BlocksWorldGraph().outgoing_edges(state):
            assert isinstance(edge, AnnotatedEdge)
            assert edge.cost == 1.0
            assert edge.from_node == state

    def test_successor_states(self):
        state = make_state([["a"], ["b"]])
        edges = {edge.action: edge.to_node for edge in BlocksWorldGraph().outgoing_edges(state)}

        assert edges["r"] == make_state([["a"], ["b"]], arm=1)
        assert edges["p"] == make_state([[], ["b"]], holding="a")

    def test_action_tokens(self):
        assert ACTION_TOKENS == {"l", "r", "p", "d"}
        assert str(Action.PICK) == "p"


class TestPlacementRule:
    """Drops are checked only when a placement rule is configured."""

    def test_any_drop_without_rule(self, ball_and_brick_world):
        holding_ball = ball_and_brick_world.pick().with_arm(1)

        assert "d" in actions_of(BlocksWorldGraph(), holding_ball)

    def test_illegal_drop_not_generated(self, ball_and_brick_world):
        holding_ball = ball_and_brick_world.pick().with_arm(1)
        graph = BlocksWorldGraph(placement_rule=can_place)

        assert actions_of(graph, holding_ball) == ["l"]

    def test_drop_on_floor_allowed(self, ball_and_brick_world):
        holding_ball = ball_and_brick_world.pick()
        graph = BlocksWorldGraph(placement_rule=can_place)

        assert "d" in actions_of(graph, holding_ball)

    def test_unknown_attributes_allow_drop(self):
        state = make_state([[], ["b"]], arm=1, holding="a")
        graph = BlocksWorldGraph(placement_rule=lambda obj, support: False)

        assert graph.can_drop(state)

    def test_can_drop_needs_held_object(self):
        assert not BlocksWorldGraph().can_drop(make_state([["a"]]))


class TestApplyAction:
    """Executing action tokens."""

    def test_apply_pick(self, two_stack_world):
        result = apply_action(two_stack_world, "p")

        assert result.holding == "a"

    def test_unknown_token(self, two_stack_world):
        with pytest.raises(IllegalActionError) as exc_info:
            apply_action(two_stack_world, "x")

        assert exc_info.value.context["action"] == "x"

    def test_precondition_failure(self, two_stack_world):
        with pytest.raises(IllegalActionError):
            apply_action(two_stack_world, "l")

        with pytest.raises(IllegalActionError):
            apply_action(two_stack_world, "d")

    def test_replay_plan(self, two_stack_world):
        final = replay_plan(two_stack_world, ["p", "r", "d"])

        assert final.stacks == ((), ("b", "a"))
        assert final.arm == 1

    def test_replay_skips_status_strings(self, two_stack_world):
        final = replay_plan(two_stack_world, ["Picking up the a", "p", "Moving right", "r"])

        assert final == make_state([[], ["b"]], arm=1, holding="a")
