"""
tests/test_heuristics.py

Unit tests for the planning heuristics.

Tests cover:
- Zero heuristic
- Goal-distance estimates for simple goals
- Admissibility against breadth-first distances over a whole state space
- Heuristic factory
"""

import math
from collections import deque

import pytest

from component_31_action_graph import BlocksWorldGraph
from component_31_goal_evaluator import GoalEvaluator, Literal
from component_31_heuristics import (
    GoalDistanceHeuristic,
    ZeroHeuristic,
    create_heuristic,
)
from component_31_world_state import make_state
from planner_exceptions import InvalidConfigError

# ==================== Helper Functions ====================


def lit(relation, *args, polarity=True):
    return Literal(relation=relation, args=args, polarity=polarity)


def reachable_states(graph, start):
    """All states reachable from start."""
    seen = {start}
    queue = deque([start])
    while queue:
        state = queue.popleft()
        for edge in graph.outgoing_edges(state):
            if edge.to_node not in seen:
                seen.add(edge.to_node)
                queue.append(edge.to_node)
    return seen


def bfs_distance(graph, start, is_goal):
    """Number of actions on a shortest plan, or inf."""
    if is_goal(start):
        return 0
    seen = {start}
    queue = deque([(start, 0)])
    while queue:
        state, depth = queue.popleft()
        for edge in graph.outgoing_edges(state):
            successor = edge.to_node
            if successor in seen:
                continue
            if is_goal(successor):
                return depth + 1
            seen.add(successor)
            queue.append((successor, depth + 1))
    return math.inf


# ==================== Tests ====================


class TestZeroHeuristic:
    def test_always_zero(self, two_stack_world):
        formula = ((lit("ontop", "a", "b"),),)

        assert ZeroHeuristic().estimate(two_stack_world, formula) == 0.0


class TestGoalDistanceEstimates:
    """Concrete estimates for simple goals."""

    def test_satisfied_goal_is_zero(self, two_stack_world):
        formula = ((lit("ontop", "a", "floor"),),)

        assert GoalDistanceHeuristic().estimate(two_stack_world, formula) == 0.0

    def test_holding_counts_travel_and_pick(self, two_stack_world):
        formula = ((lit("holding", "b"),),)

        assert GoalDistanceHeuristic().estimate(two_stack_world, formula) == 2.0

    def test_holding_counts_blocking_objects(self):
        state = make_state([["a", "b", "c"]])
        formula = ((lit("holding", "a"),),)

        # pick+drop for b and c, then pick a
        assert GoalDistanceHeuristic().estimate(state, formula) == 5.0

    def test_ontop_needs_pick_and_drop(self, two_stack_world):
        formula = ((lit("ontop", "a", "b"),),)

        assert GoalDistanceHeuristic().estimate(two_stack_world, formula) == 2.0

    def test_ontop_with_held_object(self):
        state = make_state([[], ["b"]], holding="a")
        formula = ((lit("ontop", "a", "b"),),)

        assert GoalDistanceHeuristic().estimate(state, formula) == 2.0

    def test_negated_literal_costs_one(self):
        state = make_state([["a", "b"]])
        formula = ((lit("ontop", "b", "a", polarity=False),),)

        assert GoalDistanceHeuristic().estimate(state, formula) == 1.0

    def test_nearest_clause_wins(self, two_stack_world):
        formula = ((lit("holding", "b"),), (lit("holding", "a"),))

        assert GoalDistanceHeuristic().estimate(two_stack_world, formula) == 1.0

    def test_clause_takes_largest_literal(self, two_stack_world):
        formula = ((lit("holding", "a"), lit("holding", "b")),)

        assert GoalDistanceHeuristic().estimate(two_stack_world, formula) == 2.0

    def test_unimplemented_relation_is_dead_end(self, two_stack_world):
        formula = ((lit("beside", "a", "b"),),)

        assert GoalDistanceHeuristic().estimate(two_stack_world, formula) == math.inf

    def test_empty_formula_is_dead_end(self, two_stack_world):
        assert GoalDistanceHeuristic().estimate(two_stack_world, ()) == math.inf

    def test_bind_fixes_formula(self, two_stack_world):
        estimate = GoalDistanceHeuristic().bind(((lit("holding", "b"),),))

        assert estimate(two_stack_world) == 2.0


class TestGoalDistanceAdmissibility:
    """The estimate never exceeds the true remaining number of actions."""

    FORMULAS = [
        ((lit("ontop", "a", "c"),),),
        ((lit("holding", "a"),),),
        ((lit("inside", "c", "b"),),),
        ((lit("ontop", "a", "floor"), lit("ontop", "c", "a")),),
        ((lit("ontop", "b", "floor"),), (lit("holding", "c"),)),
        ((lit("ontop", "b", "a", polarity=False),),),
        ((lit("holding", "b", polarity=False), lit("ontop", "c", "b")),),
    ]

    @pytest.mark.parametrize("formula", FORMULAS)
    def test_never_overestimates(self, formula):
        graph = BlocksWorldGraph()
        heuristic = GoalDistanceHeuristic()
        is_goal = GoalEvaluator(formula).is_goal

        for state in reachable_states(graph, make_state([["a", "b"], ["c"], []])):
            true_cost = bfs_distance(graph, state, is_goal)
            assert heuristic.estimate(state, formula) <= true_cost, str(state)


class TestHeuristicFactory:
    def test_known_names(self):
        assert isinstance(create_heuristic("goal_distance"), GoalDistanceHeuristic)
        assert isinstance(create_heuristic("zero"), ZeroHeuristic)

    def test_unknown_name(self):
        with pytest.raises(InvalidConfigError):
            create_heuristic("manhattan")
