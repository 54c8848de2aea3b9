"""
tests/test_astar_search.py

Unit tests for the generic A* search engine.

Tests cover:
- Lowest-cost paths on small weighted graphs
- Blocks-world plans matching breadth-first plan lengths
- Expansion bound and frontier exhaustion
- Deterministic results
- Dead-end pruning via infinite estimates
"""

import math
from collections import deque
from typing import Dict, List

import pytest

from component_31_action_graph import BlocksWorldGraph, Edge, Graph
from component_31_astar_search import (
    REASON_BOUND,
    REASON_FRONTIER,
    SearchResult,
    astar_search,
)
from component_31_goal_evaluator import GoalEvaluator, Literal
from component_31_heuristics import GoalDistanceHeuristic
from component_31_world_state import make_state
from planner_exceptions import InvalidConfigError, PlanningException, SearchExhaustedError

# ==================== Helper Graphs ====================


class LineGraph(Graph[int]):
    """Integers 0..size-1, neighbours cost 1."""

    def __init__(self, size: int):
        self.size = size

    def outgoing_edges(self, node: int) -> List[Edge[int]]:
        edges = []
        if node > 0:
            edges.append(Edge(node, node - 1))
        if node < self.size - 1:
            edges.append(Edge(node, node + 1))
        return edges


class WeightedGraph(Graph[str]):
    """Explicit adjacency with costs."""

    def __init__(self, adjacency: Dict[str, Dict[str, float]]):
        self.adjacency = adjacency

    def outgoing_edges(self, node: str) -> List[Edge[str]]:
        return [
            Edge(node, target, cost) for target, cost in self.adjacency.get(node, {}).items()
        ]


def zero(node) -> float:
    return 0.0


def lit(relation, *args, polarity=True):
    return Literal(relation=relation, args=args, polarity=polarity)


def bfs_distance(graph, start, is_goal):
    if is_goal(start):
        return 0
    seen = {start}
    queue = deque([(start, 0)])
    while queue:
        state, depth = queue.popleft()
        for edge in graph.outgoing_edges(state):
            if edge.to_node in seen:
                continue
            if is_goal(edge.to_node):
                return depth + 1
            seen.add(edge.to_node)
            queue.append((edge.to_node, depth + 1))
    return math.inf


# ==================== Tests ====================


class TestGenericSearch:
    """The engine only depends on the Graph interface."""

    def test_line_graph(self):
        result = astar_search(LineGraph(10), 0, lambda n: n == 5, zero, 100)

        assert isinstance(result, SearchResult)
        assert result.path == [0, 1, 2, 3, 4, 5]
        assert result.cost == 5.0
        assert result.transitions == 5

    def test_start_is_goal(self):
        result = astar_search(LineGraph(3), 1, lambda n: n == 1, zero, 10)

        assert result.path == [1]
        assert result.cost == 0.0
        assert result.expansions == 0

    def test_cheaper_longer_path_preferred(self):
        graph = WeightedGraph(
            {
                "s": {"g": 10.0, "m": 1.0},
                "m": {"n": 1.0},
                "n": {"g": 1.0},
            }
        )

        result = astar_search(graph, "s", lambda n: n == "g", zero, 100)

        assert result.path == ["s", "m", "n", "g"]
        assert result.cost == 3.0

    def test_reopened_node_with_cheaper_path(self):
        # "b" is expanded through the expensive edge before the path via "a"
        # is found
        graph = WeightedGraph(
            {
                "s": {"a": 1.0, "b": 3.0},
                "a": {"b": 1.0},
                "b": {"g": 3.0},
            }
        )
        estimates = {"s": 0.0, "a": 4.0, "b": 0.0, "g": 0.0}

        result = astar_search(graph, "s", lambda n: n == "g", estimates.get, 100)

        assert result.path == ["s", "a", "b", "g"]
        assert result.cost == 5.0


class TestBlocksWorldSearch:
    """A* over the blocks-world action graph."""

    GOALS = [
        ((lit("holding", "a"),),),
        ((lit("ontop", "a", "b"),),),
        ((lit("ontop", "c", "a"),),),
        ((lit("ontop", "b", "floor"), lit("ontop", "a", "c")),),
        ((lit("inside", "c", "b"),), (lit("holding", "c"),)),
    ]

    @pytest.mark.parametrize("formula", GOALS)
    def test_cost_matches_breadth_first(self, formula):
        graph = BlocksWorldGraph()
        start = make_state([["a", "b"], ["c"], []])
        is_goal = GoalEvaluator(formula).is_goal

        result = astar_search(
            graph, start, is_goal, GoalDistanceHeuristic().bind(formula), 10000
        )

        assert result.cost == bfs_distance(graph, start, is_goal)
        assert result.path[0] == start
        assert is_goal(result.path[-1])

    def test_goal_distance_expands_fewer_nodes_than_zero(self):
        graph = BlocksWorldGraph()
        start = make_state([["a", "b"], ["c"], []])
        formula = ((lit("ontop", "a", "c"),),)
        is_goal = GoalEvaluator(formula).is_goal

        guided = astar_search(graph, start, is_goal, GoalDistanceHeuristic().bind(formula), 10000)
        blind = astar_search(graph, start, is_goal, zero, 10000)

        assert guided.cost == blind.cost
        assert guided.expansions <= blind.expansions

    def test_deterministic(self):
        graph = BlocksWorldGraph()
        start = make_state([["a", "b"], ["c"], []])
        formula = ((lit("ontop", "b", "c"),),)
        is_goal = GoalEvaluator(formula).is_goal
        heuristic = GoalDistanceHeuristic().bind(formula)

        first = astar_search(graph, start, is_goal, heuristic, 10000)
        second = astar_search(graph, start, is_goal, heuristic, 10000)

        assert first.path == second.path
        assert first.expansions == second.expansions


class TestSearchBounds:
    """Termination without a goal."""

    def test_bound_respected(self, two_stack_world):
        formula = ((lit("ontop", "a", "b"),),)

        with pytest.raises(SearchExhaustedError) as exc_info:
            astar_search(
                BlocksWorldGraph(),
                two_stack_world,
                GoalEvaluator(formula).is_goal,
                GoalDistanceHeuristic().bind(formula),
                max_expansions=1,
            )

        assert exc_info.value.reason == REASON_BOUND
        assert exc_info.value.expansions == 1

    def test_expansions_never_exceed_bound(self):
        result = astar_search(LineGraph(20), 0, lambda n: n == 7, zero, 7)

        assert result.expansions <= 7
        assert result.path[-1] == 7

    def test_unreachable_goal_exhausts_frontier(self, two_stack_world):
        # The gripper holds one object at a time
        formula = ((lit("holding", "a"), lit("holding", "b")),)

        with pytest.raises(SearchExhaustedError) as exc_info:
            astar_search(
                BlocksWorldGraph(),
                two_stack_world,
                GoalEvaluator(formula).is_goal,
                GoalDistanceHeuristic().bind(formula),
                max_expansions=10000,
            )

        assert exc_info.value.reason == REASON_FRONTIER
        assert isinstance(exc_info.value, PlanningException)

    def test_infinite_estimate_prunes_successors(self):
        estimates = {0: 0.0}

        with pytest.raises(SearchExhaustedError) as exc_info:
            astar_search(
                LineGraph(5),
                0,
                lambda n: n == 4,
                lambda n: estimates.get(n, math.inf),
                100,
            )

        assert exc_info.value.reason == REASON_FRONTIER
        assert exc_info.value.expansions == 1

    def test_non_positive_bound_rejected(self):
        with pytest.raises(InvalidConfigError):
            astar_search(LineGraph(3), 0, lambda n: n == 2, zero, 0)
