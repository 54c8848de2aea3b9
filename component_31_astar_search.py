"""
Component 31: A* Search

Generic best-first search over any Graph whose nodes are hashable and
compare by value:
- SearchResult: path (start -> goal), cost and search statistics
- astar_search: bounded A* with deterministic tie-breaking

Frontier entries are ordered by (f, h, insertion sequence), so equal-f
ties prefer nodes closer to the goal and then the earliest pushed node.
Runs are reproducible for a fixed edge order.
"""

import heapq
import itertools
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Hashable, List, Optional, Tuple, TypeVar

from component_15_logging_config import get_logger
from component_31_action_graph import Graph
from planner_exceptions import InvalidConfigError, SearchExhaustedError

logger = get_logger(__name__)

NodeT = TypeVar("NodeT", bound=Hashable)

REASON_BOUND = "expansion_bound"
REASON_FRONTIER = "frontier_empty"


@dataclass
class SearchResult(Generic[NodeT]):
    """
    Successful search outcome.

    Attributes:
        path: Nodes from the start node to the goal node (inclusive)
        cost: Accumulated edge cost along path
        expansions: Nodes expanded before the goal was popped
        generated: Successor entries pushed onto the frontier
    """

    path: List[NodeT]
    cost: float
    expansions: int = 0
    generated: int = 0
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def transitions(self) -> int:
        return len(self.path) - 1


def _reconstruct(
    came_from: Dict[NodeT, Optional[NodeT]], goal: NodeT
) -> List[NodeT]:
    path = [goal]
    node = came_from[goal]
    while node is not None:
        path.append(node)
        node = came_from[node]
    path.reverse()
    return path


def astar_search(
    graph: Graph[NodeT],
    start: NodeT,
    is_goal: Callable[[NodeT], bool],
    heuristic: Callable[[NodeT], float],
    max_expansions: int,
) -> SearchResult[NodeT]:
    """
    Find a lowest-cost path from start to a goal node.

    Args:
        graph: Edge enumeration (outgoing_edges)
        start: Start node
        is_goal: Goal predicate
        heuristic: Estimate of the remaining cost; admissible estimates
            give lowest-cost paths. math.inf marks a dead end.
        max_expansions: Maximum number of nodes to expand

    Returns:
        SearchResult with the path and statistics

    Raises:
        SearchExhaustedError: Bound reached or frontier empty without a goal
        InvalidConfigError: max_expansions < 1
    """
    if max_expansions < 1:
        raise InvalidConfigError(
            "max_expansions must be positive", context={"max_expansions": max_expansions}
        )

    sequence = itertools.count()
    h_start = heuristic(start)
    frontier: List[Tuple[float, float, int, float, NodeT]] = []
    heapq.heappush(frontier, (h_start, h_start, next(sequence), 0.0, start))

    g_scores: Dict[NodeT, float] = {start: 0.0}
    came_from: Dict[NodeT, Optional[NodeT]] = {start: None}
    expansions = 0
    generated = 0
    stale = 0

    while frontier:
        _, _, _, g_score, current = heapq.heappop(frontier)

        if g_score > g_scores[current]:
            # A cheaper path to this node was recorded after the push
            stale += 1
            continue

        if is_goal(current):
            path = _reconstruct(came_from, current)
            logger.info(
                f"Goal reached. Cost: {g_score}, Expansions: {expansions}",
                extra={"path_length": len(path), "generated": generated},
            )
            return SearchResult(
                path=path,
                cost=g_score,
                expansions=expansions,
                generated=generated,
                stats={"stale": stale, "frontier": len(frontier)},
            )

        if expansions >= max_expansions:
            logger.warning(f"No goal found after {expansions} expansions")
            raise SearchExhaustedError(
                "Expansion bound reached before a goal was found",
                expansions=expansions,
                reason=REASON_BOUND,
            )

        expansions += 1

        for edge in graph.outgoing_edges(current):
            successor = edge.to_node
            tentative_g = g_score + edge.cost

            if tentative_g >= g_scores.get(successor, math.inf):
                continue

            h_score = heuristic(successor)
            if h_score == math.inf:
                continue

            g_scores[successor] = tentative_g
            came_from[successor] = current
            heapq.heappush(
                frontier,
                (tentative_g + h_score, h_score, next(sequence), tentative_g, successor),
            )
            generated += 1

    logger.warning(f"Frontier exhausted after {expansions} expansions")
    raise SearchExhaustedError(
        "Search space exhausted without reaching a goal",
        expansions=expansions,
        reason=REASON_FRONTIER,
    )
