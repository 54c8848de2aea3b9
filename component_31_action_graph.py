"""
Component 31: Action Graph

Graph abstraction used by the search engine and the blocks-world action
graph built on top of it:
- Edge / AnnotatedEdge: directed transitions with cost (and action label)
- Graph: abstract edge enumeration over hashable, value-equal nodes
- BlocksWorldGraph: the four primitive arm actions l, r, d, p
- apply_action / replay_plan: execute action tokens against a state

The search engine only relies on Graph, so other planning domains can plug
in their own node type.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Hashable, Iterable, List, Optional, TypeVar

from common.constants import STEP_COST
from component_15_logging_config import get_logger
from component_31_physical_laws import PlacementRule
from component_31_world_state import WorldState
from planner_exceptions import IllegalActionError

logger = get_logger(__name__)

NodeT = TypeVar("NodeT", bound=Hashable)


# ============================================================================
# Generic Graph
# ============================================================================


@dataclass(frozen=True)
class Edge(Generic[NodeT]):
    """Directed edge between two nodes."""

    from_node: NodeT
    to_node: NodeT
    cost: float = STEP_COST


@dataclass(frozen=True)
class AnnotatedEdge(Edge[NodeT]):
    """Edge labelled with the action that produces to_node from from_node."""

    action: str = ""


class Graph(ABC, Generic[NodeT]):
    """
    Abstract graph for best-first search.

    Nodes must be hashable and compare by value: the search keys its
    best-cost table and predecessor map on them.
    """

    @abstractmethod
    def outgoing_edges(self, node: NodeT) -> List[Edge[NodeT]]:
        """Return every edge leaving node."""
        raise NotImplementedError

    def compare_nodes(self, a: NodeT, b: NodeT) -> bool:
        """Node equality used for path reconstruction."""
        return a == b


# ============================================================================
# Blocks World
# ============================================================================


class Action(str, Enum):
    """Primitive robot-arm actions and their plan tokens."""

    LEFT = "l"
    RIGHT = "r"
    DROP = "d"
    PICK = "p"

    def __str__(self):
        return self.value


ACTION_TOKENS = frozenset(action.value for action in Action)


class BlocksWorldGraph(Graph[WorldState]):
    """
    Action graph of the blocks world.

    Edges are generated in the order l, r, d, p. Every edge costs 1.

    Args:
        placement_rule: Optional rule consulted before a drop; None means
            every drop is legal
    """

    def __init__(self, placement_rule: Optional[PlacementRule] = None):
        self.placement_rule = placement_rule

    def outgoing_edges(self, node: WorldState) -> List[AnnotatedEdge[WorldState]]:
        edges: List[AnnotatedEdge[WorldState]] = []

        if node.arm > 0:
            edges.append(self._edge(node, node.with_arm(node.arm - 1), Action.LEFT))

        if node.arm < len(node.stacks) - 1:
            edges.append(self._edge(node, node.with_arm(node.arm + 1), Action.RIGHT))

        # Holding something rules out picking and vice versa
        if node.holding is not None:
            if self.can_drop(node):
                edges.append(self._edge(node, node.drop(), Action.DROP))
        elif node.stacks[node.arm]:
            edges.append(self._edge(node, node.pick(), Action.PICK))

        return edges

    def can_drop(self, node: WorldState) -> bool:
        """Check the placement rule for dropping the held object here."""
        if node.holding is None:
            return False
        if self.placement_rule is None:
            return True

        held = node.objects.get(node.holding)
        top = node.top_of(node.arm)
        support = node.objects.get(top) if top is not None else None
        if held is None or (top is not None and support is None):
            # Unknown attributes, nothing to check against
            return True
        return self.placement_rule(held, support)

    @staticmethod
    def _edge(
        node: WorldState, successor: WorldState, action: Action
    ) -> AnnotatedEdge[WorldState]:
        return AnnotatedEdge(
            from_node=node, to_node=successor, cost=STEP_COST, action=action.value
        )


def apply_action(
    state: WorldState, action: str, graph: Optional[BlocksWorldGraph] = None
) -> WorldState:
    """
    Apply a single action token to a state.

    Raises:
        IllegalActionError: If the token is unknown or its precondition fails
    """
    graph = graph or BlocksWorldGraph()
    if action not in ACTION_TOKENS:
        raise IllegalActionError(f"Unknown action token '{action}'", action=action)

    for edge in graph.outgoing_edges(state):
        if edge.action == action:
            return edge.to_node

    raise IllegalActionError(
        f"Action '{action}' is not applicable",
        action=action,
        context={"arm": state.arm, "holding": state.holding},
    )


def replay_plan(
    state: WorldState, plan: Iterable[str], graph: Optional[BlocksWorldGraph] = None
) -> WorldState:
    """
    Execute the action tokens of a plan and return the final state.

    Status strings (anything that is not l/r/p/d) are skipped.
    """
    graph = graph or BlocksWorldGraph()
    for step in plan:
        if step in ACTION_TOKENS:
            state = apply_action(state, step, graph)
        else:
            logger.debug(f"Skipping status step: {step}")
    return state
