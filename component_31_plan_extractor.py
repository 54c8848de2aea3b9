"""
Component 31: Plan Extraction

Turns the state path returned by the search into the plan handed to the
robot arm:
- extract_plan: one action token per consecutive state pair
- narrate_plan: optional status strings ("Moving left", "Picking up the
  large green brick") interleaved with the tokens

A path without transitions yields the single NOOP_SENTINEL entry, so
callers can tell "no plan needed" from "no plan found".
"""

from typing import List, Sequence

from common.constants import NOOP_SENTINEL
from component_31_action_graph import Action, Graph
from component_31_world_state import WorldState
from planner_exceptions import PlanExtractionError


def extract_plan(graph: Graph, path: Sequence) -> List[str]:
    """
    Relabel each transition of path with the action that produced it.

    For every pair (path[i], path[i+1]) the first outgoing edge of path[i]
    whose destination equals path[i+1] supplies the label.

    Raises:
        PlanExtractionError: If the path is empty or two consecutive nodes
            are not connected by an edge
    """
    if not path:
        raise PlanExtractionError("Cannot extract a plan from an empty path")

    if len(path) == 1:
        return [NOOP_SENTINEL]

    plan: List[str] = []
    for index in range(len(path) - 1):
        source, target = path[index], path[index + 1]
        for edge in graph.outgoing_edges(source):
            if graph.compare_nodes(edge.to_node, target):
                plan.append(edge.action)
                break
        else:
            raise PlanExtractionError(
                "No edge connects consecutive path states",
                context={"step": index},
            )
    return plan


def narrate_plan(plan: Sequence[str], path: Sequence[WorldState]) -> List[str]:
    """
    Interleave human-readable status strings with the action tokens.

    Consecutive moves in the same direction share one status line. The
    path must be the one the plan was extracted from.

    Example:
        ["p", "r", "r", "d"] ->
        ["Picking up the large green brick", "p",
         "Moving right", "r", "r",
         "Dropping the large green brick", "d"]
    """
    if list(plan) == [NOOP_SENTINEL]:
        return [NOOP_SENTINEL]

    narrated: List[str] = []
    previous = None
    for index, action in enumerate(plan):
        state = path[index]
        if action == Action.LEFT.value and previous != action:
            narrated.append("Moving left")
        elif action == Action.RIGHT.value and previous != action:
            narrated.append("Moving right")
        elif action == Action.PICK.value:
            narrated.append(f"Picking up the {state.describe(state.top_of(state.arm))}")
        elif action == Action.DROP.value:
            narrated.append(f"Dropping the {state.describe(state.holding)}")
        narrated.append(action)
        previous = action
    return narrated
