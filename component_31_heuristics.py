"""
Component 31: Planning Heuristics

Heuristic functions for guided search in the blocks world:
- ZeroHeuristic: Always 0 (uniform-cost search)
- GoalDistanceHeuristic: Admissible lower bound on the number of arm
  actions needed to satisfy the nearest clause

Heuristics estimate the cost from a state to any goal state, enabling
efficient A* search in the BlocksWorldPlanner.
"""

import math
from typing import Callable

from common.constants import FLOOR
from component_31_goal_evaluator import (
    Clause,
    DNFFormula,
    Literal,
    Relation,
    literal_holds,
)
from component_31_world_state import WorldState
from planner_exceptions import InvalidConfigError

# ============================================================================
# Heuristics
# ============================================================================


class Heuristic:
    """Base class for planning heuristics."""

    def estimate(self, state: WorldState, formula: DNFFormula) -> float:
        """Estimate cost from state to a state satisfying formula."""
        raise NotImplementedError

    def bind(self, formula: DNFFormula) -> Callable[[WorldState], float]:
        """Fix the formula, returning a node -> estimate function for the search."""
        return lambda state: self.estimate(state, formula)


class ZeroHeuristic(Heuristic):
    """Always 0; A* degenerates to uniform-cost search."""

    def estimate(self, state: WorldState, formula: DNFFormula) -> float:
        return 0.0


class GoalDistanceHeuristic(Heuristic):
    """
    Lower bound on the remaining arm actions.

    For every clause the largest single-literal bound is taken (each literal
    alone already needs that many actions); the estimate is the smallest
    clause bound. Literal bounds only count actions that are unavoidable:
    arm travel to the object's stack, a pick and a drop for every object
    stacked above it, and the pick/drop of the object itself.
    """

    def estimate(self, state: WorldState, formula: DNFFormula) -> float:
        if not formula:
            return math.inf
        return min(self._clause_bound(clause, state) for clause in formula)

    def _clause_bound(self, clause: Clause, state: WorldState) -> float:
        bound = 0.0
        for literal in clause:
            bound = max(bound, self._literal_bound(literal, state))
        return bound

    def _literal_bound(self, literal: Literal, state: WorldState) -> float:
        relation = Relation.lookup(literal.relation)
        if not relation.is_implemented:
            return math.inf
        if literal_holds(literal, state):
            return 0.0

        if not literal.polarity:
            # Picking up (or dropping) one object is enough to break it
            return 1.0

        if relation is Relation.HOLDING:
            return float(self._pick_cost(state, literal.args[0]))

        obj, support = literal.args
        if state.holding == obj:
            travel = 0
            if support != FLOOR:
                support_stack = state.stack_of(support)
                if support_stack is not None:
                    travel = abs(state.arm - support_stack)
                return float(travel + 2 * state.objects_above(support) + 1)
            return 1.0

        # obj has to be picked and dropped again
        return float(self._pick_cost(state, obj) + 1)

    @staticmethod
    def _pick_cost(state: WorldState, obj: str) -> int:
        """Actions needed at least until obj is in the gripper."""
        index = state.stack_of(obj)
        if index is None:
            return 0
        cost = abs(state.arm - index) + 2 * state.objects_above(obj) + 1
        if state.holding is not None:
            cost += 1
        return cost


HEURISTICS = {
    "goal_distance": GoalDistanceHeuristic,
    "zero": ZeroHeuristic,
}


def create_heuristic(name: str) -> Heuristic:
    """Instantiate a heuristic by config name."""
    try:
        return HEURISTICS[name]()
    except KeyError:
        raise InvalidConfigError(
            f"Unknown heuristic '{name}'", context={"known": ", ".join(HEURISTICS)}
        ) from None
