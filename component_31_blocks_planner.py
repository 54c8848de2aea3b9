"""
Component 31: Blocks-World Planner

Top-level driver of the planner. Takes the candidate interpretations
produced by the interpreter and the current world state, and plans an arm
action sequence for each interpretation:

- Interpretation / PlannerResult: batch input and output records
- BlocksWorldPlanner: validation, A* search, plan extraction, plan cache,
  explanation trees, BasePlanningEngine interface
- plan / stringify: module-level convenience functions

Batch policy: a failing interpretation is logged and dropped; the call only
fails when no interpretation could be planned, and then raises the first
error encountered.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from common.constants import NOOP_SENTINEL
from component_15_logging_config import (
    PerformanceLogger,
    get_logger,
    log_component_end,
    log_component_error,
    log_component_start,
)
from component_17_proof_explanation import ProofStep, ProofTree, StepType
from component_31_action_graph import BlocksWorldGraph
from component_31_astar_search import SearchResult, astar_search
from component_31_goal_evaluator import (
    DNFFormula,
    GoalEvaluator,
    format_formula,
    parse_formula,
    validate_formula,
)
from component_31_heuristics import Heuristic, create_heuristic
from component_31_physical_laws import can_place
from component_31_plan_extractor import extract_plan, narrate_plan
from component_31_world_state import WorldState
from infrastructure.interfaces import BasePlanningEngine, PlanningOutcome
from infrastructure.plan_cache import PlanCache
from planner_config import PlannerConfig
from planner_exceptions import (
    MalformedLiteralError,
    PlannerException,
    PlanningException,
    SearchExhaustedError,
    WorldStateException,
    get_user_friendly_message,
)

logger = get_logger(__name__)

# Failures that drop a single interpretation instead of the whole batch
INTERPRETATION_ERRORS = (PlanningException, WorldStateException)


# ============================================================================
# Batch Records
# ============================================================================


@dataclass
class Interpretation:
    """
    One candidate reading of the user's command.

    Attributes:
        formula: Goal formula in disjunctive normal form
        metadata: Interpreter data passed through unchanged (parse tree,
            utterance, ...)
    """

    formula: DNFFormula
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: Any) -> "Interpretation":
        """
        Accept an Interpretation, an interpreter result dict
        ``{"interpretation": [[literal, ...], ...], ...}`` or a bare formula.
        """
        if isinstance(raw, Interpretation):
            return raw
        if isinstance(raw, Mapping):
            if "interpretation" not in raw:
                raise MalformedLiteralError(
                    "Interpretation result has no 'interpretation' formula",
                    literal=sorted(raw.keys()),
                )
            metadata = {k: v for k, v in raw.items() if k != "interpretation"}
            return cls(formula=parse_formula(raw["interpretation"]), metadata=metadata)
        return cls(formula=parse_formula(raw))


@dataclass
class PlannerResult:
    """
    An interpretation augmented with its plan.

    Attributes:
        interpretation: The planned interpretation
        plan: Status strings and action tokens (l, r, p, d), or the single
            NOOP_SENTINEL entry when the goal already holds
        search_stats: expansions, generated, cost, cached
        explanation: Step-by-step explanation of the plan
    """

    interpretation: Interpretation
    plan: List[str]
    search_stats: Dict[str, Any] = field(default_factory=dict)
    explanation: Optional[ProofTree] = None

    @property
    def is_noop(self) -> bool:
        return self.plan == [NOOP_SENTINEL]

    @property
    def actions(self) -> List[str]:
        """Only the action tokens of the plan."""
        return [step for step in self.plan if step in ("l", "r", "p", "d")]


# ============================================================================
# Planner
# ============================================================================


class BlocksWorldPlanner(BasePlanningEngine):
    """
    A* planner for the blocks world.

    Features:
    - Goal validation before search (unsupported relations, unknown objects)
    - Bounded A* with an admissible heuristic
    - Optional physical-law enforcement for drops
    - Optional narration of the plan
    - Optional plan cache owned by this planner
    - Sequential or thread-pool batch planning

    Capabilities:
    - Action planning
    - Blocks-world state-space search
    """

    def __init__(
        self,
        config: Optional[PlannerConfig] = None,
        heuristic: Optional[Heuristic] = None,
    ):
        """
        Initialize planner.

        Args:
            config: Planner settings (default: PlannerConfig())
            heuristic: Heuristic instance overriding config.heuristic
        """
        self.config = config or PlannerConfig()
        self.heuristic = heuristic or create_heuristic(self.config.heuristic)
        self.graph = BlocksWorldGraph(
            placement_rule=can_place if self.config.enforce_physical_laws else None
        )
        self.stats = {"searches": 0, "expansions": 0, "cache_hits": 0, "failures": 0}
        self._stats_lock = threading.Lock()

        self.plan_cache: Optional[PlanCache] = None
        if self.config.enable_plan_cache:
            self.plan_cache = PlanCache(
                maxsize=self.config.plan_cache_maxsize,
                ttl=self.config.plan_cache_ttl,
            )

    # ------------------------------------------------------------------
    # Single interpretation
    # ------------------------------------------------------------------

    def plan_interpretation(
        self, formula: DNFFormula, state: WorldState
    ) -> List[str]:
        """
        Plan for one goal formula.

        Returns:
            Plan steps, or [NOOP_SENTINEL] if the goal already holds

        Raises:
            UnsupportedRelationError, MalformedLiteralError,
            SearchExhaustedError, PlanExtractionError
        """
        plan, _, _ = self._solve(formula, state)
        return plan

    def _solve(
        self, formula: DNFFormula, state: WorldState
    ) -> Tuple[List[str], Tuple[WorldState, ...], Dict[str, Any]]:
        validate_formula(formula, state)

        if self.plan_cache is not None:
            cached = self.plan_cache.lookup(formula, state)
            if cached is not None:
                plan, path, stats = cached
                self._update_stats(cache_hits=1)
                return list(plan), path, {**stats, "cached": True}

        logger.info(
            "Starting search",
            extra={
                "goal": format_formula(formula),
                "stacks": len(state.stacks),
                "max_expansions": self.config.max_expansions,
            },
        )

        evaluator = GoalEvaluator(formula)
        try:
            with PerformanceLogger(
                logger.logger, "A* search", goal=format_formula(formula)
            ):
                result: SearchResult[WorldState] = astar_search(
                    self.graph,
                    state,
                    evaluator.is_goal,
                    self.heuristic.bind(formula),
                    self.config.max_expansions,
                )
        except SearchExhaustedError as e:
            self._update_stats(searches=1, expansions=e.expansions or 0, failures=1)
            raise

        self._update_stats(searches=1, expansions=result.expansions)

        plan = extract_plan(self.graph, result.path)
        if self.config.narrate:
            plan = narrate_plan(plan, result.path)

        path = tuple(result.path)
        stats = {
            "expansions": result.expansions,
            "generated": result.generated,
            "cost": result.cost,
            "cached": False,
        }
        if self.plan_cache is not None:
            self.plan_cache.store(formula, state, (tuple(plan), path, dict(stats)))

        logger.info(f"Plan found! Length: {len(plan)}", extra={"plan": " ".join(plan)})
        return plan, path, stats

    def _plan_one(self, raw: Any, state: WorldState) -> PlannerResult:
        interpretation = Interpretation.from_raw(raw)
        plan, path, stats = self._solve(interpretation.formula, state)
        explanation = self._create_plan_proof_tree(interpretation, path, plan)
        return PlannerResult(
            interpretation=interpretation,
            plan=plan,
            search_stats=stats,
            explanation=explanation,
        )

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    def plan(
        self,
        interpretations: Iterable[Any],
        state: Union[WorldState, Mapping[str, Any]],
    ) -> List[PlannerResult]:
        """
        Plan every interpretation against the same world state.

        Args:
            interpretations: Interpretation objects, interpreter result
                dicts, or bare formulas
            state: Current world (WorldState or its dict form)

        Returns:
            Results of the successfully planned interpretations, in input
            order

        Raises:
            The first interpretation error, if no interpretation succeeded
            PlanningException: If interpretations is empty
        """
        world = state if isinstance(state, WorldState) else WorldState.from_dict(state)
        items = list(interpretations)
        if not items:
            raise PlanningException("No interpretations to plan for")

        log_component_start(logger, "batch planning", interpretations=len(items))
        outcomes = self._run_all(items, world)

        results: List[PlannerResult] = []
        errors: List[Exception] = []
        for index, outcome in enumerate(outcomes):
            if isinstance(outcome, PlannerResult):
                results.append(outcome)
            else:
                errors.append(outcome)
                logger.warning(
                    f"Interpretation {index} dropped: {outcome}",
                    extra={"error": type(outcome).__name__},
                )

        if results:
            log_component_end(
                logger, "batch planning", planned=len(results), dropped=len(errors)
            )
            return results

        # only raise the first error found
        raise errors[0]

    def _run_all(
        self, items: Sequence[Any], world: WorldState
    ) -> List[Union[PlannerResult, Exception]]:
        workers = min(self.config.max_workers, len(items))

        if workers <= 1:
            outcomes: List[Union[PlannerResult, Exception]] = []
            for raw in items:
                try:
                    outcomes.append(self._plan_one(raw, world))
                except INTERPRETATION_ERRORS as e:
                    outcomes.append(e)
            return outcomes

        logger.debug(f"Planning {len(items)} interpretations on {workers} workers")
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._plan_one, raw, world) for raw in items]
            outcomes = []
            for future in futures:
                try:
                    outcomes.append(future.result())
                except INTERPRETATION_ERRORS as e:
                    outcomes.append(e)
            return outcomes

    def stringify(self, result: PlannerResult) -> str:
        """Join the plan steps into one display string."""
        return self.config.plan_delimiter.join(result.plan)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _update_stats(self, **increments: int) -> None:
        with self._stats_lock:
            for key, value in increments.items():
                self.stats[key] += value

    def _create_plan_proof_tree(
        self,
        interpretation: Interpretation,
        path: Sequence[WorldState],
        plan: List[str],
    ) -> ProofTree:
        """
        Create a ProofTree documenting how the plan reaches the goal.

        One ACTION step per transition of the path, between the start/goal
        premises and the final conclusion.
        """
        query = str(interpretation.metadata.get("utterance") or format_formula(interpretation.formula))
        steps = [
            ProofStep(
                step_id="plan_initial_state",
                step_type=StepType.PREMISE,
                output=str(path[0]),
                explanation_text="Current state of the world",
            ),
            ProofStep(
                step_id="plan_goal",
                step_type=StepType.PREMISE,
                output=format_formula(interpretation.formula),
                explanation_text="Goal formula to satisfy",
            ),
        ]

        parent_step = "plan_initial_state"
        action_index = 0
        for step in plan:
            if step == NOOP_SENTINEL or step not in ("l", "r", "p", "d"):
                continue
            action_index += 1
            step_id = f"plan_action_{action_index}"
            steps.append(
                ProofStep(
                    step_id=step_id,
                    step_type=StepType.ACTION,
                    output=str(path[action_index]),
                    explanation_text=f"Apply action: {step}",
                    rule_name=step,
                    parent_steps=[parent_step],
                    metadata={"action_index": action_index},
                )
            )
            parent_step = step_id

        steps.append(
            ProofStep(
                step_id="plan_goal_achieved",
                step_type=StepType.CONCLUSION,
                output="Goal already satisfied" if action_index == 0 else "Goal achieved",
                explanation_text=f"Plan reaches the goal with {action_index} actions",
                parent_steps=[parent_step],
                metadata={"plan_length": action_index},
            )
        )

        return ProofTree(
            query=query,
            steps=steps,
            metadata={
                "planner": "BlocksWorldPlanner",
                "algorithm": "A*",
                "heuristic": type(self.heuristic).__name__,
                "plan_length": action_index,
            },
        )

    # ========================================================================
    # BasePlanningEngine Interface Implementation
    # ========================================================================

    def reason(self, query: str, context: Dict[str, Any]) -> PlanningOutcome:
        """
        Plan for the interpretations of a user command.

        Context should contain:
        - 'interpretations': candidate interpretations (see plan())
        - 'world_state': WorldState or its dict form

        Returns:
            PlanningOutcome with the plans or a failure indication
        """
        interpretations = context.get("interpretations")
        world_state = context.get("world_state")
        if not interpretations or world_state is None:
            return PlanningOutcome(
                success=False,
                answer="No interpretations or world state provided in context",
                strategy_used="blocks_world_astar",
                metadata={"error": "missing_planning_input"},
            )

        try:
            results = self.plan(interpretations, world_state)
        except PlannerException as e:
            log_component_error(logger, "blocks-world planning", e, query=query)
            exhausted = isinstance(e, SearchExhaustedError)
            return PlanningOutcome(
                success=False,
                answer=get_user_friendly_message(e),
                strategy_used="blocks_world_astar",
                computation_cost=1.0 if exhausted else 0.0,
                metadata={"error": type(e).__name__, "context": dict(e.context)},
            )

        first = results[0]
        expansions = first.search_stats.get("expansions", 0)
        return PlanningOutcome(
            success=True,
            answer=self.stringify(first),
            plans=[result.plan for result in results],
            proof_tree=first.explanation,
            strategy_used="blocks_world_astar",
            computation_cost=min(1.0, expansions / self.config.max_expansions),
            metadata={
                "interpretations": len(results),
                "expansions": expansions,
                "plan_length": len(first.actions),
                "noop": first.is_noop,
            },
        )

    def get_capabilities(self) -> List[str]:
        return [
            "planning",
            "blocks_world",
            "state_space_search",
            "astar_search",
            "heuristic_search",
            "action_planning",
            "goal_achievement",
        ]

    def estimate_cost(self, query: str) -> float:
        """
        Planning cost grows with the reachable state space, which the query
        alone does not reveal.
        """
        return 0.6


# ============================================================================
# Module-level convenience
# ============================================================================


def plan(
    interpretations: Iterable[Any],
    state: Union[WorldState, Mapping[str, Any]],
    config: Optional[PlannerConfig] = None,
) -> List[PlannerResult]:
    """Plan a batch of interpretations with a fresh planner."""
    return BlocksWorldPlanner(config).plan(interpretations, state)


def stringify(result: PlannerResult, delimiter: str = ", ") -> str:
    """Join a plan's steps into one display string."""
    return delimiter.join(result.plan)


def main():
    """Example usage: move a brick onto another one in a small world."""
    from component_15_logging_config import setup_logging
    from component_17_proof_explanation import format_proof_tree

    setup_logging()

    world = WorldState.from_dict(
        {
            "stacks": [["e"], ["g", "l"], [], ["k", "m", "f"], []],
            "arm": 0,
            "holding": None,
            "objects": {
                "e": {"form": "ball", "size": "large", "color": "white"},
                "f": {"form": "ball", "size": "small", "color": "black"},
                "g": {"form": "table", "size": "large", "color": "blue"},
                "k": {"form": "box", "size": "large", "color": "yellow"},
                "l": {"form": "box", "size": "large", "color": "red"},
                "m": {"form": "box", "size": "small", "color": "blue"},
            },
        }
    )
    interpretations = [
        {
            "utterance": "put the white ball in the red box",
            "interpretation": [[{"relation": "inside", "args": ["e", "l"]}]],
        },
        {
            "utterance": "put the black ball beside the red box",
            "interpretation": [[{"relation": "beside", "args": ["f", "l"]}]],
        },
    ]

    planner = BlocksWorldPlanner(PlannerConfig(narrate=True))
    results = planner.plan(interpretations, world)

    for result in results:
        print(f"Plan: {planner.stringify(result)}")
        print(format_proof_tree(result.explanation, show_states=False))


if __name__ == "__main__":
    main()
