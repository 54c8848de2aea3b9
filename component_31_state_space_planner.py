"""
Component 31: State-Space Planner

Facade module providing single-import access to the blocks-world planner.

The planner is split into focused modules:
- component_31_world_state: WorldState / WorldObject
- component_31_action_graph: Graph abstraction and the arm action graph
- component_31_goal_evaluator: Goal formulas and the goal test
- component_31_heuristics: Planning heuristics
- component_31_astar_search: Bounded A* search
- component_31_plan_extractor: Path -> action tokens
- component_31_blocks_planner: Batch driver and engine interface
"""

# ============================================================================
# Import all public classes from split modules
# ============================================================================

# Action graph
from component_31_action_graph import (
    Action,
    AnnotatedEdge,
    BlocksWorldGraph,
    Edge,
    Graph,
    apply_action,
    replay_plan,
)

# Search
from component_31_astar_search import SearchResult, astar_search

# Batch driver
from component_31_blocks_planner import (
    BlocksWorldPlanner,
    Interpretation,
    PlannerResult,
    main,
    plan,
    stringify,
)

# Goals
from component_31_goal_evaluator import (
    GoalEvaluator,
    Literal,
    Relation,
    format_formula,
    parse_formula,
    validate_formula,
)

# Heuristics
from component_31_heuristics import (
    GoalDistanceHeuristic,
    Heuristic,
    ZeroHeuristic,
    create_heuristic,
)

# Plan extraction
from component_31_plan_extractor import extract_plan, narrate_plan

# World model
from component_31_world_state import WorldObject, WorldState, make_state

# ============================================================================
# Expose all imports
# ============================================================================

__all__ = [
    # World model
    "WorldObject",
    "WorldState",
    "make_state",
    # Action graph
    "Action",
    "Edge",
    "AnnotatedEdge",
    "Graph",
    "BlocksWorldGraph",
    "apply_action",
    "replay_plan",
    # Goals
    "Relation",
    "Literal",
    "GoalEvaluator",
    "parse_formula",
    "format_formula",
    "validate_formula",
    # Heuristics
    "Heuristic",
    "ZeroHeuristic",
    "GoalDistanceHeuristic",
    "create_heuristic",
    # Search
    "SearchResult",
    "astar_search",
    # Plan extraction
    "extract_plan",
    "narrate_plan",
    # Batch driver
    "Interpretation",
    "PlannerResult",
    "BlocksWorldPlanner",
    "plan",
    "stringify",
]


if __name__ == "__main__":
    main()
