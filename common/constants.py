"""
Centralized constants for the blocks-world planner.

Single source of truth for default search bounds, plan formatting and cache
policies. `planner_config.PlannerConfig` uses these values as its defaults;
a YAML config file may override them per deployment.

Organization:
    - Search: Expansion bound and heuristic selection
    - Plan Output: Sentinel text, delimiter, floor placeholder
    - Cache Configuration: Plan cache TTL and size
    - Concurrency: Worker pool size for batch planning

Usage:
    from common.constants import DEFAULT_MAX_EXPANSIONS, NOOP_SENTINEL
"""

# =============================================================================
# Search
# =============================================================================

DEFAULT_MAX_EXPANSIONS: int = 10000
"""
Maximum number of nodes the A* search may expand before giving up.

Some goal formulas are unreachable (e.g. holding two objects at once), so
the search must terminate on its own. 10000 covers every reachable goal in
the small example worlds (4-5 stacks, up to 8 objects) with the default
heuristic.
"""

DEFAULT_HEURISTIC: str = "goal_distance"
"""Name of the heuristic used when none is configured ("goal_distance" or "zero")."""

HEURISTIC_NAMES = ("goal_distance", "zero")

STEP_COST: float = 1.0
"""Uniform cost of every primitive arm action."""

# =============================================================================
# Plan Output
# =============================================================================

NOOP_SENTINEL: str = "That is already true!"
"""Single plan entry returned when the goal already holds in the start state."""

PLAN_DELIMITER: str = ", "
"""Separator used by stringify() to render a plan as one display string."""

FLOOR: str = "floor"
"""Placeholder argument meaning "the floor" in ontop/inside literals."""

# =============================================================================
# Cache Configuration
# =============================================================================

CACHE_MAXSIZE_PLANS: int = 256
CACHE_TTL_PLANS: int = 600  # seconds

# =============================================================================
# Concurrency
# =============================================================================

DEFAULT_MAX_WORKERS: int = 1
"""
Number of worker threads used to plan independent interpretations.

1 means sequential planning. Searches share only immutable input, so higher
values need no extra locking.
"""
