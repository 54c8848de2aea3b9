"""
Common constants for the blocks-world planner.

This package provides centralized default values shared by the planner
components and the configuration layer.
"""

from common.constants import *

__all__ = [
    # Search
    "DEFAULT_MAX_EXPANSIONS",
    "DEFAULT_HEURISTIC",
    "HEURISTIC_NAMES",
    "STEP_COST",
    # Plan Output
    "NOOP_SENTINEL",
    "PLAN_DELIMITER",
    "FLOOR",
    # Cache Configuration
    "CACHE_MAXSIZE_PLANS",
    "CACHE_TTL_PLANS",
    # Concurrency
    "DEFAULT_MAX_WORKERS",
]
