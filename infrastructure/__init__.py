"""
infrastructure package

Shared infrastructure components for the planner.

Modules:
    - interfaces: Base interface for planning engines
    - plan_cache: Per-planner TTL cache of found plans
"""

from infrastructure.interfaces import BasePlanningEngine, PlanningOutcome
from infrastructure.plan_cache import PlanCache

__all__ = [
    "BasePlanningEngine",
    "PlanningOutcome",
    "PlanCache",
]
