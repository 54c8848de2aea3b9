"""
infrastructure/plan_cache.py

Plan cache owned by a single BlocksWorldPlanner.

A plan depends only on the goal formula, the world state and the planner's
own settings, so each planner keeps its own cache keyed by (formula, state).
Nothing is shared between planner instances.

Usage:
    cache = PlanCache(maxsize=256, ttl=600)
    cache.store(formula, state, entry)
    entry = cache.lookup(formula, state)
"""

import threading
from typing import Any, Dict, Hashable, Optional, Tuple

from cachetools import TTLCache

from component_15_logging_config import get_logger
from component_31_world_state import WorldState

logger = get_logger(__name__)


class PlanCache:
    """
    TTL cache of successful searches.

    Worker threads of one batch share the planner, so lookups and stores
    take a lock.
    """

    def __init__(self, maxsize: int, ttl: int):
        self._entries: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.stores = 0

    @staticmethod
    def key_for(formula: Hashable, state: WorldState) -> Tuple[Hashable, ...]:
        # The object table takes part because physical laws read it
        return (
            formula,
            state.stacks,
            state.arm,
            state.holding,
            tuple(sorted(state.objects.items())),
        )

    def lookup(self, formula: Hashable, state: WorldState) -> Optional[Any]:
        key = self.key_for(formula, state)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            self.hits += 1
        logger.debug("Plan cache hit", extra={"holding": state.holding, "arm": state.arm})
        return entry

    def store(self, formula: Hashable, state: WorldState, entry: Any) -> None:
        key = self.key_for(formula, state)
        with self._lock:
            self._entries[key] = entry
            self.stores += 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "hits": self.hits,
                "misses": self.misses,
                "stores": self.stores,
                "size": len(self._entries),
            }
