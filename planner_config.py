"""
planner_config.py

Configuration layer for the blocks-world planner.

Defaults come from common.constants; a YAML file can override them through
its ``planner:`` section:

    planner:
      max_expansions: 20000
      heuristic: goal_distance
      enforce_physical_laws: true
      narrate: false
      max_workers: 4
      enable_plan_cache: false
      plan_cache_maxsize: 256
      plan_cache_ttl: 600
      plan_delimiter: ", "
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from common.constants import (
    CACHE_MAXSIZE_PLANS,
    CACHE_TTL_PLANS,
    DEFAULT_HEURISTIC,
    DEFAULT_MAX_EXPANSIONS,
    DEFAULT_MAX_WORKERS,
    HEURISTIC_NAMES,
    PLAN_DELIMITER,
)
from component_15_logging_config import get_logger
from planner_exceptions import InvalidConfigError, wrap_exception

logger = get_logger(__name__)


@dataclass
class PlannerConfig:
    """
    Tunable planner settings.

    Attributes:
        max_expansions: Expansion bound for each A* search
        heuristic: Heuristic name ("goal_distance" or "zero")
        enforce_physical_laws: Reject drops that break the stacking rules
        narrate: Interleave status strings with the action tokens
        max_workers: Worker threads for batch planning (1 = sequential)
        enable_plan_cache: Let this planner reuse its plans for repeated
            (goal, world) pairs
        plan_cache_maxsize: Maximum number of cached plans
        plan_cache_ttl: Plan cache time-to-live in seconds
        plan_delimiter: Separator used by stringify()
    """

    max_expansions: int = DEFAULT_MAX_EXPANSIONS
    heuristic: str = DEFAULT_HEURISTIC
    enforce_physical_laws: bool = False
    narrate: bool = False
    max_workers: int = DEFAULT_MAX_WORKERS
    enable_plan_cache: bool = False
    plan_cache_maxsize: int = CACHE_MAXSIZE_PLANS
    plan_cache_ttl: int = CACHE_TTL_PLANS
    plan_delimiter: str = PLAN_DELIMITER

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise InvalidConfigError if any value is out of range."""
        for name in ("max_expansions", "max_workers", "plan_cache_maxsize", "plan_cache_ttl"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfigError(
                    f"{name} must be an integer", context={name: value}
                )
            if value < 1:
                raise InvalidConfigError(
                    f"{name} must be positive", context={name: value}
                )

        for name in ("enforce_physical_laws", "narrate", "enable_plan_cache"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise InvalidConfigError(
                    f"{name} must be a boolean", context={name: value}
                )

        if self.heuristic not in HEURISTIC_NAMES:
            raise InvalidConfigError(
                f"Unknown heuristic '{self.heuristic}'",
                context={"known": ", ".join(HEURISTIC_NAMES)},
            )

        if not isinstance(self.plan_delimiter, str):
            raise InvalidConfigError(
                "plan_delimiter must be a string",
                context={"plan_delimiter": self.plan_delimiter},
            )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PlannerConfig":
        """Build a config from a mapping, ignoring unknown keys with a warning."""
        data = data or {}
        if not isinstance(data, dict):
            raise InvalidConfigError(
                "planner config section must be a mapping",
                context={"type": type(data).__name__},
            )

        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            if key in known:
                kwargs[key] = value
            else:
                logger.warning(f"Unknown planner config key: {key}")
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_planner_config(config_path: Union[str, Path, None]) -> PlannerConfig:
    """
    Load planner configuration from a YAML file.

    A missing file yields the defaults. Malformed YAML or invalid values
    raise InvalidConfigError.

    Args:
        config_path: Path to YAML config file (None = defaults)

    Returns:
        PlannerConfig instance
    """
    if config_path is None:
        return PlannerConfig()

    config_file = Path(config_path)
    if not config_file.exists():
        logger.warning(f"Config file not found: {config_path}, using defaults")
        return PlannerConfig()

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise wrap_exception(
            e, InvalidConfigError, "Config file is not valid YAML", path=str(config_path)
        ) from e

    if not isinstance(config, dict):
        raise InvalidConfigError(
            "Config file must contain a mapping", context={"path": str(config_path)}
        )

    planner_config = PlannerConfig.from_dict(config.get("planner", {}))
    logger.info(f"[OK] Configuration loaded from {config_path}")
    return planner_config
