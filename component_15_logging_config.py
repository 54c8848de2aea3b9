"""
component_15_logging_config.py

Logging for the planner.

Every module logs through `get_logger(__name__)`. Context passed as
`extra={...}` is appended to the message as `| key=value` pairs, so a search
log line reads like:

    [2025-01-01 12:00:00] [INFO    ] [component_31_blocks_planner] Starting search | goal=holding(a) | stacks=2

Search timings go to the separate "planner.performance" logger through
PerformanceLogger; setup_logging() can route that logger to its own file.
"""

import logging
import logging.handlers
import sys
import time
import traceback
from pathlib import Path
from typing import Any, MutableMapping, Optional, Tuple, Union

PERFORMANCE_LOGGER_NAME: str = "planner.performance"

LOG_FORMAT = "[%(asctime)s] [%(levelname)-8s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3


class PlannerLogFormatter(logging.Formatter):
    """Appends a record's extra_info as `| key=value` pairs."""

    def __init__(self) -> None:
        super().__init__(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extra_info = getattr(record, "extra_info", None)
        if extra_info:
            message += " | " + " | ".join(f"{k}={v}" for k, v in extra_info.items())
        return message


class StructuredLogger(logging.LoggerAdapter):
    """Logger adapter storing `extra=` under the record's extra_info."""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> Tuple[str, MutableMapping[str, Any]]:
        extra = kwargs.get("extra")
        if extra:
            kwargs["extra"] = {"extra_info": extra}
        return msg, kwargs

    def log_exception(self, exc: Exception, message: str = "", **context: Any) -> None:
        """Log exc at ERROR level with its traceback."""
        tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        self.error(f"{message}: {type(exc).__name__}: {exc}\n{tb_str}", extra=context)


class PerformanceLogger:
    """
    Times a block and reports the duration.

    Usage:
        with PerformanceLogger(logger.logger, "A* search", goal="holding(a)"):
            astar_search(graph, start, is_goal, heuristic, 10000)

    Success is reported at INFO on the performance logger, failure at ERROR on
    the given logger. Exceptions always propagate.
    """

    def __init__(self, logger: logging.Logger, operation_name: str, **context: Any):
        self.logger = logger
        self.operation_name = operation_name
        self.context = context
        self.duration_ms: Optional[float] = None
        self._started: Optional[float] = None

    def __enter__(self) -> "PerformanceLogger":
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.duration_ms = (time.perf_counter() - self._started) * 1000
        info = {**self.context, "duration_ms": round(self.duration_ms, 2)}

        if exc_type is None:
            logging.getLogger(PERFORMANCE_LOGGER_NAME).info(
                f"{self.operation_name}: {self.duration_ms:.2f}ms",
                extra={"extra_info": info},
            )
        else:
            self.logger.error(
                f"FAILED: {self.operation_name} after {self.duration_ms:.2f}ms",
                extra={"extra_info": {**info, "error": str(exc_val)}},
            )
        return False


def _file_handler(path: Path, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(PlannerLogFormatter())
    return handler


def setup_logging(
    console_level: int = logging.INFO,
    log_file: Union[str, Path, None] = None,
    performance_log_file: Union[str, Path, None] = None,
) -> None:
    """
    Configure the root logger for a planner process.

    Args:
        console_level: Level of the stdout handler
        log_file: Also write everything from DEBUG up to this file
        performance_log_file: Send search timings to this file only
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(console_level)
    console.setFormatter(PlannerLogFormatter())
    root.addHandler(console)

    if log_file is not None:
        root.addHandler(_file_handler(Path(log_file), logging.DEBUG))

    if performance_log_file is not None:
        perf_logger = logging.getLogger(PERFORMANCE_LOGGER_NAME)
        perf_logger.setLevel(logging.INFO)
        perf_logger.propagate = False
        perf_logger.handlers.clear()
        perf_logger.addHandler(_file_handler(Path(performance_log_file), logging.INFO))

    get_logger("planner.logging_config").debug(
        "Logging initialized",
        extra={"console_level": logging.getLevelName(console_level), "log_file": log_file},
    )


def get_logger(name: str) -> StructuredLogger:
    """Structured logger for a module (usually called with __name__)."""
    return StructuredLogger(logging.getLogger(name), {})


def log_component_start(logger: StructuredLogger, component_name: str, **context: Any) -> None:
    logger.info(f"START: {component_name}", extra=context)


def log_component_end(logger: StructuredLogger, component_name: str, **context: Any) -> None:
    logger.info(f"END: {component_name}", extra=context)


def log_component_error(
    logger: StructuredLogger, component_name: str, error: Exception, **context: Any
) -> None:
    logger.log_exception(error, message=f"ERROR in {component_name}", **context)
