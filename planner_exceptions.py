"""
planner_exceptions.py

Central exception hierarchy for the blocks-world planner.
Defines specialized exception classes for the different failure scenarios.

Exception hierarchy:
    PlannerException (base)
    ├── PlanningException
    │   ├── UnsupportedRelationError
    │   ├── MalformedLiteralError
    │   ├── SearchExhaustedError
    │   └── PlanExtractionError
    ├── WorldStateException
    │   ├── MalformedStateError
    │   └── IllegalActionError
    └── ConfigurationException
        └── InvalidConfigError

Usage:
    from planner_exceptions import SearchExhaustedError

    try:
        result = astar_search(graph, start, is_goal, heuristic, 1000)
    except SearchExhaustedError as e:
        logger.warning(f"No plan: {e}")
        logger.warning(f"Context: {e.context}")
"""

from typing import Any, Dict, Optional


class PlannerException(Exception):
    """
    Base exception for all planner-specific errors.

    All planner exceptions support:
    - Detailed error messages
    - Contextual information (dict)
    - Original exception chaining (via 'from')
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception

    def __str__(self) -> str:
        base_msg = self.message

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


# ============================================================================
# PLANNING EXCEPTIONS
# ============================================================================


class PlanningException(PlannerException):
    """Base exception for failures while planning a single interpretation."""


class UnsupportedRelationError(PlanningException):
    """
    A goal literal uses a relation tag with no evaluation rule.

    Causes:
    - Relation declared in the goal vocabulary but not implemented
      (above, under, beside, leftof, rightof)
    - Unknown relation tag (typo, interpreter/planner version mismatch)
    """

    def __init__(self, message: str, relation: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        context["relation"] = relation
        kwargs["context"] = context
        super().__init__(message, **kwargs)
        self.relation = relation


class MalformedLiteralError(PlanningException):
    """
    A goal literal is structurally invalid.

    Causes:
    - Wrong number of arguments for the relation
    - Argument names an object that does not exist in the world
    - "floor" used where only an object may appear
    """

    def __init__(self, message: str, literal: Optional[Any] = None, **kwargs):
        context = kwargs.get("context", {})
        context["literal"] = literal
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class SearchExhaustedError(PlanningException):
    """
    The search stopped without reaching a goal state.

    Causes:
    - Expansion bound reached
    - Frontier emptied (goal unreachable from the start state)
    """

    def __init__(
        self,
        message: str,
        expansions: Optional[int] = None,
        reason: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.get("context", {})
        context["expansions"] = expansions
        context["reason"] = reason
        kwargs["context"] = context
        super().__init__(message, **kwargs)
        self.expansions = expansions
        self.reason = reason


class PlanExtractionError(PlanningException):
    """A consecutive pair of path states is not connected by any edge."""


# ============================================================================
# WORLD STATE EXCEPTIONS
# ============================================================================


class WorldStateException(PlannerException):
    """Base exception for world-state structure errors."""


class MalformedStateError(WorldStateException):
    """
    A world state violates a structural invariant.

    Causes:
    - Object appears in two stacks, twice in one stack, or both in a stack
      and in the gripper
    - Arm index outside the stack range
    - Object id missing from the object table
    """


class IllegalActionError(WorldStateException):
    """An action token was applied to a state where its precondition fails."""

    def __init__(self, message: str, action: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        context["action"] = action
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# ============================================================================
# CONFIGURATION EXCEPTIONS
# ============================================================================


class ConfigurationException(PlannerException):
    """Base exception for configuration errors."""


class InvalidConfigError(ConfigurationException):
    """
    Invalid configuration.

    Causes:
    - Non-positive expansion bound or worker count
    - Unknown heuristic name
    - Wrong value type in the YAML config file
    """


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================


def wrap_exception(
    exc: Exception,
    planner_exception_class: type[PlannerException],
    message: str,
    **context,
) -> PlannerException:
    """
    Convert a generic exception into a planner-specific one.

    Args:
        exc: Original exception
        planner_exception_class: Target exception class (e.g. InvalidConfigError)
        message: Custom error message
        **context: Additional context information

    Returns:
        Planner exception chained to the original exception

    Example:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise wrap_exception(e, InvalidConfigError, "Bad config", path=path)
    """
    return planner_exception_class(
        message=message, context=context, original_exception=exc
    )


def get_user_friendly_message(exc: Exception, include_details: bool = False) -> str:
    """
    Build a user-facing error message from an exception.

    Args:
        exc: Exception object
        include_details: Whether to append technical details (debug mode)

    Returns:
        Short, readable error message
    """
    if isinstance(exc, UnsupportedRelationError):
        base_msg = f"I don't know how to achieve the relation '{exc.relation}'."
    elif isinstance(exc, MalformedLiteralError):
        base_msg = "The goal refers to something that is not in the world."
    elif isinstance(exc, SearchExhaustedError):
        base_msg = "I could not find a way to do that."
    elif isinstance(exc, PlanExtractionError):
        base_msg = "The plan I found could not be turned into arm actions."
    elif isinstance(exc, MalformedStateError):
        base_msg = "The world description is inconsistent."
    elif isinstance(exc, IllegalActionError):
        base_msg = "That arm action is not possible right now."
    elif isinstance(exc, ConfigurationException):
        base_msg = "The planner is misconfigured."
    elif isinstance(exc, PlannerException):
        base_msg = "Planning failed."
    else:
        base_msg = "An unexpected error occurred."

    if include_details:
        base_msg += f"\n\nDetails: {str(exc)}"

    return base_msg
