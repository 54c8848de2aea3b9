"""
Component 31: Goal Formulas and Goal Evaluation

Goal representation produced by the interpreter and the test that decides
whether a world state satisfies it:
- Relation: goal vocabulary (implemented and declared-only relations)
- Literal: relation + arguments + polarity
- DNFFormula: disjunction of conjunctive clauses
- parse_formula / validate_formula: input conversion and pre-search checks
- GoalEvaluator: is_goal(state) over a formula

Relation semantics:
- holding(x): satisfied iff (state.holding == x) == polarity
- ontop(x, y) / inside(x, y): satisfied iff x lies directly on y
  (y may be "floor") and that fact equals the polarity
- above, under, beside, leftof, rightof: declared but not implemented;
  such a literal never holds, and validate_formula rejects it
- anything else: UnsupportedRelationError
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple, Union

from common.constants import FLOOR
from component_15_logging_config import get_logger
from component_31_world_state import WorldState
from planner_exceptions import MalformedLiteralError, UnsupportedRelationError

logger = get_logger(__name__)


# ============================================================================
# Vocabulary
# ============================================================================


class Relation(Enum):
    """Relations of the goal vocabulary."""

    HOLDING = "holding"
    ONTOP = "ontop"
    INSIDE = "inside"

    # Declared, not implemented
    ABOVE = "above"
    UNDER = "under"
    BESIDE = "beside"
    LEFTOF = "leftof"
    RIGHTOF = "rightof"

    @property
    def is_implemented(self) -> bool:
        return self in IMPLEMENTED_RELATIONS

    @property
    def arity(self) -> int:
        return 1 if self is Relation.HOLDING else 2

    @classmethod
    def lookup(cls, tag: str) -> "Relation":
        """
        Resolve a relation tag.

        "left of" / "right of" are accepted as spellings of leftof/rightof.

        Raises:
            UnsupportedRelationError: If the tag is not in the vocabulary
        """
        normalized = str(tag).strip().lower().replace(" ", "")
        try:
            return cls(normalized)
        except ValueError:
            raise UnsupportedRelationError(
                f"Unknown relation '{tag}'", relation=str(tag)
            ) from None


IMPLEMENTED_RELATIONS = frozenset({Relation.HOLDING, Relation.ONTOP, Relation.INSIDE})


@dataclass(frozen=True)
class Literal:
    """
    A single goal atom.

    Attributes:
        relation: Relation tag ("holding", "ontop", ...)
        args: Argument object ids; "floor" may appear as second argument
        polarity: True = asserted, False = negated
    """

    relation: str
    args: Tuple[str, ...]
    polarity: bool = True

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Literal":
        try:
            relation = data["relation"]
            args = data.get("args", ())
            polarity = data.get("polarity", True)
        except (KeyError, TypeError) as e:
            raise MalformedLiteralError(
                "Literal needs a 'relation' and a list of 'args'",
                literal=dict(data) if isinstance(data, Mapping) else data,
                original_exception=e,
            ) from e

        if not isinstance(relation, str):
            raise MalformedLiteralError("Relation tag must be a string", literal=dict(data))
        if isinstance(args, (str, bytes)) or not isinstance(args, Iterable):
            raise MalformedLiteralError("Literal 'args' must be a list", literal=dict(data))
        args = tuple(args)
        if not all(isinstance(arg, str) for arg in args):
            raise MalformedLiteralError("Literal arguments must be object ids", literal=dict(data))
        if not isinstance(polarity, bool):
            raise MalformedLiteralError(
                "Literal 'polarity' must be true or false", literal=dict(data)
            )

        return cls(relation=relation, args=args, polarity=polarity)

    def to_dict(self) -> dict:
        return {
            "relation": self.relation,
            "args": list(self.args),
            "polarity": self.polarity,
        }

    def __str__(self) -> str:
        text = f"{self.relation}({', '.join(map(str, self.args))})"
        return text if self.polarity else f"-{text}"


Clause = Tuple[Literal, ...]
DNFFormula = Tuple[Clause, ...]

RawLiteral = Union[Literal, Mapping[str, Any]]


def parse_formula(raw: Iterable[Iterable[RawLiteral]]) -> DNFFormula:
    """
    Convert nested sequences of literals (or literal dicts) into a DNFFormula.

    Example:
        parse_formula([[{"relation": "holding", "args": ["a"]}]])
    """
    if isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Iterable):
        raise MalformedLiteralError(
            "Goal formula must be a list of clauses", literal=repr(raw)
        )

    formula = []
    for clause in raw:
        if isinstance(clause, (str, bytes, Mapping)) or not isinstance(clause, Iterable):
            raise MalformedLiteralError(
                "Clause must be a list of literals", literal=repr(clause)
            )
        literals = []
        for item in clause:
            if isinstance(item, Literal):
                literals.append(item)
            elif isinstance(item, Mapping):
                literals.append(Literal.from_dict(item))
            else:
                raise MalformedLiteralError(
                    f"Cannot read literal of type {type(item).__name__}", literal=item
                )
        formula.append(tuple(literals))
    return tuple(formula)


def format_formula(formula: DNFFormula) -> str:
    """Render a formula as "a & b | c"."""
    return " | ".join(" & ".join(str(lit) for lit in clause) for clause in formula)


def validate_formula(formula: DNFFormula, state: Optional[WorldState] = None) -> None:
    """
    Reject formulas the planner cannot search for.

    Raises:
        UnsupportedRelationError: Relation unknown or declared-only
        MalformedLiteralError: Wrong arity, unknown object, misplaced floor
    """
    if not formula:
        raise MalformedLiteralError("Goal formula has no clauses", literal="[]")

    for clause in formula:
        for literal in clause:
            relation = Relation.lookup(literal.relation)
            if not relation.is_implemented:
                raise UnsupportedRelationError(
                    f"Relation '{literal.relation}' is not supported by the planner",
                    relation=literal.relation,
                )

            if len(literal.args) != relation.arity:
                raise MalformedLiteralError(
                    f"Relation '{literal.relation}' takes {relation.arity} argument(s)",
                    literal=str(literal),
                )

            for position, arg in enumerate(literal.args):
                if arg == FLOOR:
                    if position != 1:
                        raise MalformedLiteralError(
                            f"'{FLOOR}' can only be the supporting argument",
                            literal=str(literal),
                        )
                    continue
                if state is not None and not state.contains(arg):
                    raise MalformedLiteralError(
                        f"Object '{arg}' does not exist in the world",
                        literal=str(literal),
                    )


# ============================================================================
# Goal Evaluator
# ============================================================================


def literal_holds(literal: Literal, state: WorldState) -> bool:
    """
    Evaluate one literal against a state.

    Raises:
        UnsupportedRelationError: If the relation tag is unknown
    """
    relation = Relation.lookup(literal.relation)

    if relation is Relation.HOLDING:
        return (state.holding == literal.args[0]) == literal.polarity

    if relation in (Relation.ONTOP, Relation.INSIDE):
        obj, support = literal.args
        return state.is_ontop(obj, support) == literal.polarity

    # Declared-only relation: the literal never holds
    logger.debug(f"Relation '{literal.relation}' not implemented, literal fails")
    return False


def clause_holds(clause: Sequence[Literal], state: WorldState) -> bool:
    """A clause holds iff all its literals hold; stops at the first failure."""
    for literal in clause:
        if not literal_holds(literal, state):
            return False
    return True


class GoalEvaluator:
    """
    Goal test for a DNF formula.

    Usage:
        evaluator = GoalEvaluator(formula)
        evaluator.is_goal(state)
    """

    def __init__(self, formula: DNFFormula):
        self.formula = formula

    def is_goal(self, state: WorldState) -> bool:
        for clause in self.formula:
            if clause_holds(clause, state):
                return True
        return False

    def satisfied_clause(self, state: WorldState) -> Optional[int]:
        """Index of the first clause satisfied by state, or None."""
        for index, clause in enumerate(self.formula):
            if clause_holds(clause, state):
                return index
        return None

    def __call__(self, state: WorldState) -> bool:
        return self.is_goal(state)
