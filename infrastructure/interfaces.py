"""
infrastructure/interfaces.py

Engine interface of the planner.

A dialogue front end drives planners through BasePlanningEngine: it passes
the user's utterance plus the interpreter output and the current world in
`context`, and receives a PlanningOutcome it can speak back or execute.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from component_17_proof_explanation import ProofTree


@dataclass
class PlanningOutcome:
    """
    Answer of a planning engine to one utterance.

    Attributes:
        success: At least one interpretation was planned
        answer: Plan rendered for display, or a failure message
        plans: Plan of every planned interpretation, in input order
        proof_tree: Explanation of the first plan
        metadata: Search statistics or error details
        strategy_used: Identifier of the planning strategy
        computation_cost: Share of the expansion budget used, 0.0 - 1.0
    """

    success: bool
    answer: str = ""
    plans: List[List[str]] = field(default_factory=list)
    proof_tree: Optional[ProofTree] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    strategy_used: str = ""
    computation_cost: float = 0.0

    def __post_init__(self):
        if not 0.0 <= self.computation_cost <= 1.0:
            raise ValueError(
                f"computation_cost must be in [0.0, 1.0], got {self.computation_cost}"
            )


class BasePlanningEngine(ABC):
    """Planner entry point used by the dialogue front end."""

    @abstractmethod
    def reason(self, query: str, context: Dict[str, Any]) -> PlanningOutcome:
        """Plan for the interpretations and world passed in context."""

    @abstractmethod
    def get_capabilities(self) -> List[str]:
        """Capability identifiers, lowercase with underscores."""

    @abstractmethod
    def estimate_cost(self, query: str) -> float:
        """Expected share of the search budget a request will use."""
