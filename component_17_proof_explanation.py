"""
component_17_proof_explanation.py

Plan explanations.

A ProofTree lists how a plan gets from the start state to the goal: two
premises (start state, goal formula), one ACTION step per arm action with
the state it leads to, and a closing CONCLUSION. Steps are chained through
parent_steps, so the tree of one plan is a single path.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class StepType(Enum):
    PREMISE = "premise"
    ACTION = "action"
    CONCLUSION = "conclusion"


@dataclass
class ProofStep:
    """
    One explanation step.

    Attributes:
        step_id: Identifier, unique within its tree
        step_type: PREMISE, ACTION or CONCLUSION
        output: Rendered state or formula after this step
        explanation_text: Sentence describing the step
        rule_name: Action token of an ACTION step
        parent_steps: step_ids this step follows
        metadata: Step data such as the action index
    """

    step_id: str
    step_type: StepType
    output: str = ""
    explanation_text: str = ""
    rule_name: Optional[str] = None
    parent_steps: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ProofTree:
    """Explanation of one planned interpretation."""

    query: str
    steps: List[ProofStep] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def get_step_by_id(self, step_id: str) -> Optional[ProofStep]:
        for step in self.steps:
            if step.step_id == step_id:
                return step
        return None

    def steps_of_type(self, step_type: StepType) -> List[ProofStep]:
        return [step for step in self.steps if step.step_type == step_type]

    @property
    def action_tokens(self) -> List[str]:
        return [step.rule_name for step in self.steps_of_type(StepType.ACTION)]


_MARKERS = {
    StepType.PREMISE: "[GIVEN]",
    StepType.ACTION: "[->]",
    StepType.CONCLUSION: "[OK]",
}


def format_proof_tree(tree: ProofTree, show_states: bool = True) -> str:
    """
    Render an explanation as text, one numbered line per step.

    Args:
        tree: The explanation to render
        show_states: Append the state or formula each step produces
    """
    lines = [f"Plan for: {tree.query}"]
    for number, step in enumerate(tree.steps, 1):
        line = f"  {number}. {_MARKERS[step.step_type]} {step.explanation_text}"
        if show_states and step.output:
            line += f"\n       {step.output}"
        lines.append(line)
    actions = len(tree.steps_of_type(StepType.ACTION))
    lines.append(f"{actions} action(s)")
    return "\n".join(lines)
