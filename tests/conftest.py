"""
tests/conftest.py

Shared fixtures for the planner tests.
"""

import pytest

from component_31_world_state import WorldObject, WorldState, make_state


@pytest.fixture
def two_stack_world() -> WorldState:
    """[[a], [b]], arm over a, gripper empty."""
    return make_state([["a"], ["b"]])


@pytest.fixture
def small_world() -> WorldState:
    """Three stacks with described objects."""
    return WorldState.from_dict(
        {
            "stacks": [["a", "b"], ["c"], []],
            "arm": 0,
            "holding": None,
            "objects": {
                "a": {"form": "brick", "size": "large", "color": "green"},
                "b": {"form": "ball", "size": "small", "color": "white"},
                "c": {"form": "box", "size": "large", "color": "red"},
            },
        }
    )


@pytest.fixture
def ball_and_brick_world() -> WorldState:
    """A small ball and a large brick on separate stacks."""
    return make_state(
        [["ball"], ["brick"]],
        objects={
            "ball": WorldObject(form="ball", size="small", color="white"),
            "brick": WorldObject(form="brick", size="large", color="red"),
        },
    )
