"""
Component 31: Physical Laws

Placement rules for the blocks world. The action graph consults a
PlacementRule before generating a drop edge when physical laws are
enforced; with no rule every drop is legal.

Stacking rules:
- Balls must be in boxes or on the floor
- Balls cannot support anything
- Small objects cannot support large objects
- Boxes cannot contain pyramids, planks or boxes of the same size
- Small boxes cannot be supported by small bricks or pyramids
- Large boxes cannot be supported by large pyramids
"""

from typing import Callable, Optional

from component_31_world_state import WorldObject

# (object, support) -> allowed; support None means the floor
PlacementRule = Callable[[WorldObject, Optional[WorldObject]], bool]

SMALL = "small"
LARGE = "large"


def _smaller(a: WorldObject, b: WorldObject) -> bool:
    return a.size == SMALL and b.size == LARGE


def can_place(obj: WorldObject, support: Optional[WorldObject]) -> bool:
    """Check whether obj may rest directly on support (None = floor)."""
    if support is None:
        return True

    if obj.form == "ball" and support.form != "box":
        return False
    if support.form == "ball":
        return False
    if _smaller(support, obj):
        return False

    if support.form == "box":
        if obj.form in ("pyramid", "plank", "box") and obj.size == support.size:
            return False

    if obj.form == "box":
        if obj.size == SMALL and support.size == SMALL and support.form in ("brick", "pyramid"):
            return False
        if obj.size == LARGE and support.form == "pyramid" and support.size == LARGE:
            return False

    return True
