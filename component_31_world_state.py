"""
Component 31: World State Model

Blocks-world snapshot used as the search node of the planner:
- WorldObject: physical attributes of one object (form, size, color)
- WorldState: stacks, arm position, held object and the shared object table

States are immutable. Stacks are tuples, so a successor only allocates the
stack it changes and shares the others with its parent. Equality and
hashing compare stacks, arm and holding; the object table is shared by
reference and ignored by both.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple

from common.constants import FLOOR
from planner_exceptions import MalformedStateError

Stack = Tuple[str, ...]


# ============================================================================
# Objects
# ============================================================================


@dataclass(frozen=True)
class WorldObject:
    """Physical attributes of a world object."""

    form: str
    size: str = ""
    color: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WorldObject":
        return cls(
            form=str(data.get("form", "")),
            size=str(data.get("size", "")),
            color=str(data.get("color", "")),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"form": self.form, "size": self.size, "color": self.color}

    def describe(self) -> str:
        """Human-readable description, e.g. "large green brick"."""
        return " ".join(part for part in (self.size, self.color, self.form) if part)


# ============================================================================
# World State
# ============================================================================


@dataclass(frozen=True)
class WorldState:
    """
    Snapshot of the blocks world.

    Attributes:
        stacks: Ordered stacks of object ids, top = last element
        arm: Index of the stack under the arm
        holding: Object id in the gripper, or None
        objects: Shared object table (id -> WorldObject), read-only

    The object table is optional. An empty table is accepted and leaves the
    objects undescribed; a non-empty table must describe every placed or
    held object, otherwise construction raises MalformedStateError.
    """

    stacks: Tuple[Stack, ...]
    arm: int = 0
    holding: Optional[str] = None
    objects: Mapping[str, WorldObject] = field(
        default_factory=dict, compare=False, hash=False, repr=False
    )

    def __post_init__(self):
        # Accept lists for convenience, store tuples
        object.__setattr__(
            self, "stacks", tuple(tuple(stack) for stack in self.stacks)
        )
        self._validate()

    def _validate(self) -> None:
        if not self.stacks:
            raise MalformedStateError("World must have at least one stack")

        if isinstance(self.arm, bool) or not isinstance(self.arm, int):
            raise MalformedStateError(
                "Arm position must be an integer", context={"arm": self.arm}
            )
        if not 0 <= self.arm < len(self.stacks):
            raise MalformedStateError(
                "Arm position out of range",
                context={"arm": self.arm, "stacks": len(self.stacks)},
            )

        seen = set()
        placed = [obj for stack in self.stacks for obj in stack]
        if self.holding is not None:
            placed.append(self.holding)
        for obj in placed:
            if obj in seen:
                raise MalformedStateError(
                    f"Object '{obj}' appears more than once", context={"object": obj}
                )
            if obj == FLOOR:
                raise MalformedStateError(f"'{FLOOR}' is reserved and cannot be placed")
            seen.add(obj)

        if self.objects:
            unknown = seen.difference(self.objects)
            if unknown:
                raise MalformedStateError(
                    "Objects missing from the object table",
                    context={"objects": ", ".join(sorted(unknown))},
                )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WorldState":
        """
        Build a state from the world JSON shape.

        Example:
            WorldState.from_dict({
                "stacks": [["a"], ["b"]],
                "arm": 0,
                "holding": None,
                "objects": {"a": {"form": "brick", "size": "large", "color": "green"}},
            })
        """
        if "stacks" not in data:
            raise MalformedStateError("World description has no 'stacks'")
        objects = {
            name: obj if isinstance(obj, WorldObject) else WorldObject.from_dict(obj)
            for name, obj in (data.get("objects") or {}).items()
        }
        return cls(
            stacks=data["stacks"],
            arm=data.get("arm", 0),
            holding=data.get("holding"),
            objects=objects,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stacks": [list(stack) for stack in self.stacks],
            "arm": self.arm,
            "holding": self.holding,
            "objects": {name: obj.to_dict() for name, obj in self.objects.items()},
        }

    def copy(self) -> "WorldState":
        """Return an equal state; no mutable storage is shared."""
        return WorldState(
            stacks=self.stacks,
            arm=self.arm,
            holding=self.holding,
            objects=self.objects,
        )

    # ------------------------------------------------------------------
    # Transitions (used by the action graph)
    # ------------------------------------------------------------------

    def with_arm(self, arm: int) -> "WorldState":
        return WorldState(
            stacks=self.stacks, arm=arm, holding=self.holding, objects=self.objects
        )

    def _with_stack(self, index: int, stack: Stack, holding: Optional[str]) -> "WorldState":
        stacks = self.stacks[:index] + (stack,) + self.stacks[index + 1 :]
        return WorldState(
            stacks=stacks, arm=self.arm, holding=holding, objects=self.objects
        )

    def pick(self) -> "WorldState":
        """Move the top object of the stack under the arm into the gripper."""
        stack = self.stacks[self.arm]
        return self._with_stack(self.arm, stack[:-1], stack[-1])

    def drop(self) -> "WorldState":
        """Put the held object on top of the stack under the arm."""
        return self._with_stack(
            self.arm, self.stacks[self.arm] + (self.holding,), None
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def all_objects(self) -> Iterable[str]:
        for stack in self.stacks:
            yield from stack
        if self.holding is not None:
            yield self.holding

    def contains(self, obj: str) -> bool:
        return obj == self.holding or self.stack_of(obj) is not None

    def stack_of(self, obj: str) -> Optional[int]:
        """Index of the stack containing obj, or None if held/absent."""
        for index, stack in enumerate(self.stacks):
            if obj in stack:
                return index
        return None

    def objects_above(self, obj: str) -> int:
        """Number of objects stacked on top of obj (0 if held/absent)."""
        index = self.stack_of(obj)
        if index is None:
            return 0
        stack = self.stacks[index]
        return len(stack) - stack.index(obj) - 1

    def top_of(self, index: int) -> Optional[str]:
        stack = self.stacks[index]
        return stack[-1] if stack else None

    def is_ontop(self, obj: str, support: str) -> bool:
        """
        True iff obj lies directly on support.

        ``support == "floor"`` means obj is the bottom object of a stack.
        """
        for stack in self.stacks:
            if obj not in stack:
                continue
            position = stack.index(obj)
            if support == FLOOR:
                return position == 0
            return position > 0 and stack[position - 1] == support
        return False

    def describe(self, obj: str) -> str:
        """Description of obj from the object table, falling back to its id."""
        world_object = self.objects.get(obj)
        if world_object is None:
            return obj
        return world_object.describe() or obj

    def __str__(self) -> str:
        rows = []
        for index, stack in enumerate(self.stacks):
            marker = "*" if index == self.arm else " "
            rows.append(f"{marker}{index}: {' '.join(stack) if stack else '-'}")
        rows.append(f" holding: {self.holding if self.holding is not None else '-'}")
        return "\n".join(rows)


def make_state(
    stacks: Sequence[Sequence[str]],
    arm: int = 0,
    holding: Optional[str] = None,
    objects: Optional[Mapping[str, WorldObject]] = None,
) -> WorldState:
    """Shorthand constructor accepting plain lists."""
    return WorldState(stacks=stacks, arm=arm, holding=holding, objects=objects or {})
