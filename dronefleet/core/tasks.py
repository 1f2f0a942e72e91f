"""Task variants queued on units.

A task is an immutable command. ``TaskSpec`` is the structured record the
shell (or any other caller) hands to the engine; the engine turns it into a
concrete task using the unit's current position.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from .errors import UnknownTaskTypeError
from .geometry import Position


class TaskType(Enum):
    """Task discriminator."""
    MOVE = "move"
    HOVER = "hover"
    LAND = "land"
    TAKEOFF = "takeoff"

    @classmethod
    def parse(cls, value) -> "TaskType":
        """Look up a task type by its discriminator string.

        Raises:
            UnknownTaskTypeError: If the value names no task type
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise UnknownTaskTypeError(value) from None


def _now_ms() -> float:
    return time.time() * 1000.0


@dataclass(frozen=True)
class MoveTask:
    """Fly to a target position."""
    target: Position
    timestamp: float = field(default_factory=_now_ms, compare=False)

    @property
    def type(self) -> TaskType:
        return TaskType.MOVE

    def summary(self) -> str:
        x, y, z = self.target
        return f"move -> ({x:.1f}, {y:.1f}, {z:.1f})"


@dataclass(frozen=True)
class HoverTask:
    """Hold position.

    The duration is recorded but the tick loop does not wait for it: the
    task completes as soon as the unit is at its current target.
    """
    duration: float  # milliseconds
    timestamp: float = field(default_factory=_now_ms, compare=False)

    @property
    def type(self) -> TaskType:
        return TaskType.HOVER

    @property
    def target(self) -> None:
        return None

    def summary(self) -> str:
        return f"hover {self.duration / 1000.0:.1f}s"


@dataclass(frozen=True)
class LandTask:
    """Descend to z=0 at the x, y held when the task was created."""
    target: Position
    timestamp: float = field(default_factory=_now_ms, compare=False)

    @property
    def type(self) -> TaskType:
        return TaskType.LAND

    def summary(self) -> str:
        x, y, _ = self.target
        return f"land at ({x:.1f}, {y:.1f})"


@dataclass(frozen=True)
class TakeOffTask:
    """Climb to an altitude at the x, y held when the task was created."""
    target: Position
    timestamp: float = field(default_factory=_now_ms, compare=False)

    @property
    def type(self) -> TaskType:
        return TaskType.TAKEOFF

    def summary(self) -> str:
        return f"takeoff to {self.target[2]:.1f}"


Task = Union[MoveTask, HoverTask, LandTask, TakeOffTask]


@dataclass(frozen=True)
class TaskSpec:
    """Structured task request.

    Attributes:
        type: Task discriminator
        x, y, z: Move target (move only)
        duration: Hover duration in milliseconds (hover only)
        altitude: Take-off altitude (takeoff only)
    """
    type: TaskType
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None
    duration: Optional[float] = None
    altitude: Optional[float] = None

    @classmethod
    def from_dict(cls, data: dict) -> "TaskSpec":
        """Build a spec from a ``{"type": ..., ...}`` record.

        Raises:
            UnknownTaskTypeError: If ``type`` is missing or unrecognized
        """
        task_type = TaskType.parse(data.get("type"))
        return cls(
            type=task_type,
            x=data.get("x"),
            y=data.get("y"),
            z=data.get("z"),
            duration=data.get("duration"),
            altitude=data.get("altitude"),
        )

    @classmethod
    def move(cls, x: float, y: float, z: float) -> "TaskSpec":
        return cls(TaskType.MOVE, x=x, y=y, z=z)

    @classmethod
    def hover(cls, duration: Optional[float] = None) -> "TaskSpec":
        return cls(TaskType.HOVER, duration=duration)

    @classmethod
    def land(cls) -> "TaskSpec":
        return cls(TaskType.LAND)

    @classmethod
    def takeoff(cls, altitude: Optional[float] = None) -> "TaskSpec":
        return cls(TaskType.TAKEOFF, altitude=altitude)
