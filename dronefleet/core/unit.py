"""Simulated aerial unit: task queue and status state machine."""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .geometry import Position, as_position
from .tasks import Task

logger = logging.getLogger(__name__)


class UnitStatus(Enum):
    """Unit operational status.

    LANDED and ERROR are never assigned by the engine's own commands; only
    an explicit external status change reaches them.
    """
    IDLE = "idle"
    FLYING = "flying"
    LANDED = "landed"
    LOW_BATTERY = "low_battery"
    ERROR = "error"


@dataclass(frozen=True)
class UnitSnapshot:
    """Read-only view of a unit at one point in time."""
    id: str
    position: Position
    target_position: Position
    status: UnitStatus
    battery: float
    tasks_remaining: int
    current_task: Optional[Task]
    is_simulated: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "position": self.position,
            "target_position": self.target_position,
            "status": self.status.value,
            "battery": self.battery,
            "tasks_remaining": self.tasks_remaining,
            "current_task": self.current_task.summary() if self.current_task else None,
            "is_simulated": self.is_simulated,
        }


class Unit:
    """A single simulated unit.

    Holds position, the published target, battery level and a FIFO task
    queue. At most one task is current at a time.

    Attributes:
        position: Current (x, y, z)
        target_position: Where the unit is heading
        status: Current UnitStatus
        battery: Battery percent in [0, 100]
        is_simulated: Provenance flag, informational only
    """

    def __init__(
        self,
        unit_id: str,
        position: Position = (0.0, 0.0, 0.0),
        battery: float = 100.0,
        low_battery_threshold: float = 10.0,
        is_simulated: bool = False,
    ):
        self._id = unit_id
        self.position = as_position(position)
        self.target_position = self.position
        self.status = UnitStatus.IDLE
        self.battery = float(battery)
        self.low_battery_threshold = low_battery_threshold
        self.is_simulated = is_simulated

        self._queue: deque[Task] = deque()
        self._current_task: Optional[Task] = None

    @property
    def id(self) -> str:
        """Unit identifier (immutable)."""
        return self._id

    @property
    def current_task(self) -> Optional[Task]:
        """Task being executed, or None."""
        return self._current_task

    @property
    def tasks_remaining(self) -> int:
        """Number of queued tasks, excluding the current one."""
        return len(self._queue)

    @property
    def queued_tasks(self) -> tuple:
        return tuple(self._queue)

    def enqueue_task(self, task: Task) -> None:
        """Append a task to the tail of the queue."""
        self._queue.append(task)

    def advance_queue(self) -> Optional[Task]:
        """Pop the next task into the current slot.

        Returns:
            The new current task, or None if a task is already current or
            the queue is empty.
        """
        if self._current_task is not None or not self._queue:
            return None
        self._current_task = self._queue.popleft()
        self.status = UnitStatus.FLYING
        logger.debug(f"Unit {self._id}: started {self._current_task.summary()}")
        return self._current_task

    def complete_current_task(self) -> None:
        """Finish the current task.

        Status drops to IDLE once nothing is left to do; otherwise it stays
        FLYING until the next task is dequeued.
        """
        if self._current_task is not None:
            logger.debug(f"Unit {self._id}: completed {self._current_task.summary()}")
        self._current_task = None
        if not self._queue:
            self.status = UnitStatus.IDLE

    def clear_tasks(self) -> None:
        """Drop the queue and the current task."""
        self._queue.clear()
        self._current_task = None

    def apply_battery_drain(self, amount: float) -> None:
        """Consume battery and flag LOW_BATTERY at the threshold.

        LOW_BATTERY overrides IDLE and FLYING but never ERROR.
        """
        self.battery = max(0.0, self.battery - amount)
        if self.battery <= self.low_battery_threshold and self.status != UnitStatus.ERROR:
            if self.status != UnitStatus.LOW_BATTERY:
                logger.debug(f"Unit {self._id}: low battery ({self.battery:.1f}%)")
            self.status = UnitStatus.LOW_BATTERY

    def snapshot(self) -> UnitSnapshot:
        """Capture the unit's current state."""
        return UnitSnapshot(
            id=self._id,
            position=self.position,
            target_position=self.target_position,
            status=self.status,
            battery=self.battery,
            tasks_remaining=len(self._queue),
            current_task=self._current_task,
            is_simulated=self.is_simulated,
        )

    def __repr__(self) -> str:
        return f"Unit(id={self._id!r}, status={self.status.value}, battery={self.battery:.1f})"
