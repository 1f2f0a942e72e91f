"""Fleet engine: owns the units and advances them in fixed ticks.

This module provides the FleetEngine class, the single authority that
mutates units. Commands and ticks are serialized on one lock so a
background scheduler can drive ``tick()`` while a shell issues commands.

Example:
    from dronefleet.core import FleetEngine, TaskSpec

    engine = FleetEngine()
    engine.add_unit("drone_1", 0.0, 0.0, 0.0)
    engine.assign_task("drone_1", TaskSpec.takeoff(15.0))
    engine.execute_formation("circle", {"radius": 20})
    engine.run_ticks(100)
    print(engine.status())
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from .config import EngineConfig
from .errors import (
    DuplicateIdError,
    EmptyFleetError,
    InvalidCoordinateError,
    UnitNotFoundError,
    UnknownTaskTypeError,
)
from .geometry import Position, as_position, distance, is_finite_position, step_toward
from .tasks import HoverTask, LandTask, MoveTask, TakeOffTask, Task, TaskSpec, TaskType
from .unit import Unit, UnitSnapshot, UnitStatus
from ..coordination import formations as formation_lib

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FleetStatus:
    """Status summary of the fleet."""

    total: int
    running: bool
    units: tuple = field(default_factory=tuple)

    @property
    def flying(self) -> int:
        """Number of units currently FLYING."""
        return sum(1 for u in self.units if u.status == UnitStatus.FLYING)

    @property
    def low_battery(self) -> int:
        """Number of units flagged LOW_BATTERY."""
        return sum(1 for u in self.units if u.status == UnitStatus.LOW_BATTERY)

    def get(self, unit_id: str) -> Optional[UnitSnapshot]:
        for unit in self.units:
            if unit.id == unit_id:
                return unit
        return None

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "running": self.running,
            "units": {u.id: u.to_dict() for u in self.units},
        }


class FleetEngine:
    """Owner of all units and the fixed-tick update loop.

    Units are kept in insertion order; formations assign positions in that
    order. Units never leave the engine by reference: callers get
    UnitSnapshot copies.

    Attributes:
        config: Engine configuration.
        formations: Formation library used by execute_formation().
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        formations: Optional["formation_lib.FormationLibrary"] = None,
    ):
        """Initialize fleet engine.

        Args:
            config: Engine configuration. Uses defaults if not provided.
            formations: Formation registry. Uses built-in patterns if not provided.
        """
        self.config = config or EngineConfig()
        self.formations = formations or formation_lib.FormationLibrary()
        self._units: dict[str, Unit] = {}
        self._running = False
        self._tick_count = 0
        self._lock = threading.RLock()

    @property
    def running(self) -> bool:
        """Whether the tick scheduler should be ticking."""
        return self._running

    @property
    def tick_count(self) -> int:
        """Number of ticks executed since creation."""
        return self._tick_count

    @property
    def unit_ids(self) -> list[str]:
        """Unit ids in insertion order."""
        with self._lock:
            return list(self._units)

    # Command surface

    def add_unit(
        self,
        unit_id: str,
        x: float = 0.0,
        y: float = 0.0,
        z: float = 0.0,
        simulated: bool = False,
    ) -> UnitSnapshot:
        """Create a unit at a position, IDLE with a full battery.

        Returns:
            Snapshot of the new unit.

        Raises:
            DuplicateIdError: If the id is already tracked
            InvalidCoordinateError: If a coordinate is not finite
        """
        position = (x, y, z)
        if not is_finite_position(position):
            raise InvalidCoordinateError(f"Invalid position for unit {unit_id}: {position}")

        with self._lock:
            if unit_id in self._units:
                raise DuplicateIdError(unit_id)

            unit = Unit(
                unit_id,
                position,
                battery=self.config.initial_battery,
                low_battery_threshold=self.config.low_battery_threshold,
                is_simulated=simulated,
            )
            self._units[unit_id] = unit
            logger.info(f"Unit {unit_id} added at ({x}, {y}, {z})")
            return unit.snapshot()

    def remove_unit(self, unit_id: str) -> None:
        """Delete a unit and discard its tasks.

        Raises:
            UnitNotFoundError: If the id is not tracked
        """
        with self._lock:
            if unit_id not in self._units:
                raise UnitNotFoundError(unit_id)
            del self._units[unit_id]
            logger.info(f"Unit {unit_id} removed")

    def get_unit(self, unit_id: str) -> UnitSnapshot:
        """Get a snapshot of one unit.

        Raises:
            UnitNotFoundError: If the id is not tracked
        """
        with self._lock:
            return self._get(unit_id).snapshot()

    def assign_task(self, unit_id: str, spec: Union[TaskSpec, dict]) -> Task:
        """Translate a task spec into a task and queue it on a unit.

        Move, land and take-off publish the unit's target position
        immediately, not when the task is dequeued.

        Args:
            unit_id: Target unit
            spec: TaskSpec or ``{"type": ..., ...}`` record

        Returns:
            The queued task.

        Raises:
            UnitNotFoundError: If the id is not tracked
            UnknownTaskTypeError: If the discriminator is not recognized
            InvalidCoordinateError: If a coordinate or altitude is not finite
        """
        with self._lock:
            unit = self._get(unit_id)
            if isinstance(spec, dict):
                spec = TaskSpec.from_dict(spec)
            task = self._build_task(unit, spec)
            self._enqueue(unit, task)
            logger.info(f"Task assigned to unit {unit_id}: {task.summary()}")
            return task

    def execute_formation(self, pattern, options: Optional[dict] = None, **kwargs) -> list[Position]:
        """Send every unit to its slot in a formation.

        Positions are generated for the current unit count and handed out in
        insertion order, one move task per unit. If the generator returns
        fewer positions than units, the extra units are left untouched.

        Args:
            pattern: Pattern name or FormationType
            options: Formation options mapping or FormationOptions
            **kwargs: Extra formation options

        Returns:
            The generated positions.

        Raises:
            UnknownPatternError: If the pattern is not registered
            EmptyFleetError: If no units exist
            InvalidCoordinateError: If a generated position is not finite
        """
        with self._lock:
            self.formations.get(pattern)
            if not self._units:
                raise EmptyFleetError()

            positions = self.formations.generate(
                pattern, len(self._units), options, **kwargs
            )
            for position in positions:
                if not is_finite_position(position):
                    raise InvalidCoordinateError(f"Invalid formation position: {position}")
            for unit, position in zip(self._units.values(), positions):
                self._enqueue(unit, MoveTask(as_position(position)))

            name = getattr(pattern, "value", pattern)
            logger.info(f"Formation '{name}' executed with {len(positions)} units")
            return positions

    def emergency_land_all(self) -> None:
        """Abort everything and land every unit where it is.

        Each unit loses its queue and its current task, then gets a single
        land task at its current x, y.
        """
        with self._lock:
            logger.warning("EMERGENCY LANDING ALL UNITS")
            for unit in self._units.values():
                unit.clear_tasks()
                x, y, _ = unit.position
                self._enqueue(unit, LandTask((x, y, 0.0)))

    def set_status(self, unit_id: str, status: UnitStatus) -> None:
        """Force a unit's status.

        This is the only way a unit becomes LANDED or ERROR.

        Raises:
            UnitNotFoundError: If the id is not tracked
        """
        with self._lock:
            unit = self._get(unit_id)
            logger.info(f"Unit {unit_id}: status {unit.status.value} -> {status.value}")
            unit.status = status

    def start(self) -> None:
        """Mark the engine running so the scheduler ticks it."""
        with self._lock:
            if self._running:
                logger.warning("Fleet is already running")
                return
            self._running = True
            logger.info("Starting fleet")

    def stop(self) -> None:
        """Mark the engine stopped; no further scheduled ticks."""
        with self._lock:
            if not self._running:
                logger.warning("Fleet is not running")
                return
            self._running = False
            logger.info("Fleet stopped")

    def status(self) -> FleetStatus:
        """Get an immutable snapshot of the whole fleet."""
        with self._lock:
            return FleetStatus(
                total=len(self._units),
                running=self._running,
                units=tuple(unit.snapshot() for unit in self._units.values()),
            )

    def available_patterns(self) -> list[str]:
        """Names accepted by execute_formation()."""
        return self.formations.available_patterns()

    # Tick loop

    def tick(self, dt: Optional[float] = None) -> None:
        """Advance every unit by one fixed timestep.

        Args:
            dt: Simulated seconds for this tick. Uses config.tick_interval if None.
        """
        dt = self.config.tick_interval if dt is None else dt
        with self._lock:
            for unit in self._units.values():
                if unit.status == UnitStatus.FLYING or unit.current_task is not None:
                    self._advance_position(unit, dt)
                    unit.apply_battery_drain(self.config.battery_drain_per_tick)

                if unit.current_task is None:
                    unit.advance_queue()
            self._tick_count += 1

    def run_ticks(self, count: int, dt: Optional[float] = None) -> None:
        """Run ``count`` ticks back to back."""
        for _ in range(count):
            self.tick(dt)

    def _advance_position(self, unit: Unit, dt: float) -> None:
        """Move a unit toward its target, or snap and complete on arrival."""
        d = distance(unit.position, unit.target_position)
        if d < self.config.arrival_epsilon:
            unit.position = unit.target_position
            unit.complete_current_task()
        else:
            unit.position = step_toward(unit.position, unit.target_position, self.config.speed * dt)

    # Helpers

    def _get(self, unit_id: str) -> Unit:
        try:
            return self._units[unit_id]
        except KeyError:
            raise UnitNotFoundError(unit_id) from None

    def _build_task(self, unit: Unit, spec: TaskSpec) -> Task:
        x, y, _ = unit.position

        if spec.type == TaskType.MOVE:
            target = (spec.x, spec.y, spec.z)
            if not is_finite_position(target):
                raise InvalidCoordinateError(f"Invalid move target: {target}")
            return MoveTask((float(spec.x), float(spec.y), float(spec.z)))

        if spec.type == TaskType.HOVER:
            duration = self.config.default_hover_duration_ms if spec.duration is None else spec.duration
            return HoverTask(float(duration))

        if spec.type == TaskType.TAKEOFF:
            altitude = self.config.default_takeoff_altitude if spec.altitude is None else spec.altitude
            if not is_finite_position((x, y, altitude)):
                raise InvalidCoordinateError(f"Invalid take-off altitude: {altitude}")
            return TakeOffTask((x, y, float(altitude)))

        if spec.type == TaskType.LAND:
            return LandTask((x, y, 0.0))

        raise UnknownTaskTypeError(spec.type)

    def _enqueue(self, unit: Unit, task: Task) -> None:
        if task.target is not None:
            unit.target_position = task.target
        unit.enqueue_task(task)

    # Container protocol support

    def __len__(self) -> int:
        """Return number of units in the fleet."""
        return len(self._units)

    def __contains__(self, unit_id: str) -> bool:
        return unit_id in self._units

    def __iter__(self) -> Iterator[UnitSnapshot]:
        """Iterate over unit snapshots in insertion order."""
        return iter(self.status().units)

    def __repr__(self) -> str:
        """String representation."""
        return f"FleetEngine(num_units={len(self._units)}, running={self._running})"
