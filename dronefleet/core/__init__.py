"""Core fleet components."""

from .config import EngineConfig, FormationDefaults, SimulatorConfig
from .errors import (
    FleetError,
    DuplicateIdError,
    UnitNotFoundError,
    UnknownTaskTypeError,
    UnknownPatternError,
    EmptyFleetError,
    InvalidCoordinateError,
)
from .geometry import Position
from .tasks import TaskType, TaskSpec, Task, MoveTask, HoverTask, LandTask, TakeOffTask
from .unit import Unit, UnitStatus, UnitSnapshot
from .engine import FleetEngine, FleetStatus

__all__ = [
    "EngineConfig",
    "FormationDefaults",
    "SimulatorConfig",
    "FleetError",
    "DuplicateIdError",
    "UnitNotFoundError",
    "UnknownTaskTypeError",
    "UnknownPatternError",
    "EmptyFleetError",
    "InvalidCoordinateError",
    "Position",
    "TaskType",
    "TaskSpec",
    "Task",
    "MoveTask",
    "HoverTask",
    "LandTask",
    "TakeOffTask",
    "Unit",
    "UnitStatus",
    "UnitSnapshot",
    "FleetEngine",
    "FleetStatus",
]
