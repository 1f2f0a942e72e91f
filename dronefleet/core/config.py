"""Configuration management for the fleet simulation."""

import os
from dataclasses import dataclass, fields
from typing import Optional


def _env_overrides(cls, prefix: str) -> dict:
    """Collect dataclass field overrides from environment variables.

    A field ``tick_interval`` is read from ``<prefix>TICK_INTERVAL`` and
    converted with the type of the field's default value.
    """
    overrides = {}
    for f in fields(cls):
        raw = os.environ.get(f"{prefix}{f.name.upper()}")
        if raw is None or raw == "":
            continue
        default = f.default
        if isinstance(default, bool):
            overrides[f.name] = raw.lower() in ("1", "true", "yes")
        elif isinstance(default, int):
            overrides[f.name] = int(raw)
        elif isinstance(default, float):
            overrides[f.name] = float(raw)
        elif f.name == "seed":
            overrides[f.name] = int(raw)
        else:
            overrides[f.name] = raw
    return overrides


@dataclass
class EngineConfig:
    """Configuration for the fleet tick engine.

    Attributes:
        tick_interval: Simulated seconds per tick, also the scheduler cadence
        speed: Unit travel speed (length units per simulated second)
        arrival_epsilon: Distance below which a unit snaps to its target
        battery_drain_per_tick: Battery percent consumed by each moving tick
        low_battery_threshold: Battery level at or below which a unit is LOW_BATTERY
        initial_battery: Battery level of a newly added unit
        default_hover_duration_ms: Hover duration when a task spec omits it
        default_takeoff_altitude: Take-off altitude when a task spec omits it
    """

    tick_interval: float = 0.1  # seconds
    speed: float = 1.0  # units/s
    arrival_epsilon: float = 0.5
    battery_drain_per_tick: float = 0.1  # percent
    low_battery_threshold: float = 10.0  # percent
    initial_battery: float = 100.0  # percent
    default_hover_duration_ms: float = 5000.0
    default_takeoff_altitude: float = 10.0

    def __post_init__(self):
        """Validate configuration."""
        if self.tick_interval <= 0:
            raise ValueError("tick_interval must be positive")
        if self.speed <= 0:
            raise ValueError("speed must be positive")
        if self.arrival_epsilon <= 0:
            raise ValueError("arrival_epsilon must be positive")
        if self.battery_drain_per_tick < 0:
            raise ValueError("battery_drain_per_tick must not be negative")
        if not 0 <= self.low_battery_threshold <= self.initial_battery:
            raise ValueError(
                "low_battery_threshold must be within [0, initial_battery]"
            )

    @classmethod
    def from_env(cls, prefix: str = "FLEET_") -> "EngineConfig":
        """Create config with overrides from ``FLEET_*`` environment variables."""
        return cls(**_env_overrides(cls, prefix))


@dataclass
class FormationDefaults:
    """Default parameters shared by the formation generators.

    Attributes:
        altitude: Altitude of every formation point
        radius: Circle radius
        spacing: Distance between neighbours in line and grid
        size: Side length of square and triangle
        scale: Heart curve scale
        outer_radius: Star tip radius
        inner_radius: Star notch radius
        points: Number of star tips
        max_radius: Outermost spiral radius
        turns: Number of spiral revolutions
    """

    altitude: float = 15.0
    radius: float = 20.0
    spacing: float = 5.0
    size: float = 20.0
    scale: float = 10.0
    outer_radius: float = 20.0
    inner_radius: float = 10.0
    points: int = 5
    max_radius: float = 25.0
    turns: float = 3.0


@dataclass
class SimulatorConfig:
    """Configuration for the interactive simulator.

    Attributes:
        num_units: Number of simulated units created on startup
        spawn_extent: Units spawn uniformly in [-extent, extent] on x and y
        id_prefix: Prefix of generated unit ids (``drone_1``, ``drone_2``, ...)
        seed: Random seed for reproducible spawn positions
        display_interval: Seconds between status refreshes
    """

    num_units: int = 8
    spawn_extent: float = 10.0
    id_prefix: str = "drone_"
    seed: Optional[int] = None
    display_interval: float = 1.0

    def __post_init__(self):
        """Validate configuration."""
        if self.num_units < 0:
            raise ValueError("num_units must not be negative")
        if self.display_interval <= 0:
            raise ValueError("display_interval must be positive")

    @classmethod
    def from_env(cls, prefix: str = "FLEET_") -> "SimulatorConfig":
        """Create config with overrides from ``FLEET_*`` environment variables."""
        return cls(**_env_overrides(cls, prefix))

    def unit_id(self, index: int) -> str:
        """Generate the id of the index-th simulated unit (1-based)."""
        return f"{self.id_prefix}{index}"
