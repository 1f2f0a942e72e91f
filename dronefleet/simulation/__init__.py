"""Simulation runtime around the fleet engine.

Provides:
- TickScheduler: background thread ticking the engine at a fixed cadence
- FleetSimulator: seeded simulated fleets and scripted demos
- CommandShell: text commands for the interactive mode
- Status rendering helpers
"""

from .scheduler import TickScheduler
from .display import render_status, render_table, render_grid
from .shell import CommandShell
from .simulator import FleetSimulator

__all__ = [
    "TickScheduler",
    "render_status",
    "render_table",
    "render_grid",
    "CommandShell",
    "FleetSimulator",
]
