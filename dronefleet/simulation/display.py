"""Plain-text rendering of fleet status."""

import math

from ..core.engine import FleetStatus
from ..core.unit import UnitStatus

STATUS_SYMBOLS = {
    UnitStatus.FLYING: "F",
    UnitStatus.IDLE: "I",
    UnitStatus.LOW_BATTERY: "B",
    UnitStatus.LANDED: "L",
    UnitStatus.ERROR: "E",
}
EMPTY_CELL = "."


def render_header(status: FleetStatus) -> str:
    state = "RUNNING" if status.running else "STOPPED"
    return f"Status: {state}\nTotal Units: {status.total}"


def render_table(status: FleetStatus) -> str:
    """Tabulate id, position, status, battery and queued tasks per unit."""
    lines = [
        "ID        | Position            | Status      | Battery | Tasks",
        "----------|---------------------|-------------|---------|------",
    ]
    for unit in status.units:
        x, y, z = unit.position
        pos = f"({x:.1f},{y:.1f},{z:.1f})"
        battery = f"{unit.battery:.1f}%"
        lines.append(
            f"{unit.id:<9} | {pos:<19} | {unit.status.value:<11} | {battery:<7} | {unit.tasks_remaining}"
        )
    return "\n".join(lines)


def render_grid(status: FleetStatus, size: int = 20, extent: float = 25.0) -> str:
    """Top-down character map of unit x, y positions.

    Positions in [-extent, extent) on both axes map onto a size x size grid;
    units outside are not drawn. Row 0 is the lowest y.
    """
    grid = [[EMPTY_CELL] * size for _ in range(size)]
    for unit in status.units:
        x, y, _ = unit.position
        col = math.floor((x + extent) / (2 * extent) * size)
        row = math.floor((y + extent) / (2 * extent) * size)
        if 0 <= col < size and 0 <= row < size:
            grid[row][col] = STATUS_SYMBOLS.get(unit.status, "?")
    return "\n".join(" ".join(row) for row in grid)


def render_status(status: FleetStatus, show_grid: bool = True) -> str:
    """Full status screen: header, optional grid and the unit table."""
    parts = [render_header(status)]
    if show_grid:
        legend = ", ".join(f"{sym}={st.value}" for st, sym in STATUS_SYMBOLS.items())
        parts.append(f"Grid View ({legend}):\n{render_grid(status)}")
    parts.append(f"Unit Details:\n{render_table(status)}")
    return "\n\n".join(parts)
