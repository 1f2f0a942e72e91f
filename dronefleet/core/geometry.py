"""Vector helpers for unit kinematics."""

import numpy as np
from typing import Tuple

# Position tuple: (x, y, z), z = altitude
Position = Tuple[float, float, float]


def as_position(values) -> Position:
    """Convert any 3-element sequence or array into a plain float tuple."""
    x, y, z = values
    return (float(x), float(y), float(z))


def is_finite_position(values) -> bool:
    """Check that every coordinate is a finite number.

    Args:
        values: 3-element sequence of coordinates

    Returns:
        True if no coordinate is NaN or infinite
    """
    try:
        arr = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError):
        return False
    return arr.shape == (3,) and bool(np.all(np.isfinite(arr)))


def distance(a: Position, b: Position) -> float:
    """Euclidean distance between two positions."""
    return float(np.linalg.norm(np.asarray(b, dtype=np.float64) - np.asarray(a, dtype=np.float64)))


def step_toward(current: Position, target: Position, step: float) -> Position:
    """Move ``step`` units from current along the straight line to target.

    The step is not clamped: if ``step`` exceeds the remaining distance the
    result lies past the target.

    Args:
        current: Start position
        target: Position to move toward
        step: Distance to travel

    Returns:
        New position. ``current`` unchanged if the points coincide.
    """
    start = np.asarray(current, dtype=np.float64)
    delta = np.asarray(target, dtype=np.float64) - start
    dist = np.linalg.norm(delta)
    if dist == 0.0:
        return as_position(start)
    return as_position(start + delta * (step / dist))
