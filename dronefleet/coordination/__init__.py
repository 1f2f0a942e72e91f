"""Coordination modules for fleet behaviors.

This package provides:
- Formation geometry (circle, line, square, triangle, heart, star, grid, spiral)
- A registry of named formation generators
"""

from .formations import (
    FormationType,
    FormationOptions,
    FormationLibrary,
    FormationGenerator,
    get_formation_positions,
)

__all__ = [
    "FormationType",
    "FormationOptions",
    "FormationLibrary",
    "FormationGenerator",
    "get_formation_positions",
]
