"""Formation geometry for unit fleets.

Provides pure generators that place N units in a named pattern. Every
generator returns positions in (x, y, z) with the same altitude for all
points of one call.

Available formations:
- CIRCLE: Evenly spaced on a circle
- LINE: Evenly spaced along the x axis
- SQUARE: Equal arc-length steps around a square perimeter
- TRIANGLE: Equal arc-length steps around an equilateral triangle
- HEART: Sampled from the classic parametric heart curve
- STAR: Stacked on alternating outer/inner spokes
- GRID: Square lattice, row-major, centered
- SPIRAL: Archimedean spiral from the center outward
"""

import logging
import math
import re
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Callable, Dict, List, Optional

from ..core.config import FormationDefaults
from ..core.errors import UnknownPatternError
from ..core.geometry import Position

logger = logging.getLogger(__name__)


class FormationType(Enum):
    """Built-in formation patterns."""
    CIRCLE = "circle"
    LINE = "line"
    SQUARE = "square"
    TRIANGLE = "triangle"
    HEART = "heart"
    STAR = "star"
    GRID = "grid"
    SPIRAL = "spiral"


@dataclass(frozen=True)
class FormationOptions:
    """Named parameters for formation generators.

    Any field left as None takes its value from FormationDefaults. Each
    generator reads only the fields it cares about.

    Attributes:
        altitude: Altitude of every point
        center_x, center_y: Formation center
        radius: Circle radius
        spacing: Neighbour distance (line, grid)
        start_x: First x of a line (default -count*spacing/2)
        y: y of a line
        size: Side length (square, triangle)
        scale: Heart scale
        outer_radius, inner_radius: Star tip and notch radii
        points: Number of star tips
        max_radius: Outermost spiral radius
        turns: Spiral revolutions
    """
    altitude: Optional[float] = None
    center_x: float = 0.0
    center_y: float = 0.0
    radius: Optional[float] = None
    spacing: Optional[float] = None
    start_x: Optional[float] = None
    y: float = 0.0
    size: Optional[float] = None
    scale: Optional[float] = None
    outer_radius: Optional[float] = None
    inner_radius: Optional[float] = None
    points: Optional[int] = None
    max_radius: Optional[float] = None
    turns: Optional[float] = None

    @classmethod
    def from_mapping(cls, options: Optional[dict] = None) -> "FormationOptions":
        """Build options from a keyword mapping.

        Accepts snake_case (``center_x``) and camelCase (``centerX``) keys.
        None values are ignored so the default applies.

        Raises:
            TypeError: If a key names no formation parameter
        """
        return cls(**_option_values(options or {}))

    def with_defaults(self, defaults: FormationDefaults) -> "FormationOptions":
        """Fill unset fields from defaults.

        ``start_x`` stays None because its default depends on the unit count.
        """
        updates = {}
        for f in fields(defaults):
            if getattr(self, f.name) is None:
                updates[f.name] = getattr(defaults, f.name)
        return replace(self, **updates)


_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake_case(name: str) -> str:
    return _CAMEL_RE.sub("_", name).lower()


def _option_values(options: dict) -> dict:
    """Normalize option keys to field names, dropping None values."""
    known = {f.name for f in fields(FormationOptions)}
    values = {}
    for key, value in options.items():
        name = _snake_case(key)
        if name not in known:
            raise TypeError(f"Unknown formation option: {key}")
        if value is not None:
            values[name] = value
    return values


# Generator signature: (count, resolved options) -> positions
FormationGenerator = Callable[[int, FormationOptions], List[Position]]


def circle_formation(count: int, opts: FormationOptions) -> List[Position]:
    """Evenly spaced on a circle, starting on the +x axis."""
    positions = []
    angle_step = 2 * math.pi / count
    for i in range(count):
        angle = i * angle_step
        positions.append((
            opts.center_x + opts.radius * math.cos(angle),
            opts.center_y + opts.radius * math.sin(angle),
            opts.altitude,
        ))
    return positions


def line_formation(count: int, opts: FormationOptions) -> List[Position]:
    """Colinear along x at fixed y."""
    start_x = opts.start_x
    if start_x is None:
        start_x = -(count * opts.spacing) / 2
    return [(start_x + i * opts.spacing, opts.y, opts.altitude) for i in range(count)]


def square_formation(count: int, opts: FormationOptions) -> List[Position]:
    """Perimeter walk of a square.

    Starts at the top-left corner and walks top -> right -> bottom -> left,
    one step of 4*size/count per unit.
    """
    size = opts.size
    half = size / 2
    cx, cy = opts.center_x, opts.center_y
    step = 4 * size / count

    positions = []
    for i in range(count):
        d = i * step
        if d < size:
            x, y = cx - half + d, cy + half
        elif d < 2 * size:
            x, y = cx + half, cy + half - (d - size)
        elif d < 3 * size:
            x, y = cx + half - (d - 2 * size), cy - half
        else:
            x, y = cx - half, cy - half + (d - 3 * size)
        positions.append((x, y, opts.altitude))
    return positions


def triangle_formation(count: int, opts: FormationOptions) -> List[Position]:
    """Perimeter walk of an equilateral triangle.

    Vertices sit at the top (cx, cy + 2h/3) and the bottom corners
    (cx -/+ size/2, cy - h/3); the walk goes top -> bottom-right ->
    bottom-left -> top.
    """
    size = opts.size
    if size <= 0:
        raise ValueError("Triangle formation needs a positive size")
    height = size * math.sqrt(3) / 2
    cx, cy = opts.center_x, opts.center_y
    top = (cx, cy + height * 2 / 3)
    bottom_left = (cx - size / 2, cy - height / 3)
    bottom_right = (cx + size / 2, cy - height / 3)
    sides = [(top, bottom_right), (bottom_right, bottom_left), (bottom_left, top)]

    step = 3 * size / count
    positions = []
    for i in range(count):
        d = i * step
        side = min(int(d // size), 2)
        t = (d - side * size) / size
        (x0, y0), (x1, y1) = sides[side]
        positions.append((x0 + t * (x1 - x0), y0 + t * (y1 - y0), opts.altitude))
    return positions


def heart_formation(count: int, opts: FormationOptions) -> List[Position]:
    """Classic parametric heart, scaled by scale/16.

    The center offset is added after scaling, so (center_x, center_y) is the
    true center of the heart. Adding it before the /16 scaling, as older
    versions of this pattern did, shrank the offset to center/16.
    """
    k = opts.scale / 16
    positions = []
    for i in range(count):
        t = (i / count) * 2 * math.pi
        x = 16 * math.sin(t) ** 3
        y = 13 * math.cos(t) - 5 * math.cos(2 * t) - 2 * math.cos(3 * t) - math.cos(4 * t)
        positions.append((opts.center_x + k * x, opts.center_y + k * y, opts.altitude))
    return positions


def star_formation(count: int, opts: FormationOptions) -> List[Position]:
    """Units stacked on 2*points spokes alternating outer and inner radius.

    Each spoke takes ceil(count / spokes) units; every further unit on a
    spoke sits 10% closer to the center.
    """
    points = int(opts.points)
    if points < 1:
        raise ValueError("Star formation needs at least one point")

    spokes = 2 * points
    angle_step = 2 * math.pi / spokes
    per_spoke = math.ceil(count / spokes)

    positions = []
    for i in range(spokes):
        if len(positions) >= count:
            break
        angle = i * angle_step
        radius = opts.outer_radius if i % 2 == 0 else opts.inner_radius
        for j in range(per_spoke):
            if len(positions) >= count:
                break
            r = radius * (1 - j * 0.1)
            positions.append((
                opts.center_x + r * math.cos(angle),
                opts.center_y + r * math.sin(angle),
                opts.altitude,
            ))
    return positions[:count]


def grid_formation(count: int, opts: FormationOptions) -> List[Position]:
    """Square lattice of side ceil(sqrt(count)), filled row by row."""
    side = math.ceil(math.sqrt(count))
    width = (side - 1) * opts.spacing
    start_x = opts.center_x - width / 2
    start_y = opts.center_y - width / 2

    positions = []
    for i in range(count):
        row, col = divmod(i, side)
        positions.append((
            start_x + col * opts.spacing,
            start_y + row * opts.spacing,
            opts.altitude,
        ))
    return positions


def spiral_formation(count: int, opts: FormationOptions) -> List[Position]:
    """Archimedean spiral: angle and radius both grow linearly with i."""
    positions = []
    for i in range(count):
        frac = i / count
        t = frac * opts.turns * 2 * math.pi
        r = frac * opts.max_radius
        positions.append((
            opts.center_x + r * math.cos(t),
            opts.center_y + r * math.sin(t),
            opts.altitude,
        ))
    return positions


_BUILTIN_GENERATORS: Dict[FormationType, FormationGenerator] = {
    FormationType.CIRCLE: circle_formation,
    FormationType.LINE: line_formation,
    FormationType.SQUARE: square_formation,
    FormationType.TRIANGLE: triangle_formation,
    FormationType.HEART: heart_formation,
    FormationType.STAR: star_formation,
    FormationType.GRID: grid_formation,
    FormationType.SPIRAL: spiral_formation,
}


class FormationLibrary:
    """Registry of named formation generators.

    Example:
        library = FormationLibrary()
        positions = library.generate("circle", 6, radius=15)
        for i, (x, y, z) in enumerate(positions):
            print(f"Unit {i}: x={x:.1f}, y={y:.1f}, alt={z:.1f}")
    """

    def __init__(self, defaults: Optional[FormationDefaults] = None):
        self.defaults = defaults or FormationDefaults()
        self._generators: Dict[str, FormationGenerator] = {
            formation_type.value: generator
            for formation_type, generator in _BUILTIN_GENERATORS.items()
        }

    def register(self, name: str, generator: FormationGenerator) -> None:
        """Register (or replace) a generator under a name."""
        if name in self._generators:
            logger.warning(f"Replacing formation generator '{name}'")
        self._generators[name] = generator

    def available_patterns(self) -> List[str]:
        """Registered pattern names in registration order."""
        return list(self._generators)

    def get(self, name) -> FormationGenerator:
        """Look up a generator.

        Raises:
            UnknownPatternError: If nothing is registered under the name
        """
        if isinstance(name, FormationType):
            name = name.value
        try:
            return self._generators[name]
        except KeyError:
            raise UnknownPatternError(name) from None

    def __contains__(self, name) -> bool:
        if isinstance(name, FormationType):
            name = name.value
        return name in self._generators

    def generate(self, name, count: int, options=None, **kwargs) -> List[Position]:
        """Compute positions for ``count`` units.

        Args:
            name: Pattern name or FormationType
            count: Number of units
            options: FormationOptions or a keyword mapping
            **kwargs: Extra options, override ``options``

        Returns:
            List of (x, y, z) tuples; empty when count <= 0

        Raises:
            UnknownPatternError: If the pattern is not registered
            TypeError: If an option name is not recognized
        """
        generator = self.get(name)
        if count <= 0:
            return []

        if isinstance(options, FormationOptions):
            opts = replace(options, **_option_values(kwargs))
        else:
            merged = dict(options or {})
            merged.update(kwargs)
            opts = FormationOptions.from_mapping(merged)

        return generator(count, opts.with_defaults(self.defaults))


def get_formation_positions(
    formation,
    count: int,
    altitude: Optional[float] = None,
    **options,
) -> List[Position]:
    """Convenience function for quick formation calculation.

    Args:
        formation: Pattern name or FormationType
        count: Number of units
        altitude: Formation altitude
        **options: Generator-specific options (radius, spacing, ...)

    Returns:
        List of (x, y, z) positions

    Example:
        positions = get_formation_positions(FormationType.GRID, 9, spacing=5)
    """
    return FormationLibrary().generate(formation, count, altitude=altitude, **options)
