"""Unit tests for formation geometry.

These tests verify every built-in generator, option handling and the
formation registry without running the engine.

Run with: python scripts/run_tests.py --unit
"""

import math

import pytest

from dronefleet.core import FormationDefaults, UnknownPatternError
from dronefleet.coordination import (
    FormationLibrary,
    FormationOptions,
    FormationType,
    get_formation_positions,
)


@pytest.fixture
def library():
    return FormationLibrary()


class TestFormationCounts:
    """Every pattern returns exactly count positions, deterministically."""

    @pytest.mark.parametrize("formation_type", list(FormationType))
    @pytest.mark.parametrize("count", [1, 2, 3, 7, 10, 13, 25])
    def test_exact_count(self, library, formation_type, count):
        """Test each generator yields one position per unit."""
        positions = library.generate(formation_type, count)
        assert len(positions) == count

    @pytest.mark.parametrize("formation_type", list(FormationType))
    def test_deterministic(self, library, formation_type):
        """Test repeated calls with identical options give identical output."""
        options = {"altitude": 12.0, "center_x": 3.0, "center_y": -4.0}
        first = library.generate(formation_type, 9, options)
        second = library.generate(formation_type, 9, options)
        assert first == second

    @pytest.mark.parametrize("formation_type", list(FormationType))
    def test_constant_altitude(self, library, formation_type):
        """Test all points of one call share the configured altitude."""
        positions = library.generate(formation_type, 11, altitude=22.5)
        assert all(z == 22.5 for _, _, z in positions)

    @pytest.mark.parametrize("formation_type", list(FormationType))
    def test_default_altitude(self, library, formation_type):
        """Test the default altitude is 15."""
        positions = library.generate(formation_type, 4)
        assert all(z == 15.0 for _, _, z in positions)

    def test_zero_units(self, library):
        """Test zero units returns an empty list."""
        assert library.generate("circle", 0) == []


class TestCircle:
    """Tests for circle formation."""

    def test_points_on_radius(self, library):
        """Test every point lies on the circle."""
        positions = library.generate("circle", 8, radius=12.0, center_x=5.0, center_y=-3.0)
        for x, y, _ in positions:
            assert math.hypot(x - 5.0, y + 3.0) == pytest.approx(12.0)

    def test_default_radius(self, library):
        """Test the default radius is 20 centered at the origin."""
        positions = library.generate("circle", 6)
        for x, y, _ in positions:
            assert math.hypot(x, y) == pytest.approx(20.0)

    def test_even_angular_spacing(self, library):
        """Test first point on +x axis and quarter turns for 4 units."""
        positions = library.generate("circle", 4, radius=10.0)
        assert positions[0][:2] == pytest.approx((10.0, 0.0))
        assert positions[1][:2] == pytest.approx((0.0, 10.0), abs=1e-9)
        assert positions[2][:2] == pytest.approx((-10.0, 0.0), abs=1e-9)
        assert positions[3][:2] == pytest.approx((0.0, -10.0), abs=1e-9)


class TestLine:
    """Tests for line formation."""

    def test_default_start(self, library):
        """Test default start is -count*spacing/2."""
        positions = library.generate("line", 3, spacing=5.0)
        xs = [p[0] for p in positions]
        assert xs == [-7.5, -2.5, 2.5]

    def test_custom_start_and_y(self, library):
        """Test explicit start_x and y."""
        positions = library.generate("line", 3, start_x=0.0, y=4.0, spacing=2.0)
        assert positions == [(0.0, 4.0, 15.0), (2.0, 4.0, 15.0), (4.0, 4.0, 15.0)]

    def test_explicit_zero_is_honoured(self, library):
        """Test start_x=0 is not replaced by the default."""
        positions = library.generate("line", 4, start_x=0)
        assert positions[0][0] == 0


class TestSquare:
    """Tests for square perimeter formation."""

    def test_four_units_at_corners(self, library):
        """Test 4 units land on the 4 corners in top-right-bottom-left order."""
        positions = library.generate("square", 4, size=20.0)
        assert [p[:2] for p in positions] == [
            (-10.0, 10.0),
            (10.0, 10.0),
            (10.0, -10.0),
            (-10.0, -10.0),
        ]

    def test_eight_units_include_midpoints(self, library):
        """Test 8 units add the side midpoints."""
        positions = library.generate("square", 8, size=20.0)
        assert positions[1][:2] == pytest.approx((0.0, 10.0))
        assert positions[3][:2] == pytest.approx((10.0, 0.0))
        assert positions[5][:2] == pytest.approx((0.0, -10.0))
        assert positions[7][:2] == pytest.approx((-10.0, 0.0))

    def test_points_on_perimeter(self, library):
        """Test every point lies on the square boundary."""
        positions = library.generate("square", 13, size=10.0, center_x=1.0, center_y=1.0)
        for x, y, _ in positions:
            on_vertical = abs(abs(x - 1.0) - 5.0) < 1e-9 and abs(y - 1.0) <= 5.0 + 1e-9
            on_horizontal = abs(abs(y - 1.0) - 5.0) < 1e-9 and abs(x - 1.0) <= 5.0 + 1e-9
            assert on_vertical or on_horizontal


class TestTriangle:
    """Tests for triangle perimeter formation."""

    def test_three_units_at_vertices(self, library):
        """Test 3 units sit on top, bottom-right and bottom-left vertices."""
        height = 20.0 * math.sqrt(3) / 2
        positions = library.generate("triangle", 3, size=20.0)
        assert positions[0][:2] == pytest.approx((0.0, height * 2 / 3))
        assert positions[1][:2] == pytest.approx((10.0, -height / 3))
        assert positions[2][:2] == pytest.approx((-10.0, -height / 3))

    def test_equal_side_lengths(self, library):
        """Test the vertices form an equilateral triangle."""
        a, b, c = [p[:2] for p in library.generate("triangle", 3, size=12.0)]
        sides = [math.dist(a, b), math.dist(b, c), math.dist(c, a)]
        assert sides == pytest.approx([12.0, 12.0, 12.0])

    @pytest.mark.parametrize("size", [0, -5.0])
    def test_invalid_size(self, library, size):
        """Test a zero or negative size is rejected instead of dividing by zero."""
        with pytest.raises(ValueError, match="positive size"):
            library.generate("triangle", 3, size=size)


class TestHeart:
    """Tests for heart curve formation."""

    def test_first_point(self, library):
        """Test t=0 gives (0, 5*scale/16)."""
        positions = library.generate("heart", 4, scale=16.0)
        assert positions[0][:2] == pytest.approx((0.0, 5.0))

    def test_quarter_point(self, library):
        """Test t=pi/2 gives (16, 4) at scale 16."""
        positions = library.generate("heart", 4, scale=16.0)
        assert positions[1][:2] == pytest.approx((16.0, 4.0))

    def test_center_offset(self, library):
        """Test center shifts every point by exactly the center."""
        base = library.generate("heart", 6, scale=10.0)
        shifted = library.generate("heart", 6, scale=10.0, center_x=3.0, center_y=-2.0)
        for (x0, y0, _), (x1, y1, _) in zip(base, shifted):
            assert x1 - x0 == pytest.approx(3.0)
            assert y1 - y0 == pytest.approx(-2.0)


class TestStar:
    """Tests for star formation."""

    def test_one_unit_per_spoke(self, library):
        """Test 10 units on a 5-point star alternate outer and inner radius."""
        positions = library.generate("star", 10, outer_radius=20.0, inner_radius=10.0, points=5)
        radii = [math.hypot(x, y) for x, y, _ in positions]
        assert radii == pytest.approx([20.0, 10.0] * 5)

    def test_stacked_units_pulled_inward(self, library):
        """Test the second unit on a spoke sits 10% closer to center."""
        positions = library.generate("star", 12, outer_radius=20.0, inner_radius=10.0, points=5)
        radii = [math.hypot(x, y) for x, y, _ in positions]
        assert radii[:4] == pytest.approx([20.0, 18.0, 10.0, 9.0])
        assert len(positions) == 12

    def test_same_angle_on_spoke(self, library):
        """Test units stacked on one spoke share its angle."""
        positions = library.generate("star", 20, points=5)
        a0 = math.atan2(positions[0][1], positions[0][0])
        a1 = math.atan2(positions[1][1], positions[1][0])
        assert a0 == pytest.approx(a1)

    def test_invalid_points(self, library):
        """Test a star needs at least one point."""
        with pytest.raises(ValueError):
            library.generate("star", 5, points=0)


class TestGrid:
    """Tests for grid formation."""

    def test_3x3_lattice(self, library):
        """Test 9 units form a 3x3 lattice centered at the origin."""
        positions = library.generate("grid", 9, spacing=5.0)
        assert (-5.0, -5.0, 15.0) in positions
        assert set(p[0] for p in positions) == {-5.0, 0.0, 5.0}
        assert set(p[1] for p in positions) == {-5.0, 0.0, 5.0}

    def test_row_major_order(self, library):
        """Test positions fill rows first."""
        positions = library.generate("grid", 4, spacing=2.0)
        assert [p[:2] for p in positions] == [(-1.0, -1.0), (1.0, -1.0), (-1.0, 1.0), (1.0, 1.0)]

    def test_partial_grid(self, library):
        """Test 5 units use a 3-wide lattice."""
        positions = library.generate("grid", 5, spacing=5.0)
        assert len(set(positions)) == 5
        assert positions[3][:2] == (-5.0, 0.0)


class TestSpiral:
    """Tests for spiral formation."""

    def test_starts_at_center(self, library):
        """Test first unit sits on the center."""
        positions = library.generate("spiral", 5, center_x=2.0, center_y=3.0)
        assert positions[0] == (2.0, 3.0, 15.0)

    def test_radius_grows_linearly(self, library):
        """Test radius of unit i is i/count*max_radius."""
        positions = library.generate("spiral", 5, max_radius=25.0)
        radii = [math.hypot(x, y) for x, y, _ in positions]
        assert radii == pytest.approx([0.0, 5.0, 10.0, 15.0, 20.0], abs=1e-9)

    def test_half_turn(self, library):
        """Test unit 2 of 4 with 3 turns lands on the -x axis."""
        positions = library.generate("spiral", 4, max_radius=25.0, turns=3)
        assert positions[2][:2] == pytest.approx((-12.5, 0.0), abs=1e-9)


class TestFormationOptions:
    """Tests for option parsing and defaults."""

    def test_camel_case_keys(self):
        """Test camelCase keys map onto fields."""
        opts = FormationOptions.from_mapping({"centerX": 1.0, "outerRadius": 30.0, "maxRadius": 5})
        assert opts.center_x == 1.0
        assert opts.outer_radius == 30.0
        assert opts.max_radius == 5

    def test_unknown_option(self):
        """Test unknown option names are rejected."""
        with pytest.raises(TypeError):
            FormationOptions.from_mapping({"wingspan": 3})

    def test_none_uses_default(self, library):
        """Test None values fall back to defaults."""
        positions = library.generate("circle", 3, radius=None)
        assert math.hypot(*positions[0][:2]) == pytest.approx(20.0)

    def test_custom_defaults(self):
        """Test library-level defaults apply to every call."""
        library = FormationLibrary(FormationDefaults(altitude=40.0, radius=5.0))
        positions = library.generate("circle", 3)
        assert positions[0] == pytest.approx((5.0, 0.0, 40.0))

    def test_options_object_with_overrides(self, library):
        """Test FormationOptions plus keyword overrides."""
        opts = FormationOptions(radius=3.0, altitude=7.0)
        positions = library.generate("circle", 2, opts, altitude=9.0)
        assert positions[0] == pytest.approx((3.0, 0.0, 9.0))


class TestFormationLibrary:
    """Tests for the formation registry."""

    def test_builtin_patterns(self, library):
        """Test all eight built-in patterns are registered in order."""
        assert library.available_patterns() == [
            "circle", "line", "square", "triangle", "heart", "star", "grid", "spiral",
        ]

    def test_unknown_pattern(self, library):
        """Test unknown names fail at lookup."""
        with pytest.raises(UnknownPatternError):
            library.generate("hexagon", 3)

    def test_unknown_pattern_even_for_zero_units(self, library):
        """Test lookup failure wins over the empty result."""
        with pytest.raises(UnknownPatternError):
            library.generate("hexagon", 0)

    def test_register_custom(self, library):
        """Test registering a new generator."""
        library.register("stack", lambda count, opts: [(0.0, 0.0, float(i)) for i in range(count)])
        assert "stack" in library
        assert library.generate("stack", 3) == [(0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 2.0)]

    def test_convenience_function(self):
        """Test get_formation_positions matches the library."""
        positions = get_formation_positions(FormationType.GRID, 9, spacing=5.0)
        assert positions == FormationLibrary().generate("grid", 9, spacing=5.0)

    def test_convenience_altitude(self):
        """Test altitude keyword of the convenience function."""
        positions = get_formation_positions("line", 2, altitude=3.0)
        assert all(p[2] == 3.0 for p in positions)
