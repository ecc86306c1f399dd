"""Rounded-rectangle centerline generation."""

from __future__ import annotations

import math

import pytest

from horse_race.track.centerline import CenterlineGenerator, generate_centerline
from horse_race.track.errors import InvalidGeometry
from horse_race.track.models import Bounds, Point

BOUNDS = Bounds(x=100, y=100, width=800, height=400)


def _shoelace(points: list[Point]) -> float:
    """Signed area; positive means clockwise on a y-down canvas."""
    return sum(a.x * b.y - b.x * a.y for a, b in zip(points, points[1:])) / 2


def _perimeter(points: list[Point]) -> float:
    return sum(a.distance_to(b) for a, b in zip(points, points[1:]))


# ---------------------------------------------------------------------------
# Shape
# ---------------------------------------------------------------------------

class TestCenterlineShape:
    def test_polyline_is_explicitly_closed(self):
        points = generate_centerline(BOUNDS, corner_radius=120)
        assert points[0] == points[-1]

    def test_starts_at_leftmost_point_of_top_left_corner(self):
        first = generate_centerline(BOUNDS, corner_radius=120)[0]
        assert first.x == pytest.approx(100.0)
        assert first.y == pytest.approx(220.0)

    def test_winding_is_clockwise_on_screen(self):
        points = generate_centerline(BOUNDS, corner_radius=120)
        assert _shoelace(points) > 0

    def test_every_point_stays_inside_bounds(self):
        for p in generate_centerline(BOUNDS, corner_radius=120):
            assert 100 - 1e-9 <= p.x <= 900 + 1e-9
            assert 100 - 1e-9 <= p.y <= 500 + 1e-9

    def test_perimeter_matches_rounded_rectangle(self):
        r = 120
        expected = 2 * (800 - 2 * r) + 2 * (400 - 2 * r) + 2 * math.pi * r
        points = generate_centerline(BOUNDS, corner_radius=r)
        assert _perimeter(points) == pytest.approx(expected, rel=1e-3)

    def test_no_consecutive_duplicate_points(self):
        points = generate_centerline(BOUNDS, corner_radius=120)
        for a, b in zip(points, points[1:]):
            assert a.distance_to(b) > 1e-9

    def test_zero_radius_gives_plain_rectangle(self):
        points = generate_centerline(BOUNDS, corner_radius=0)
        assert _perimeter(points) == pytest.approx(2400.0)
        assert points[0] == points[-1]

    def test_maximum_radius_collapses_short_sides(self):
        """r == min(w, h) / 2 is allowed and yields a stadium shape."""
        points = generate_centerline(BOUNDS, corner_radius=200)
        expected = 2 * (800 - 400) + 2 * math.pi * 200
        assert _perimeter(points) == pytest.approx(expected, rel=1e-3)

    def test_more_segments_means_more_points(self):
        coarse = CenterlineGenerator(segments=80).generate(BOUNDS, 120)
        fine = CenterlineGenerator(segments=400).generate(BOUNDS, 120)
        assert len(fine) > len(coarse)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class TestCenterlineValidation:
    def test_radius_above_half_the_short_side_raises(self):
        with pytest.raises(InvalidGeometry):
            generate_centerline(BOUNDS, corner_radius=201)

    def test_negative_radius_raises(self):
        with pytest.raises(InvalidGeometry):
            generate_centerline(BOUNDS, corner_radius=-1)

    def test_zero_area_bounds_raise(self):
        with pytest.raises(InvalidGeometry):
            generate_centerline(Bounds(0, 0, 0, 100), corner_radius=0)

    def test_too_few_segments_raise(self):
        with pytest.raises(InvalidGeometry):
            CenterlineGenerator(segments=4)

    def test_invalid_geometry_is_a_value_error(self):
        with pytest.raises(ValueError):
            generate_centerline(BOUNDS, corner_radius=1000)
