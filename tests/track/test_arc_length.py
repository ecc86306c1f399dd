"""Arc-length parameterisation and distance queries."""

from __future__ import annotations

import math

import pytest

from horse_race.track.arc_length import ArcLengthPath, track_profile
from horse_race.track.centerline import generate_centerline
from horse_race.track.errors import InvalidGeometry
from horse_race.track.models import Bounds, Point

SQUARE = [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10), Point(0, 0)]


@pytest.fixture
def square() -> ArcLengthPath:
    return ArcLengthPath(SQUARE)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def test_cumulative_lengths(square):
    assert square.arc_lengths == (0.0, 10.0, 20.0, 30.0, 40.0)
    assert square.total_length == 40.0


def test_duplicate_points_are_removed():
    path = ArcLengthPath([Point(0, 0), Point(0, 0), Point(10, 0), Point(10, 0)])
    assert path.points == (Point(0, 0), Point(10, 0))
    assert path.total_length == 10.0


def test_arc_lengths_strictly_increase_on_generated_track():
    path = ArcLengthPath(generate_centerline(Bounds(100, 100, 800, 400), 120))
    assert path.arc_lengths[0] == 0.0
    for a, b in zip(path.arc_lengths, path.arc_lengths[1:]):
        assert b > a


@pytest.mark.parametrize("points", [[], [Point(1, 1)], [Point(1, 1), Point(1, 1)]])
def test_fewer_than_two_distinct_points_raise(points):
    with pytest.raises(InvalidGeometry):
        ArcLengthPath(points)


# ---------------------------------------------------------------------------
# Finish-clamped queries
# ---------------------------------------------------------------------------

class TestPointAtDistance:
    def test_start(self, square):
        s = square.point_at_distance(0.0)
        assert (s.x, s.y) == (0.0, 0.0)
        assert s.rotation == pytest.approx(0.0)

    def test_interpolates_within_segment(self, square):
        s = square.point_at_distance(15.0)
        assert s.x == pytest.approx(10.0)
        assert s.y == pytest.approx(5.0)
        assert s.rotation == pytest.approx(math.pi / 2)

    def test_exact_vertex_uses_outgoing_segment(self, square):
        s = square.point_at_distance(10.0)
        assert (s.x, s.y) == (10.0, 0.0)
        assert s.rotation == pytest.approx(math.pi / 2)

    def test_negative_distance_clamps_to_start(self, square):
        assert square.point_at_distance(-5.0) == square.point_at_distance(0.0)

    def test_past_the_end_clamps_to_last_vertex(self, square):
        s = square.point_at_distance(100.0)
        assert (s.x, s.y) == (0.0, 0.0)
        assert s.rotation == pytest.approx(-math.pi / 2)

    def test_clamp_is_idempotent(self, square):
        total = square.total_length
        assert square.point_at_distance(total) == square.point_at_distance(total)
        assert square.point_at_distance(total + 1.0) == square.point_at_distance(total)
        assert square.finish_point == square.point_at_distance(total)

    def test_no_nan_anywhere_on_a_generated_track(self):
        path = ArcLengthPath(generate_centerline(Bounds(100, 100, 800, 400), 120))
        step = path.total_length / 997
        for i in range(998):
            s = path.point_at_distance(i * step)
            assert not any(math.isnan(v) for v in (s.x, s.y, s.rotation))


# ---------------------------------------------------------------------------
# Looping queries
# ---------------------------------------------------------------------------

class TestPointAtLoopDistance:
    def test_wraps_past_the_end(self, square):
        s = square.point_at_loop_distance(45.0)
        assert s.x == pytest.approx(5.0)
        assert s.y == pytest.approx(0.0)

    def test_negative_distance_wraps_backwards(self, square):
        s = square.point_at_loop_distance(-5.0)
        assert s.x == pytest.approx(0.0)
        assert s.y == pytest.approx(5.0)

    def test_agrees_with_clamped_query_inside_the_path(self, square):
        assert square.point_at_loop_distance(25.0) == square.point_at_distance(25.0)


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

def test_track_profile_distance_and_curvature():
    distance, curvature = track_profile([Point(0, 0), Point(10, 0), Point(10, 10)])
    assert distance == [0.0, 10.0, 20.0]
    assert curvature[0] == 0.0
    assert curvature[1] == pytest.approx(math.pi / 2)
    assert curvature[2] == 0.0


def test_track_profile_straight_line_has_no_curvature():
    _, curvature = track_profile([Point(0, 0), Point(5, 0), Point(10, 0)])
    assert curvature == [0.0, 0.0, 0.0]


def test_track_profile_tolerates_zero_length_segments():
    distance, curvature = track_profile([Point(0, 0), Point(0, 0), Point(10, 0)])
    assert distance == [0.0, 0.0, 10.0]
    assert curvature == [0.0, 0.0, 0.0]
