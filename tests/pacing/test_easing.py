"""Cubic Bezier easing."""

from __future__ import annotations

import pytest

from horse_race.pacing.easing import EASE_IN_OUT, CubicBezierEasing


def test_endpoints():
    assert EASE_IN_OUT(0.0) == 0.0
    assert EASE_IN_OUT(1.0) == 1.0


def test_out_of_range_progress_is_clamped():
    assert EASE_IN_OUT(-0.5) == 0.0
    assert EASE_IN_OUT(1.5) == 1.0


def test_ease_in_out_is_symmetric():
    for p in (0.1, 0.25, 0.4, 0.5):
        assert EASE_IN_OUT(p) + EASE_IN_OUT(1 - p) == pytest.approx(1.0, abs=1e-5)


def test_midpoint():
    assert EASE_IN_OUT(0.5) == pytest.approx(0.5, abs=1e-5)


def test_slow_start_and_finish():
    assert EASE_IN_OUT(0.1) < 0.1
    assert EASE_IN_OUT(0.9) > 0.9


def test_monotonic():
    values = [EASE_IN_OUT(i / 100) for i in range(101)]
    for a, b in zip(values, values[1:]):
        assert b >= a - 1e-9


def test_linear_control_points_give_identity():
    linear = CubicBezierEasing(1 / 3, 1 / 3, 2 / 3, 2 / 3)
    for p in (0.05, 0.3, 0.77):
        assert linear(p) == pytest.approx(p, abs=1e-5)


def test_x_control_outside_unit_interval_rejected():
    with pytest.raises(ValueError):
        CubicBezierEasing(1.5, 0, 0.5, 1)
