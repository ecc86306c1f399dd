"""CSS-style cubic Bezier easing curves."""

from __future__ import annotations


class CubicBezierEasing:
    """Easing function for the Bezier curve ``(0,0) (x1,y1) (x2,y2) (1,1)``.

    Given progress ``p`` in ``[0, 1]`` finds the curve parameter ``t`` with
    ``x(t) == p`` (Newton steps, falling back to bisection) and returns
    ``y(t)``.  Values outside ``[0, 1]`` are clamped.

    Args:
        x1, y1, x2, y2: Control points; ``x1`` and ``x2`` must lie in ``[0, 1]``.
    """

    def __init__(self, x1: float, y1: float, x2: float, y2: float) -> None:
        if not (0.0 <= x1 <= 1.0 and 0.0 <= x2 <= 1.0):
            raise ValueError("Bezier x control values must be in [0, 1]")
        self.x1, self.y1, self.x2, self.y2 = x1, y1, x2, y2

    def __call__(self, progress: float) -> float:
        if progress <= 0.0:
            return 0.0
        if progress >= 1.0:
            return 1.0
        return self._bezier(self._solve_t(progress), self.y1, self.y2)

    @staticmethod
    def _bezier(t: float, a1: float, a2: float) -> float:
        u = 1.0 - t
        return 3 * u * u * t * a1 + 3 * u * t * t * a2 + t * t * t

    @staticmethod
    def _slope(t: float, a1: float, a2: float) -> float:
        u = 1.0 - t
        return 3 * u * u * a1 + 6 * u * t * (a2 - a1) + 3 * t * t * (1.0 - a2)

    def _solve_t(self, x: float) -> float:
        t = x
        for _ in range(8):
            err = self._bezier(t, self.x1, self.x2) - x
            if abs(err) < 1e-7:
                return t
            slope = self._slope(t, self.x1, self.x2)
            if abs(slope) < 1e-6:
                break
            t -= err / slope
            if not 0.0 <= t <= 1.0:
                break

        lo, hi = 0.0, 1.0
        t = x
        for _ in range(60):
            value = self._bezier(t, self.x1, self.x2)
            if abs(value - x) < 1e-7:
                break
            if value < x:
                lo = t
            else:
                hi = t
            t = (lo + hi) / 2
        return t


EASE_IN_OUT = CubicBezierEasing(0.42, 0.0, 0.58, 1.0)
