"""Rounded-rectangle track centerline generation.

Produces the closed midline every lane and boundary is offset from.
"""

from __future__ import annotations

import math

from horse_race.track.errors import InvalidGeometry
from horse_race.track.models import CLOSURE_TOLERANCE, Bounds, Point, close_polyline


class CenterlineGenerator:
    """Trace a rounded rectangle as four straight sides and four 90° arcs.

    Points are emitted clockwise on screen (canvas y-down), starting on the
    top-left corner at its leftmost point::

        TL arc -> top side -> TR arc -> right side -> BR arc -> bottom side
        -> BL arc -> left side -> (back to start)

    Each side is split into ``segments // 4`` sub-segments and each corner into
    ``segments // 8``, so corner smoothness does not depend on rectangle size.

    Args:
        segments: Total resolution budget for the whole loop (>= 8).
    """

    def __init__(self, segments: int = 400) -> None:
        if segments < 8:
            raise InvalidGeometry(f"segments must be >= 8, got {segments}")
        self.segments = segments

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(self, bounds: Bounds, corner_radius: float) -> list[Point]:
        """Return the closed centerline polyline for *bounds*.

        Raises:
            InvalidGeometry: If *bounds* has no area or *corner_radius* is
                outside ``[0, min(width, height) / 2]``.
        """
        bounds.validate()
        max_radius = min(bounds.width, bounds.height) / 2
        if corner_radius < 0 or corner_radius > max_radius:
            raise InvalidGeometry(
                f"corner_radius {corner_radius} outside [0, {max_radius}] "
                f"for {bounds.width}x{bounds.height} bounds"
            )

        x, y, w, h = bounds.x, bounds.y, bounds.width, bounds.height
        r = corner_radius
        straight_h = w - 2 * r
        straight_v = h - 2 * r
        arc_seg = self.segments // 8
        side_seg = self.segments // 4

        points: list[Point] = []

        # Top-left corner (180° -> 270°)
        self._arc(points, x + r, y + r, r, math.pi, arc_seg)
        # Top side, left to right
        for i in range(1, side_seg + 1):
            self._append(points, Point(x + r + straight_h * i / side_seg, y))
        # Top-right corner (270° -> 360°)
        self._arc(points, x + w - r, y + r, r, 1.5 * math.pi, arc_seg)
        # Right side, top to bottom
        for i in range(1, side_seg + 1):
            self._append(points, Point(x + w, y + r + straight_v * i / side_seg))
        # Bottom-right corner (0° -> 90°)
        self._arc(points, x + w - r, y + h - r, r, 0.0, arc_seg)
        # Bottom side, right to left
        for i in range(1, side_seg + 1):
            self._append(points, Point(x + w - r - straight_h * i / side_seg, y + h))
        # Bottom-left corner (90° -> 180°)
        self._arc(points, x + r, y + h - r, r, 0.5 * math.pi, arc_seg)
        # Left side, bottom to top
        for i in range(1, side_seg + 1):
            self._append(points, Point(x, y + h - r - straight_v * i / side_seg))

        return close_polyline(points)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _append(points: list[Point], pt: Point) -> None:
        """Append *pt* unless it coincides with the previous point."""
        if points and points[-1].distance_to(pt) <= CLOSURE_TOLERANCE:
            return
        points.append(pt)

    def _arc(
        self,
        points: list[Point],
        cx: float,
        cy: float,
        radius: float,
        start_angle: float,
        steps: int,
    ) -> None:
        """Quarter arc from *start_angle* sweeping +90° (clockwise on screen)."""
        for i in range(steps + 1):
            theta = start_angle + (math.pi / 2) * (i / steps)
            self._append(points, Point(cx + radius * math.cos(theta), cy + radius * math.sin(theta)))


def generate_centerline(bounds: Bounds, corner_radius: float, segments: int = 400) -> list[Point]:
    """Shortcut for ``CenterlineGenerator(segments).generate(bounds, corner_radius)``."""
    return CenterlineGenerator(segments).generate(bounds, corner_radius)
