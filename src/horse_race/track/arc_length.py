"""Arc-length parameterised polylines for constant-speed queries.

The same :class:`ArcLengthPath` serves live animation, replay and finish
detection, so a live race and its replay agree exactly at equal distance.
"""

from __future__ import annotations

import bisect
import math
from functools import cached_property

from horse_race.track.errors import InvalidGeometry
from horse_race.track.models import CLOSURE_TOLERANCE, PathSample, Point


class ArcLengthPath:
    """A polyline with cumulative arc length at each vertex.

    Zero-length segments are removed on construction, so ``arc_lengths`` is
    strictly increasing.

    Two query modes are exposed and are never interchanged:

    * :meth:`point_at_distance` clamps to ``[0, total_length]`` (finish
      semantics: a horse past the line stays on the last vertex).
    * :meth:`point_at_loop_distance` wraps ``distance mod total_length``
      (looping live ticking).

    Raises:
        InvalidGeometry: If fewer than two distinct points are supplied.
    """

    def __init__(self, points: list[Point]) -> None:
        kept: list[Point] = []
        for pt in points:
            if kept and kept[-1].distance_to(pt) <= CLOSURE_TOLERANCE:
                continue
            kept.append(pt)
        if len(kept) < 2:
            raise InvalidGeometry("ArcLengthPath requires at least two distinct points")

        cumulative = [0.0]
        for a, b in zip(kept, kept[1:]):
            cumulative.append(cumulative[-1] + a.distance_to(b))

        self.points: tuple[Point, ...] = tuple(kept)
        self.arc_lengths: tuple[float, ...] = tuple(cumulative)

    @property
    def total_length(self) -> float:
        return self.arc_lengths[-1]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def point_at_distance(self, distance: float) -> PathSample:
        """Position and heading *distance* units along the path, clamped to the ends."""
        d = min(max(distance, 0.0), self.total_length)
        return self._sample(d)

    def point_at_loop_distance(self, distance: float) -> PathSample:
        """Position and heading at ``distance mod total_length``."""
        return self._sample(distance % self.total_length)

    @cached_property
    def finish_point(self) -> PathSample:
        """Where a horse stops: the sample at ``total_length``."""
        return self.point_at_distance(self.total_length)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _sample(self, d: float) -> PathSample:
        last = len(self.points) - 1
        idx = bisect.bisect_right(self.arc_lengths, d)
        if idx > last:
            # At (or numerically beyond) the final vertex.
            a, b = self.points[last - 1], self.points[last]
            return PathSample(b.x, b.y, math.atan2(b.y - a.y, b.x - a.x))

        a, b = self.points[idx - 1], self.points[idx]
        seg_start = self.arc_lengths[idx - 1]
        seg_len = self.arc_lengths[idx] - seg_start
        t = (d - seg_start) / seg_len
        dx = b.x - a.x
        dy = b.y - a.y
        return PathSample(a.x + dx * t, a.y + dy * t, math.atan2(dy, dx))


def track_profile(points: list[Point]) -> tuple[list[float], list[float]]:
    """Return ``(distance, curvature)`` arrays for *points*.

    ``distance[i]`` is the cumulative length from point 0 to ``i``;
    ``curvature[i]`` is the turning angle in radians between the segments
    entering and leaving interior vertex ``i`` (0 at the ends and wherever a
    segment has zero length).
    """
    n = len(points)
    distance = [0.0] * n
    curvature = [0.0] * n

    for i in range(1, n):
        distance[i] = distance[i - 1] + points[i - 1].distance_to(points[i])

    for i in range(1, n - 1):
        p0, p1, p2 = points[i - 1], points[i], points[i + 1]
        v1x, v1y = p1.x - p0.x, p1.y - p0.y
        v2x, v2y = p2.x - p1.x, p2.y - p1.y
        mag = math.hypot(v1x, v1y) * math.hypot(v2x, v2y)
        if mag == 0:
            continue
        cos_angle = (v1x * v2x + v1y * v2y) / mag
        curvature[i] = math.acos(max(-1.0, min(1.0, cos_angle)))

    return distance, curvature
