"""Parallel lane generation by offsetting the centerline along its normal.

Sign convention (canvas y-down, clockwise winding from
:mod:`horse_race.track.centerline`): the outward normal is the smoothed
tangent rotated by -90°, ``(sin θ, -cos θ)``.  A positive offset moves a lane
*outward* (away from the infield), a negative offset moves it inward.  For a
tangent pointing along +x the outward normal is ``(0, -1)``, i.e. up the screen.
"""

from __future__ import annotations

import math

from horse_race.track.errors import InvalidGeometry
from horse_race.track.models import Point

DEFAULT_MIN_SPACING = 1.0
"""Centerline points closer than this to their predecessor are dropped."""


def filter_degenerate(points: list[Point], min_spacing: float = DEFAULT_MIN_SPACING) -> list[Point]:
    """Drop near-duplicate points and any explicit closing duplicate.

    Returns an *open* polyline: the first point is not repeated at the end.
    """
    kept: list[Point] = []
    for pt in points:
        if kept and kept[-1].distance_to(pt) < min_spacing:
            continue
        kept.append(pt)
    while len(kept) > 1 and kept[-1].distance_to(kept[0]) < min_spacing:
        kept.pop()
    return kept


def lane_offsets(lane_count: int, spacing: float) -> list[float]:
    """Symmetric offsets ``(i - (n-1)/2) * spacing`` for *lane_count* lanes.

    Lane 0 is the innermost.
    """
    if lane_count < 1:
        return []
    mid = (lane_count - 1) / 2
    return [(i - mid) * spacing for i in range(lane_count)]


def _unwrap(angle: float, previous: float | None) -> float:
    if previous is None:
        return angle
    while angle - previous > math.pi:
        angle -= 2 * math.pi
    while angle - previous < -math.pi:
        angle += 2 * math.pi
    return angle


def tangent_angles(points: list[Point]) -> list[float]:
    """Unwrapped smoothed tangent angle at each point of an open closed-loop polyline.

    The tangent at ``i`` is the average of the incoming ``p[i] - p[i-1]`` and
    outgoing ``p[i+1] - p[i]`` vectors, with indices wrapping.  A zero average
    keeps the previous angle.
    """
    n = len(points)
    angles: list[float] = []
    previous: float | None = None
    for i in range(n):
        prev_pt = points[(i - 1) % n]
        curr = points[i]
        next_pt = points[(i + 1) % n]
        tx = ((curr.x - prev_pt.x) + (next_pt.x - curr.x)) / 2
        ty = ((curr.y - prev_pt.y) + (next_pt.y - curr.y)) / 2
        if math.hypot(tx, ty) < 1e-12:
            angle = previous if previous is not None else 0.0
        else:
            angle = _unwrap(math.atan2(ty, tx), previous)
        angles.append(angle)
        previous = angle
    return angles


def offset_lanes(
    centerline: list[Point],
    offsets: list[float],
    min_spacing: float = DEFAULT_MIN_SPACING,
) -> list[list[Point]]:
    """Return one closed polyline per entry of *offsets*.

    Every lane has ``len(filter_degenerate(centerline)) + 1`` points and index
    ``i`` of each lane corresponds to index ``i`` of the filtered centerline.

    Raises:
        InvalidGeometry: If fewer than 2 usable points remain after filtering.
    """
    base = filter_degenerate(centerline, min_spacing)
    if len(base) < 2:
        raise InvalidGeometry(
            f"Centerline has {len(base)} usable point(s) after filtering; need at least 2"
        )

    normals = [(math.sin(a), -math.cos(a)) for a in tangent_angles(base)]

    lanes: list[list[Point]] = []
    for offset in offsets:
        lane = [
            Point(pt.x + nx * offset, pt.y + ny * offset)
            for pt, (nx, ny) in zip(base, normals)
        ]
        lane.append(lane[0])
        lanes.append(lane)
    return lanes
