"""Track geometry data structures.

Coordinates are canvas pixels: x grows to the right, y grows *down*.
Rotations are ``atan2(dy, dx)`` in that frame, so a positive rotation turns
clockwise on screen.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from horse_race.track.errors import InvalidGeometry

CLOSURE_TOLERANCE = 1e-9
"""Distance under which two points are treated as the same vertex."""


@dataclass(frozen=True)
class Point:
    """A 2-D point in canvas coordinates."""

    x: float
    y: float

    def squared_distance_to(self, other: Point) -> float:
        dx = other.x - self.x
        dy = other.y - self.y
        return dx * dx + dy * dy

    def distance_to(self, other: Point) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle ``{x, y, width, height}``."""

    x: float
    y: float
    width: float
    height: float

    def validate(self) -> None:
        """Raise :class:`InvalidGeometry` if the rectangle has no area."""
        if self.width <= 0 or self.height <= 0:
            raise InvalidGeometry(
                f"Bounds must have positive size, got width={self.width}, height={self.height}"
            )


@dataclass(frozen=True)
class PathSample:
    """Position and heading returned by a distance query."""

    x: float
    y: float

    rotation: float
    """Heading in radians, ``atan2`` of the bracketing segment direction."""

    def to_point(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True)
class TrackGeometry:
    """Everything the renderer and the path generator need about one track.

    All three polylines are closed, share a point count, and are rotated so
    that index 0 sits on the start line.
    """

    inner: list[Point]
    outer: list[Point]
    centerline: list[Point]

    start_at: Point
    """Centerline vertex where every lane's index 0 lies."""

    start_line_at: Point
    """``start_at`` pushed forward along the track direction, for drawing the line."""

    start_index: int
    """Index of ``start_at`` in the centerline *before* alignment."""

    distance: list[float] = field(default_factory=list)
    """Cumulative centerline distance per vertex."""

    curvature: list[float] = field(default_factory=list)
    """Turning angle (radians) at each centerline vertex."""

    def to_dict(self) -> dict:
        return {
            "innerBoundary": [p.to_dict() for p in self.inner],
            "outerBoundary": [p.to_dict() for p in self.outer],
            "centerline": [p.to_dict() for p in self.centerline],
            "startAt": self.start_at.to_dict(),
            "startLineAt": self.start_line_at.to_dict(),
            "distance": list(self.distance),
            "curvature": list(self.curvature),
        }


# ---------------------------------------------------------------------------
# Polyline helpers
# ---------------------------------------------------------------------------


def is_closed(points: list[Point]) -> bool:
    """Return True if *points* carries an explicit ``first == last`` closure."""
    return len(points) > 1 and points[0] == points[-1]


def close_polyline(points: list[Point]) -> list[Point]:
    """Return a copy of *points* whose last point is exactly the first.

    A trailing point within :data:`CLOSURE_TOLERANCE` of the first is replaced
    rather than duplicated.
    """
    if not points:
        return []
    closed = list(points)
    first = closed[0]
    if len(closed) > 1 and closed[-1].distance_to(first) <= CLOSURE_TOLERANCE:
        closed[-1] = first
    else:
        closed.append(first)
    return closed


def open_polyline(points: list[Point], tolerance: float = CLOSURE_TOLERANCE) -> list[Point]:
    """Return *points* without a trailing duplicate of the first point."""
    if len(points) > 1 and points[-1].distance_to(points[0]) <= tolerance:
        return list(points[:-1])
    return list(points)
