"""Rotate track arrays so a chosen start point becomes index 0."""

from __future__ import annotations

from dataclasses import dataclass

from horse_race.track.errors import InvalidGeometry
from horse_race.track.models import Point, close_polyline, open_polyline


@dataclass(frozen=True)
class AlignedTrack:
    """Inner, outer and centerline arrays rotated to a common start index."""

    inner: list[Point]
    outer: list[Point]
    centerline: list[Point]

    start_index: int
    """Index in the (truncated, open) input centerline that became index 0."""


def nearest_index(points: list[Point], target: Point) -> int:
    """Index of the point in *points* nearest *target* (squared distance, first wins)."""
    best_idx = 0
    best = float("inf")
    for i, pt in enumerate(points):
        d = pt.squared_distance_to(target)
        if d < best:
            best = d
            best_idx = i
    return best_idx


def _rotate(points: list[Point], index: int) -> list[Point]:
    return close_polyline(points[index:] + points[:index])


def align_to_start(
    inner: list[Point],
    outer: list[Point],
    centerline: list[Point],
    start_at: Point,
) -> AlignedTrack:
    """Rotate *inner*, *outer* and *centerline* together so *start_at* is index 0.

    Closing duplicates are stripped, the three arrays are truncated to their
    common minimum length, and each rotated array is re-closed.

    Raises:
        InvalidGeometry: If any array is empty.
    """
    inner_open = open_polyline(inner)
    outer_open = open_polyline(outer)
    center_open = open_polyline(centerline)

    n = min(len(inner_open), len(outer_open), len(center_open))
    if n == 0:
        raise InvalidGeometry("Cannot align empty track arrays")

    inner_open = inner_open[:n]
    outer_open = outer_open[:n]
    center_open = center_open[:n]

    idx = nearest_index(center_open, start_at)
    return AlignedTrack(
        inner=_rotate(inner_open, idx),
        outer=_rotate(outer_open, idx),
        centerline=_rotate(center_open, idx),
        start_index=idx,
    )
