"""Assemble a full :class:`TrackGeometry` and per-lane horse paths.

Pipeline: centerline -> inner/outer boundary offsets -> align to start ->
distance/curvature profile.  Lane paths are offset from the *aligned*
centerline so every lane's index 0 sits on the same start line.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import cached_property

from horse_race.track.aligner import align_to_start
from horse_race.track.arc_length import ArcLengthPath, track_profile
from horse_race.track.centerline import generate_centerline
from horse_race.track.errors import InvalidGeometry
from horse_race.track.lanes import filter_degenerate, lane_offsets, offset_lanes
from horse_race.track.models import Bounds, PathSample, Point, TrackGeometry, close_polyline

START_LINE_OFFSET_PX = 30.0
"""Distance the drawn start line sits ahead of ``start_at``."""

DEFAULT_TRACK_WIDTH = 120.0
DEFAULT_CORNER_RADIUS = 120.0
DEFAULT_SEGMENTS = 400


@dataclass(frozen=True)
class HorsePath:
    """One horse's closed lane path with arc-length queries.

    Built fresh for every race and never mutated afterwards.
    """

    local_id: int
    lane_index: int
    path: ArcLengthPath

    @property
    def arc_length(self) -> float:
        return self.path.total_length

    def point_at_distance(self, distance: float) -> PathSample:
        return self.path.point_at_distance(distance)

    def point_at_loop_distance(self, distance: float) -> PathSample:
        return self.path.point_at_loop_distance(distance)

    @cached_property
    def finish_point(self) -> PathSample:
        return self.path.finish_point

    def to_dict(self) -> dict:
        return {
            "localId": self.local_id,
            "laneIndex": self.lane_index,
            "arcLength": self.arc_length,
            "path": [p.to_dict() for p in self.path.points],
        }


def track_bounds_for_canvas(
    width: float,
    height: float,
    padding_ratio: float = 0.05,
    track_width: float = DEFAULT_TRACK_WIDTH,
) -> Bounds:
    """Centerline bounds for a track drawn on a *width* x *height* canvas.

    The outer boundary is inset by ``padding_ratio`` of each dimension and the
    centerline runs half a track width inside it.
    """
    inset_x = width * padding_ratio + track_width / 2
    inset_y = height * padding_ratio + track_width / 2
    return Bounds(inset_x, inset_y, width - 2 * inset_x, height - 2 * inset_y)


def start_line_point(centerline: list[Point], index: int = 0, offset: float = START_LINE_OFFSET_PX) -> Point:
    """Point *offset* px ahead of ``centerline[index]`` along the local direction."""
    start = centerline[index]
    n = len(centerline)
    for step in range(1, n):
        nxt = centerline[(index + step) % n]
        length = start.distance_to(nxt)
        if length > 0:
            return Point(
                start.x + (nxt.x - start.x) / length * offset,
                start.y + (nxt.y - start.y) / length * offset,
            )
    raise InvalidGeometry("Cannot derive a track direction from a single point")


def build_track_geometry(
    bounds: Bounds,
    corner_radius: float = DEFAULT_CORNER_RADIUS,
    start_at_percent: float = 0.0,
    track_width: float = DEFAULT_TRACK_WIDTH,
    segments: int = DEFAULT_SEGMENTS,
) -> TrackGeometry:
    """Generate the aligned track for *bounds*.

    Args:
        bounds: Centerline rectangle.
        corner_radius: Centerline corner radius.
        start_at_percent: Fraction ``[0, 1]`` of the way round the
            centerline where the start line goes.
        track_width: Distance between the inner and outer boundaries.
        segments: Centerline resolution.

    Raises:
        InvalidGeometry: On bad bounds/radius or a degenerate centerline.
    """
    raw = generate_centerline(bounds, corner_radius, segments)
    centerline = filter_degenerate(raw)
    if len(centerline) < 2:
        raise InvalidGeometry("Centerline collapsed to fewer than 2 points")
    centerline = close_polyline(centerline)

    half = track_width / 2
    inner, outer = offset_lanes(centerline, [-half, half])

    pct = min(max(start_at_percent, 0.0), 1.0)
    n_open = len(centerline) - 1
    start_at = centerline[int(n_open * pct) % n_open]

    aligned = align_to_start(inner, outer, centerline, start_at)
    distance, curvature = track_profile(aligned.centerline)

    return TrackGeometry(
        inner=aligned.inner,
        outer=aligned.outer,
        centerline=aligned.centerline,
        start_at=start_at,
        start_line_at=start_line_point(aligned.centerline),
        start_index=aligned.start_index,
        distance=distance,
        curvature=curvature,
    )


def build_lane_paths(
    geometry: TrackGeometry,
    lane_count: int,
    lane_width: float,
) -> list[HorsePath]:
    """One :class:`HorsePath` per lane, lane ``i`` assigned to ``local_id == i``."""
    offsets = lane_offsets(lane_count, lane_width)
    lanes = offset_lanes(geometry.centerline, offsets)
    return [
        HorsePath(local_id=i, lane_index=i, path=ArcLengthPath(lane))
        for i, lane in enumerate(lanes)
    ]


def finish_line(
    path: ArcLengthPath,
    lane_count: int,
    lane_width: float,
    padding: float = 0.0,
) -> tuple[Point, Point]:
    """Endpoints of a line across all lanes, perpendicular to the track at distance 0."""
    half = (lane_width * lane_count + 2 * padding) / 2
    here = path.point_at_distance(0.0)
    nx, ny = -math.sin(here.rotation), math.cos(here.rotation)
    return (
        Point(here.x + nx * half, here.y + ny * half),
        Point(here.x - nx * half, here.y - ny * half),
    )
