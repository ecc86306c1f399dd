"""Track geometry: centerline, lanes, alignment and arc-length paths."""

from horse_race.track.aligner import AlignedTrack, align_to_start
from horse_race.track.arc_length import ArcLengthPath, track_profile
from horse_race.track.builder import HorsePath, build_lane_paths, build_track_geometry
from horse_race.track.centerline import CenterlineGenerator, generate_centerline
from horse_race.track.errors import InvalidGeometry, MissingPathData
from horse_race.track.lanes import filter_degenerate, lane_offsets, offset_lanes
from horse_race.track.models import Bounds, PathSample, Point, TrackGeometry

__all__ = [
    "AlignedTrack",
    "ArcLengthPath",
    "Bounds",
    "CenterlineGenerator",
    "HorsePath",
    "InvalidGeometry",
    "MissingPathData",
    "PathSample",
    "Point",
    "TrackGeometry",
    "align_to_start",
    "build_lane_paths",
    "build_track_geometry",
    "filter_degenerate",
    "generate_centerline",
    "lane_offsets",
    "offset_lanes",
    "track_profile",
]
