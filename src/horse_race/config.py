"""Runtime configuration read from environment variables.

Call :func:`dotenv.load_dotenv` before :meth:`RaceConfig.from_env` so values
from a project ``.env`` file are visible.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    return float(raw) if raw else default


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.environ.get(name)
    return int(raw) if raw else default


@dataclass(frozen=True)
class RaceConfig:
    """Track layout and race tuning.

    Parameters
    ----------
    db_path:
        SQLite file for replay frames and results (``HORSE_RACE_DB``).
    race_duration_s:
        Target duration of an unmodified horse (``HORSE_RACE_DURATION_S``).
    canvas_width, canvas_height:
        Drawing area the track is fitted into.
    corner_radius:
        Centerline corner radius in px (``HORSE_RACE_CORNER_RADIUS``).
    track_width:
        Distance between inner and outer boundaries (``HORSE_RACE_TRACK_WIDTH``).
    lane_width:
        Spacing between adjacent lanes (``HORSE_RACE_LANE_WIDTH``).
    segments:
        Centerline resolution (``HORSE_RACE_SEGMENTS``).
    start_at_percent:
        Where round the centerline the start line sits.
    seed:
        Tournament seed for reproducible races (``HORSE_RACE_SEED``); None = random.
    """

    db_path: str = "races.db"
    race_duration_s: float = 60.0
    canvas_width: float = 1000.0
    canvas_height: float = 600.0
    corner_radius: float = 120.0
    track_width: float = 120.0
    lane_width: float = 30.0
    segments: int = 400
    start_at_percent: float = 0.0
    seed: int | None = None

    @classmethod
    def from_env(cls) -> RaceConfig:
        return cls(
            db_path=os.environ.get("HORSE_RACE_DB", cls.db_path),
            race_duration_s=_env_float("HORSE_RACE_DURATION_S", cls.race_duration_s),
            canvas_width=_env_float("HORSE_RACE_CANVAS_WIDTH", cls.canvas_width),
            canvas_height=_env_float("HORSE_RACE_CANVAS_HEIGHT", cls.canvas_height),
            corner_radius=_env_float("HORSE_RACE_CORNER_RADIUS", cls.corner_radius),
            track_width=_env_float("HORSE_RACE_TRACK_WIDTH", cls.track_width),
            lane_width=_env_float("HORSE_RACE_LANE_WIDTH", cls.lane_width),
            segments=_env_int("HORSE_RACE_SEGMENTS", cls.segments),
            start_at_percent=_env_float("HORSE_RACE_START_AT_PERCENT", cls.start_at_percent),
            seed=_env_int("HORSE_RACE_SEED", None),
        )
