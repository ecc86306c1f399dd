"""RaceService: wraps setup, simulation and persistence for the web layer."""

from __future__ import annotations

import logging
import random
import time
from dataclasses import replace

from horse_race.config import RaceConfig
from horse_race.pacing.simulator import TICK_RATE
from horse_race.race.models import FinishEntry, ReplayFrame
from horse_race.race.session import RaceSession
from horse_race.race.setup import PreparedRace, RaceSetup
from horse_race.replay.storage import ReplayStorage
from horse_race.track.builder import build_track_geometry, track_bounds_for_canvas
from horse_race.track.models import TrackGeometry
from horse_race.web.schemas import CreateRaceRequest

_logger = logging.getLogger(__name__)


class RaceService:
    """Entry point for every race operation the API exposes.

    Parameters
    ----------
    config:
        Track layout, tuning and database path.
    tick_interval_s:
        Wall-clock seconds between live ticks.  Tests shrink it to run races
        faster than real time.
    """

    def __init__(self, config: RaceConfig, tick_interval_s: float = 1.0 / TICK_RATE) -> None:
        self.config = config
        self.tick_interval_s = tick_interval_s
        self._setup = RaceSetup(config)

    def track(self, width: float, height: float, start_at_percent: float) -> TrackGeometry:
        """Track geometry for a *width* x *height* canvas.

        Raises
        ------
        InvalidGeometry
            If the configured corner radius does not fit the canvas.
        """
        cfg = self.config
        bounds = track_bounds_for_canvas(width, height, track_width=cfg.track_width)
        return build_track_geometry(
            bounds,
            corner_radius=cfg.corner_radius,
            start_at_percent=start_at_percent,
            track_width=cfg.track_width,
            segments=cfg.segments,
        )

    def create_race(self, req: CreateRaceRequest) -> PreparedRace:
        """Prepare a race from an API request.

        Raises
        ------
        InvalidGeometry
            If the track cannot be built or no horse can be placed.
        """
        setup = self._setup
        overrides = {}
        if req.race_duration_seconds is not None:
            overrides["race_duration_s"] = req.race_duration_seconds
        if overrides or req.seed is not None:
            setup = RaceSetup(replace(self.config, **overrides), rng=random.Random(req.seed))

        race_id = req.race_id or str(int(time.time() * 1000))
        horses = [h.to_ref(i) for i, h in enumerate(req.horses)]
        return setup.prepare(race_id, horses, lane_count=req.lane_count)

    def record_race(self, session: RaceSession) -> list[FinishEntry]:
        """Persist the replay frames and leaderboard of a finished session."""
        leaderboard = session.leaderboard()
        storage = ReplayStorage(self.config.db_path)
        try:
            storage.save_race(session.race_id)
            storage.save_frames(session.race_id, session.replay_frames())
            storage.save_results(session.race_id, leaderboard)
            storage.finish_race(session.race_id)
        finally:
            storage.close()
        _logger.info("Race %s recorded: %d finisher(s)", session.race_id, len(leaderboard))
        return leaderboard

    def replay(self, race_id: str) -> tuple[dict[int, list[ReplayFrame]], list[FinishEntry]] | None:
        """Stored frames and results for *race_id*, or None if the race is unknown."""
        storage = ReplayStorage(self.config.db_path)
        try:
            if storage.get_race(race_id) is None:
                return None
            return storage.get_frames(race_id), storage.get_results(race_id)
        finally:
            storage.close()
