"""All-or-nothing race setup: geometry, lane paths and pacing plans.

Everything is built in local variables and handed back as one frozen
:class:`PreparedRace`.  If any step raises, the caller gets nothing and no
driver can start on partial data.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from horse_race.config import RaceConfig
from horse_race.pacing.models import HorseRef, PacedHorse, PacingOutcome
from horse_race.pacing.simulator import build_pacing_plan
from horse_race.race.models import SetupWarning
from horse_race.track.arc_length import ArcLengthPath
from horse_race.track.builder import (
    HorsePath,
    build_lane_paths,
    build_track_geometry,
    finish_line,
    track_bounds_for_canvas,
)
from horse_race.track.errors import InvalidGeometry, MissingPathData
from horse_race.track.models import Point, TrackGeometry

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedRace:
    """A fully built race, ready for the animation drivers.

    ``paths`` is a read-only mapping ``local_id -> HorsePath`` covering exactly
    the horses in ``horses``.
    """

    race_id: str
    geometry: TrackGeometry
    paths: Mapping[int, HorsePath]
    pacing: PacingOutcome
    warnings: tuple[SetupWarning, ...]
    start_at_percent: float
    finish_line: tuple[Point, Point]

    @property
    def horses(self) -> list[PacedHorse]:
        return self.pacing.horses

    def to_dict(self) -> dict:
        return {
            "raceId": self.race_id,
            "track": self.geometry.to_dict(),
            "horses": [
                {
                    **paced.horse.to_dict(),
                    "racePacingPlan": paced.plan.to_dict(),
                    **self.paths[paced.horse.local_id].to_dict(),
                }
                for paced in self.horses
            ],
            "warnings": [w.to_dict() for w in self.warnings],
            "finishLine": [p.to_dict() for p in self.finish_line],
            "startAtPercent": self.start_at_percent,
        }


class RaceSetup:
    """Builds :class:`PreparedRace` objects from a :class:`RaceConfig`.

    Parameters
    ----------
    config:
        Track layout and race tuning.
    rng:
        Random source shared by successive races.  Defaults to a
        ``random.Random`` seeded from ``config.seed``.
    """

    def __init__(self, config: RaceConfig | None = None, rng: random.Random | None = None) -> None:
        self.config = config or RaceConfig()
        self._rng = rng or random.Random(self.config.seed)

    def prepare(
        self,
        race_id: str,
        horses: list[HorseRef],
        lane_count: int | None = None,
    ) -> PreparedRace:
        """Build geometry, paths and plans for *horses*.

        Horses whose ``local_id`` has no lane are left out with a
        :class:`SetupWarning`; the rest still race.

        Args:
            race_id: Identifier echoed in wire events.
            horses: Entrants; ``local_id`` selects the lane.
            lane_count: Lanes to generate.  Defaults to ``len(horses)``.

        Raises:
            InvalidGeometry: If the track cannot be built or no horse could
                be placed.
        """
        cfg = self.config
        if not horses:
            raise InvalidGeometry("Race has no horses to place")

        bounds = track_bounds_for_canvas(cfg.canvas_width, cfg.canvas_height, track_width=cfg.track_width)
        geometry = build_track_geometry(
            bounds,
            corner_radius=cfg.corner_radius,
            start_at_percent=cfg.start_at_percent,
            track_width=cfg.track_width,
            segments=cfg.segments,
        )

        n_lanes = lane_count if lane_count is not None else len(horses)
        lane_paths = {p.local_id: p for p in build_lane_paths(geometry, n_lanes, cfg.lane_width)}

        placed: list[HorseRef] = []
        paths: dict[int, HorsePath] = {}
        warnings: list[SetupWarning] = []
        for horse in horses:
            path = lane_paths.get(horse.local_id)
            if path is None or horse.local_id in paths:
                err = MissingPathData(
                    horse.local_id,
                    f"lane {horse.local_id} not among {n_lanes} generated lanes"
                    if path is None
                    else "lane already taken",
                )
                _logger.warning("Excluding horse %s from race %s: %s", horse.id, race_id, err)
                warnings.append(SetupWarning(horse.local_id, horse.id, str(err)))
                continue
            placed.append(horse)
            paths[horse.local_id] = path

        if not placed:
            raise InvalidGeometry(f"No horses could be placed for race {race_id}")

        pacing = build_pacing_plan(placed, paths, cfg.race_duration_s, self._rng)

        _logger.info(
            "Race %s prepared: %d horse(s), spread %.0f ms%s",
            race_id,
            len(placed),
            pacing.spread_after_ms,
            " (rebalanced)" if pacing.rebalanced else "",
        )
        return PreparedRace(
            race_id=race_id,
            geometry=geometry,
            paths=MappingProxyType(paths),
            pacing=pacing,
            warnings=tuple(warnings),
            start_at_percent=cfg.start_at_percent,
            finish_line=finish_line(ArcLengthPath(geometry.centerline), n_lanes, cfg.lane_width),
        )
