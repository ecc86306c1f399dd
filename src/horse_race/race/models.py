"""Race runtime data structures and wire payloads."""

from __future__ import annotations

from dataclasses import dataclass

from horse_race.pacing.models import HorseRef
from horse_race.race.colors import FALLBACK_COLOR, parse_color


@dataclass(frozen=True)
class ReplayFrame:
    """A recorded ``{time, distance}`` sample for one horse."""

    time_ms: float
    distance: float


@dataclass(frozen=True)
class HorseFrame:
    """Where a horse is drawn on one tick."""

    local_id: int
    distance: float
    x: float
    y: float
    rotation: float
    finished: bool = False


@dataclass(frozen=True)
class TickEvent:
    """``race:tick`` payload: one horse's progress in percent (0-100)."""

    race_id: str
    horse_id: int
    pct: float

    def to_dict(self) -> dict:
        return {"raceId": self.race_id, "horseId": self.horse_id, "pct": self.pct}


@dataclass(frozen=True)
class RaceInitEvent:
    """``race:init`` payload sent once before the first tick.

    Each horse also carries ``colorHex``, its colour as a ``0xRRGGBB`` integer.
    """

    race_id: str
    horses: list[HorseRef]
    start_at_percent: float

    def to_dict(self) -> dict:
        return {
            "raceId": self.race_id,
            "horses": [
                {**h.to_dict(), "colorHex": parse_color(h.color) if h.color else FALLBACK_COLOR}
                for h in self.horses
            ],
            "startAtPercent": self.start_at_percent,
        }


@dataclass(frozen=True)
class FinishEntry:
    """One row of the ``race:finish`` leaderboard."""

    horse_id: int
    position: int
    time_ms: float

    def to_dict(self) -> dict:
        return {"horseId": self.horse_id, "position": self.position, "timeMs": self.time_ms}


@dataclass(frozen=True)
class SetupWarning:
    """Structured diagnostic for a horse excluded during race setup."""

    local_id: int
    horse_id: int
    message: str

    def to_dict(self) -> dict:
        return {"localId": self.local_id, "horseId": self.horse_id, "message": self.message}
