"""Pacing data models.

Plans are immutable once built: the simulator returns new
:class:`PacedHorse` pairings instead of mutating the horse records it was given.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    FRONT_RUNNER = "front-runner"
    COMEBACK = "comeback"
    VOLATILE = "volatile"


class ModifierType(str, Enum):
    SPRINT = "sprint"
    FATIGUE = "fatigue"


@dataclass(frozen=True)
class HorseRef:
    """A horse entered in a race, as supplied by the race/database layer.

    ``local_id`` is the 0-based race-local index; it doubles as the lane index.
    """

    id: int
    local_id: int
    name: str = ""
    color: str = ""

    def to_dict(self) -> dict:
        return {"id": self.id, "localId": self.local_id, "name": self.name, "color": self.color}


@dataclass(frozen=True)
class SpeedModifier:
    """A time-boxed speed change blended in with an ease-in-out curve."""

    type: ModifierType
    start_ms: int
    duration_ms: int
    multiplier: float

    @property
    def end_ms(self) -> int:
        return self.start_ms + self.duration_ms

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "startMs": self.start_ms,
            "durationMs": self.duration_ms,
            "multiplier": self.multiplier,
        }


@dataclass(frozen=True)
class PacingPlan:
    """Base speed (distance units per tick) plus modifiers sorted by ``start_ms``."""

    role: Role
    base_speed: float
    modifiers: tuple[SpeedModifier, ...] = ()

    def to_dict(self) -> dict:
        return {
            "role": self.role.value,
            "baseSpeed": self.base_speed,
            "modifiers": [m.to_dict() for m in self.modifiers],
        }


@dataclass(frozen=True)
class PacedHorse:
    """A horse paired with its pacing plan."""

    horse: HorseRef
    plan: PacingPlan


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of ticking one plan along one path."""

    local_id: int
    final_time_ms: float
    final_distance: float
    ticks: list[tuple[float, float]] = field(default_factory=list, repr=False)
    """``(time_ms, distance)`` after each tick."""


@dataclass(frozen=True)
class PacingOutcome:
    """Plans for every horse plus the finish-time spread before and after rebalancing."""

    horses: list[PacedHorse]
    spread_before_ms: float
    spread_after_ms: float
    rebalanced: bool

    def plan_for(self, local_id: int) -> PacingPlan:
        for paced in self.horses:
            if paced.horse.local_id == local_id:
                return paced.plan
        raise KeyError(local_id)
