"""Per-horse pacing plans and their tick simulation."""

from horse_race.pacing.easing import EASE_IN_OUT, CubicBezierEasing
from horse_race.pacing.models import (
    HorseRef,
    ModifierType,
    PacedHorse,
    PacingOutcome,
    PacingPlan,
    Role,
    SimulationResult,
    SpeedModifier,
)
from horse_race.pacing.simulator import (
    TICK_MS,
    TICK_RATE,
    build_pacing_plan,
    effective_speed,
    simulate_plan,
)

__all__ = [
    "EASE_IN_OUT",
    "TICK_MS",
    "TICK_RATE",
    "CubicBezierEasing",
    "HorseRef",
    "ModifierType",
    "PacedHorse",
    "PacingOutcome",
    "PacingPlan",
    "Role",
    "SimulationResult",
    "SpeedModifier",
    "build_pacing_plan",
    "effective_speed",
    "simulate_plan",
]
