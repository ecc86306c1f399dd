"""Randomised pacing plans with a bounded fairness correction.

Each horse gets a base speed scaled to finish its own lane in roughly the
target race duration, plus 3-5 sprint/fatigue modifiers.  The plans are then
simulated tick by tick; if the finish-time spread is too wide a single
corrective pass nudges base speeds towards the mean.  The pass is not
iterated, so adversarial modifier combinations can still leave the spread
above the threshold.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Mapping
from dataclasses import replace
from statistics import mean

from horse_race.pacing.easing import EASE_IN_OUT
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
from horse_race.track.builder import HorsePath
from horse_race.track.errors import MissingPathData

_logger = logging.getLogger(__name__)

TICK_RATE = 30
"""Simulation ticks per second."""

TICK_MS = 1000 / TICK_RATE

BASE_SPEED_JITTER = (0.95, 1.05)
SPRINT_MULT = (1.15, 1.3)
FATIGUE_MULT = (0.75, 0.9)
MODIFIER_COUNT = (3, 5)
MODIFIER_DURATION_MS = (1000, 2500)
MODIFIER_WINDOW = 0.85
"""Modifiers start within this fraction of the horse's naive race duration."""

MAX_SPREAD_MS = 8000.0
REBALANCE_SCALE_MS = 5000.0
REBALANCE_LIMIT = 0.08

_ROLES = (Role.FRONT_RUNNER, Role.COMEBACK, Role.VOLATILE)


def effective_speed(plan: PacingPlan, t_ms: float) -> float:
    """Speed per tick at *t_ms*, with every active modifier eased in.

    A modifier is active for ``start_ms <= t <= start_ms + duration_ms``; its
    multiplier is blended in as ``1 + (m - 1) * ease(elapsed_fraction)``.
    Overlapping modifiers compound.
    """
    speed = plan.base_speed
    for mod in plan.modifiers:
        if mod.start_ms <= t_ms <= mod.end_ms:
            pct = (t_ms - mod.start_ms) / mod.duration_ms if mod.duration_ms else 1.0
            speed *= 1 + (mod.multiplier - 1) * EASE_IN_OUT(pct)
    return speed


def simulate_plan(plan: PacingPlan, arc_length: float, local_id: int = 0) -> SimulationResult:
    """Tick *plan* along a path of *arc_length* until the horse reaches the end."""
    if plan.base_speed <= 0:
        raise ValueError(f"base_speed must be positive, got {plan.base_speed}")

    ticks: list[tuple[float, float]] = []
    dist = 0.0
    t = 0.0
    while dist < arc_length:
        dist += effective_speed(plan, t)
        ticks.append((t, dist))
        t += TICK_MS
    return SimulationResult(local_id=local_id, final_time_ms=t, final_distance=dist, ticks=ticks)


def _draft_modifiers(rng: random.Random, total_duration_ms: float) -> tuple[SpeedModifier, ...]:
    modifiers = []
    for _ in range(rng.randint(*MODIFIER_COUNT)):
        kind = ModifierType.SPRINT if rng.random() > 0.5 else ModifierType.FATIGUE
        bounds = SPRINT_MULT if kind is ModifierType.SPRINT else FATIGUE_MULT
        modifiers.append(SpeedModifier(
            type=kind,
            start_ms=int(rng.random() * total_duration_ms * MODIFIER_WINDOW),
            duration_ms=int(rng.uniform(*MODIFIER_DURATION_MS)),
            multiplier=rng.uniform(*bounds),
        ))
    modifiers.sort(key=lambda m: m.start_ms)
    return tuple(modifiers)


def draft_plan(
    index: int,
    arc_length: float,
    race_duration_seconds: float,
    rng: random.Random,
) -> PacingPlan:
    """Build an un-simulated plan for the horse at position *index*.

    The base speed depends only on the horse's own arc length and a random
    jitter, never on its lane.
    """
    total_ticks = race_duration_seconds * TICK_RATE
    base_speed = arc_length / total_ticks * rng.uniform(*BASE_SPEED_JITTER)
    total_duration_ms = arc_length / base_speed * TICK_MS
    return PacingPlan(
        role=_ROLES[index % len(_ROLES)],
        base_speed=base_speed,
        modifiers=_draft_modifiers(rng, total_duration_ms),
    )


def _spread(results: list[SimulationResult]) -> float:
    times = [r.final_time_ms for r in results]
    return max(times) - min(times)


def rebalance(
    plans: list[PacingPlan],
    results: list[SimulationResult],
) -> list[PacingPlan]:
    """Single corrective pass: scale base speeds towards the mean finish time.

    A horse finishing ``delta`` ms behind the mean is sped up by
    ``clamp(delta / 5000, -0.08, 0.08)``; one finishing ahead is slowed by the
    same rule.
    The adjustment is added, not subtracted, so late horses gain speed and the
    spread narrows.
    """
    mean_time = mean(r.final_time_ms for r in results)
    adjusted = []
    for plan, result in zip(plans, results):
        delta = result.final_time_ms - mean_time
        adjustment = min(max(delta / REBALANCE_SCALE_MS, -REBALANCE_LIMIT), REBALANCE_LIMIT)
        adjusted.append(replace(plan, base_speed=plan.base_speed * (1 + adjustment)))
    return adjusted


def build_pacing_plan(
    horses: list[HorseRef],
    paths: Mapping[int, HorsePath],
    race_duration_seconds: float = 60.0,
    rng: random.Random | None = None,
) -> PacingOutcome:
    """Assign every horse a :class:`PacingPlan`.

    Args:
        horses: Horses in race order; the order decides the role cycle.
        paths: ``local_id`` -> :class:`HorsePath`.  Must be complete before
            pacing starts because base speeds depend on arc length.
        race_duration_seconds: Target duration for an un-modified horse.
        rng: Random source; pass a seeded ``random.Random`` for reproducible races.

    Raises:
        MissingPathData: If a horse has no entry in *paths*.
        ValueError: If *horses* is empty or the duration is not positive.
    """
    if not horses:
        raise ValueError("At least one horse is required")
    if race_duration_seconds <= 0:
        raise ValueError("race_duration_seconds must be positive")
    rng = rng or random.Random()

    arc_lengths = []
    for horse in horses:
        if horse.local_id not in paths:
            raise MissingPathData(horse.local_id, "no lane path generated")
        arc_lengths.append(paths[horse.local_id].arc_length)

    plans = [
        draft_plan(i, arc, race_duration_seconds, rng)
        for i, arc in enumerate(arc_lengths)
    ]
    results = [
        simulate_plan(plan, arc, horse.local_id)
        for plan, arc, horse in zip(plans, arc_lengths, horses)
    ]
    spread_before = _spread(results)
    spread_after = spread_before
    rebalanced = False

    if spread_before > MAX_SPREAD_MS:
        _logger.info(
            "Pacing imbalance: finish spread %.0f ms exceeds %.0f ms; rebalancing",
            spread_before,
            MAX_SPREAD_MS,
        )
        plans = rebalance(plans, results)
        results = [
            simulate_plan(plan, arc, horse.local_id)
            for plan, arc, horse in zip(plans, arc_lengths, horses)
        ]
        spread_after = _spread(results)
        rebalanced = True

    return PacingOutcome(
        horses=[PacedHorse(horse=h, plan=p) for h, p in zip(horses, plans)],
        spread_before_ms=spread_before,
        spread_after_ms=spread_after,
        rebalanced=rebalanced,
    )
