"""Shared fixtures for race tests."""

from __future__ import annotations

import pytest

from horse_race.config import RaceConfig
from horse_race.pacing.models import HorseRef
from horse_race.race.setup import RaceSetup

_COLORS = ["red", "blue", "green", "yellow", "purple", "orange"]


@pytest.fixture
def horses() -> list[HorseRef]:
    """Four horses with ids 100.. and local ids 0..3."""
    return [
        HorseRef(id=100 + i, local_id=i, name=f"Horse {i}", color=_COLORS[i])
        for i in range(4)
    ]


@pytest.fixture
def config() -> RaceConfig:
    """Short, seeded race so sessions finish in a few hundred ticks."""
    return RaceConfig(db_path=":memory:", race_duration_s=3.0, seed=7)


@pytest.fixture
def prepared(config, horses):
    return RaceSetup(config).prepare("race-1", horses)
