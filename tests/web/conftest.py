"""Shared fixtures for web tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from horse_race.config import RaceConfig
from horse_race.web.app import app, get_service
from horse_race.web.service import RaceService


@pytest.fixture
def race_config(tmp_path) -> RaceConfig:
    """One-second seeded races stored under *tmp_path*."""
    return RaceConfig(db_path=str(tmp_path / "races.db"), race_duration_s=1.0, seed=3)


@pytest.fixture
def service(race_config) -> RaceService:
    return RaceService(race_config, tick_interval_s=0.0)


@pytest.fixture
def client(service):
    """FastAPI test client wired to *service*."""
    app.dependency_overrides[get_service] = lambda: service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_race_payload(race_id: str = "race-1", n_horses: int = 3, **extra) -> dict:
    """Body for ``POST /api/races`` / ``startRace``."""
    colors = ["red", "blue", "green", "yellow"]
    payload = {
        "raceId": race_id,
        "horses": [
            {"id": 100 + i, "name": f"Horse {i}", "color": colors[i % len(colors)]}
            for i in range(n_horses)
        ],
    }
    payload.update(extra)
    return payload
