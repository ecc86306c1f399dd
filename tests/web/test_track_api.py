"""GET /api/track."""

from __future__ import annotations

from horse_race.config import RaceConfig
from horse_race.web.app import app, get_service
from horse_race.web.service import RaceService

_QUERY = {"startAtPercent": 0.0, "width": 1000, "height": 600}


def test_track_shape(client):
    resp = client.get("/api/track", params=_QUERY)
    assert resp.status_code == 200
    data = resp.json()
    assert set(data) == {
        "innerBoundary", "outerBoundary", "centerline",
        "startAt", "startLineAt", "distance", "curvature",
    }
    n = len(data["centerline"])
    assert len(data["innerBoundary"]) == n
    assert len(data["outerBoundary"]) == n
    assert len(data["distance"]) == n
    assert data["centerline"][0] == data["startAt"]
    assert data["centerline"][0] == data["centerline"][-1]


def test_track_start_moves_with_percent(client):
    a = client.get("/api/track", params=_QUERY).json()
    b = client.get("/api/track", params={**_QUERY, "startAtPercent": 0.5}).json()
    assert a["startAt"] != b["startAt"]


def test_track_percent_is_clamped(client):
    a = client.get("/api/track", params=_QUERY).json()
    b = client.get("/api/track", params={**_QUERY, "startAtPercent": -2}).json()
    assert a["startAt"] == b["startAt"]


def test_small_canvas_is_enlarged_to_minimum(client):
    small = client.get("/api/track", params={**_QUERY, "width": 10, "height": 10}).json()
    minimum = client.get("/api/track", params={**_QUERY, "width": 800, "height": 400}).json()
    assert small["centerline"] == minimum["centerline"]


def test_missing_query_param_returns_422(client):
    resp = client.get("/api/track", params={"width": 1000, "height": 600})
    assert resp.status_code == 422


def test_bad_corner_radius_returns_422(client, tmp_path):
    cfg = RaceConfig(db_path=str(tmp_path / "x.db"), corner_radius=1000.0)
    app.dependency_overrides[get_service] = lambda: RaceService(cfg)
    resp = client.get("/api/track", params=_QUERY)
    assert resp.status_code == 422
    assert "corner_radius" in resp.json()["detail"]
