"""POST /api/races."""

from __future__ import annotations

from tests.web.conftest import make_race_payload


def test_create_race(client):
    resp = client.post("/api/races", json=make_race_payload())
    assert resp.status_code == 200
    data = resp.json()

    assert data["raceId"] == "race-1"
    assert [h["id"] for h in data["horses"]] == [100, 101, 102]
    assert [h["laneIndex"] for h in data["horses"]] == [0, 1, 2]
    assert data["warnings"] == []
    assert len(data["finishLine"]) == 2


def test_every_plan_has_sorted_modifiers(client):
    data = client.post("/api/races", json=make_race_payload(n_horses=4)).json()
    for horse in data["horses"]:
        mods = horse["racePacingPlan"]["modifiers"]
        assert 3 <= len(mods) <= 5
        starts = [m["startMs"] for m in mods]
        assert starts == sorted(starts)
        assert horse["arcLength"] > 0


def test_roles_cycle(client):
    data = client.post("/api/races", json=make_race_payload(n_horses=4)).json()
    roles = [h["racePacingPlan"]["role"] for h in data["horses"]]
    assert roles == ["front-runner", "comeback", "volatile", "front-runner"]


def test_seed_makes_plans_reproducible(client):
    payload = make_race_payload(seed=11)
    a = client.post("/api/races", json=payload).json()
    b = client.post("/api/races", json=payload).json()
    assert [h["racePacingPlan"] for h in a["horses"]] == [h["racePacingPlan"] for h in b["horses"]]


def test_horse_without_lane_is_reported(client):
    payload = make_race_payload(n_horses=2)
    payload["horses"].append({"id": 999, "localId": 7})
    payload["laneCount"] = 3
    data = client.post("/api/races", json=payload).json()

    assert [h["id"] for h in data["horses"]] == [100, 101]
    assert data["warnings"][0]["horseId"] == 999
    assert data["warnings"][0]["localId"] == 7


def test_no_horses_returns_422(client):
    resp = client.post("/api/races", json={"raceId": "x", "horses": []})
    assert resp.status_code == 422


def test_non_positive_duration_returns_422(client):
    resp = client.post("/api/races", json=make_race_payload(raceDurationSeconds=0))
    assert resp.status_code == 422


def test_missing_race_id_gets_generated(client):
    payload = make_race_payload()
    del payload["raceId"]
    data = client.post("/api/races", json=payload).json()
    assert data["raceId"].isdigit()
