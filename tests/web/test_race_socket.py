"""WS /ws/race live channel."""

from __future__ import annotations

import threading

from tests.web.conftest import make_race_payload


def _start(ws, **kwargs) -> None:
    ws.send_json({"event": "startRace", **make_race_payload(**kwargs)})


def _run_until_finish(ws) -> tuple[list[dict], dict]:
    ticks = []
    while True:
        msg = ws.receive_json()
        if msg["event"] == "race:finish":
            return ticks, msg
        assert msg["event"] == "race:tick"
        ticks.append(msg["data"])


def test_full_race_over_socket(client):
    with client.websocket_connect("/ws/race") as ws:
        _start(ws, race_id="ws-1", n_horses=2)

        init = ws.receive_json()
        assert init["event"] == "race:init"
        assert init["data"]["raceId"] == "ws-1"
        assert [h["id"] for h in init["data"]["horses"]] == [100, 101]

        ticks, finish = _run_until_finish(ws)

    assert {t["raceId"] for t in ticks} == {"ws-1"}
    final_pct = {}
    for t in ticks:
        final_pct[t["horseId"]] = t["pct"]
    assert final_pct == {100: 100.0, 101: 100.0}

    board = finish["data"]
    assert [e["position"] for e in board] == [1, 2]
    assert sorted(e["horseId"] for e in board) == [100, 101]


def test_finished_race_is_stored_for_replay(client):
    with client.websocket_connect("/ws/race") as ws:
        _start(ws, race_id="ws-2", n_horses=2)
        ws.receive_json()
        _run_until_finish(ws)

    resp = client.get("/api/races/ws-2/replay")
    assert resp.status_code == 200
    data = resp.json()
    assert data["raceId"] == "ws-2"
    assert set(data["frames"]) == {"100", "101"}
    assert data["frames"]["100"][0]["timeMs"] == 0.0
    assert [r["position"] for r in data["results"]] == [1, 2]


def test_setup_failure_keeps_socket_open(client):
    with client.websocket_connect("/ws/race") as ws:
        ws.send_json({"event": "startRace", "raceId": "bad", "horses": []})
        failed = ws.receive_json()
        assert failed["event"] == "race:setupFailed"
        assert failed["data"]["raceId"] == "bad"

        _start(ws, race_id="retry", n_horses=1)
        assert ws.receive_json()["event"] == "race:init"
        _run_until_finish(ws)


def test_malformed_start_is_a_setup_failure(client):
    with client.websocket_connect("/ws/race") as ws:
        ws.send_json({"event": "startRace", "raceId": "nohorses"})
        assert ws.receive_json()["event"] == "race:setupFailed"


def test_unknown_event_gets_error(client):
    with client.websocket_connect("/ws/race") as ws:
        ws.send_json({"event": "dance"})
        assert ws.receive_json()["event"] == "error"


def test_replay_is_recorded_off_the_event_loop(client, service, monkeypatch):
    threads = {}
    create_race = service.create_race
    record_race = service.record_race

    def tracking_create(req):
        threads["loop"] = threading.get_ident()
        return create_race(req)

    def tracking_record(session):
        threads["record"] = threading.get_ident()
        return record_race(session)

    monkeypatch.setattr(service, "create_race", tracking_create)
    monkeypatch.setattr(service, "record_race", tracking_record)

    with client.websocket_connect("/ws/race") as ws:
        _start(ws, race_id="ws-thread", n_horses=2)
        ws.receive_json()
        _, finish = _run_until_finish(ws)

    assert [e["position"] for e in finish["data"]] == [1, 2]
    assert threads["record"] != threads["loop"]
