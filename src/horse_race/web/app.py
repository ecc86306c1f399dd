"""FastAPI application: track geometry, race setup, replays and the live race socket."""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Query, WebSocket, WebSocketDisconnect

from horse_race import __version__
from horse_race.config import RaceConfig
from horse_race.race.session import RaceSession
from horse_race.track.errors import InvalidGeometry
from horse_race.web.schemas import (
    CreateRaceRequest,
    HealthResponse,
    PointOut,
    ReplayFrameOut,
    ReplayResponse,
    TrackResponse,
)
from horse_race.web.service import RaceService

load_dotenv()  # loads .env from project root; must run before env vars are consumed

_logger = logging.getLogger(__name__)

MIN_CANVAS_WIDTH = 800.0
MIN_CANVAS_HEIGHT = 400.0

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(title="Horse Race", version=__version__)


@lru_cache(maxsize=1)
def get_service() -> RaceService:
    return RaceService(RaceConfig.from_env())


def _points(points) -> list[PointOut]:
    return [PointOut(x=p.x, y=p.y) for p in points]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


@app.get("/api/track", response_model=TrackResponse)
def track(
    start_at_percent: float = Query(alias="startAtPercent"),
    width: float = Query(),
    height: float = Query(),
    svc: RaceService = Depends(get_service),
) -> TrackResponse:
    """Track boundaries, centerline and start markers for a canvas size."""
    pct = min(max(start_at_percent, 0.0), 1.0)
    try:
        geometry = svc.track(max(width, MIN_CANVAS_WIDTH), max(height, MIN_CANVAS_HEIGHT), pct)
    except InvalidGeometry as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return TrackResponse(
        inner_boundary=_points(geometry.inner),
        outer_boundary=_points(geometry.outer),
        centerline=_points(geometry.centerline),
        start_at=PointOut(x=geometry.start_at.x, y=geometry.start_at.y),
        start_line_at=PointOut(x=geometry.start_line_at.x, y=geometry.start_line_at.y),
        distance=geometry.distance,
        curvature=geometry.curvature,
    )


@app.post("/api/races")
def create_race(req: CreateRaceRequest, svc: RaceService = Depends(get_service)) -> dict:
    """Generate lane paths and pacing plans for a race without running it."""
    try:
        prepared = svc.create_race(req)
    except InvalidGeometry as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return prepared.to_dict()


@app.get("/api/races/{race_id}/replay", response_model=ReplayResponse)
def race_replay(race_id: str, svc: RaceService = Depends(get_service)) -> ReplayResponse:
    stored = svc.replay(race_id)
    if stored is None:
        raise HTTPException(status_code=404, detail="Race not found")
    frames, results = stored
    return ReplayResponse(
        race_id=race_id,
        frames={
            horse_id: [ReplayFrameOut(time_ms=f.time_ms, distance=f.distance) for f in horse_frames]
            for horse_id, horse_frames in frames.items()
        },
        results=[r.to_dict() for r in results],
    )


@app.websocket("/ws/race")
async def race_socket(websocket: WebSocket, svc: RaceService = Depends(get_service)) -> None:
    """Live race channel.

    Client sends ``{"event": "startRace", "raceId": ..., "horses": [...]}``.
    Server replies with ``race:init``, a stream of ``race:tick`` and a final
    ``race:finish``; a setup failure sends ``race:setupFailed`` and the
    client may retry on the same socket.
    The finished race is written to replay storage on a worker thread so the
    loop keeps ticking other sockets.
    """
    await websocket.accept()
    try:
        while True:
            message = await websocket.receive_json()
            if message.get("event") != "startRace":
                await websocket.send_json({"event": "error", "data": {"detail": "unknown event"}})
                continue

            try:
                req = CreateRaceRequest.model_validate(message)
                prepared = svc.create_race(req)
            except (InvalidGeometry, ValueError) as exc:
                _logger.warning("Race setup failed: %s", exc)
                await websocket.send_json({
                    "event": "race:setupFailed",
                    "data": {"raceId": message.get("raceId"), "detail": str(exc)},
                })
                continue

            session = RaceSession(prepared)
            await websocket.send_json({"event": "race:init", "data": session.init_event().to_dict()})
            while not session.finished:
                for event in session.step():
                    await websocket.send_json({"event": "race:tick", "data": event.to_dict()})
                await asyncio.sleep(svc.tick_interval_s)

            leaderboard = await asyncio.to_thread(svc.record_race, session)
            await websocket.send_json({
                "event": "race:finish",
                "data": [entry.to_dict() for entry in leaderboard],
            })
    except WebSocketDisconnect:
        _logger.info("Race socket disconnected")
