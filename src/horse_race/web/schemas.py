"""Pydantic request/response schemas for the race API.

Wire names are camelCase to match the browser client; Python attributes stay
snake_case via aliases.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from horse_race.pacing.models import HorseRef


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class HorseIn(_CamelModel):
    id: int
    local_id: int | None = Field(default=None, alias="localId")
    name: str = ""
    color: str = ""

    def to_ref(self, index: int) -> HorseRef:
        """Build a :class:`HorseRef`; the list position is the lane when ``localId`` is absent."""
        local_id = self.local_id if self.local_id is not None else index
        return HorseRef(id=self.id, local_id=local_id, name=self.name, color=self.color)


class CreateRaceRequest(_CamelModel):
    race_id: str | None = Field(default=None, alias="raceId")
    horses: list[HorseIn]
    lane_count: int | None = Field(default=None, alias="laneCount")
    race_duration_seconds: float | None = Field(default=None, alias="raceDurationSeconds", gt=0)
    seed: int | None = None


class HealthResponse(BaseModel):
    status: str
    version: str


class PointOut(BaseModel):
    x: float
    y: float


class TrackResponse(_CamelModel):
    inner_boundary: list[PointOut] = Field(serialization_alias="innerBoundary")
    outer_boundary: list[PointOut] = Field(serialization_alias="outerBoundary")
    centerline: list[PointOut]
    start_at: PointOut = Field(serialization_alias="startAt")
    start_line_at: PointOut = Field(serialization_alias="startLineAt")
    distance: list[float]
    curvature: list[float]


class ReplayFrameOut(_CamelModel):
    time_ms: float = Field(serialization_alias="timeMs")
    distance: float


class ReplayResponse(_CamelModel):
    race_id: str = Field(serialization_alias="raceId")
    frames: dict[int, list[ReplayFrameOut]]
    results: list[dict]
