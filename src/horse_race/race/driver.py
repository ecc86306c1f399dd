"""Per-frame horse positioning for live races and replays.

Both drivers end in :meth:`HorsePath.point_at_distance` (finish-clamped), so a
live run and its replay put a horse in the same place at the same distance.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass

from horse_race.pacing.models import PacingPlan
from horse_race.pacing.simulator import effective_speed
from horse_race.race.models import HorseFrame, ReplayFrame
from horse_race.track.builder import HorsePath


@dataclass
class HorseMarker:
    """The visual object a driver moves.

    Only the owning driver's tick writes to it.
    """

    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0


class LiveDriver:
    """Accumulates distance from a pacing plan, one tick at a time.

    Parameters
    ----------
    path:
        The horse's lane path.
    plan:
        The horse's pacing plan; read only.
    marker:
        Visual object to update.  A fresh :class:`HorseMarker` is created if
        omitted.  It is placed at distance 0 on construction.
    """

    def __init__(self, path: HorsePath, plan: PacingPlan, marker: HorseMarker | None = None) -> None:
        self.path = path
        self.plan = plan
        self.marker = marker or HorseMarker()
        self.distance = 0.0
        self.finish_time_ms: float | None = None
        self._place(self.distance)

    @property
    def finished(self) -> bool:
        return self.finish_time_ms is not None

    def tick(self, elapsed_ms: float, delta_ticks: float = 1.0) -> HorseFrame:
        """Advance by *delta_ticks* ticks of speed evaluated at *elapsed_ms*."""
        if not self.finished:
            speed = effective_speed(self.plan, elapsed_ms)
            self.distance = min(self.distance + speed * delta_ticks, self.path.arc_length)
            if self.distance >= self.path.arc_length:
                self.finish_time_ms = elapsed_ms
        return self._place(self.distance)

    def current_frame(self) -> HorseFrame:
        """Re-place the marker at the current distance without advancing."""
        return self._place(self.distance)

    def _place(self, distance: float) -> HorseFrame:
        sample = self.path.point_at_distance(distance)
        self.marker.x = sample.x
        self.marker.y = sample.y
        self.marker.rotation = sample.rotation
        return HorseFrame(
            local_id=self.path.local_id,
            distance=distance,
            x=sample.x,
            y=sample.y,
            rotation=sample.rotation,
            finished=self.finished,
        )


class ReplayDriver:
    """Replays recorded ``{time, distance}`` frames.

    The distance at an arbitrary time is linearly interpolated between the two
    bracketing frames and clamped to the first/last frame outside the
    recording.
    """

    def __init__(self, path: HorsePath, frames: list[ReplayFrame], marker: HorseMarker | None = None) -> None:
        if not frames:
            raise ValueError(f"No replay frames for horse local_id={path.local_id}")
        self.path = path
        self.frames = sorted(frames, key=lambda f: f.time_ms)
        self._times = [f.time_ms for f in self.frames]
        self.marker = marker or HorseMarker()

    def distance_at(self, elapsed_ms: float) -> float:
        frames = self.frames
        if elapsed_ms <= self._times[0]:
            return frames[0].distance
        if elapsed_ms >= self._times[-1]:
            return frames[-1].distance
        idx = bisect.bisect_right(self._times, elapsed_ms)
        f0, f1 = frames[idx - 1], frames[idx]
        span = f1.time_ms - f0.time_ms
        if span <= 0:
            return f1.distance
        t = (elapsed_ms - f0.time_ms) / span
        return f0.distance + t * (f1.distance - f0.distance)

    def frame_at(self, elapsed_ms: float) -> HorseFrame:
        distance = self.distance_at(elapsed_ms)
        sample = self.path.point_at_distance(distance)
        self.marker.x = sample.x
        self.marker.y = sample.y
        self.marker.rotation = sample.rotation
        return HorseFrame(
            local_id=self.path.local_id,
            distance=distance,
            x=sample.x,
            y=sample.y,
            rotation=sample.rotation,
            finished=distance >= self.path.arc_length,
        )


class ReplayRecorder:
    """Collects one :class:`ReplayFrame` per horse per tick."""

    def __init__(self) -> None:
        self._frames: dict[int, list[ReplayFrame]] = {}

    def record(self, local_id: int, time_ms: float, distance: float) -> None:
        self._frames.setdefault(local_id, []).append(ReplayFrame(time_ms, distance))

    def frames(self) -> dict[int, list[ReplayFrame]]:
        return {k: list(v) for k, v in self._frames.items()}
