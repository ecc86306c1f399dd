"""Authoritative race simulation at a fixed 30 Hz tick.

:class:`RaceSession` is the single writer of every horse marker.
:class:`RaceTicker` runs a session on a background thread and queues the wire
events with drop-oldest overflow handling.
"""

from __future__ import annotations

import contextlib
import logging
import queue
import threading
import time

from horse_race.pacing.simulator import TICK_MS, TICK_RATE
from horse_race.race.driver import LiveDriver, ReplayRecorder
from horse_race.race.models import FinishEntry, HorseFrame, RaceInitEvent, ReplayFrame, TickEvent
from horse_race.race.setup import PreparedRace

_logger = logging.getLogger(__name__)


class RaceSession:
    """Steps every horse of a :class:`PreparedRace` once per tick.

    Parameters
    ----------
    prepared:
        The race to run; its paths and plans are only read.
    """

    def __init__(self, prepared: PreparedRace) -> None:
        self.prepared = prepared
        self._horse_ids = {p.horse.local_id: p.horse.id for p in prepared.horses}
        self._drivers = {
            p.horse.local_id: LiveDriver(prepared.paths[p.horse.local_id], p.plan)
            for p in prepared.horses
        }
        self._recorder = ReplayRecorder()
        self.tick_count = 0

    @property
    def race_id(self) -> str:
        return self.prepared.race_id

    @property
    def finished(self) -> bool:
        return all(d.finished for d in self._drivers.values())

    @property
    def elapsed_ms(self) -> float:
        return self.tick_count * TICK_MS

    def init_event(self) -> RaceInitEvent:
        return RaceInitEvent(
            race_id=self.race_id,
            horses=[p.horse for p in self.prepared.horses],
            start_at_percent=self.prepared.start_at_percent,
        )

    def step(self) -> list[TickEvent]:
        """Advance one tick and return a ``race:tick`` event per horse still running.

        The tick on which a horse crosses the line is reported with ``pct == 100``.
        """
        t = self.elapsed_ms
        events: list[TickEvent] = []
        for local_id, driver in self._drivers.items():
            if driver.finished:
                continue
            frame = driver.tick(t)
            self._recorder.record(local_id, t, frame.distance)
            pct = min(frame.distance / driver.path.arc_length * 100, 100.0)
            events.append(TickEvent(self.race_id, self._horse_ids[local_id], pct))
        self.tick_count += 1
        if self.finished and events:
            _logger.info("Race %s finished after %d ticks", self.race_id, self.tick_count)
        return events

    def frames(self) -> list[HorseFrame]:
        """Current position of every horse without advancing."""
        return [d.current_frame() for d in self._drivers.values()]

    def run_to_finish(self, max_ticks: int = 100_000) -> list[TickEvent]:
        """Step until every horse finishes (or *max_ticks*); returns all events in order."""
        events: list[TickEvent] = []
        while not self.finished and self.tick_count < max_ticks:
            events.extend(self.step())
        return events

    def leaderboard(self) -> list[FinishEntry]:
        """Finished horses ordered by finish time (ties keep lane order)."""
        done = [
            (driver.finish_time_ms, local_id)
            for local_id, driver in self._drivers.items()
            if driver.finish_time_ms is not None
        ]
        done.sort()
        return [
            FinishEntry(horse_id=self._horse_ids[local_id], position=i + 1, time_ms=t)
            for i, (t, local_id) in enumerate(done)
        ]

    def replay_frames(self) -> dict[int, list[ReplayFrame]]:
        """Recorded frames keyed by horse id."""
        return {self._horse_ids[k]: v for k, v in self._recorder.frames().items()}


class RaceTicker:
    """Steps a :class:`RaceSession` at *target_hz* on a background thread.

    Events are queued; when the queue is full the *oldest* event is dropped so
    a slow consumer always sees the latest progress.  The thread exits by
    itself once the race finishes.

    Parameters
    ----------
    session:
        Session to drive.  Nothing else may step it while the ticker runs.
    target_hz:
        Tick frequency; defaults to the 30 Hz simulation rate.
    queue_maxsize:
        Maximum number of buffered events before drop-oldest kicks in.
    """

    def __init__(
        self,
        session: RaceSession,
        target_hz: float = TICK_RATE,
        queue_maxsize: int = 1024,
    ) -> None:
        self._session = session
        self._interval = 1.0 / target_hz
        self._queue: queue.Queue[TickEvent] = queue.Queue(maxsize=queue_maxsize)
        self._stop_event = threading.Event()
        self._done = threading.Event()
        self._thread: threading.Thread | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin stepping the session on a daemon thread.

        Raises:
            RuntimeError: If the ticker is already running.
        """
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("RaceTicker already running")
        self._stop_event.clear()
        self._done.clear()
        self._thread = threading.Thread(
            target=self._run, daemon=True, name=f"RaceTicker-{self._session.race_id}"
        )
        self._thread.start()

    def stop(self) -> None:
        """Halt ticking mid-race; queued events stay readable."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the tick thread exits; returns False on timeout."""
        return self._done.wait(timeout)

    def get_event(self, timeout: float = 0.1) -> TickEvent | None:
        """Next buffered tick event, or None when the buffer stays empty for *timeout* s."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def queue_size(self) -> int:
        """Tick events buffered and not yet read."""
        return self._queue.qsize()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run(self) -> None:
        while not self._stop_event.is_set() and not self._session.finished:
            t0 = time.monotonic()
            for event in self._session.step():
                self._publish(event)
            wait = self._interval - (time.monotonic() - t0)
            if wait > 0:
                self._stop_event.wait(wait)
        self._done.set()

    def _publish(self, event: TickEvent) -> None:
        # full buffer: evict the stalest tick so the newest progress survives
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            with contextlib.suppress(queue.Empty):
                self._queue.get_nowait()
            with contextlib.suppress(queue.Full):
                self._queue.put_nowait(event)
