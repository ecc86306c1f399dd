"""ReplayStorage: persists races, replay frames and results to SQLite.

Schema notes:
  - ``races`` uses the race id string as its key; frames and results refer
    to the integer rowid so the id text is not repeated on every frame row.
  - ``replay_frames`` holds one ``(time_ms, distance)`` sample per horse per
    tick, i.e. 30 rows per horse per second.  Writes are batched.
"""

from __future__ import annotations

import sqlite3

from horse_race.race.models import FinishEntry, ReplayFrame

_DDL = """
PRAGMA journal_mode = WAL;
PRAGMA synchronous  = NORMAL;

CREATE TABLE IF NOT EXISTS races (
    idx        INTEGER PRIMARY KEY,
    race_id    TEXT    NOT NULL UNIQUE,
    started_at TEXT    NOT NULL
               DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
    ended_at   TEXT
);

CREATE TABLE IF NOT EXISTS replay_frames (
    race_idx INTEGER NOT NULL,
    horse_id INTEGER NOT NULL,
    time_ms  REAL    NOT NULL,
    distance REAL    NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_replay_race_horse
    ON replay_frames (race_idx, horse_id);

CREATE TABLE IF NOT EXISTS results (
    race_idx INTEGER NOT NULL,
    horse_id INTEGER NOT NULL,
    position INTEGER NOT NULL,
    time_ms  REAL    NOT NULL
);
"""

_INSERT_RACE = "INSERT OR IGNORE INTO races (race_id) VALUES (?)"
_SELECT_RACE = "SELECT idx FROM races WHERE race_id = ?"

_INSERT_FRAME = """
INSERT INTO replay_frames (race_idx, horse_id, time_ms, distance)
VALUES (?, ?, ?, ?)
"""

_SELECT_FRAMES = """
SELECT f.horse_id, f.time_ms, f.distance
FROM   replay_frames f
JOIN   races r ON r.idx = f.race_idx
WHERE  r.race_id = ?
ORDER  BY f.horse_id, f.time_ms
"""


class ReplayStorage:
    """Stores and retrieves race replays from a SQLite database.

    Parameters
    ----------
    db_path:
        Path to the SQLite file.  Pass ``":memory:"`` for in-process testing.
    """

    def __init__(self, db_path: str = "races.db") -> None:
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        for stmt in _DDL.strip().split(";"):
            stmt = stmt.strip()
            if stmt:
                self._conn.execute(stmt)
        self._conn.commit()
        self._race_cache: dict[str, int] = {}
        self._batch: list[tuple] = []
        self._batch_size = 900  # ~30 s of one horse at 30 Hz

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def save_race(self, race_id: str) -> int:
        """Register *race_id* (idempotent) and return its row index."""
        return self._race_idx(race_id)

    def finish_race(self, race_id: str) -> None:
        """Stamp ``ended_at`` on *race_id*."""
        self._flush()
        self._conn.execute(
            "UPDATE races SET ended_at = strftime('%Y-%m-%dT%H:%M:%SZ', 'now') WHERE race_id = ?",
            (race_id,),
        )
        self._conn.commit()

    def save_frame(self, race_id: str, horse_id: int, frame: ReplayFrame) -> None:
        """Persist one replay frame.  Writes are batched."""
        self._batch.append((self._race_idx(race_id), horse_id, frame.time_ms, frame.distance))
        if len(self._batch) >= self._batch_size:
            self._flush()

    def save_frames(self, race_id: str, frames: dict[int, list[ReplayFrame]]) -> None:
        """Persist every frame of a finished race (``horse_id -> frames``)."""
        for horse_id, horse_frames in frames.items():
            for frame in horse_frames:
                self.save_frame(race_id, horse_id, frame)
        self._flush()

    def get_frames(self, race_id: str) -> dict[int, list[ReplayFrame]]:
        """Return ``horse_id -> frames`` ordered by time; empty if unknown."""
        self._flush()
        result: dict[int, list[ReplayFrame]] = {}
        for row in self._conn.execute(_SELECT_FRAMES, (race_id,)).fetchall():
            result.setdefault(int(row["horse_id"]), []).append(
                ReplayFrame(time_ms=float(row["time_ms"]), distance=float(row["distance"]))
            )
        return result

    def save_results(self, race_id: str, results: list[FinishEntry]) -> None:
        race_idx = self._race_idx(race_id)
        self._conn.executemany(
            "INSERT INTO results (race_idx, horse_id, position, time_ms) VALUES (?, ?, ?, ?)",
            [(race_idx, r.horse_id, r.position, r.time_ms) for r in results],
        )
        self._conn.commit()

    def get_results(self, race_id: str) -> list[FinishEntry]:
        rows = self._conn.execute(
            """
            SELECT res.horse_id, res.position, res.time_ms
            FROM   results res
            JOIN   races r ON r.idx = res.race_idx
            WHERE  r.race_id = ?
            ORDER  BY res.position
            """,
            (race_id,),
        ).fetchall()
        return [
            FinishEntry(horse_id=int(r["horse_id"]), position=int(r["position"]), time_ms=float(r["time_ms"]))
            for r in rows
        ]

    def get_race(self, race_id: str) -> dict | None:
        """Return the race row as a dict, or None if not found."""
        row = self._conn.execute("SELECT * FROM races WHERE race_id = ?", (race_id,)).fetchone()
        return dict(row) if row else None

    def close(self) -> None:
        """Flush buffered writes and close the database connection."""
        self._flush()
        self._conn.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _race_idx(self, race_id: str) -> int:
        """Return the integer PK for *race_id*, creating a row if needed."""
        if race_id not in self._race_cache:
            self._flush()
            self._conn.execute(_INSERT_RACE, (race_id,))
            self._conn.commit()
            row = self._conn.execute(_SELECT_RACE, (race_id,)).fetchone()
            self._race_cache[race_id] = row[0]
        return self._race_cache[race_id]

    def _flush(self) -> None:
        if self._batch:
            self._conn.executemany(_INSERT_FRAME, self._batch)
            self._conn.commit()
            self._batch.clear()
