"""Run a headless race and print the leaderboard.

Usage:
    uv run python scripts/simulate_race.py
    uv run python scripts/simulate_race.py --horses 6 --duration 20 --seed 42
    uv run python scripts/simulate_race.py --fast --db races.db   # no real-time pacing, store replay
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from dataclasses import replace

from dotenv import load_dotenv

load_dotenv()

from horse_race.config import RaceConfig  # noqa: E402
from horse_race.pacing.models import HorseRef  # noqa: E402
from horse_race.race.session import RaceSession, RaceTicker  # noqa: E402
from horse_race.race.setup import RaceSetup  # noqa: E402
from horse_race.replay.storage import ReplayStorage  # noqa: E402
from horse_race.track.errors import InvalidGeometry  # noqa: E402

_COLORS = ["red", "blue", "green", "yellow", "purple", "orange", "teal", "navy"]


def main() -> None:
    ap = argparse.ArgumentParser(description="Run a headless horse race")
    ap.add_argument("--horses", type=int, default=4, help="Number of horses")
    ap.add_argument("--duration", type=float, default=None, help="Target race duration in seconds")
    ap.add_argument("--seed", type=int, default=None, help="Tournament seed")
    ap.add_argument("--db", default="", help="Store the replay in this SQLite file")
    ap.add_argument("--fast", action="store_true", help="Step as fast as possible instead of 30 Hz")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = RaceConfig.from_env()
    overrides = {}
    if args.duration is not None:
        overrides["race_duration_s"] = args.duration
    if args.seed is not None:
        overrides["seed"] = args.seed
    cfg = replace(cfg, **overrides)

    horses = [
        HorseRef(id=100 + i, local_id=i, name=f"Horse {i + 1}", color=_COLORS[i % len(_COLORS)])
        for i in range(args.horses)
    ]
    race_id = str(int(time.time() * 1000))

    try:
        prepared = RaceSetup(cfg).prepare(race_id, horses)
    except InvalidGeometry as exc:
        print(f"ERROR: race setup failed: {exc}", file=sys.stderr)
        sys.exit(1)

    for warning in prepared.warnings:
        print(f"WARNING: {warning.message}", file=sys.stderr)

    for paced in prepared.horses:
        path = prepared.paths[paced.horse.local_id]
        print(
            f"{paced.horse.name:<10} lane {path.lane_index}  arc {path.arc_length:8.1f}px  "
            f"{paced.plan.role.value:<12} base {paced.plan.base_speed:.3f}/tick  "
            f"{len(paced.plan.modifiers)} modifiers"
        )

    session = RaceSession(prepared)
    if args.fast:
        session.run_to_finish()
    else:
        ticker = RaceTicker(session)
        ticker.start()
        try:
            while not ticker.wait(timeout=1.0):
                event = ticker.get_event(timeout=0.0)
                if event is not None:
                    print(f"  t={session.elapsed_ms / 1000:5.1f}s  horse {event.horse_id}: {event.pct:5.1f}%")
        except KeyboardInterrupt:
            print("\nStopped.")
        finally:
            ticker.stop()

    names = {p.horse.id: p.horse.name for p in prepared.horses}
    print("\nResults:")
    for entry in session.leaderboard():
        print(f"  {entry.position}. {names[entry.horse_id]:<10} {entry.time_ms / 1000:6.2f}s")

    if args.db:
        storage = ReplayStorage(args.db)
        try:
            storage.save_race(race_id)
            storage.save_frames(race_id, session.replay_frames())
            storage.save_results(race_id, session.leaderboard())
            storage.finish_race(race_id)
        finally:
            storage.close()
        print(f"Replay saved to {args.db} (race {race_id})")


if __name__ == "__main__":
    main()
