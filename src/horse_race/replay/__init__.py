"""Replay persistence."""

from horse_race.replay.storage import ReplayStorage

__all__ = ["ReplayStorage"]
