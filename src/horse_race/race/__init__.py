"""Race setup, live/replay drivers and the authoritative tick loop."""

from horse_race.race.driver import HorseMarker, LiveDriver, ReplayDriver, ReplayRecorder
from horse_race.race.models import (
    FinishEntry,
    HorseFrame,
    RaceInitEvent,
    ReplayFrame,
    SetupWarning,
    TickEvent,
)
from horse_race.race.session import RaceSession, RaceTicker
from horse_race.race.setup import PreparedRace, RaceSetup

__all__ = [
    "FinishEntry",
    "HorseFrame",
    "HorseMarker",
    "LiveDriver",
    "PreparedRace",
    "RaceInitEvent",
    "RaceSession",
    "RaceSetup",
    "RaceTicker",
    "ReplayDriver",
    "ReplayFrame",
    "ReplayRecorder",
    "SetupWarning",
    "TickEvent",
]
