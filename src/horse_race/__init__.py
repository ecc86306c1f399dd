"""Live multiplayer horse-race mini-game: track geometry, pacing and race service."""

__version__ = "0.1.0"
