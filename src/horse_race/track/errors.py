"""Errors raised while building track geometry and horse paths."""

from __future__ import annotations


class InvalidGeometry(ValueError):
    """Malformed bounds, out-of-range corner radius, or a degenerate curve.

    Fatal to the current race-setup attempt.
    """


class MissingPathData(LookupError):
    """A horse has no corresponding lane or path.

    Attributes
    ----------
    local_id:
        The race-local id of the horse that could not be placed.
    """

    def __init__(self, local_id: int, reason: str) -> None:
        super().__init__(f"No path for horse local_id={local_id}: {reason}")
        self.local_id = local_id
        self.reason = reason
