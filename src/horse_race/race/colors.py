"""Horse colour names to 0xRRGGBB integers."""

from __future__ import annotations

import logging
import string
from functools import lru_cache

_logger = logging.getLogger(__name__)

FALLBACK_COLOR = 0xFF00FF

NAMED_COLORS: dict[str, int] = {
    "red": 0xFF0000,
    "blue": 0x0000FF,
    "green": 0x00FF00,
    "yellow": 0xFFFF00,
    "purple": 0x800080,
    "orange": 0xFFA500,
    "pink": 0xFF69B4,
    "black": 0x000000,
    "white": 0xFFFFFF,
    "gray": 0x808080,
    "teal": 0x008080,
    "navy": 0x000080,
    "lime": 0x00FF00,
    "cyan": 0x00FFFF,
    "maroon": 0x800000,
    "olive": 0x808000,
    "beige": 0xF5F5DC,
    "indigo": 0x4B0082,
    "aqua": 0x00FFFF,
    "tan": 0xD2B48C,
    "charcoal": 0x36454F,
    "silver": 0xC0C0C0,
}


@lru_cache(maxsize=None)
def parse_color(value: str) -> int:
    """Return the colour for a name (``"Navy"``) or hex string (``"#1a2b3c"``).

    Unknown values log a warning and return :data:`FALLBACK_COLOR`.
    Results are memoized for the life of the process.
    """
    clean = value.strip().lower()
    if clean in NAMED_COLORS:
        return NAMED_COLORS[clean]
    hex_part = clean[1:] if clean.startswith("#") else clean.removeprefix("0x")
    if len(hex_part) == 6 and all(c in string.hexdigits for c in hex_part):
        return int(hex_part, 16)
    _logger.warning("Unknown horse colour %r; using fallback", value)
    return FALLBACK_COLOR
