"""
Console Style

Status glyphs and text formatting for terminal output. Every emoji has a
plain-text fallback used when the output stream cannot encode it.
"""

import sys
from typing import Optional, TextIO

# (emoji, fallback) pairs
EMOJI = {
    "frowning_face": ("☹️  ", ":-/ "),
    "page_with_curl": ("📃  ", ""),
    "check_mark_button": ("✅  ", ""),
}

# (unit, seconds) from largest to smallest
_DURATION_UNITS = [
    ("week", 7 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
]


def supports_unicode(stream: Optional[TextIO] = None) -> bool:
    """Check if a stream can encode the status emoji."""
    stream = stream or sys.stdout
    encoding = getattr(stream, "encoding", None) or ""
    return encoding.lower().replace("-", "") in ("utf8", "utf16", "utf32")


def emoji(name: str, stream: Optional[TextIO] = None) -> str:
    """Get a status emoji, or its fallback if the stream cannot show it."""
    glyph, fallback = EMOJI[name]
    return glyph if supports_unicode(stream) else fallback


def format_duration(seconds: float) -> str:
    """
    Format a duration in the largest whole unit, e.g. "3 seconds", "1 minute".

    Args:
        seconds: Duration in seconds

    Returns:
        Human readable duration
    """
    seconds = max(0.0, seconds)
    for index, (unit, size) in enumerate(_DURATION_UNITS):
        if seconds >= size or unit == "second":
            count = int(round(seconds / size))
            # Rounding up to a whole larger unit, e.g. 59.6 s -> 1 minute
            if index > 0 and count * size >= _DURATION_UNITS[index - 1][1]:
                unit, size = _DURATION_UNITS[index - 1]
                count = int(round(seconds / size))
            return f"{count} {unit}" if count == 1 else f"{count} {unit}s"
