"""
Console progress reporting.
"""

import sys
from typing import Optional, TextIO


def format_eta(seconds: float) -> str:
    """Format a duration as HH:MM:SS, flooring partial seconds."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_status(current: int, total: int, elapsed: float) -> str:
    """Build the status line shown after a page is done."""
    fraction = current / total if total else 1.0
    line = f"Page {current}/{total} ({fraction:.2%}) downloaded."
    if current >= total or fraction <= 0:
        return line

    remaining = elapsed / fraction - elapsed
    return f"{line} {format_eta(remaining)} remaining"


class ConsoleProgress:
    """Rewrites a single status line; finishes with a newline on the last page."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout
        self._last_len = 0

    def __call__(self, current: int, total: int, elapsed: float) -> None:
        line = format_status(current, total, elapsed)
        # Clear leftovers of a longer previous line
        padding = " " * max(0, self._last_len - len(line))
        self.stream.write(f"\r{line}{padding}")
        if current >= total:
            self.stream.write("\n")
            self._last_len = 0
        else:
            self._last_len = len(line)
        self.stream.flush()
