"""
============================================================================
ENDPOINT PINGER - HELPERS UTILITY
============================================================================
Duration parsing and formatting helpers.

License: MIT
============================================================================
"""

import re
from typing import Optional


# ============================================================================
# TIME UTILITIES
# ============================================================================

class TimeHelper:
    """
    Time and duration utilities.
    """

    # One or more "<number><unit>" groups, e.g. "90s", "1h30m", "1.5h", "250ms"
    _DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
    _DURATION_FULL = re.compile(r"(?:\d+(?:\.\d+)?(?:ms|h|m|s))+")

    _UNIT_SECONDS = {
        "h": 3600.0,
        "m": 60.0,
        "s": 1.0,
        "ms": 0.001,
    }

    @staticmethod
    def parse_duration(text: str) -> Optional[float]:
        """
        Convert a compact duration string to seconds.

        Args:
            text: Duration string (e.g., "5m", "1h30m", "90s", "500ms")

        Returns:
            Number of seconds, or None if the string is not a positive duration
        """
        text = text.strip().lower()
        if not TimeHelper._DURATION_FULL.fullmatch(text):
            return None

        total_seconds = 0.0
        for value, unit in TimeHelper._DURATION_PART.findall(text):
            total_seconds += float(value) * TimeHelper._UNIT_SECONDS[unit]

        return total_seconds if total_seconds > 0 else None

    @staticmethod
    def format_duration(seconds: float) -> str:
        """
        Format an elapsed time for log lines.

        Args:
            seconds: Elapsed seconds

        Returns:
            String like "1.204s", "87.312ms" or "640µs"
        """
        if seconds >= 1:
            return f"{seconds:.3f}s"
        if seconds >= 0.001:
            return f"{seconds * 1000:.3f}ms"
        return f"{seconds * 1_000_000:.0f}µs"

