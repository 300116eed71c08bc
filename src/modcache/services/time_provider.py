"""Build-commenced time provider."""

from __future__ import annotations

import time


class BuildCommencedTimeProvider:
    """Reports the time the current build started.

    Every entry recorded during one build is stamped with the same time,
    and every age computed during that build is measured against it.
    """

    def __init__(self, build_start_millis: int | None = None) -> None:
        self._start = (
            build_start_millis
            if build_start_millis is not None
            else time.time_ns() // 1_000_000
        )

    def get_current_time(self) -> int:
        """Return the build start time in epoch milliseconds."""
        return self._start
