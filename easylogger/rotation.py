"""Rotation decisions: reopen an existing file, keep writing, or roll over.

Both policies look only at a fresh directory scan and the writer's current
file; neither keeps state of its own.
"""

from datetime import datetime

from easylogger.naming import LogFileEntry, name_for


class DayRotation:
    """Calendar-day rotation.

    The day boundary is only evaluated on a cold open unless
    *check_day_on_write* is set.
    """

    mode = "day"

    def __init__(self, max_days: int = 1, check_day_on_write: bool = False):
        if max_days < 1:
            raise ValueError(f"max_days must be >= 1, got {max_days}")
        self.max_days = max_days
        self.check_day_on_write = check_day_on_write

    def _fresh(self, day, now: datetime) -> bool:
        return (now.date() - day).days < self.max_days

    def choose_existing(self, files: list[LogFileEntry], now: datetime, incoming: int) -> LogFileEntry | None:
        if not files:
            return None
        latest = files[0]
        if latest.compressed or not self._fresh(latest.date, now):
            return None
        return latest

    def should_rotate(self, current, now: datetime, incoming: int) -> bool:
        if not self.check_day_on_write:
            return False
        return not self._fresh(current.date, now)

    def new_name(self, files: list[LogFileEntry], now: datetime) -> str:
        return name_for(now)


class SizeRotation:
    """Size-threshold rotation with exact byte accounting."""

    mode = "size"

    def __init__(self, max_size_bytes: int):
        if max_size_bytes < 1:
            raise ValueError(f"max_size_bytes must be >= 1, got {max_size_bytes}")
        self.max_size_bytes = max_size_bytes

    def choose_existing(self, files: list[LogFileEntry], now: datetime, incoming: int) -> LogFileEntry | None:
        if not files:
            return None
        latest = files[0]
        if latest.compressed or (latest.size > 0 and latest.size + incoming > self.max_size_bytes):
            return None
        return latest

    def should_rotate(self, current, now: datetime, incoming: int) -> bool:
        # an oversized record still goes whole into an empty file
        return current.size > 0 and current.size + incoming > self.max_size_bytes

    def new_name(self, files: list[LogFileEntry], now: datetime) -> str:
        # the new file must sort first, even past a file dated ahead of the clock
        day = now.date()
        if files and files[0].date > day:
            day = files[0].date
        sequences = [f.sequence for f in files if f.date == day]
        if not sequences:
            return name_for(day)
        return name_for(day, max(sequences) + 1)


def rotation_for(config):
    """Build the rotation policy selected by *config*."""
    if config.mode == "size":
        return SizeRotation(config.max_size_bytes)
    return DayRotation(config.max_days or 1, config.check_day_on_write)
