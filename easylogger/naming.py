"""Rotated file names: formatting, parsing and directory scans."""

import logging
import os
import re
import stat
from dataclasses import dataclass
from datetime import date, datetime, timezone

from easylogger.fs import OSFileSystem

logger = logging.getLogger(__name__)

DEFAULT_LOG_DIR = "./Logs/"
FILE_NAME_DATE_FORMAT = "%Y-%m-%d"
FILE_NAME_EXT = ".log"
COMPRESS_SUFFIX = ".gz"

# YYYY-MM-DD, optionally followed by .<sequence> for size-mode rollovers
_STEM_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:\.([1-9]\d*))?$")


@dataclass(frozen=True)
class LogFileEntry:
    name: str
    date: date
    sequence: int
    size: int
    mtime: float
    compressed: bool

    @property
    def logical_name(self) -> str:
        """Name with the compression suffix stripped."""
        if self.compressed:
            return self.name[: -len(COMPRESS_SUFFIX)]
        return self.name

    @property
    def sort_key(self) -> tuple[date, int]:
        return (self.date, self.sequence)


def now_in_zone(local_time: bool, time_func=None) -> datetime:
    """Current instant in local time or UTC."""
    moment = time_func() if time_func else datetime.now(timezone.utc)
    if local_time:
        return moment.astimezone()
    return moment.astimezone(timezone.utc)


def name_for(moment: date, sequence: int = 0) -> str:
    """File name for *moment*, a date or datetime (day granularity)."""
    stem = moment.strftime(FILE_NAME_DATE_FORMAT)
    if sequence > 0:
        stem = f"{stem}.{sequence}"
    return stem + FILE_NAME_EXT


def parse_name(name: str, suffix: str) -> tuple[date, int] | None:
    """Decode ``(date, sequence)`` from *name*. Returns None for foreign names."""
    if not name.endswith(suffix):
        return None
    match = _STEM_RE.match(name[: -len(suffix)])
    if match is None:
        return None
    try:
        day = datetime.strptime(match.group(1), FILE_NAME_DATE_FORMAT).date()
    except ValueError:
        return None
    return day, int(match.group(2) or 0)


def list_log_files(fs: OSFileSystem, directory: str) -> list[LogFileEntry]:
    """Scan *directory* for rotated log files, newest first.

    Entries that decode to the same key keep their listing order.
    """
    entries = []
    for name in fs.listdir(directory):
        parsed = parse_name(name, FILE_NAME_EXT)
        compressed = False
        if parsed is None:
            parsed = parse_name(name, FILE_NAME_EXT + COMPRESS_SUFFIX)
            compressed = True
        if parsed is None:
            continue

        try:
            st = fs.stat(os.path.join(directory, name))
        except FileNotFoundError:
            # removed between listing and stat
            continue
        if stat.S_ISDIR(st.st_mode):
            continue

        day, sequence = parsed
        entries.append(LogFileEntry(
            name=name,
            date=day,
            sequence=sequence,
            size=st.st_size,
            mtime=st.st_mtime,
            compressed=compressed,
        ))

    entries.sort(key=lambda e: e.sort_key, reverse=True)
    logger.debug("Scanned %s: %d log file(s)", directory, len(entries))
    return entries
