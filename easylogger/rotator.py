"""Post-rotation operations: retention planning and compression."""

import gzip
import os
import shutil
import stat
from dataclasses import dataclass, field
from datetime import date

from easylogger.errors import CompressionError
from easylogger.fs import OSFileSystem
from easylogger.naming import COMPRESS_SUFFIX, LogFileEntry


@dataclass
class MillPlan:
    remove: list[LogFileEntry] = field(default_factory=list)
    compress: list[LogFileEntry] = field(default_factory=list)


def plan_mill(
    files: list[LogFileEntry],
    max_backups: int,
    compress: bool,
    max_age_days: int = 0,
    today: date | None = None,
    current: str | None = None,
) -> MillPlan:
    """Decide which files to delete and which to gzip.

    *files* must be sorted newest first. A plain file and its ``.gz``
    counterpart count as one logical file against *max_backups*. With
    *max_age_days* set, files dated that many days or more before *today*
    are removed too, except the newest one. The file named *current* is the
    one open for writing and is never touched.
    """
    if max_age_days > 0 and today is None:
        raise ValueError("today is required when max_age_days is set")

    plan = MillPlan()
    kept = []
    preserved = set()
    newest = files[0].logical_name if files else None

    for f in files:
        too_old = (
            max_age_days > 0
            and f.logical_name != newest
            and (today - f.date).days >= max_age_days
        )
        if not too_old:
            preserved.add(f.logical_name)
        too_many = max_backups > 0 and len(preserved) > max_backups
        if (too_old or too_many) and f.name != current:
            plan.remove.append(f)
        else:
            kept.append(f)

    if compress:
        plan.compress = [
            f for f in kept[1:] if not f.compressed and f.name != current
        ]

    return plan


def compress_log_file(fs: OSFileSystem, src: str, dst: str):
    """Gzip *src* into *dst*, removing *src* once the output is complete.

    A partially written *dst* is removed on failure.
    """
    with fs.open(src, os.O_RDONLY) as f_in:
        mode = stat.S_IMODE(fs.stat(src).st_mode)
        try:
            # an existing dst is left over from an earlier failed attempt
            with fs.open(dst, os.O_CREAT | os.O_TRUNC | os.O_WRONLY, mode) as f_out:
                with gzip.GzipFile(filename="", mode="wb", fileobj=f_out) as gz:
                    shutil.copyfileobj(f_in, gz)
        except Exception as exc:
            try:
                fs.remove(dst)
            except FileNotFoundError:
                pass
            raise CompressionError(f"failed to compress log file {src}: {exc}") from exc

    fs.remove(src)


def compressed_path(path: str) -> str:
    return path + COMPRESS_SUFFIX
