"""Rotating log writer with size-based or calendar-day rotation."""

import logging
import os
import threading
from dataclasses import dataclass
from datetime import date
from typing import BinaryIO

from easylogger.config import RotationConfig
from easylogger.fs import OSFileSystem
from easylogger.mill import Mill
from easylogger.naming import DEFAULT_LOG_DIR, FILE_NAME_EXT, list_log_files, now_in_zone, parse_name
from easylogger.rotation import rotation_for

logger = logging.getLogger(__name__)


@dataclass
class CurrentFile:
    file: BinaryIO
    name: str
    path: str
    date: date
    size: int


class RotatingWriter:
    """Thread-safe file sink that rolls over to a new file when its policy says so.

    The file is opened lazily on the first write. After a new file is created
    the mill is signaled to purge and compress older files in the background.
    """

    def __init__(self, config: RotationConfig, fs: OSFileSystem | None = None, time_func=None):
        self._config = config
        self._fs = fs or OSFileSystem()
        self._time_func = time_func
        self._rotation = rotation_for(config)
        self._lock = threading.Lock()
        self._current: CurrentFile | None = None
        self._directory = config.directory
        self._mill = Mill(
            directory=lambda: self._directory,
            max_backups=config.max_backups,
            compress=config.compress,
            fs=self._fs,
            current_name=self._current_name,
            # in day mode max_days is the rotation window, not retention
            max_age_days=config.max_days if config.mode == "size" else 0,
            today=lambda: self._now().date(),
        )

    @property
    def config(self) -> RotationConfig:
        return self._config

    @property
    def directory(self) -> str:
        return self._directory

    @property
    def mill(self) -> Mill:
        return self._mill

    @property
    def current_path(self) -> str | None:
        current = self._current
        return current.path if current else None

    def write(self, data: bytes) -> int:
        """Write *data* to the current file, rotating first if needed.

        Returns the number of bytes written.
        """
        with self._lock:
            incoming = len(data)
            if self._current is None:
                self._open_existing_or_new(incoming)
            elif self._rotation.should_rotate(self._current, self._now(), incoming):
                self._rotate()

            self._current.file.write(data)
            self._current.file.flush()
            self._current.size += incoming
            return incoming

    def close(self):
        """Close the current file. Safe to call more than once."""
        with self._lock:
            self._mill.stop()
            self._close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _now(self):
        return now_in_zone(self._config.local_time, self._time_func)

    def _current_name(self) -> str | None:
        current = self._current
        return current.name if current else None

    def _close(self):
        if self._current is None:
            return
        current = self._current
        self._current = None
        current.file.close()

    def _resolve_directory(self) -> str:
        """Make sure the log directory exists, falling back to the default one."""
        directory = self._config.directory
        if not self._fs.isdir(directory):
            try:
                self._fs.makedirs(directory, 0o755)
            except OSError as exc:
                logger.warning("Cannot use log directory %s (%s), falling back to %s",
                               directory, exc, DEFAULT_LOG_DIR)
                directory = DEFAULT_LOG_DIR
                try:
                    self._fs.makedirs(directory, 0o755)
                except OSError:
                    logger.warning("Cannot create fallback log directory %s", directory)
        self._directory = directory
        return directory

    def _rotate(self):
        self._close()
        self._open_new(self._now())

    def _open_existing_or_new(self, incoming: int):
        directory = self._resolve_directory()
        now = self._now()
        files = list_log_files(self._fs, directory)
        latest = self._rotation.choose_existing(files, now, incoming)
        if latest is None:
            self._open_new(now, files)
            return

        path = os.path.join(directory, latest.name)
        f = self._fs.open(path, os.O_APPEND | os.O_WRONLY)
        try:
            size = self._fs.stat(path).st_size
        except OSError:
            f.close()
            raise
        self._current = CurrentFile(file=f, name=latest.name, path=path, date=latest.date, size=size)
        logger.debug("Reopened %s for append (%d bytes)", path, size)

    def _open_new(self, now, files=None):
        directory = self._resolve_directory()
        if files is None:
            files = list_log_files(self._fs, directory)
        name = self._rotation.new_name(files, now)
        path = os.path.join(directory, name)

        # a same-named file here is a stale leftover; truncate it
        f = self._fs.open(path, os.O_CREAT | os.O_WRONLY | os.O_TRUNC)
        day, _ = parse_name(name, FILE_NAME_EXT)
        self._current = CurrentFile(file=f, name=name, path=path, date=day, size=0)
        logger.info("Opened new log file %s", path)
        self._mill.signal()
