"""Background retention/compression worker ("the mill").

Each rotation asks for a pass. At most one request waits at a time: a signal
that arrives while another is already pending is dropped, so a burst of
rotations costs one pass.
"""

import logging
import os
import queue
import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Callable

from easylogger.fs import OSFileSystem
from easylogger.naming import list_log_files
from easylogger.rotator import compress_log_file, compressed_path, plan_mill

logger = logging.getLogger(__name__)

_STOP = object()


@dataclass
class MillResult:
    removed: list[str] = field(default_factory=list)
    compressed: list[str] = field(default_factory=list)
    errors: list[Exception] = field(default_factory=list)

    @property
    def first_error(self) -> Exception | None:
        return self.errors[0] if self.errors else None


class _Worker:
    """One worker thread and the queue it blocks on.

    ``pending`` caps waiting pass requests at one. The queue itself is
    unbounded so the stop sentinel always fits behind a pending request.
    """

    def __init__(self, target):
        self.queue = queue.Queue()
        self.pending = False
        self.stopping = False
        self.thread = threading.Thread(
            target=target, args=(self,), name="easylogger-mill", daemon=True
        )


class Mill:
    """Runs retention and compression passes off the write path."""

    def __init__(
        self,
        directory: Callable[[], str],
        max_backups: int = 0,
        compress: bool = False,
        fs: OSFileSystem | None = None,
        current_name: Callable[[], str | None] | None = None,
        max_age_days: int = 0,
        today: Callable[[], date] | None = None,
    ):
        self._directory = directory
        self._max_backups = max_backups
        self._compress = compress
        self._fs = fs or OSFileSystem()
        self._current_name = current_name or (lambda: None)
        self._max_age_days = max_age_days
        self._today = today or date.today

        self._lock = threading.Lock()
        self._pass_lock = threading.Lock()
        self._worker: _Worker | None = None
        self._passes = 0

    @property
    def passes(self) -> int:
        """Number of completed passes run by the worker thread."""
        with self._lock:
            return self._passes

    @property
    def running(self) -> bool:
        worker = self._worker
        return worker is not None and worker.thread.is_alive()

    def signal(self) -> bool:
        """Request a pass. Returns False if one was already pending."""
        with self._lock:
            worker = self._worker
            if worker is None or worker.stopping or not worker.thread.is_alive():
                worker = self._start_locked()
            if worker.pending:
                logger.debug("Mill signal coalesced with a pending one")
                return False
            worker.pending = True
            worker.queue.put_nowait(True)
        return True

    def stop(self):
        """Ask the worker to exit once pending work is done. Does not wait."""
        with self._lock:
            worker = self._worker
            if worker is None or worker.stopping:
                return
            worker.stopping = True
            worker.queue.put_nowait(_STOP)

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the worker to exit. Returns True if it did."""
        worker = self._worker
        if worker is None:
            return True
        worker.thread.join(timeout)
        return not worker.thread.is_alive()

    def run_once(self) -> MillResult:
        """Perform one pass: deletions first, then compressions.

        Every action is attempted; failures are collected in the result.
        Raises OSError if the directory cannot be scanned.
        """
        result = MillResult()
        if self._max_backups == 0 and self._max_age_days == 0 and not self._compress:
            return result

        with self._pass_lock:
            directory = self._directory()
            files = list_log_files(self._fs, directory)
            plan = plan_mill(
                files,
                self._max_backups,
                self._compress,
                max_age_days=self._max_age_days,
                today=self._today(),
                current=self._current_name(),
            )

            for f in plan.remove:
                try:
                    self._fs.remove(os.path.join(directory, f.name))
                except FileNotFoundError:
                    continue
                except OSError as exc:
                    result.errors.append(exc)
                    continue
                result.removed.append(f.name)

            for f in plan.compress:
                src = os.path.join(directory, f.name)
                try:
                    compress_log_file(self._fs, src, compressed_path(src))
                except FileNotFoundError:
                    continue
                except Exception as exc:
                    result.errors.append(exc)
                    continue
                result.compressed.append(f.name)

        if result.removed:
            logger.info("Purged %d file(s): %s", len(result.removed), ", ".join(result.removed))
        if result.compressed:
            logger.info("Compressed %d file(s): %s", len(result.compressed), ", ".join(result.compressed))
        return result

    def _start_locked(self) -> _Worker:
        self._worker = _Worker(self._run)
        self._worker.thread.start()
        return self._worker

    def _run(self, worker: _Worker):
        while True:
            item = worker.queue.get()
            if item is _STOP:
                break
            with self._lock:
                worker.pending = False

            try:
                result = self.run_once()
            except Exception:
                logger.warning("Mill pass failed", exc_info=True)
            else:
                for exc in result.errors:
                    logger.warning("Mill action failed: %s", exc)
            with self._lock:
                self._passes += 1
        logger.debug("Mill worker exited")
