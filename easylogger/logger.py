"""EasyLogger: level-tagged records written through a rotating sink."""

import os
import sys
import threading

from easylogger.config import RotationConfig
from easylogger.fanout import ConsoleWriter, FanoutSink
from easylogger.naming import now_in_zone
from easylogger.writer import RotatingWriter

TRACE = "[TRACE]"
DEBUG = "[DEBUG]"
INFO = "[INFO ]"
WARN = "[WARN ]"
ERROR = "[ERROR]"
FATAL = "[FATAL]"

# ANSI color codes
COLORS = {
    TRACE: "\033[36m",  # cyan
    DEBUG: "\033[34m",  # blue
    INFO: "\033[32m",   # green
    WARN: "\033[33m",   # yellow
    ERROR: "\033[31m",  # red
    FATAL: "\033[35m",  # magenta
}
RESET = "\033[0m"

TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S.%f"


def _caller(depth: int = 2):
    """Return (module, function, file name, line) of the frame *depth* levels up."""
    frame = sys._getframe(depth)
    code = frame.f_code
    return (
        frame.f_globals.get("__name__", "?"),
        code.co_name,
        os.path.basename(code.co_filename),
        frame.f_lineno,
    )


class EasyLogger:
    """Formats records and hands each one to *sink* as a single write."""

    def __init__(self, sink, prefix: str = "", color: bool = False,
                 local_time: bool = False, time_func=None):
        self._sink = sink
        self._prefix = prefix
        self._color = color
        self._local_time = local_time
        self._time_func = time_func
        self._lock = threading.Lock()

    @property
    def sink(self):
        return self._sink

    def _tag(self, level: str) -> str:
        if not self._color:
            return level
        return f"{COLORS[level]}{level}{RESET}"

    def _output(self, level: str, message: str) -> int:
        now = now_in_zone(self._local_time, self._time_func)
        line = (
            f"{self._prefix}{now.strftime(TIMESTAMP_FORMAT)} "
            f"{self._tag(level)} TID {threading.get_ident()}, {message}"
        )
        if not line.endswith("\n"):
            line += "\n"
        with self._lock:
            return self._sink.write(line.encode("utf-8"))

    @staticmethod
    def _join(args) -> str:
        return " ".join(str(a) for a in args)

    def trace(self, *args):
        _, func, filename, line = _caller()
        self._output(TRACE, self._join((f"{func}()", f"{filename}:{line}") + args))

    def tracef(self, fmt: str, *args):
        _, func, filename, line = _caller()
        self._output(TRACE, f"{func}() {filename}:{line} " + (fmt % args if args else fmt))

    def debug(self, *args):
        module, func, filename, line = _caller()
        self._output(DEBUG, self._join((f"{module}.{func}", f"{filename}:{line}") + args))

    def debugf(self, fmt: str, *args):
        module, func, filename, line = _caller()
        self._output(DEBUG, f"{module}.{func}() {filename}:{line} " + (fmt % args if args else fmt))

    def info(self, *args):
        self._output(INFO, self._join(args))

    def infof(self, fmt: str, *args):
        self._output(INFO, fmt % args if args else fmt)

    def warn(self, *args):
        self._output(WARN, self._join(args))

    def warnf(self, fmt: str, *args):
        self._output(WARN, fmt % args if args else fmt)

    def error(self, *args):
        self._output(ERROR, self._join(args))

    def errorf(self, fmt: str, *args):
        self._output(ERROR, fmt % args if args else fmt)

    def fatal(self, *args):
        """Log at FATAL level. The process keeps running."""
        self._output(FATAL, self._join(args))

    def fatalf(self, fmt: str, *args):
        self._output(FATAL, fmt % args if args else fmt)

    def close(self):
        if hasattr(self._sink, "close"):
            self._sink.close()


def new_rotating_logger(config: RotationConfig, prefix: str = "",
                        console_stream=None, fs=None, time_func=None) -> EasyLogger:
    """Build an EasyLogger writing to a RotatingWriter, plus stdout if configured."""
    writer = RotatingWriter(config, fs=fs, time_func=time_func)
    writers = [writer]
    if config.console:
        writers.append(ConsoleWriter(console_stream))
    return EasyLogger(
        FanoutSink(*writers),
        prefix=prefix,
        color=config.color,
        local_time=config.local_time,
        time_func=time_func,
    )
