"""Tests for EasyLogger record formatting and the rotating logger factory."""

import io
import re
import threading

from easylogger.logger import COLORS, INFO, RESET, EasyLogger, new_rotating_logger
from tests.helpers import read


class Recorder:
    def __init__(self):
        self.chunks = []

    def write(self, data):
        self.chunks.append(data)
        return len(data)

    @property
    def lines(self):
        return [c.decode() for c in self.chunks]


def _logger(clock, **kwargs):
    sink = Recorder()
    return EasyLogger(sink, time_func=clock, **kwargs), sink


class TestFormatting:
    def test_info_line_layout(self, clock):
        log, sink = _logger(clock)
        log.info("hello", "world", 42)
        tid = threading.get_ident()
        assert sink.lines == [f"2025/01/15 12:00:00.000000 [INFO ] TID {tid}, hello world 42\n"]

    def test_prefix(self, clock):
        log, sink = _logger(clock, prefix="svc: ")
        log.warn("careful")
        assert sink.lines[0].startswith("svc: 2025/01/15 12:00:00.000000 [WARN ] ")

    def test_printf_style(self, clock):
        log, sink = _logger(clock)
        log.errorf("failed after %d tries: %s", 3, "timeout")
        assert sink.lines[0].endswith(", failed after 3 tries: timeout\n")

    def test_format_without_args_is_literal(self, clock):
        log, sink = _logger(clock)
        log.infof("100% done")
        assert sink.lines[0].endswith(", 100% done\n")

    def test_one_write_per_record(self, clock):
        log, sink = _logger(clock)
        log.info("a")
        log.error("b")
        log.fatal("c")
        assert len(sink.chunks) == 3
        assert "[FATAL]" in sink.lines[2]

    def test_colors(self, clock):
        log, sink = _logger(clock, color=True)
        log.info("colored")
        assert f"{COLORS[INFO]}{INFO}{RESET}" in sink.lines[0]

    def test_no_colors_by_default(self, clock):
        log, sink = _logger(clock)
        log.info("plain")
        assert "\033[" not in sink.lines[0]


class TestCallerDecoration:
    def test_trace_includes_function_and_line(self, clock):
        log, sink = _logger(clock)
        log.trace("checkpoint")
        line = sink.lines[0]
        assert "[TRACE]" in line
        assert re.search(r"test_trace_includes_function_and_line\(\) test_logger\.py:\d+ checkpoint\n$", line)

    def test_tracef(self, clock):
        log, sink = _logger(clock)
        log.tracef("value=%d", 7)
        assert re.search(r"test_tracef\(\) test_logger\.py:\d+ value=7\n$", sink.lines[0])

    def test_debug_includes_module(self, clock):
        log, sink = _logger(clock)
        log.debug("state", "ok")
        line = sink.lines[0]
        assert "[DEBUG]" in line
        assert re.search(r"test_logger\.test_debug_includes_module test_logger\.py:\d+ state ok\n$", line)

    def test_debugf(self, clock):
        log, sink = _logger(clock)
        log.debugf("n=%s", "x")
        assert re.search(r"test_logger\.test_debugf\(\) test_logger\.py:\d+ n=x\n$", sink.lines[0])


class TestNewRotatingLogger:
    def test_writes_to_file(self, make_config, clock, log_dir):
        log = new_rotating_logger(make_config(), time_func=clock)
        log.info("to disk")
        log.close()
        assert read(log_dir, "2025-01-15.log").endswith(b", to disk\n")

    def test_console_duplicates_file_output(self, make_config, clock, log_dir):
        stream = io.BytesIO()
        log = new_rotating_logger(make_config(console=True, color=True),
                                  console_stream=stream, time_func=clock)
        log.info("first")
        log.error("second")
        log.close()

        assert stream.getvalue() == read(log_dir, "2025-01-15.log")
        assert b"\033[31m[ERROR]\033[0m" in stream.getvalue()

    def test_console_disabled(self, make_config, clock):
        log = new_rotating_logger(make_config(), time_func=clock)
        assert len(log.sink.writers) == 1
        log.close()
