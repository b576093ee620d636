"""Shared pytest fixtures for the easylogger test suite."""

from datetime import datetime, timedelta, timezone

import pytest

from easylogger.config import RotationConfig


class FakeClock:
    """Settable clock handed to writers as ``time_func``."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture()
def log_dir(tmp_path) -> str:
    path = tmp_path / "logs"
    path.mkdir()
    return str(path)


@pytest.fixture()
def make_config(log_dir):
    def _make(**overrides) -> RotationConfig:
        overrides.setdefault("directory", log_dir)
        return RotationConfig(**overrides)
    return _make
