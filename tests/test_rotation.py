"""Tests for the rotation decision policies."""

from dataclasses import dataclass
from datetime import date, datetime, timezone

import pytest

from easylogger.config import RotationConfig
from easylogger.naming import LogFileEntry
from easylogger.rotation import DayRotation, SizeRotation, rotation_for

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


@dataclass
class Current:
    date: date
    size: int


def entry(name, day, size=0, sequence=0) -> LogFileEntry:
    return LogFileEntry(
        name=name,
        date=date(2025, 1, day),
        sequence=sequence,
        size=size,
        mtime=0.0,
        compressed=name.endswith(".gz"),
    )


class TestRotationFor:
    def test_size_mode(self):
        policy = rotation_for(RotationConfig(max_size_bytes=100))
        assert isinstance(policy, SizeRotation)
        assert policy.max_size_bytes == 100

    def test_day_mode(self):
        policy = rotation_for(RotationConfig(max_days=3))
        assert isinstance(policy, DayRotation)
        assert policy.max_days == 3

    def test_default_is_daily(self):
        policy = rotation_for(RotationConfig())
        assert isinstance(policy, DayRotation)
        assert policy.max_days == 1

    def test_invalid_thresholds(self):
        with pytest.raises(ValueError):
            DayRotation(0)
        with pytest.raises(ValueError):
            SizeRotation(0)


class TestDayRotation:
    def test_reopens_todays_file(self):
        latest = entry("2025-01-15.log", 15)
        assert DayRotation(1).choose_existing([latest], NOW, 10) is latest

    def test_yesterday_is_stale_for_one_day(self):
        assert DayRotation(1).choose_existing([entry("2025-01-14.log", 14)], NOW, 10) is None

    def test_window_of_several_days(self):
        latest = entry("2025-01-13.log", 13)
        assert DayRotation(3).choose_existing([latest], NOW, 10) is latest
        assert DayRotation(2).choose_existing([latest], NOW, 10) is None

    def test_compressed_latest_is_never_reopened(self):
        assert DayRotation(3).choose_existing([entry("2025-01-15.log.gz", 15)], NOW, 10) is None

    def test_no_files(self):
        assert DayRotation(1).choose_existing([], NOW, 10) is None

    def test_no_rotation_while_open_by_default(self):
        assert DayRotation(1).should_rotate(Current(date(2025, 1, 10), 5), NOW, 10) is False

    def test_rotation_on_write_when_enabled(self):
        policy = DayRotation(1, check_day_on_write=True)
        assert policy.should_rotate(Current(date(2025, 1, 14), 5), NOW, 10) is True
        assert policy.should_rotate(Current(date(2025, 1, 15), 5), NOW, 10) is False

    def test_new_name_is_today(self):
        files = [entry("2025-01-15.log", 15)]
        assert DayRotation(1).new_name(files, NOW) == "2025-01-15.log"


class TestSizeRotation:
    def test_reopens_latest_with_room(self):
        latest = entry("2025-01-14.log", 14, size=60)
        assert SizeRotation(100).choose_existing([latest], NOW, 40) is latest

    def test_latest_without_room(self):
        latest = entry("2025-01-14.log", 14, size=60)
        assert SizeRotation(100).choose_existing([latest], NOW, 41) is None

    def test_empty_latest_is_reused_for_oversized_record(self):
        latest = entry("2025-01-15.log", 15, size=0)
        assert SizeRotation(100).choose_existing([latest], NOW, 500) is latest

    def test_compressed_latest_is_never_reopened(self):
        assert SizeRotation(100).choose_existing([entry("2025-01-14.log.gz", 14)], NOW, 1) is None

    def test_rotates_before_exceeding(self):
        policy = SizeRotation(100)
        assert policy.should_rotate(Current(date(2025, 1, 15), 60), NOW, 40) is False
        assert policy.should_rotate(Current(date(2025, 1, 15), 60), NOW, 41) is True

    def test_empty_file_accepts_oversized_record(self):
        assert SizeRotation(100).should_rotate(Current(date(2025, 1, 15), 0), NOW, 500) is False

    def test_new_name_first_of_day(self):
        files = [entry("2025-01-14.3.log.gz", 14, sequence=3)]
        assert SizeRotation(100).new_name(files, NOW) == "2025-01-15.log"

    def test_new_name_next_sequence(self):
        files = [
            entry("2025-01-15.2.log", 15, sequence=2),
            entry("2025-01-15.1.log.gz", 15, sequence=1),
            entry("2025-01-15.log.gz", 15),
        ]
        assert SizeRotation(100).new_name(files, NOW) == "2025-01-15.3.log"

    def test_new_name_sorts_after_future_dated_file(self):
        files = [entry("2025-01-16.log", 16), entry("2025-01-15.log", 15)]
        assert SizeRotation(100).new_name(files, NOW) == "2025-01-16.1.log"
