"""Tests for UTC time helpers."""

from datetime import UTC, datetime, timedelta, timezone

from game_saver.core.time import ensure_utc, seconds_until, utc_now


def test_utc_now_is_aware():
    assert utc_now().tzinfo is UTC


def test_ensure_utc_naive_is_treated_as_utc():
    naive = datetime(2026, 3, 1, 12, 0)
    assert ensure_utc(naive) == datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def test_ensure_utc_converts_other_zones():
    plus_two = datetime(2026, 3, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    converted = ensure_utc(plus_two)
    assert converted.hour == 12
    assert converted.tzinfo is UTC


def test_ensure_utc_none():
    assert ensure_utc(None) is None


def test_seconds_until_floors_and_clamps():
    now = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
    assert seconds_until(now + timedelta(seconds=90.9), now) == 90
    assert seconds_until(now - timedelta(minutes=5), now) == 0
    # naive store values compare against aware clocks
    assert seconds_until(datetime(2026, 3, 1, 13, 0), now) == 3600
