from datetime import UTC, datetime

from src.adapters.clock import FixedClock, SystemClock


def test_system_clock_is_utc_aware():
    now = SystemClock().now_utc()
    assert now.tzinfo == UTC


def test_fixed_clock_normalises_naive_values():
    clock = FixedClock(datetime(2026, 1, 1, 12, 0))
    assert clock.now_utc() == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    clock.set(datetime(2026, 1, 2))
    assert clock.now_utc() == datetime(2026, 1, 2, tzinfo=UTC)
