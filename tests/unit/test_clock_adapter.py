from datetime import UTC, datetime, timedelta

from src.adapters.clock import FixedClock, SystemClock


def test_system_clock():
    now = SystemClock().now()
    assert now.tzinfo is not None
    # Should be very close to real now
    assert abs((datetime.now(UTC) - now).total_seconds()) < 1.0


def test_fixed_clock_advances():
    start = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)
    clock = FixedClock(start)

    assert clock.now() == start
    clock.advance(minutes=5)
    assert clock.now() == start + timedelta(minutes=5)
