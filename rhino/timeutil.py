"""Clock readings, timestamp conversions and offsets from now."""

from __future__ import annotations

import time as _time
from datetime import date, datetime, timedelta, timezone
from datetime import time as _clock
from typing import Callable

FMT_DAY = "%Y-%m-%d"
FMT_SEC = "%Y-%m-%d %H:%M:%S"
FMT_MSEC = "%Y-%m-%d %H:%M:%S.%f"

DAY_TIME = timedelta(days=1)

SEC_MIN = 60
SEC_HOUR = 60 * SEC_MIN
SEC_DAY = 24 * SEC_HOUR
SEC_WEEK = 7 * SEC_DAY

_NS_PER_US = 1_000
_NS_PER_MS = 1_000_000
_NS_PER_SEC = 1_000_000_000


def sleep(msec: int) -> None:
    """Sleep for ``msec`` milliseconds."""
    _time.sleep(msec / 1000)


def sleep_sec(sec: int) -> None:
    """Sleep for ``sec`` seconds."""
    _time.sleep(sec)


def nano() -> int:
    """Nanoseconds since the Unix epoch."""
    return _time.time_ns()


def mic() -> int:
    return nano() // _NS_PER_US


def msec() -> int:
    return nano() // _NS_PER_MS


def sec() -> int:
    return nano() // _NS_PER_SEC


def minute() -> int:
    return nano() // (_NS_PER_SEC * SEC_MIN)


def hour() -> int:
    return nano() // (_NS_PER_SEC * SEC_HOUR)


def day() -> int:
    return nano() // (_NS_PER_SEC * SEC_DAY)


def sec_time(value: int) -> datetime:
    """Local time for a Unix timestamp in seconds."""
    return datetime.fromtimestamp(value, tz=timezone.utc).astimezone()


def nano_time(value: int) -> datetime:
    """Local time for a Unix timestamp in nanoseconds (microsecond precision)."""
    seconds, rest = divmod(value, _NS_PER_SEC)
    return sec_time(seconds) + timedelta(microseconds=rest // _NS_PER_US)


def format_now(fmt: str) -> str:
    """Format the current local time with a ``strftime`` pattern."""
    return datetime.now().strftime(fmt)


def now() -> datetime:
    """Current local time, timezone aware."""
    return datetime.now().astimezone()


def add_msec(delay: int) -> datetime:
    return now() + timedelta(milliseconds=delay)


def add_sec(delay: int) -> datetime:
    return now() + timedelta(seconds=delay)


def add_minute(delay: int) -> datetime:
    return now() + timedelta(minutes=delay)


def add_hour(delay: int) -> datetime:
    return now() + timedelta(hours=delay)


def add_day(delay: int) -> datetime:
    return now() + DAY_TIME * delay


def add(delay: timedelta) -> datetime:
    return now() + delay


def zero_sec() -> int:
    """Unix timestamp (seconds) of today's local midnight."""
    midnight = datetime.combine(date.today(), _clock.min).astimezone()
    return int(midnight.timestamp())


def since(fn: Callable[[], object]) -> timedelta:
    """Run ``fn`` and return how long it took."""
    start = _time.perf_counter_ns()
    fn()
    return timedelta(microseconds=(_time.perf_counter_ns() - start) / _NS_PER_US)