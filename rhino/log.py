"""Levelled loggers publishing structured events to subscribers."""

from __future__ import annotations

import io
import json
import queue
import sys
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Any, Callable, List, Optional, TextIO, Tuple

from rhino.logfield import Encoder, Field


class Level(IntEnum):
    MIN = 0
    DEBUG = 1
    INFO = 2
    ERROR = 3
    OFF = 4


@dataclass(frozen=True)
class Event:
    """One log record."""

    time: datetime
    level: Level
    prefix: str = ""
    message: str = ""
    context: Tuple[Field, ...] = ()
    fields: Tuple[Field, ...] = ()


@dataclass(eq=False)
class Subscription:
    """A handler receiving events at or above ``level``."""

    owner: "EventStream"
    fn: Callable[[Event], Any]
    level: Level = Level.MIN

    def notify(self, event: Event) -> None:
        if event.level >= self.level:
            self.fn(event)

    def unsubscribe(self) -> None:
        self.owner.unsubscribe(self)


class EventStream:
    """Fans events out to its subscriptions in subscription order."""

    def __init__(self) -> None:
        self._subs: List[Subscription] = []
        self._lock = threading.Lock()

    def subscribe(self, fn: Callable[[Event], Any], level: Level = Level.MIN) -> Subscription:
        sub = Subscription(self, fn, Level(level))
        with self._lock:
            self._subs.append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            self._subs = [s for s in self._subs if s is not sub]

    def publish(self, event: Event) -> None:
        with self._lock:
            subs = list(self._subs)
        for sub in subs:
            sub.notify(event)


_stage = EventStream()


class Logger:
    """Publishes events that pass its level, tagged with its prefix and context."""

    def __init__(self, level: Level, prefix: str = "", context: Tuple[Field, ...] = ()) -> None:
        self.level = Level(level)
        self.prefix = prefix
        self.context = tuple(context)

    def with_fields(self, *args: Field) -> "Logger":
        """A copy of this logger whose context also holds ``args``."""
        return Logger(self.level, self.prefix, self.context + args)

    def _emit(self, level: Level, msg: str, fields: Tuple[Field, ...]) -> None:
        self.publish(
            Event(
                time=datetime.now(timezone.utc),
                level=level,
                prefix=self.prefix,
                message=msg,
                context=self.context,
                fields=fields,
            )
        )

    def debug(self, msg: str, *args: Field) -> None:
        if self.level < Level.INFO:
            self._emit(Level.DEBUG, msg, args)

    def info(self, msg: str, *args: Field) -> None:
        if self.level < Level.ERROR:
            self._emit(Level.INFO, msg, args)

    def error(self, msg: str, *args: Field) -> None:
        if self.level < Level.OFF:
            self._emit(Level.ERROR, msg, args)

    def publish(self, event: Event) -> None:
        _stage.publish(event)


def new(level: Level, prefix: str = "", *args: Field) -> Logger:
    return Logger(level, prefix, args)


def subscribe(fn: Callable[[Event], Any]) -> Subscription:
    """Subscribe ``fn`` to every logger's events."""
    return _stage.subscribe(fn)


def unsubscribe(sub: Subscription) -> None:
    _stage.unsubscribe(sub)


def _fraction(value: int, scale: int) -> str:
    whole, rest = divmod(value, scale)
    if not rest:
        return str(whole)
    digits = str(rest).rjust(len(str(scale)) - 1, "0").rstrip("0")
    return f"{whole}.{digits}"


def _format_duration(value: timedelta) -> str:
    ns = ((value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds) * 1000
    sign = "-" if ns < 0 else ""
    ns = abs(ns)
    if ns == 0:
        return "0s"
    if ns < 1_000:
        return f"{sign}{ns}ns"
    if ns < 1_000_000:
        return f"{sign}{_fraction(ns, 1_000)}µs"
    if ns < 1_000_000_000:
        return f"{sign}{_fraction(ns, 1_000_000)}ms"
    hours, rest = divmod(ns, 3600 * 1_000_000_000)
    minutes, rest = divmod(rest, 60 * 1_000_000_000)
    head = f"{hours}h{minutes}m" if hours else (f"{minutes}m" if minutes else "")
    return f"{sign}{head}{_fraction(rest, 1_000_000_000)}s"


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


class TextEncoder(Encoder):
    """Writes fields as ``key=value`` text to a stream."""

    def __init__(self, out: TextIO) -> None:
        self.out = out

    def _put(self, key: str, text: str) -> None:
        self.out.write(f"{key}={text}")

    def encode_bool(self, key: str, val: bool) -> None:
        self._put(key, "true" if val else "false")

    def encode_float64(self, key: str, val: float) -> None:
        self._put(key, f"{val:f}")

    def encode_int(self, key: str, val: int) -> None:
        self._put(key, str(val))

    def encode_int64(self, key: str, val: int) -> None:
        self._put(key, str(val))

    def encode_duration(self, key: str, val: timedelta) -> None:
        self._put(key, _format_duration(val))

    def encode_uint(self, key: str, val: int) -> None:
        self._put(key, str(val))

    def encode_uint64(self, key: str, val: int) -> None:
        self._put(key, str(val))

    def encode_string(self, key: str, val: str) -> None:
        self._put(key, _quote(val))

    def encode_object(self, key: str, val: Any) -> None:
        self._put(key, "<nil>" if val is None else _quote(str(val)))

    def encode_type(self, key: str, val: type) -> None:
        self._put(key, "<nil>" if val is type(None) else val.__qualname__)


def format_event(event: Event) -> str:
    """Render an event as one line: UTC time, prefix, message, then fields."""
    out = io.StringIO()
    t = event.time.astimezone(timezone.utc)
    out.write(
        f"{t.year:04d}/{t.month:02d}/{t.day:02d} "
        f"{t.hour:02d}:{t.minute:02d}:{t.second:02d} "
    )
    if event.prefix:
        out.write(event.prefix + " ")
    if event.message:
        out.write(event.message + " ")
    encoder = TextEncoder(out)
    for field in (*event.context, *event.fields):
        field.encode(encoder)
        out.write(" ")
    out.write("\n")
    return out.getvalue()


class IOLogger:
    """Writes events to a text stream from a background thread.

    With no ``out`` the current ``sys.stderr`` is used at each write.
    """

    def __init__(self, out: Optional[TextIO] = None, capacity: int = 100) -> None:
        self._out = out
        self._queue: "queue.Queue[Event]" = queue.Queue(capacity)
        threading.Thread(target=self._run, name="rhino-log", daemon=True).start()

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stderr

    def submit(self, event: Event) -> None:
        """Queue ``event`` for writing, blocking while the queue is full."""
        self._queue.put(event)

    def _run(self) -> None:
        while True:
            event = self._queue.get()
            try:
                self.write_event(event)
            except (OSError, ValueError):
                pass

    def write_event(self, event: Event) -> None:
        out = self.out
        out.write(format_event(event))
        flush = getattr(out, "flush", None)
        if callable(flush):
            flush()


_stderr_writer = IOLogger()
subscribe(_stderr_writer.submit)