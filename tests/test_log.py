import io
import time
from datetime import datetime, timedelta, timezone

import pytest

from rhino import log
from rhino.log import Event, EventStream, IOLogger, Level, TextEncoder
from rhino.logfield import boolean, error, integer, obj, stack, string


@pytest.fixture
def events():
    received = []
    sub = log.subscribe(received.append)
    yield received
    log.unsubscribe(sub)


def test_logger_with(events):
    base = log.new(Level.DEBUG, "Base")
    logger = base.with_fields(integer("my", 12))
    logger.debug("just a test", integer("bar", 11))
    assert len(events) == 1
    event = events[0]
    assert event.level is Level.DEBUG
    assert event.prefix == "Base"
    assert event.message == "just a test"
    assert event.context == (integer("my", 12),)
    assert event.fields == (integer("bar", 11),)
    assert base.context == ()


def test_recovering_panic(events):
    plog = log.new(Level.DEBUG, "[MAILBOX]")
    try:
        raise RuntimeError("test panic")
    except RuntimeError as exc:
        plog.debug("[ACTOR] Recovering", obj("error", exc), stack())
    assert len(events) == 1
    fields = events[0].fields
    assert fields[0].key == "error"
    assert str(fields[0].value) == "test panic"
    assert fields[1].key == "stack"


def test_min_level_publishes_debug_with_context(events):
    logger = log.new(Level.MIN, "", integer("bar", 32), boolean("fum", False))
    logger.debug("foo")
    assert [e.message for e in events] == ["foo"]
    assert events[0].context == (integer("bar", 32), boolean("fum", False))


def test_level_filtering(events):
    logger = log.new(Level.INFO, "")
    logger.debug("d")
    logger.info("i")
    logger.error("e")
    assert [e.message for e in events] == ["i", "e"]
    logger.level = Level.OFF
    logger.error("gone")
    assert len(events) == 2


def test_multiple_subscribers_and_unsubscribe():
    first, second = [], []
    s1 = log.subscribe(first.append)
    s2 = log.subscribe(second.append)
    logger = log.new(Level.DEBUG, "", integer("bar", 32))
    logger.debug("foo")
    s1.unsubscribe()
    logger.debug("bar")
    s2.unsubscribe()
    logger.debug("baz")
    assert [e.message for e in first] == ["foo"]
    assert [e.message for e in second] == ["foo", "bar"]


def test_subscription_level_filter():
    stream = EventStream()
    got = []
    stream.subscribe(got.append, Level.ERROR)
    now = datetime.now(timezone.utc)
    stream.publish(Event(now, Level.INFO, message="info"))
    stream.publish(Event(now, Level.ERROR, message="err"))
    assert [e.message for e in got] == ["err"]


def test_format_event():
    event = Event(
        time=datetime(2021, 3, 4, 5, 6, 7, tzinfo=timezone.utc),
        level=Level.INFO,
        prefix="P",
        message="hello",
        context=(integer("a", 1),),
        fields=(string("s", "x"), boolean("b", True)),
    )
    assert log.format_event(event) == '2021/03/04 05:06:07 P hello a=1 s="x" b=true \n'


def test_format_event_skip_field_still_spaced():
    event = Event(
        time=datetime(2021, 3, 4, 5, 6, 7, tzinfo=timezone.utc),
        level=Level.ERROR,
        fields=(error(None),),
    )
    assert log.format_event(event) == "2021/03/04 05:06:07  \n"


@pytest.mark.parametrize(
    "value,text",
    [
        (timedelta(seconds=1.5), "1.5s"),
        (timedelta(hours=1), "1h0m0s"),
        (timedelta(milliseconds=100), "100ms"),
        (timedelta(0), "0s"),
    ],
)
def test_text_encoder_duration(value, text):
    out = io.StringIO()
    TextEncoder(out).encode_duration("d", value)
    assert out.getvalue() == f"d={text}"


def test_text_encoder_scalars():
    out = io.StringIO()
    enc = TextEncoder(out)
    enc.encode_float64("f", 1.5)
    enc.encode_bool("b", False)
    enc.encode_type("t", int)
    assert out.getvalue() == "f=1.500000b=falset=int"


def test_io_logger_write_event():
    out = io.StringIO()
    writer = IOLogger(out)
    event = Event(datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc), Level.INFO, message="m")
    writer.write_event(event)
    assert out.getvalue() == log.format_event(event)


def test_io_logger_submit_writes_in_background():
    out = io.StringIO()
    writer = IOLogger(out)
    event = Event(datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc), Level.INFO, message="bg")
    writer.submit(event)
    deadline = time.monotonic() + 2
    while not out.getvalue() and time.monotonic() < deadline:
        time.sleep(0.01)
    assert out.getvalue() == log.format_event(event)