from datetime import datetime, timedelta, timezone

import pytest

from rhino import logfield
from rhino.logfield import Encoder, Field, FieldType


class Recorder(Encoder):
    def __init__(self):
        self.calls = []

    def _add(self, name, key, val):
        self.calls.append((name, key, val))

    def encode_bool(self, key, val):
        self._add("bool", key, val)

    def encode_float64(self, key, val):
        self._add("float64", key, val)

    def encode_int(self, key, val):
        self._add("int", key, val)

    def encode_int64(self, key, val):
        self._add("int64", key, val)

    def encode_duration(self, key, val):
        self._add("duration", key, val)

    def encode_uint(self, key, val):
        self._add("uint", key, val)

    def encode_uint64(self, key, val):
        self._add("uint64", key, val)

    def encode_string(self, key, val):
        self._add("string", key, val)

    def encode_object(self, key, val):
        self._add("object", key, val)

    def encode_type(self, key, val):
        self._add("type", key, val)


def encode(field):
    rec = Recorder()
    field.encode(rec)
    return rec.calls


@pytest.mark.parametrize("val", [True, False])
def test_boolean(val):
    assert encode(logfield.boolean("fum", val)) == [("bool", "fum", val)]


@pytest.mark.parametrize(
    "factory,name,val",
    [
        (logfield.integer, "int", 32),
        (logfield.int64, "int64", -(1 << 40)),
        (logfield.uint, "uint", 7),
        (logfield.uint64, "uint64", 1 << 63),
        (logfield.float64, "float64", 2.5),
    ],
)
def test_numeric_fields_route_to_their_method(factory, name, val):
    assert encode(factory("bar", val)) == [(name, "bar", val)]


def test_string():
    assert encode(logfield.string("s", "text")) == [("string", "s", "text")]


def test_stringer_uses_str_lazily():
    class Thing:
        def __init__(self):
            self.label = "first"

        def __str__(self):
            return self.label

    thing = Thing()
    field = logfield.stringer("t", thing)
    thing.label = "second"
    assert encode(field) == [("string", "t", "second")]


def test_stringer_none_is_object():
    field = logfield.stringer("t", None)
    assert field.field_type is FieldType.OBJECT
    assert encode(field) == [("object", "t", None)]


def test_error_field():
    assert encode(logfield.error(ValueError("boom"))) == [("string", "error", "boom")]


def test_error_none_is_skipped():
    field = logfield.error(None)
    assert field.field_type is FieldType.SKIP
    assert encode(field) == []


def test_time_field_is_epoch_seconds():
    epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert encode(logfield.time_field("t", epoch)) == [("float64", "t", 0.0)]
    later = datetime.fromtimestamp(1.5, tz=timezone.utc)
    assert encode(logfield.time_field("t", later)) == [("float64", "t", 1.5)]


def test_duration():
    d = timedelta(milliseconds=250)
    assert encode(logfield.duration("d", d)) == [("duration", "d", d)]


def test_obj_and_message():
    payload = {"k": 1}
    assert encode(logfield.obj("o", payload)) == [("object", "o", payload)]
    assert encode(logfield.message("hi")) == [("object", "message", "hi")]


def test_type_of():
    assert encode(logfield.type_of("ty", 5)) == [("type", "ty", int)]


def test_stack_names_caller():
    field = logfield.stack()
    assert field.key == "stack"
    assert "test_stack_names_caller" in field.value


def test_unknown_type_raises():
    with pytest.raises(ValueError):
        Field("k", FieldType.UNKNOWN, 1).encode(Recorder())