"""Typed key/value fields for structured log events."""

from __future__ import annotations

import traceback
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path
from typing import Any


class FieldType(Enum):
    """How a field's value is handed to an encoder."""

    UNKNOWN = 0
    BOOL = 1
    FLOAT = 2
    INT = 3
    INT64 = 4
    DURATION = 5
    UINT = 6
    UINT64 = 7
    STRING = 8
    STRINGER = 9
    ERROR = 10
    OBJECT = 11
    TYPE_OF = 12
    SKIP = 13


class Encoder(ABC):
    """Receives field values, one method per value kind."""

    @abstractmethod
    def encode_bool(self, key: str, val: bool) -> None:
        """Encode a boolean."""

    @abstractmethod
    def encode_float64(self, key: str, val: float) -> None:
        """Encode a float."""

    @abstractmethod
    def encode_int(self, key: str, val: int) -> None:
        """Encode an int."""

    @abstractmethod
    def encode_int64(self, key: str, val: int) -> None:
        """Encode a 64-bit int."""

    @abstractmethod
    def encode_duration(self, key: str, val: timedelta) -> None:
        """Encode a duration."""

    @abstractmethod
    def encode_uint(self, key: str, val: int) -> None:
        """Encode an unsigned int."""

    @abstractmethod
    def encode_uint64(self, key: str, val: int) -> None:
        """Encode an unsigned 64-bit int."""

    @abstractmethod
    def encode_string(self, key: str, val: str) -> None:
        """Encode a string."""

    @abstractmethod
    def encode_object(self, key: str, val: Any) -> None:
        """Encode an arbitrary object."""

    @abstractmethod
    def encode_type(self, key: str, val: type) -> None:
        """Encode a type."""


@dataclass(frozen=True)
class Field:
    """A key, a value and the kind that decides how it is encoded."""

    key: str
    field_type: FieldType
    value: Any = None

    def encode(self, enc: Encoder) -> None:
        """Hand this field to ``enc``; stringers, errors and types are resolved lazily."""
        kind = self.field_type
        if kind is FieldType.SKIP:
            return
        if kind in (FieldType.STRINGER, FieldType.ERROR):
            enc.encode_string(self.key, str(self.value))
        elif kind is FieldType.TYPE_OF:
            enc.encode_type(self.key, type(self.value))
        elif kind is FieldType.BOOL:
            enc.encode_bool(self.key, self.value)
        elif kind is FieldType.FLOAT:
            enc.encode_float64(self.key, self.value)
        elif kind is FieldType.INT:
            enc.encode_int(self.key, self.value)
        elif kind is FieldType.INT64:
            enc.encode_int64(self.key, self.value)
        elif kind is FieldType.DURATION:
            enc.encode_duration(self.key, self.value)
        elif kind is FieldType.UINT:
            enc.encode_uint(self.key, self.value)
        elif kind is FieldType.UINT64:
            enc.encode_uint64(self.key, self.value)
        elif kind is FieldType.STRING:
            enc.encode_string(self.key, self.value)
        elif kind is FieldType.OBJECT:
            enc.encode_object(self.key, self.value)
        else:
            raise ValueError(f"unknown field type found: {self!r}")


def boolean(key: str, val: bool) -> Field:
    return Field(key, FieldType.BOOL, bool(val))


def float64(key: str, val: float) -> Field:
    return Field(key, FieldType.FLOAT, float(val))


def integer(key: str, val: int) -> Field:
    return Field(key, FieldType.INT, int(val))


def int64(key: str, val: int) -> Field:
    return Field(key, FieldType.INT64, int(val))


def uint(key: str, val: int) -> Field:
    return Field(key, FieldType.UINT, int(val))


def uint64(key: str, val: int) -> Field:
    return Field(key, FieldType.UINT64, int(val))


def string(key: str, val: str) -> Field:
    return Field(key, FieldType.STRING, val)


def stringer(key: str, val: Any) -> Field:
    """A field rendered with ``str(val)`` at encoding time; ``None`` is kept as an object."""
    if val is None:
        return Field(key, FieldType.OBJECT, None)
    return Field(key, FieldType.STRINGER, val)


def time_field(key: str, val: datetime) -> Field:
    """A time, stored as floating-point seconds since the Unix epoch."""
    return float64(key, val.timestamp())


def error(err: BaseException | None) -> Field:
    """The error's text under the key ``error``; skipped when ``err`` is ``None``."""
    if err is None:
        return Field("", FieldType.SKIP)
    return Field("error", FieldType.ERROR, err)


def stack() -> Field:
    """``module.function:line`` of the caller, under the key ``stack``."""
    frames = traceback.extract_stack(limit=2)
    if len(frames) < 2:
        text = "pc:0"
    else:
        caller = frames[0]
        text = f"{Path(caller.filename).stem}.{caller.name}:{caller.lineno}"
    return string("stack", text)


def duration(key: str, val: timedelta) -> Field:
    return Field(key, FieldType.DURATION, val)


def obj(key: str, val: Any) -> Field:
    return Field(key, FieldType.OBJECT, val)


def type_of(key: str, val: Any) -> Field:
    """A field that logs the type of ``val``."""
    return Field(key, FieldType.TYPE_OF, val)


def message(val: Any) -> Field:
    return Field("message", FieldType.OBJECT, val)