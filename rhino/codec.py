"""Reflection-style binary encoding of values into a :class:`ByteArray`.

Integers need a width: plain ``int`` is written as 32 bits, and the ``Int8`` …
``Uint64`` subclasses (or dataclass field annotations using them) pick another
width. Dataclass fields are written in declaration order, skipping names that
start with an underscore. Lists, tuples and byte strings are written element
by element. A top-level value with a ``marshal(buf)`` method, or a target with
``unmarshal(buf)``, handles its own encoding.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Dict, Optional, get_origin

from rhino.buffer import ByteArray


class Int8(int):
    """Signed 8-bit integer."""


class Int16(int):
    """Signed 16-bit integer."""


class Int32(int):
    """Signed 32-bit integer."""


class Int64(int):
    """Signed 64-bit integer."""


class Uint(int):
    """Unsigned integer stored in 32 bits."""


class Uint8(int):
    """Unsigned 8-bit integer."""


class Uint16(int):
    """Unsigned 16-bit integer."""


class Uint32(int):
    """Unsigned 32-bit integer."""


class Uint64(int):
    """Unsigned 64-bit integer."""


_WRITERS: Dict[type, Callable[[ByteArray, Any], None]] = {
    bool: ByteArray.write_bool,
    str: ByteArray.write_str,
    int: ByteArray.write_int32,
    Int8: ByteArray.write_int8,
    Int16: ByteArray.write_int16,
    Int32: ByteArray.write_int32,
    Int64: ByteArray.write_int64,
    Uint: ByteArray.write_uint32,
    Uint8: ByteArray.write_uint8,
    Uint16: ByteArray.write_uint16,
    Uint32: ByteArray.write_uint32,
    Uint64: ByteArray.write_uint64,
}

_READERS: Dict[type, Callable[[ByteArray], Any]] = {
    bool: ByteArray.read_bool,
    str: ByteArray.read_str,
    int: ByteArray.read_int32,
    Int8: ByteArray.read_int8,
    Int16: ByteArray.read_int16,
    Int32: ByteArray.read_int32,
    Int64: ByteArray.read_int64,
    Uint: ByteArray.read_uint32,
    Uint8: ByteArray.read_uint8,
    Uint16: ByteArray.read_uint16,
    Uint32: ByteArray.read_uint32,
    Uint64: ByteArray.read_uint64,
}

# Annotations written as text (postponed evaluation) are resolved by name.
_NAMED: Dict[str, type] = {cls.__name__: cls for cls in _WRITERS}


def _is_class(hint: Any) -> bool:
    return get_origin(hint) is None and isinstance(hint, type)


def _lookup(cls: type, table: Dict[type, Callable]) -> Optional[Callable]:
    return next((table[k] for k in cls.__mro__ if k in table), None)


def _is_dataclass_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _field_hint(field: dataclasses.Field) -> Any:
    hint = field.type
    if isinstance(hint, str):
        return _NAMED.get(hint.strip().rsplit(".", 1)[-1])
    return hint


def _public_fields(obj: Any):
    for field in dataclasses.fields(obj):
        if not field.name.startswith("_"):
            yield field.name, _field_hint(field)


def write_obj(buf: ByteArray, value: Any) -> None:
    """Encode ``value`` into ``buf`` at its position."""
    marshal = getattr(value, "marshal", None)
    if callable(marshal) and not isinstance(value, type):
        marshal(buf)
        return
    _encode(buf, value)


def _encode(buf: ByteArray, value: Any, hint: Any = None) -> None:
    if hint is not None and _is_class(hint):
        writer = _lookup(hint, _WRITERS)
        if writer is not None:
            writer(buf, value)
            return
    if _is_dataclass_instance(value):
        for name, field_hint in _public_fields(value):
            _encode(buf, getattr(value, name), field_hint)
    elif isinstance(value, (bytes, bytearray, memoryview)):
        buf.write(bytes(value))
    elif isinstance(value, (list, tuple)):
        for item in value:
            _encode(buf, item)
    else:
        writer = _lookup(type(value), _WRITERS)
        if writer is None:
            raise TypeError(f"fail write type {type(value).__name__}")
        writer(buf, value)


def read_obj(buf: ByteArray, target: Any) -> Any:
    """Decode from ``buf`` into ``target`` and return the result.

    ``target`` may be a type (a new value of it is decoded), a mutable object
    (filled in place and returned) or a scalar (a new value of its type is
    returned).
    """
    if _is_class(target):
        reader = _lookup(target, _READERS)
        if reader is not None:
            return target(reader(buf))
        target = _instantiate(target)
    unmarshal = getattr(target, "unmarshal", None)
    if callable(unmarshal):
        unmarshal(buf)
        return target
    return _decode_into(buf, target)


def _instantiate(cls: type) -> Any:
    try:
        return cls()
    except TypeError as exc:
        raise TypeError(f"fail read type {cls.__name__}") from exc


def _decode_type(buf: ByteArray, cls: type) -> Any:
    reader = _lookup(cls, _READERS)
    if reader is not None:
        return cls(reader(buf))
    return _decode_into(buf, _instantiate(cls))


def _decode_member(buf: ByteArray, current: Any, hint: Any) -> Any:
    if hint is not None and _is_class(hint) and _lookup(hint, _READERS) is not None:
        return _decode_type(buf, hint)
    if current is not None:
        return _decode_into(buf, current)
    if hint is not None and _is_class(hint):
        return _decode_type(buf, hint)
    raise TypeError(f"fail read type {hint!r}")


def _decode_into(buf: ByteArray, obj: Any) -> Any:
    if _is_dataclass_instance(obj):
        for name, hint in _public_fields(obj):
            setattr(obj, name, _decode_member(buf, getattr(obj, name), hint))
        return obj
    if isinstance(obj, bytearray):
        obj[:] = bytes(buf.read_uint8() for _ in obj)
        return obj
    if isinstance(obj, bytes):
        return bytes(buf.read_uint8() for _ in obj)
    if isinstance(obj, list):
        for index, item in enumerate(obj):
            obj[index] = _decode_member(buf, item, None)
        return obj
    if isinstance(obj, tuple):
        return tuple(_decode_member(buf, item, None) for item in obj)
    if _lookup(type(obj), _READERS) is not None:
        return _decode_type(buf, type(obj))
    raise TypeError(f"fail read type {type(obj).__name__}")