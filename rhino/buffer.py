"""Growable byte buffers with a cursor and fixed-width integer I/O."""

from __future__ import annotations

from typing import BinaryIO, Union

BytesLike = Union[bytes, bytearray, memoryview]

_BYTE_ORDERS = ("big", "little")


class Buffer:
    """A byte buffer with a read/write position.

    Writing overwrites bytes at the position and grows the buffer when needed.
    """

    def __init__(self, data: BytesLike = b"") -> None:
        self._buf = bytearray(data)
        self._pos = 0

    @property
    def pos(self) -> int:
        return self._pos

    def set_buffer(self, data: BytesLike) -> None:
        """Replace the contents and rewind."""
        self._buf = bytearray(data)
        self._pos = 0

    def seek(self, pos: int) -> None:
        if pos < 0:
            raise ValueError(f"negative position {pos}")
        self._pos = pos

    def seek_begin(self) -> None:
        self._pos = 0

    def seek_end(self) -> int:
        """Move to the end and return the new position."""
        self._pos = len(self._buf)
        return self._pos

    def skip(self, n: int) -> None:
        """Advance the position by ``n`` bytes."""
        self.seek(self._pos + n)

    def __len__(self) -> int:
        return len(self._buf)

    def set_length(self, n: int) -> None:
        """Truncate or zero-extend to ``n`` bytes; the position is clamped."""
        if n < 0:
            raise ValueError("buffer too large")
        if n > len(self._buf):
            self._buf.extend(bytes(n - len(self._buf)))
        else:
            del self._buf[n:]
        self._pos = min(self._pos, n)

    def __getitem__(self, index: int) -> int:
        return self._buf[index]

    def __setitem__(self, index: int, value: int) -> None:
        self._buf[index] = value

    def available(self) -> int:
        """Bytes between the position and the end."""
        return len(self._buf) - self._pos

    def write(self, data: BytesLike) -> int:
        """Write ``data`` at the position and return the number of bytes written."""
        chunk = bytes(data)
        self._grow(len(chunk))
        self._buf[self._pos:self._pos + len(chunk)] = chunk
        self._pos += len(chunk)
        return len(chunk)

    def read(self, n: int = -1) -> bytes:
        """Read up to ``n`` bytes (all remaining when ``n`` is negative)."""
        end = len(self._buf) if n < 0 else self._pos + n
        chunk = bytes(self._buf[self._pos:end])
        self._pos += len(chunk)
        return chunk

    def getvalue(self) -> bytes:
        """The whole contents, regardless of the position."""
        return bytes(self._buf)

    def _grow(self, size: int) -> int:
        missing = size - self.available()
        if missing > 0:
            self._buf.extend(bytes(missing))
            return missing
        return 0

    def _take(self, n: int) -> bytes:
        if self.available() < n:
            raise EOFError(f"need {n} bytes at position {self._pos}, buffer holds {len(self._buf)}")
        chunk = bytes(self._buf[self._pos:self._pos + n])
        self._pos += n
        return chunk


class ByteArray(Buffer):
    """A :class:`Buffer` that reads and writes fixed-width integers and strings."""

    def __init__(self, data: BytesLike = b"", endian: str = "big") -> None:
        super().__init__(data)
        self.endian = endian

    @property
    def endian(self) -> str:
        return self._endian

    @endian.setter
    def endian(self, value: str) -> None:
        if value not in _BYTE_ORDERS:
            raise ValueError(f"unknown byte order {value!r}")
        self._endian = value

    def _read_fixed(self, size: int, signed: bool) -> int:
        return int.from_bytes(self._take(size), self._endian, signed=signed)

    def _write_fixed(self, size: int, value: int) -> None:
        mask = (1 << (8 * size)) - 1
        self.write((int(value) & mask).to_bytes(size, self._endian))

    def read_bool(self) -> bool:
        return self.read_uint8() != 0

    def read_int(self) -> int:
        return self.read_int32()

    def read_int8(self) -> int:
        return self._read_fixed(1, True)

    def read_int16(self) -> int:
        return self._read_fixed(2, True)

    def read_int32(self) -> int:
        return self._read_fixed(4, True)

    def read_int64(self) -> int:
        return self._read_fixed(8, True)

    def read_uint8(self) -> int:
        return self._read_fixed(1, False)

    def read_uint16(self) -> int:
        return self._read_fixed(2, False)

    def read_uint32(self) -> int:
        return self._read_fixed(4, False)

    def read_uint64(self) -> int:
        return self._read_fixed(8, False)

    def read_str(self) -> str:
        """Read a string stored as a 32-bit length followed by UTF-8 bytes."""
        n = self.read_int()
        if n <= 0:
            return ""
        data = self.read(n).ljust(n, b"\x00")
        return data.decode("utf-8", errors="replace")

    def write_bool(self, value: bool) -> None:
        self.write_uint8(1 if value else 0)

    def write_int(self, value: int) -> None:
        self.write_int32(value)

    def write_int8(self, value: int) -> None:
        self._write_fixed(1, value)

    def write_int16(self, value: int) -> None:
        self._write_fixed(2, value)

    def write_int32(self, value: int) -> None:
        self._write_fixed(4, value)

    def write_int64(self, value: int) -> None:
        self._write_fixed(8, value)

    def write_uint8(self, value: int) -> None:
        self._write_fixed(1, value)

    def write_uint16(self, value: int) -> None:
        self._write_fixed(2, value)

    def write_uint32(self, value: int) -> None:
        self._write_fixed(4, value)

    def write_uint64(self, value: int) -> None:
        self._write_fixed(8, value)

    def write_str(self, value: str) -> None:
        data = value.encode("utf-8")
        self.write_uint32(len(data))
        self.write(data)

    def write_to(self, out: BinaryIO, n: int = 0) -> int:
        """Copy bytes from the position to ``out`` (all remaining when ``n`` < 1)."""
        end = len(self._buf) if n < 1 else self._pos + n
        chunk = bytes(self._buf[self._pos:end])
        written = out.write(chunk)
        if written is None:
            written = len(chunk)
        self.skip(written)
        return written


def new() -> ByteArray:
    """An empty big-endian byte array."""
    return ByteArray()


def with_bytes(data: BytesLike) -> ByteArray:
    """A byte array over a copy of ``data``, positioned at the start."""
    return ByteArray(data)


def with_size(n: int) -> ByteArray:
    """A byte array of ``n`` zero bytes."""
    if n < 0:
        raise ValueError("buffer too large")
    return ByteArray(bytes(n))