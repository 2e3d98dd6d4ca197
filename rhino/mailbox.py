"""A process whose messages arrive through a bounded, closable queue."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Callable, Iterator, Union

from rhino.process import Process


class OverfullError(Exception):
    """A non-blocking post found the mailbox full."""

    def __init__(self, message: str = "channel overfull") -> None:
        super().__init__(message)


class _Channel:
    """A closable FIFO; capacity 0 accepts an item only while a reader waits."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"negative capacity {capacity}")
        self.capacity = capacity
        self._items: deque = deque()
        self._closed = False
        self._getters = 0
        self._cond = threading.Condition()

    def _has_room(self) -> bool:
        return len(self._items) < self.capacity + self._getters

    def put(self, item: Any, block: bool = True) -> None:
        with self._cond:
            while True:
                if self._closed:
                    raise RuntimeError("send on closed channel")
                if self._has_room():
                    break
                if not block:
                    raise OverfullError()
                self._cond.wait()
            self._items.append(item)
            self._cond.notify_all()

    def close(self) -> None:
        with self._cond:
            if self._closed:
                raise RuntimeError("close of closed channel")
            self._closed = True
            self._cond.notify_all()

    def __iter__(self) -> Iterator[Any]:
        while True:
            with self._cond:
                self._getters += 1
                self._cond.notify_all()
                try:
                    while not self._items and not self._closed:
                        self._cond.wait()
                    if not self._items:
                        return
                    item = self._items.popleft()
                    self._cond.notify_all()
                finally:
                    self._getters -= 1
            yield item


BufferSpec = Union[int, Callable[..., int], None]


def _takes_no_arguments(fn: Callable[..., int]) -> bool:
    code = getattr(fn, "__code__", None)
    if code is None:
        return False
    has_varargs = bool(code.co_flags & 0x04)
    positional = code.co_argcount - (1 if getattr(fn, "__self__", None) is not None else 0)
    return positional == 0 and not has_varargs


def _resolve_capacity(buffer: BufferSpec, pending_num: int) -> int:
    if buffer is None:
        return pending_num
    if isinstance(buffer, int) and not isinstance(buffer, bool):
        return buffer
    if callable(buffer):
        return buffer() if _takes_no_arguments(buffer) else buffer(pending_num)
    raise TypeError(f"buffer paramer error: [class {type(buffer).__name__}]")


class Mailbox(Process):
    """Queues posted messages and hands them to the broker one at a time.

    ``buffer`` overrides the capacity: an int, or a callable taking either
    nothing or ``pending_num`` and returning the capacity.
    """

    def __init__(self, pending_num: int = 0, nonblocking: bool = False, buffer: BufferSpec = None) -> None:
        super().__init__()
        self.pending_num = pending_num
        self.nonblocking = nonblocking
        self._channel = _Channel(_resolve_capacity(buffer, pending_num))

    def start(self) -> None:
        self.on_started()
        self.schedule(self._run)

    def close(self) -> None:
        """Stop accepting messages; raises if already closed."""
        self._channel.close()

    def _close_quietly(self) -> None:
        try:
            self._channel.close()
        except RuntimeError:
            pass

    def _run(self) -> None:
        try:
            self.pre_start()
            for body in self._channel:
                self.on_received(body)
                self.dispatch_message(body)
        finally:
            self._close_quietly()
            self.post_stop()

    def post(self, value: Any) -> None:
        """Queue ``value``; raises :class:`OverfullError` or ``RuntimeError`` when it cannot."""
        self.on_posted(value)
        try:
            self._channel.put(value, block=not self.nonblocking)
        except Exception as err:
            self.on_discarded(err, value)
            raise


def make_buffer(pending_num: int, **kwargs: Any) -> Mailbox:
    """A blocking mailbox holding ``pending_num`` messages unless ``kwargs`` say otherwise."""
    options = {"pending_num": pending_num, **kwargs}
    return Mailbox(**options)


def new(**kwargs: Any) -> Mailbox:
    """A mailbox with room for 10 messages by default."""
    return make_buffer(10, **kwargs)


def unbounded(**kwargs: Any) -> Callable[[], Mailbox]:
    """A factory making a fresh mailbox with these options on each call."""

    def produce() -> Mailbox:
        return new(**kwargs)

    return produce