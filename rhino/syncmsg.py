"""Synchronous request/response rendezvous keyed by numeric sync ids."""

from __future__ import annotations

import itertools
import threading
import time
from collections import deque
from concurrent.futures import CancelledError
from dataclasses import dataclass
from typing import Any, Dict, Optional

_POLL = 0.05


@dataclass(eq=False)
class _Offer:
    body: Any
    taken: bool = False


class SyncConn:
    """An unbuffered hand-off point: a write completes only when a read takes it.

    ``done`` is an optional :class:`threading.Event`; once set, pending and
    future operations raise :class:`concurrent.futures.CancelledError`.
    """

    def __init__(self, sync_id: int, done: Optional[threading.Event] = None):
        self.sync_id = sync_id
        self.done = done
        self._cond = threading.Condition()
        self._offers: deque = deque()
        self._errors: deque = deque()
        self._readers = 0

    def _cancelled(self) -> bool:
        return self.done is not None and self.done.is_set()

    def _wait(self, deadline: Optional[float]) -> None:
        timeout = None if deadline is None else max(deadline - time.monotonic(), 0)
        if self.done is not None:
            timeout = _POLL if timeout is None else min(timeout, _POLL)
        self._cond.wait(timeout)

    @staticmethod
    def _expired(deadline: Optional[float]) -> bool:
        return deadline is not None and time.monotonic() >= deadline

    def read(self, timeout: Optional[float] = None) -> Any:
        """Block until a value is written, a rollback arrives, or ``timeout`` seconds pass."""
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            self._readers += 1
            try:
                while True:
                    if self._cancelled():
                        raise CancelledError("context canceled")
                    if self._errors:
                        raise self._errors.popleft()
                    if self._offers:
                        offer = self._offers.popleft()
                        offer.taken = True
                        self._cond.notify_all()
                        return offer.body
                    if self._expired(deadline):
                        raise TimeoutError("context deadline exceeded")
                    self._wait(deadline)
            finally:
                self._readers -= 1

    def write(self, body: Any, timeout: Optional[float] = None) -> None:
        """Block until a reader takes ``body`` or ``timeout`` seconds pass."""
        deadline = None if timeout is None else time.monotonic() + timeout
        offer = _Offer(body)
        with self._cond:
            if self._cancelled():
                raise CancelledError("context canceled")
            self._offers.append(offer)
            self._cond.notify_all()
            while not offer.taken:
                if self._cancelled():
                    self._offers.remove(offer)
                    raise CancelledError("context canceled")
                if self._expired(deadline):
                    self._offers.remove(offer)
                    raise TimeoutError("context deadline exceeded")
                self._wait(deadline)

    def rollback(self) -> None:
        """Fail one reader that is waiting right now; raise if none is."""
        with self._cond:
            if self._cancelled():
                raise CancelledError("context canceled")
            if self._readers > len(self._errors):
                self._errors.append(RuntimeError(f"rollback sync id={self.sync_id}"))
                self._cond.notify_all()
                return
        raise RuntimeError("rollback error: not read")

    def close(self) -> None:
        """Release the connection (nothing to free)."""
        return None


_ids = itertools.count(1)
_ids_lock = threading.Lock()


def new_conn(done: Optional[threading.Event] = None) -> SyncConn:
    """Create a connection with a fresh, process-wide unique sync id."""
    with _ids_lock:
        sync_id = next(_ids)
    return SyncConn(sync_id, done)


class MessageChannel:
    """Registry of waiting connections, answered by sync id."""

    def __init__(self) -> None:
        self._conns: Dict[int, SyncConn] = {}
        self._lock = threading.Lock()

    def accept(self, done: Optional[threading.Event] = None) -> SyncConn:
        conn = new_conn(done)
        with self._lock:
            self._conns[conn.sync_id] = conn
        return conn

    def read(self, conn: SyncConn, delay: float = 0) -> Any:
        """Read once from ``conn`` (with a timeout when ``delay`` > 0), then retire it."""
        try:
            if delay > 0:
                return conn.read(delay)
            return conn.read()
        finally:
            with self._lock:
                self._conns.pop(conn.sync_id, None)
            conn.close()

    def _load_and_remove(self, sync_id: int) -> Optional[SyncConn]:
        with self._lock:
            return self._conns.pop(sync_id, None)

    def commit(self, sync_id: int, value: Any) -> None:
        """Deliver ``value`` to the connection with ``sync_id``; only once."""
        conn = self._load_and_remove(sync_id)
        if conn is None:
            raise KeyError(f"commit err: can't find sync id={sync_id}")
        try:
            conn.write(value)
        except (TimeoutError, CancelledError):
            pass

    def rollback(self, sync_id: int) -> None:
        """Withdraw the connection with ``sync_id``; only once."""
        conn = self._load_and_remove(sync_id)
        if conn is None:
            raise KeyError(f"rollback err: can't find sync id={sync_id}")
        conn.close()


_background = MessageChannel()


def channel() -> MessageChannel:
    """The process-wide message channel."""
    return _background