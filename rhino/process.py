"""Scheduling, message-handling and statistics interfaces for processes."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple


class Dispatcher(ABC):
    """Decides where scheduled work runs."""

    throughput: int = 0

    @abstractmethod
    def schedule(self, fn: Callable[[], Any]) -> None:
        """Run ``fn``."""


@dataclass(frozen=True)
class ThreadDispatcher(Dispatcher):
    """Runs each scheduled function on a new daemon thread."""

    throughput: int = 0

    def schedule(self, fn: Callable[[], Any]) -> None:
        threading.Thread(target=fn, daemon=True).start()


@dataclass(frozen=True)
class SyncDispatcher(Dispatcher):
    """Runs each scheduled function in the caller's thread."""

    throughput: int = 0

    def schedule(self, fn: Callable[[], Any]) -> None:
        fn()


def new_default_dispatcher(throughput: int = 0) -> Dispatcher:
    return ThreadDispatcher(throughput)


def new_sync_dispatcher(throughput: int = 0) -> Dispatcher:
    return SyncDispatcher(throughput)


class Broker(ABC):
    """Handles the life cycle and messages of a process."""

    @abstractmethod
    def pre_start(self) -> None:
        """Called before the first message."""

    @abstractmethod
    def dispatch_message(self, data: Any) -> None:
        """Handle one message."""

    @abstractmethod
    def throw_failure(self, err: BaseException, body: Any) -> None:
        """Report a failure raised while handling ``body``."""

    @abstractmethod
    def post_stop(self) -> None:
        """Called after the last message."""


class UntypedBroker(Broker):
    """A broker that ignores everything, printing a warning each time."""

    def pre_start(self) -> None:
        print("Warning: UntypedBroker ignore start!")

    def dispatch_message(self, data: Any) -> None:
        print("Warning: UntypedBroker ignore message =", data)

    def throw_failure(self, err: BaseException, body: Any) -> None:
        print("Warning: UntypedBroker ignore failure { err:", err, "body:", body, "}")

    def post_stop(self) -> None:
        print("Warning: UntypedBroker ignore stop!")


class Statistics(ABC):
    """Observes traffic through a process."""

    @abstractmethod
    def on_started(self) -> None:
        """The process is ready."""

    @abstractmethod
    def on_posted(self, value: Any) -> None:
        """A message was sent (not necessarily successfully)."""

    @abstractmethod
    def on_discarded(self, err: BaseException, value: Any) -> None:
        """A posted message was lost."""

    @abstractmethod
    def on_received(self, value: Any) -> None:
        """A message was received (not necessarily handled)."""

    @abstractmethod
    def on_free(self) -> None:
        """The process is idle."""


class UntypedStatistics(Statistics):
    """Statistics that record nothing."""

    def on_started(self) -> None:
        pass

    def on_posted(self, value: Any) -> None:
        pass

    def on_discarded(self, err: BaseException, value: Any) -> None:
        pass

    def on_received(self, value: Any) -> None:
        pass

    def on_free(self) -> None:
        pass


class Process(Dispatcher, Broker, Statistics):
    """Base process: forwards to its dispatcher, broker and statistics."""

    def __init__(self) -> None:
        self._dispatcher: Optional[Dispatcher] = None
        self._broker: Optional[Broker] = None
        self._statistics: Tuple[Statistics, ...] = ()

    def on_register(self, dispatcher: Dispatcher, broker: Broker, *args: Statistics) -> None:
        self._dispatcher = dispatcher
        self._broker = broker
        self._statistics = args

    def start(self) -> None:
        return None

    def close(self) -> None:
        return None

    def _require_broker(self) -> Broker:
        if self._broker is None:
            raise RuntimeError("process is not registered")
        return self._broker

    def _require_dispatcher(self) -> Dispatcher:
        if self._dispatcher is None:
            raise RuntimeError("process is not registered")
        return self._dispatcher

    def on_started(self) -> None:
        for stats in self._statistics:
            stats.on_started()

    def on_posted(self, value: Any) -> None:
        for stats in self._statistics:
            stats.on_posted(value)

    def on_received(self, value: Any) -> None:
        for stats in self._statistics:
            stats.on_received(value)

    def on_discarded(self, err: BaseException, value: Any) -> None:
        for stats in self._statistics:
            stats.on_discarded(err, value)

    def on_free(self) -> None:
        for stats in self._statistics:
            stats.on_free()

    def pre_start(self) -> None:
        self._require_broker().pre_start()

    def dispatch_message(self, body: Any) -> None:
        self._require_broker().dispatch_message(body)

    def post_stop(self) -> None:
        self._require_broker().post_stop()

    def throw_failure(self, err: BaseException, body: Any) -> None:
        self._require_broker().throw_failure(err, body)

    def schedule(self, fn: Callable[[], Any]) -> None:
        self._require_dispatcher().schedule(fn)

    @property
    def throughput(self) -> int:  # type: ignore[override]
        return self._require_dispatcher().throughput