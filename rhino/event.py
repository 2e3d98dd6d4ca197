"""Topic-based publish/subscribe."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple


@dataclass(frozen=True)
class Event:
    """A publication: its topic and the arguments it was published with."""

    topic: int
    args: Tuple[Any, ...] = ()

    @property
    def message(self) -> Tuple[Any, ...]:
        return self.args


class Subscription:
    """A handler registered for one or more topics."""

    def __init__(self, owner: Optional["ObserverSet"], topics: Tuple[int, ...], fn: Callable[[Event], Any]):
        self.owner = owner
        self.topics = topics
        self.fn = fn

    def notify(self, event: Event) -> None:
        self.fn(event)

    def unsubscribe(self) -> None:
        if self.owner is not None:
            self.owner.unsubscribe(self)


class ObserverSet(dict):
    """Maps each topic to the subscriptions listening on it."""

    def publish(self, topic: int, *args: Any) -> None:
        subs: Optional[List[Subscription]] = self.get(topic)
        if subs is None:
            raise KeyError(f"can't find topic={topic}")
        for sub in list(subs):
            sub.notify(Event(topic, args))

    def subscribe(self, fn: Callable[[Event], Any], *args: int) -> Subscription:
        sub = Subscription(self, args, fn)
        for topic in args:
            self.setdefault(topic, []).append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        for topic in sub.topics:
            subs = self.get(topic)
            if subs is None:
                continue
            index = next((i for i, s in enumerate(subs) if s is sub), -1)
            if index != -1:
                del subs[index]
            if not subs:
                del self[topic]