"""Message envelopes and the life-cycle messages actors receive."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(eq=False)
class Envelope:
    """A message body together with the actor that sent it."""

    sender: Any
    body: Any

    def replace(self, data: Any) -> None:
        """Swap the body for ``data``."""
        self.body = data


def msg(sender: Any, body: Any) -> Envelope:
    return Envelope(sender, body)


def wrap_envelope(message: Any) -> Envelope:
    """``message`` itself when it is an envelope, else an envelope with no sender."""
    if isinstance(message, Envelope):
        return message
    return Envelope(None, message)


def unwrap_message(message: Any) -> Any:
    """The body of an envelope, or ``message`` unchanged."""
    if isinstance(message, Envelope):
        return message.body
    return message


def unwrap_sender(message: Any) -> Optional[Any]:
    """The sender of an envelope, or ``None``."""
    if isinstance(message, Envelope):
        return message.sender
    return None


class Started:
    """Delivered before an actor's first message."""

    def __str__(self) -> str:
        return "start"


class Stopped:
    """Delivered after an actor's last message."""

    def __str__(self) -> str:
        return "stop"


class Restart:
    """Asks an actor to restart."""

    def __str__(self) -> str:
        return "restart"


@dataclass(frozen=True)
class Failure:
    """An error raised while handling ``body``."""

    err: BaseException
    body: Any = None

    def __str__(self) -> str:
        return "failure"


STARTED = Started()
STOPPED = Stopped()
RESTART = Restart()