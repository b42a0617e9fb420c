"""
messages.py - Message type and transport protocol for the chat bot
"""

from dataclasses import dataclass
from typing import Callable, Hashable, Protocol, Tuple


@dataclass(frozen=True)
class Message:
    """One inbound chat message."""
    channel_id: Hashable
    author_id: Hashable
    content: str
    mentions: Tuple[Hashable, ...] = ()


Predicate = Callable[[Message], bool]


class TransportError(Exception):
    """Raised when a collaborator fails to deliver or emit a message."""


class WaitFailed(TransportError):
    """A wait subscription was abandoned before a matching message arrived."""


class StandbyClosed(TransportError):
    """The standby has shut down and accepts no new subscriptions."""


class Transport(Protocol):
    """Capabilities a game session needs from the chat layer."""

    async def wait_for_message(self, channel: Hashable, predicate: Predicate) -> Message:
        """Block until a message on ``channel`` satisfies ``predicate``."""
        ...

    async def send(self, channel: Hashable, text: str) -> None:
        """Emit ``text`` to ``channel``."""
        ...


class ChatGateway(Transport, Protocol):
    """A transport that also accepts inbound traffic and can be shut down."""

    def deliver(self, message: Message) -> int:
        """Offer an inbound message to waiting sessions."""
        ...

    def close(self) -> None:
        ...
