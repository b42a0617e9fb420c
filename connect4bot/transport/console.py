"""
console.py - In-memory chat transport

ConsoleTransport keeps a transcript of everything the bot sends, per channel,
and routes inbound messages through a Standby. The CLI drives it from stdin;
tests drive it directly.
"""

import re
from typing import Callable, Dict, Hashable, List, Optional

from connect4bot.debug import debug
from connect4bot.transport.messages import Message, Predicate, TransportError
from connect4bot.transport.standby import Standby

CONSOLE_LINE = re.compile(r"^\s*(?:#(?P<channel>\S+)\s+)?(?P<author>[^:\s]+)\s*:\s?(?P<content>.*)$")
MENTION = re.compile(r"@(\w+)")


def parse_console_line(line: str, default_channel: Hashable = "general") -> Optional[Message]:
    """
    Parse ``"[#channel] author: text"`` into a Message.

    ``@name`` tokens in the text become mentions, in order of appearance.
    Returns None for lines that do not follow the format.
    """
    match = CONSOLE_LINE.match(line.rstrip("\n"))
    if match is None:
        return None

    content = match.group("content")
    return Message(
        channel_id=match.group("channel") or default_channel,
        author_id=match.group("author"),
        content=content,
        mentions=tuple(MENTION.findall(content)),
    )


class ConsoleTransport:
    """Transport that records sent messages and optionally writes them out."""

    def __init__(self, standby: Optional[Standby] = None,
                 writer: Optional[Callable[[str], None]] = None):
        self.standby = standby or Standby()
        self._writer = writer
        self._closed = False
        self.sent: Dict[Hashable, List[str]] = {}

    async def wait_for_message(self, channel: Hashable, predicate: Predicate) -> Message:
        return await self.standby.wait_for_message(channel, predicate)

    async def send(self, channel: Hashable, text: str) -> None:
        if self._closed:
            raise TransportError(f"Cannot send to channel {channel}: transport closed")

        self.sent.setdefault(channel, []).append(text)
        debug.trace(f"Sent {len(text)} chars to channel {channel}", "transport")
        if self._writer is not None:
            self._writer(f"[#{channel}] bot: {text}")

    def deliver(self, message: Message) -> int:
        """Hand an inbound message to waiting sessions."""
        return self.standby.process(message)

    def transcript(self, channel: Hashable) -> List[str]:
        return list(self.sent.get(channel, ()))

    def close(self) -> None:
        self._closed = True
        self.standby.close()
