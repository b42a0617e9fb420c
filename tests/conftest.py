"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures and fakes shared by the game, transport and dispatcher tests.
"""

import asyncio
from collections import deque
from typing import Callable, Iterable, List, Tuple

import pytest

from connect4bot.config import Settings
from connect4bot.data.score_ledger import ScoreLedger
from connect4bot.interfaces.cli import SETTLE_TICKS
from connect4bot.transport.messages import Message, TransportError, WaitFailed

CHANNEL = "general"

# Placed in a script to make the next wait_for_message call fail
WAIT_FAILS = object()


class ScriptExhausted(Exception):
    """The scripted transport ran out of messages while a session was still waiting."""


class ScriptedTransport:
    """
    Transport fake that serves inbound messages from a fixed script.

    Scripted messages that do not satisfy the current predicate are consumed and
    dropped, like traffic a live session never sees.
    """

    def __init__(self, script: Iterable = ()):
        self.script = deque(script)
        self.sent: List[Tuple[str, str]] = []
        self.waits = 0
        self.fail_sends = False

    async def wait_for_message(self, channel, predicate) -> Message:
        self.waits += 1
        while self.script:
            item = self.script.popleft()
            if item is WAIT_FAILS:
                raise WaitFailed("scripted failure")
            if item.channel_id == channel and predicate(item):
                return item
        raise ScriptExhausted("no scripted message left")

    async def send(self, channel, text: str) -> None:
        if self.fail_sends:
            raise TransportError("scripted send failure")
        self.sent.append((channel, text))

    def texts(self) -> List[str]:
        return [text for _, text in self.sent]


def msg(author: str, content: str, channel: str = CHANNEL, mentions=()) -> Message:
    return Message(channel_id=channel, author_id=author, content=content, mentions=tuple(mentions))


async def settle(ticks: int = SETTLE_TICKS) -> None:
    """Give pending tasks a few loop iterations to reach their next await."""
    for _ in range(ticks):
        await asyncio.sleep(0)


@pytest.fixture
def scripted_transport() -> Callable[..., ScriptedTransport]:
    """Call the inner function with the scripted inbound messages"""

    def _create(*script) -> ScriptedTransport:
        return ScriptedTransport(script)

    return _create


@pytest.fixture
def ledger(tmp_path) -> ScoreLedger:
    return ScoreLedger(str(tmp_path / "scores.json"))


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(ledger_path=str(tmp_path / "scores.json"))
