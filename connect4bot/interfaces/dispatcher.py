"""
dispatcher.py - Routes inbound chat messages to bot commands

Every message is first offered to the gateway so that waiting game sessions
see it. Messages containing the start command spawn a new game between the
author and the first other player they mention; messages containing the score
command get the author's score from the ledger.

Ledger reads and writes take a file lock, so they run in the loop's default
executor rather than on the event loop itself.
"""

import asyncio
from typing import Hashable, Optional, Set

from connect4bot.config import Settings
from connect4bot.data.score_ledger import ScoreLedger
from connect4bot.debug import debug
from connect4bot.game.session import Resolution, SessionOutcome, start_game
from connect4bot.transport.messages import ChatGateway, Message

NO_OPPONENT_REPLY = "You can't play alone dumbass"


class Dispatcher:
    """Recognises trigger phrases and runs the matching command."""

    def __init__(self, transport: ChatGateway, ledger: ScoreLedger,
                 settings: Optional[Settings] = None):
        self.transport = transport
        self.ledger = ledger
        self.settings = settings or Settings()
        self._games: Set[asyncio.Task] = set()

    @property
    def running_games(self) -> int:
        return len(self._games)

    async def handle_message(self, message: Message) -> None:
        """Feed ``message`` to waiting sessions, then run any command it contains."""
        self.transport.deliver(message)

        content = message.content.lower()
        if self.settings.start_command in content:
            await self._start(message)
        elif self.settings.score_command in content:
            await self._score(message)

    async def _start(self, message: Message) -> None:
        opponents = [user for user in message.mentions if user != message.author_id]
        if not opponents:
            await self.transport.send(message.channel_id, NO_OPPONENT_REPLY)
            return

        invited = opponents[0]
        debug.debug(f"{message.author_id} challenged {invited} in {message.channel_id}", "dispatch")
        task = asyncio.create_task(self._play(message.author_id, invited, message.channel_id))
        self._games.add(task)
        task.add_done_callback(self._game_finished)

    async def _play(self, initiator: Hashable, invited: Hashable,
                    channel: Hashable) -> SessionOutcome:
        outcome = await start_game(initiator, invited, channel, self.transport)
        if outcome.resolution == Resolution.WINNER:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self.ledger.add_points, outcome.winner)
        return outcome

    async def _score(self, message: Message) -> None:
        loop = asyncio.get_running_loop()
        score = await loop.run_in_executor(None, self.ledger.get_score, message.author_id)
        await self.transport.send(message.channel_id, f"{score}")

    def _game_finished(self, task: asyncio.Task) -> None:
        self._games.discard(task)
        if task.cancelled():
            debug.debug("Game cancelled", "dispatch")
            return

        error = task.exception()
        if error is not None:
            debug.exception(f"Game aborted: {error!r}", "dispatch", error)

    async def wait_idle(self) -> None:
        """Wait until every running game has finished."""
        while self._games:
            await asyncio.gather(*list(self._games), return_exceptions=True)
            await asyncio.sleep(0)

    async def shutdown(self) -> None:
        """
        Close the gateway and wait for running games to wind down.

        Closing fails every pending wait, so sessions end on their own; a game
        that has just been won still gets its ledger credit.
        """
        self.transport.close()
        await self.wait_idle()
