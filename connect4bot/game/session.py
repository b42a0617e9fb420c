"""
session.py - Game session state machine for Connect Four over chat

A GameSession runs one game from invitation to resolution. It waits for the
invited player to accept, then repeatedly waits for the current player's next
message, applies it to the board and sends the result back to the channel,
until a player lines up four pieces.

Known limitation: there is no timeout. A session whose players stop answering
waits forever, and a failed wait during a turn is simply re-issued.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Hashable, Optional

from connect4bot.debug import debug
from connect4bot.game.board import Board
from connect4bot.transport.messages import Message, Transport, WaitFailed

ACCEPT_TOKEN = "accept"
DECLINED_REPLY = "Game declined!!!"


class SessionState(Enum):
    AWAITING_ACCEPTANCE = auto()
    IN_PROGRESS = auto()
    FINISHED = auto()


class Resolution(Enum):
    WINNER = auto()
    DECLINED = auto()


@dataclass(frozen=True)
class SessionOutcome:
    """How a finished session ended."""
    resolution: Resolution
    winner: Optional[Hashable] = None
    moves: int = 0

    @property
    def declined(self) -> bool:
        return self.resolution == Resolution.DECLINED


def victory_message(player: Hashable) -> str:
    return f"decisive victory for <@{player}>"


class GameSession:
    """
    Orchestrates a single game between an initiator and an invited player.

    The transport is injected; the session touches no other shared state and
    owns its Board exclusively.
    """

    def __init__(self, initiator: Hashable, invited: Hashable, channel: Hashable,
                 transport: Transport):
        if initiator == invited:
            raise ValueError("A game needs two distinct players")
        self.initiator = initiator
        self.invited = invited
        self.channel = channel
        self.transport = transport
        self.state = SessionState.AWAITING_ACCEPTANCE
        self.board: Optional[Board] = None
        self.outcome: Optional[SessionOutcome] = None

    def _is_acceptance(self, message: Message) -> bool:
        return message.author_id == self.invited and ACCEPT_TOKEN in message.content.lower()

    async def run(self) -> SessionOutcome:
        """
        Play the game to completion.

        Returns:
            The session outcome (winner or declined)

        Raises:
            TransportError: sending to the channel failed
        """
        if self.state != SessionState.AWAITING_ACCEPTANCE:
            raise RuntimeError(f"Session already {self.state.name.lower()}")

        debug.info(f"Game offered by {self.initiator} to {self.invited} in {self.channel}", "session")
        try:
            await self.transport.wait_for_message(self.channel, self._is_acceptance)
        except WaitFailed as e:
            debug.info(f"Game declined in {self.channel}: {e}", "session")
            await self.transport.send(self.channel, DECLINED_REPLY)
            return self._finish(SessionOutcome(Resolution.DECLINED))

        self.board = Board(self.initiator, self.invited)
        self.state = SessionState.IN_PROGRESS
        await self.transport.send(self.channel, self.board.render())

        while True:
            player = self.board.current_player()
            message = await self._wait_for_move(player)
            if message is None:
                continue

            result = self.board.apply_move(message.content)
            debug.debug(f"{player} played {message.content!r}: {result.status.name}", "session")
            await self.transport.send(self.channel, result.text)

            if self.board.check_terminal():
                await self.transport.send(self.channel, victory_message(player))
                debug.info(f"{player} won in {self.channel} after {self.board.move_count} moves",
                           "session")
                return self._finish(SessionOutcome(Resolution.WINNER, player, self.board.move_count))

    async def _wait_for_move(self, player: Hashable) -> Optional[Message]:
        """Next message authored by ``player``, or None if the wait failed."""
        try:
            return await self.transport.wait_for_message(
                self.channel, lambda message: message.author_id == player)
        except WaitFailed as e:
            debug.debug(f"Wait for {player} failed, waiting again: {e}", "session")
            return None

    def _finish(self, outcome: SessionOutcome) -> SessionOutcome:
        self.state = SessionState.FINISHED
        self.outcome = outcome
        return outcome


async def start_game(initiator: Hashable, invited: Hashable, channel: Hashable,
                     transport: Transport) -> SessionOutcome:
    """Run a new game session between two players in ``channel``."""
    return await GameSession(initiator, invited, channel, transport).run()
