"""
connect4bot.game - Core game mechanics for Connect Four over chat

This package contains the board representation and rules, and the session
state machine that drives one game through a chat transport.
"""

from connect4bot.game.board import Board, MoveResult
from connect4bot.game.session import (GameSession, SessionOutcome, SessionState,
                                      Resolution, start_game)

__all__ = ['Board', 'MoveResult', 'GameSession', 'SessionOutcome', 'SessionState',
           'Resolution', 'start_game']
