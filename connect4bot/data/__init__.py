"""
connect4bot.data - Persistent data for the chat bot

This package holds the score ledger that remembers how many games each
player has won.
"""

from connect4bot.data.score_ledger import ScoreLedger

__all__ = ['ScoreLedger']
