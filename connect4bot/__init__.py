"""
connect4bot - Connect Four for chat channels

This package provides a two-player Connect Four engine driven by chat
messages: a board with rules and glyph rendering, a session state machine
that waits on players through an injected transport, a dispatcher that
recognises the bot's trigger phrases, and a persistent score ledger.
"""

# Version number
__version__ = '0.2.0'
