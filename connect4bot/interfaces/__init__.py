"""
connect4bot.interfaces - Ways of talking to the bot

This package contains the message dispatcher and the console CLI.
"""

# Don't import anything here to avoid circular imports
__all__ = []
