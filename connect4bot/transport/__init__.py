"""
connect4bot.transport - Chat transport capabilities used by game sessions

This package contains the message type, the transport protocol a session
talks to, the standby that implements predicate-matching waits, and an
in-memory console transport.
"""

from connect4bot.transport.messages import (Message, Transport, ChatGateway, TransportError,
                                            WaitFailed, StandbyClosed)
from connect4bot.transport.standby import Standby
from connect4bot.transport.console import ConsoleTransport, parse_console_line

__all__ = ['Message', 'Transport', 'ChatGateway', 'TransportError', 'WaitFailed', 'StandbyClosed',
           'Standby', 'ConsoleTransport', 'parse_console_line']
