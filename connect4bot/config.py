"""
config.py - Runtime settings for the chat bot

Settings come from environment variables and can be overridden by command
line flags in ``run.py``.
"""

import os
from dataclasses import dataclass

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
DATA_DIR = os.path.join(BASE_DIR, 'data')

DEFAULT_LEDGER_FILE = os.path.join(DATA_DIR, 'scores.json')
DEFAULT_TRIGGER = "hamis"


@dataclass
class Settings:
    ledger_path: str = DEFAULT_LEDGER_FILE
    trigger: str = DEFAULT_TRIGGER
    debug_level: str = "info"
    log_file: str = ""
    channel: str = "general"

    @property
    def start_command(self) -> str:
        return f"{self.trigger} start"

    @property
    def score_command(self) -> str:
        return f"{self.trigger} score"

    @classmethod
    def from_env(cls, environ=None) -> 'Settings':
        """Build settings from ``CONNECT4BOT_*`` environment variables."""
        environ = os.environ if environ is None else environ
        return cls(
            ledger_path=environ.get('CONNECT4BOT_DATA', DEFAULT_LEDGER_FILE),
            trigger=environ.get('CONNECT4BOT_TRIGGER', DEFAULT_TRIGGER).lower(),
            debug_level=environ.get('CONNECT4BOT_DEBUG', 'info').lower(),
            log_file=environ.get('CONNECT4BOT_LOG_FILE', ''),
            channel=environ.get('CONNECT4BOT_CHANNEL', 'general'),
        )
