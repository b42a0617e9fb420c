"""
cli.py - Command-line interface for running the bot against a console chat

Lines typed on stdin (or read from a script file) are treated as chat
messages in the form ``[#channel] author: text``; everything the bot sends
is printed to stdout.
"""

import argparse
import asyncio
import sys
from typing import Iterable, List, Optional

from connect4bot.config import Settings
from connect4bot.data.score_ledger import ScoreLedger
from connect4bot.debug import debug
from connect4bot.interfaces.dispatcher import Dispatcher
from connect4bot.transport.console import ConsoleTransport, parse_console_line

# Loop iterations to yield after dispatching a line. A session woken by the
# line needs one iteration for its wait to resolve and one to run up to its
# next wait (console sends never suspend); a newly spawned game needs one to
# start. The rest is headroom for a few sessions resuming in sequence.
SETTLE_TICKS = 10


class SimpleCLI:
    """Console front end for the chat bot."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings.from_env()
        self.args = None

    def parse_args(self, argv: Optional[List[str]] = None) -> None:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(description='Connect Four chat bot')
        parser.add_argument('--data', default=self.settings.ledger_path,
                            help='Path to the score ledger JSON file')
        parser.add_argument('--trigger', default=self.settings.trigger,
                            help='Word that prefixes bot commands')
        parser.add_argument('--channel', default=self.settings.channel,
                            help='Channel used for lines without a #channel prefix')
        parser.add_argument('--debug-level', default=self.settings.debug_level,
                            choices=['none', 'error', 'warning', 'info', 'debug', 'trace'])
        parser.add_argument('--log-file', default=self.settings.log_file,
                            help='Also write logs to this file')

        subparsers = parser.add_subparsers(dest='command', help='Command to run')
        subparsers.add_parser('chat', help='Read chat lines from stdin')
        script_parser = subparsers.add_parser('script', help='Feed chat lines from a file')
        script_parser.add_argument('path', help='File with one chat line per line')
        score_parser = subparsers.add_parser('score', help='Print a player\'s score')
        score_parser.add_argument('player', help='Player identity')

        self.args = parser.parse_args(argv)

        self.settings.ledger_path = self.args.data
        self.settings.trigger = self.args.trigger.lower()
        self.settings.channel = self.args.channel
        self.settings.debug_level = self.args.debug_level
        self.settings.log_file = self.args.log_file

        debug.set_from_string(self.settings.debug_level)
        if self.settings.log_file:
            debug.configure(log_file=self.settings.log_file)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the CLI based on the parsed arguments."""
        if not self.args:
            self.parse_args(argv)

        command = self.args.command or 'chat'
        if command == 'score':
            print(ScoreLedger(self.settings.ledger_path).get_score(self.args.player))
            return 0
        if command == 'script':
            with open(self.args.path, 'r') as f:
                lines = f.readlines()
            asyncio.run(self.feed(lines))
            return 0

        print(f"Type chat lines as '[#channel] author: text'. "
              f"Start a game with '{self.settings.start_command} @opponent'.")
        asyncio.run(self.chat())
        return 0

    def _make_dispatcher(self) -> Dispatcher:
        transport = ConsoleTransport(writer=print)
        return Dispatcher(transport, ScoreLedger(self.settings.ledger_path), self.settings)

    async def feed(self, lines: Iterable[str]) -> Dispatcher:
        """Dispatch each chat line in order, letting sessions settle in between."""
        dispatcher = self._make_dispatcher()
        for line in lines:
            await self._dispatch_line(dispatcher, line)
        await dispatcher.shutdown()
        return dispatcher

    async def chat(self) -> None:
        """Dispatch lines from stdin until EOF."""
        dispatcher = self._make_dispatcher()
        loop = asyncio.get_running_loop()
        try:
            while True:
                line = await loop.run_in_executor(None, sys.stdin.readline)
                if not line:
                    break
                await self._dispatch_line(dispatcher, line)
        finally:
            await dispatcher.shutdown()

    async def _dispatch_line(self, dispatcher: Dispatcher, line: str) -> None:
        if not line.strip():
            return
        message = parse_console_line(line, self.settings.channel)
        if message is None:
            debug.warning(f"Ignoring malformed line: {line.strip()!r}", "cli")
            return
        await dispatcher.handle_message(message)
        for _ in range(SETTLE_TICKS):
            await asyncio.sleep(0)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    return SimpleCLI().run(argv)


if __name__ == "__main__":
    sys.exit(main())
