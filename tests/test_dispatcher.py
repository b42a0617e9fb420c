"""Tests for connect4bot/interfaces/dispatcher.py and the console CLI"""

import asyncio
import logging
import threading

from connect4bot.config import Settings
from connect4bot.data.score_ledger import ScoreLedger
from connect4bot.game.board import Board
from connect4bot.game.session import DECLINED_REPLY, victory_message
from connect4bot.interfaces.cli import SimpleCLI
from connect4bot.interfaces.dispatcher import NO_OPPONENT_REPLY, Dispatcher
from connect4bot.transport.console import ConsoleTransport
from connect4bot.transport.messages import TransportError
from connect4bot.transport.standby import Standby
from tests.conftest import CHANNEL, msg, settle

VERTICAL_WIN = [("alice", "3"), ("bob", "1")] * 3 + [("alice", "3")]


def make_dispatcher(ledger, settings=None):
    return Dispatcher(ConsoleTransport(), ledger, settings)


async def say(dispatcher, author, content, channel=CHANNEL, mentions=()):
    await dispatcher.handle_message(msg(author, content, channel, mentions))
    await settle()


def test_start_without_mention_is_refused(ledger):
    async def scenario():
        dispatcher = make_dispatcher(ledger)
        await say(dispatcher, "alice", "Hamis Start")
        assert dispatcher.running_games == 0
        return dispatcher.transport.transcript(CHANNEL)

    assert asyncio.run(scenario()) == [NO_OPPONENT_REPLY]


def test_score_command_registers_player(ledger):
    async def scenario():
        dispatcher = make_dispatcher(ledger)
        await say(dispatcher, "alice", "hamis score please")
        return dispatcher.transport.transcript(CHANNEL)

    assert asyncio.run(scenario()) == ["0"]
    assert ledger.all_scores() == {"alice": 0}


def test_full_game_credits_winner(ledger):
    async def scenario():
        dispatcher = make_dispatcher(ledger)
        await say(dispatcher, "alice", "hamis start @bob", mentions=("bob",))
        assert dispatcher.running_games == 1

        await say(dispatcher, "bob", "accept")
        for author, content in VERTICAL_WIN:
            await say(dispatcher, author, content)

        await dispatcher.wait_idle()
        return dispatcher

    dispatcher = asyncio.run(scenario())
    transcript = dispatcher.transport.transcript(CHANNEL)

    assert dispatcher.running_games == 0
    assert len(transcript) == 9
    assert transcript[-1] == victory_message("alice")
    assert ledger.get_score("alice") == 1
    assert ledger.get_score("bob") == 0


def test_concurrent_games_in_separate_channels(ledger):
    async def scenario():
        dispatcher = make_dispatcher(ledger)
        await say(dispatcher, "alice", "hamis start @bob", channel="one", mentions=("bob",))
        await say(dispatcher, "carol", "hamis start @dave", channel="two", mentions=("dave",))
        assert dispatcher.running_games == 2

        await say(dispatcher, "bob", "accept", channel="one")
        await say(dispatcher, "dave", "accept", channel="two")
        await say(dispatcher, "alice", "4", channel="one")
        await say(dispatcher, "carol", "7", channel="two")

        one = dispatcher.transport.transcript("one")
        two = dispatcher.transport.transcript("two")
        await dispatcher.shutdown()
        return one, two

    one, two = asyncio.run(scenario())
    assert len(one) == len(two) == 2
    assert one[1] != two[1]


def test_shutdown_declines_pending_invitation(ledger):
    async def scenario():
        dispatcher = make_dispatcher(ledger)
        await say(dispatcher, "alice", "hamis start @bob", mentions=("bob",))
        dispatcher.transport.standby.cancel(CHANNEL)
        await settle()
        transcript = dispatcher.transport.transcript(CHANNEL)
        await dispatcher.shutdown()
        return dispatcher, transcript

    dispatcher, transcript = asyncio.run(scenario())
    assert transcript == [DECLINED_REPLY]
    assert dispatcher.running_games == 0
    assert ledger.all_scores() == {}


def test_custom_trigger(ledger):
    async def scenario():
        dispatcher = make_dispatcher(ledger, Settings(trigger="c4"))
        await say(dispatcher, "alice", "hamis start")
        await say(dispatcher, "alice", "c4 start")
        return dispatcher.transport.transcript(CHANNEL)

    assert asyncio.run(scenario()) == [NO_OPPONENT_REPLY]


def test_cli_feeds_script_lines(settings, capsys):
    lines = ["alice: hamis start @bob", "bob: I accept", ""]
    lines += [f"{author}: {content}" for author, content in VERTICAL_WIN]
    lines += ["this line is not chat"]

    dispatcher = asyncio.run(SimpleCLI(settings).feed(lines))

    transcript = dispatcher.transport.transcript("general")
    assert transcript[-1] == victory_message("alice")
    assert ScoreLedger(settings.ledger_path).get_score("alice") == 1
    assert "decisive victory for <@alice>" in capsys.readouterr().out


def test_settings_from_env():
    settings = Settings.from_env({"CONNECT4BOT_DATA": "/tmp/x.json", "CONNECT4BOT_TRIGGER": "Bot"})
    assert settings.ledger_path == "/tmp/x.json"
    assert settings.start_command == "bot start"
    assert settings.score_command == "bot score"


def test_self_challenge_is_refused(ledger):
    async def scenario():
        dispatcher = make_dispatcher(ledger)
        await say(dispatcher, "alice", "hamis start @alice", mentions=("alice",))
        assert dispatcher.running_games == 0
        await say(dispatcher, "alice", "accept")
        return dispatcher.transport.transcript(CHANNEL)

    assert asyncio.run(scenario()) == [NO_OPPONENT_REPLY]


def test_self_mention_skipped_for_next_opponent(ledger):
    async def scenario():
        dispatcher = make_dispatcher(ledger)
        await say(dispatcher, "alice", "hamis start @alice @bob", mentions=("alice", "bob"))
        await say(dispatcher, "bob", "accept")
        transcript = dispatcher.transport.transcript(CHANNEL)
        await dispatcher.shutdown()
        return transcript

    transcript = asyncio.run(scenario())
    assert transcript == [Board("alice", "bob").render()]


def test_ledger_calls_run_off_the_event_loop(ledger, monkeypatch):
    threads = []
    get_score = ledger.get_score

    def recording_get_score(user_id):
        threads.append(threading.get_ident())
        return get_score(user_id)

    monkeypatch.setattr(ledger, "get_score", recording_get_score)

    async def scenario():
        dispatcher = make_dispatcher(ledger)
        await say(dispatcher, "alice", "hamis score")
        return threading.get_ident(), dispatcher.transport.transcript(CHANNEL)

    loop_thread, transcript = asyncio.run(scenario())
    assert transcript == ["0"]
    assert threads and threads[0] != loop_thread


class RecordingGateway:
    """Gateway built from a bare Standby, with sends that can be made to fail."""

    def __init__(self, fail_sends=False):
        self.standby = Standby()
        self.fail_sends = fail_sends
        self.sent = []

    async def wait_for_message(self, channel, predicate):
        return await self.standby.wait_for_message(channel, predicate)

    async def send(self, channel, text):
        if self.fail_sends:
            raise TransportError("channel gone")
        self.sent.append((channel, text))

    def deliver(self, message):
        return self.standby.process(message)

    def close(self):
        self.standby.close()


def test_dispatcher_runs_on_any_gateway(ledger):
    async def scenario():
        gateway = RecordingGateway()
        dispatcher = Dispatcher(gateway, ledger)
        await dispatcher.handle_message(msg("alice", "hamis start @bob", mentions=("bob",)))
        await settle()
        await dispatcher.handle_message(msg("bob", "accept"))
        await settle()
        await dispatcher.shutdown()
        return gateway.sent

    assert asyncio.run(scenario()) == [(CHANNEL, Board("alice", "bob").render())]


def test_aborted_game_logs_traceback(ledger, caplog):
    caplog.set_level(logging.ERROR, logger="connect4bot")

    async def scenario():
        dispatcher = Dispatcher(RecordingGateway(fail_sends=True), ledger)
        await dispatcher.handle_message(msg("alice", "hamis start @bob", mentions=("bob",)))
        await settle()
        await dispatcher.handle_message(msg("bob", "accept"))
        await dispatcher.wait_idle()
        return dispatcher

    dispatcher = asyncio.run(scenario())
    assert dispatcher.running_games == 0
    aborted = [r for r in caplog.records if "Game aborted" in r.getMessage()]
    assert len(aborted) == 1
    assert isinstance(aborted[0].exc_info[1], TransportError)
