import contextlib
import io
import random
import unittest
from unittest import mock

from connect4net import config
from connect4net.debug import debug, DebugLevel
from connect4net.interfaces import cli
from connect4net.interfaces.move_sources import ConsoleMoveSource, MoveSource, RandomMoveSource
from connect4net.net.session import COLUMN_ERROR
from connect4net.net.transport import Transport
from connect4net.errors import TransportError
from connect4net.game.board import Board
from connect4net.utils import GameResult, Player

X = Player.ONE
O = Player.TWO


class ScriptedSource(MoveSource):
    def __init__(self, answers):
        self.answers = list(answers)

    def next_move(self, board, player):
        return self.answers.pop(0)


class FakeTransport(Transport):
    def __init__(self, incoming):
        self.incoming = list(incoming)
        self.written = []
        self.shutdown_calls = 0

    def read_byte(self):
        if not self.incoming:
            raise TransportError("Connection closed by fake peer")
        return self.incoming.pop(0)

    def write_byte(self, value):
        self.written.append(value)

    def shutdown(self):
        self.shutdown_calls += 1


def run_main(argv):
    out = io.StringIO()
    with contextlib.redirect_stdout(out):
        code = cli.main(argv)
    return code, out.getvalue()


class TestLocalGame(unittest.TestCase):
    def test_rejected_input_is_asked_again(self):
        messages = []
        sources = {X: ScriptedSource(["1", "1", "1", "1"]),
                   O: ScriptedSource(["2", "abc", "9", "2", "2"])}
        result = cli.play_local_game(sources, display=messages.append)
        self.assertEqual(result, GameResult.PLAYER_ONE_WIN)
        self.assertEqual(messages[0], "Input a column 1-7")
        self.assertEqual(messages.count(COLUMN_ERROR), 2)
        self.assertEqual(messages[-1], "X wins!")

    def test_random_players_finish(self):
        rng = random.Random(3)
        source = RandomMoveSource(rng)
        result = cli.play_local_game({X: source, O: source}, display=lambda m: None)
        self.assertTrue(result.is_game_over())
        self.assertNotEqual(result, GameResult.ABORTED)


class TestMoveSources(unittest.TestCase):
    def test_console_prompt(self):
        prompts = []

        def fake_input(prompt):
            prompts.append(prompt)
            return "4"

        source = ConsoleMoveSource(input_fn=fake_input, announce_player=True)
        self.assertEqual(source.next_move(Board(), O), "4")
        self.assertTrue(prompts[0].startswith("O to play"))

    def test_random_source_answers_one_based(self):
        board = Board()
        for column in range(6):
            for _ in range(6):
                board.place(column, X)
        self.assertEqual(RandomMoveSource().next_move(board, O), "7")


class TestMain(unittest.TestCase):
    def test_generate(self):
        code, output = run_main(["generate", "--count", "2", "--seed", "5"])
        self.assertEqual(code, config.EXIT_OK)
        self.assertEqual(output.count("Winner: "), 2)
        self.assertEqual(output.count("Moves (piece, column): "), 2)

    def test_generate_is_reproducible(self):
        _, first = run_main(["generate", "--seed", "9"])
        _, second = run_main(["generate", "--seed", "9"])
        self.assertEqual(first, second)

    def test_bad_address_is_a_usage_error(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["address", "localhost:notaport"])
        self.assertEqual(ctx.exception.code, 2)

    def test_desynchronized_peer(self):
        transport = FakeTransport([9])
        with mock.patch("connect4net.net.server.connect", return_value=transport) as connect:
            code, output = run_main(["address", "127.0.0.1:54321"])
        connect.assert_called_once_with("127.0.0.1:54321")
        self.assertEqual(code, config.EXIT_DESYNC)
        self.assertIn("out of sync", output)
        self.assertEqual(transport.written, [])
        self.assertEqual(transport.shutdown_calls, 1)

    def test_connection_lost(self):
        transport = FakeTransport([])
        with mock.patch("connect4net.net.server.connect", return_value=transport):
            code, output = run_main(["address", "127.0.0.1:54321"])
        self.assertEqual(code, config.EXIT_ERROR)
        self.assertIn("Connection error", output)

    def test_missing_model(self):
        code, output = run_main(["bot", "--model", "no/such/model.pt"])
        self.assertEqual(code, config.EXIT_ERROR)
        self.assertIn("train", output)

    def test_interrupted(self):
        def interrupted(args):
            raise KeyboardInterrupt

        with mock.patch.dict(cli.HANDLERS, {'generate': interrupted}):
            code, _ = run_main(["generate"])
        self.assertEqual(code, config.EXIT_INTERRUPTED)

    def test_debug_level_flag(self):
        try:
            code, _ = run_main(["--debug_level", "error", "generate", "--seed", "1"])
            self.assertEqual(code, config.EXIT_OK)
            self.assertEqual(debug.level, DebugLevel.ERROR)
        finally:
            debug.configure(level=DebugLevel.WARNING)

    def test_default_command_is_a_local_game(self):
        parser = cli.build_parser()
        args = parser.parse_args([])
        self.assertIsNone(args.command)
        self.assertIs(cli.HANDLERS[args.command], cli.handle_local)


if __name__ == '__main__':
    unittest.main()
