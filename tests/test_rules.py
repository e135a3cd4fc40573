import random
import unittest

import numpy as np

from connect4net import config
from connect4net.errors import InvalidColumnError
from connect4net.game.board import Board
from connect4net.game.rules import ConnectFourEnv, ConnectFourGame
from connect4net.interfaces.move_sources import RandomMoveSource
from connect4net.utils import WIDTH, HEIGHT, GameResult, Player

X = Player.ONE
O = Player.TWO


class TestConnectFourGame(unittest.TestCase):
    def test_players_alternate_from_player_one(self):
        game = ConnectFourGame()
        self.assertEqual(game.current_player, X)
        game.play(3)
        self.assertEqual(game.current_player, O)
        game.play(3)
        self.assertEqual(game.current_player, X)
        self.assertEqual(game.moves, [(X, 3), (O, 3)])

    def test_rejected_move_keeps_the_turn(self):
        game = ConnectFourGame()
        with self.assertRaises(InvalidColumnError):
            game.play(WIDTH)
        self.assertEqual(game.current_player, X)
        self.assertEqual(game.moves, [])

    def test_win_ends_the_game(self):
        game = ConnectFourGame()
        for column in [0, 6, 1, 6, 2, 6]:
            game.play(column)
        self.assertEqual(game.play(3), GameResult.PLAYER_ONE_WIN)
        self.assertTrue(game.is_game_over())
        self.assertEqual(game.get_winner(), X)
        self.assertEqual(game.current_player, X)
        with self.assertRaises(RuntimeError):
            game.play(5)

    def test_generated_games_are_consistent(self):
        rng = random.Random(1234)
        for _ in range(25):
            game = ConnectFourGame.generate(rng)
            self.assertTrue(game.is_game_over())

            replay = Board()
            for i, (player, column) in enumerate(game.moves):
                self.assertEqual(player, X if i % 2 == 0 else O)
                replay.place(column, player)
            self.assertTrue(np.array_equal(replay.grid, game.board.grid))
            self.assertEqual(replay.result(), game.result)

            # The game stops at the first winning move
            if game.result.winner is not None:
                self.assertEqual(game.moves[-1][0], game.result.winner)

    def test_generate_is_reproducible(self):
        first = ConnectFourGame.generate(random.Random(7))
        second = ConnectFourGame.generate(random.Random(7))
        self.assertEqual(first.moves, second.moves)

    def test_generate_plays_through_the_random_move_source(self):
        game = ConnectFourGame.generate(random.Random(21))

        source = RandomMoveSource(random.Random(21))
        replay = ConnectFourGame()
        while not replay.is_game_over():
            replay.play(int(source.next_move(replay.board, replay.current_player)) - 1)
        self.assertEqual(game.moves, replay.moves)
        self.assertEqual(game.result, replay.result)

    def test_summary(self):
        game = ConnectFourGame()
        for column in [0, 6, 0, 6, 0, 6, 0]:
            game.play(column)
        lines = game.summary().splitlines()
        self.assertEqual(lines[-3], "Winner: X")
        self.assertEqual(lines[-2], "Moves made: 7")
        self.assertEqual(lines[-1],
                         "Moves (piece, column): [(1, 0), (2, 6), (1, 0), (2, 6), (1, 0), (2, 6), (1, 0)]")


class ScriptedOpponentEnv(ConnectFourEnv):
    """Environment whose opponent plays a fixed list of columns."""

    def __init__(self, columns):
        super().__init__()
        self.columns = list(columns)

    def _play_random_move(self):
        self.board.place(self.columns.pop(0), Player.ONE)


class TestConnectFourEnv(unittest.TestCase):
    def test_reset_opens_with_one_opponent_piece(self):
        env = ConnectFourEnv()
        observation, info = env.reset(seed=3)
        self.assertEqual(observation.shape, (WIDTH * HEIGHT,))
        self.assertEqual(observation.dtype, np.float32)
        self.assertEqual(observation.sum(), 1.0)
        self.assertEqual(info['moves_made'], 1)
        self.assertTrue(env.observation_space.contains(observation))

    def test_valid_move_costs_one_and_gets_an_answer(self):
        env = ConnectFourEnv()
        env.reset(seed=0)
        _, reward, terminated, truncated, info = env.step(3)
        self.assertEqual(reward, config.REWARD_STEP)
        self.assertFalse(terminated)
        self.assertFalse(truncated)
        self.assertEqual(info['moves_made'], 3)

    def test_invalid_move_is_penalised_and_ignored(self):
        env = ScriptedOpponentEnv([6])
        env.reset()
        for player in (X, X, O, O, X, X):
            env.board.place(0, player)
        before = env.board.grid.copy()
        _, reward, terminated, _, info = env.step(0)
        self.assertEqual(reward, config.REWARD_INVALID_MOVE)
        self.assertTrue(info['invalid_move'])
        self.assertFalse(terminated)
        self.assertTrue(np.array_equal(env.board.grid, before))

    def test_winning_move(self):
        env = ScriptedOpponentEnv([0, 0, 0, 1])
        env.reset()
        for column in (6, 6, 6):
            _, reward, terminated, _, _ = env.step(column)
            self.assertEqual(reward, config.REWARD_STEP)
            self.assertFalse(terminated)
        _, reward, terminated, _, info = env.step(6)
        self.assertEqual(reward, config.REWARD_STEP + config.REWARD_WIN)
        self.assertTrue(terminated)
        self.assertEqual(info['result'], GameResult.PLAYER_TWO_WIN.name)

    def test_losing_move(self):
        env = ScriptedOpponentEnv([0, 0, 0, 0])
        env.reset()
        for column in (6, 6):
            env.step(column)
        _, reward, terminated, _, info = env.step(5)
        self.assertEqual(reward, config.REWARD_STEP + config.REWARD_LOSE)
        self.assertTrue(terminated)
        self.assertEqual(info['result'], GameResult.PLAYER_ONE_WIN.name)

    def test_ascii_render(self):
        env = ConnectFourEnv(render_mode="ascii")
        env.reset(seed=1)
        self.assertEqual(len(env.render().splitlines()), HEIGHT + 1)


if __name__ == '__main__':
    unittest.main()
