"""Tests for computer move strategies and the strategy registry."""

import random

import pytest

from connectfour.ai.strategies import (STRATEGIES, NegamaxStrategy, RandomStrategy,
                                       create_strategy)
from connectfour.game.board import Board
from connectfour.game.rules import GameState
from connectfour.utils import PlayerConfigurationError


@pytest.fixture
def state(player1, player2):
    game = GameState(Board(5, 5), player1, player2)
    game.start_new_game(first_player=player1)
    return game


class TestRegistry:
    def test_known_strategies(self):
        assert set(STRATEGIES) == {"random", "negamax"}
        assert isinstance(create_strategy("random"), RandomStrategy)
        assert isinstance(create_strategy("negamax"), NegamaxStrategy)

    def test_unknown_strategy(self):
        with pytest.raises(PlayerConfigurationError):
            create_strategy("com.example.SmartPlayer")


class TestRandomStrategy:
    def test_only_picks_columns_with_space(self, state, player1, player2):
        for _ in range(5):
            state.board.move(0, player1)
            state.board.move(4, player2)
        strategy = RandomStrategy(rng=random.Random(7))
        moves = {strategy.choose_move(state) for _ in range(50)}
        assert moves <= {1, 2, 3}

    def test_full_board(self, make_board, player1, player2):
        game = GameState(make_board("12121\n21212\n11211\n21112"), player1, player2)
        with pytest.raises(ValueError):
            RandomStrategy().choose_move(game)


class TestNegamaxStrategy:
    def test_opening_move_is_random_column(self, state):
        strategy = NegamaxStrategy(rng=random.Random(3))
        columns = {strategy.choose_move(state) for _ in range(30)}
        assert columns <= set(range(5))
        assert strategy.last_prediction is None

    def test_uses_current_player_depth_and_records_stats(self, state, player1, player2):
        state.board.move(2, player2)
        strategy = NegamaxStrategy(rng=random.Random(3))
        column = strategy.choose_move(state)

        assert 0 <= column < 5
        prediction = strategy.last_prediction
        assert prediction.max_player is player1
        assert prediction.min_player is player2
        assert prediction.max_think_depth == player1.max_think_depth
        assert player1.total_moves_analyzed == prediction.nodes_evaluated > 0
        assert player1.total_move_time_seconds == prediction.last_elapsed_seconds
        assert player2.total_moves_analyzed == 0

    def test_takes_winning_move(self, state, player1, player2):
        for column in (1, 2, 3):
            state.board.move(column, player1)
            state.board.move(column, player2)
        assert NegamaxStrategy().choose_move(state) == 0
