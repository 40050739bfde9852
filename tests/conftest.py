"""Shared fixtures for the Connect Four test suite."""

import pytest

from connectfour.debug import debug, DebugLevel
from connectfour.game.board import Board
from connectfour.utils import Player


@pytest.fixture(autouse=True)
def quiet_logging():
    debug.configure(level=DebugLevel.WARNING)
    yield


@pytest.fixture
def player1():
    return Player("1", is_computer=True, max_think_depth=2)


@pytest.fixture
def player2():
    return Player("2", is_computer=True, max_think_depth=2)


@pytest.fixture
def make_board(player1, player2):
    """Build a board from rows of '.', '1' and '2' (top row first)."""
    def _make(text):
        return Board.from_string(text, [player1, player2])
    return _make
