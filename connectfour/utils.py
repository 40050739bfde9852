"""
utils.py - Constants, player configuration and result types for Connect Four

This module provides the common constants, exception types and small value
classes used throughout the board, search and game layers.
"""

import itertools
from typing import Optional

# Game constants
CONNECT_N = 4  # Number of tiles in a row to win
MIN_BOARD_SIZE = 4
DEFAULT_WIDTH = 5
DEFAULT_HEIGHT = 5
DEFAULT_THINK_DEPTH = 7
DEFAULT_ALGORITHM = "negamax"

EMPTY_TILE = "."


class BoardConfigurationError(ValueError):
    """Raised when a board is created with invalid dimensions or from malformed text."""


class PlayerConfigurationError(ValueError):
    """Raised for invalid player settings (blank name, think depth < 1, unknown algorithm)."""


class TileOccupiedError(RuntimeError):
    """Raised when a tile is set on a cell that already has an owner.

    This always indicates a logic bug in the caller and is never recovered from.
    """


class SearchCancelled(RuntimeError):
    """Raised by the search engine when its cancel event has been set."""


_player_ids = itertools.count()


class Player:
    """
    A game player.

    Players are compared by identity, never by name, so two players may share
    a display name without being conflated by the search or scoring logic.

    The ``total_moves_analyzed`` and ``total_move_time_seconds`` counters are
    updated by the strategy layer after every computer move and are only used
    to report the average search speed.
    """

    def __init__(self, name: str, is_computer: bool = False,
                 max_think_depth: int = DEFAULT_THINK_DEPTH,
                 algorithm: str = DEFAULT_ALGORITHM):
        self.id = next(_player_ids)
        self.name = name
        self.is_computer = is_computer
        self.max_think_depth = max_think_depth
        self.algorithm = algorithm

        self.total_moves_analyzed = 0
        self.total_move_time_seconds = 0.0

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str):
        if not value or not value.strip():
            raise PlayerConfigurationError("name must not be blank")
        self._name = value

    @property
    def max_think_depth(self) -> int:
        """(computer players only) Maximum depth to look ahead, in half-moves."""
        return self._max_think_depth

    @max_think_depth.setter
    def max_think_depth(self, value: int):
        if value < 1:
            raise PlayerConfigurationError("max_think_depth must be at least 1 half-move")
        self._max_think_depth = value

    @property
    def algorithm(self) -> str:
        """(computer players only) Name of the move strategy to use."""
        return self._algorithm

    @algorithm.setter
    def algorithm(self, value: str):
        if not value or not value.strip():
            raise PlayerConfigurationError("algorithm must not be blank")
        self._algorithm = value

    @property
    def symbol(self) -> str:
        """Character used for this player's tiles in the text rendering."""
        return self._name[0]

    def record_move_stats(self, moves_analyzed: int, seconds: float):
        self.total_moves_analyzed += moves_analyzed
        self.total_move_time_seconds += seconds

    def moves_per_second(self) -> float:
        if self.total_move_time_seconds <= 0:
            return 0.0
        return self.total_moves_analyzed / self.total_move_time_seconds

    def __repr__(self) -> str:
        kind = "computer" if self.is_computer else "human"
        return f"Player({self._name!r}, {kind}, id={self.id})"

    def __str__(self) -> str:
        return self._name


class WinningCondition:
    """
    State at the end of a game: either a draw or a win for exactly one player.

    An ongoing game has no winning condition at all; ``Board.classify()``
    returns ``None`` in that case.
    """

    __slots__ = ("_player", "is_draw")

    def __init__(self, player: Optional[Player], is_draw: bool):
        self._player = player
        self.is_draw = is_draw

    @classmethod
    def draw(cls) -> "WinningCondition":
        return cls(None, True)

    @classmethod
    def win(cls, player: Player) -> "WinningCondition":
        return cls(player, False)

    @property
    def player(self) -> Player:
        """
        The player that won the game.

        Raises:
            ValueError: if the game ended in a draw
        """
        if self.is_draw:
            raise ValueError("Must not be called for a draw")
        return self._player

    def is_win_for(self, player: Player) -> bool:
        return not self.is_draw and self._player is player

    def __eq__(self, other) -> bool:
        if not isinstance(other, WinningCondition):
            return NotImplemented
        return self.is_draw == other.is_draw and self._player is other._player

    def __hash__(self) -> int:
        return hash((self.is_draw, id(self._player)))

    def __repr__(self) -> str:
        return "WinningCondition.draw()" if self.is_draw else f"WinningCondition.win({self._player!r})"

    def __str__(self) -> str:
        return "DRAW" if self.is_draw else f"{self._player.name} won"
