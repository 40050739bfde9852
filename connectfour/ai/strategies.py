"""
strategies.py - Move strategies for computer players

A strategy turns a game state into the column the current player wants to
play. Strategies are selected by name through the STRATEGIES registry, which
is what Player.algorithm refers to.
"""

import random
from typing import Callable, Dict, Optional, TYPE_CHECKING

from connectfour.ai.negamax import GamePrediction
from connectfour.debug import debug
from connectfour.utils import PlayerConfigurationError

if TYPE_CHECKING:
    from connectfour.game.rules import GameState


class Strategy:
    """Base class for computer move strategies."""

    name = "base"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def choose_move(self, state: "GameState") -> int:
        """
        Pick a column for the state's current player.

        Args:
            state: Current game state; must not be over

        Returns:
            Column index where the current player's tile should go
        """
        raise NotImplementedError


class RandomStrategy(Strategy):
    """Plays a random column that still has space."""

    name = "random"

    def choose_move(self, state: "GameState") -> int:
        possible_moves = state.board.possible_moves()
        if not possible_moves:
            raise ValueError("No possible moves, board is full")
        column = self.rng.choice(possible_moves)
        debug.debug(f"{state.current_player().name} plays random column {column}", "strategy")
        return column


class NegamaxStrategy(Strategy):
    """
    Plays the move chosen by a full-width negamax search.

    The first move of a game (empty board) is random. Search statistics are
    added to the current player's running totals.
    """

    name = "negamax"

    def __init__(self, rng: Optional[random.Random] = None, cancel_event=None):
        super().__init__(rng)
        self.cancel_event = cancel_event
        self.last_prediction: Optional[GamePrediction] = None

    def choose_move(self, state: "GameState") -> int:
        board = state.board
        if board.is_empty():
            column = self.rng.randrange(board.width)
            debug.debug(f"Empty board, opening with random column {column}", "strategy")
            return column

        current = state.current_player()
        prediction = GamePrediction(current, state.next_player(), current.max_think_depth,
                                    cancel_event=self.cancel_event)
        column = prediction.get_next_move(board)

        current.record_move_stats(prediction.nodes_evaluated, prediction.last_elapsed_seconds)
        self.last_prediction = prediction
        return column


STRATEGIES: Dict[str, Callable[..., Strategy]] = {
    RandomStrategy.name: RandomStrategy,
    NegamaxStrategy.name: NegamaxStrategy,
}


def create_strategy(name: str, rng: Optional[random.Random] = None) -> Strategy:
    """
    Create the strategy registered under ``name``.

    Raises:
        PlayerConfigurationError: if no strategy has that name
    """
    try:
        factory = STRATEGIES[name]
    except KeyError:
        raise PlayerConfigurationError(
            f"Unknown algorithm '{name}', expected one of {sorted(STRATEGIES)}") from None
    return factory(rng=rng)
