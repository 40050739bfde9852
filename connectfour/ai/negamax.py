"""
negamax.py - Full-width negamax search for Connect Four

This module provides GamePrediction, which picks the best immediate move for a
player by exploring every reachable position up to a fixed number of
half-moves and falling back to the static heuristic beyond that horizon.

There is deliberately no alpha-beta pruning, memoization or move ordering
other than ascending column index: the chosen move, including which of several
equally scored columns wins the tie, depends on this exhaustive traversal.
"""

import threading
import time
from typing import Optional

from connectfour.ai.heuristic import DRAW_SCORE, WIN_SCORE, get_score
from connectfour.debug import debug, DebugLevel
from connectfour.game.board import Board
from connectfour.utils import Player, PlayerConfigurationError, SearchCancelled


class GamePrediction:
    """
    Negamax move prediction for one player against one opponent.

    All search mutations happen on a detached copy of the board passed to
    ``get_next_move``; moves are applied, scored and undone in place on that
    single working copy.
    """

    def __init__(self, max_player: Player, min_player: Player, max_think_depth: int,
                 cancel_event: Optional[threading.Event] = None):
        """
        Initialize the prediction.

        Args:
            max_player: The player to find a move for
            min_player: The opponent
            max_think_depth: Half-moves of look-ahead, at least 1
            cancel_event: Optional event checked at every node; setting it
                aborts the search with SearchCancelled
        """
        if max_think_depth < 1:
            raise PlayerConfigurationError("max_think_depth must be at least 1 half-move")
        self.max_player = max_player
        self.min_player = min_player
        self.max_think_depth = max_think_depth
        self.cancel_event = cancel_event

        self.nodes_evaluated = 0
        self.last_elapsed_seconds = 0.0

    def get_next_move(self, board: Board) -> int:
        """
        Predict the next move according to the maximizing strategy.

        The first playable column always initializes the best move; later
        columns only replace it with a strictly greater score.

        Args:
            board: The current game board (never modified)

        Returns:
            The column index of the best move

        Raises:
            ValueError: if no column accepts another tile
        """
        possible_columns = board.possible_moves()
        if not possible_columns:
            raise ValueError("No possible moves, board is full")

        self.nodes_evaluated = 0
        start = time.perf_counter()

        best_move = None
        best_score = 0
        working_board = board.copy()

        for x in possible_columns:
            y = working_board.move(x, self.max_player)
            self.nodes_evaluated += 1
            score = -self.negamax(working_board, self.min_player, 0)
            working_board.clear_tile(x, y)
            debug.debug(f"{self.max_player.name}: column {x} scores {score}", "search")
            if best_move is None or score > best_score:
                best_move = x
                best_score = score

        self.last_elapsed_seconds = time.perf_counter() - start
        debug.debug(f"{self.max_player.name} picks column {best_move} (score {best_score}, "
                    f"{self.nodes_evaluated} moves analyzed in {self.last_elapsed_seconds:.3f}s)",
                    "search")
        return best_move

    def _opponent_of(self, player: Player) -> Player:
        return self.min_player if player is self.max_player else self.max_player

    def negamax(self, board: Board, player: Player, depth: int) -> int:
        """
        Score ``board`` from the point of view of ``player``, who is to move.

        A decided board is always scored exactly, regardless of the remaining
        depth. The horizon is reached once ``depth`` is strictly greater than
        ``max_think_depth``.

        Args:
            board: Working board; restored to its original state on return
            player: The player to move
            depth: Half-moves already played below the root move

        Returns:
            The best score ``player`` can reach
        """
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise SearchCancelled(f"Search for {self.max_player.name} cancelled")

        state = board.classify()
        if state is not None:
            if state.is_draw:
                return DRAW_SCORE
            return WIN_SCORE if state.player is player else -WIN_SCORE

        if depth > self.max_think_depth:
            return get_score(board, player)

        if debug.is_enabled_for(DebugLevel.TRACE, "search"):
            debug.trace(f"depth {depth}, {player.name} to move:\n{board.render()}", "search")

        opponent = self._opponent_of(player)
        best_score = None
        for x in board.possible_moves():
            y = board.move(x, player)
            self.nodes_evaluated += 1
            score = -self.negamax(board, opponent, depth + 1)
            board.clear_tile(x, y)
            if best_score is None or score > best_score:
                best_score = score

        if best_score is None:
            # only reachable on hand-built boards with floating tiles under a full top row
            return get_score(board, player)
        return best_score
