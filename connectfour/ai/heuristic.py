"""
heuristic.py - Static position evaluation used at the search horizon

The score only rewards the given player's own potential lines: runs of own
and empty tiles are accumulated per scan line and committed to the total once
they contain at least two own tiles. Opponent lines are never penalized, which
makes the score asymmetric between the two players.
"""

from typing import Optional

from connectfour.game.board import Board, scan_lines
from connectfour.utils import CONNECT_N, Player

PLAYER_TILE_SCORE = 10
FREE_TILE_SCORE = 5
WIN_SCORE = 1000000
DRAW_SCORE = 50000


class _SegmentCounter:
    """Running accumulator shared by all scan lines of one evaluation."""

    __slots__ = ("player", "count", "current_score", "total_score")

    def __init__(self, player: Player):
        self.player = player
        self.count = 0
        self.current_score = 0
        self.total_score = 0

    def _commit(self):
        if self.count >= 2:
            self.total_score += self.current_score

    def reset(self, first_tile: Optional[Player]):
        """Start a new segment (new line, or after an empty tile)."""
        self._commit()
        self.count = 0
        self.current_score = 0
        self._add_tile(first_tile)

    def _add_tile(self, tile: Optional[Player]):
        if tile is None:
            if self.count == 0:
                self.current_score = FREE_TILE_SCORE
            else:
                self.current_score += FREE_TILE_SCORE
        elif tile is self.player:
            self.count += 1
            self.current_score += PLAYER_TILE_SCORE
        else:
            # enemy tile breaks the segment
            self._commit()
            self.count = 0
            self.current_score = 0

    def has_won(self, tile: Optional[Player]) -> bool:
        self._add_tile(tile)
        if self.count >= CONNECT_N:
            self.total_score = WIN_SCORE
            return True
        if tile is None:
            self.reset(None)
        return False


def get_score(board: Board, player: Player) -> int:
    """
    Score ``board`` from ``player``'s point of view.

    Returns WIN_SCORE as soon as four own tiles in a row are found, DRAW_SCORE
    for a full board without such a line and the sum of all committed
    segments otherwise.
    """
    counter = _SegmentCounter(player)
    grid = board.rows()

    for line in scan_lines(board.width, board.height):
        x, y = line[0]
        counter.reset(grid[y][x])
        for x, y in line[1:]:
            if counter.has_won(grid[y][x]):
                return counter.total_score

    if board.is_full():
        return DRAW_SCORE

    # neither a win nor a draw, fold in the last open segment
    counter.reset(None)
    return counter.total_score
