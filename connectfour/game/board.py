"""
board.py - Board representation and win/draw classification for Connect Four

This module implements the Board class. A board is a rectangular grid where each
tile is owned by at most one player, addressed with cartesian coordinates:
the top-left corner is (0, 0) and the bottom-right corner is (width-1, height-1).
Tiles obey gravity when placed through ``move``; ``set`` and ``clear_tile`` are
the low-level operations the search engine uses to undo speculative moves.
"""

from functools import lru_cache
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from connectfour.debug import debug
from connectfour.utils import (CONNECT_N, EMPTY_TILE, MIN_BOARD_SIZE, BoardConfigurationError,
                               Player, TileOccupiedError, WinningCondition)

Coord = Tuple[int, int]  # (x, y)


@lru_cache(maxsize=32)
def scan_lines(width: int, height: int) -> Tuple[Tuple[Coord, ...], ...]:
    """
    Return every line that classification and scoring walk, in scan order.

    Order: rows (left to right), columns (top to bottom), down-right diagonals
    anchored on the left column then on the top row, and down-left diagonals
    anchored on the right column then on the top row (right to left).
    Short diagonals in the corners are included; they can never hold a
    four-in-a-row but still take part in heuristic accumulation.
    """
    lines: List[Tuple[Coord, ...]] = []

    for y in range(height):
        lines.append(tuple((x, y) for x in range(width)))

    for x in range(width):
        lines.append(tuple((x, y) for y in range(height)))

    # diagonals right-down
    for y in range(height):
        lines.append(tuple((i, y + i) for i in range(min(width, height - y))))
    for x in range(1, width):
        lines.append(tuple((x + i, i) for i in range(min(width - x, height))))

    # diagonals left-down
    for y in range(height):
        lines.append(tuple((width - 1 - i, y + i) for i in range(min(width, height - y))))
    for x in range(width - 2, -1, -1):
        lines.append(tuple((x - i, i) for i in range(min(x + 1, height))))

    return tuple(lines)


class Board:
    """
    Represents a Connect Four game board.

    The grid is a numpy object array indexed ``[y, x]`` holding either a
    ``Player`` or ``None``. Copies are fully detached so the search engine can
    mutate them freely without touching the authoritative game board.
    """

    def __init__(self, width: int, height: int):
        """
        Create a new, empty board.

        Args:
            width: Width in tiles, must be at least 4
            height: Height in tiles, must be at least 4

        Raises:
            BoardConfigurationError: if either dimension is smaller than 4
        """
        if width < MIN_BOARD_SIZE or height < MIN_BOARD_SIZE:
            raise BoardConfigurationError(
                f"Board must be at least {MIN_BOARD_SIZE}x{MIN_BOARD_SIZE} tiles big "
                f"(was: {width}x{height})")
        self._width = width
        self._height = height
        self._grid = np.full((height, width), None, dtype=object)
        self._tile_count = 0
        debug.debug(f"Initializing new {width}x{height} Board", "board")

    @classmethod
    def from_string(cls, text: str, players: Sequence[Player]) -> "Board":
        """
        Build a board from its textual layout.

        Each line is one row, top row first. ``.`` is an empty tile and the digit
        ``n`` is a tile owned by ``players[n-1]``. Rows may be separated by
        newlines or ``/``.

        Raises:
            BoardConfigurationError: for ragged rows, boards smaller than 4x4
                or unsupported characters
        """
        lines = [line.strip() for line in text.strip().replace("/", "\n").splitlines()]
        widths = {len(line) for line in lines}
        if len(widths) != 1:
            raise BoardConfigurationError("Input string contains lines with differing widths")
        width = widths.pop()
        if len(lines) < MIN_BOARD_SIZE or width < MIN_BOARD_SIZE:
            raise BoardConfigurationError(
                f"Board needs to be at least {MIN_BOARD_SIZE}x{MIN_BOARD_SIZE} tiles big "
                f"(was: {width}x{len(lines)})")

        board = cls(width, len(lines))
        for y, row in enumerate(lines):
            for x, c in enumerate(row):
                if c == EMPTY_TILE:
                    continue
                if not c.isdigit() or not 1 <= int(c) <= len(players):
                    raise BoardConfigurationError(f"Unsupported character in board: '{c}'")
                board.set(x, y, players[int(c) - 1])
        return board

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def tile_count(self) -> int:
        """Number of occupied tiles."""
        return self._tile_count

    def copy(self) -> "Board":
        """
        Create an independent copy of this board.

        Returns:
            A new Board with the same dimensions, tiles and tile count
        """
        debug.trace("Creating board copy", "board")
        new_board = Board.__new__(Board)
        new_board._width = self._width
        new_board._height = self._height
        new_board._grid = self._grid.copy()
        new_board._tile_count = self._tile_count
        return new_board

    def clear(self):
        """Remove all tiles from the board."""
        debug.debug("Clearing board", "board")
        self._grid.fill(None)
        self._tile_count = 0

    def _check_tile(self, x: int, y: int):
        # numpy would wrap negative indices around to the far edge
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise ValueError(f"({x},{y}) is outside the {self._width}x{self._height} board")

    def get(self, x: int, y: int) -> Optional[Player]:
        """
        Returns the owner of the tile at (x, y), or None if the tile is empty.
        """
        self._check_tile(x, y)
        return self._grid[y, x]

    def set(self, x: int, y: int, player: Player):
        """
        Put a tile owned by ``player`` at (x, y).

        Raises:
            TileOccupiedError: if there already is a tile at the given location
        """
        if player is None:
            raise ValueError("player must not be None")
        self._check_tile(x, y)
        current = self._grid[y, x]
        if current is not None:
            raise TileOccupiedError(f"({x},{y}) is already set to {current}")
        self._grid[y, x] = player
        self._tile_count += 1

    def clear_tile(self, x: int, y: int):
        """
        Remove the tile at (x, y).

        Nothing happens if there is no tile at the given location.
        """
        self._check_tile(x, y)
        if self._grid[y, x] is not None:
            self._grid[y, x] = None
            self._tile_count -= 1

    def has_space_in_column(self, x: int) -> bool:
        """Returns True if at least one more tile fits into column x."""
        self._check_tile(x, 0)
        return self._grid[0, x] is None

    def possible_moves(self) -> List[int]:
        """Columns that still accept a tile, in ascending order."""
        top_row = self._grid[0]
        return [x for x in range(self._width) if top_row[x] is None]

    def move(self, column: int, player: Player) -> Optional[int]:
        """
        Drop a tile owned by ``player`` into ``column``.

        Args:
            column: Column to insert into (first column has index 0)
            player: Owner of the new tile

        Returns:
            The row the tile landed in (top row is 0), or None if the column is full
        """
        if not 0 <= column < self._width:
            raise ValueError(f"Column {column} out of range 0..{self._width - 1}")
        for y in range(self._height - 1, -1, -1):
            if self._grid[y, column] is None:
                self.set(column, y, player)
                return y
        return None

    def is_full(self) -> bool:
        return self._tile_count == self._width * self._height

    def is_empty(self) -> bool:
        return self._tile_count == 0

    def tiles(self) -> Iterator[Optional[Player]]:
        """Iterate over all tiles row by row, starting at the top-left corner."""
        return iter(self._grid.ravel().tolist())

    def rows(self) -> List[List[Optional[Player]]]:
        """Snapshot of the grid as nested lists, indexed ``[y][x]``."""
        return self._grid.tolist()

    def encode(self, players: Sequence[Player]) -> np.ndarray:
        """
        Encode the board as an int8 array: 0 for empty, ``i+1`` for ``players[i]``.
        """
        codes = np.zeros((self._height, self._width), dtype=np.int8)
        for index, player in enumerate(players, start=1):
            codes[self._grid == player] = index
        return codes

    def classify(self) -> Optional[WinningCondition]:
        """
        Returns the board state in terms of draw/win/loss.

        Lines are scanned in the order given by ``scan_lines``; the first
        four-in-a-row found wins, later ones are never reported.

        Returns:
            A WinningCondition for a draw or a win, None if the game is still ongoing
        """
        grid = self._grid.tolist()
        for line in scan_lines(self._width, self._height):
            x, y = line[0]
            owner = grid[y][x]
            count = 0 if owner is None else 1
            for x, y in line[1:]:
                tile = grid[y][x]
                if tile is None:
                    owner = None
                    count = 0
                elif owner is None or owner is not tile:
                    owner = tile
                    count = 1
                else:
                    count += 1
                    if count == CONNECT_N:
                        return WinningCondition.win(owner)

        if self.is_full():
            return WinningCondition.draw()
        return None

    def is_game_over(self) -> bool:
        """Returns whether the game is over (either because of a draw or win/loss)."""
        return self.classify() is not None

    def render(self) -> str:
        """
        Render the board as text, one newline-terminated line per row.

        Empty tiles are shown as '.', occupied tiles as the first character
        of the owner's name.
        """
        return "".join(
            "".join(EMPTY_TILE if tile is None else tile.symbol for tile in row) + "\n"
            for row in self._grid.tolist()
        )

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Board({self._width}x{self._height}, tiles={self._tile_count})"
