"""
Tests for the board model: placement, backtracking removal, copies and
win/draw classification.
"""

import numpy as np
import pytest

from connectfour.game.board import Board, scan_lines
from connectfour.utils import (BoardConfigurationError, Player, TileOccupiedError,
                               WinningCondition)


# ════════════════════════════════════════════════════════════════════════════
#  CONSTRUCTION & PLACEMENT
# ════════════════════════════════════════════════════════════════════════════

class TestBoardBasics:
    @pytest.mark.parametrize("width,height", [(3, 4), (4, 3), (0, 0), (3, 10)])
    def test_too_small_board_is_rejected(self, width, height):
        with pytest.raises(BoardConfigurationError):
            Board(width, height)

    def test_minimum_board(self):
        b = Board(4, 4)
        assert b.width == 4 and b.height == 4
        assert b.is_empty()
        assert not b.is_full()

    def test_move_obeys_gravity(self, player1, player2):
        b = Board(5, 5)
        assert b.move(2, player1) == 4
        assert b.get(2, 4) is player1
        assert b.move(2, player2) == 3
        assert b.get(2, 3) is player2
        assert b.tile_count == 2

    def test_move_into_full_column_returns_none(self, player1):
        b = Board(4, 4)
        rows = [b.move(0, player1) for _ in range(4)]
        assert rows == [3, 2, 1, 0]
        assert b.move(0, player1) is None
        assert b.tile_count == 4
        assert not b.has_space_in_column(0)
        assert b.possible_moves() == [1, 2, 3]

    def test_move_out_of_range(self, player1):
        b = Board(4, 4)
        with pytest.raises(ValueError):
            b.move(4, player1)
        with pytest.raises(ValueError):
            b.move(-1, player1)

    @pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (4, 0), (0, 4)])
    def test_tile_access_out_of_range(self, player1, x, y):
        b = Board(4, 4)
        b.set(3, 3, player1)
        with pytest.raises(ValueError):
            b.get(x, y)
        with pytest.raises(ValueError):
            b.set(x, y, player1)
        with pytest.raises(ValueError):
            b.clear_tile(x, y)
        assert b.tile_count == 1
        assert b.get(3, 3) is player1

    def test_set_on_occupied_tile_is_fatal(self, player1, player2):
        b = Board(4, 4)
        b.set(1, 1, player1)
        with pytest.raises(TileOccupiedError):
            b.set(1, 1, player2)
        assert b.get(1, 1) is player1
        assert b.tile_count == 1

    def test_clear_tile(self, player1):
        b = Board(4, 4)
        row = b.move(3, player1)
        b.clear_tile(3, row)
        assert b.get(3, row) is None
        assert b.is_empty()
        # clearing an empty tile is a no-op
        b.clear_tile(3, row)
        assert b.tile_count == 0

    def test_clear_board(self, make_board):
        b = make_board("12..\n"
                       "21..\n"
                       "12..\n"
                       "21..")
        assert b.tile_count == 8
        b.clear()
        assert b.is_empty()
        assert all(tile is None for tile in b.tiles())

    def test_full_board(self, make_board):
        b = make_board("12121\n"
                       "21212\n"
                       "11211\n"
                       "21112")
        assert sum(1 for tile in b.tiles() if tile is not None) == 20
        assert b.is_full()
        assert b.possible_moves() == []


class TestCopyAndRender:
    def test_copy_is_independent(self, make_board, player1, player2):
        b = make_board(".....\n"
                       ".....\n"
                       ".....\n"
                       ".....\n"
                       "111..")
        before = b.classify()
        c = b.copy()
        assert c.render() == b.render()
        assert c.tile_count == b.tile_count

        c.move(3, player1)
        assert c.classify() == WinningCondition.win(player1)
        assert b.classify() == before
        assert b.get(3, 4) is None
        assert b.tile_count == 3

        c.clear()
        assert b.tile_count == 3

    def test_render(self, make_board):
        text = ("....\n"
                "....\n"
                ".2..\n"
                "11..\n")
        assert make_board(text).render() == text

    def test_render_uses_first_letter_of_name(self):
        b = Board(4, 4)
        b.move(0, Player("Xavier"))
        b.move(1, Player("Olga"))
        assert str(b) == "....\n....\n....\nXO..\n"

    def test_from_string_accepts_slashes(self, make_board):
        b = make_board("..../..../..../12..")
        assert b.tile_count == 2

    @pytest.mark.parametrize("text", [
        "....\n...\n....\n....",     # ragged
        "...\n...\n...\n...",        # too narrow
        "....\n....\n....",          # too short
        "....\n....\n....\n.x..",    # unsupported character
        "....\n....\n....\n.3..",    # unknown player
    ])
    def test_from_string_rejects_bad_input(self, make_board, text):
        with pytest.raises(BoardConfigurationError):
            make_board(text)

    def test_encode(self, make_board, player1, player2):
        b = make_board("....\n"
                       "....\n"
                       "2...\n"
                       "1..1")
        codes = b.encode([player1, player2])
        assert codes.dtype == np.int8
        assert codes.tolist() == [[0, 0, 0, 0],
                                  [0, 0, 0, 0],
                                  [2, 0, 0, 0],
                                  [1, 0, 0, 1]]

    def test_scan_lines_cover_every_direction(self):
        lines = scan_lines(5, 4)
        # 4 rows + 5 columns + (4 + 4) right-down + (4 + 4) left-down
        assert len(lines) == 25
        assert lines[0] == ((0, 0), (1, 0), (2, 0), (3, 0), (4, 0))
        assert lines[4] == ((0, 0), (0, 1), (0, 2), (0, 3))
        assert ((0, 0), (1, 1), (2, 2), (3, 3)) in lines
        assert ((4, 0), (3, 1), (2, 2), (1, 3)) in lines


# ════════════════════════════════════════════════════════════════════════════
#  CLASSIFICATION
# ════════════════════════════════════════════════════════════════════════════

class TestClassify:
    def test_empty_board_is_ongoing(self, make_board):
        b = make_board(".....\n"
                       ".....\n"
                       ".....\n"
                       ".....\n"
                       ".....")
        assert b.classify() is None
        assert not b.is_game_over()

    def test_full_board_without_line_is_draw(self, make_board):
        b = make_board("12121\n"
                       "21212\n"
                       "11211\n"
                       "21112")
        state = b.classify()
        assert state is not None
        assert state.is_draw
        assert str(state) == "DRAW"
        with pytest.raises(ValueError):
            state.player

    @pytest.mark.parametrize("text", [
        ".....\n.....\n.....\n.....\n11111",
        ".....\n.....\n.....\n1111.",
        ".....\n.....\n.....\n.1111",
        "......\n......\n......\n.1111.",
    ])
    def test_row_wins(self, make_board, player1, text):
        assert make_board(text).classify() == WinningCondition.win(player1)

    @pytest.mark.parametrize("text", [
        "......\n......\n......\n.11.11",
        ".....\n.....\n.....\n111..",
    ])
    def test_row_ongoing(self, make_board, text):
        assert make_board(text).classify() is None

    @pytest.mark.parametrize("text", [
        "1....\n1....\n1....\n1....\n1....",
        "1....\n1....\n1....\n1....\n.....",
        ".....\n1....\n1....\n1....\n1....",
        ".....\n1....\n1....\n1....\n1....\n.....",
    ])
    def test_column_wins(self, make_board, player1, text):
        assert make_board(text).classify() == WinningCondition.win(player1)

    @pytest.mark.parametrize("text", [
        "1....\n1....\n.....\n1....\n1....\n.....",
        ".....\n1....\n1....\n1....\n.....",
    ])
    def test_column_ongoing(self, make_board, text):
        assert make_board(text).classify() is None

    @pytest.mark.parametrize("text", [
        "1....\n.1...\n..1..\n...1.\n.....",
        ".....\n.1...\n..1..\n...1.\n....1",
        ".....\n1....\n.1...\n..1..\n...1.",
        ".1...\n..1..\n...1.\n....1\n.....",
    ])
    def test_right_diagonal_wins(self, make_board, player1, text):
        assert make_board(text).classify() == WinningCondition.win(player1)

    @pytest.mark.parametrize("text", [
        "..1..\n...1.\n....1\n.....\n.....",
        ".....\n1....\n.1...\n..1..\n.....",
    ])
    def test_right_diagonal_ongoing(self, make_board, text):
        assert make_board(text).classify() is None

    @pytest.mark.parametrize("text", [
        "....1\n...1.\n..1..\n.1...\n.....",
        "...1.\n..1..\n.1...\n1....\n.....",
        ".....\n....1\n...1.\n..1..\n.1...",
    ])
    def test_left_diagonal_wins(self, make_board, player1, text):
        assert make_board(text).classify() == WinningCondition.win(player1)

    def test_second_player_win(self, make_board, player2):
        state = make_board(".....\n"
                           ".....\n"
                           ".....\n"
                           "1.1..\n"
                           "2222.").classify()
        assert state.player is player2
        assert str(state) == "2 won"

    def test_empty_tile_is_not_a_wildcard(self, make_board):
        assert make_board("....\n"
                          "....\n"
                          "....\n"
                          "11.1").classify() is None

    def test_row_win_reported_before_column_win(self, make_board, player2):
        b = make_board("1....\n"
                       "1....\n"
                       "1....\n"
                       "1....\n"
                       ".2222")
        assert b.classify() == WinningCondition.win(player2)

    def test_row_and_column_win_for_same_player(self, make_board, player1):
        b = make_board("1....\n"
                       "1....\n"
                       "1....\n"
                       "11111")
        assert b.classify() == WinningCondition.win(player1)

    def test_column_win_reported_before_diagonal_win(self, make_board, player2):
        b = make_board("1...2\n"
                       ".1..2\n"
                       "..1.2\n"
                       "...12\n"
                       ".....")
        assert b.classify() == WinningCondition.win(player2)

    def test_right_diagonal_reported_before_left_diagonal(self, make_board, player1):
        b = make_board("......\n"
                       "1....2\n"
                       ".1..2.\n"
                       "..12..\n"
                       "..21..\n"
                       "......")
        assert b.classify() == WinningCondition.win(player1)

    def test_left_column_diagonal_reported_before_top_row_diagonal(self, make_board, player2):
        # player 2 runs down-right from (0,1), player 1 from (1,0)
        b = make_board(".1....\n"
                       "2.1...\n"
                       ".2.1..\n"
                       "..2.1.\n"
                       "...2..")
        assert b.classify() == WinningCondition.win(player2)

    def test_right_column_diagonal_reported_before_top_row_diagonal(self, make_board, player1):
        # player 1 runs down-left from (5,1), player 2 from (4,0)
        b = make_board("....2.\n"
                       "...2.1\n"
                       "..2.1.\n"
                       ".2.1..\n"
                       "..1...")
        assert b.classify() == WinningCondition.win(player1)

    def test_classify_is_idempotent(self, make_board):
        b = make_board(".....\n"
                       ".....\n"
                       "..2..\n"
                       ".12..\n"
                       "1121.")
        first = b.classify()
        assert b.classify() == first
        assert b.tile_count == 7

    def test_same_name_players_are_distinct(self):
        a, b = Player("Bob"), Player("Bob")
        board = Board(4, 4)
        for column in range(3):
            board.move(column, a)
        board.move(3, b)
        assert board.classify() is None
