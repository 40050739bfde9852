"""
rules.py - Turn sequencing and Gymnasium environment for Connect Four

This module provides:
1. GameState, which tracks whose turn it is, applies moves to the authoritative
   board and keeps per-player win counts for the current session
2. A gymnasium-compatible environment where an agent plays against a
   computer opponent driven by one of the registered strategies
"""

import random
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from connectfour.ai.strategies import Strategy, create_strategy
from connectfour.debug import debug
from connectfour.game.board import Board
from connectfour.utils import DEFAULT_HEIGHT, DEFAULT_WIDTH, Player, WinningCondition


class GameState:
    """
    Game state.

    Holds the board, the two players, the player that is to make the next
    move and statistics about how many games ended in a draw or a win.
    """

    def __init__(self, board: Board, player1: Player, player2: Player):
        if board is None or player1 is None or player2 is None:
            raise ValueError("board and players must not be None")
        if player1 is player2:
            raise ValueError("A game needs two distinct players")
        self.board = board
        self.players: Tuple[Player, Player] = (player1, player2)
        self._current_index = 0
        self.game_count = 0
        self._win_counts: Dict[Player, int] = {p: 0 for p in self.players}

    def player(self, index: int) -> Player:
        """Returns the player with the given index, the first player has index 0."""
        return self.players[index]

    def only_computer_players(self) -> bool:
        return all(p.is_computer for p in self.players)

    def win_counts(self) -> Dict[Player, int]:
        return dict(self._win_counts)

    def start_new_game(self, rng: Optional[random.Random] = None,
                       first_player: Optional[Player] = None):
        """
        Clear the board and pick the starting player (random unless given).
        """
        self.board.clear()
        if first_player is None:
            first_player = (rng or random.Random()).choice(self.players)
        self._current_index = self.players.index(first_player)
        debug.info(f"New game, {first_player.name} starts", "game")

    def current_player(self) -> Player:
        """Returns the player that is to make the current move."""
        return self.players[self._current_index]

    def next_player(self) -> Player:
        """Returns the player that is to move after the current player."""
        return self.players[(self._current_index + 1) % len(self.players)]

    def advance_to_next_player(self):
        self._current_index = (self._current_index + 1) % len(self.players)

    def apply_move(self, column: int) -> Optional[int]:
        """
        Drop the current player's tile into ``column``.

        The turn passes to the next player only if the tile was placed and the
        game is still ongoing. Once the game is over the board and statistics
        are left alone until ``start_new_game``.

        Returns:
            The row the tile landed in, or None if the column is full or the
            game is already over
        """
        if self.is_game_over():
            debug.warning(f"Ignoring move into column {column}, the game is over", "game")
            return None
        player = self.current_player()
        row = self.board.move(column, player)
        if row is None:
            debug.warning(f"Cannot insert tile into column {column}, column is full already", "game")
        elif self.get_state() is None:
            self.advance_to_next_player()
        self.move_finished()
        return row

    def move_finished(self):
        """Update game statistics after a player has finished moving."""
        condition = self.get_state()
        if condition is None:
            return
        self.game_count += 1
        if not condition.is_draw:
            self._win_counts[condition.player] += 1
        debug.info(f"Game over: {condition}", "game")

    def get_state(self) -> Optional[WinningCondition]:
        """Returns the draw/win condition, or None if the game is still ongoing."""
        return self.board.classify()

    def is_game_over(self) -> bool:
        return self.board.is_game_over()


def computer_move(state: GameState, strategy: Strategy) -> int:
    """
    Ask ``strategy`` for the current (computer) player's move and report the
    think time and average search speed.
    """
    player = state.current_player()
    debug.info(f"'{player.name}' is thinking ({player.max_think_depth} half-moves look-ahead) ...", "game")
    debug.start_timer("think")
    try:
        column = strategy.choose_move(state)
    finally:
        elapsed = debug.end_timer("think", "game")
    debug.info(f"Done. Player {player.name} took {elapsed * 1000:.0f} ms to think, "
               f"average speed is {player.moves_per_second():.0f} moves/s", "game")
    return column


class ConnectFourEnv(gym.Env):
    """
    Connect Four environment following the Gymnasium interface.

    The agent always plays first as player one; every agent move is answered
    by the computer opponent. Observations encode empty tiles as 0, agent
    tiles as 1 and opponent tiles as 2.
    """

    metadata = {'render_modes': ['ascii', 'human'], 'render_fps': 4}

    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT,
                 opponent: str = "negamax", opponent_depth: int = 3,
                 render_mode: Optional[str] = None):
        """
        Initialize the Connect Four environment.

        Args:
            width: Board width in tiles
            height: Board height in tiles
            opponent: Name of the opponent's strategy
            opponent_depth: Opponent look-ahead in half-moves
            render_mode: Mode for rendering the environment
        """
        debug.debug("Initializing ConnectFourEnv", "env")

        self.board = Board(width, height)
        self.agent = Player("Agent")
        self.opponent = Player("Computer", is_computer=True,
                               max_think_depth=opponent_depth, algorithm=opponent)
        self.state = GameState(self.board, self.agent, self.opponent)
        self.strategy = create_strategy(opponent)
        self.render_mode = render_mode

        self.action_space = spaces.Discrete(width)
        self.observation_space = spaces.Box(
            low=0, high=2, shape=(height, width), dtype=np.int8
        )

        self.reward_win = 1.0
        self.reward_lose = -1.0
        self.reward_draw = 0.1
        self.reward_invalid_move = -0.5
        self.reward_step = -0.01  # Small negative reward to encourage faster solutions

    def reset(self, seed: Optional[int] = None, options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict]:
        """
        Reset the environment to an empty board with the agent to move.

        Returns:
            Initial observation and info dictionary
        """
        super().reset(seed=seed)
        if seed is not None:
            self.strategy.rng.seed(seed)

        self.state.start_new_game(first_player=self.agent)

        if self.render_mode == "human":
            self.render()
        return self._get_observation(), self._get_info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Drop the agent's tile into column ``action`` and let the opponent reply.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        action = int(action)
        if (self.state.is_game_over() or not 0 <= action < self.board.width
                or not self.board.has_space_in_column(action)):
            debug.warning(f"Invalid action: {action}", "env")
            info = self._get_info()
            info['invalid_move'] = True
            return self._get_observation(), self.reward_invalid_move, False, True, info

        self.state.apply_move(action)
        reward, terminated = self._outcome()

        if not terminated:
            column = computer_move(self.state, self.strategy)
            self.state.apply_move(column)
            reward, terminated = self._outcome()

        if self.render_mode == "human":
            self.render()
        return self._get_observation(), reward, terminated, False, self._get_info()

    def _outcome(self) -> Tuple[float, bool]:
        condition = self.state.get_state()
        if condition is None:
            return self.reward_step, False
        if condition.is_draw:
            return self.reward_draw, True
        if condition.player is self.agent:
            return self.reward_win, True
        return self.reward_lose, True

    def render(self) -> Optional[str]:
        if self.render_mode is None:
            return None
        if self.render_mode == "ascii":
            return self.board.render()
        print(self.board.render())
        return None

    def _get_observation(self) -> np.ndarray:
        return self.board.encode(self.state.players)

    def _get_info(self) -> Dict[str, Any]:
        condition = self.state.get_state()
        return {
            'possible_moves': self.board.possible_moves(),
            'tile_count': self.board.tile_count,
            'result': 'IN_PROGRESS' if condition is None else str(condition),
        }
