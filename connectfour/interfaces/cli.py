"""
cli.py - Command-line interface for Connect Four

This module provides a CLI for playing against the computer, watching two
computer players, analyzing board positions and benchmarking the search.
"""

import argparse
import random
import sys
from typing import List, Optional

from connectfour.ai.heuristic import get_score
from connectfour.ai.negamax import GamePrediction
from connectfour.ai.strategies import STRATEGIES, create_strategy
from connectfour.debug import debug
from connectfour.game.board import Board
from connectfour.game.rules import GameState, computer_move
from connectfour.utils import (DEFAULT_HEIGHT, DEFAULT_THINK_DEPTH, DEFAULT_WIDTH,
                               BoardConfigurationError, Player, PlayerConfigurationError)

QUIT = -1
RESTART = -2


class SimpleCLI:
    """Simple command-line interface for Connect Four."""

    def __init__(self, rng: Optional[random.Random] = None):
        """Initialize the CLI."""
        self.args = None
        self.rng = rng or random.Random()

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description='Connect Four with a negamax computer opponent')
        parser.add_argument('--debug-level', default='info',
                            choices=['none', 'error', 'warning', 'info', 'debug', 'trace'],
                            help='Logging verbosity')
        parser.add_argument('--log-file', default='', help='Also write log messages to this file')
        parser.add_argument('--debug-components', default='',
                            help='Comma-separated components to log (board, search, strategy, '
                                 'game, env, cli); all if omitted')

        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        play_parser = subparsers.add_parser('play', help='Play a game against the computer')
        self._add_board_args(play_parser)
        play_parser.add_argument('--depth', type=int, default=DEFAULT_THINK_DEPTH,
                                 help='Computer look-ahead in half-moves')
        play_parser.add_argument('--ai', choices=sorted(STRATEGIES), default='negamax',
                                 help='Computer opponent type')
        play_parser.add_argument('--name', default='Human', help='Your player name')

        watch_parser = subparsers.add_parser('watch', help='Watch two computer players')
        self._add_board_args(watch_parser)
        watch_parser.add_argument('--games', type=int, default=1, help='Number of games to play')
        watch_parser.add_argument('--depth1', type=int, default=DEFAULT_THINK_DEPTH,
                                  help='Look-ahead of the first computer player')
        watch_parser.add_argument('--depth2', type=int, default=DEFAULT_THINK_DEPTH,
                                  help='Look-ahead of the second computer player')

        analyze_parser = subparsers.add_parser('analyze', help='Analyze a board position')
        analyze_parser.add_argument('--position', required=True,
                                    help="Rows top to bottom separated by '/', "
                                         "'.' for empty, '1'/'2' for player tiles")
        analyze_parser.add_argument('--player', type=int, choices=[1, 2], default=1,
                                    help='Player to find a move for')
        analyze_parser.add_argument('--depth', type=int, default=DEFAULT_THINK_DEPTH,
                                    help='Search look-ahead in half-moves')

        benchmark_parser = subparsers.add_parser('benchmark', help='Benchmark the search')
        self._add_board_args(benchmark_parser)
        benchmark_parser.add_argument('--depth', type=int, default=4,
                                      help='Search look-ahead in half-moves')
        return parser

    @staticmethod
    def _add_board_args(parser: argparse.ArgumentParser):
        parser.add_argument('--width', type=int, default=DEFAULT_WIDTH, help='Board width')
        parser.add_argument('--height', type=int, default=DEFAULT_HEIGHT, help='Board height')

    def parse_args(self, argv: Optional[List[str]] = None) -> None:
        """Parse command-line arguments and configure logging."""
        self.args = self.build_parser().parse_args(argv)
        debug.set_from_string(self.args.debug_level)
        debug.configure(log_file=self.args.log_file,
                        components=[c.strip() for c in self.args.debug_components.split(',')])

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the CLI based on the parsed arguments. Returns the exit status."""
        if not self.args:
            self.parse_args(argv)

        commands = {
            'play': self.play_game,
            'watch': self.watch_games,
            'analyze': self.analyze_position,
            'benchmark': self.benchmark,
        }
        command = commands.get(self.args.command)
        if command is None:
            print("Please specify a command. Use --help for options.")
            return 1

        try:
            command()
        except (BoardConfigurationError, PlayerConfigurationError) as e:
            debug.error(str(e), "cli")
            return 1
        return 0

    def play_game(self) -> None:
        """Play a Connect Four game interactively."""
        human = Player(self.args.name)
        computer = Player("Computer", is_computer=True,
                          max_think_depth=self.args.depth, algorithm=self.args.ai)
        state = GameState(Board(self.args.width, self.args.height), human, computer)
        strategy = create_strategy(computer.algorithm, rng=self.rng)

        print("Starting a new Connect Four game!")
        print(f"Enter column number (0-{self.args.width - 1}) to make a move.")
        print("Other commands: 'q' to quit, 'r' to restart.")

        state.start_new_game(rng=self.rng)
        print(state.board.render())

        while not state.is_game_over():
            current = state.current_player()
            if current.is_computer:
                move = computer_move(state, strategy)
                print(f"{current.name} plays column {move}")
            else:
                move = self.get_human_move(state)
                if move is None:
                    continue
                if move == QUIT:
                    print("Quitting game.")
                    return
                if move == RESTART:
                    state.start_new_game(rng=self.rng)
                    print("Game restarted.")
                    print(state.board.render())
                    continue

            if state.apply_move(move) is None:
                print("Cannot insert tile here, column is full already")
            print(state.board.render())

        print("Game over!")
        print(self.describe_result(state))

    def get_human_move(self, state: GameState) -> Optional[int]:
        """
        Get a move from human player input.

        Returns:
            Column index, or special command code, or None if invalid input
        """
        width = state.board.width
        user_input = input(f"{state.current_player().name}, your move (columns 0-{width - 1}, q/r): ")
        user_input = user_input.strip().lower()

        if user_input == 'q':
            return QUIT
        if user_input == 'r':
            return RESTART

        try:
            move = int(user_input)
        except ValueError:
            print("Invalid input. Please enter a column number or special command.")
            return None
        if not 0 <= move < width:
            print(f"Column must be between 0 and {width - 1}.")
            return None
        return move

    def watch_games(self) -> None:
        """Let two computer players play against each other."""
        player1 = Player("Alpha", is_computer=True, max_think_depth=self.args.depth1)
        player2 = Player("Beta", is_computer=True, max_think_depth=self.args.depth2)
        state = GameState(Board(self.args.width, self.args.height), player1, player2)
        strategies = {p: create_strategy(p.algorithm, rng=self.rng) for p in state.players}

        for game in range(1, self.args.games + 1):
            state.start_new_game(rng=self.rng)
            while not state.is_game_over():
                current = state.current_player()
                state.apply_move(computer_move(state, strategies[current]))
            print(f"Game {game}:")
            print(state.board.render())
            print(self.describe_result(state))

        print(f"Played {state.game_count} games")
        for player, wins in state.win_counts().items():
            print(f"  {player.name}: {wins} wins, {player.moves_per_second():.0f} moves/s")

    def analyze_position(self) -> None:
        """Classify and score a position and show the computer's choice."""
        players = [Player("1", is_computer=True, max_think_depth=self.args.depth),
                   Player("2", is_computer=True, max_think_depth=self.args.depth)]
        board = Board.from_string(self.args.position, players)

        print("Loaded position:")
        print(board.render())

        condition = board.classify()
        print(f"State: {'ongoing' if condition is None else condition}")
        for player in players:
            print(f"Heuristic score for player {player.name}: {get_score(board, player)}")

        if condition is None and board.possible_moves():
            me = players[self.args.player - 1]
            opponent = players[2 - self.args.player]
            prediction = GamePrediction(me, opponent, self.args.depth)
            column = prediction.get_next_move(board)
            print(f"Best move for player {me.name}: column {column} "
                  f"({prediction.nodes_evaluated} moves analyzed in "
                  f"{prediction.last_elapsed_seconds:.3f} seconds)")

    def benchmark(self) -> None:
        """Time a single search from an empty board."""
        player1 = Player("Alpha", is_computer=True, max_think_depth=self.args.depth)
        player2 = Player("Beta", is_computer=True, max_think_depth=self.args.depth)
        board = Board(self.args.width, self.args.height)

        print(f"Searching {self.args.width}x{self.args.height} board "
              f"with {self.args.depth} half-moves look-ahead...")
        prediction = GamePrediction(player1, player2, self.args.depth)
        column = prediction.get_next_move(board)
        elapsed = prediction.last_elapsed_seconds
        speed = prediction.nodes_evaluated / elapsed if elapsed > 0 else 0.0
        print(f"Chose column {column}: {prediction.nodes_evaluated} moves analyzed in "
              f"{elapsed:.3f} seconds, {speed:.0f} moves/s")

    @staticmethod
    def describe_result(state: GameState) -> str:
        condition = state.get_state()
        if condition is None:
            return "Game still in progress"
        if condition.is_draw:
            return "It's a draw!"
        return f"{condition.player.name} wins!"


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    cli = SimpleCLI()
    return cli.run(argv)


if __name__ == "__main__":
    sys.exit(main())
