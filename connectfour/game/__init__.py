"""
connectfour.game - Core game mechanics for Connect Four

This package contains the board representation, win/draw classification
and game state management.
"""

from connectfour.game.board import Board

# GameState and ConnectFourEnv live in connectfour.game.rules; importing them
# here would create a cycle with connectfour.ai
__all__ = ['Board']
