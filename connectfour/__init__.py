"""
connectfour - Connect Four with a full-width negamax computer opponent

This package provides the board model with win/draw detection, the static
heuristic and negamax search used by computer players, turn sequencing,
a Gymnasium environment and a command-line interface.
"""

# Version number
__version__ = '0.1.0'
