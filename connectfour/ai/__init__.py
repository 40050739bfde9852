"""
connectfour.ai - Computer players for Connect Four

This package provides the static heuristic, the negamax search engine and
the move strategies that computer players are configured with.
"""

from connectfour.ai.heuristic import get_score, WIN_SCORE, DRAW_SCORE
from connectfour.ai.negamax import GamePrediction
from connectfour.ai.strategies import STRATEGIES, create_strategy, RandomStrategy, NegamaxStrategy

__all__ = ['get_score', 'WIN_SCORE', 'DRAW_SCORE', 'GamePrediction',
           'STRATEGIES', 'create_strategy', 'RandomStrategy', 'NegamaxStrategy']
