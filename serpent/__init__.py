"""
serpent - single-ply Battlesnake move engine.

Parses a turn's game state, simulates each candidate move one turn ahead,
scores the resulting positions and picks the best move.
"""

from .decider import MoveDecider, safe_moves
from .entities import Board, Game, MalformedInputError, Snake
from .geometry import ACTIONS, Direction, Point
from .grid import Grid, OutOfBoundsError
from .scoring import DEFAULT_WEIGHTS, LOSS_SCORE, GameScorer, ScoreWeights
from .simulation import simulate
from .territory import BoardBFS

__all__ = [
    "ACTIONS",
    "Board",
    "BoardBFS",
    "DEFAULT_WEIGHTS",
    "Direction",
    "Game",
    "GameScorer",
    "Grid",
    "LOSS_SCORE",
    "MalformedInputError",
    "MoveDecider",
    "OutOfBoundsError",
    "Point",
    "ScoreWeights",
    "Snake",
    "safe_moves",
    "simulate",
]
