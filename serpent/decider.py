"""
Single-ply move selection.

Every candidate direction for the controlled snake is simulated one turn
ahead with the opponents held still, the resulting position is scored and
the best direction wins. Ties go to the first direction in ACTIONS order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List

from .entities import Game, Snake
from .geometry import ACTIONS, Direction
from .scoring import DEFAULT_WEIGHTS, GameScorer, ScoreWeights
from .simulation import simulate

logger = logging.getLogger("MoveDecider")


def safe_moves(game: Game, snake: Snake) -> List[Direction]:
    """Directions that stay on the board and avoid every body segment.

    This is the cheap check used when there is no time for a full decision.
    """
    board = game.board
    walls = board.new_grid()
    for other in game.snakes:
        if other.alive:
            walls.set_all(other.body, True)

    moves = []
    for direction in ACTIONS:
        new_head = snake.head.move(direction)
        if board.out_of_bounds(new_head) or walls.at(new_head):
            continue
        moves.append(direction)
    return moves


class MoveDecider:
    def __init__(self, game: Game, weights: ScoreWeights = DEFAULT_WEIGHTS, workers: int = 1):
        self.game = game
        self.weights = weights
        self.workers = workers

    def evaluate(self, action: Direction) -> int:
        """Score the position after the controlled snake plays ``action``."""
        successor = simulate(self.game, {self.game.you_id: action})
        return GameScorer(successor, weights=self.weights).score()

    def scores(self) -> Dict[Direction, int]:
        if self.workers > 1:
            # Each branch simulates on its own copy
            with ThreadPoolExecutor(max_workers=min(self.workers, len(ACTIONS))) as executor:
                results = list(executor.map(self.evaluate, ACTIONS))
        else:
            results = [self.evaluate(action) for action in ACTIONS]
        return dict(zip(ACTIONS, results))

    def next_move(self) -> Direction:
        scores = self.scores()
        best = max(ACTIONS, key=lambda action: scores[action])
        logger.debug(
            "turn %s: %s -> %s",
            self.game.turn,
            ", ".join(f"{a.value}={scores[a]}" for a in ACTIONS),
            best.value,
        )
        return best
