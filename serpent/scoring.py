"""
Position heuristic: a fixed weighted sum of board features for one snake.
"""

from dataclasses import asdict, dataclass, fields
from typing import Dict, Optional

from .entities import Game
from .territory import BoardBFS

LOSS_SCORE = -999999


@dataclass(frozen=True)
class ScoreWeights:
    length: int = 25
    health: int = 1
    enemy_count: int = -100
    longest_enemy: int = -1
    enemy_lengths: int = -1
    territory: int = 1
    food_distance: int = -1

    @classmethod
    def from_dict(cls, data: Dict) -> "ScoreWeights":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown score weights: {', '.join(sorted(unknown))}")
        return cls(**data)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


DEFAULT_WEIGHTS = ScoreWeights()


class GameScorer:
    def __init__(self, game: Game, bfs: Optional[BoardBFS] = None,
                 weights: ScoreWeights = DEFAULT_WEIGHTS):
        self.game = game
        self.bfs = bfs or BoardBFS(game)
        self.weights = weights

    def features(self) -> Optional[Dict[str, int]]:
        """Raw feature values for the controlled snake, or None when it has lost."""
        player = self.game.player
        if player is None or not player.alive:
            return None

        enemies = [s for s in self.game.enemies if s.alive]
        enemy_lengths = [s.length for s in enemies]

        return {
            "length": player.length,
            "health": player.health,
            "enemy_count": len(enemies),
            "longest_enemy": max(enemy_lengths, default=0),
            "enemy_lengths": sum(enemy_lengths),
            "territory": self.bfs.territory[player],
            # Unreachable food is priced at the board width
            "food_distance": self.bfs.distance_to_food.get(player, self.game.board.width),
        }

    def score(self) -> int:
        features = self.features()
        if features is None:
            return LOSS_SCORE
        weights = self.weights.to_dict()
        return sum(weights[name] * value for name, value in features.items())
