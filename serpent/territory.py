"""
Multi-source breadth-first flood fill from every living snake's head.

Each cell is claimed by the first frontier to reach it (Voronoi-style
control); ties within a layer go to the snake that comes first on the board.
Snake bodies are walls for the whole search.
"""

from collections import Counter
from typing import Dict, List, Tuple

from .entities import Game, Snake
from .geometry import Point


class BoardBFS:
    def __init__(self, game: Game):
        self.game = game
        self.board = game.board

        self.territory: Counter = Counter()
        self.distance_to_food: Dict[Snake, int] = {}

        self._calculate()

    def _calculate(self):
        board = self.board
        visited = board.new_grid()
        food = board.new_grid()
        food.set_all(board.food, True)

        next_queue: List[Tuple[int, int, Snake]] = []
        for snake in self.game.snakes:
            if not snake.alive:
                continue
            next_queue.append((snake.head.x, snake.head.y, snake))
            visited.set_all(snake.tail, True)

        distance = 0
        while next_queue:
            queue, next_queue = next_queue, []

            for x, y, snake in queue:
                if board.out_of_bounds(x, y) or visited.at(x, y):
                    continue
                visited.set(x, y, True)

                self.territory[snake] += 1
                if food.at(x, y) and snake not in self.distance_to_food:
                    self.distance_to_food[snake] = distance

                for cell in Point(x, y).neighbours():
                    next_queue.append((cell.x, cell.y, snake))

            distance += 1

    @property
    def unreached(self) -> int:
        """Cells no frontier claimed, snake bodies included."""
        return self.board.width * self.board.height - sum(self.territory.values())
