"""
One-turn simulation of the game rules.

``simulate`` resolves a turn in the same order as the game server: movement,
health decay, food, then eliminations. It returns a new snapshot and leaves
the input untouched. The turn counter is not advanced.
"""

from collections import defaultdict
from typing import Dict, Mapping

from .entities import MAX_HEALTH, Game, Snake
from .geometry import Direction


def simulate(game: Game, actions: Mapping[str, Direction], restore_health: bool = False) -> Game:
    """Return the snapshot after one turn.

    Args:
        game: snapshot to advance; never modified
        actions: snake id -> direction. Snakes without an entry do not move
            and do not eat unless their head already sits on food.
        restore_health: reset the health of a snake that eats to MAX_HEALTH,
            as the live game does. Lookahead leaves this off.
    """
    result = game.copy()
    board = result.board
    snakes = [s for s in board.snakes if s.alive]

    for snake in snakes:
        action = actions.get(snake.id)
        if action is not None:
            snake.body.insert(0, snake.head.move(action))

    for snake in snakes:
        snake.health = max(snake.health - 1, 0)

    for snake in snakes:
        if snake.head in board.food:
            board.food.discard(snake.head)
            if restore_health:
                snake.health = MAX_HEALTH
        elif actions.get(snake.id) is not None:
            snake.body.pop()

    # Starved snakes still block this turn, deaths are applied afterwards
    walls = board.new_grid()
    heads: Dict = defaultdict(list)
    for snake in snakes:
        walls.set_all(snake.tail, True)
        heads[snake.head].append(snake)

    eliminated = [snake for snake in snakes if _is_eliminated(snake, board, walls, heads)]
    for snake in eliminated:
        snake.die()

    return result


def _is_eliminated(snake: Snake, board, walls, heads) -> bool:
    head = snake.head
    if board.out_of_bounds(head):
        return True
    if walls.at(head):
        return True
    return any(
        other is not snake and other.length >= snake.length for other in heads[head]
    )
