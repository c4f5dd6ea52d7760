"""
Local self-play arena.

Plays complete games between scoring-weight profiles using the turn simulator
as the authoritative rules engine, so snakes can be compared without the
Battlesnake CLI or any HTTP servers.
"""

from dataclasses import dataclass
from random import Random
from typing import Dict, List, Optional

from serpent.decider import MoveDecider
from serpent.entities import MAX_HEALTH, Board, Game, Snake
from serpent.geometry import Point
from serpent.scoring import ScoreWeights
from serpent.simulation import simulate
from serpent.storage import GameStore


@dataclass
class ArenaRules:
    width: int = 11
    height: int = 11
    start_length: int = 3
    start_health: int = MAX_HEALTH
    minimum_food: int = 1
    food_spawn_chance: int = 15  # percent per turn
    max_turns: int = 500


@dataclass
class GameResult:
    game_id: str
    winner: Optional[str]
    turns: int
    final_state: Dict

    @property
    def is_draw(self):
        return self.winner is None


def spawn_points(width: int, height: int) -> List[Point]:
    """Corners first, then edge midpoints, one cell in from the wall."""
    lo_x, mid_x, hi_x = 1, width // 2, width - 2
    lo_y, mid_y, hi_y = 1, height // 2, height - 2
    candidates = [
        (lo_x, lo_y), (hi_x, hi_y), (lo_x, hi_y), (hi_x, lo_y),
        (mid_x, lo_y), (mid_x, hi_y), (lo_x, mid_y), (hi_x, mid_y),
    ]
    points = []
    for x, y in candidates:
        point = Point(x, y)
        if 0 <= x < width and 0 <= y < height and point not in points:
            points.append(point)
    return points


def free_cells(board: Board) -> List[Point]:
    occupied = set(board.food)
    for snake in board.snakes:
        occupied.update(snake.body)
    return [
        Point(x, y)
        for y in range(board.height)
        for x in range(board.width)
        if Point(x, y) not in occupied
    ]


def place_food(board: Board, count: int, rng: Random) -> None:
    cells = free_cells(board)
    rng.shuffle(cells)
    board.food.update(cells[:count])


def new_game(names: List[str], rules: ArenaRules, rng: Random, game_id: str) -> Game:
    board = Board(rules.width, rules.height)

    starts = spawn_points(rules.width, rules.height)
    rng.shuffle(starts)
    for name in names:
        if starts:
            start = starts.pop()
        else:
            start = rng.choice(free_cells(board))
        board.snakes.append(
            Snake(id=name, health=rules.start_health, body=[start] * rules.start_length, name=name)
        )

    centre = Point(rules.width // 2, rules.height // 2)
    if centre in free_cells(board):
        board.food.add(centre)
    place_food(board, len(names), rng)

    return Game(game_id, 0, names[0], board)


def spawn_food(board: Board, rules: ArenaRules, rng: Random) -> None:
    missing = rules.minimum_food - len(board.food)
    if missing > 0:
        place_food(board, missing, rng)
    elif rng.randrange(100) < rules.food_spawn_chance:
        place_food(board, 1, rng)


def is_over(game: Game, num_players: int) -> bool:
    living = [s for s in game.snakes if s.alive]
    if num_players > 1:
        return len(living) <= 1
    return not living


def play_game(
    profiles: Dict[str, ScoreWeights],
    rules: Optional[ArenaRules] = None,
    seed: int = 0,
    store: Optional[GameStore] = None,
    game_id: Optional[str] = None,
) -> GameResult:
    """Play one game to the end. Snake ids are the profile names."""
    rules = rules or ArenaRules()
    rng = Random(seed)
    names = list(profiles)
    game = new_game(names, rules, rng, game_id or f"arena-{seed}")
    if store is not None:
        store.start(game)

    while game.turn < rules.max_turns and not is_over(game, len(names)):
        actions = {}
        for snake in game.snakes:
            if snake.alive:
                decider = MoveDecider(game.for_snake(snake.id), weights=profiles[snake.id])
                actions[snake.id] = decider.next_move()

        if store is not None:
            store.record_turn(game, {sid: action.value for sid, action in actions.items()})

        game = simulate(game, actions, restore_health=True).without_dead()
        game.turn += 1
        spawn_food(game.board, rules, rng)

    survivors = [s.id for s in game.snakes if s.alive]
    winner = survivors[0] if len(survivors) == 1 else None
    if store is not None:
        store.finish(game)
    return GameResult(game.id, winner, game.turn, game.to_json())
