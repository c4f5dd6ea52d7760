"""
Game state snapshots: Snake, Board and Game.

Snapshots are parsed from the Battlesnake move request. Every simulation
branch works on its own copy (see ``copy()``), so a snapshot handed to the
move decider is never modified.
"""

from typing import Dict, Iterable, List, Optional, Set

from .geometry import Point
from .grid import Grid

MAX_HEALTH = 100


class MalformedInputError(ValueError):
    """Raised when a game state snapshot is missing or has invalid fields."""


def _require(data, key, context):
    try:
        return data[key]
    except (KeyError, TypeError):
        raise MalformedInputError(f"missing required field '{key}' in {context}")


def _require_int(data, key, context, minimum=None, maximum=None):
    value = _require(data, key, context)
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedInputError(f"field '{key}' in {context} must be an integer, got {value!r}")
    if minimum is not None and value < minimum:
        raise MalformedInputError(f"field '{key}' in {context} must be >= {minimum}, got {value}")
    if maximum is not None and value > maximum:
        raise MalformedInputError(f"field '{key}' in {context} must be <= {maximum}, got {value}")
    return value


def _parse_point(data, context) -> Point:
    return Point(_require_int(data, "x", context), _require_int(data, "y", context))


def _parse_points(data, key, context) -> List[Point]:
    values = _require(data, key, context)
    if not isinstance(values, list):
        raise MalformedInputError(f"field '{key}' in {context} must be a list")
    return [_parse_point(p, f"{context}.{key}") for p in values]


class Snake:
    """A snake on the board. Equality and hashing use the stable id only."""

    def __init__(self, id: str, health: int = MAX_HEALTH, body: Optional[List[Point]] = None,
                 name: Optional[str] = None):
        self.id = id
        self.health = health
        self.body: List[Point] = list(body) if body else []
        self.name = name

    @classmethod
    def from_json(cls, data: Dict) -> "Snake":
        snake_id = _require(data, "id", "snake")
        context = f"snake {snake_id!r}"
        body = _parse_points(data, "body", context)
        if not body:
            raise MalformedInputError(f"{context} has an empty body")
        return cls(
            id=snake_id,
            health=_require_int(data, "health", context, minimum=0, maximum=MAX_HEALTH),
            body=body,
            name=data.get("name"),
        )

    def to_json(self) -> Dict:
        data = {
            "id": self.id,
            "health": self.health,
            "body": [p.to_json() for p in self.body],
            "length": self.length,
        }
        if self.name is not None:
            data["name"] = self.name
        return data

    def copy(self) -> "Snake":
        return Snake(self.id, self.health, list(self.body), self.name)

    @property
    def head(self) -> Point:
        return self.body[0]

    @property
    def tail(self) -> List[Point]:
        # Segments stacked under the head (spawn, no move simulated) are not obstacles
        head = self.head
        start = 1
        while start < len(self.body) and self.body[start] == head:
            start += 1
        return self.body[start:]

    @property
    def length(self) -> int:
        return len(self.body)

    @property
    def alive(self) -> bool:
        return self.health > 0

    def die(self) -> None:
        self.health = 0

    def __eq__(self, other):
        if not isinstance(other, Snake):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"<Snake {self.id} health={self.health} body={self.body}>"


class Board:
    def __init__(self, width: int, height: int, snakes: Iterable[Snake] = (),
                 food: Iterable[Point] = ()):
        self.width = width
        self.height = height
        self.snakes: List[Snake] = list(snakes)
        self.food: Set[Point] = set(food)

    @classmethod
    def from_json(cls, data: Dict) -> "Board":
        width = _require_int(data, "width", "board", minimum=1)
        height = _require_int(data, "height", "board", minimum=1)
        raw_snakes = _require(data, "snakes", "board")
        if not isinstance(raw_snakes, list):
            raise MalformedInputError("field 'snakes' in board must be a list")
        snakes = [Snake.from_json(s) for s in raw_snakes]
        if len({s.id for s in snakes}) != len(snakes):
            raise MalformedInputError("board contains duplicate snake ids")
        board = cls(width, height, snakes, _parse_points(data, "food", "board"))
        for snake in board.snakes:
            if any(board.out_of_bounds(p) for p in snake.body):
                raise MalformedInputError(f"snake {snake.id!r} has segments outside the board")
        if any(board.out_of_bounds(p) for p in board.food):
            raise MalformedInputError("board has food outside the board")
        return board

    def to_json(self) -> Dict:
        return {
            "width": self.width,
            "height": self.height,
            "snakes": [s.to_json() for s in self.snakes],
            "food": [p.to_json() for p in sorted(self.food, key=lambda p: (p.y, p.x))],
        }

    def copy(self) -> "Board":
        return Board(self.width, self.height, [s.copy() for s in self.snakes], set(self.food))

    def new_grid(self) -> Grid:
        return Grid(self.width, self.height)

    def out_of_bounds(self, x, y=None) -> bool:
        if y is None:
            x, y = x.x, x.y
        return x < 0 or y < 0 or x >= self.width or y >= self.height


class Game:
    def __init__(self, id: str, turn: int, you_id: str, board: Board):
        self.id = id
        self.turn = turn
        self.you_id = you_id
        self.board = board

    @classmethod
    def from_json(cls, data: Dict) -> "Game":
        """Build a snapshot from a Battlesnake move request body."""
        if not isinstance(data, dict):
            raise MalformedInputError("game state must be a JSON object")
        game = _require(data, "game", "request")
        you = _require(data, "you", "request")
        return cls(
            id=_require(game, "id", "game"),
            turn=_require_int(data, "turn", "request", minimum=0),
            you_id=_require(you, "id", "you"),
            board=Board.from_json(_require(data, "board", "request")),
        )

    def to_json(self) -> Dict:
        data = {
            "game": {"id": self.id},
            "turn": self.turn,
            "board": self.board.to_json(),
            "you": {"id": self.you_id},
        }
        player = self.player
        if player is not None:
            data["you"] = player.to_json()
        return data

    def copy(self) -> "Game":
        return Game(self.id, self.turn, self.you_id, self.board.copy())

    def for_snake(self, snake_id: str) -> "Game":
        """Copy of this snapshot controlled by another snake."""
        return Game(self.id, self.turn, snake_id, self.board.copy())

    def without_dead(self) -> "Game":
        game = self.copy()
        game.board.snakes = [s for s in game.board.snakes if s.alive]
        return game

    @property
    def snakes(self) -> List[Snake]:
        return self.board.snakes

    @property
    def player(self) -> Optional[Snake]:
        return next((s for s in self.snakes if s.id == self.you_id), None)

    @property
    def enemies(self) -> List[Snake]:
        return [s for s in self.snakes if s.id != self.you_id]

    def __repr__(self):
        return f"<Game {self.id} turn={self.turn} you={self.you_id} snakes={len(self.snakes)}>"
