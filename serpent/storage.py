"""
Record of finished games: initial state, per-turn log and outcome.

Each game is written as one gzip-compressed JSON document named after the
game id. Readers accept plain JSON too.
"""

import gzip
import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .entities import Game

logger = logging.getLogger("GameStore")

GZIP_MAGIC = b"\x1f\x8b"


class GzipJSON:
    @staticmethod
    def load(data: bytes) -> Any:
        if data[:2] == GZIP_MAGIC:
            data = gzip.decompress(data)
        return json.loads(data)

    @staticmethod
    def dump(obj: Any) -> bytes:
        return gzip.compress(json.dumps(obj).encode("utf-8"))


@dataclass
class GameRecord:
    game_id: str
    snake_version: str
    initial_state: Dict
    moves: List[Dict] = field(default_factory=list)
    victory: Optional[bool] = None
    winner: Optional[str] = None
    turns: int = 0

    @property
    def human_victory(self) -> Optional[str]:
        return {True: "won", False: "lost"}.get(self.victory)

    @property
    def human_result(self) -> Optional[str]:
        if self.victory is None:
            return None
        return f"{self.human_victory} in {len(self.moves)} turns"

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "GameRecord":
        return cls(**data)


class GameStore:
    """Collects turn logs for games in progress and writes them once they end."""

    def __init__(self, games_dir, snake_version: str = "0.1.0", max_open: int = 64):
        self.games_dir = Path(games_dir)
        self.snake_version = snake_version
        self.max_open = max_open
        # Insertion ordered, oldest game first
        self._open: Dict[str, GameRecord] = {}

    def path_for(self, game_id: str) -> Path:
        return self.games_dir / f"{game_id}.json.gz"

    def start(self, game: Game) -> GameRecord:
        record = GameRecord(
            game_id=game.id,
            snake_version=self.snake_version,
            initial_state=game.to_json(),
        )
        self._open.pop(game.id, None)
        self._open[game.id] = record
        while len(self._open) > self.max_open:
            stale_id = next(iter(self._open))
            del self._open[stale_id]
            logger.warning(f"Dropped unfinished game {stale_id}: more than {self.max_open} games open")
        return record

    def record_turn(self, game: Game, move: Any) -> None:
        record = self._open.get(game.id)
        if record is None:
            # Joined mid-game (e.g. after a restart)
            record = self.start(game)
        record.moves.append({"turn": game.turn, "state": game.to_json(), "move": move})

    def finish(self, game: Game) -> GameRecord:
        """Close the game with its final state and write it to disk."""
        record = self._open.pop(game.id, None)
        if record is None:
            record = GameRecord(
                game_id=game.id,
                snake_version=self.snake_version,
                initial_state=game.to_json(),
            )

        player = game.player
        survivors = [s for s in game.snakes if s.alive]
        record.victory = player is not None and player.alive and len(survivors) == 1
        if len(survivors) == 1:
            record.winner = survivors[0].name or survivors[0].id
        record.turns = game.turn

        self.save(record)
        logger.info(f"Stored game {record.game_id}: {record.human_result}")
        return record

    def save(self, record: GameRecord) -> Path:
        self.games_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(record.game_id)
        path.write_bytes(GzipJSON.dump(record.to_dict()))
        return path

    def load(self, game_id: str) -> GameRecord:
        return GameRecord.from_dict(GzipJSON.load(self.path_for(game_id).read_bytes()))
