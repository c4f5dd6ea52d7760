"""
Battlesnake webhook service.

Routes:
    GET  /       snake info and customizations
    POST /start  a game begins
    POST /move   pick a move before the deadline
    POST /end    a game is over, store its record
"""

import logging
import os
import typing
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout

from flask import Flask, jsonify, request

from .config import EngineConfig, load_engine_config
from .decider import MoveDecider, safe_moves
from .entities import Game, MalformedInputError
from .geometry import ACTIONS, Direction
from .storage import GameStore

logger = logging.getLogger("SnakeServer")


class SnakeHandlers:
    """Game logic behind the webhook routes, independent of Flask."""

    def __init__(self, config: EngineConfig, store: typing.Optional[GameStore] = None):
        self.config = config
        if store is None and config.record_games:
            store = GameStore(config.games_dir, snake_version=config.version)
        self.store = store
        self._executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="decider")

    def info(self) -> typing.Dict:
        return {
            "apiversion": "1",
            "author": self.config.author,
            "color": self.config.color,
            "head": self.config.head,
            "tail": self.config.tail,
            "version": self.config.version,
        }

    def start(self, game_state: typing.Dict) -> None:
        game = Game.from_json(game_state)
        logger.info(f"GAME START {game.id}")
        if self.store is not None:
            self.store.start(game)

    def move(self, game_state: typing.Dict) -> typing.Dict:
        game = Game.from_json(game_state)
        decider = MoveDecider(game, weights=self.config.weights, workers=self.config.workers)
        future = self._executor.submit(decider.next_move)
        try:
            next_move = future.result(timeout=self.config.move_timeout_ms / 1000)
        except FutureTimeout:
            next_move = fallback_move(game)
            logger.warning(
                f"MOVE {game.turn}: decision exceeded {self.config.move_timeout_ms}ms, "
                f"falling back to {next_move.value}"
            )
        else:
            logger.info(f"MOVE {game.turn}: {next_move.value}")

        if self.store is not None:
            self.store.record_turn(game, next_move.value)
        return {"move": next_move.value}

    def end(self, game_state: typing.Dict) -> None:
        game = Game.from_json(game_state)
        logger.info(f"GAME OVER {game.id} at turn {game.turn}")
        if self.store is not None:
            self.store.finish(game)


def fallback_move(game: Game) -> Direction:
    """First move that is not an immediate collision, or up when none is."""
    player = game.player
    if player is None:
        return ACTIONS[0]
    moves = safe_moves(game, player)
    return moves[0] if moves else ACTIONS[0]


def create_app(handlers: SnakeHandlers) -> Flask:
    app = Flask("serpent")

    @app.errorhandler(MalformedInputError)
    def malformed_input(error):
        logger.error(f"Rejected malformed game state: {error}")
        return jsonify({"error": str(error)}), 400

    @app.get("/")
    def on_info():
        return jsonify(handlers.info())

    @app.post("/start")
    def on_start():
        handlers.start(request.get_json(silent=True))
        return "ok"

    @app.post("/move")
    def on_move():
        return jsonify(handlers.move(request.get_json(silent=True)))

    @app.post("/end")
    def on_end():
        handlers.end(request.get_json(silent=True))
        return "ok"

    @app.after_request
    def identify_server(response):
        response.headers.set("server", "serpent")
        return response

    return app


def run_server(config: EngineConfig) -> None:
    app = create_app(SnakeHandlers(config))
    logging.getLogger("werkzeug").setLevel(logging.ERROR)
    logger.info(f"Running Battlesnake at http://{config.host}:{config.port}")
    app.run(host=config.host, port=config.port)


def main():
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    config = load_engine_config(os.environ.get("SERPENT_CONFIG"))
    run_server(config)
