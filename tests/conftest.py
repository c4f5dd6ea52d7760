"""
Pytest configuration and fixtures for serpent tests.
"""

import pytest

from serpent.entities import Game


def build_state(snakes, food=(), width=11, height=11, you="you", turn=0, game_id="game-1"):
    """Build a Battlesnake move request body.

    Args:
        snakes: list of dicts with 'id', 'body' as (x, y) tuples and optional 'health'
        food: iterable of (x, y) tuples
    """
    raw_snakes = []
    for snake in snakes:
        raw_snakes.append(
            {
                "id": snake["id"],
                "name": snake.get("name", snake["id"]),
                "health": snake.get("health", 100),
                "body": [{"x": x, "y": y} for x, y in snake["body"]],
            }
        )
    you_snake = next((s for s in raw_snakes if s["id"] == you), {"id": you})
    return {
        "game": {"id": game_id},
        "turn": turn,
        "board": {
            "width": width,
            "height": height,
            "snakes": raw_snakes,
            "food": [{"x": x, "y": y} for x, y in food],
        },
        "you": you_snake,
    }


def build_game(*args, **kwargs):
    return Game.from_json(build_state(*args, **kwargs))


@pytest.fixture
def make_state():
    return build_state


@pytest.fixture
def make_game():
    return build_game


@pytest.fixture
def duel_state():
    """Two snakes on a standard board with food near each."""
    return build_state(
        snakes=[
            {"id": "you", "body": [(3, 3), (3, 4), (3, 5)], "health": 90},
            {"id": "enemy", "body": [(7, 7), (7, 8), (7, 9), (8, 9)], "health": 80},
        ],
        food=[(5, 5), (0, 10), (9, 2)],
    )
