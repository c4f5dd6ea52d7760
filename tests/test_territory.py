"""
Tests for the multi-source flood fill.
"""

import pytest

from serpent.territory import BoardBFS


def by_id(bfs, table):
    return {snake.id: value for snake, value in table.items()}


class TestTerritory:
    def test_single_snake_claims_open_board(self, make_game):
        game = make_game([{"id": "you", "body": [(2, 2)]}], width=5, height=4)
        bfs = BoardBFS(game)
        assert bfs.territory[game.player] == 20
        assert bfs.unreached == 0

    @pytest.mark.parametrize(
        "snakes",
        [
            [{"id": "you", "body": [(0, 0)]}, {"id": "b", "body": [(6, 6)]}],
            [
                {"id": "you", "body": [(1, 1)]},
                {"id": "b", "body": [(5, 2)]},
                {"id": "c", "body": [(3, 6)]},
            ],
            [
                {"id": "you", "body": [(1, 1), (1, 2), (1, 3)]},
                {"id": "b", "body": [(5, 5), (4, 5), (3, 5), (3, 4)]},
            ],
        ],
    )
    def test_territory_plus_unreached_covers_board(self, make_game, snakes):
        game = make_game(snakes, width=7, height=7)
        bfs = BoardBFS(game)
        assert sum(bfs.territory.values()) + bfs.unreached == 49

    def test_bodies_block_and_are_not_claimed(self, make_game):
        game = make_game([{"id": "you", "body": [(0, 0), (1, 0), (2, 0)]}], width=4, height=2)
        bfs = BoardBFS(game)
        # Head plus the five open cells; the two tail cells stay unreached
        assert bfs.territory[game.player] == 6
        assert bfs.unreached == 2

    def test_same_layer_tie_goes_to_first_snake(self, make_game):
        game = make_game(
            [{"id": "you", "body": [(0, 0)]}, {"id": "b", "body": [(2, 0)]}],
            width=3,
            height=1,
        )
        bfs = BoardBFS(game)
        assert by_id(bfs, bfs.territory) == {"you": 2, "b": 1}

    def test_closer_snake_wins_cells(self, make_game):
        game = make_game(
            [{"id": "you", "body": [(0, 0)]}, {"id": "b", "body": [(5, 0)]}],
            width=7,
            height=1,
        )
        bfs = BoardBFS(game)
        assert by_id(bfs, bfs.territory) == {"you": 3, "b": 4}

    def test_enclosed_snake_keeps_its_pocket(self, make_game):
        # "b" walls "you" into the left column
        game = make_game(
            [
                {"id": "you", "body": [(0, 1)]},
                {"id": "b", "body": [(2, 0), (1, 0), (1, 1), (1, 2)]},
            ],
            width=4,
            height=3,
        )
        bfs = BoardBFS(game)
        assert bfs.territory[game.player] == 3

    def test_dead_snakes_do_not_claim_or_block(self, make_game):
        game = make_game(
            [
                {"id": "you", "body": [(0, 0)]},
                {"id": "ghost", "body": [(2, 0), (3, 0)], "health": 0},
            ],
            width=4,
            height=1,
        )
        bfs = BoardBFS(game)
        assert by_id(bfs, bfs.territory) == {"you": 4}


class TestDistanceToFood:
    def test_distance_is_bfs_layer(self, make_game):
        game = make_game([{"id": "you", "body": [(0, 0)]}], food=[(3, 0), (4, 4)], width=5, height=5)
        bfs = BoardBFS(game)
        assert bfs.distance_to_food[game.player] == 3

    def test_food_under_head_is_distance_zero(self, make_game):
        game = make_game([{"id": "you", "body": [(2, 2)]}], food=[(2, 2)], width=5, height=5)
        assert BoardBFS(game).distance_to_food[game.player] == 0

    def test_food_claimed_by_closer_enemy_is_unreached(self, make_game):
        game = make_game(
            [{"id": "you", "body": [(0, 0)]}, {"id": "b", "body": [(5, 0)]}],
            food=[(4, 0)],
            width=6,
            height=1,
        )
        bfs = BoardBFS(game)
        assert game.player not in bfs.distance_to_food
        assert by_id(bfs, bfs.distance_to_food) == {"b": 1}

    def test_walled_off_food_has_no_distance(self, make_game):
        game = make_game(
            [
                {"id": "you", "body": [(0, 1)]},
                {"id": "b", "body": [(2, 0), (1, 0), (1, 1), (1, 2)]},
            ],
            food=[(3, 2)],
            width=4,
            height=3,
        )
        bfs = BoardBFS(game)
        assert game.player not in bfs.distance_to_food
