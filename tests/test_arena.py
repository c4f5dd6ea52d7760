"""
Tests for the local arena, the pairwise benchmark and TrueSkill ratings.
"""

from random import Random

import pytest

from eval.arena import ArenaRules, is_over, new_game, play_game, spawn_food, spawn_points
from eval.config import GameConfig
from eval.pairwise_benchmark import BenchmarkRunner, run_single_game_worker
from eval.trueskill_tournament import TrueSkillTournament
from serpent.geometry import Point
from serpent.scoring import ScoreWeights
from serpent.storage import GameRecord, GameStore

SMALL = ArenaRules(width=7, height=7, max_turns=30)


class TestSetup:
    def test_spawn_points_are_distinct_and_on_board(self):
        points = spawn_points(11, 11)
        assert len(points) == 8
        assert len(set(points)) == 8
        assert all(0 <= p.x < 11 and 0 <= p.y < 11 for p in points)

    def test_spawn_points_collapse_on_tiny_board(self):
        assert spawn_points(3, 3) == [Point(1, 1)]

    def test_new_game(self):
        game = new_game(["a", "b"], ArenaRules(), Random(1), "g")
        assert [s.id for s in game.snakes] == ["a", "b"]
        for snake in game.snakes:
            assert snake.length == 3
            assert len(set(snake.body)) == 1
            assert snake.health == 100
        assert Point(5, 5) in game.board.food
        assert len(game.board.food) == 3
        assert game.snakes[0].head != game.snakes[1].head
        assert not game.board.food & {s.head for s in game.snakes}

    def test_spawn_food_tops_up_minimum(self):
        game = new_game(["a"], ArenaRules(), Random(1), "g")
        game.board.food.clear()
        spawn_food(game.board, ArenaRules(minimum_food=2), Random(3))
        assert len(game.board.food) == 2

    def test_is_over(self, make_game):
        duel = make_game(
            [{"id": "a", "body": [(1, 1)]}, {"id": "b", "body": [(5, 5)], "health": 0}], you="a"
        )
        assert is_over(duel, 2)
        assert not is_over(duel, 1)


class TestPlayGame:
    profiles = {"Baseline": ScoreWeights(), "Hungry": ScoreWeights(length=40, food_distance=-5)}

    def test_terminates_with_a_valid_result(self):
        result = play_game(self.profiles, rules=SMALL, seed=7)
        assert 0 < result.turns <= SMALL.max_turns
        assert result.winner in (None, "Baseline", "Hungry")
        assert result.is_draw == (result.winner is None)
        assert result.game_id == "arena-7"

    def test_same_seed_same_game(self):
        first = play_game(self.profiles, rules=SMALL, seed=11)
        second = play_game(self.profiles, rules=SMALL, seed=11)
        assert first == second

    def test_turn_limit(self):
        rules = ArenaRules(width=11, height=11, max_turns=3)
        result = play_game(self.profiles, rules=rules, seed=2)
        assert result.turns <= 3

    def test_solo_game(self):
        result = play_game({"Solo": ScoreWeights()}, rules=ArenaRules(max_turns=10), seed=5)
        assert result.turns == 10
        assert result.winner == "Solo"

    def test_records_every_turn(self, tmp_path):
        store = GameStore(tmp_path)
        result = play_game(self.profiles, rules=SMALL, seed=3, store=store, game_id="recorded")

        record = store.load("recorded")
        assert record.turns == result.turns
        assert len(record.moves) == result.turns
        assert set(record.moves[0]["move"]) == {"Baseline", "Hungry"}
        assert record.winner == result.winner


class TestBenchmark:
    @pytest.fixture(autouse=True)
    def in_tmp(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

    def test_game_seeds_are_primes_above_100(self):
        runner = BenchmarkRunner(iterations=3)
        assert runner.game_seeds() == [101, 103, 107]

    def test_output_dir(self):
        config = GameConfig(round_robin="rr", p1_name="A", p2_name="B")
        runner = BenchmarkRunner(iterations=1, game_config=config)
        assert runner.output_dir == "tournaments/rr/A_vs_B"

    def test_record_result_and_winner(self):
        runner = BenchmarkRunner(iterations=4, game_config=GameConfig(p1_name="A", p2_name="B"))
        for result in ("p1", "p2", "p1", "draw", None):
            runner.record_result(result)
        assert dict(runner.results) == {"p1_wins": 2, "p2_wins": 1, "draws": 1, "skipped": 1}
        assert runner.winner() == "A"

    def test_single_game_worker(self, tmp_path):
        config = GameConfig(width=7, height=7, max_turns=20, p1_name="A", p2_name="B")
        outcome = run_single_game_worker(0, 101, str(tmp_path), config)
        assert outcome in ("p1", "p2", "draw")
        assert (tmp_path / "games" / "game_0.json.gz").exists()

    def test_profile_against_itself(self, tmp_path):
        config = GameConfig(width=7, height=7, max_turns=20, p1_name="Baseline", p2_name="Baseline")
        outcome = run_single_game_worker(0, 103, str(tmp_path), config)

        record = GameStore(tmp_path / "games").load("game_0")
        ids = [s["id"] for s in record.initial_state["board"]["snakes"]]
        assert ids == ["Baseline_1", "Baseline_2"]
        expected = {"Baseline_1": "p1", "Baseline_2": "p2", None: "draw"}[record.winner]
        assert outcome == expected


class TestTrueSkill:
    def test_winner_rated_higher(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        profiles = [
            {"name": "Strong", "weights": ScoreWeights()},
            {"name": "Weak", "weights": ScoreWeights(territory=0)},
        ]
        tournament = TrueSkillTournament(profiles, iterations=4, workers=1, tournament_id="t1")

        store = GameStore(tmp_path / "tournaments" / "t1" / "Strong_vs_Weak" / "games")
        for n, winner in enumerate(["Strong", "Strong", "Strong", None]):
            store.save(GameRecord(f"game_{n}", "0.1.0", {}, winner=winner))

        games = tournament.collect_games()
        assert len(games) == 4
        assert sorted(g["winner"] for g in games) == ["Strong", "Strong", "Strong", "draw"]

        tournament.calculate_trueskill_from_games()
        assert tournament.ratings["Strong"].mu > tournament.ratings["Weak"].mu
        assert tournament.rankings()[0]["name"] == "Strong"

    def test_matchups(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        profiles = [{"name": n, "weights": ScoreWeights()} for n in ("A", "B", "C")]
        tournament = TrueSkillTournament(profiles, tournament_id="t2")
        pairs = [(a["name"], b["name"]) for a, b in tournament.matchups()]
        assert pairs == [("A", "B"), ("A", "C"), ("B", "C")]
