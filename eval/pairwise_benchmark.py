from collections import defaultdict
import os
from eval.arena import ArenaRules, play_game
from eval.config import GameConfig, load_profiles_config
import argparse
import sympy
import sys
import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
from threading import Lock
from tqdm import tqdm
from serpent.storage import GameStore


class BenchmarkRunner:
    def __init__(self, iterations: int = 500, game_config: GameConfig = None, num_workers: int = 4):
        self.iterations = iterations
        self.game_config = game_config or GameConfig()
        self.num_workers = num_workers
        self.results = defaultdict(int)
        self.results_lock = Lock()
        if len(self.game_config.round_robin) > 0:
            self.output_dir = (
                f"tournaments/{self.game_config.round_robin}/"
                f"{self.game_config.p1_name}_vs_{self.game_config.p2_name}"
            )
        else:
            self.output_dir = (
                f"tournaments/{self.game_config.p1_name}_vs_{self.game_config.p2_name}"
            )
        os.makedirs(self.output_dir, exist_ok=True)

        # Setup loggers
        self.summary_logger = self._setup_summary_logger()
        self.error_logger = self._setup_error_logger()

    def _setup_summary_logger(self):
        """Configure logger for summary and progress messages"""
        logger = logging.getLogger("BenchmarkRunner.Summary")
        logger.setLevel(logging.INFO)
        logger.handlers.clear()

        formatter = logging.Formatter("%(message)s")

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        file_handler = logging.FileHandler(f"{self.output_dir}/summary.log", mode="w")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        logger.propagate = False
        return logger

    def _setup_error_logger(self):
        """Configure logger for error and warning messages"""
        logger = logging.getLogger("BenchmarkRunner.Error")
        logger.setLevel(logging.WARNING)
        logger.handlers.clear()

        formatter = logging.Formatter("[%(levelname)s] %(message)s")

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        file_handler = logging.FileHandler(f"{self.output_dir}/error.log", mode="w")
        file_handler.setLevel(logging.WARNING)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        logger.propagate = False
        return logger

    def game_seeds(self):
        """One seed per game: successive primes above 100, stable across runs"""
        seeds = []
        last_prime = 100
        for _ in range(self.iterations):
            last_prime = int(sympy.nextprime(last_prime))
            seeds.append(last_prime)
        return seeds

    def record_result(self, result):
        with self.results_lock:
            if result == "draw":
                self.results["draws"] += 1
            elif result == "p1":
                self.results["p1_wins"] += 1
            elif result == "p2":
                self.results["p2_wins"] += 1
            else:
                self.results["skipped"] += 1

    def run_multiple_games(self):
        """Run multiple games in parallel with real-time progress tracking"""
        self.summary_logger.info("\n" + "=" * 60)
        self.summary_logger.info("     SERPENT ARENA BENCHMARK RESULTS")
        self.summary_logger.info(
            f"     Running {self.iterations} games with {self.num_workers} parallel workers"
        )
        self.summary_logger.info("     Config:")
        self.summary_logger.info(f"         - Width: {self.game_config.width}")
        self.summary_logger.info(f"         - Height: {self.game_config.height}")
        self.summary_logger.info(f"         - Max turns: {self.game_config.max_turns}")
        self.summary_logger.info(f"         - P1: {self.game_config.p1_name}")
        self.summary_logger.info(f"           {self.game_config.p1_weights}")
        self.summary_logger.info(f"         - P2: {self.game_config.p2_name}")
        self.summary_logger.info(f"           {self.game_config.p2_weights}")
        self.summary_logger.info("=" * 60 + "\n")

        with ProcessPoolExecutor(max_workers=self.num_workers) as executor:
            future_to_game = {
                executor.submit(
                    run_single_game_worker,
                    game_num=game_num,
                    seed=seed,
                    output_dir=self.output_dir,
                    game_config=self.game_config,
                ): (game_num, seed)
                for game_num, seed in enumerate(self.game_seeds())
            }

            bar_fmt = (
                "{l_bar}{bar}| {n_fmt}/{total_fmt} "
                "[{elapsed}<{remaining}, {rate_fmt}] {postfix}"
            )
            with tqdm(
                total=self.iterations,
                desc="Running games",
                unit="game",
                bar_format=bar_fmt,
            ) as pbar:
                for future in as_completed(future_to_game):
                    game_num, seed = future_to_game[future]
                    try:
                        self.record_result(future.result())
                    except Exception as e:
                        self.error_logger.error(
                            f"Game {game_num} (seed {seed}) failed with exception: {e}"
                        )
                        self.record_result(None)

                    pbar.set_postfix(
                        {
                            "P1": self.results["p1_wins"],
                            "P2": self.results["p2_wins"],
                            "Draws": self.results["draws"],
                        },
                        refresh=True,
                    )
                    pbar.update(1)

        self.summary_logger.info("=" * 60)
        self.summary_logger.info("     Summary:")
        self.summary_logger.info(f"         - Total Games: {self.iterations}")
        self.summary_logger.info(f"         - P1 Wins: {self.results['p1_wins']}")
        self.summary_logger.info(f"         - P2 Wins: {self.results['p2_wins']}")
        self.summary_logger.info(f"         - Draws: {self.results['draws']}")
        if self.results["skipped"]:
            self.summary_logger.info(f"         - Skipped: {self.results['skipped']}")
        self.summary_logger.info(f"         - Final Winner: {self.winner()}")
        self.summary_logger.info("=" * 60)
        return dict(self.results)

    def winner(self):
        if self.results["p1_wins"] > self.results["p2_wins"]:
            return self.game_config.p1_name
        elif self.results["p2_wins"] > self.results["p1_wins"]:
            return self.game_config.p2_name
        return "Draw"


def run_single_game_worker(game_num, seed, output_dir, game_config):
    """
    Play one arena game between the two configured profiles and store its record.
    Returns "p1", "p2" or "draw".
    """
    rules = ArenaRules(
        width=game_config.width, height=game_config.height, max_turns=game_config.max_turns
    )
    store = GameStore(f"{output_dir}/games")
    result = play_game(
        game_config.profiles(),
        rules=rules,
        seed=seed,
        store=store,
        game_id=f"game_{game_num}",
    )

    p1_id, p2_id = game_config.snake_ids()
    if result.winner == p1_id:
        return "p1"
    elif result.winner == p2_id:
        return "p2"
    return "draw"


def main():
    parser = argparse.ArgumentParser(description="Serpent arena benchmark")
    parser.add_argument("--iterations", type=int, default=100, help="Number of games to run")
    parser.add_argument("--workers", type=int, default=8, help="Number of parallel workers")
    parser.add_argument(
        "--config", default="profiles_config.json", help="Weight profiles config file"
    )
    parser.add_argument("--p1", required=True, help="Name of the first profile")
    parser.add_argument("--p2", required=True, help="Name of the second profile")
    parser.add_argument("--width", type=int, default=11)
    parser.add_argument("--height", type=int, default=11)
    args = parser.parse_args()

    profiles, _, _, _ = load_profiles_config(args.config)
    weights = {p["name"]: p["weights"] for p in profiles}
    for name in (args.p1, args.p2):
        if name not in weights:
            parser.error(f"Unknown profile: {name}")

    game_config = GameConfig(
        width=args.width,
        height=args.height,
        p1_name=args.p1,
        p1_weights=weights[args.p1],
        p2_name=args.p2,
        p2_weights=weights[args.p2],
    )
    benchmark_runner = BenchmarkRunner(
        iterations=args.iterations, game_config=game_config, num_workers=args.workers
    )
    benchmark_runner.run_multiple_games()


if __name__ == "__main__":
    main()
