"""
Run a round-robin tournament between weight profiles and compute TrueSkill ratings.
"""

import argparse
import json
import os
import random
from datetime import datetime
from pathlib import Path
from trueskill import Rating, rate_1vs1, global_env
from eval.config import GameConfig, load_profiles_config
from eval.pairwise_benchmark import BenchmarkRunner
from serpent.storage import GzipJSON


class TrueSkillTournament:
    def __init__(self, profiles, iterations=100, workers=8, tournament_id=None):
        """
        Args:
            profiles: List of dicts with keys: 'name', 'weights'
            iterations: Games per matchup
            workers: Parallel workers
        """
        self.profiles = profiles
        self.iterations = iterations
        self.workers = workers
        self.ratings = {profile["name"]: Rating() for profile in profiles}
        self.matchup_results = {}
        if tournament_id:
            self.round_robin = tournament_id
        else:
            self.round_robin = f"round_robin_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        self.output_dir = f"tournaments/{self.round_robin}"
        os.makedirs(self.output_dir, exist_ok=True)

        global_env()

    def matchups(self):
        pairs = []
        for i in range(len(self.profiles)):
            for j in range(i + 1, len(self.profiles)):
                pairs.append((self.profiles[i], self.profiles[j]))
        return pairs

    def run_tournament(self):
        """Run all pairwise matchups"""
        print("\n" + "=" * 70)
        print("     TRUESKILL ROUND-ROBIN TOURNAMENT")
        print(f"     Profiles: {', '.join([p['name'] for p in self.profiles])}")
        print(f"     Games per matchup: {self.iterations}")
        print("=" * 70 + "\n")

        matchups = self.matchups()
        print(f"Running {len(matchups)} matchups...\n")

        for idx, (profile1, profile2) in enumerate(matchups, 1):
            print(f"\n{'='*70}")
            print(f"Matchup {idx}/{len(matchups)}: {profile1['name']} vs {profile2['name']}")
            print(f"{'='*70}")

            game_config = GameConfig(
                round_robin=self.round_robin,
                p1_name=profile1["name"],
                p1_weights=profile1["weights"],
                p2_name=profile2["name"],
                p2_weights=profile2["weights"],
            )

            benchmark = BenchmarkRunner(
                iterations=self.iterations, game_config=game_config, num_workers=self.workers
            )
            benchmark.run_multiple_games()

            matchup_key = f"{profile1['name']}_vs_{profile2['name']}"
            self.matchup_results[matchup_key] = {
                "snake1": profile1["name"],
                "snake2": profile2["name"],
                "snake1_wins": benchmark.results["p1_wins"],
                "snake2_wins": benchmark.results["p2_wins"],
                "draws": benchmark.results["draws"],
            }

        self.calculate_trueskill_from_games()
        return self.save_rankings()

    def collect_games(self):
        """Winner of every stored game in the tournament directory"""
        all_games = []
        for matchup_dir in sorted(Path(self.output_dir).iterdir()):
            games_dir = matchup_dir / "games"
            if not matchup_dir.is_dir() or not games_dir.exists():
                continue
            if "_vs_" not in matchup_dir.name:
                continue
            snake1_name, snake2_name = matchup_dir.name.split("_vs_")

            for game_file in sorted(games_dir.glob("game_*.json.gz")):
                try:
                    winner = self.parse_game_winner(game_file, snake1_name, snake2_name)
                except Exception as e:
                    print(f"Warning: Could not parse {game_file}: {e}")
                    continue
                all_games.append(
                    {
                        "snake1": snake1_name,
                        "snake2": snake2_name,
                        "winner": winner,
                        "file": str(game_file),
                    }
                )
        return all_games

    def calculate_trueskill_from_games(self):
        """Calculate TrueSkill ratings by processing individual games in sequence"""
        self.ratings = {profile["name"]: Rating() for profile in self.profiles}

        all_games = self.collect_games()
        print(f"Found {len(all_games)} total games across all matchups")

        # Use a fixed seed for reproducibility
        rng = random.Random(42)
        rng.shuffle(all_games)

        for game in all_games:
            snake1 = game["snake1"]
            snake2 = game["snake2"]
            winner = game["winner"]

            if winner == snake1:
                self.ratings[snake1], self.ratings[snake2] = rate_1vs1(
                    self.ratings[snake1], self.ratings[snake2]
                )
            elif winner == snake2:
                self.ratings[snake2], self.ratings[snake1] = rate_1vs1(
                    self.ratings[snake2], self.ratings[snake1]
                )
            elif winner == "draw":
                self.ratings[snake1], self.ratings[snake2] = rate_1vs1(
                    self.ratings[snake1], self.ratings[snake2], drawn=True
                )

        print("[OK] TrueSkill ratings calculated\n")

    def parse_game_winner(self, game_file, snake1_name, snake2_name):
        """Read a stored game record and return the winner's name or 'draw'"""
        record = GzipJSON.load(Path(game_file).read_bytes())
        winner = record.get("winner")
        if winner in (snake1_name, snake2_name):
            return winner
        return "draw"

    def rankings(self):
        # Sort by conservative estimate mu - 3*sigma
        ranked = sorted(self.ratings.items(), key=lambda x: x[1].mu - 3 * x[1].sigma, reverse=True)
        return [
            {
                "rank": rank,
                "name": name,
                "mu": rating.mu,
                "sigma": rating.sigma,
                "conservative_skill": rating.mu - 3 * rating.sigma,
            }
            for rank, (name, rating) in enumerate(ranked, 1)
        ]

    def save_rankings(self):
        """Print final TrueSkill rankings and save to file"""
        print("\n" + "=" * 70)
        print("     FINAL TRUESKILL RANKINGS")
        print("=" * 70 + "\n")

        results = self.rankings()
        for entry in results:
            print(f"{entry['rank']}. {entry['name']}")
            print(f"   mu (mean): {entry['mu']:.2f}")
            print(f"   sigma (uncertainty): {entry['sigma']:.2f}")
            print(f"   Conservative skill: {entry['conservative_skill']:.2f}")
            print()

        output = {
            "timestamp": datetime.now().isoformat(),
            "iterations_per_matchup": self.iterations,
            "total_games": sum(
                r["snake1_wins"] + r["snake2_wins"] + r["draws"]
                for r in self.matchup_results.values()
            ),
            "rankings": results,
            "matchup_results": self.matchup_results,
            "profiles": {p["name"]: p["weights"].to_dict() for p in self.profiles},
        }

        output_file = f"{self.output_dir}/trueskill_results.json"
        with open(output_file, "w") as f:
            json.dump(output, f, indent=2)

        print(f"Results saved to: {output_file}")
        print("=" * 70 + "\n")
        return output


def main():
    parser = argparse.ArgumentParser(description="Run TrueSkill round-robin tournament")
    parser.add_argument(
        "--config", default="profiles_config.json", help="Weight profiles config file"
    )
    parser.add_argument("--iterations", type=int, default=None, help="Games per matchup")
    parser.add_argument("--workers", type=int, default=None, help="Number of parallel workers")
    parser.add_argument(
        "--tournament-id",
        type=str,
        default=None,
        help="Optional tournament ID (default: auto-generated)",
    )
    args = parser.parse_args()

    profiles, _, iterations, workers = load_profiles_config(args.config)
    if len(profiles) < 2:
        print("Error: Need at least 2 profiles for a tournament")
        return

    tournament = TrueSkillTournament(
        profiles,
        args.iterations or iterations,
        args.workers or workers,
        tournament_id=args.tournament_id,
    )
    tournament.run_tournament()


if __name__ == "__main__":
    main()
