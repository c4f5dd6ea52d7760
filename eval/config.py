# data class for arena matchup configuration
from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Dict, Tuple

from serpent.scoring import ScoreWeights


@dataclass
class GameConfig:
    width: int = 11
    height: int = 11
    max_turns: int = 500
    round_robin: str = ""
    p1_name: str = "Baseline"
    p1_weights: ScoreWeights = field(default_factory=ScoreWeights)
    p2_name: str = "Challenger"
    p2_weights: ScoreWeights = field(default_factory=ScoreWeights)

    def snake_ids(self) -> Tuple[str, str]:
        """Board ids for the two sides; a profile playing itself gets numbered ids."""
        if self.p1_name == self.p2_name:
            return f"{self.p1_name}_1", f"{self.p2_name}_2"
        return self.p1_name, self.p2_name

    def profiles(self) -> Dict[str, ScoreWeights]:
        p1_id, p2_id = self.snake_ids()
        return {p1_id: self.p1_weights, p2_id: self.p2_weights}


def load_profiles_config(path="profiles_config.json"):
    """Read weight profiles and tournament settings.

    Expected layout::

        {
          "profiles": [{"name": "Baseline", "weights": {"territory": 2}}, ...],
          "tournament_settings": {"iterations_per_matchup": 100, "workers": 8}
        }

    Missing weights fall back to the defaults.
    """
    config_path = Path(path)
    try:
        with open(config_path) as f:
            config = json.load(f)
        raw_profiles = config.get("profiles", [])
        if not raw_profiles:
            raise ValueError(f"No profiles defined in {config_path}")
        profiles = [
            {"name": p["name"], "weights": ScoreWeights.from_dict(p.get("weights", {}))}
            for p in raw_profiles
        ]
        names = [p["name"] for p in profiles]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate profile names in {config_path}")
        settings = config.get("tournament_settings", {})
        iterations = settings.get("iterations_per_matchup", 100)
        workers = settings.get("workers", 8)
        return profiles, settings, iterations, workers
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {config_path}: {e}")
    except FileNotFoundError:
        raise ValueError(f"File not found: {config_path}")
    except KeyError as e:
        raise ValueError(f"Key error in {config_path}: {e}")
    except ValueError:
        raise
    except Exception as e:
        raise ValueError(f"Error loading {config_path}: {e}")
