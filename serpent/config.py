# data class for snake service configuration
from dataclasses import dataclass, field, fields, replace
import json
import os
from pathlib import Path

from .scoring import ScoreWeights


@dataclass
class EngineConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    move_timeout_ms: int = 400
    workers: int = 1
    games_dir: str = "games"
    record_games: bool = True
    weights: ScoreWeights = field(default_factory=ScoreWeights)
    author: str = ""
    color: str = "#3F9E4D"
    head: str = "default"
    tail: str = "default"
    version: str = "0.1.0"


# environment variable -> (field, converter)
ENV_OVERRIDES = {
    "HOST": ("host", str),
    "PORT": ("port", int),
    "MOVE_TIMEOUT_MS": ("move_timeout_ms", int),
    "WORKERS": ("workers", int),
    "GAMES_DIR": ("games_dir", str),
}


def load_engine_config(path=None, environ=None):
    """Load the service config from an optional JSON file, then apply env overrides."""
    config = EngineConfig()
    if path is not None:
        config = _load_config_file(Path(path))

    environ = os.environ if environ is None else environ
    overrides = {}
    for name, (attr, convert) in ENV_OVERRIDES.items():
        raw = environ.get(name)
        if raw is None or raw == "":
            continue
        try:
            overrides[attr] = convert(raw)
        except ValueError:
            raise ValueError(f"Invalid value for {name}: {raw!r}")
    return replace(config, **overrides)


def _load_config_file(config_path):
    try:
        with open(config_path) as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("top level must be an object")
        known = {f.name for f in fields(EngineConfig)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"unknown keys: {', '.join(sorted(unknown))}")
        if "weights" in data:
            data["weights"] = ScoreWeights.from_dict(data["weights"])
        return EngineConfig(**data)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {config_path}: {e}")
    except FileNotFoundError:
        raise ValueError(f"File not found: {config_path}")
    except (TypeError, ValueError) as e:
        raise ValueError(f"Error loading {config_path}: {e}")
