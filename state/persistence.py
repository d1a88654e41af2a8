# state/persistence.py
import json
from pathlib import Path

from .game_state import GameState


def _write_json(data: dict, path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return path


def _read_json(path) -> dict:
    with open(Path(path), "r", encoding="utf-8") as f:
        return json.load(f)


def save_state(game_state: GameState, path: str) -> Path:
    """
    Save a game transcript to disk as JSON.
    Args:
        game_state (GameState): The game state to save.
        path (str): The file path to save the game state to.
    """
    return _write_json(game_state.to_dict(), path)


def load_state(path: str) -> GameState:
    """
    Load a game transcript from disk.
    Args:
        path (str): The file path to load the game state from.
    Returns:
        GameState: The loaded game state."""
    return GameState.from_dict(_read_json(path))


def save_results(result, path: str) -> Path:
    """
    Save benchmark results (a BenchmarkResult or its dict) as JSON.
    Args:
        result: BenchmarkResult or dict.
        path (str): Target file.
    """
    data = result if isinstance(result, dict) else result.to_dict()
    return _write_json(data, path)


def load_results(path: str) -> dict:
    """Load benchmark results saved with save_results, as a dict."""
    return _read_json(path)
