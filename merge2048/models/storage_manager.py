"""
Storage backends for the current game snapshot and the best score
"""

import json
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

GAME_STATE_FILE = "game_state.json"
BEST_SCORE_FILE = "best_score.json"


class MemoryStorageManager:
    """Keeps the snapshot and best score in memory"""

    def __init__(self, game_state: Optional[Dict[str, Any]] = None, best_score: int = 0):
        self.game_state = deepcopy(game_state)
        self.best_score = best_score

    def load(self) -> Optional[Dict[str, Any]]:
        return deepcopy(self.game_state)

    def save(self, snapshot: Dict[str, Any]) -> None:
        self.game_state = deepcopy(snapshot)

    def clear(self) -> None:
        self.game_state = None

    def get_best_score(self) -> int:
        return self.best_score

    def set_best_score(self, score: int) -> None:
        self.best_score = score


class JsonFileStorageManager:
    """Persists the snapshot and best score as JSON files in ``state_dir``"""

    def __init__(self, state_dir: Union[str, Path] = "game_state"):
        self.state_dir = Path(state_dir)
        logger.debug(f"Using game state directory: {self.state_dir.resolve()}")

    @property
    def game_state_path(self) -> Path:
        return self.state_dir / GAME_STATE_FILE

    @property
    def best_score_path(self) -> Path:
        return self.state_dir / BEST_SCORE_FILE

    def _read_json(self, path: Path) -> Optional[Any]:
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable state file {path}: {e}")
            return None

    def _write_json(self, path: Path, data: Any) -> None:
        self.state_dir.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)

    def load(self) -> Optional[Dict[str, Any]]:
        return self._read_json(self.game_state_path)

    def save(self, snapshot: Dict[str, Any]) -> None:
        self._write_json(self.game_state_path, snapshot)

    def clear(self) -> None:
        self.game_state_path.unlink(missing_ok=True)

    def get_best_score(self) -> int:
        data = self._read_json(self.best_score_path)
        if isinstance(data, dict):
            score = data.get("best_score", 0)
            if isinstance(score, int) and not isinstance(score, bool) and score >= 0:
                return score
        if data is not None:
            logger.warning(f"Ignoring malformed best score in {self.best_score_path}")
        return 0

    def set_best_score(self, score: int) -> None:
        self._write_json(self.best_score_path, {"best_score": score})
