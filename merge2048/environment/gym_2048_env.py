"""gym_2048_env.py
===================
Gymnasium-compatible wrapper around :class:`GameManager`.

The wrapper runs the engine headless: an in-memory storage manager and a
null actuator, so stepping never touches the disk or the terminal.

Observation Space
-----------------
* **Shape**: ``(size, size)``, row-major (``obs[y][x]``)
* **dtype**: ``int32``, raw tile values (0,2,4,...)

Action Space
------------
``Discrete(4)`` using the engine's numbering: 0=up, 1=right, 2=down, 3=left.

Reward Function
---------------
The score gained by the move, i.e. the sum of the merged tile values.
A move that changes nothing yields ``0`` and leaves the board as it was.
"""

from __future__ import annotations

import random
from typing import Any, Dict, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from merge2048.api.console_actuator import NullActuator
from merge2048.environment.game_manager import GameManager
from merge2048.models.game_config import GameConfig
from merge2048.models.storage_manager import MemoryStorageManager


class Gym2048Env(gym.Env):
    metadata = {"render_modes": ["ansi"], "render_fps": 15}

    def __init__(self, config: GameConfig | None = None, *, stop_on_win: bool = False,
                 render_mode: str | None = None):
        super().__init__()
        self.config = config or GameConfig()
        self.stop_on_win = stop_on_win
        self.render_mode = render_mode
        self._rng = random.Random(self.config.seed)
        self.game = GameManager(
            self.config,
            actuator=NullActuator(),
            storage=MemoryStorageManager(),
            rng=self._rng,
        )
        size = self.config.size
        # Largest tile a full board can build, capped to the int32 observation
        high = min(2 ** (size * size + 1), int(np.iinfo(np.int32).max))
        self.action_space = spaces.Discrete(4)
        self.observation_space = spaces.Box(low=0, high=high, shape=(size, size), dtype=np.int32)

    # ------------------------------------------------------------------ Gym API
    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)
        if seed is not None:
            self._rng.seed(seed)
        self.game.restart()
        return self.get_state(), self._info(moved=False)

    def step(self, action: int):  # type: ignore[override]
        score_before = self.game.score
        moved = self.game.move(int(action))
        reward = float(self.game.score - score_before)

        # Without stop_on_win the episode runs past the win value
        if self.game.won and not self.stop_on_win and not self.game.continue_playing:
            self.game.keep_playing()

        terminated = self.game.over or (self.stop_on_win and self.game.won)
        return self.get_state(), reward, terminated, False, self._info(moved=moved)

    # ------------------------------------------------------------------ Render
    def render(self):
        lines = ["|".join(f"{v:5d}" if v else "     " for v in row) for row in self.game.grid.to_rows()]
        lines.append(f"Score: {self.game.score}")
        text = "\n".join(lines)
        if self.render_mode == "ansi":
            return text
        print(text + "\n")
        return None

    def close(self):
        pass

    # ------------------------------------------------------------------ Helpers
    def is_done(self) -> bool:
        """Check if the game is over"""
        return self.game.over

    def get_state(self) -> np.ndarray:
        """Current board as a numpy array"""
        return np.array(self.game.grid.to_rows(), dtype=np.int32)

    def get_legal_actions(self) -> list[int]:
        return [int(direction) for direction in self.game.legal_moves()]

    def get_score(self) -> int:
        return self.game.score

    def _info(self, *, moved: bool) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "moved": moved,
            "won": self.game.won,
            "max_tile": self.game.max_tile(),
        }
