"""
Game configuration with environment overrides
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class GameConfig:
    """Tunable rules for a game of 2048"""
    size: int = 4
    start_tiles: int = 2
    win_value: int = 2048
    four_probability: float = 0.1  # chance that a spawned tile is a 4
    seed: Optional[int] = None
    # Directory used by the JSON file storage
    state_dir: str = "game_state"

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ``ValueError`` for settings the engine cannot play with"""
        if self.size < 2:
            raise ValueError(f"size must be at least 2, got {self.size}")
        if not 0 <= self.start_tiles <= self.size * self.size:
            raise ValueError(f"start_tiles must be between 0 and {self.size * self.size}, got {self.start_tiles}")
        if self.win_value < 4 or self.win_value & (self.win_value - 1):
            raise ValueError(f"win_value must be a power of two >= 4, got {self.win_value}")
        if not 0.0 <= self.four_probability <= 1.0:
            raise ValueError(f"four_probability must be within [0, 1], got {self.four_probability}")

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    @classmethod
    def from_env(cls, prefix: str = "MERGE2048_") -> "GameConfig":
        """Build a config from ``MERGE2048_*`` environment variables"""
        defaults = cls()
        seed = os.getenv(f"{prefix}SEED")
        return cls(
            size=int(os.getenv(f"{prefix}SIZE", defaults.size)),
            start_tiles=int(os.getenv(f"{prefix}START_TILES", defaults.start_tiles)),
            win_value=int(os.getenv(f"{prefix}WIN_VALUE", defaults.win_value)),
            four_probability=float(os.getenv(f"{prefix}FOUR_PROBABILITY", defaults.four_probability)),
            seed=int(seed) if seed else None,
            state_dir=os.getenv(f"{prefix}STATE_DIR", defaults.state_dir),
        )
