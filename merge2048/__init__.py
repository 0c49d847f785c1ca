"""Rules engine for the 2048 sliding-tile puzzle."""

from .environment import Direction, GameManager, Grid, Position, Tile
from .models import GameConfig

__version__ = "1.0.0"

__all__ = ["Direction", "GameManager", "GameConfig", "Grid", "Position", "Tile"]
