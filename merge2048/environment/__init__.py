"""Environment subpackage: grid, rules engine and gym wrapper."""

from .grid import Grid, Position, Tile, TileSnapshot
from .game_manager import Direction, GameManager
from .gym_2048_env import Gym2048Env

__all__ = ["Direction", "GameManager", "Grid", "Gym2048Env", "Position", "Tile", "TileSnapshot"]
