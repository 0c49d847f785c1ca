"""
Configuration, snapshot schema and storage for the 2048 engine
"""

from .game_config import GameConfig
from .snapshot import GameSnapshot, parse_snapshot
from .storage_manager import JsonFileStorageManager, MemoryStorageManager

__all__ = ["GameConfig", "GameSnapshot", "JsonFileStorageManager", "MemoryStorageManager", "parse_snapshot"]
