"""
2048 Game Manager
=================
Owns the game state (score, over, won, continue-playing) and resolves moves
over a :class:`~merge2048.environment.grid.Grid`.

A move walks the grid starting from the edge the tiles travel towards, so a
tile never jumps over another tile that has not moved yet. Each tile slides
to the farthest empty cell along the move vector and merges with the tile
beyond it when both carry the same value, unless that tile was itself
produced by a merge during the same move.

Collaborators are injected at construction:

    * an input source whose ``move``/``restart``/``keepPlaying`` events are
      bound to :meth:`GameManager.move`, :meth:`GameManager.restart` and
      :meth:`GameManager.keep_playing`;
    * an actuator that renders the grid after every state change;
    * a storage manager holding the current snapshot and the best score.

Randomness (spawn cell and spawn value) comes from an injected source so
games can be replayed exactly.
"""

from __future__ import annotations

import logging
import random
from enum import IntEnum
from typing import Any, Dict, List, NamedTuple, Optional, Tuple, Union

from merge2048.api.console_actuator import NullActuator
from merge2048.api.input_manager import KEEP_PLAYING, MOVE, RESTART, InputManager
from merge2048.api.interfaces import Actuator, InputSource, StorageManager
from merge2048.environment.grid import Grid, Position, RandomSource, Tile
from merge2048.models.game_config import GameConfig
from merge2048.models.snapshot import parse_snapshot
from merge2048.models.storage_manager import MemoryStorageManager

logger = logging.getLogger(__name__)

__all__ = [
    "Direction",
    "VECTORS",
    "GameManager",
]


class Direction(IntEnum):
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @classmethod
    def parse(cls, value: Union["Direction", int, str]) -> Optional["Direction"]:
        """Map an int (0-3) or a name ("up", "LEFT", ...) onto a direction."""
        if isinstance(value, bool):
            return None
        if isinstance(value, str):
            return cls.__members__.get(value.upper())
        try:
            return cls(value)
        except (ValueError, TypeError):
            return None


VECTORS: Dict[Direction, Position] = {
    Direction.UP: Position(0, -1),
    Direction.RIGHT: Position(1, 0),
    Direction.DOWN: Position(0, 1),
    Direction.LEFT: Position(-1, 0),
}


class Traversals(NamedTuple):
    x: List[int]
    y: List[int]


class FarthestPosition(NamedTuple):
    farthest: Position
    next: Position  # used to check whether a merge is possible


class GameManager:
    """Rules engine and state holder for one game."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        input_manager: Optional[InputSource] = None,
        actuator: Optional[Actuator] = None,
        storage: Optional[StorageManager] = None,
        rng: Optional[RandomSource] = None,
    ):
        self.config = config or GameConfig()
        self.size = self.config.size
        self.start_tiles = self.config.start_tiles
        self.win_value = self.config.win_value
        self.rng: RandomSource = rng if rng is not None else random.Random(self.config.seed)

        self.input_manager = input_manager if input_manager is not None else InputManager()
        self.actuator = actuator if actuator is not None else NullActuator()
        self.storage = storage if storage is not None else MemoryStorageManager()

        self.grid = Grid(self.size)
        self.score: int = 0
        self.over: bool = False
        self.won: bool = False
        self.continue_playing: bool = False

        self.input_manager.on(MOVE, self.move)
        self.input_manager.on(RESTART, self.restart)
        self.input_manager.on(KEEP_PLAYING, self.keep_playing)

        self.setup()

    # ----------------------------------------------------- Lifecycle
    def restart(self) -> None:
        """Throw the current game away and start a new one"""
        logger.info("Restarting game")
        self.storage.clear()
        self.actuator.clear_overlay()
        self.setup()

    def keep_playing(self) -> None:
        """Keep playing after reaching the win value"""
        self.continue_playing = True
        self.actuator.clear_overlay()

    def is_game_terminated(self) -> bool:
        return self.over or (self.won and not self.continue_playing)

    def setup(self) -> None:
        """Resume the stored game if there is one, otherwise start fresh"""
        snapshot = parse_snapshot(self.storage.load())

        if snapshot is not None:
            state = snapshot.to_dict()
            self.size = snapshot.grid.size
            self.grid = Grid.from_state(self.size, state["grid"]["cells"])
            self.score = snapshot.score
            self.won = snapshot.won
            self.continue_playing = snapshot.keep_playing
            # Stored "over" is not trusted; derive it from the restored grid
            self.over = not self.moves_available()
            if self.over != snapshot.over:
                logger.warning(f"Stored game had over={snapshot.over}, recomputed over={self.over}")
            logger.info(f"Restored game: size={self.size}, score={self.score}, won={self.won}")
        else:
            self.size = self.config.size
            self.grid = Grid(self.size)
            self.score = 0
            self.over = False
            self.won = False
            self.continue_playing = False
            self.add_start_tiles()
            logger.info(f"Started new {self.size}x{self.size} game")

        self.actuate()

    def add_start_tiles(self) -> None:
        for _ in range(self.start_tiles):
            self.add_random_tile()

    def add_random_tile(self) -> Optional[Tile]:
        """Spawn a 2 (or, less often, a 4) on a random empty cell"""
        if not self.grid.cells_available():
            return None
        value = 2 if self.rng.random() < 1.0 - self.config.four_probability else 4
        tile = Tile(self.grid.random_available_cell(self.rng), value)
        self.grid.insert_tile(tile)
        return tile

    def actuate(self) -> None:
        """Push the current state to storage and to the actuator"""
        best_score = self.storage.get_best_score()
        if best_score < self.score:
            self.storage.set_best_score(self.score)
            best_score = self.score

        # A lost game is not resumable, so drop it from storage
        if self.over:
            self.storage.clear()
        else:
            self.storage.save(self.serialize())

        self.actuator.render(self.grid, self.metadata(best_score))

    def metadata(self, best_score: int) -> Dict[str, Any]:
        return {
            "score": self.score,
            "over": self.over,
            "won": self.won,
            "bestScore": best_score,
            "terminated": self.is_game_terminated(),
        }

    def serialize(self) -> Dict[str, Any]:
        return {
            "grid": self.grid.serialize(),
            "score": self.score,
            "over": self.over,
            "won": self.won,
            "keepPlaying": self.continue_playing,
        }

    # ----------------------------------------------------- Moves
    def prepare_tiles(self) -> None:
        """Save every tile position and forget last move's merges"""
        for tile in self.grid.tiles():
            tile.merged_from = None
            tile.save_position()

    def move(self, direction: Union[Direction, int, str]) -> bool:
        """Slide all tiles towards ``direction``.

        Returns True when at least one tile moved; the new tile, the game
        over check and the actuator update only happen in that case.
        """
        if self.is_game_terminated():
            return False

        parsed = Direction.parse(direction)
        if parsed is None:
            logger.warning(f"Ignoring invalid direction: {direction!r}")
            return False

        vector = VECTORS[parsed]
        traversals = self.build_traversals(vector)
        moved = False

        self.prepare_tiles()

        for x in traversals.x:
            for y in traversals.y:
                cell = Position(x, y)
                tile = self.grid.cell_content(cell)
                if tile is None:
                    continue

                positions = self.find_farthest_position(cell, vector)
                next_tile = self.grid.cell_content(positions.next)

                # Only one merge per tile per move
                if next_tile is not None and next_tile.value == tile.value and next_tile.merged_from is None:
                    merged = Tile(positions.next, tile.value * 2)
                    merged.merged_from = (tile.snapshot(), next_tile.snapshot())

                    self.grid.insert_tile(merged)
                    self.grid.remove_tile(tile)

                    # Converge the two tiles' positions
                    tile.update_position(positions.next)

                    self.score += merged.value
                    if merged.value >= self.win_value and not self.won:
                        self.won = True
                        logger.info(f"Reached {merged.value}, game won with score {self.score}")
                else:
                    self.grid.move_tile(tile, positions.farthest)

                if cell != tile.position:
                    moved = True

        if not moved:
            logger.debug(f"Move {parsed.name} changed nothing")
            return False

        self.add_random_tile()

        if not self.moves_available():
            self.over = True
            logger.info(f"Game over with score {self.score}")

        logger.debug(f"Move {parsed.name}: score={self.score}")
        self.actuate()
        return True

    def build_traversals(self, vector: Tuple[int, int]) -> Traversals:
        """Cell order for a move, starting at the edge tiles travel towards"""
        xs = list(range(self.size))
        ys = list(range(self.size))

        if vector[0] == 1:
            xs.reverse()
        if vector[1] == 1:
            ys.reverse()

        return Traversals(xs, ys)

    def find_farthest_position(self, cell: Tuple[int, int], vector: Tuple[int, int]) -> FarthestPosition:
        previous = Position(*cell)
        current = Position(previous.x + vector[0], previous.y + vector[1])

        # Progress towards the vector direction until an obstacle is found
        while self.grid.cell_available(current):
            previous = current
            current = Position(previous.x + vector[0], previous.y + vector[1])

        return FarthestPosition(farthest=previous, next=current)

    # ----------------------------------------------------- Queries
    def moves_available(self) -> bool:
        return self.grid.cells_available() or self.tile_matches_available()

    def tile_matches_available(self) -> bool:
        """Check for equal neighbours (the expensive part of the game over test)"""
        for tile in self.grid.tiles():
            for vector in VECTORS.values():
                other = self.grid.cell_content((tile.x + vector.x, tile.y + vector.y))
                if other is not None and other.value == tile.value:
                    return True
        return False

    def can_move(self, direction: Union[Direction, int, str]) -> bool:
        """Whether moving towards ``direction`` would change the grid"""
        parsed = Direction.parse(direction)
        if parsed is None:
            return False
        vector = VECTORS[parsed]
        for tile in self.grid.tiles():
            neighbour = Position(tile.x + vector.x, tile.y + vector.y)
            if not self.grid.within_bounds(neighbour):
                continue
            other = self.grid.cell_content(neighbour)
            if other is None or other.value == tile.value:
                return True
        return False

    def legal_moves(self) -> List[Direction]:
        """Directions that would be effective, empty once the game is terminated"""
        if self.is_game_terminated():
            return []
        return [direction for direction in Direction if self.can_move(direction)]

    def max_tile(self) -> int:
        return max((tile.value for tile in self.grid.tiles()), default=0)
