"""
Grid primitives for the 2048 rules engine
=========================================
The grid owns an ``N x N`` array of slots, each holding a :class:`Tile` or
``None``. It knows nothing about the rules of the game: placement, removal
and queries only. :class:`~merge2048.environment.game_manager.GameManager`
drives it.

Slots are addressed as ``cells[x][y]`` (column first), which is also the
layout of the serialized snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, NamedTuple, Optional, Protocol, Sequence, Tuple, TypeVar

T = TypeVar("T")

__all__ = [
    "Position",
    "TileSnapshot",
    "Tile",
    "Grid",
    "RandomSource",
]


class Position(NamedTuple):
    """Cell coordinates on the grid."""
    x: int
    y: int


class RandomSource(Protocol):
    """Randomness needed by the engine. ``random.Random`` satisfies it."""

    def random(self) -> float: ...

    def choice(self, seq: Sequence[T]) -> T: ...


@dataclass(frozen=True)
class TileSnapshot:
    """Value copy of a tile consumed by a merge."""
    value: int
    position: Position


class Tile:
    """A numbered tile sitting on the grid."""

    def __init__(self, position: Tuple[int, int], value: int = 2):
        self.x, self.y = position
        self.value = value
        self.previous_position: Optional[Position] = None
        self.merged_from: Optional[Tuple[TileSnapshot, TileSnapshot]] = None

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)

    def save_position(self) -> None:
        self.previous_position = Position(self.x, self.y)

    def update_position(self, position: Tuple[int, int]) -> None:
        self.x, self.y = position

    def snapshot(self) -> TileSnapshot:
        return TileSnapshot(self.value, self.position)

    def serialize(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "value": self.value}

    def __repr__(self) -> str:
        return f"Tile(({self.x}, {self.y}), {self.value})"


class Grid:
    """Fixed-size container of optional tiles."""

    def __init__(self, size: int, previous_state: Optional[Sequence[Sequence[Any]]] = None):
        if size < 1:
            raise ValueError(f"Grid size must be positive, got {size}")
        self.size = size
        self.cells: List[List[Optional[Tile]]] = self.empty()
        if previous_state is not None:
            self._load(previous_state)

    @classmethod
    def from_state(cls, size: int, cells: Sequence[Sequence[Any]]) -> "Grid":
        """Rebuild a grid from its serialized ``cells``.

        Each cell is ``None`` or a mapping with at least a ``value`` key;
        ``cells[x][y]`` becomes the tile at ``(x, y)``.
        """
        return cls(size, cells)

    def empty(self) -> List[List[Optional[Tile]]]:
        return [[None] * self.size for _ in range(self.size)]

    def _load(self, state: Sequence[Sequence[Any]]) -> None:
        for x in range(self.size):
            for y in range(self.size):
                cell = state[x][y]
                if cell is not None:
                    # The slot decides the position so tiles and slots agree
                    self.cells[x][y] = Tile((x, y), cell["value"])

    # ----------------------------------------------------- Queries
    def within_bounds(self, position: Tuple[int, int]) -> bool:
        x, y = position
        return 0 <= x < self.size and 0 <= y < self.size

    def cell_content(self, position: Tuple[int, int]) -> Optional[Tile]:
        """Tile at ``position``; ``None`` when empty or off the grid."""
        if self.within_bounds(position):
            x, y = position
            return self.cells[x][y]
        return None

    def cell_occupied(self, position: Tuple[int, int]) -> bool:
        return self.cell_content(position) is not None

    def cell_available(self, position: Tuple[int, int]) -> bool:
        return self.within_bounds(position) and not self.cell_occupied(position)

    def available_cells(self) -> List[Position]:
        cells: List[Position] = []

        def collect(x: int, y: int, tile: Optional[Tile]) -> None:
            if tile is None:
                cells.append(Position(x, y))

        self.each_cell(collect)
        return cells

    def cells_available(self) -> bool:
        return any(tile is None for column in self.cells for tile in column)

    def random_available_cell(self, rng: RandomSource) -> Optional[Position]:
        cells = self.available_cells()
        if cells:
            return rng.choice(cells)
        return None

    def each_cell(self, visitor: Callable[[int, int, Optional[Tile]], None]) -> None:
        for x in range(self.size):
            for y in range(self.size):
                visitor(x, y, self.cells[x][y])

    def tiles(self) -> Iterator[Tile]:
        for column in self.cells:
            for tile in column:
                if tile is not None:
                    yield tile

    # ----------------------------------------------------- Mutation
    def insert_tile(self, tile: Tile) -> None:
        self.cells[tile.x][tile.y] = tile

    def remove_tile(self, tile: Tile) -> None:
        self.cells[tile.x][tile.y] = None

    def move_tile(self, tile: Tile, position: Tuple[int, int]) -> None:
        self.cells[tile.x][tile.y] = None
        tile.update_position(position)
        self.cells[tile.x][tile.y] = tile

    # ----------------------------------------------------- Export
    def serialize(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "cells": [
                [tile.serialize() if tile else None for tile in column]
                for column in self.cells
            ],
        }

    def to_rows(self) -> List[List[int]]:
        """Row-major tile values, ``0`` for empty cells."""
        return [
            [self.cells[x][y].value if self.cells[x][y] else 0 for x in range(self.size)]
            for y in range(self.size)
        ]
