"""
Schema of the persisted game snapshot
"""

import logging
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

logger = logging.getLogger(__name__)


class TileState(BaseModel):
    """One occupied cell"""
    x: int = Field(ge=0)
    y: int = Field(ge=0)
    value: int

    @model_validator(mode="before")
    @classmethod
    def flatten_position(cls, data: Any) -> Any:
        # Older snapshots nest the coordinates under "position"
        if isinstance(data, dict) and isinstance(data.get("position"), dict):
            position = data["position"]
            data = {"x": position.get("x"), "y": position.get("y"), "value": data.get("value")}
        return data

    @field_validator("value")
    @classmethod
    def power_of_two(cls, value: int) -> int:
        if value < 2 or value & (value - 1):
            raise ValueError(f"tile value must be a power of two >= 2, got {value}")
        return value


class GridState(BaseModel):
    size: int = Field(ge=1)
    cells: List[List[Optional[TileState]]]

    @model_validator(mode="after")
    def cells_match_size(self) -> "GridState":
        if len(self.cells) != self.size:
            raise ValueError(f"expected {self.size} columns, got {len(self.cells)}")
        for x, column in enumerate(self.cells):
            if len(column) != self.size:
                raise ValueError(f"column {x} has {len(column)} cells, expected {self.size}")
            for y, tile in enumerate(column):
                if tile is not None and (tile.x, tile.y) != (x, y):
                    raise ValueError(f"tile at ({x}, {y}) records position ({tile.x}, {tile.y})")
        return self


class GameSnapshot(BaseModel):
    """Everything needed to resume a game"""
    model_config = ConfigDict(populate_by_name=True)

    grid: GridState
    score: int = Field(ge=0)
    over: bool = False
    won: bool = False
    keep_playing: bool = Field(default=False, alias="keepPlaying")

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


def parse_snapshot(data: Any) -> Optional[GameSnapshot]:
    """Validate a stored snapshot; ``None`` when absent or malformed."""
    if data is None:
        return None
    try:
        return GameSnapshot.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Discarding malformed game snapshot: {e.error_count()} error(s)")
        logger.debug(f"Snapshot validation errors: {e}")
        return None
