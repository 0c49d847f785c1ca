"""
Terminal rendering of the game grid
"""

from typing import TYPE_CHECKING, Any, Dict, Optional

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from merge2048.environment.grid import Grid

# Tile colours, roughly following the classic palette
TILE_STYLES = {
    2: "grey93",
    4: "wheat1",
    8: "orange1",
    16: "dark_orange",
    32: "red1",
    64: "red3",
    128: "yellow1",
    256: "gold1",
    512: "gold3",
    1024: "green_yellow",
    2048: "bold bright_yellow",
}


class NullActuator:
    """Discards every render; used headless and by the gym environment"""

    def render(self, grid: "Grid", metadata: Dict[str, Any]) -> None:
        pass

    def clear_overlay(self) -> None:
        pass


class ConsoleActuator:
    """Draws the grid as a rich table, with a banner once the game ends"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.message: Optional[str] = None
        self.last_metadata: Dict[str, Any] = {}

    def render(self, grid: "Grid", metadata: Dict[str, Any]) -> None:
        self.last_metadata = dict(metadata)
        self.console.print(self.build_table(grid))
        self.console.print(f"Score: [bold]{metadata['score']}[/bold]   Best: [bold]{metadata['bestScore']}[/bold]")

        if metadata.get("terminated"):
            if metadata.get("over"):
                self.message = "Game over!"
                self.console.print(f"[red]{self.message}")
            elif metadata.get("won"):
                self.message = "You win!"
                self.console.print(f"[green]{self.message}")

    def clear_overlay(self) -> None:
        self.message = None

    def build_table(self, grid: "Grid") -> Table:
        table = Table(show_header=False, show_lines=True)
        for _ in range(grid.size):
            table.add_column(justify="center", min_width=5)
        for row in grid.to_rows():
            table.add_row(*(self._cell(value) for value in row))
        return table

    @staticmethod
    def _cell(value: int) -> str:
        if not value:
            return ""
        style = TILE_STYLES.get(value, "bold magenta")
        return f"[{style}]{value}[/]"
