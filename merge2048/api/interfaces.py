"""
Collaborator contracts consumed by the game manager
"""

from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Protocol

if TYPE_CHECKING:
    from merge2048.environment.grid import Grid


class InputSource(Protocol):
    """Delivers ``move``, ``restart`` and ``keepPlaying`` events"""

    def on(self, event: str, callback: Callable[..., Any]) -> None: ...


class Actuator(Protocol):
    """Presentation sink"""

    def render(self, grid: "Grid", metadata: Dict[str, Any]) -> None:
        """Draw ``grid`` with ``score``, ``over``, ``won``, ``bestScore`` and ``terminated``"""
        ...

    def clear_overlay(self) -> None:
        """Dismiss any win or game over banner"""
        ...


class StorageManager(Protocol):
    """Persistence of the current game and the best score"""

    def load(self) -> Optional[Dict[str, Any]]: ...

    def save(self, snapshot: Dict[str, Any]) -> None: ...

    def clear(self) -> None: ...

    def get_best_score(self) -> int: ...

    def set_best_score(self, score: int) -> None: ...
