"""
Event-based input source
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

MOVE = "move"
RESTART = "restart"
KEEP_PLAYING = "keepPlaying"

# Common key names mapped onto the engine's direction numbering
KEY_TO_DIRECTION = {
    "up": 0, "w": 0, "k": 0,
    "right": 1, "d": 1, "l": 1,
    "down": 2, "s": 2, "j": 2,
    "left": 3, "a": 3, "h": 3,
}


class InputManager:
    """Registry of callbacks keyed by event name"""

    def __init__(self):
        self.events: Dict[str, List[Callable[..., Any]]] = defaultdict(list)

    def on(self, event: str, callback: Callable[..., Any]) -> None:
        """Register callback for event"""
        self.events[event].append(callback)

    def off(self, event: str, callback: Callable[..., Any]) -> None:
        """Unregister callback"""
        if callback in self.events.get(event, []):
            self.events[event].remove(callback)

    def emit(self, event: str, *args: Any) -> None:
        """Invoke every callback registered for event, in registration order"""
        callbacks = self.events.get(event)
        if not callbacks:
            logger.debug(f"No handlers for input event {event!r}")
            return
        for callback in list(callbacks):
            callback(*args)

    def press(self, key: str) -> bool:
        """Translate a key name into an event; False if the key is unbound"""
        key = key.lower()
        if key in KEY_TO_DIRECTION:
            self.emit(MOVE, KEY_TO_DIRECTION[key])
        elif key == "r":
            self.emit(RESTART)
        elif key == "c":
            self.emit(KEEP_PLAYING)
        else:
            return False
        return True
