"""Collaborator contracts and the bundled input/presentation adapters."""

from .console_actuator import ConsoleActuator, NullActuator
from .input_manager import InputManager
from .interfaces import Actuator, InputSource, StorageManager

__all__ = ["Actuator", "ConsoleActuator", "InputManager", "InputSource", "NullActuator", "StorageManager"]
