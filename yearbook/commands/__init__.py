from .abstract import Command, CommandManager
from .highlight import ApplyHighlightCommand

__all__ = [
    "ApplyHighlightCommand",
    "Command",
    "CommandManager",
]
