"""
Vinylla Handlers - Keyboard input and command parsing.
"""
from .keys import KeyEvent, translate
from .commands import (
    parse, LoginCommand, AddCommand, RemoveCommand, QuitCommand,
)

__all__ = [
    'KeyEvent', 'translate',
    'parse', 'LoginCommand', 'AddCommand', 'RemoveCommand', 'QuitCommand',
]
