"""
Key Handler - Translates raw blessed keystrokes into engine events.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from blessed.keyboard import Keystroke

logger = logging.getLogger(__name__)

UP = 'up'
DOWN = 'down'
ENTER = 'enter'
ESCAPE = 'escape'
BACKSPACE = 'backspace'
CHAR = 'char'
RESIZE = 'resize'

_NAMED = {
    'KEY_UP': UP,
    'KEY_DOWN': DOWN,
    'KEY_ENTER': ENTER,
    'KEY_ESCAPE': ESCAPE,
    'KEY_BACKSPACE': BACKSPACE,
    'KEY_DELETE': BACKSPACE,
}

_CONTROL = {
    '\n': ENTER,
    '\r': ENTER,
    '\x1b': ESCAPE,
    '\x7f': BACKSPACE,
    '\x08': BACKSPACE,
}


@dataclass(frozen=True)
class KeyEvent:
    """One input event: a kind plus the typed character for CHAR events."""
    kind: str
    char: str = ''


def translate(keystroke: Optional[Keystroke]) -> Optional[KeyEvent]:
    """Map a keystroke to a KeyEvent, or None for timeouts and keys we don't use."""
    if not keystroke:
        return None

    if keystroke.is_sequence:
        kind = _NAMED.get(keystroke.name)
        if kind is None:
            logger.debug(f'Ignoring key {keystroke.name}')
            return None
        return KeyEvent(kind)

    text = str(keystroke)
    if text in _CONTROL:
        return KeyEvent(_CONTROL[text])
    if len(text) == 1 and text.isprintable():
        return KeyEvent(CHAR, text)

    logger.debug(f'Ignoring unprintable input {text!r}')
    return None
