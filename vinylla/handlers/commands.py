"""
Command Parser - Tokenizes a command line and maps it to a command object.

    login
    add <title> <artist>
    remove
    quit

Arguments containing spaces are quoted: add "Kind of Blue" "Miles Davis"
"""
import shlex
import logging
from dataclasses import dataclass
from typing import Optional, List, Union

from ..errors import UnknownCommand, UsageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginCommand:
    pass


@dataclass(frozen=True)
class AddCommand:
    title: str
    artist: str


@dataclass(frozen=True)
class RemoveCommand:
    pass


@dataclass(frozen=True)
class QuitCommand:
    pass


Command = Union[LoginCommand, AddCommand, RemoveCommand, QuitCommand]


def _no_args(verb: str, cls):
    def build(args: List[str]) -> Command:
        if args:
            raise UsageError(f'"{verb}" takes no arguments')
        return cls()
    return build


def _add(args: List[str]) -> Command:
    if len(args) != 2:
        raise UsageError('Usage: add "<title>" "<artist>" (quote names with spaces)')
    title, artist = (arg.strip() for arg in args)
    if not title or not artist:
        raise UsageError('Title and artist must not be empty')
    return AddCommand(title=title, artist=artist)


COMMANDS = {
    'login': _no_args('login', LoginCommand),
    'add': _add,
    'remove': _no_args('remove', RemoveCommand),
    'quit': _no_args('quit', QuitCommand),
}


def tokenize(line: str) -> List[str]:
    """Split a command line with shell-style quoting. Raises UsageError."""
    try:
        return shlex.split(line)
    except ValueError as e:
        raise UsageError(f'Could not parse command: {e}') from e


def parse(line: str) -> Optional[Command]:
    """
    Parse a command line.

    Returns None for a blank line. Raises UnknownCommand for an unknown
    verb and UsageError for a known verb with bad arguments.
    """
    tokens = tokenize(line)
    if not tokens:
        return None

    verb, args = tokens[0], tokens[1:]
    build = COMMANDS.get(verb.lower())
    if build is None:
        raise UnknownCommand(verb)
    command = build(args)
    logger.debug(f'Parsed {line!r} as {command}')
    return command
