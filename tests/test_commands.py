"""
Tests for command line parsing.
"""
from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from vinylla.handlers.commands import (
    parse, tokenize, LoginCommand, AddCommand, RemoveCommand, QuitCommand,
)
from vinylla.errors import UnknownCommand, UsageError


class TestParse:
    """Tests for the command grammar."""

    @pytest.mark.parametrize('line,expected', [
        ('login', LoginCommand()),
        ('remove', RemoveCommand()),
        ('quit', QuitCommand()),
        ('  quit  ', QuitCommand()),
        ('Login', LoginCommand()),
        ('REMOVE', RemoveCommand()),
    ])
    def test_simple_verbs(self, line, expected):
        assert parse(line) == expected

    def test_add_single_words(self):
        assert parse('add Nevermind Nirvana') == AddCommand(title='Nevermind', artist='Nirvana')

    def test_add_quoted(self):
        """Quoted arguments keep their spaces."""
        command = parse('add "Kind of Blue" \'Miles Davis\'')
        assert command == AddCommand(title='Kind of Blue', artist='Miles Davis')

    def test_blank_line(self):
        assert parse('') is None
        assert parse('   ') is None

    def test_unknown_verb_echoes_token(self):
        with pytest.raises(UnknownCommand) as exc:
            parse('play something')
        assert exc.value.token == 'play'
        assert 'play' in str(exc.value)

    @pytest.mark.parametrize('line', [
        'add',
        'add OnlyTitle',
        'add one two three',
        'add "" Artist',
        'login now',
        'remove 3',
        'quit please',
    ])
    def test_wrong_arguments(self, line):
        with pytest.raises(UsageError):
            parse(line)

    def test_unbalanced_quote(self):
        with pytest.raises(UsageError):
            tokenize('add "Kind of Blue Miles')
