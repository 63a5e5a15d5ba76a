"""
Tests for TerminalDisplay - exclusive mode pairing, input and resize handling.
"""
from io import StringIO
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from blessed.keyboard import Keystroke

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from vinylla.config import INPUT_TIMEOUT
from vinylla.handlers.keys import KeyEvent, CHAR, RESIZE
from vinylla.ui.display import TerminalDisplay


@pytest.fixture
def term():
    """A mock blessed Terminal sized like the app."""
    term = MagicMock()
    term.is_a_tty = True
    term.width = 130
    term.height = 40
    term.stream = StringIO()
    term.move_xy.side_effect = lambda x, y: f'<{x},{y}>'
    term.normal_cursor = ''
    term.hide_cursor = ''
    return term


@pytest.fixture
def display(term):
    return TerminalDisplay(term=term, renderer=MagicMock())


class TestExclusiveMode:
    """Tests for acquiring and releasing the terminal."""

    def test_enter_and_leave_once(self, display, term):
        display.enter_exclusive_mode()
        assert display.active
        display.leave_exclusive_mode()
        display.leave_exclusive_mode()
        assert not display.active
        for context in (term.fullscreen.return_value, term.cbreak.return_value, term.hidden_cursor.return_value):
            context.__enter__.assert_called_once()
            context.__exit__.assert_called_once()

    def test_released_on_error(self, display, term):
        """The context manager restores the terminal when the body raises."""
        with pytest.raises(RuntimeError):
            with display.exclusive():
                raise RuntimeError('boom')
        assert not display.active
        term.cbreak.return_value.__exit__.assert_called_once()

    def test_not_a_tty(self, display, term):
        term.is_a_tty = False
        with pytest.raises(OSError):
            display.enter_exclusive_mode()
        assert not display.active
        term.fullscreen.assert_not_called()


class TestOutput:
    """Tests for drawing frames."""

    def test_render_writes_frame(self, display, term):
        display.renderer.frame.return_value = 'FRAME'
        display.render(MagicMock())
        assert term.stream.getvalue() == 'FRAME'

    def test_size_warning(self, display, term):
        assert display.size_warning() is None
        term.width = 80
        assert '80x40' in display.size_warning()


class TestInput:
    """Tests for reading events."""

    def test_read_key(self, display, term):
        term.inkey.return_value = Keystroke('a')
        assert display.read_event() == KeyEvent(CHAR, 'a')

    def test_timeout(self, display, term):
        term.inkey.return_value = Keystroke('')
        assert display.read_event() is None

    def test_resize_reported_once(self, display, term):
        term.inkey.return_value = Keystroke('')
        display.enter_exclusive_mode()
        term.width, term.height = 100, 30
        assert display.read_event() == KeyEvent(RESIZE)
        assert display.read_event() is None
        display.renderer.invalidate.assert_called()

    def test_prompt_reads_line(self, display, term):
        term.inkey.side_effect = [Keystroke(c) for c in 'ab c'] + [Keystroke('\x7f'), Keystroke('d'), Keystroke('\r')]
        assert display.prompt(['Visit this link'], 'Code:') == 'ab d'
        assert 'Visit this link' in term.stream.getvalue()

    def test_prompt_escape_cancels(self, display, term):
        term.inkey.side_effect = [Keystroke('x'), Keystroke('\x1b')]
        assert display.prompt(['Visit'], 'Code:') == ''

    def test_prompt_stops_when_cancelled(self, display, term):
        """A stop request ends the prompt at the next input timeout."""
        term.inkey.return_value = Keystroke('')
        checks = iter([False, False, True])
        assert display.prompt(['Visit'], 'Code:', cancelled=lambda: next(checks)) == ''
        assert term.inkey.call_count == 3
        for call in term.inkey.call_args_list:
            assert call[1]['timeout'] == INPUT_TIMEOUT
        display.renderer.invalidate.assert_called()

    def test_prompt_cursor_after_wide_input(self, display, term):
        """The cursor sits after the typed text measured in columns."""
        term.inkey.side_effect = [Keystroke('東'), Keystroke('京'), Keystroke('\r')]
        assert display.prompt(['Visit'], 'Code:') == '東京'
        assert '<12,26>' in term.stream.getvalue()
