"""
Tests for the entry point - exit status, terminal release and signal handling.
"""
import json
import signal
from io import StringIO
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from blessed.keyboard import Keystroke

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import FakeDisplay
from vinylla import __version__
from vinylla.api.collection import CollectionStore
from vinylla.app import Vinylla
from vinylla.errors import PersistError
from vinylla.main import main
from vinylla.managers.session import SessionManager
from vinylla.ui.display import TerminalDisplay


@pytest.fixture
def term():
    """A mock interactive terminal that answers every read with 'q'."""
    term = MagicMock()
    term.is_a_tty = True
    term.width = 130
    term.height = 40
    term.stream = StringIO()
    term.move_xy.side_effect = lambda x, y: f'<{x},{y}>'
    term.inkey.return_value = Keystroke('q')
    return term


@pytest.fixture
def display(term):
    renderer = MagicMock()
    renderer.frame.return_value = ''
    return TerminalDisplay(term=term, renderer=renderer)


@pytest.fixture
def run_main(display, collection_path, session_path):
    """Run main() against temp files and the mock terminal."""
    def run(argv=('vinylla',)):
        with patch('vinylla.main.setup_logging'), \
                patch('vinylla.main.COLLECTION_PATH', collection_path), \
                patch('vinylla.main.SESSION_PATH', session_path), \
                patch('vinylla.main.TerminalDisplay', return_value=display), \
                patch.object(Vinylla, 'install_signal_handlers'), \
                patch.object(sys, 'argv', list(argv)):
            return main()
    return run


class TestExitStatus:
    """Tests for the process exit status."""

    def test_quit_exits_zero_and_saves(self, run_main, display, term, collection_path, session_path):
        """Quit from a clean run saves both files and releases the terminal."""
        session_path.write_text(json.dumps({'oauth_token': 't', 'oauth_token_secret': 's'}))

        assert run_main() == 0
        assert json.loads(collection_path.read_text())['records'] == []
        assert json.loads(session_path.read_text())['oauth_token'] == 't'
        assert not display.active
        term.cbreak.return_value.__exit__.assert_called_once()

    def test_terminal_failure_exits_one(self, run_main, display, term, collection_path):
        """A write failure mid-run still releases the terminal and saves state."""
        display.renderer.frame.side_effect = OSError('Input/output error')

        assert run_main() == 1
        assert not display.active
        term.fullscreen.return_value.__exit__.assert_called_once()
        term.cbreak.return_value.__exit__.assert_called_once()
        assert collection_path.exists()

    def test_no_terminal_exits_one(self, run_main, term, capsys):
        term.is_a_tty = False
        assert run_main() == 1
        term.fullscreen.assert_not_called()
        assert 'terminal error' in capsys.readouterr().err

    def test_save_failure_exits_one(self, run_main, display):
        with patch.object(CollectionStore, 'save', side_effect=PersistError('Could not save collection: disk full')):
            assert run_main() == 1
        assert not display.active

    def test_version(self, run_main, term, capsys):
        assert run_main(['vinylla', '--version']) == 0
        assert capsys.readouterr().out.strip() == f'vinylla {__version__}'
        term.fullscreen.assert_not_called()


class TestSignals:
    """Tests for SIGTERM/SIGINT handling."""

    @pytest.fixture
    def app(self, collection_path, session_path, fake_client):
        return Vinylla(FakeDisplay(), CollectionStore(collection_path),
                       SessionManager(session_path, fake_client), fake_client)

    def test_handlers_installed(self, app):
        with patch('vinylla.app.signal.signal') as mock_signal:
            app.install_signal_handlers()
        mock_signal.assert_any_call(signal.SIGTERM, app._handle_signal)
        mock_signal.assert_any_call(signal.SIGINT, app._handle_signal)

    @pytest.mark.parametrize('signum', [signal.SIGTERM, signal.SIGINT])
    def test_signal_stops_running(self, app, signum):
        app.running = True
        app._handle_signal(signum, None)
        assert not app.running

    def test_signal_ends_loop(self, app):
        """A signal arriving while waiting for input ends the loop after that read."""
        app.startup()
        app.display.read_event = lambda timeout=None: app._handle_signal(signal.SIGTERM, None)
        app.run()
        assert not app.running
        assert app.shutdown()
