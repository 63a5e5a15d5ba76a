"""
Vinylla Application - The input/command engine.

Single-threaded: read one event, update state, repaint once if anything
visible changed, repeat. Network calls block the loop until they finish.
"""
import signal
import logging
from typing import Callable, Optional

from .api import CollectionStore, DiscogsClient
from .errors import (
    VinyllaError, NotAuthenticated, NoMatchFound, NoSelection,
    DuplicateRecord, PersistError, ApiError,
)
from .handlers import keys
from .handlers.keys import KeyEvent
from .handlers.commands import (
    parse, Command, LoginCommand, AddCommand, RemoveCommand, QuitCommand,
)
from .managers import SessionManager
from .models import InteractionState, Record, RenderedArt, Session
from .ui import TerminalDisplay, RenderContext, render_art

logger = logging.getLogger(__name__)


class Vinylla:
    """Main Vinylla application."""

    def __init__(self, display: TerminalDisplay, store: CollectionStore,
                 sessions: SessionManager, client: DiscogsClient,
                 art_renderer: Callable[[bytes], RenderedArt] = render_art):
        self.display = display
        self.store = store
        self.sessions = sessions
        self.client = client
        self.render_art = art_renderer

        self.state = InteractionState()
        self.running = False
        self.loaded = False

        self._handlers = {
            LoginCommand: self._login,
            AddCommand: self._add,
            RemoveCommand: self._remove,
            QuitCommand: self._quit,
        }

    # ============================================
    # LIFECYCLE
    # ============================================

    def install_signal_handlers(self):
        """Stop the loop on SIGTERM/SIGINT so state is saved on the way out."""
        signal.signal(signal.SIGTERM, self._handle_signal)
        signal.signal(signal.SIGINT, self._handle_signal)

    def _handle_signal(self, signum, frame):
        sig_name = 'SIGTERM' if signum == signal.SIGTERM else 'SIGINT'
        logger.info(f'Received {sig_name}, shutting down...')
        self.running = False

    def startup(self):
        """Load saved state. Load problems become the first status message."""
        self.store.load()
        self.sessions.load()
        self.loaded = True

        notices = [str(err) for err in (self.store.load_error, self.sessions.load_error) if err]
        size_warning = self.display.size_warning()
        if size_warning:
            logger.warning(size_warning)
            notices.append(size_warning)

        self.state.clamp_cursor(len(self.store))
        self.state.status_message = '; '.join(notices) or None
        logger.info(f'Started with {len(self.store)} records, authenticated={self.sessions.authenticated}')

    def run(self):
        """Event loop. Returns when quit is requested."""
        logger.info('Entering main loop...')
        self.running = True
        self.render()
        while self.running:
            event = self.display.read_event()
            if self.handle_event(event) and self.running:
                self.render()
        logger.info('Main loop finished')

    def shutdown(self) -> bool:
        """Persist collection and session. Returns False if anything failed to save."""
        if not self.loaded:
            logger.warning('State was never loaded, not saving')
            return True

        ok = True
        try:
            self.store.save()
        except PersistError as e:
            logger.error(f'Collection not saved on exit: {e}')
            ok = False
        try:
            self.sessions.save()
        except PersistError as e:
            logger.error(f'Session not saved on exit: {e}')
            ok = False
        logger.info('Shutdown complete' if ok else 'Shutdown finished with errors')
        return ok

    # ============================================
    # RENDERING
    # ============================================

    def context(self) -> RenderContext:
        return RenderContext(
            records=self.store.records,
            cursor=self.state.cursor,
            mode=self.state.mode,
            buffer=self.state.buffer,
            status_message=self.state.status_message,
            authenticated=self.sessions.authenticated,
        )

    def render(self):
        self.display.render(self.context())

    # ============================================
    # INPUT
    # ============================================

    def handle_event(self, event: Optional[KeyEvent]) -> bool:
        """Apply one input event. Returns True if the screen needs a repaint."""
        if event is None:
            return False
        if event.kind == keys.RESIZE:
            self.state.status_message = self.display.size_warning() or 'Terminal resized'
            return True
        if self.state.in_command_entry:
            return self._handle_command_key(event)
        return self._handle_normal_key(event)

    def _handle_normal_key(self, event: KeyEvent) -> bool:
        if event.kind in (keys.UP, keys.DOWN):
            before = self.state.cursor
            self.state.move_cursor(-1 if event.kind == keys.UP else 1, len(self.store))
            return self.state.cursor != before

        if event.kind == keys.CHAR:
            key = event.char.lower()
            if key == 'c':
                self.state.enter_command_entry()
                return True
            if key == 'q':
                logger.info('Quit key pressed')
                self.running = False
        return False

    def _handle_command_key(self, event: KeyEvent) -> bool:
        if event.kind == keys.CHAR:
            self.state.buffer += event.char
            return True
        if event.kind == keys.BACKSPACE:
            if not self.state.buffer:
                return False
            self.state.buffer = self.state.buffer[:-1]
            return True
        if event.kind == keys.ESCAPE:
            self.state.leave_command_entry()
            return True
        if event.kind == keys.ENTER:
            line = self.state.buffer
            self.state.leave_command_entry()
            self.execute(line)
            return True
        return False

    # ============================================
    # COMMANDS
    # ============================================

    def execute(self, line: str):
        """Parse and run one command line, leaving its outcome in status_message."""
        try:
            command = parse(line)
            if command is None:
                return
            logger.info(f'Running {type(command).__name__}')
            message = self._dispatch(command)
        except VinyllaError as e:
            logger.warning(f'Command {line!r} failed: {type(e).__name__}: {e}')
            message = f'{type(e).__name__}: {e}'
        except IndexError as e:
            logger.error(f'Cursor out of sync with collection running {line!r}: {e}', exc_info=True)
            message = f'Internal error: {e}'
        self.state.status_message = message

    def _dispatch(self, command: Command) -> str:
        return self._handlers[type(command)](command)

    def _login(self, command: LoginCommand) -> str:
        session = self.sessions.authorize(self._ask_verifier)
        try:
            self.sessions.save(session)
        except PersistError as e:
            return f'Logged in, but {e}'
        return 'Login successful!'

    def _ask_verifier(self, url: str) -> str:
        return self.display.prompt(
            ['Please authorize Vinylla at the link below, then paste the code Discogs shows you.', url],
            'Code:',
            cancelled=lambda: not self.running,
        )

    def _add(self, command: AddCommand) -> str:
        if not self.sessions.authenticated:
            raise NotAuthenticated()
        session = self.sessions.session

        match = self.client.search(command.title, command.artist, session)
        if match is None:
            raise NoMatchFound(command.title, command.artist)
        if self.store.contains(match.release_id):
            raise DuplicateRecord(command.title, command.artist)

        record = self._build_record(command, match.release_id, match.art_url, session)
        self.store.append(record)
        self.state.clamp_cursor(len(self.store))

        message = f'Added {record.label} to your collection!'
        if record.art is None:
            message += ' (no cover art)'
        return self._with_save(message)

    def _build_record(self, command: AddCommand, release_id: int,
                      art_url: Optional[str], session: Session) -> Record:
        """Record for a matched release, enriched with release details and art where available."""
        record = Record(title=command.title, artist=command.artist, release_id=release_id, art_url=art_url)
        try:
            details = self.client.release(release_id, session)
        except ApiError as e:
            logger.warning(f'Release {release_id} details unavailable: {e}')
        else:
            record = Record(
                title=details.title or command.title,
                artist=details.artist or command.artist,
                release_id=release_id,
                year=details.year,
                genres=details.genres,
                styles=details.styles,
                country=details.country,
                format=details.format,
                art_url=details.art_url or art_url,
                tracklist=details.tracklist,
            )
        record.art = self._fetch_art(record.art_url, session)
        return record

    def _fetch_art(self, art_url: Optional[str], session: Session) -> Optional[RenderedArt]:
        if not art_url:
            return None
        try:
            data = self.client.fetch_art(art_url, session)
        except ApiError as e:
            logger.warning(f'Cover art skipped: {e}')
            return None
        return self.render_art(data)

    def _remove(self, command: RemoveCommand) -> str:
        if self.state.cursor is None or len(self.store) == 0:
            raise NoSelection()
        record = self.store.remove_at(self.state.cursor)
        self.state.clamp_cursor(len(self.store))
        return self._with_save(f'Removed {record.label} from your collection!')

    def _quit(self, command: QuitCommand) -> str:
        self.running = False
        return 'Goodbye!'

    def _with_save(self, message: str) -> str:
        """Save the collection after a change; a failure is appended to message."""
        try:
            self.store.save()
        except PersistError as e:
            return f'{message} {type(e).__name__}: {e}'
        return message
