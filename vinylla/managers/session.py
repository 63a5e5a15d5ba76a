"""
Session Manager - Discogs token lifecycle.

Loaded once at startup, replaced wholesale on login, saved on login and
again on exit.
"""
import os
import json
import logging
from pathlib import Path
from typing import Callable, Optional

from ..api.discogs import DiscogsClient
from ..models import Session
from ..errors import AuthError, CorruptState, PersistError

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns the current Session and its token file."""

    def __init__(self, session_path: Path, client: DiscogsClient):
        self.session_path = session_path
        self.client = client
        self.session: Optional[Session] = None
        self.load_error: Optional[CorruptState] = None

    @property
    def authenticated(self) -> bool:
        return self.session is not None and self.session.authenticated

    def load(self) -> Optional[Session]:
        """Load saved tokens. A missing file is not an error; a bad one sets load_error."""
        self.load_error = None
        self.session = None

        if not self.session_path.exists():
            logger.info('No saved session, starting logged out')
            return None

        try:
            data = json.loads(self.session_path.read_text(encoding='utf-8'))
            session = Session(
                oauth_token=data['oauth_token'],
                oauth_token_secret=data['oauth_token_secret'],
            )
            if not isinstance(session.oauth_token, str) or not isinstance(session.oauth_token_secret, str):
                raise TypeError('tokens must be strings')
        except json.JSONDecodeError as e:
            logger.error(f'Invalid JSON in session file: {e}')
            self.load_error = CorruptState('Saved login is unreadable, please log in again')
            return None
        except ValueError as e:
            # Not UTF-8 (UnicodeDecodeError)
            logger.error(f'Undecodable session file: {e}')
            self.load_error = CorruptState('Saved login is unreadable, please log in again')
            return None
        except (IOError, OSError) as e:
            logger.error(f'Cannot read session file: {e}', exc_info=True)
            self.load_error = CorruptState('Saved login is unreadable, please log in again')
            return None
        except (KeyError, TypeError) as e:
            logger.error(f'Malformed session file: {e}')
            self.load_error = CorruptState('Saved login is malformed, please log in again')
            return None

        self.session = session
        logger.info(f'Loaded session (authenticated={session.authenticated})')
        return session

    def authorize(self, ask_verifier: Callable[[str], str]) -> Session:
        """
        Run the OAuth handshake.

        ask_verifier receives the authorization URL and blocks until the
        user supplies the code Discogs showed them. The current session is
        only replaced if every step succeeds. Raises AuthError.
        """
        request_token, request_secret = self.client.request_token()
        verifier = ask_verifier(self.client.authorize_url(request_token))
        session = self.client.access_token(request_token, request_secret, verifier)
        if not session.authenticated:
            raise AuthError('Discogs returned an incomplete token')
        self.session = session
        logger.info('Login successful')
        return session

    def save(self, session: Optional[Session] = None):
        """Write the session tokens atomically. Raises PersistError."""
        session = session or self.session
        if session is None:
            logger.debug('No session to save')
            return

        temp_path = self.session_path.with_suffix('.json.tmp')
        try:
            self.session_path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(json.dumps(session.to_dict()), encoding='utf-8')
            os.replace(temp_path, self.session_path)
        except (IOError, OSError) as e:
            logger.error(f'Failed to save session: {e}', exc_info=True)
            raise PersistError(f'Could not save login: {e}') from e
        logger.debug(f'Saved session to {self.session_path}')
