"""
Vinylla errors.

Every failure a command can hit derives from VinyllaError so the engine
can turn it into a one-line status message.
"""


class VinyllaError(Exception):
    """Base class for all Vinylla errors."""


class NotAuthenticated(VinyllaError):
    def __init__(self, message: str = 'Not logged in. Run "login" first.'):
        super().__init__(message)


class AuthError(VinyllaError):
    """Discogs OAuth handshake failed."""


class ApiError(VinyllaError):
    """Network or protocol failure talking to Discogs."""


class NoMatchFound(VinyllaError):
    def __init__(self, title: str, artist: str):
        self.title = title
        self.artist = artist
        super().__init__(f'No match found for "{title}" by {artist}')


class NoSelection(VinyllaError):
    def __init__(self, message: str = 'No record selected'):
        super().__init__(message)


class UnknownCommand(VinyllaError):
    def __init__(self, token: str):
        self.token = token
        super().__init__(f'Unknown command: {token}')


class UsageError(VinyllaError):
    """Known verb with the wrong arguments."""


class DuplicateRecord(VinyllaError):
    def __init__(self, title: str, artist: str):
        super().__init__(f'{artist} - {title} is already in your collection')


class PersistError(VinyllaError):
    """Writing state to disk failed."""


class CorruptState(VinyllaError):
    """Persisted state could not be read and was replaced by defaults."""
