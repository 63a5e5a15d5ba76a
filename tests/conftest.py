"""
Pytest configuration and shared fixtures for Vinylla tests.
"""
import json
from io import BytesIO
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import List, Optional

import pytest
from PIL import Image

from vinylla.errors import ApiError, AuthError
from vinylla.models import Record, Track, Session, MatchResult, ReleaseDetails, RenderedArt


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that's cleaned up after each test."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def collection_path(temp_dir):
    """Provide path for a temporary collection.json file."""
    return temp_dir / 'collection.json'


@pytest.fixture
def session_path(temp_dir):
    """Provide path for a temporary user_data.json file."""
    return temp_dir / 'user_data.json'


@pytest.fixture
def small_art():
    """A tiny 2x2 art grid."""
    return RenderedArt(
        width=2,
        height=2,
        glyphs=['██', '██'],
        colors=[[(255, 0, 0), (0, 255, 0)], [(0, 0, 255), (16, 32, 48)]],
    )


@pytest.fixture
def sample_records(small_art):
    """Two records: one fully resolved, one added without a catalog match."""
    return [
        Record(
            title='Kind of Blue',
            artist='Miles Davis',
            release_id=1234,
            art=small_art,
            year=1959,
            genres=['Jazz'],
            styles=['Modal'],
            country='US',
            format='Vinyl: LP, Album',
            art_url='https://img.example/kob.jpg',
            tracklist=[Track('A1', 'So What', '9:22'), Track('A2', 'Freddie Freeloader', '9:46')],
        ),
        Record(title='Getz/Gilberto', artist='Stan Getz'),
    ]


@pytest.fixture
def collection_with_file(collection_path, sample_records):
    """Create a collection file with sample data."""
    collection_path.write_text(json.dumps({'records': [r.to_dict() for r in sample_records]}))
    return collection_path


@pytest.fixture
def png_bytes():
    """A 90x60 PNG: left half red, right half blue."""
    img = Image.new('RGB', (90, 60), (255, 0, 0))
    img.paste((0, 0, 255), (45, 0, 90, 60))
    buf = BytesIO()
    img.save(buf, format='PNG')
    return buf.getvalue()


class FakeDisplay:
    """Stands in for TerminalDisplay: records frames, replays scripted events."""

    def __init__(self, events=None, verifier: str = 'code123', size_warning: Optional[str] = None):
        self.events = list(events or [])
        self.frames = []
        self.verifier = verifier
        self.prompts = []
        self.cancel_checks = []
        self._size_warning = size_warning

    def render(self, ctx):
        self.frames.append(ctx)

    def read_event(self, timeout=None):
        if not self.events:
            raise AssertionError('Event loop read past the scripted events')
        return self.events.pop(0)

    def prompt(self, lines, label, cancelled=None):
        self.prompts.append(lines)
        self.cancel_checks.append(cancelled)
        return self.verifier

    def size_warning(self):
        return self._size_warning


class FakeClient:
    """Stands in for DiscogsClient with canned responses."""

    def __init__(self):
        self.match: Optional[MatchResult] = MatchResult(release_id=42, art_url='https://img.example/42.jpg')
        self.details: Optional[ReleaseDetails] = None
        self.art: Optional[bytes] = None
        self.search_error: Optional[Exception] = None
        self.art_error: Optional[Exception] = None
        self.auth_error: Optional[Exception] = None
        self.searches: List[tuple] = []
        self.art_requests: List[str] = []

    def request_token(self):
        if self.auth_error:
            raise self.auth_error
        return 'req-token', 'req-secret'

    def authorize_url(self, request_token):
        return f'https://discogs.com/oauth/authorize?oauth_token={request_token}'

    def access_token(self, request_token, request_secret, verifier):
        if not verifier:
            raise AuthError('No verification code entered')
        return Session(oauth_token='access-token', oauth_token_secret='access-secret')

    def search(self, title, artist, session):
        self.searches.append((title, artist))
        if self.search_error:
            raise self.search_error
        return self.match

    def release(self, release_id, session):
        if self.details is None:
            raise ApiError('release lookup unavailable')
        return self.details

    def fetch_art(self, art_url, session=None):
        self.art_requests.append(art_url)
        if self.art_error:
            raise self.art_error
        if self.art is None:
            raise ApiError('no art')
        return self.art


@pytest.fixture
def fake_display():
    return FakeDisplay()


@pytest.fixture
def fake_client():
    return FakeClient()
