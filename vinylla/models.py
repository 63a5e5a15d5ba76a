"""
Vinylla Data Models - Core data structures.
"""
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, List, Tuple

from .config import ART_WIDTH, ART_HEIGHT, ART_BLANK_GLYPH

RGB = Tuple[int, int, int]


@dataclass
class Track:
    """One tracklist entry of a release."""
    position: str = ''
    title: str = ''
    duration: str = ''

    def to_dict(self) -> dict:
        return {'position': self.position, 'title': self.title, 'duration': self.duration}

    @classmethod
    def from_dict(cls, data: dict) -> 'Track':
        return cls(
            position=str(data.get('position') or ''),
            title=str(data.get('title') or ''),
            duration=str(data.get('duration') or ''),
        )


@dataclass
class RenderedArt:
    """
    Fixed-size glyph grid of a cover image.

    glyphs holds one string per row, colors one list of RGB tuples per row.
    """
    width: int
    height: int
    glyphs: List[str]
    colors: List[List[RGB]]

    @classmethod
    def placeholder(cls, width: int = ART_WIDTH, height: int = ART_HEIGHT) -> 'RenderedArt':
        """Blank art of the given size."""
        return cls(
            width=width,
            height=height,
            glyphs=[ART_BLANK_GLYPH * width for _ in range(height)],
            colors=[[(0, 0, 0)] * width for _ in range(height)],
        )

    def textel(self, x: int, y: int) -> Tuple[str, RGB]:
        """Glyph and colour at column x, row y."""
        return self.glyphs[y][x], self.colors[y][x]

    def to_dict(self) -> dict:
        return {
            'width': self.width,
            'height': self.height,
            'glyphs': list(self.glyphs),
            'colors': [
                ''.join(f'{r:02x}{g:02x}{b:02x}' for r, g, b in row)
                for row in self.colors
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'RenderedArt':
        """Parse serialized art. Raises ValueError on malformed data."""
        width = int(data['width'])
        height = int(data['height'])
        glyphs = data['glyphs']
        color_rows = data['colors']
        if len(glyphs) != height or len(color_rows) != height:
            raise ValueError(f'Art has wrong number of rows (expected {height})')

        colors = []
        for glyph_row, color_row in zip(glyphs, color_rows):
            if len(glyph_row) != width or len(color_row) != width * 6:
                raise ValueError(f'Art row has wrong width (expected {width})')
            colors.append([
                (int(color_row[i:i + 2], 16), int(color_row[i + 2:i + 4], 16), int(color_row[i + 4:i + 6], 16))
                for i in range(0, len(color_row), 6)
            ])
        return cls(width=width, height=height, glyphs=list(glyphs), colors=colors)


@dataclass
class Record:
    """One entry in the user's collection."""
    title: str
    artist: str
    release_id: Optional[int] = None
    art: Optional[RenderedArt] = None
    year: Optional[int] = None
    genres: List[str] = field(default_factory=list)
    styles: List[str] = field(default_factory=list)
    country: Optional[str] = None
    format: Optional[str] = None
    art_url: Optional[str] = None
    tracklist: List[Track] = field(default_factory=list)

    @property
    def label(self) -> str:
        """Display label as shown in the list."""
        return f'{self.artist} - {self.title}'

    def to_dict(self) -> dict:
        return {
            'title': self.title,
            'artist': self.artist,
            'release_id': self.release_id,
            'year': self.year,
            'genres': list(self.genres),
            'styles': list(self.styles),
            'country': self.country,
            'format': self.format,
            'art_url': self.art_url,
            'tracklist': [track.to_dict() for track in self.tracklist],
            'art': self.art.to_dict() if self.art else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Record':
        """Parse a saved record. Raises ValueError/KeyError/TypeError on malformed data."""
        title = data['title']
        artist = data['artist']
        if not isinstance(title, str) or not isinstance(artist, str) or not title or not artist:
            raise ValueError('Record needs a non-empty title and artist')

        release_id = data.get('release_id')
        year = data.get('year')
        art = data.get('art')
        return cls(
            title=title,
            artist=artist,
            release_id=int(release_id) if release_id is not None else None,
            art=RenderedArt.from_dict(art) if art else None,
            year=int(year) if year is not None else None,
            genres=[str(g) for g in data.get('genres') or []],
            styles=[str(s) for s in data.get('styles') or []],
            country=data.get('country'),
            format=data.get('format'),
            art_url=data.get('art_url'),
            tracklist=[Track.from_dict(t) for t in data.get('tracklist') or [] if isinstance(t, dict)],
        )


@dataclass
class Session:
    """Discogs OAuth token pair."""
    oauth_token: str = ''
    oauth_token_secret: str = ''

    @property
    def authenticated(self) -> bool:
        return bool(self.oauth_token and self.oauth_token_secret)

    def to_dict(self) -> dict:
        return {'oauth_token': self.oauth_token, 'oauth_token_secret': self.oauth_token_secret}


@dataclass
class MatchResult:
    """Best search hit for a title/artist query."""
    release_id: int
    art_url: Optional[str] = None
    master_id: Optional[int] = None
    title: Optional[str] = None


@dataclass
class ReleaseDetails:
    """Release information used to enrich a Record."""
    release_id: int
    title: str = ''
    artist: str = ''
    year: Optional[int] = None
    genres: List[str] = field(default_factory=list)
    styles: List[str] = field(default_factory=list)
    country: Optional[str] = None
    format: Optional[str] = None
    art_url: Optional[str] = None
    tracklist: List[Track] = field(default_factory=list)


class Mode(Enum):
    NORMAL = 'normal'
    COMMAND_ENTRY = 'command_entry'


@dataclass
class InteractionState:
    """
    The engine's own state.

    buffer is only meaningful in COMMAND_ENTRY. cursor is None iff the
    collection is empty.
    """
    mode: Mode = Mode.NORMAL
    buffer: str = ''
    cursor: Optional[int] = None
    status_message: Optional[str] = None

    @property
    def in_command_entry(self) -> bool:
        return self.mode == Mode.COMMAND_ENTRY

    def enter_command_entry(self):
        self.mode = Mode.COMMAND_ENTRY
        self.buffer = ''

    def leave_command_entry(self):
        self.mode = Mode.NORMAL
        self.buffer = ''

    def clamp_cursor(self, length: int):
        """Keep cursor within [0, length-1], or None for an empty collection."""
        if length <= 0:
            self.cursor = None
        elif self.cursor is None:
            self.cursor = 0
        else:
            self.cursor = max(0, min(self.cursor, length - 1))

    def move_cursor(self, delta: int, length: int):
        """Move cursor by delta, clamped to bounds (no wraparound)."""
        if length <= 0:
            self.cursor = None
            return
        current = self.cursor if self.cursor is not None else 0
        self.cursor = max(0, min(current + delta, length - 1))
