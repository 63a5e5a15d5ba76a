"""
Renderer - Composes the fixed 130x40 frame and turns it into terminal output.
"""
import logging
from typing import Optional, List, Tuple

from blessed import Terminal

from .. import __version__
from ..config import (
    APP_COLS, APP_ROWS, CONTENT_TOP, CONTENT_BOTTOM,
    LIST_WIDTH, INFO_LEFT, INFO_WIDTH, INFO_LABEL_WIDTH, INFO_VALUE_WIDTH,
    ART_X, ART_Y, ART_WIDTH, ART_HEIGHT,
)
from ..models import Record, RenderedArt, Mode
from .context import RenderContext
from .helpers import fit, box_top, box_bottom, box_divider, box_row, overlay, slice_columns, tail, text_width

logger = logging.getLogger(__name__)

# Rows of the list/info body (between the box titles and the box bottoms)
BODY_TOP = CONTENT_TOP + 3
BODY_BOTTOM = CONTENT_BOTTOM - 1  # exclusive, row of the box bottoms
LIST_ROWS = BODY_BOTTOM - BODY_TOP

# Footer rows
COMMAND_ROW = CONTENT_BOTTOM + 1
STATUS_ROW = CONTENT_BOTTOM + 2
COMMAND_PREFIX = 'Command: '

# Info panel text column and rows
INFO_X = INFO_LEFT + 3
INFO_TEXT_WIDTH = INFO_LABEL_WIDTH + INFO_VALUE_WIDTH
INFO_ROWS = {
    'Discogs:': BODY_TOP + 1,
    'Release:': BODY_TOP + 3,
    'Genre:': BODY_TOP + 5,
    'Style:': BODY_TOP + 7,
    'Country:': BODY_TOP + 9,
    'Format:': BODY_TOP + 11,
}
TRACKLIST_ROW = BODY_TOP + 13
TRACKS_TOP = TRACKLIST_ROW + 2

NORMAL_HINT = 'Up/Down: select   C: enter a command (login, add "<title>" "<artist>", remove, quit)   Q: quit'


class Renderer:
    """Builds frames for the terminal display."""

    def __init__(self, term: Terminal):
        self.term = term
        self._scroll = 0
        self._needs_full_redraw = True

    def invalidate(self):
        """Force a full clear on next frame."""
        self._needs_full_redraw = True

    # ============================================
    # COMPOSITION (plain text)
    # ============================================

    def compose(self, ctx: RenderContext) -> List[str]:
        """Return APP_ROWS lines, each exactly APP_COLS terminal columns wide."""
        selected = ctx.selected
        return self._header(ctx) + self._content(ctx, selected) + self._footer(ctx)

    def _header(self, ctx: RenderContext) -> List[str]:
        middle = box_row(f'Vinylla - v{__version__}', APP_COLS, '^')
        login = 'Logged in' if ctx.authenticated else 'Not logged in'
        middle = overlay(middle, APP_COLS - 2 - text_width(login), login)
        return [box_top(APP_COLS), middle, box_bottom(APP_COLS)]

    def _content(self, ctx: RenderContext, selected: Optional[Record]) -> List[str]:
        gap = ' ' * (INFO_LEFT - LIST_WIDTH)
        lines = [
            box_top(LIST_WIDTH) + gap + box_top(INFO_WIDTH),
            box_row('My Records', LIST_WIDTH, '^') + gap + box_row(selected.label if selected else '', INFO_WIDTH, '^'),
            box_divider(LIST_WIDTH) + gap + box_divider(INFO_WIDTH),
        ]

        list_rows = self._list_rows(ctx)
        blank_info = '║' + ' ' * (INFO_WIDTH - 2) + '║'
        for text in list_rows:
            lines.append(box_row(text, LIST_WIDTH, padding=1) + gap + blank_info)
        lines.append(box_bottom(LIST_WIDTH) + gap + box_bottom(INFO_WIDTH))

        if selected is not None:
            self._info(lines, selected)
            self._art(lines, selected.art)
        else:
            self._put(lines, INFO_X, BODY_TOP + 1, 'Your collection is empty.')
            self._put(lines, INFO_X, BODY_TOP + 3, 'Press C, then type  login  and follow the link.')
            self._put(lines, INFO_X, BODY_TOP + 4, 'Then add records with  add "<title>" "<artist>"')
        return lines

    def _list_rows(self, ctx: RenderContext) -> List[str]:
        """Visible list entries, scrolled so the cursor row is on screen."""
        count = len(ctx.records)
        if ctx.cursor is not None:
            if ctx.cursor < self._scroll:
                self._scroll = ctx.cursor
            elif ctx.cursor >= self._scroll + LIST_ROWS:
                self._scroll = ctx.cursor - LIST_ROWS + 1
        self._scroll = max(0, min(self._scroll, count - LIST_ROWS))

        rows = []
        for i in range(self._scroll, self._scroll + LIST_ROWS):
            if i < count:
                marker = '>' if i == ctx.cursor else ' '
                rows.append(f'{marker} {i + 1}. {ctx.records[i].label}')
            else:
                rows.append('')
        if count == 0:
            rows[0] = '  No records yet'
        return rows

    def cursor_row(self, ctx: RenderContext) -> Optional[int]:
        """Screen row of the highlighted list entry (after compose)."""
        if ctx.cursor is None:
            return None
        row = BODY_TOP + ctx.cursor - self._scroll
        return row if BODY_TOP <= row < BODY_BOTTOM else None

    def _info(self, lines: List[str], record: Record):
        values = {
            'Discogs:': f'release {record.release_id}' if record.release_id is not None else 'not matched',
            'Release:': str(record.year) if record.year else '-',
            'Genre:': ' / '.join(record.genres) or '-',
            'Style:': ' / '.join(record.styles) or '-',
            'Country:': record.country or '-',
            'Format:': record.format or '-',
        }
        for label, row in INFO_ROWS.items():
            self._put(lines, INFO_X, row, fit(label, INFO_LABEL_WIDTH) + fit(values[label], INFO_VALUE_WIDTH))

        if not record.tracklist:
            return
        self._put(lines, INFO_X, TRACKLIST_ROW, fit('Tracklist', INFO_TEXT_WIDTH, '^'))
        self._put(lines, INFO_X, TRACKLIST_ROW + 1, fit('─' * 21, INFO_TEXT_WIDTH, '^'))

        available = BODY_BOTTOM - TRACKS_TOP
        tracks = record.tracklist
        if len(tracks) > available:
            shown = tracks[:available - 1]
            more = f'... {len(tracks) - len(shown)} more'
        else:
            shown, more = tracks, None
        for offset, track in enumerate(shown):
            duration = track.duration or ''
            width = INFO_TEXT_WIDTH - text_width(duration) - (1 if duration else 0)
            text = fit(f'{track.position} {track.title}'.strip(), width)
            if duration:
                text += ' ' + duration
            self._put(lines, INFO_X, TRACKS_TOP + offset, text)
        if more:
            self._put(lines, INFO_X, TRACKS_TOP + len(shown), fit(more, INFO_TEXT_WIDTH))

    def _art(self, lines: List[str], art: Optional[RenderedArt]):
        if art is None:
            self._put(lines, ART_X, ART_Y + ART_HEIGHT // 2, fit('No cover art', ART_WIDTH, '^'))
            return
        for y, glyphs in enumerate(art.glyphs[:ART_HEIGHT]):
            self._put(lines, ART_X, ART_Y + y, glyphs[:ART_WIDTH])

    def _footer(self, ctx: RenderContext) -> List[str]:
        inner = APP_COLS - 4
        if ctx.mode == Mode.COMMAND_ENTRY:
            command = self._command_text(ctx.buffer, inner)
        else:
            command = COMMAND_PREFIX
        status = ctx.status_message if ctx.status_message else (NORMAL_HINT if ctx.mode == Mode.NORMAL else '')
        return [
            box_top(APP_COLS),
            box_row(command, APP_COLS),
            box_row(status, APP_COLS),
            box_bottom(APP_COLS),
        ]

    @staticmethod
    def _command_text(buffer: str, width: int) -> str:
        """Command line text, showing the tail of a buffer too long to fit."""
        text = COMMAND_PREFIX + buffer
        if text_width(text) >= width:
            keep = width - len(COMMAND_PREFIX) - 4
            text = COMMAND_PREFIX + '...' + tail(buffer, keep)
        return text

    def command_cursor(self, ctx: RenderContext) -> Tuple[int, int]:
        """Screen position of the text cursor while typing a command."""
        text = self._command_text(ctx.buffer, APP_COLS - 4)
        return min(2 + text_width(text), APP_COLS - 2), COMMAND_ROW

    @staticmethod
    def _put(lines: List[str], x: int, y: int, text: str):
        lines[y] = overlay(lines[y], x, text)

    # ============================================
    # TERMINAL OUTPUT
    # ============================================

    def frame(self, ctx: RenderContext) -> str:
        """Full terminal output for one frame, including colour and cursor."""
        term = self.term
        lines = self.compose(ctx)
        parts = []
        if self._needs_full_redraw:
            parts.append(term.home + term.clear)
            self._needs_full_redraw = False

        highlight = self.cursor_row(ctx)
        for y, line in enumerate(lines):
            if y == highlight:
                line = (
                    slice_columns(line, 0, 1)
                    + term.reverse(slice_columns(line, 1, LIST_WIDTH - 1))
                    + slice_columns(line, LIST_WIDTH - 1)
                )
            parts.append(term.move_xy(0, y) + line)

        selected = ctx.selected
        if selected is not None and selected.art is not None:
            parts.append(self._colored_art(selected.art))

        if ctx.mode == Mode.COMMAND_ENTRY:
            x, y = self.command_cursor(ctx)
            parts.append(term.move_xy(x, y) + term.normal_cursor)
        else:
            parts.append(term.hide_cursor)
        return ''.join(parts)

    def _colored_art(self, art: RenderedArt) -> str:
        term = self.term
        out = []
        for y in range(min(art.height, ART_HEIGHT)):
            out.append(term.move_xy(ART_X, ART_Y + y))
            last = None
            for x in range(min(art.width, ART_WIDTH)):
                glyph, color = art.textel(x, y)
                if color != last:
                    out.append(term.color_rgb(*color))
                    last = color
                out.append(glyph)
            out.append(term.normal)
        return ''.join(out)
