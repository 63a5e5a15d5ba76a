"""
UI Helpers - Fixed-width text and box drawing utilities.

Widths are terminal columns, not characters: East Asian wide characters
take two columns, combining marks none.
"""
from typing import List

from wcwidth import wcwidth

ELLIPSIS = '...'


def cells(text: str) -> List[str]:
    """
    Split text into one entry per terminal column.

    A wide character is followed by an empty continuation cell, combining
    marks join the previous cell and control characters are dropped, so
    ''.join(cells(text)) is text as drawn and len() is its width.
    """
    out: List[str] = []
    for ch in text or '':
        w = wcwidth(ch)
        if w < 0:
            continue
        if w == 0:
            if out:
                out[-1] += ch
            continue
        out.append(ch)
        if w == 2:
            out.append('')
    return out


def text_width(text: str) -> int:
    """Columns text occupies on screen."""
    return len(cells(text))


def _clip(parts: List[str], width: int) -> List[str]:
    """First width cells, without splitting a wide character."""
    clipped = parts[:width]
    if len(parts) > width and width > 0 and parts[width] == '':
        clipped[-1] = ' '
    return clipped


def tail(text: str, width: int) -> str:
    """Last width columns of text, without splitting a wide character."""
    parts = cells(text)
    if len(parts) <= width:
        return ''.join(parts)
    kept = parts[len(parts) - width:]
    if kept and kept[0] == '':
        kept[0] = ' '
    return ''.join(kept)


def fit(text: str, width: int, align: str = '<') -> str:
    """Truncate text to width columns (marking the cut) and pad it to exactly width."""
    if width <= 0:
        return ''
    parts = cells((text or '').replace('\n', ' ').replace('\r', ' '))
    if len(parts) > width:
        if width > len(ELLIPSIS):
            parts = _clip(parts, width - len(ELLIPSIS)) + list(ELLIPSIS)
        else:
            parts = _clip(parts, width)

    pad = width - len(parts)
    text = ''.join(parts)
    if align == '^':
        return ' ' * (pad // 2) + text + ' ' * (pad - pad // 2)
    if align == '>':
        return ' ' * pad + text
    return text + ' ' * pad


def slice_columns(line: str, start: int, end: int = None) -> str:
    """Columns [start, end) of line."""
    return ''.join(cells(line)[start:end])


def box_top(width: int) -> str:
    return '╔' + '═' * (width - 2) + '╗'


def box_bottom(width: int) -> str:
    return '╚' + '═' * (width - 2) + '╝'


def box_divider(width: int) -> str:
    return '╟' + '─' * (width - 2) + '╢'


def box_row(text: str, width: int, align: str = '<', padding: int = 1) -> str:
    """One boxed line with text fitted between the borders."""
    inner = width - 2 - 2 * padding
    return '║' + ' ' * padding + fit(text, inner, align) + ' ' * padding + '║'


def overlay(line: str, x: int, text: str) -> str:
    """Write text over line starting at column x, keeping the line width."""
    base = cells(line)
    if x >= len(base):
        return line
    new = _clip(cells(text), len(base) - x)
    end = x + len(new)

    # Half of a wide character left behind at either edge becomes a space
    if x > 0 and base[x] == '':
        base[x - 1] = ' '
    if end < len(base) and base[end] == '':
        base[end] = ' '

    base[x:end] = new
    return ''.join(base)
