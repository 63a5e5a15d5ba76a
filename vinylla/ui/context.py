"""
Render Context - Bundles all state needed for rendering.
"""
from dataclasses import dataclass
from typing import Optional, List

from ..models import Record, Mode


@dataclass
class RenderContext:
    """All state needed to render a frame."""
    records: List[Record]
    cursor: Optional[int]
    mode: Mode
    buffer: str
    status_message: Optional[str]
    authenticated: bool

    @property
    def selected(self) -> Optional[Record]:
        if self.cursor is None or not 0 <= self.cursor < len(self.records):
            return None
        return self.records[self.cursor]
