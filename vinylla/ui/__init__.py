"""
Vinylla UI - Rendering and terminal ownership.
"""
from .art import render as render_art
from .context import RenderContext
from .renderer import Renderer
from .display import TerminalDisplay

__all__ = [
    'render_art',
    'RenderContext',
    'Renderer',
    'TerminalDisplay',
]
