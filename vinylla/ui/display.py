"""
Terminal Display - Owns the terminal while the app runs.

All output goes through this class once exclusive mode is active.
"""
import logging
from contextlib import ExitStack, contextmanager
from typing import Callable, Optional, List, Tuple

from blessed import Terminal

from ..config import APP_COLS, APP_ROWS, INPUT_TIMEOUT
from ..handlers.keys import KeyEvent, translate, RESIZE, ENTER, ESCAPE, BACKSPACE, CHAR
from .context import RenderContext
from .renderer import Renderer
from .helpers import box_top, box_bottom, box_row, text_width

logger = logging.getLogger(__name__)

# Modal prompt box drawn over the content area
PROMPT_TOP = 24
PROMPT_WIDTH = APP_COLS


class TerminalDisplay:
    """Fullscreen, cbreak, fixed 130x40 viewport."""

    def __init__(self, term: Optional[Terminal] = None, renderer: Optional[Renderer] = None):
        self.term = term or Terminal()
        self.renderer = renderer or Renderer(self.term)
        self._stack: Optional[ExitStack] = None
        self._last_size: Optional[Tuple[int, int]] = None

    @property
    def active(self) -> bool:
        return self._stack is not None

    # ============================================
    # EXCLUSIVE MODE
    # ============================================

    def enter_exclusive_mode(self):
        """Switch to the alternate screen with cbreak input and hidden cursor."""
        if self.active:
            logger.warning('Exclusive mode already active')
            return
        if not self.term.is_a_tty:
            raise OSError('Vinylla needs an interactive terminal')
        stack = ExitStack()
        try:
            stack.enter_context(self.term.fullscreen())
            stack.enter_context(self.term.cbreak())
            stack.enter_context(self.term.hidden_cursor())
        except Exception:
            stack.close()
            raise
        self._stack = stack
        self._last_size = (self.term.width, self.term.height)
        self.renderer.invalidate()
        logger.info(f'Entered exclusive mode ({self.term.width}x{self.term.height})')

    def leave_exclusive_mode(self):
        """Restore the terminal. Safe to call more than once; only the first call acts."""
        if not self.active:
            return
        stack, self._stack = self._stack, None
        stack.close()
        logger.info('Left exclusive mode')

    @contextmanager
    def exclusive(self):
        self.enter_exclusive_mode()
        try:
            yield self
        finally:
            self.leave_exclusive_mode()

    def size_warning(self) -> Optional[str]:
        """Message if the terminal is not the fixed app size, else None."""
        width, height = self.term.width, self.term.height
        if (width, height) != (APP_COLS, APP_ROWS):
            return f'Terminal is {width}x{height}, Vinylla is drawn at {APP_COLS}x{APP_ROWS}'
        return None

    # ============================================
    # OUTPUT
    # ============================================

    def _write(self, text: str):
        stream = self.term.stream
        stream.write(text)
        stream.flush()

    def render(self, ctx: RenderContext):
        """Draw one frame. Terminal I/O errors propagate."""
        self._write(self.renderer.frame(ctx))

    # ============================================
    # INPUT
    # ============================================

    def read_event(self, timeout: float = INPUT_TIMEOUT) -> Optional[KeyEvent]:
        """Wait up to timeout for one input event. Returns None on timeout or unused keys."""
        size = (self.term.width, self.term.height)
        if self._last_size is not None and size != self._last_size:
            logger.warning(f'Terminal resized to {size[0]}x{size[1]}, keeping {APP_COLS}x{APP_ROWS} layout')
            self._last_size = size
            self.renderer.invalidate()
            return KeyEvent(RESIZE)
        return translate(self.term.inkey(timeout=timeout))

    def prompt(self, lines: List[str], label: str, cancelled: Optional[Callable[[], bool]] = None) -> str:
        """
        Show a modal box with lines of text and read one line of input.

        Blocks until Enter. Escape returns an empty string, as does
        cancelled() turning true (checked every INPUT_TIMEOUT seconds).
        """
        term = self.term
        value = ''
        top = PROMPT_TOP
        box = [box_top(PROMPT_WIDTH)] + [box_row(line, PROMPT_WIDTH) for line in lines]
        input_row = top + len(box)
        box += [box_row(label, PROMPT_WIDTH), box_bottom(PROMPT_WIDTH)]
        self._write(''.join(term.move_xy(0, top + i) + line for i, line in enumerate(box)))

        while True:
            shown = box_row(f'{label} {value}', PROMPT_WIDTH)
            cursor_x = min(2 + text_width(f'{label} {value}'), PROMPT_WIDTH - 2)
            self._write(term.move_xy(0, input_row) + shown + term.move_xy(cursor_x, input_row) + term.normal_cursor)

            event = translate(term.inkey(timeout=INPUT_TIMEOUT))
            if cancelled is not None and cancelled():
                logger.info('Prompt cancelled')
                value = ''
                break
            if event is None:
                continue
            if event.kind == ENTER:
                break
            if event.kind == ESCAPE:
                value = ''
                break
            if event.kind == BACKSPACE:
                value = value[:-1]
            elif event.kind == CHAR:
                value += event.char

        self._write(term.hide_cursor)
        self.renderer.invalidate()
        return value.strip()
