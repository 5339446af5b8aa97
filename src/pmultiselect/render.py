"""Drawing and placement of the chooser and flash windows.

Both windows show the same picture: a title line followed by one line per
candidate, prefixed by the key that picks it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from Xlib import X

from pmultiselect.candidates import INDEX_LABELS
from pmultiselect.constants import (
    FALLBACK_FONT, FONT, MAX_DRAWN_CHARS, POINTER_GAP, WINDOW_WIDTH, WM_NAME,
)
from pmultiselect.pointer import query_pointer_position

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.xobject.drawable import Window
    from Xlib.xobject.fontable import GC

    from pmultiselect.pointer import PointerPosition
    from pmultiselect.state import MultiselectState


@dataclass(frozen=True)
class RenderStyle:
    """Graphics context and font metrics used for drawing."""

    gc: GC
    ascent: int
    descent: int
    char_width: int

    @property
    def line_height(self) -> int:
        return self.ascent + self.descent


def load_style(display: Display, window: Window) -> RenderStyle:
    """Open the chooser font and create the graphics context.

    Falls back to the "fixed" font when the preferred one is missing.
    """
    screen = display.screen()
    name = FONT if display.list_fonts(FONT, 1) else FALLBACK_FONT
    font = display.open_font(name)
    info = font.query()
    gc = window.create_gc(
        font=font, foreground=screen.black_pixel, background=screen.white_pixel,
    )
    return RenderStyle(
        gc=gc,
        ascent=info.font_ascent,
        descent=info.font_descent,
        char_width=info.max_bounds.character_width,
    )


def printable(text: str) -> bytes:
    """Return text as a single Latin-1 line of at most MAX_DRAWN_CHARS."""
    line = " ".join(text[:MAX_DRAWN_CHARS].splitlines())
    return line.encode("latin-1", errors="replace")


def window_height(style: RenderStyle, rows: int) -> int:
    """Height of a window showing rows candidates below the title."""
    return style.line_height * (rows + 1)


def row_at(style: RenderStyle, y: int) -> int | None:
    """Return the candidate row at window coordinate y, or None for the title."""
    row = y // style.line_height - 1
    return row if row >= 0 else None


def placement(
    pointer: PointerPosition,
    width: int,
    height: int,
    screen_width: int,
    screen_height: int,
    border: int = 1,
) -> tuple[int, int]:
    """Place a window centred below the pointer, or above it near the bottom.

    Returns:
        The (x, y) position of the window.
    """
    x = pointer.x - width // 2
    if x < 0:
        x = border
    if x + width >= screen_width:
        x = screen_width - width - 2 * border
    if pointer.y + POINTER_GAP + height + 2 * border < screen_height:
        y = pointer.y + POINTER_GAP
    else:
        y = pointer.y - POINTER_GAP - height
    return x, y


def present_window(
    state: MultiselectState,
    window: Window,
    rows: int,
    pointer: PointerPosition | None = None,
) -> None:
    """Resize window for rows candidates, move it to the pointer, map it raised.

    Args:
        state: The pmultiselect state.
        window: The chooser or flash window.
        rows: Number of candidate lines.
        pointer: Pointer position, queried when None.
    """
    if pointer is None:
        pointer = query_pointer_position(state.root)
    screen = state.display.screen()
    height = window_height(state.style, rows)
    x, y = placement(
        pointer, WINDOW_WIDTH, height, screen.width_in_pixels, screen.height_in_pixels,
    )
    window.configure(x=x, y=y, width=WINDOW_WIDTH, height=height, stack_mode=X.Above)
    window.map()
    state.display.flush()


def resize_window(state: MultiselectState, window: Window, rows: int) -> None:
    """Resize an already mapped window for rows candidates."""
    window.configure(width=WINDOW_WIDTH, height=window_height(state.style, rows))


def draw_candidates(
    window: Window,
    style: RenderStyle,
    candidates: Iterable[str],
    cursor: int | None = None,
    title: str = WM_NAME,
) -> None:
    """Draw the title and the candidate lines.

    Args:
        window: The window to draw into.
        style: Graphics context and font metrics.
        candidates: The candidates, in store order.
        cursor: Index of the highlighted candidate, or None.
        title: The first line.
    """
    gc = style.gc
    window.clear_area()
    baseline = style.ascent
    rows = [(None, title)] + list(enumerate(candidates))
    for index, text in rows:
        if index is None:
            window.draw_text(gc, 0, baseline, printable(text))
        else:
            marker = ">" if index == cursor else " "
            label = f"{marker}{INDEX_LABELS[index]} "
            window.draw_text(gc, 0, baseline, label.encode("ascii"))
            window.draw_text(gc, len(label) * style.char_width, baseline, printable(text))
        underline = baseline + style.descent
        window.line(gc, 0, underline, WINDOW_WIDTH, underline)
        baseline += style.line_height
