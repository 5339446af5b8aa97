#!/usr/bin/env python3
"""Tests for chooser layout and drawing."""

from unittest.mock import MagicMock

from pmultiselect.constants import MAX_DRAWN_CHARS, POINTER_GAP, WINDOW_WIDTH
from pmultiselect.pointer import PointerPosition
from pmultiselect.render import (
    RenderStyle, draw_candidates, placement, printable, row_at, window_height,
)

STYLE = RenderStyle(gc=MagicMock(), ascent=14, descent=4, char_width=9)


class TestGeometry:
    """Tests for row and window geometry."""

    def test_window_height_includes_title(self) -> None:
        assert STYLE.line_height == 18
        assert window_height(STYLE, 2) == 54

    def test_row_at(self) -> None:
        assert row_at(STYLE, 5) is None
        assert row_at(STYLE, 18) == 0
        assert row_at(STYLE, 40) == 1


class TestPlacement:
    """Tests for placement."""

    def test_centred_below_pointer(self) -> None:
        x, y = placement(PointerPosition(500, 100, 0), 400, 54, 1920, 1080)
        assert (x, y) == (300, 100 + POINTER_GAP)

    def test_clamped_at_left_edge(self) -> None:
        x, _ = placement(PointerPosition(10, 100, 0), 400, 54, 1920, 1080)
        assert x == 1

    def test_clamped_at_right_edge(self) -> None:
        x, _ = placement(PointerPosition(1900, 100, 0), 400, 54, 1920, 1080)
        assert x == 1920 - 400 - 2

    def test_above_pointer_near_bottom(self) -> None:
        _, y = placement(PointerPosition(500, 1060, 0), 400, 54, 1920, 1080)
        assert y == 1060 - POINTER_GAP - 54


class TestDrawing:
    """Tests for printable and draw_candidates."""

    def test_printable_single_line_latin1(self) -> None:
        assert printable("one\ntwo") == b"one two"
        assert printable("✓") == b"?"

    def test_printable_truncates(self) -> None:
        assert len(printable("x" * (MAX_DRAWN_CHARS + 50))) == MAX_DRAWN_CHARS

    def test_draw_marks_cursor_row(self) -> None:
        window = MagicMock()
        draw_candidates(window, STYLE, ["alpha", "beta"], cursor=1, title="t")
        texts = [call.args[3] for call in window.draw_text.call_args_list]
        assert texts == [b"t", b" 1 ", b"alpha", b">2 ", b"beta"]
        window.clear_area.assert_called_once()
        assert window.line.call_count == 3
        last = window.line.call_args_list[-1].args
        assert last[3] == WINDOW_WIDTH
