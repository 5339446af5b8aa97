#!/usr/bin/env python3
"""Tests for chooser key and button classification."""

from Xlib import XK

from pmultiselect.keys import Action, ChooserAction, classify_button, classify_key


class TestClassifyKey:
    """Tests for classify_key."""

    def test_index_labels_select(self) -> None:
        assert classify_key(XK.XK_1, 3) == ChooserAction(Action.SELECT, 0)
        assert classify_key(XK.XK_3, 3) == ChooserAction(Action.SELECT, 2)
        assert classify_key(XK.XK_a, 10) == ChooserAction(Action.SELECT, 9)
        assert classify_key(XK.XK_k, 20) == ChooserAction(Action.SELECT, 19)

    def test_label_beyond_count_cancels(self) -> None:
        assert classify_key(XK.XK_4, 3).action is Action.CANCEL

    def test_movement(self) -> None:
        assert classify_key(XK.XK_Up, 3) == ChooserAction(Action.MOVE, -1)
        assert classify_key(XK.XK_Down, 3) == ChooserAction(Action.MOVE, 1)
        assert classify_key(XK.XK_KP_Down, 3) == ChooserAction(Action.MOVE, 1)

    def test_confirm_and_delete(self) -> None:
        assert classify_key(XK.XK_Return, 1).action is Action.CONFIRM
        assert classify_key(XK.XK_Delete, 1).action is Action.DELETE
        assert classify_key(XK.XK_BackSpace, 1).action is Action.DELETE

    def test_shifted_commands(self) -> None:
        """Shifted letters never collide with the lowercase labels."""
        assert classify_key(XK.XK_S, 20).action is Action.DELETE_LAST
        assert classify_key(XK.XK_D, 20).action is Action.CLEAR
        assert classify_key(XK.XK_Q, 20).action is Action.QUIT

    def test_anything_else_cancels(self) -> None:
        assert classify_key(XK.XK_Escape, 3).action is Action.CANCEL
        assert classify_key(XK.XK_z, 20).action is Action.CANCEL
        assert classify_key(XK.XK_space, 3).action is Action.CANCEL


class TestClassifyButton:
    """Tests for classify_button."""

    def test_wheel_moves(self) -> None:
        assert classify_button(4, None, 2) == ChooserAction(Action.MOVE, -1)
        assert classify_button(5, 0, 2) == ChooserAction(Action.MOVE, 1)

    def test_left_click_on_row_selects(self) -> None:
        assert classify_button(1, 1, 2) == ChooserAction(Action.SELECT, 1)

    def test_click_outside_rows_cancels(self) -> None:
        assert classify_button(1, None, 2).action is Action.CANCEL
        assert classify_button(1, 5, 2).action is Action.CANCEL
        assert classify_button(3, 0, 2).action is Action.CANCEL
