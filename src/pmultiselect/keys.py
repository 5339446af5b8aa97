"""Translation of chooser key presses into actions."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from Xlib import XK

from pmultiselect.candidates import INDEX_LABELS


class Action(enum.Enum):
    SELECT = "select"
    MOVE = "move"
    CONFIRM = "confirm"
    DELETE = "delete"
    DELETE_LAST = "delete-last"
    CLEAR = "clear"
    QUIT = "quit"
    CANCEL = "cancel"


@dataclass(frozen=True)
class ChooserAction:
    """An action requested from the chooser.

    Attributes:
        action: The kind of action.
        index: Candidate index for SELECT, step (+1/-1) for MOVE.
    """

    action: Action
    index: int | None = None


_MOVES = {
    XK.XK_Up: -1, XK.XK_KP_Up: -1,
    XK.XK_Down: 1, XK.XK_KP_Down: 1,
}
_CONFIRM = {XK.XK_Return, XK.XK_KP_Enter}
_DELETE = {XK.XK_Delete, XK.XK_KP_Delete, XK.XK_BackSpace}
# Shifted letters, so that they never collide with index labels.
_COMMANDS = {
    XK.XK_S: Action.DELETE_LAST,
    XK.XK_D: Action.CLEAR,
    XK.XK_Q: Action.QUIT,
}


def classify_key(keysym: int, count: int) -> ChooserAction:
    """Map a keysym to a chooser action.

    Args:
        keysym: The keysym of the pressed key, shift level applied.
        count: Number of candidates currently shown.

    Returns:
        The action. Keys with no meaning, and index labels beyond count,
        cancel.
    """
    if keysym in _MOVES:
        return ChooserAction(Action.MOVE, _MOVES[keysym])
    if keysym in _CONFIRM:
        return ChooserAction(Action.CONFIRM)
    if keysym in _DELETE:
        return ChooserAction(Action.DELETE)
    if keysym in _COMMANDS:
        return ChooserAction(_COMMANDS[keysym])
    if 0x20 < keysym < 0x7f:
        index = INDEX_LABELS.find(chr(keysym))
        if 0 <= index < count:
            return ChooserAction(Action.SELECT, index)
    return ChooserAction(Action.CANCEL)


def classify_button(button: int, row: int | None, count: int) -> ChooserAction:
    """Map a pointer button press to a chooser action.

    Args:
        button: The X button number.
        row: Candidate row under the pointer, or None if outside the rows.
        count: Number of candidates currently shown.

    Returns:
        The action.
    """
    if button == 4:
        return ChooserAction(Action.MOVE, -1)
    if button == 5:
        return ChooserAction(Action.MOVE, 1)
    if button == 1 and row is not None and 0 <= row < count:
        return ChooserAction(Action.SELECT, row)
    return ChooserAction(Action.CANCEL)
