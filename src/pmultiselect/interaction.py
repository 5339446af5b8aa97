#!/usr/bin/env python3
"""Chooser interaction state machine.

The chooser goes through four states:

    IDLE -> PENDING     open_chooser(): a request was deferred, or the user
                        pressed an open key; pointer position and focus are
                        saved and the window is mapped
    PENDING -> SHOWING  first Expose: the window is drawn, takes the focus
                        and grabs the pointer
    SHOWING -> ANSWERING a key or button resolved to a choice or a cancel;
                        the owed reply is sent (or a relay armed) and the
                        window is unmapped
    ANSWERING -> IDLE   UnmapNotify of the chooser: focus is restored, the
                        pointer released, an armed relay fired

Deleting candidates keeps the chooser open while candidates remain (always
in daemon mode).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from Xlib import X

from pmultiselect.arbiter import serve
from pmultiselect.candidates import candidate_value
from pmultiselect.constants import WINDOW_WIDTH
from pmultiselect.errors import GrabFailed
from pmultiselect.flash import show_flash
from pmultiselect.keys import Action, ChooserAction, classify_button, classify_key
from pmultiselect.ownership import give_up_ownership, window_id
from pmultiselect.pointer import grab_pointer, query_pointer_position, release_pointer
from pmultiselect.relay import fire_relay, should_relay
from pmultiselect.render import draw_candidates, present_window, resize_window, row_at
from pmultiselect.selection_reply import refuse_request
from pmultiselect.state import ArmedRelay, InteractionState, SavedFocus

if TYPE_CHECKING:
    from Xlib.protocol.event import ButtonPress, Expose, KeyPress, UnmapNotify

    from pmultiselect.pending import PendingRequest
    from pmultiselect.state import MultiselectState

logger = logging.getLogger(__name__)

_OPEN = (InteractionState.PENDING, InteractionState.SHOWING)


def save_focus(state: MultiselectState) -> None:
    """Remember the focused window, unless it is ours or one is already saved."""
    reply = state.display.get_input_focus()
    if state.saved_focus is not None or window_id(reply.focus) == state.window.id:
        return
    state.saved_focus = SavedFocus(window=reply.focus, revert_to=reply.revert_to)
    logger.debug("Saved focus 0x%x", window_id(reply.focus))


def restore_focus(state: MultiselectState) -> None:
    """Give the focus back to the saved window and forget it."""
    saved = state.saved_focus
    if saved is None:
        return
    logger.debug("Restoring focus to 0x%x", window_id(saved.window))
    state.display.set_input_focus(saved.window, saved.revert_to, X.CurrentTime)
    state.saved_focus = None


def open_chooser(state: MultiselectState, request: PendingRequest | None) -> bool:
    """Open the chooser for a deferred request, or for the user when None.

    This is the single transition out of IDLE, shared by the request
    arbiter and the open keys.

    Args:
        state: The pmultiselect state.
        request: The request to answer once the user has chosen, or None.

    Returns:
        True if the chooser is opening, False if it was not idle.
    """
    if state.interaction is not InteractionState.IDLE:
        logger.debug("Chooser is %s, not opening", state.interaction.value)
        return False
    state.pending = request
    state.pointer = query_pointer_position(state.root)
    save_focus(state)
    state.cursor = min(state.cursor, max(len(state.store) - 1, 0))
    present_window(state, state.window, len(state.store), state.pointer)
    state.interaction = InteractionState.PENDING
    return True


def redraw(state: MultiselectState) -> None:
    draw_candidates(state.window, state.style, state.store, state.cursor)
    state.display.flush()


def on_chooser_expose(state: MultiselectState, event: Expose) -> None:
    """Draw the chooser; on the first Expose, take focus and grab the pointer."""
    if event.count != 0:
        return
    draw_candidates(state.window, state.style, state.store, state.cursor)
    if state.interaction is InteractionState.PENDING:
        state.display.set_input_focus(state.window, X.RevertToNone, X.CurrentTime)
        try:
            grab_pointer(state.window)
            state.pointer_grabbed = True
        except GrabFailed as e:
            logger.warning("%s, continuing without the grab", e)
        state.interaction = InteractionState.SHOWING
    state.display.flush()


def handle_chooser_key(state: MultiselectState, event: KeyPress) -> None:
    """Act on a key pressed in the chooser."""
    if state.interaction not in _OPEN:
        logger.debug("Key press with no chooser open")
        return
    level = 1 if event.state & X.ShiftMask else 0
    keysym = state.display.keycode_to_keysym(event.detail, level)
    logger.debug("Chooser key keycode=%s keysym=0x%x", event.detail, keysym)
    apply_action(state, classify_key(keysym, len(state.store)))


def handle_chooser_button(state: MultiselectState, event: ButtonPress) -> None:
    """Act on a button pressed while the chooser holds the pointer."""
    if state.interaction not in _OPEN:
        return
    row = None
    if 0 <= event.event_x < WINDOW_WIDTH and event.event_y >= 0:
        row = row_at(state.style, event.event_y)
    apply_action(state, classify_button(event.detail, row, len(state.store)))


def apply_action(state: MultiselectState, chooser_action: ChooserAction) -> None:
    """Carry out a chooser action."""
    action = chooser_action.action
    count = len(state.store)
    if action is Action.SELECT:
        finalize(state, chooser_action.index)
    elif action is Action.MOVE:
        if count == 0:
            return
        state.cursor = (state.cursor + chooser_action.index) % count
        if state.options.arrow_select:
            finalize(state, state.cursor)
        else:
            redraw(state)
    elif action is Action.CONFIRM:
        finalize(state, state.cursor if count else None)
    elif action is Action.DELETE:
        delete_candidate(state, state.cursor)
    elif action is Action.DELETE_LAST:
        delete_candidate(state, count - 1)
    elif action is Action.CLEAR:
        clear_candidates(state, quit_after=False)
    elif action is Action.QUIT:
        clear_candidates(state, quit_after=True)
    else:
        finalize(state, None)


def delete_candidate(state: MultiselectState, index: int) -> None:
    """Delete a candidate from the open chooser.

    The chooser stays open while candidates remain, or in daemon mode.
    Otherwise there is nothing left to give: ownership is released so the
    requestor does not retry with another target, the request is refused
    and the flash window shows the now empty list.
    """
    if state.store.delete_at(index):
        logger.debug("Deleted candidate %d", index)
    count = len(state.store)
    state.cursor = min(state.cursor, max(count - 1, 0))
    if count > 0 or state.options.daemon:
        resize_window(state, state.window, count)
        redraw(state)
        return
    give_up_ownership(state)
    finalize(state, None)
    show_flash(state)


def clear_candidates(state: MultiselectState, quit_after: bool) -> None:
    """Delete every candidate and close the chooser, exiting if quit_after."""
    logger.debug("Deleting all candidates%s", ", then exiting" if quit_after else "")
    state.store.clear()
    state.cursor = 0
    give_up_ownership(state)
    if quit_after:
        state.exit_after_unmap = True
    finalize(state, None)


def finalize(state: MultiselectState, index: int | None) -> None:
    """Resolve the interaction with a candidate index, or None to cancel.

    The deferred request, if any, is answered with the chosen string or
    refused. When the choice goes through a paste relay, the request is
    refused and the relay fires once the chooser has unmapped.

    Args:
        state: The pmultiselect state.
        index: The chosen candidate, or None.
    """
    if state.interaction not in _OPEN:
        logger.debug("Nothing to finalize")
        return
    state.interaction = InteractionState.ANSWERING

    text = None
    if index is not None and 0 <= index < len(state.store):
        text = candidate_value(state.store[index], state.options.separator)
        state.cursor = index
    state.last_outcome = text

    request = state.pending
    state.pending = None
    if request is not None:
        destination = request.requestor_id
    else:
        destination = state.pointer.child if state.pointer else X.NONE

    if state.pointer is not None and should_relay(state, text, destination):
        state.relay = ArmedRelay(position=state.pointer, outcome=text)
        if request is not None:
            refuse_request(state.display, request)
        logger.debug("Relay armed for 0x%x", destination)
    elif request is not None:
        serve(state, request, text, state.clock())

    state.window.unmap()
    state.display.flush()


def on_chooser_unmap(state: MultiselectState, event: UnmapNotify) -> None:
    """Finish the interaction once the chooser window is unmapped.

    Unmap events of other windows are ignored: the saved focus belongs to
    the chooser.
    """
    if window_id(event.window) != state.window.id:
        return
    if state.pending is not None:
        refuse_request(state.display, state.pending)
        state.pending = None
    restore_focus(state)
    if state.pointer_grabbed:
        release_pointer(state.display)
        state.pointer_grabbed = False
    relay, state.relay = state.relay, None
    if relay is not None:
        fire_relay(state, relay)
    state.interaction = InteractionState.IDLE
    state.display.flush()
    if state.exit_after_unmap:
        logger.debug("Exiting after the chooser closed")
        state.running = False


def abort_chooser(state: MultiselectState) -> None:
    """Close the chooser at shutdown, refusing any deferred request."""
    if state.interaction is InteractionState.IDLE:
        return
    if state.pending is not None:
        refuse_request(state.display, state.pending)
        state.pending = None
    state.relay = None
    state.window.unmap()
    restore_focus(state)
    if state.pointer_grabbed:
        release_pointer(state.display)
        state.pointer_grabbed = False
    state.interaction = InteractionState.IDLE
    state.display.flush()
