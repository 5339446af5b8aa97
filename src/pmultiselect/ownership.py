"""PRIMARY selection ownership.

This module acquires and releases the PRIMARY selection on behalf of the
chooser window. Acquisition is verified by reading the owner back, and is
stamped with a server timestamp so that requests made before it can be
recognised as stale.

The module handles:
- Acquiring PRIMARY and stamping the acquisition time
- Erasing the cut buffer left by older clients
- Releasing PRIMARY when there is nothing left to give
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from Xlib import X, Xatom

from pmultiselect.errors import OwnershipDenied
from pmultiselect.selection_utils import get_server_timestamp

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.rq import Event
    from Xlib.xobject.drawable import Window

    from pmultiselect.state import Atoms, MultiselectState

logger = logging.getLogger(__name__)


def window_id(window: Window | int) -> int:
    """Return the id of a window as returned by python-xlib replies.

    Replies carry either a Window object or the integer X.NONE.
    """
    return getattr(window, "id", window)


def acquire_selection(
    display: Display,
    root: Window,
    window: Window,
    atoms: Atoms,
    deferred_events: list[Event],
) -> int:
    """Take ownership of PRIMARY for window.

    After the ownership is verified, a server timestamp for "now" is
    obtained and the cut buffer is deleted: a requestor that is refused
    must not fall back to stale content the user did not choose.

    Args:
        display: The X11 display connection.
        root: The root window holding the cut buffer.
        window: The window to own the selection.
        atoms: Interned atoms.
        deferred_events: List to collect events read while waiting for
            the timestamp.

    Returns:
        The acquisition timestamp.

    Raises:
        OwnershipDenied: If another client owns PRIMARY afterwards.
    """
    window.set_selection_owner(Xatom.PRIMARY, X.CurrentTime)
    display.flush()

    owner = display.get_selection_owner(Xatom.PRIMARY)
    if window_id(owner) != window.id:
        raise OwnershipDenied(f"PRIMARY is owned by 0x{window_id(owner):x}")

    timestamp = get_server_timestamp(
        display, window, atoms.timestamp_property, deferred_events
    )
    root.delete_property(atoms.cut_buffer)
    display.flush()
    return timestamp


def release_selection(display: Display) -> None:
    """Set the owner of PRIMARY to None."""
    nobody = display.create_resource_object("window", X.NONE)
    nobody.set_selection_owner(Xatom.PRIMARY, X.CurrentTime)
    display.flush()


def take_ownership(state: MultiselectState) -> int:
    """Acquire PRIMARY and record the acquisition in state.

    Args:
        state: The pmultiselect state.

    Returns:
        The acquisition timestamp.

    Raises:
        OwnershipDenied: If another client won the race.
    """
    timestamp = acquire_selection(
        state.display, state.root, state.window, state.atoms, state.deferred_events
    )
    state.owns_selection = True
    state.acquisition_time = timestamp
    logger.debug("Acquired PRIMARY at time=%s", timestamp)
    return timestamp


def give_up_ownership(state: MultiselectState) -> None:
    """Release PRIMARY if we own it.

    The SelectionClear that follows is recognised as our own doing because
    owns_selection is already False when it arrives.
    """
    if not state.owns_selection:
        return
    state.owns_selection = False
    state.acquisition_time = None
    release_selection(state.display)
    logger.debug("Released PRIMARY")
