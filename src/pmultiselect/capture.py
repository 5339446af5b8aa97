"""Capture of new candidates from the PRIMARY selection.

This module requests the current PRIMARY selection from its owner and adds
the reply to the candidate store. It works like any other requestor: the
reply arrives later as a SelectionNotify event, handled by the event loop.

The module handles:
- Requesting PRIMARY as UTF8_STRING into a private property
- Reading and deleting that property when the reply arrives
- Appending the new candidate and reacquiring ownership when needed
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from Xlib import X, Xatom

from pmultiselect.errors import CapacityExceeded, OwnershipDenied
from pmultiselect.flash import show_flash
from pmultiselect.ownership import take_ownership

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.event import SelectionNotify
    from Xlib.xobject.drawable import Window

    from pmultiselect.state import Atoms, MultiselectState

logger = logging.getLogger(__name__)


def request_capture(state: MultiselectState, target: int | None = None) -> bool:
    """Ask the owner of PRIMARY for its content.

    When the store is full the request is not made; the flash window shows
    the full list instead.

    Args:
        state: The pmultiselect state.
        target: The text target to ask for, UTF8_STRING by default.

    Returns:
        True if the request was sent.
    """
    if state.store.is_full():
        logger.warning("Already %d candidates, not capturing", len(state.store))
        show_flash(state)
        return False
    if target is None:
        target = state.atoms.utf8_string
    state.window.convert_selection(
        Xatom.PRIMARY, target, state.atoms.capture_property, X.CurrentTime,
    )
    state.display.flush()
    logger.debug("Requested PRIMARY for capture as target=%s", target)
    return True


def read_captured(
    display: Display, window: Window, prop_atom: int, atoms: Atoms
) -> str | None:
    """Read and delete the captured property from window.

    Only UTF8_STRING and STRING (Latin-1) replies are accepted. Anything
    else, including an INCR transfer of a large selection, is dropped.

    Args:
        display: The X11 display connection.
        window: The window holding the property.
        prop_atom: The property atom to read.
        atoms: Interned atoms.

    Returns:
        The decoded text, or None if the property is missing or not text.
    """
    prop = window.get_full_property(prop_atom, X.AnyPropertyType)
    window.delete_property(prop_atom)
    display.flush()

    if prop is None:
        logger.debug("Captured property was empty")
        return None
    if prop.property_type not in (atoms.utf8_string, Xatom.STRING) or prop.format != 8:
        logger.warning(
            "Captured selection has type %s format %s, not text; ignoring it",
            prop.property_type, prop.format,
        )
        return None
    data = prop.value
    if isinstance(data, str):
        return data
    encoding = "utf-8" if prop.property_type == atoms.utf8_string else "latin-1"
    return bytes(data).decode(encoding, errors="replace")


def on_selection_notify(state: MultiselectState, event: SelectionNotify) -> None:
    """Add the captured selection as a new candidate."""
    if event.property == X.NONE:
        if event.target == state.atoms.utf8_string:
            logger.debug("UTF8_STRING capture refused, asking for STRING")
            request_capture(state, Xatom.STRING)
        else:
            logger.debug("Capture refused by the selection owner")
        return
    if event.property != state.atoms.capture_property:
        return
    text = read_captured(state.display, state.window, event.property, state.atoms)
    if not text:
        return
    add_candidate(state, text)


def add_candidate(state: MultiselectState, text: str) -> bool:
    """Append a candidate, reacquire ownership if needed, flash the list.

    Ownership is reacquired once two or more candidates exist (with a
    single candidate the previous owner can serve it just as well), or
    after every capture with --reassert.

    Args:
        state: The pmultiselect state.
        text: The new candidate.

    Returns:
        True if the candidate was added.
    """
    from pmultiselect.interaction import finalize

    try:
        state.store.append(text)
    except CapacityExceeded as e:
        logger.warning("%s, dropping captured text", e)
        return False
    logger.debug("Captured candidate %d", len(state.store))

    if len(state.store) >= 2 or state.options.reassert:
        try:
            take_ownership(state)
        except OwnershipDenied as e:
            logger.warning("Cannot reacquire PRIMARY: %s", e)
            finalize(state, None)
    show_flash(state)
    return True
