#!/usr/bin/env python3
"""X11 selection utility functions.

This module provides helper functions shared by the ownership and capture
code: a blocking wait for one event type and the server timestamp query.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.rq import Event
    from Xlib.xobject.drawable import Window


def wait_for_event_type(
    display: "Display",
    target_event_type: int,
    deferred_events: list["Event"],
    match: Callable[["Event"], bool] | None = None,
) -> "Event":
    """Poll display for an event of the target type.

    Reads events from the display until an event of target_event_type
    (and accepted by match, if given) is found. Every other event is
    appended to deferred_events so that the event loop processes it later,
    in order.

    This is a blocking operation that should only be called when the
    event is known to be coming (after a property change on our own
    window).

    Args:
        display: The X11 display connection.
        target_event_type: The X11 event type to wait for.
        deferred_events: List to collect other events during wait.
        match: Optional predicate the event must also satisfy.

    Returns:
        The matching event of target_event_type.
    """
    while True:
        event = display.next_event()
        if event.type == target_event_type and (match is None or match(event)):
            return event
        deferred_events.append(event)


def get_server_timestamp(
    display: "Display",
    window: "Window",
    prop_atom: int,
    deferred_events: list["Event"],
) -> int:
    """Query the X server's current timestamp.

    Uses the PropertyNotify pattern: append zero bytes to a property on
    the window, flush, and wait for the PropertyNotify event whose
    timestamp reflects the server's current time. The property content
    does not change. This adds one round-trip.

    Args:
        display: The X11 display connection.
        window: The window to change a property on. It must select
            PropertyChangeMask.
        prop_atom: The property to append to.
        deferred_events: List to collect other events during wait.

    Returns:
        The X server's current timestamp.
    """
    from Xlib import X, Xatom

    window.change_property(prop_atom, Xatom.STRING, 8, b"", X.PropModeAppend)
    display.flush()

    event = wait_for_event_type(
        display, X.PropertyNotify, deferred_events,
        match=lambda e: e.window.id == window.id and e.atom == prop_atom,
    )
    return event.time
