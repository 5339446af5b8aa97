#!/usr/bin/env python3
"""Main event loop.

This module integrates the X11 display file descriptor into an asyncio
event loop and dispatches every X11 event, one at a time, to the request
arbiter, the chooser, the flash window or the capture code. Events are
processed strictly in order on a single thread.

The loop also wakes up when the flash window is due to close, so that it is
closed even if no other event arrives.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import TYPE_CHECKING

from Xlib import X

from pmultiselect.arbiter import handle_selection_request
from pmultiselect.capture import on_selection_notify, request_capture
from pmultiselect.display import get_display_fd
from pmultiselect.events import process_pending_events
from pmultiselect.flash import expire_flash, flash_timeout, on_flash_expose
from pmultiselect.interaction import (
    handle_chooser_button, handle_chooser_key, on_chooser_expose, on_chooser_unmap,
    open_chooser,
)
from pmultiselect.ownership import window_id
from pmultiselect.pointer import release_pointer

if TYPE_CHECKING:
    from Xlib.protocol.event import KeyPress, SelectionClear
    from Xlib.protocol.rq import Event

    from pmultiselect.state import MultiselectState

logger = logging.getLogger(__name__)

CAPTURE_MODIFIERS = X.ControlMask | X.ShiftMask


async def run_event_loop(state: MultiselectState) -> None:
    """Run the event loop until state.running becomes False.

    Args:
        state: The pmultiselect state.
    """
    loop = asyncio.get_running_loop()
    display_fd = get_display_fd(state.display)

    def on_x11_readable() -> None:
        """Signal that X11 events are ready to be processed."""
        state.x11_event.set()

    def request_stop() -> None:
        state.running = False
        state.x11_event.set()

    loop.add_reader(display_fd, on_x11_readable)
    loop.add_signal_handler(signal.SIGINT, request_stop)
    loop.add_signal_handler(signal.SIGTERM, request_stop)
    try:
        await event_loop_inner(state)
    finally:
        loop.remove_reader(display_fd)
        loop.remove_signal_handler(signal.SIGINT)
        loop.remove_signal_handler(signal.SIGTERM)


async def event_loop_inner(state: MultiselectState) -> None:
    """Wait for X11 events or the flash deadline and process them.

    Args:
        state: The pmultiselect state.
    """
    # Events may already be queued by the round-trips made at startup.
    state.x11_event.set()
    while state.running:
        timeout = flash_timeout(state, state.clock())
        try:
            await asyncio.wait_for(state.x11_event.wait(), timeout)
        except asyncio.TimeoutError:
            pass
        state.x11_event.clear()
        process_x11_events(state)
        expire_flash(state, state.clock())
        # Round-trips made by the handlers may have queued events inside
        # python-xlib without leaving anything on the socket.
        if state.deferred_events or state.display.pending_events():
            state.x11_event.set()


def process_x11_events(state: MultiselectState) -> None:
    """Dispatch every pending X11 event, stopping early on exit."""
    for event in process_pending_events(state.display, state.deferred_events):
        dispatch_event(state, event)
        if not state.running:
            break


def dispatch_event(state: MultiselectState, event: Event) -> None:
    """Route one X11 event to its handler."""
    if event.type == X.SelectionRequest:
        handle_selection_request(state, event)
    elif event.type == X.SelectionNotify:
        on_selection_notify(state, event)
    elif event.type == X.SelectionClear:
        handle_ownership_lost(state, event)
    elif event.type == X.Expose:
        if window_id(event.window) == state.flash_window.id:
            on_flash_expose(state, event)
        elif window_id(event.window) == state.window.id:
            on_chooser_expose(state, event)
    elif event.type == X.KeyPress:
        if window_id(event.window) == state.root.id:
            handle_hotkey(state, event)
        else:
            handle_chooser_key(state, event)
    elif event.type == X.ButtonPress:
        handle_chooser_button(state, event)
    elif event.type == X.UnmapNotify:
        on_chooser_unmap(state, event)
    else:
        logger.debug("Ignoring event type=%s", event.type)


def handle_hotkey(state: MultiselectState, event: KeyPress) -> None:
    """Handle a key grabbed on the root window."""
    if (
        event.detail == state.hotkeys.capture
        and event.state & CAPTURE_MODIFIERS == CAPTURE_MODIFIERS
    ):
        request_capture(state)
    elif event.detail in state.hotkeys.open:
        if not open_chooser(state, None):
            logger.debug("Open key ignored, chooser busy")


def handle_ownership_lost(state: MultiselectState, event: SelectionClear) -> None:
    """React to another client taking PRIMARY.

    A SelectionClear caused by our own release is ignored. Otherwise the
    pointer grab is dropped; a non-daemon instance exits, a daemon started
    with --capture-on-clear captures the new selection.
    """
    if not state.owns_selection:
        logger.debug("SelectionClear after our own release")
        return
    state.owns_selection = False
    state.acquisition_time = None
    logger.warning("PRIMARY taken by another client at time=%s", event.time)
    if state.pointer_grabbed:
        release_pointer(state.display)
        state.pointer_grabbed = False
    if not state.options.daemon:
        state.running = False
    elif state.options.capture_on_clear:
        request_capture(state)
