#!/usr/bin/env python3
"""Application setup and shutdown for pmultiselect.

pmultiselect owns PRIMARY on behalf of several candidate strings. When
another program asks for the selection, a chooser opens at the pointer and
the string the user picks is sent back; any other key refuses the request.

Startup validates the X11 display, refuses to run beside a duplicate
instance, creates the chooser and flash windows, grabs the hotkeys and
acquires PRIMARY before entering the event loop. Shutdown refuses any
request still waiting for the user and releases PRIMARY.

Usage:
    pmultiselect [OPTIONS] [STRINGS]...
"""

from __future__ import annotations

import dataclasses
import logging
import sys
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pmultiselect.state import MultiselectState, Options

logger = logging.getLogger(__name__)


async def run_multiselect(options: Options, seeds: Sequence[str]) -> None:
    """Run pmultiselect until it quits, loses PRIMARY or is signaled.

    Args:
        options: Command line behaviour.
        seeds: The initial candidates.

    Raises:
        SystemExit: On fatal startup errors.
    """
    from pmultiselect.candidates import CandidateStore
    from pmultiselect.constants import WM_NAME, WM_NAME_DAEMON
    from pmultiselect.display import (
        create_chooser_window, create_flash_window, grab_hotkeys, validate_display,
    )
    from pmultiselect.errors import OwnershipDenied
    from pmultiselect.event_loop import run_event_loop
    from pmultiselect.instance import check_running_instances
    from pmultiselect.ownership import take_ownership
    from pmultiselect.render import load_style
    from pmultiselect.state import Atoms, MultiselectState

    display = validate_display()
    root = display.screen().root
    daemon_running = check_running_instances(root, options.daemon)
    options = dataclasses.replace(options, daemon_running=daemon_running)

    window = create_chooser_window(display, WM_NAME_DAEMON if options.daemon else WM_NAME)
    state = MultiselectState(
        display=display,
        root=root,
        window=window,
        flash_window=create_flash_window(display),
        atoms=Atoms.intern(display),
        options=options,
        store=CandidateStore(items=list(seeds)),
    )
    state.style = load_style(display, window)
    state.hotkeys = grab_hotkeys(display, root, options)

    try:
        try:
            take_ownership(state)
        except OwnershipDenied as e:
            if not options.daemon:
                print(f"Error: Cannot acquire selection ownership: {e}", file=sys.stderr)
                sys.exit(1)
            logger.warning("Starting without PRIMARY: %s", e)
        await run_event_loop(state)
    finally:
        shutdown(state)


def shutdown(state: MultiselectState) -> None:
    """Refuse the pending request, release PRIMARY and close the display."""
    from pmultiselect.interaction import abort_chooser
    from pmultiselect.ownership import give_up_ownership

    abort_chooser(state)
    give_up_ownership(state)
    state.window.destroy()
    state.flash_window.destroy()
    state.display.close()
