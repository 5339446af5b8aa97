"""X11 display, windows and key grabs.

This module provides the functions that set up the X11 side of
pmultiselect using the python-xlib library.

The module handles:
- Validating X11 display connectivity
- Detecting an already running instance by window name
- Creating the chooser and flash windows
- Grabbing the capture and open keys on the root window
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

from Xlib import X, XK

from pmultiselect.constants import CAPTURE_KEY
from pmultiselect.state import Hotkeys

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.xobject.drawable import Window

    from pmultiselect.state import Options

logger = logging.getLogger(__name__)

# Lock modifiers that must not prevent a grabbed key from matching.
_LOCK_COMBINATIONS = (0, X.LockMask, X.Mod2Mask, X.LockMask | X.Mod2Mask)


def validate_display() -> Display:
    """Validate X11 connectivity and return Display object.

    Checks that the DISPLAY environment variable is set and opens an X11
    connection. This should be called at startup to fail fast if X11 is
    not available.

    Returns:
        Display object for X11 operations.

    Raises:
        SystemExit: If DISPLAY is unset or X11 connection fails.
    """
    display_name = os.environ.get("DISPLAY")
    if not display_name:
        print("Error: DISPLAY environment variable is not set.", file=sys.stderr)
        print("X11 display is required for selection access.", file=sys.stderr)
        sys.exit(1)

    try:
        from Xlib.display import Display as XDisplay
        return XDisplay(display_name)
    except Exception as e:
        print(f"Error: Failed to connect to X11 display: {e}", file=sys.stderr)
        sys.exit(1)


def get_display_fd(display: Display) -> int:
    """Get the file descriptor for the X11 display connection.

    The file descriptor can be integrated into asyncio's event loop using
    loop.add_reader() for event-driven X11 event processing.
    """
    return display.fileno()


def window_name_exists(root: Window, name: str) -> bool:
    """Return True if a top-level window is named name.

    Args:
        root: The root window.
        name: The WM_NAME to look for.
    """
    from Xlib import error

    for child in root.query_tree().children:
        try:
            if child.get_wm_name() == name:
                return True
        except error.BadWindow:
            continue
    return False


def create_chooser_window(display: Display, name: str) -> Window:
    """Create the unmapped chooser window.

    The chooser is an override-redirect window so that the window manager
    neither decorates nor moves it. It also owns PRIMARY and receives the
    PropertyNotify events used to obtain server timestamps.

    Args:
        display: The X11 display connection.
        name: The window name, used to detect running instances.

    Returns:
        The chooser window.
    """
    screen = display.screen()
    window = screen.root.create_window(
        0, 0, 1, 1, 1, screen.root_depth,
        background_pixel=screen.white_pixel,
        override_redirect=True,
        event_mask=(
            X.ExposureMask | X.StructureNotifyMask | X.KeyPressMask
            | X.PropertyChangeMask
        ),
    )
    window.set_wm_name(name)
    return window


def create_flash_window(display: Display) -> Window:
    """Create the unmapped flash window, which only receives Expose events."""
    screen = display.screen()
    return screen.root.create_window(
        0, 0, 1, 1, 1, screen.root_depth,
        background_pixel=screen.white_pixel,
        override_redirect=True,
        event_mask=X.ExposureMask,
    )


def keycode_for(display: Display, name: str) -> int | None:
    """Return the keycode for a keysym name, or None if there is none."""
    keysym = XK.string_to_keysym(name)
    if keysym == X.NoSymbol:
        return None
    keycode = display.keysym_to_keycode(keysym)
    return keycode or None


def grab_hotkeys(display: Display, root: Window, options: Options) -> Hotkeys:
    """Grab the capture key and the open keys on the root window.

    The capture key is left to the daemon when one is running and this
    instance is not it.

    Args:
        display: The X11 display connection.
        root: The root window.
        options: Command line behaviour.

    Returns:
        The grabbed keycodes.
    """
    capture = None
    if options.daemon or not options.daemon_running:
        capture = keycode_for(display, CAPTURE_KEY)
        if capture is not None:
            for locks in _LOCK_COMBINATIONS:
                root.grab_key(
                    capture, X.ControlMask | X.ShiftMask | locks, False,
                    X.GrabModeAsync, X.GrabModeAsync,
                )

    open_keys = set()
    for name in options.open_keys:
        keycode = keycode_for(display, name)
        if keycode is None:
            logger.warning("No key for %s, not grabbing it", name)
            continue
        root.grab_key(keycode, X.AnyModifier, False, X.GrabModeAsync, X.GrabModeAsync)
        open_keys.add(keycode)

    display.flush()
    return Hotkeys(capture=capture, open=frozenset(open_keys))
