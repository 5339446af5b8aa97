#!/usr/bin/env python3
"""Pointer grab and position helpers for the chooser.

The chooser grabs the pointer while it is shown, so that the requestor
cannot be clicked again in the middle of a choice. The grab is retried with
tenacity because it fails while the button that triggered the request is
still pressed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed
from Xlib import X

from pmultiselect.constants import GRAB_ATTEMPTS, GRAB_RETRY_WAIT
from pmultiselect.errors import GrabFailed
from pmultiselect.ownership import window_id

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.xobject.drawable import Window

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PointerPosition:
    """Pointer position on the root window and the window under it."""

    x: int
    y: int
    child: int


@retry(
    wait=wait_fixed(GRAB_RETRY_WAIT),
    retry=retry_if_exception_type(GrabFailed),
    stop=stop_after_attempt(GRAB_ATTEMPTS),
    reraise=True,
)
def grab_pointer(window: Window) -> None:
    """Grab the pointer for window, reporting button presses to it.

    Args:
        window: The window to grab the pointer for.

    Raises:
        GrabFailed: If every attempt failed.
    """
    status = window.grab_pointer(
        True, X.ButtonPressMask, X.GrabModeAsync, X.GrabModeAsync,
        X.NONE, X.NONE, X.CurrentTime,
    )
    if status != X.GrabSuccess:
        logger.debug("Pointer grab returned status %s", status)
        raise GrabFailed(status)


def release_pointer(display: Display) -> None:
    """Release the pointer grab."""
    display.ungrab_pointer(X.CurrentTime)
    display.flush()


def query_pointer_position(root: Window) -> PointerPosition:
    """Return the pointer position on the root window.

    Args:
        root: The root window.

    Returns:
        The position and the id of the top-level window under the pointer.
    """
    reply = root.query_pointer()
    return PointerPosition(x=reply.root_x, y=reply.root_y, child=window_id(reply.child))


def warp_pointer(display: Display, root: Window, position: PointerPosition) -> None:
    """Move the pointer back to a saved position."""
    root.warp_pointer(position.x, position.y)
    display.flush()
