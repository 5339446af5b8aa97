#!/usr/bin/env python3
"""Paste relay.

Some requestors only accept the selection as the immediate reaction to a
real input event, not as a late reply to a request the user made seconds
earlier. For them the chosen string is delivered by a relay: once the
chooser has closed, the pointer is moved back where it was when the request
arrived and a middle click is synthesized there. The requestor asks for the
selection again, and the fresh request is answered at once from the
short-time window.

If no fresh request arrives (the click landed elsewhere, or the requestor
ignored it), the string is not delivered for that interaction.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from Xlib import X

from pmultiselect.constants import RELAY_INTERVAL
from pmultiselect.delegate import destination_eligible
from pmultiselect.pointer import warp_pointer
from pmultiselect.short_window import ANY_REQUESTOR

if TYPE_CHECKING:
    from Xlib.display import Display

    from pmultiselect.state import ArmedRelay, MultiselectState

logger = logging.getLogger(__name__)

MIDDLE_BUTTON = 2


def should_relay(state: MultiselectState, text: str | None, destination: int) -> bool:
    """Return whether a choice is delivered by relay instead of a direct answer.

    Args:
        state: The pmultiselect state.
        text: The chosen string, or None for a cancel.
        destination: The window that should receive the string.
    """
    if not state.options.relay or text is None:
        return False
    return destination_eligible(state.options.delegate, text, destination)


def send_middle_click(display: Display) -> None:
    """Synthesize a middle button press and release at the pointer."""
    from Xlib.ext import xtest
    xtest.fake_input(display, X.ButtonPress, MIDDLE_BUTTON)
    xtest.fake_input(display, X.ButtonRelease, MIDDLE_BUTTON)
    display.flush()


def fire_relay(state: MultiselectState, relay: ArmedRelay) -> None:
    """Restore the pointer and click to make the requestor ask again.

    The outcome is recorded for any requestor before the click is sent, so
    that the fresh request finds it.

    Args:
        state: The pmultiselect state.
        relay: The armed relay.
    """
    if not state.display.has_extension("XTEST"):
        logger.warning("XTEST extension missing, cannot relay the paste")
        return
    state.short_window.record(
        ANY_REQUESTOR, relay.outcome, state.clock(), RELAY_INTERVAL
    )
    warp_pointer(state.display, state.root, relay.position)
    send_middle_click(state.display)
    logger.debug("Relay click sent at %d,%d", relay.position.x, relay.position.y)
