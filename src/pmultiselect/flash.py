#!/usr/bin/env python3
"""
Confirmation flash window.

When a candidate is captured, or the list changes without the chooser being
open, the candidates are shown briefly in a separate window. The flash
window only ever receives Expose events: it never takes the focus or the
pointer, so it cannot interfere with the chooser.

The window closes FLASH_DELAY seconds after it has been painted. If the
Expose event is lost, it still closes FLASH_FALLBACK seconds after being
shown. The event loop wakes up at deadline() to close it.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pmultiselect.constants import FLASH_DELAY, FLASH_FALLBACK

if TYPE_CHECKING:
    from Xlib.protocol.event import Expose

    from pmultiselect.state import MultiselectState

logger = logging.getLogger(__name__)


class FlashStatus(enum.Enum):
    HIDDEN = "hidden"
    SHOWN = "shown"


@dataclass
class FlashPopup:
    """
    State of the flash window.

    Attributes:
        status: Whether the window is shown.
        shown_at: Clock value when it was last mapped.
        painted_at: Clock value when it was last painted, None until then.
    """

    status: FlashStatus = FlashStatus.HIDDEN
    shown_at: float | None = None
    painted_at: float | None = None

    def mark_shown(self, now: float) -> None:
        self.status = FlashStatus.SHOWN
        self.shown_at = now
        self.painted_at = None

    def mark_painted(self, now: float) -> None:
        if self.status is FlashStatus.SHOWN:
            self.painted_at = now

    def mark_hidden(self) -> None:
        self.status = FlashStatus.HIDDEN
        self.shown_at = None
        self.painted_at = None

    def deadline(self) -> float | None:
        """Return the clock value at which the window must close, if shown."""
        if self.status is FlashStatus.HIDDEN:
            return None
        if self.painted_at is not None:
            return self.painted_at + FLASH_DELAY
        return self.shown_at + FLASH_FALLBACK


def show_flash(state: MultiselectState) -> None:
    """Map the flash window at the pointer, sized for the current candidates."""
    from pmultiselect.render import present_window
    present_window(state, state.flash_window, len(state.store))
    state.flash.mark_shown(state.clock())
    logger.debug("Flash shown with %d candidates", len(state.store))


def on_flash_expose(state: MultiselectState, event: Expose) -> None:
    """Paint the flash window and start its visibility delay."""
    from pmultiselect.render import draw_candidates
    if event.count != 0:
        return
    draw_candidates(state.flash_window, state.style, state.store)
    state.display.flush()
    state.flash.mark_painted(state.clock())


def expire_flash(state: MultiselectState, now: float) -> bool:
    """Close the flash window if its deadline has passed.

    Returns:
        True if the window was closed.
    """
    deadline = state.flash.deadline()
    if deadline is None or now < deadline:
        return False
    state.flash_window.unmap()
    state.display.flush()
    state.flash.mark_hidden()
    logger.debug("Flash hidden")
    return True


def flash_timeout(state: MultiselectState, now: float) -> float | None:
    """Seconds until the flash window must close, or None if hidden."""
    deadline = state.flash.deadline()
    if deadline is None:
        return None
    return max(0.0, deadline - now)
