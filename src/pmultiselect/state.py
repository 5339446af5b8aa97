#!/usr/bin/env python3
"""pmultiselect runtime state.

This module provides the MultiselectState dataclass, the single context
object threaded through the request arbiter, the interaction controller and
the event loop. Nothing in pmultiselect keeps process-wide state elsewhere.
"""

from __future__ import annotations

import asyncio
import enum
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from Xlib import Xatom

from pmultiselect.candidates import CandidateStore
from pmultiselect.constants import (
    CAPTURE_PROPERTY, CUT_BUFFER, FALLBACK_PROBE_TARGET, TIMESTAMP_PROPERTY,
)
from pmultiselect.flash import FlashPopup
from pmultiselect.pointer import PointerPosition
from pmultiselect.short_window import ShortTimeWindow

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.rq import Event
    from Xlib.xobject.drawable import Window

    from pmultiselect.pending import PendingRequest
    from pmultiselect.render import RenderStyle


class InteractionState(enum.Enum):
    """States of the chooser interaction."""

    IDLE = "idle"
    PENDING = "pending"
    SHOWING = "showing"
    ANSWERING = "answering"


@dataclass(frozen=True)
class Options:
    """
    Behaviour selected on the command line.

    Attributes:
        daemon: Long-lived mode; the chooser stays open when emptied.
        separator: Label/value separator for candidates, or None.
        open_keys: Keysym names of keys that open the chooser unprompted.
        delivery: "direct" to answer requests, "relay" for the paste relay.
        delegate: Path of the external paste-eligibility helper, or None.
        arrow_select: Up/Down finalize the choice instead of only moving.
        capture_on_clear: Capture the new selection when ownership is lost.
        reassert: Reacquire ownership after every capture.
        daemon_running: Another instance runs in daemon mode.
    """

    daemon: bool = False
    separator: str | None = None
    open_keys: tuple[str, ...] = ()
    delivery: str = "direct"
    delegate: str | None = None
    arrow_select: bool = False
    capture_on_clear: bool = False
    reassert: bool = False
    daemon_running: bool = False

    @property
    def relay(self) -> bool:
        return self.delivery == "relay"


@dataclass(frozen=True)
class Atoms:
    """Atoms interned once at startup to avoid X11 round-trips."""

    targets: int
    utf8_string: int
    string: int
    probe: int
    cut_buffer: int
    capture_property: int
    timestamp_property: int

    @classmethod
    def intern(cls, display: Display) -> Atoms:
        return cls(
            targets=display.intern_atom("TARGETS"),
            utf8_string=display.intern_atom("UTF8_STRING"),
            string=Xatom.STRING,
            probe=display.intern_atom(FALLBACK_PROBE_TARGET),
            cut_buffer=display.intern_atom(CUT_BUFFER),
            capture_property=display.intern_atom(CAPTURE_PROPERTY),
            timestamp_property=display.intern_atom(TIMESTAMP_PROPERTY),
        )


@dataclass(frozen=True)
class Hotkeys:
    """Keycodes grabbed on the root window."""

    capture: int | None = None
    open: frozenset[int] = frozenset()


@dataclass(frozen=True)
class SavedFocus:
    """Input focus to restore when the chooser closes."""

    window: Window | int
    revert_to: int


@dataclass(frozen=True)
class ArmedRelay:
    """A paste relay waiting for the chooser to unmap."""

    position: PointerPosition
    outcome: str


@dataclass
class MultiselectState:
    """State of a running pmultiselect instance.

    Attributes:
        display: The X11 display connection.
        root: The root window.
        window: The chooser window, also the selection owner.
        flash_window: The transient confirmation window.
        atoms: Interned atoms.
        options: Command line behaviour.
        style: Font and graphics context for drawing, or None.
        store: The candidates.
        flash: State of the confirmation window.
        short_window: Recently served outcomes.
        hotkeys: Keycodes grabbed on the root window.
        clock: Monotonic clock used for the short-time window and flash.
        owns_selection: True while we hold PRIMARY.
        acquisition_time: X server timestamp of the last acquisition.
        interaction: Current chooser state.
        pending: The deferred request awaiting the user's choice.
        saved_focus: Focus to restore when the chooser unmaps.
        pointer: Pointer position saved when the chooser opened.
        cursor: Highlighted candidate in the chooser.
        relay: Paste relay to fire when the chooser unmaps.
        pointer_grabbed: True while the chooser holds the pointer grab.
        broken_requester: A fallback-timeout probe was seen.
        last_outcome: The last string chosen, or None after a refusal.
        exit_after_unmap: Terminate once the chooser has unmapped.
        running: False once the event loop should stop.
        deferred_events: X11 events read while waiting for a reply.
        x11_event: Signaled when X11 events need processing.
    """

    display: Display
    root: Window
    window: Window
    flash_window: Window
    atoms: Atoms
    options: Options = field(default_factory=Options)
    style: RenderStyle | None = None
    store: CandidateStore = field(default_factory=CandidateStore)
    flash: FlashPopup = field(default_factory=FlashPopup)
    short_window: ShortTimeWindow = field(default_factory=ShortTimeWindow)
    hotkeys: Hotkeys = field(default_factory=Hotkeys)
    clock: Callable[[], float] = time.monotonic
    owns_selection: bool = False
    acquisition_time: int | None = None
    interaction: InteractionState = InteractionState.IDLE
    pending: PendingRequest | None = None
    saved_focus: SavedFocus | None = None
    pointer: PointerPosition | None = None
    cursor: int = 0
    relay: ArmedRelay | None = None
    pointer_grabbed: bool = False
    broken_requester: bool = False
    last_outcome: str | None = None
    exit_after_unmap: bool = False
    running: bool = True
    deferred_events: list[Event] = field(default_factory=list)
    x11_event: asyncio.Event = field(default_factory=asyncio.Event)

    def is_busy(self) -> bool:
        """Return True while a request is deferred or a relay is armed."""
        return self.pending is not None or self.relay is not None
