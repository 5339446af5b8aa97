#!/usr/bin/env python3
"""Pytest fixtures for pmultiselect tests.

Provides a MultiselectState built from mocked X11 objects with a
controllable clock, a factory for SelectionRequest events, and an Xvfb
display for the optional integration tests.
"""

import os
import shutil
import subprocess
from collections.abc import Callable, Generator
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from Xlib import X, Xatom

from pmultiselect.candidates import CandidateStore
from pmultiselect.render import RenderStyle
from pmultiselect.state import Atoms, MultiselectState

ATOMS = Atoms(
    targets=100,
    utf8_string=101,
    string=Xatom.STRING,
    probe=102,
    cut_buffer=103,
    capture_property=104,
    timestamp_property=105,
)

CHOOSER_ID = 0x400001
FLASH_ID = 0x400002
ROOT_ID = 0x100
FOCUSED_ID = 0x500001
UNDER_POINTER_ID = 0x600001
REQUESTOR_ID = 0x700001
ACQUISITION_TIME = 5000


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def sent_notify(requestor: MagicMock):
    """Return the SelectionNotify event last sent to a requestor."""
    return requestor.send_event.call_args[0][0]


@pytest.fixture
def clock() -> FakeClock:
    """Create a fake clock."""
    return FakeClock()


@pytest.fixture
def mock_display() -> MagicMock:
    """Create a mock X11 display."""
    display = MagicMock()
    display.get_input_focus.return_value = SimpleNamespace(
        focus=MagicMock(id=FOCUSED_ID), revert_to=X.RevertToParent,
    )
    display.pending_events.return_value = 0
    display.has_extension.return_value = True
    return display


@pytest.fixture
def state(mock_display: MagicMock, clock: FakeClock) -> MultiselectState:
    """Create a state owning PRIMARY with two candidates, chooser idle."""
    root = MagicMock()
    root.id = ROOT_ID
    root.query_pointer.return_value = SimpleNamespace(
        root_x=300, root_y=200, child=MagicMock(id=UNDER_POINTER_ID),
    )
    window = MagicMock()
    window.id = CHOOSER_ID
    window.grab_pointer.return_value = X.GrabSuccess
    flash_window = MagicMock()
    flash_window.id = FLASH_ID
    mock_display.screen.return_value = SimpleNamespace(
        root=root, width_in_pixels=1920, height_in_pixels=1080,
    )
    return MultiselectState(
        display=mock_display,
        root=root,
        window=window,
        flash_window=flash_window,
        atoms=ATOMS,
        style=RenderStyle(gc=MagicMock(), ascent=14, descent=4, char_width=9),
        store=CandidateStore(items=["alpha", "beta"]),
        clock=clock,
        owns_selection=True,
        acquisition_time=ACQUISITION_TIME,
    )


@pytest.fixture
def make_request() -> Callable[..., MagicMock]:
    """Return a factory for SelectionRequest events."""

    def factory(
        target: int = ATOMS.utf8_string,
        requestor_id: int = REQUESTOR_ID,
        time: int = ACQUISITION_TIME + 1000,
        prop: int = 200,
    ) -> MagicMock:
        event = MagicMock()
        event.type = X.SelectionRequest
        event.requestor = MagicMock()
        event.requestor.id = requestor_id
        event.selection = Xatom.PRIMARY
        event.target = target
        event.property = prop
        event.time = time
        return event

    return factory


@pytest.fixture
def xvfb_display() -> Generator[str | None, None, None]:
    """Start Xvfb virtual display if available, yield DISPLAY string.

    Returns None if Xvfb is not available. Tests using this fixture
    should skip if the value is None.
    """
    if shutil.which("Xvfb") is None:
        yield None
        return

    display = ":99"
    proc = subprocess.Popen(
        ["Xvfb", display, "-screen", "0", "1024x768x24"],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
    try:
        import time

        time.sleep(0.5)
        if proc.poll() is not None:
            yield None
            return
        old_display = os.environ.get("DISPLAY")
        os.environ["DISPLAY"] = display
        yield display
        if old_display is not None:
            os.environ["DISPLAY"] = old_display
        elif "DISPLAY" in os.environ:
            del os.environ["DISPLAY"]
    finally:
        proc.terminate()
        proc.wait()
