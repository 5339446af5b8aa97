#!/usr/bin/env python3
"""Integration tests against a real X server (Xvfb).

A second client connection plays the requestor: it asks for PRIMARY and
reads the reply from its own property.
"""

import pytest
from Xlib import X, Xatom
from Xlib.display import Display

from pmultiselect.arbiter import Verdict, handle_selection_request
from pmultiselect.candidates import CandidateStore
from pmultiselect.display import create_chooser_window, create_flash_window
from pmultiselect.interaction import finalize
from pmultiselect.ownership import take_ownership
from pmultiselect.render import load_style
from pmultiselect.selection_utils import wait_for_event_type
from pmultiselect.state import Atoms, InteractionState, MultiselectState

pytestmark = pytest.mark.integration


@pytest.fixture
def owner(xvfb_display):
    if xvfb_display is None:
        pytest.skip("Xvfb not available")
    display = Display(xvfb_display)
    window = create_chooser_window(display, "pmultiselect")
    state = MultiselectState(
        display=display,
        root=display.screen().root,
        window=window,
        flash_window=create_flash_window(display),
        atoms=Atoms.intern(display),
        store=CandidateStore(items=["alpha", "beta"]),
    )
    state.style = load_style(display, window)
    take_ownership(state)
    yield state
    display.close()


@pytest.fixture
def requestor(xvfb_display):
    display = Display(xvfb_display)
    window = display.screen().root.create_window(0, 0, 1, 1, 0, X.CopyFromParent)
    yield display, window
    display.close()


def _ask(owner, requestor, target_name: str):
    client, window = requestor
    target = client.intern_atom(target_name)
    prop = client.intern_atom("PMULTISELECT_TEST")
    window.convert_selection(Xatom.PRIMARY, target, prop, X.CurrentTime)
    client.flush()
    event = wait_for_event_type(owner.display, X.SelectionRequest, owner.deferred_events)
    return event, prop


def _reply(requestor, prop):
    client, window = requestor
    notify = wait_for_event_type(client, X.SelectionNotify, [])
    if notify.property == X.NONE:
        return None
    return window.get_full_property(prop, X.AnyPropertyType)


def test_we_own_primary(owner) -> None:
    assert owner.display.get_selection_owner(Xatom.PRIMARY).id == owner.window.id
    assert owner.acquisition_time is not None


def test_targets_answered_at_once(owner, requestor) -> None:
    event, prop = _ask(owner, requestor, "TARGETS")
    handle_selection_request(owner, event)
    reply = _reply(requestor, prop)
    assert list(reply.value) == [Xatom.STRING, owner.atoms.utf8_string]
    assert owner.interaction is InteractionState.IDLE


def test_chosen_string_delivered(owner, requestor) -> None:
    event, prop = _ask(owner, requestor, "UTF8_STRING")
    decision = handle_selection_request(owner, event)
    assert decision.verdict is Verdict.DEFER
    finalize(owner, 1)
    reply = _reply(requestor, prop)
    assert bytes(reply.value) == b"beta"
