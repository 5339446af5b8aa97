#!/usr/bin/env python3
"""Tests for PRIMARY ownership.

Uses mocks for X11 objects to avoid requiring a real display.
"""

from unittest.mock import MagicMock

import pytest
from Xlib import X, Xatom

from conftest import ATOMS
from pmultiselect.errors import OwnershipDenied
from pmultiselect.ownership import (
    acquire_selection, give_up_ownership, release_selection, take_ownership,
    window_id,
)


def _property_notify(window, atom: int, time: int) -> MagicMock:
    event = MagicMock()
    event.type = X.PropertyNotify
    event.window = window
    event.atom = atom
    event.time = time
    return event


class TestWindowId:
    """Tests for window_id."""

    def test_window_object(self) -> None:
        assert window_id(MagicMock(id=0x42)) == 0x42

    def test_none_integer(self) -> None:
        assert window_id(X.NONE) == X.NONE


class TestAcquireSelection:
    """Tests for acquire_selection."""

    def test_success_returns_server_timestamp(self) -> None:
        display = MagicMock()
        root = MagicMock()
        window = MagicMock(id=0x400001)
        display.get_selection_owner.return_value = MagicMock(id=0x400001)
        display.next_event.return_value = _property_notify(
            window, ATOMS.timestamp_property, 777
        )

        deferred: list = []
        assert acquire_selection(display, root, window, ATOMS, deferred) == 777
        window.set_selection_owner.assert_called_once_with(Xatom.PRIMARY, X.CurrentTime)
        root.delete_property.assert_called_once_with(ATOMS.cut_buffer)
        assert deferred == []

    def test_events_read_while_waiting_are_deferred(self) -> None:
        display = MagicMock()
        window = MagicMock(id=0x400001)
        display.get_selection_owner.return_value = window
        request = MagicMock(type=X.SelectionRequest)
        display.next_event.side_effect = [
            request, _property_notify(window, ATOMS.timestamp_property, 9),
        ]

        deferred: list = []
        acquire_selection(display, MagicMock(), window, ATOMS, deferred)
        assert deferred == [request]

    def test_denied_when_another_client_owns(self) -> None:
        display = MagicMock()
        root = MagicMock()
        window = MagicMock(id=0x400001)
        display.get_selection_owner.return_value = MagicMock(id=0x999)

        with pytest.raises(OwnershipDenied):
            acquire_selection(display, root, window, ATOMS, [])
        root.delete_property.assert_not_called()


class TestStateOwnership:
    """Tests for take_ownership and give_up_ownership."""

    def test_take_ownership_records_time(self, state) -> None:
        state.owns_selection = False
        state.display.get_selection_owner.return_value = state.window
        state.display.next_event.return_value = _property_notify(
            state.window, ATOMS.timestamp_property, 4242
        )
        assert take_ownership(state) == 4242
        assert state.owns_selection is True
        assert state.acquisition_time == 4242

    def test_take_ownership_denied_leaves_state(self, state) -> None:
        state.owns_selection = False
        state.acquisition_time = None
        state.display.get_selection_owner.return_value = X.NONE
        with pytest.raises(OwnershipDenied):
            take_ownership(state)
        assert state.owns_selection is False

    def test_give_up_releases_once(self, state) -> None:
        give_up_ownership(state)
        give_up_ownership(state)
        assert state.owns_selection is False
        assert state.acquisition_time is None
        state.display.create_resource_object.assert_called_once_with("window", X.NONE)

    def test_release_selection_sets_owner_none(self) -> None:
        display = MagicMock()
        release_selection(display)
        nobody = display.create_resource_object.return_value
        nobody.set_selection_owner.assert_called_once_with(Xatom.PRIMARY, X.CurrentTime)
        display.flush.assert_called()
