#!/usr/bin/env python3
"""Tests for application startup and shutdown.

Uses mocks for X11 objects to avoid requiring a real display.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from Xlib import X

from conftest import sent_notify
from pmultiselect.app import run_multiselect, shutdown
from pmultiselect.errors import OwnershipDenied
from pmultiselect.interaction import open_chooser
from pmultiselect.pending import PendingRequest
from pmultiselect.state import Options


class TestShutdown:
    """Tests for shutdown."""

    def test_refuses_pending_and_releases(self, state, make_request) -> None:
        event = make_request()
        open_chooser(state, PendingRequest.from_event(event))
        shutdown(state)
        assert sent_notify(event.requestor).property == X.NONE
        assert state.owns_selection is False
        state.window.destroy.assert_called_once()
        state.flash_window.destroy.assert_called_once()
        state.display.close.assert_called_once()


def _startup_patches(take_ownership, run_event_loop):
    display = MagicMock()
    return [
        patch("pmultiselect.display.validate_display", return_value=display),
        patch("pmultiselect.instance.check_running_instances", return_value=False),
        patch("pmultiselect.display.create_chooser_window"),
        patch("pmultiselect.display.create_flash_window"),
        patch("pmultiselect.display.grab_hotkeys"),
        patch("pmultiselect.render.load_style"),
        patch("pmultiselect.ownership.take_ownership", take_ownership),
        patch("pmultiselect.event_loop.run_event_loop", run_event_loop),
    ]


class TestRunMultiselect:
    """Tests for run_multiselect startup."""

    @pytest.mark.asyncio
    async def test_runs_loop_with_seeded_store(self) -> None:
        loop = AsyncMock()
        patches = _startup_patches(MagicMock(), loop)
        for p in patches:
            p.start()
        try:
            await run_multiselect(Options(), ["alpha", "beta"])
        finally:
            for p in patches:
                p.stop()
        state = loop.call_args.args[0]
        assert list(state.store) == ["alpha", "beta"]
        state.display.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_ownership_denied_is_fatal(self, capsys) -> None:
        loop = AsyncMock()
        patches = _startup_patches(MagicMock(side_effect=OwnershipDenied("taken")), loop)
        for p in patches:
            p.start()
        try:
            with pytest.raises(SystemExit) as exc_info:
                await run_multiselect(Options(), ["alpha"])
        finally:
            for p in patches:
                p.stop()
        assert exc_info.value.code == 1
        assert "Cannot acquire selection ownership" in capsys.readouterr().err
        loop.assert_not_called()

    @pytest.mark.asyncio
    async def test_daemon_starts_without_ownership(self) -> None:
        loop = AsyncMock()
        patches = _startup_patches(MagicMock(side_effect=OwnershipDenied("taken")), loop)
        for p in patches:
            p.start()
        try:
            await run_multiselect(Options(daemon=True), [])
        finally:
            for p in patches:
                p.stop()
        state = loop.call_args.args[0]
        assert state.owns_selection is False
        assert state.options.daemon is True
