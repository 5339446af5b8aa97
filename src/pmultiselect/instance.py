#!/usr/bin/env python3
"""Instance utilities for pmultiselect.

This module provides the startup checks and messages:
- Refusing to start when another instance is running
- Printing the candidates and key help
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import TYPE_CHECKING

from pmultiselect.candidates import INDEX_LABELS
from pmultiselect.constants import WM_NAME, WM_NAME_DAEMON
from pmultiselect.display import window_name_exists

if TYPE_CHECKING:
    from Xlib.xobject.drawable import Window


def check_running_instances(root: Window, daemon: bool) -> bool:
    """Exit if this instance would duplicate a running one.

    A non-daemon instance may run beside a daemon, but never beside
    another non-daemon instance; only one daemon may run.

    Args:
        root: The root window.
        daemon: True if this instance runs in daemon mode.

    Returns:
        True if a daemon is already running.

    Raises:
        SystemExit: If another instance is in the way.
    """
    daemon_running = window_name_exists(root, WM_NAME_DAEMON)
    if window_name_exists(root, WM_NAME) or (daemon and daemon_running):
        print(f"Error: {WM_NAME} already running", file=sys.stderr)
        sys.exit(1)
    return daemon_running


def print_startup_message(candidates: Sequence[str]) -> None:
    """Print the candidates and how to paste them to stderr.

    Args:
        candidates: The initial candidates.
    """
    print("selected strings:", file=sys.stderr)
    for label, text in zip(INDEX_LABELS, candidates):
        print(f"{label:>4}: {text}", file=sys.stderr)
    if candidates:
        print(f"\nmiddle-click and press {INDEX_LABELS[0]}-{INDEX_LABELS[len(candidates) - 1]} "
            "to paste one of them, or Shift-Q to quit", file=sys.stderr)
    print("Control-Shift-Z adds the current selection", file=sys.stderr)
