#!/usr/bin/env python3
"""Tunable constants for pmultiselect.

These constants control the timing of the request arbitration and of the
transient windows, plus the fixed names the program uses on the X server.
"""

# Interval in seconds during which a repeated request from the same
# requestor is answered like the previous one.
SHORT_INTERVAL: float = 0.05

# Interval in seconds during which any request is answered with the string
# chosen for a paste relay (the synthetic click needs a round-trip through
# the requestor before it asks again).
RELAY_INTERVAL: float = 0.5

# The last served time is never allowed to lag "now" by more than this.
CLOCK_CLAMP: float = 2.0

# Seconds the flash window stays visible after it has been painted.
FLASH_DELAY: float = 0.5

# Seconds after which the flash window is closed even if never painted.
FLASH_FALLBACK: float = 1.0

# Pointer grab retries: the grab fails while the button that triggered the
# request is still held down.
GRAB_ATTEMPTS: int = 5
GRAB_RETRY_WAIT: float = 0.02

# Chooser geometry.
WINDOW_WIDTH: int = 400
MAX_DRAWN_CHARS: int = 100
POINTER_GAP: int = 10

# Preferred font, with a fallback every X server provides.
FONT: str = "-*-*-medium-r-*-*-18-*-*-*-m-*-iso10646-1"
FALLBACK_FONT: str = "fixed"

# Window names, also used to detect a running instance.
WM_NAME: str = "pmultiselect"
WM_NAME_DAEMON: str = "pmultiselectd"

# Capture hotkey: Control+Shift+<CAPTURE_KEY>.
CAPTURE_KEY: str = "z"

# Target asked by a known requester only after its own short timeout expired.
FALLBACK_PROBE_TARGET: str = "text/x-moz-text-internal"

# Side-channel buffer left behind by older clients.
CUT_BUFFER: str = "CUT_BUFFER0"

# Private properties on the chooser window.
CAPTURE_PROPERTY: str = "PMULTISELECT_CAPTURE"
TIMESTAMP_PROPERTY: str = "PMULTISELECT_TIMESTAMP"

# Seconds allowed to the external delegate for a dry run.
DELEGATE_TIMEOUT: float = 2.0
