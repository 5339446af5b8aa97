"""External paste-eligibility delegate.

An optional helper program decides whether a destination window should get
the chosen string through a paste relay. It is run in dry-run mode with the
window id as argument and the candidate on standard input; exit status 0
means the window is eligible.
"""

from __future__ import annotations

import logging
import subprocess

from pmultiselect.constants import DELEGATE_TIMEOUT
from pmultiselect.errors import DelegateError

logger = logging.getLogger(__name__)


def is_paste_target(path: str, text: str, window: int) -> bool:
    """Ask the delegate whether window is an eligible paste target.

    Args:
        path: Path of the delegate program.
        text: The candidate that would be pasted.
        window: The destination window id.

    Returns:
        True if the delegate exited with status 0.

    Raises:
        DelegateError: If the delegate cannot be run or times out.
    """
    try:
        result = subprocess.run(
            [path, "--dry-run", f"0x{window:x}"],
            input=text.encode("utf-8"),
            capture_output=True,
            timeout=DELEGATE_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise DelegateError(f"Delegate {path} failed: {e}") from e
    logger.debug("Delegate %s for 0x%x exited with %d", path, window, result.returncode)
    return result.returncode == 0


def destination_eligible(path: str | None, text: str, window: int) -> bool:
    """Return whether window may receive text, treating delegate failures as no."""
    if not path:
        return True
    try:
        return is_paste_target(path, text, window)
    except DelegateError as e:
        logger.warning("%s", e)
        return False
