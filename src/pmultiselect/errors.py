"""Exceptions raised by pmultiselect.

Requester-side problems (unsupported targets, stale timestamps, missing
destination properties) are not exceptions: they end in a protocol
refusal. The exceptions below cover what the program itself can fail at.
"""


class MultiselectError(Exception):
    """Base class for pmultiselect errors."""


class OwnershipDenied(MultiselectError):
    """Another client holds the selection after we tried to acquire it."""


class CapacityExceeded(MultiselectError):
    """The candidate store is full."""


class GrabFailed(MultiselectError):
    """The pointer could not be grabbed.

    Attributes:
        status: The grab status returned by the X server.
    """

    def __init__(self, status: int) -> None:
        super().__init__(f"Pointer grab failed with status {status}")
        self.status = status


class DelegateError(MultiselectError):
    """The external delegate could not be run."""
