"""Snapshot of a selection request that could not be answered at once."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from Xlib.protocol.event import SelectionRequest
    from Xlib.xobject.drawable import Window


@dataclass(frozen=True)
class PendingRequest:
    """
    A SelectionRequest captured for a later reply.

    Copying the fields keeps the reply independent of later changes to the
    event object.

    Attributes:
        requestor: The requestor window.
        selection: The selection atom asked for.
        target: The target atom (data representation) asked for.
        property: The destination property atom, possibly X.NONE.
        time: The request timestamp, possibly X.CurrentTime.
    """

    requestor: Window
    selection: int
    target: int
    property: int
    time: int

    @property
    def requestor_id(self) -> int:
        return self.requestor.id

    @classmethod
    def from_event(cls, event: SelectionRequest) -> PendingRequest:
        """Copy the fields of a SelectionRequest event."""
        return cls(
            requestor=event.requestor,
            selection=event.selection,
            target=event.target,
            property=event.property,
            time=event.time,
        )
