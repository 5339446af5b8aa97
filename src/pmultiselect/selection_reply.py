"""Replies to SelectionRequest events.

This module writes the answer to a selection request into the requestor's
property and sends the single SelectionNotify that completes the request.
A refusal is a SelectionNotify with property None.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from Xlib.display import Display

    from pmultiselect.pending import PendingRequest
    from pmultiselect.state import Atoms

logger = logging.getLogger(__name__)


def send_selection_notify(
    display: "Display", request: "PendingRequest", property_atom: int
) -> None:
    """Send the SelectionNotify completing request."""
    from Xlib.protocol.event import SelectionNotify as SelectionNotifyEvent
    request.requestor.send_event(
        SelectionNotifyEvent(
            time=request.time,
            requestor=request.requestor_id,
            selection=request.selection,
            target=request.target,
            property=property_atom,
        ),
        event_mask=0,
    )
    display.flush()


def refuse_request(display: "Display", request: "PendingRequest") -> None:
    """Refuse a request by sending property=None."""
    from Xlib import X
    logger.debug("Refusing request from 0x%x", request.requestor_id)
    send_selection_notify(display, request, X.NONE)


def resolve_property(request: "PendingRequest") -> int:
    """Return the property to write the answer into.

    Obsolete clients send property None; the target is used instead, as
    ICCCM suggests, though such a client may not understand the reply.
    """
    from Xlib import X
    if request.property != X.NONE:
        return request.property
    logger.warning(
        "Request from 0x%x has no property, replying in the target property; "
        "the requestor may not understand the reply", request.requestor_id,
    )
    return request.target


def encode_text(text: str, target: int, atoms: "Atoms") -> bytes:
    """Encode text for a STRING (Latin-1) or UTF8_STRING target."""
    if target == atoms.utf8_string:
        return text.encode("utf-8")
    return text.encode("latin-1", errors="replace")


def answer_targets(
    display: "Display", request: "PendingRequest", atoms: "Atoms"
) -> None:
    """Answer a TARGETS request with the supported text targets."""
    from Xlib import Xatom
    property_atom = resolve_property(request)
    request.requestor.change_property(
        property_atom, Xatom.ATOM, 32, [atoms.string, atoms.utf8_string]
    )
    send_selection_notify(display, request, property_atom)


def deliver(
    display: "Display", request: "PendingRequest", text: str | None, atoms: "Atoms"
) -> None:
    """Answer request with text, or refuse it if text is None.

    Args:
        display: The X11 display connection.
        request: The request to complete.
        text: The string to deliver, or None to refuse.
        atoms: Interned atoms.
    """
    if text is None:
        refuse_request(display, request)
        return
    property_atom = resolve_property(request)
    data = encode_text(text, request.target, atoms)
    request.requestor.change_property(property_atom, request.target, 8, data)
    logger.debug("Sending %d bytes to 0x%x", len(data), request.requestor_id)
    send_selection_notify(display, request, property_atom)
