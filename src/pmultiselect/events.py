"""X11 event draining.

This module provides the function that collects the X11 events available
without blocking the asyncio event loop.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.rq import Event


def process_pending_events(
    display: "Display", deferred_events: list["Event"] | None = None
) -> list["Event"]:
    """Collect the events already pending without blocking.

    Events deferred while waiting for a server timestamp come first, in the
    order they were read, followed by the events pending on the display.

    Args:
        display: The X11 display connection.
        deferred_events: Optional list of deferred events. It is drained.

    Returns:
        List of events to dispatch.
    """
    import logging
    logger = logging.getLogger(__name__)

    events: list[Event] = []
    if deferred_events:
        events.extend(deferred_events)
        deferred_events.clear()
    while display.pending_events() > 0:
        event = display.next_event()
        logger.debug("X11 event type=%s class=%s", event.type, type(event).__name__)
        events.append(event)
    return events
