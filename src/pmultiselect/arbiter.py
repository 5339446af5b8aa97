#!/usr/bin/env python3
"""Selection request arbitration.

Every SelectionRequest received while we own PRIMARY goes through decide(),
which answers it at once, refuses it, or defers it to the chooser. The
checks run in a fixed order and the first one that applies wins:

1. requests from our own window are refused;
2. TARGETS is answered at once, whatever else is going on;
3. unsupported targets are refused (the fallback-timeout probe of a known
   broken requestor is noted before being refused);
4. a request arriving while another is deferred, or while a paste relay is
   armed, is refused: there is never more than one deferred request;
5. after a fallback-timeout probe, the next request is answered with the
   last choice;
6. a request within the short-time window of the last outcome served to
   the same requestor is answered with that outcome;
7. a request older than our ownership is refused (X.CurrentTime is
   always accepted);
8. anything else is deferred: the chooser opens and the reply is sent once
   the user has chosen.

Every request ends with exactly one SelectionNotify.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from Xlib import X

from pmultiselect.pending import PendingRequest
from pmultiselect.selection_reply import answer_targets, deliver, refuse_request

if TYPE_CHECKING:
    from Xlib.protocol.event import SelectionRequest

    from pmultiselect.state import MultiselectState

logger = logging.getLogger(__name__)


class Verdict(enum.Enum):
    """What to do with a selection request."""

    ANSWER = "answer"
    REFUSE = "refuse"
    DEFER = "defer"


@dataclass(frozen=True)
class Decision:
    """
    Outcome of arbitrating a request.

    Attributes:
        verdict: Answer, refuse or defer.
        text: The string to answer with (ANSWER only, not for TARGETS).
        targets: True if the answer is the list of supported targets.
        reason: Short description of the check that decided.
    """

    verdict: Verdict
    text: str | None = None
    targets: bool = False
    reason: str = ""


def _replay(text: str | None, reason: str) -> Decision:
    if text is None:
        return Decision(Verdict.REFUSE, reason=reason)
    return Decision(Verdict.ANSWER, text=text, reason=reason)


def is_supported_target(state: MultiselectState, target: int) -> bool:
    """Return True for the targets we can answer."""
    atoms = state.atoms
    return target in (atoms.targets, atoms.string, atoms.utf8_string)


def decide(state: MultiselectState, request: PendingRequest, now: float) -> Decision:
    """Decide how to handle a selection request.

    Besides the decision, this updates the broken-requestor flag and
    records outcomes replayed for the fallback-timeout probe.

    Args:
        state: The pmultiselect state.
        request: The incoming request.
        now: Current clock value.

    Returns:
        The decision.
    """
    atoms = state.atoms

    if request.requestor_id == state.window.id:
        return Decision(Verdict.REFUSE, reason="request from our own window")

    if request.target == atoms.targets:
        return Decision(Verdict.ANSWER, targets=True, reason="targets")

    if request.target == atoms.probe:
        logger.warning(
            "Fallback-timeout probe from 0x%x: the requestor gave up waiting; "
            "the next request will be answered with the last choice",
            request.requestor_id,
        )
        state.broken_requester = True

    if not is_supported_target(state, request.target):
        return Decision(Verdict.REFUSE, reason="unsupported target")

    if state.is_busy():
        return Decision(Verdict.REFUSE, reason="another request is pending")

    if state.broken_requester:
        state.broken_requester = False
        state.short_window.record(request.requestor_id, state.last_outcome, now)
        return _replay(state.last_outcome, "repeat for timed-out requestor")

    served = state.short_window.lookup(request.requestor_id, now)
    if served is not None:
        state.short_window.record(request.requestor_id, served.outcome, now)
        return _replay(served.outcome, "short time since last answer")

    if (
        request.time != X.CurrentTime
        and state.acquisition_time is not None
        and request.time < state.acquisition_time
    ):
        return Decision(Verdict.REFUSE, reason="request precedes ownership")

    return Decision(Verdict.DEFER, reason="user choice needed")


def serve(
    state: MultiselectState, request: PendingRequest, text: str | None, now: float
) -> None:
    """Answer a request with a resolved choice and remember the outcome.

    Args:
        state: The pmultiselect state.
        request: The request to complete.
        text: The chosen string, or None to refuse.
        now: Current clock value.
    """
    state.short_window.record(request.requestor_id, text, now)
    deliver(state.display, request, text, state.atoms)


def handle_selection_request(
    state: MultiselectState, event: SelectionRequest
) -> Decision:
    """Arbitrate a SelectionRequest event and act on the decision.

    Deferred requests open the chooser through the same transition used
    when the user opens it from a hotkey. If the chooser cannot open (it
    is still closing from the previous choice), the request is refused.

    Args:
        state: The pmultiselect state.
        event: The SelectionRequest event.

    Returns:
        The decision that was carried out.
    """
    from pmultiselect.interaction import open_chooser

    request = PendingRequest.from_event(event)
    decision = decide(state, request, state.clock())
    logger.debug(
        "SelectionRequest from 0x%x target=%s time=%s: %s (%s)",
        request.requestor_id, request.target, request.time,
        decision.verdict.value, decision.reason,
    )

    if decision.verdict is Verdict.ANSWER:
        if decision.targets:
            answer_targets(state.display, request, state.atoms)
        else:
            deliver(state.display, request, decision.text, state.atoms)
    elif decision.verdict is Verdict.REFUSE:
        refuse_request(state.display, request)
    elif not open_chooser(state, request):
        refuse_request(state.display, request)
        return Decision(Verdict.REFUSE, reason="chooser is closing")
    return decision
