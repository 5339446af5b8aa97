#!/usr/bin/env python3
"""
Short-time window for repeated selection requests.

Some requestors ask for the selection twice in a row for no reason, others
ask again with a different target right after a refusal. In both cases the
second request arrives right after the user has answered the first one and
must not open the chooser again.

The window remembers, per requestor window, when an outcome (a string or a
refusal) was last served. A request from the same requestor within the
interval is served the same outcome.

A paste relay records its outcome under ANY_REQUESTOR: the request provoked
by the synthetic click may come from any window of the requestor.

Clock values are clamped: a recorded time never lags "now" by more than the
clamp ceiling, so that a stale time cannot be taken as recent after a long
idle period.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from pmultiselect.constants import CLOCK_CLAMP, SHORT_INTERVAL

# Key of the entry that matches every requestor.
ANY_REQUESTOR = None


@dataclass
class ServedOutcome:
    """
    An outcome served at a given time.

    Attributes:
        served_at: Clock value when the outcome was served.
        outcome: The string served, or None for a refusal.
        interval: Seconds during which the outcome is replayed.
    """

    served_at: float
    outcome: str | None
    interval: float


@dataclass
class ShortTimeWindow:
    """
    Track recently served outcomes.

    Attributes:
        interval: Default replay interval in seconds.
        clamp: Maximum lag of a recorded time behind "now".
        entries: Served outcomes keyed by requestor window id.
    """

    interval: float = SHORT_INTERVAL
    clamp: float = CLOCK_CLAMP
    entries: dict[int | None, ServedOutcome] = field(default_factory=dict)

    def record(
        self,
        requestor: int | None,
        outcome: str | None,
        now: float,
        interval: float | None = None,
    ) -> None:
        """
        Record an outcome served to a requestor.

        Args:
            requestor: The requestor window id, or ANY_REQUESTOR.
            outcome: The string served, or None for a refusal.
            now: Current clock value.
            interval: Replay interval, defaulting to self.interval.
        """
        self._prune(now)
        self.entries[requestor] = ServedOutcome(
            served_at=now,
            outcome=outcome,
            interval=self.interval if interval is None else interval,
        )

    def lookup(self, requestor: int | None, now: float) -> ServedOutcome | None:
        """
        Return the outcome to replay for a request, if any.

        The requestor's own entry takes precedence over the ANY_REQUESTOR
        entry.

        Args:
            requestor: The requestor window id.
            now: Current clock value.

        Returns:
            The served outcome if the request is within its interval,
            None otherwise.
        """
        for key in (requestor, ANY_REQUESTOR):
            entry = self.entries.get(key)
            if entry is None:
                continue
            if now - entry.served_at > self.clamp:
                entry.served_at = now - self.clamp
            if now - entry.served_at <= entry.interval:
                return entry
        return None

    def clear(self) -> None:
        """Forget every served outcome."""
        self.entries.clear()

    def _prune(self, now: float) -> None:
        expired = [
            key for key, entry in self.entries.items()
            if now - entry.served_at > self.clamp
        ]
        for key in expired:
            del self.entries[key]
