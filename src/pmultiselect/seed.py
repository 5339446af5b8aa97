"""Initial candidates from the command line or standard input."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TextIO

from pmultiselect.candidates import CAPACITY

logger = logging.getLogger(__name__)


def read_seed_strings(
    arguments: Iterable[str], stream: TextIO | None = None, capacity: int = CAPACITY
) -> list[str]:
    """Return the initial candidates.

    Args:
        arguments: Strings given on the command line.
        stream: When given, read one candidate per line from it instead.
        capacity: Maximum number of candidates kept.

    Returns:
        At most capacity candidates, in order.
    """
    if stream is not None:
        strings = [line.rstrip("\n") for line in stream]
    else:
        strings = list(arguments)
    if len(strings) > capacity:
        logger.warning("Only the first %d of %d strings are kept", capacity, len(strings))
    return strings[:capacity]
