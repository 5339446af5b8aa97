#!/usr/bin/env python3
"""
Candidate store.

Holds the strings the user can pick from, in insertion order. The store is
bounded by CAPACITY, which is also the number of keys available to pick a
candidate in the chooser (see INDEX_LABELS).

Indices are stable between mutations. delete_at() compacts the remaining
candidates, preserving their relative order.
"""
from dataclasses import dataclass, field

from pmultiselect.errors import CapacityExceeded

# Keys shown next to each candidate and used to pick it.
INDEX_LABELS: str = "123456789abcdefghijk"

# Maximum number of candidates.
CAPACITY: int = len(INDEX_LABELS)


@dataclass
class CandidateStore:
    """
    Ordered, capacity-bounded list of candidate strings.

    Attributes:
        capacity: Maximum number of candidates held.
        items: The candidates, oldest first.
    """

    capacity: int = CAPACITY
    items: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> str:
        return self.items[index]

    def __iter__(self):
        return iter(self.items)

    def is_full(self) -> bool:
        """Return True if no further candidate can be appended."""
        return len(self.items) >= self.capacity

    def append(self, text: str) -> None:
        """
        Append a candidate at the end of the store.

        Args:
            text: The candidate string.

        Raises:
            CapacityExceeded: If the store is full. The store is unchanged.
        """
        if self.is_full():
            raise CapacityExceeded(f"Store already holds {self.capacity} candidates")
        self.items.append(text)

    def delete_at(self, index: int) -> bool:
        """
        Delete the candidate at index, shifting later ones down by one.

        Args:
            index: Position of the candidate to delete.

        Returns:
            True if a candidate was deleted, False if index is out of range.
        """
        if not 0 <= index < len(self.items):
            return False
        del self.items[index]
        return True

    def delete_last(self) -> bool:
        """Delete the newest candidate. Returns False if the store is empty."""
        if not self.items:
            return False
        self.items.pop()
        return True

    def clear(self) -> None:
        """Delete all candidates."""
        self.items.clear()


def candidate_value(candidate: str, separator: str | None) -> str:
    """
    Return the part of a candidate that is delivered to requestors.

    With a separator, a candidate "label<sep>value" delivers only "value";
    a candidate without the separator delivers itself.

    Args:
        candidate: The candidate as stored and shown.
        separator: The label/value separator, or None.

    Returns:
        The string to deliver.
    """
    if not separator:
        return candidate
    _, found, value = candidate.partition(separator)
    return value if found else candidate
