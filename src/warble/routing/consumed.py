"""Consumed-slot tracking for a single resolution attempt.

Each attempt needs to know which argv slots a segment already claimed.
Command lines are short, so the common case is a single int used as a
bitmask; very long argument vectors fall back to a ``bytearray``.
Callers only see the ``ConsumedSet`` protocol.
"""

from typing import Protocol

BITMASK_THRESHOLD = 64


class ConsumedSet(Protocol):
    """Which argv slots have been claimed by a segment."""

    def mark(self, index: int) -> None: ...

    def is_marked(self, index: int) -> bool: ...

    def count(self) -> int: ...


class BitmaskConsumedSet:
    """Int-backed set for up to ``BITMASK_THRESHOLD`` slots."""

    __slots__ = ("_bits", "_size")

    def __init__(self, size: int) -> None:
        if size > BITMASK_THRESHOLD:
            msg = f"BitmaskConsumedSet holds at most {BITMASK_THRESHOLD} slots, got {size}"
            raise ValueError(msg)
        self._size = size
        self._bits = 0

    def mark(self, index: int) -> None:
        _check_index(index, self._size)
        self._bits |= 1 << index

    def is_marked(self, index: int) -> bool:
        _check_index(index, self._size)
        return bool(self._bits >> index & 1)

    def count(self) -> int:
        return self._bits.bit_count()


class ArrayConsumedSet:
    """``bytearray``-backed set for any number of slots."""

    __slots__ = ("_count", "_slots")

    def __init__(self, size: int) -> None:
        self._slots = bytearray(size)
        self._count = 0

    def mark(self, index: int) -> None:
        _check_index(index, len(self._slots))
        if not self._slots[index]:
            self._slots[index] = 1
            self._count += 1

    def is_marked(self, index: int) -> bool:
        _check_index(index, len(self._slots))
        return bool(self._slots[index])

    def count(self) -> int:
        return self._count


def new_consumed_set(size: int) -> ConsumedSet:
    """Return an empty set sized for *size* argv slots."""
    if size <= BITMASK_THRESHOLD:
        return BitmaskConsumedSet(size)
    return ArrayConsumedSet(size)


def _check_index(index: int, size: int) -> None:
    if not 0 <= index < size:
        msg = f"slot {index} out of range for {size} arguments"
        raise IndexError(msg)
