"""Tests for warble.routing.consumed: consumed-slot sets."""

import pytest

from warble.routing.consumed import (
    BITMASK_THRESHOLD,
    ArrayConsumedSet,
    BitmaskConsumedSet,
    new_consumed_set,
)


@pytest.fixture(params=[BitmaskConsumedSet, ArrayConsumedSet])
def consumed_cls(request: pytest.FixtureRequest) -> type:
    return request.param


class TestConsumedSetContract:
    def test_starts_empty(self, consumed_cls: type) -> None:
        slots = consumed_cls(5)
        assert slots.count() == 0
        assert not any(slots.is_marked(i) for i in range(5))

    def test_mark(self, consumed_cls: type) -> None:
        slots = consumed_cls(5)
        slots.mark(0)
        slots.mark(3)
        assert slots.is_marked(0)
        assert slots.is_marked(3)
        assert not slots.is_marked(1)
        assert slots.count() == 2

    def test_mark_twice_counts_once(self, consumed_cls: type) -> None:
        slots = consumed_cls(3)
        slots.mark(1)
        slots.mark(1)
        assert slots.count() == 1

    def test_out_of_range(self, consumed_cls: type) -> None:
        slots = consumed_cls(2)
        with pytest.raises(IndexError):
            slots.mark(2)
        with pytest.raises(IndexError):
            slots.is_marked(-1)


class TestNewConsumedSet:
    def test_small_uses_bitmask(self) -> None:
        assert isinstance(new_consumed_set(3), BitmaskConsumedSet)
        assert isinstance(new_consumed_set(BITMASK_THRESHOLD), BitmaskConsumedSet)

    def test_large_uses_array(self) -> None:
        slots = new_consumed_set(BITMASK_THRESHOLD + 1)
        assert isinstance(slots, ArrayConsumedSet)
        slots.mark(BITMASK_THRESHOLD)
        assert slots.count() == 1

    def test_bitmask_rejects_oversize(self) -> None:
        with pytest.raises(ValueError, match="at most"):
            BitmaskConsumedSet(BITMASK_THRESHOLD + 1)

    def test_zero_size(self) -> None:
        assert new_consumed_set(0).count() == 0
