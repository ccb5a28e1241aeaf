"""
Variable store for ExprWhizz sessions.

A string -> float dictionary backed by a hash table that resolves
collisions with open addressing (linear probing). Deleted entries leave
tombstones behind; tombstones count toward the load factor and are
discarded whenever the table grows.

NaN is reserved to mean "not present": storing NaN is a no-op and
retrieving a missing key returns NaN.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum

from exprwhizz.core.errors import StoreCorruptionError, VariableNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 8
REHASH_THRESHOLD = 0.6

INVALID_VALUE = math.nan

_HASH_MULTIPLIER = 1000003
_HASH_MASK = 0xFFFFFFFF


class SlotStatus(Enum):
    """State of a single hash table slot."""

    UNUSED = 0
    IN_USE = 1
    DELETED = 2


@dataclass(slots=True)
class _Slot:
    status: SlotStatus = SlotStatus.UNUSED
    key: str | None = None
    value: float = INVALID_VALUE


def hash_key(key: str, capacity: int) -> int:
    """
    Return the slot index for key in a table of the given capacity.

    Uses the string hash Python shipped before 3.4, computed on the UTF-8
    bytes of the key with 32-bit unsigned wraparound. The empty string
    always hashes to 0.
    """
    data = key.encode("utf-8")
    if not data:
        return 0

    x = (data[0] << 7) & _HASH_MASK
    for c in data:
        x = ((_HASH_MULTIPLIER * x) ^ c) & _HASH_MASK
    x ^= len(data)

    return x % capacity


class VariableStore:
    """Open-addressing hash table mapping symbol names to float values."""

    def __init__(
        self,
        initial_capacity: int = DEFAULT_CAPACITY,
        rehash_threshold: float = REHASH_THRESHOLD,
    ) -> None:
        if initial_capacity < 1:
            raise ValueError("initial_capacity must be at least 1")
        if not 0.0 < rehash_threshold < 1.0:
            raise ValueError("rehash_threshold must be between 0 and 1")

        self._initial_capacity = initial_capacity
        self._rehash_threshold = rehash_threshold
        self._slots: list[_Slot] = [_Slot() for _ in range(initial_capacity)]
        self._num_stored = 0
        self._num_deleted = 0

    # -- Probing --

    def _probe(self, key: str) -> Iterator[int]:
        """Yield slot indices in linear probe order, visiting each slot once."""
        capacity = len(self._slots)
        start = hash_key(key, capacity)
        for i in range(capacity):
            yield (start + i) % capacity

    def _find(self, key: str) -> int | None:
        """Return the index of the in-use slot holding key, or None."""
        for index in self._probe(key):
            slot = self._slots[index]
            if slot.status is SlotStatus.UNUSED:
                return None
            if slot.status is SlotStatus.IN_USE and slot.key == key:
                return index
        return None

    # -- Mutation --

    def store(self, key: str, value: float) -> None:
        """
        Bind key to value, overwriting any previous binding.

        Probing passes over tombstones and foreign keys, stopping at the
        matching key (update in place) or at the first unused slot (insert).
        Storing NaN is silently ignored.
        """
        if math.isnan(value):
            return

        for index in self._probe(key):
            slot = self._slots[index]
            if slot.status is SlotStatus.IN_USE and slot.key == key:
                slot.value = value
                return
            if slot.status is SlotStatus.UNUSED:
                self._slots[index] = _Slot(SlotStatus.IN_USE, str(key), value)
                self._num_stored += 1
                if self.load_factor() > self._rehash_threshold:
                    self._rehash()
                return

        # Every slot is in use or a tombstone; only reachable with a
        # threshold close to 1.
        self._rehash()
        self.store(key, value)

    def _rehash(self) -> None:
        """Double the capacity, reinsert live entries and drop tombstones."""
        old_slots = self._slots
        new_capacity = len(old_slots) * 2
        new_slots = [_Slot() for _ in range(new_capacity)]

        for slot in old_slots:
            if slot.status is not SlotStatus.IN_USE:
                continue
            assert slot.key is not None
            index = hash_key(slot.key, new_capacity)
            while new_slots[index].status is SlotStatus.IN_USE:
                index = (index + 1) % new_capacity
            new_slots[index] = _Slot(SlotStatus.IN_USE, slot.key, slot.value)

        logger.debug(
            "Rehashed variable store: capacity %d -> %d, %d tombstones discarded",
            len(old_slots),
            new_capacity,
            self._num_deleted,
        )
        self._slots = new_slots
        self._num_deleted = 0

    def delete(self, key: str) -> None:
        """
        Remove key, leaving a tombstone in its slot.

        Raises:
            VariableNotFoundError: If key is not stored.
        """
        index = self._find(key)
        if index is None:
            logger.warning("Cannot delete key [%s]: not found", key)
            raise VariableNotFoundError(key)

        self._slots[index] = _Slot(SlotStatus.DELETED)
        self._num_stored -= 1
        self._num_deleted += 1

    def clear(self) -> None:
        """Release every entry and return to the initial capacity."""
        self._slots = [_Slot() for _ in range(self._initial_capacity)]
        self._num_stored = 0
        self._num_deleted = 0

    # -- Queries --

    def retrieve(self, key: str) -> float:
        """Return the value bound to key, or NaN if key is not stored."""
        index = self._find(key)
        if index is None:
            return INVALID_VALUE
        return self._slots[index].value

    def contains(self, key: str) -> bool:
        return self._find(key) is not None

    def size(self) -> int:
        """Number of keys currently stored."""
        return self._num_stored

    def capacity(self) -> int:
        return len(self._slots)

    def load_factor(self) -> float:
        """(stored + deleted) / capacity."""
        return (self._num_stored + self._num_deleted) / len(self._slots)

    def for_each(self, callback: Callable[[str, float], object]) -> None:
        """Invoke callback(key, value) for every stored entry, in slot order."""
        for key, value in self:
            callback(key, value)

    def verify(self) -> None:
        """
        Recount slots and check them against the stored/deleted counters.

        Raises:
            StoreCorruptionError: If the counters disagree with the slots.
        """
        used = sum(1 for s in self._slots if s.status is SlotStatus.IN_USE)
        deleted = sum(1 for s in self._slots if s.status is SlotStatus.DELETED)
        if used != self._num_stored or deleted != self._num_deleted:
            raise StoreCorruptionError(
                f"slot recount found {used} in use / {deleted} deleted, "
                f"counters say {self._num_stored} / {self._num_deleted}"
            )

    def dump(self) -> list[str]:
        """Describe the table: a stats header followed by one line per slot."""
        lines = [
            f"*** capacity: {self.capacity()} stored: {self._num_stored} "
            f"deleted: {self._num_deleted} load_factor: {self.load_factor():.2f}"
        ]
        for i, slot in enumerate(self._slots):
            if slot.status is SlotStatus.UNUSED:
                lines.append(f"{i:02d}: unused")
            elif slot.status is SlotStatus.DELETED:
                lines.append(f"{i:02d}: DELETED")
            else:
                assert slot.key is not None
                lines.append(
                    f"{i:02d}: IN_USE key={slot.key} "
                    f"hash={hash_key(slot.key, self.capacity())} value={slot.value:g}"
                )
        return lines

    # -- Python protocols --

    def __len__(self) -> int:
        return self._num_stored

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains(key)

    def __iter__(self) -> Iterator[tuple[str, float]]:
        for slot in self._slots:
            if slot.status is SlotStatus.IN_USE:
                assert slot.key is not None
                yield slot.key, slot.value

    def __repr__(self) -> str:
        return (
            f"VariableStore(size={self._num_stored}, capacity={self.capacity()}, "
            f"deleted={self._num_deleted})"
        )
