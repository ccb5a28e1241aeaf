"""Tests for the open-addressing variable store."""

from __future__ import annotations

import math

import pytest

from exprwhizz.core.errors import StoreCorruptionError, VariableNotFoundError
from exprwhizz.core.variable_store import (
    DEFAULT_CAPACITY,
    REHASH_THRESHOLD,
    VariableStore,
    hash_key,
)


class TestHashKey:
    def test_empty_string_hashes_to_zero(self) -> None:
        assert hash_key("", 8) == 0
        assert hash_key("", 1024) == 0

    def test_matches_legacy_string_hash(self) -> None:
        # 32-bit hash("a") from Python 2, taken unsigned
        assert hash_key("a", 2**32) == 3826102752

    def test_within_capacity(self) -> None:
        for key in ["x", "alpha", "a_long_variable_name_42", "Z9"]:
            for capacity in [1, 7, 8, 64]:
                assert 0 <= hash_key(key, capacity) < capacity

    def test_deterministic(self) -> None:
        assert hash_key("pi", 16) == hash_key("pi", 16)


class TestStoreAndRetrieve:
    def test_new_store_is_empty(self, variables: VariableStore) -> None:
        assert variables.size() == 0
        assert len(variables) == 0
        assert variables.capacity() == DEFAULT_CAPACITY
        assert variables.load_factor() == 0.0
        assert not variables.contains("x")

    def test_store_then_retrieve(self, variables: VariableStore) -> None:
        variables.store("x", 2.5)
        assert variables.contains("x")
        assert "x" in variables
        assert variables.retrieve("x") == 2.5
        assert variables.size() == 1

    def test_missing_key_retrieves_nan(self, variables: VariableStore) -> None:
        assert math.isnan(variables.retrieve("nope"))

    def test_store_overwrites_in_place(self, variables: VariableStore) -> None:
        variables.store("x", 1.0)
        variables.store("x", 2.0)
        assert variables.retrieve("x") == 2.0
        assert variables.size() == 1

    def test_storing_nan_is_ignored(self, variables: VariableStore) -> None:
        variables.store("x", math.nan)
        assert not variables.contains("x")
        assert variables.size() == 0

    def test_storing_nan_keeps_previous_value(self, variables: VariableStore) -> None:
        variables.store("x", 3.0)
        variables.store("x", math.nan)
        assert variables.retrieve("x") == 3.0

    def test_infinities_are_values(self, variables: VariableStore) -> None:
        variables.store("big", math.inf)
        assert variables.retrieve("big") == math.inf

    def test_empty_key(self, variables: VariableStore) -> None:
        variables.store("", 1.0)
        assert variables.retrieve("") == 1.0

    def test_non_string_membership(self, variables: VariableStore) -> None:
        assert 3 not in variables


class TestDelete:
    def test_delete_removes_key(self, variables: VariableStore) -> None:
        variables.store("a", 1.0)
        variables.delete("a")
        assert not variables.contains("a")
        assert math.isnan(variables.retrieve("a"))
        assert variables.size() == 0

    def test_tombstone_counts_toward_load(self, variables: VariableStore) -> None:
        variables.store("a", 1.0)
        variables.delete("a")
        assert variables.load_factor() == 1 / 8

    def test_delete_missing_raises(self, variables: VariableStore) -> None:
        with pytest.raises(VariableNotFoundError) as exc_info:
            variables.delete("ghost")
        assert str(exc_info.value) == "cannot delete key [ghost] not found"

    def test_delete_twice_raises(self, variables: VariableStore) -> None:
        variables.store("a", 1.0)
        variables.delete("a")
        with pytest.raises(VariableNotFoundError):
            variables.delete("a")

    def test_reinsert_after_delete(self, variables: VariableStore) -> None:
        variables.store("a", 1.0)
        variables.delete("a")
        variables.store("a", 5.0)
        assert variables.retrieve("a") == 5.0
        assert variables.size() == 1
        variables.verify()

    def test_probing_survives_tombstones(self, variables: VariableStore) -> None:
        keys = [f"k{i}" for i in range(50)]
        for i, key in enumerate(keys):
            variables.store(key, float(i))

        for key in keys[::2]:
            variables.delete(key)

        for i, key in enumerate(keys):
            if i % 2:
                assert variables.retrieve(key) == float(i)
            else:
                assert not variables.contains(key)
        variables.verify()

        for i, key in enumerate(keys[::2]):
            variables.store(key, -float(i))
        assert variables.size() == 50
        variables.verify()


class TestRehash:
    def test_capacity_doubles_past_threshold(self, variables: VariableStore) -> None:
        for i, key in enumerate("abcd"):
            variables.store(key, float(i))
        assert variables.capacity() == 8

        variables.store("e", 4.0)
        assert variables.capacity() == 16
        for i, key in enumerate("abcde"):
            assert variables.retrieve(key) == float(i)

    def test_load_factor_stays_bounded(self, variables: VariableStore) -> None:
        for i in range(200):
            variables.store(f"var{i}", float(i))
            assert variables.load_factor() <= REHASH_THRESHOLD
        assert variables.size() == 200
        variables.verify()

    def test_rehash_discards_tombstones(self, variables: VariableStore) -> None:
        for key in "abcd":
            variables.store(key, 1.0)
        variables.delete("a")
        variables.delete("b")
        assert variables.load_factor() == 0.5

        variables.store("e", 1.0)
        assert variables.capacity() == 16
        assert variables.load_factor() == 3 / 16
        assert variables.dump()[0].startswith("*** capacity: 16 stored: 3 deleted: 0")

    def test_custom_threshold(self) -> None:
        store = VariableStore(initial_capacity=4, rehash_threshold=0.5)
        store.store("a", 1.0)
        store.store("b", 2.0)
        assert store.capacity() == 4
        store.store("c", 3.0)
        assert store.capacity() == 8


class TestConstruction:
    @pytest.mark.parametrize("capacity", [0, -1])
    def test_invalid_capacity(self, capacity: int) -> None:
        with pytest.raises(ValueError):
            VariableStore(initial_capacity=capacity)

    @pytest.mark.parametrize("threshold", [0.0, 1.0, 1.5, -0.2])
    def test_invalid_threshold(self, threshold: float) -> None:
        with pytest.raises(ValueError):
            VariableStore(rehash_threshold=threshold)

    def test_capacity_of_one_grows(self) -> None:
        store = VariableStore(initial_capacity=1)
        store.store("x", 1.0)
        assert store.capacity() == 2
        assert store.retrieve("x") == 1.0


class TestTraversal:
    def test_for_each_visits_every_entry(self, seeded_variables: VariableStore) -> None:
        seen: list[tuple[str, float]] = []
        seeded_variables.for_each(lambda key, val: seen.append((key, val)))
        assert sorted(seen) == [("x", 0.8), ("y", 0.2)]

    def test_for_each_matches_iteration_order(self, variables: VariableStore) -> None:
        for i in range(10):
            variables.store(f"n{i}", float(i))
        seen: list[tuple[str, float]] = []
        variables.for_each(lambda key, val: seen.append((key, val)))
        assert seen == list(variables)

    def test_clear(self, seeded_variables: VariableStore) -> None:
        for i in range(20):
            seeded_variables.store(f"n{i}", float(i))
        seeded_variables.clear()
        assert seeded_variables.size() == 0
        assert seeded_variables.capacity() == DEFAULT_CAPACITY
        assert list(seeded_variables) == []


class TestDiagnostics:
    def test_dump_layout(self, variables: VariableStore) -> None:
        variables.store("x", 3.0)
        lines = variables.dump()
        assert lines[0].startswith("*** capacity: 8 stored: 1 deleted: 0 load_factor:")
        assert len(lines) == 9
        in_use = [line for line in lines[1:] if "IN_USE" in line]
        assert len(in_use) == 1
        assert "key=x" in in_use[0]
        assert "value=3" in in_use[0]
        assert sum("unused" in line for line in lines[1:]) == 7

    def test_dump_shows_tombstones(self, variables: VariableStore) -> None:
        variables.store("x", 3.0)
        variables.delete("x")
        assert sum("DELETED" in line for line in variables.dump()[1:]) == 1

    def test_verify_passes_on_consistent_table(self, seeded_variables: VariableStore) -> None:
        seeded_variables.delete("x")
        seeded_variables.verify()

    def test_verify_detects_counter_mismatch(self, seeded_variables: VariableStore) -> None:
        seeded_variables._num_stored = 5
        with pytest.raises(StoreCorruptionError):
            seeded_variables.verify()

    def test_repr(self, seeded_variables: VariableStore) -> None:
        assert repr(seeded_variables) == "VariableStore(size=2, capacity=8, deleted=0)"
