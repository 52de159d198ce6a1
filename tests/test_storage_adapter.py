from __future__ import annotations

import pytest

from persistence import (
    DeserializationError,
    InvalidKeyError,
    InvalidWriteError,
    MissingKeyError,
    NonNumericValueError,
    StorageAdapter,
    StorageError,
)


@pytest.mark.parametrize(
    "value",
    [
        0,
        42,
        -3.5,
        True,
        False,
        "",
        "héllo",
        [],
        [1, "two", [3.0], {"four": None}],
        {},
        {"nested": {"list": [1, 2], "flag": False, "none": None}},
    ],
)
def test_set_then_get_returns_equal_value(memory_adapter, value):
    memory_adapter.set_item("k", value)
    assert memory_adapter.get_item("k") == value


def test_get_missing_key_returns_none(memory_adapter):
    assert memory_adapter.get_item("nope") is None


def test_stored_text_is_compact_json(memory_adapter, memory_store):
    memory_adapter.set_item("user", {"name": "Ann", "tags": ["a", "b"]})
    assert memory_store.read("user") == '{"name":"Ann","tags":["a","b"]}'


def test_tuple_comes_back_as_list(memory_adapter):
    memory_adapter.set_item("t", (1, 2))
    assert memory_adapter.get_item("t") == [1, 2]


def test_set_replaces_previous_binding(memory_adapter):
    memory_adapter.set_item("k", {"a": 1})
    memory_adapter.set_item("k", [2])
    assert memory_adapter.get_item("k") == [2]


def test_has_item_lifecycle(memory_adapter):
    assert memory_adapter.has_item("k") is False
    memory_adapter.set_item("k", 1)
    assert memory_adapter.has_item("k") is True
    memory_adapter.remove_item("k")
    assert memory_adapter.has_item("k") is False


def test_has_item_does_not_decode(memory_adapter, memory_store):
    memory_store.write("broken", "{not json")
    assert memory_adapter.has_item("broken") is True


def test_set_none_is_rejected_and_keeps_prior_value(memory_adapter):
    memory_adapter.set_item("k", "keep")
    with pytest.raises(InvalidWriteError):
        memory_adapter.set_item("k", None)
    assert memory_adapter.get_item("k") == "keep"


def test_set_none_on_fresh_key_writes_nothing(memory_adapter, memory_store):
    with pytest.raises(InvalidWriteError):
        memory_adapter.set_item("k", None)
    assert memory_store.read("k") is None


@pytest.mark.parametrize("value", [float("nan"), float("inf"), {1, 2}, object()])
def test_unencodable_values_are_rejected(memory_adapter, memory_store, value):
    with pytest.raises(InvalidWriteError):
        memory_adapter.set_item("k", value)
    assert memory_store.read("k") is None


@pytest.mark.parametrize("key", ["", None, 3])
def test_invalid_keys_are_rejected(memory_adapter, key):
    with pytest.raises(InvalidKeyError):
        memory_adapter.get_item(key)
    with pytest.raises(InvalidKeyError):
        memory_adapter.set_item(key, 1)


def test_corrupt_value_raises_deserialization_error(memory_adapter, memory_store):
    memory_store.write("k", "{not json")
    with pytest.raises(DeserializationError) as exc_info:
        memory_adapter.get_item("k")
    assert exc_info.value.key == "k"
    assert isinstance(exc_info.value, StorageError)


def test_update_missing_key_raises(memory_adapter):
    calls = []
    with pytest.raises(MissingKeyError) as exc_info:
        memory_adapter.update_item("nope", lambda v: calls.append(v))
    assert exc_info.value.key == "nope"
    assert calls == []
    assert memory_adapter.has_item("nope") is False


def test_update_applies_function(memory_adapter):
    memory_adapter.set_item("count", 5)
    result = memory_adapter.update_item("count", lambda x: x + 10)
    assert result == 15
    assert memory_adapter.get_item("count") == 15


def test_update_structured_value(memory_adapter):
    memory_adapter.set_item("cart", {"items": ["apple"]})
    memory_adapter.update_item("cart", lambda c: {**c, "items": c["items"] + ["pear"]})
    assert memory_adapter.get_item("cart") == {"items": ["apple", "pear"]}


def test_update_returning_none_keeps_prior_value(memory_adapter):
    memory_adapter.set_item("k", 1)
    with pytest.raises(InvalidWriteError):
        memory_adapter.update_item("k", lambda v: None)
    assert memory_adapter.get_item("k") == 1


def test_update_callback_errors_propagate(memory_adapter):
    memory_adapter.set_item("k", 1)

    def boom(_):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        memory_adapter.update_item("k", boom)
    assert memory_adapter.get_item("k") == 1


def test_increment_and_decrement_steps(memory_adapter):
    assert memory_adapter.increment_item("c") == 1
    assert memory_adapter.get_item("c") == 1
    assert memory_adapter.increment_item("c", 4) == 5
    assert memory_adapter.decrement_item("c", 2) == 3
    assert memory_adapter.get_item("c") == 3


def test_decrement_from_absent_goes_negative(memory_adapter):
    assert memory_adapter.decrement_item("d") == -1
    assert memory_adapter.get_item("d") == -1


def test_increment_by_float(memory_adapter):
    memory_adapter.set_item("f", 1)
    assert memory_adapter.increment_item("f", 0.5) == 1.5


@pytest.mark.parametrize("stored", ["5", [1], {"n": 1}, True])
def test_increment_non_numeric_raises_and_keeps_value(memory_adapter, stored):
    memory_adapter.set_item("k", stored)
    with pytest.raises(NonNumericValueError):
        memory_adapter.increment_item("k")
    with pytest.raises(NonNumericValueError):
        memory_adapter.decrement_item("k")
    assert memory_adapter.get_item("k") == stored


@pytest.mark.parametrize("delta", ["1", None, True])
def test_non_numeric_delta_raises(memory_adapter, delta):
    with pytest.raises(NonNumericValueError):
        memory_adapter.increment_item("k", delta)
    with pytest.raises(NonNumericValueError):
        memory_adapter.decrement_item("k", delta)
    assert memory_adapter.has_item("k") is False


def test_clear_removes_every_binding(memory_adapter, memory_store):
    memory_adapter.set_item("a", 1)
    memory_adapter.set_item("b", 2)
    assert sorted(memory_store.keys()) == ["a", "b"]
    memory_adapter.clear()
    assert memory_adapter.has_item("a") is False
    assert memory_adapter.has_item("b") is False
    assert len(memory_store) == 0
    memory_adapter.clear()


def test_remove_is_idempotent(memory_adapter):
    memory_adapter.remove_item("never-set")
    memory_adapter.set_item("k", 1)
    memory_adapter.remove_item("k")
    memory_adapter.remove_item("k")
    assert memory_adapter.get_item("k") is None


def test_adapter_has_no_cache(memory_store):
    adapter = StorageAdapter(memory_store)
    adapter.set_item("k", 1)
    memory_store.write("k", "2")
    assert adapter.get_item("k") == 2


def test_operation_logging_level(memory_store, caplog):
    adapter = StorageAdapter(memory_store, log_operations=True)
    with caplog.at_level("INFO", logger="persistence.adapter"):
        adapter.set_item("secret", "value")
    assert "STORAGE SET: key=secret" in caplog.text
    assert "value" not in caplog.text
