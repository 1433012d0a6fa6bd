"""Tests for structural message shape detection."""
import pytest

from chatstore.conversation.shapes import (
    count_message_shapes,
    is_current_message_shape,
    is_legacy_message_shape,
)


def test_legacy_record_is_not_current(legacy_message):
    assert not is_current_message_shape(legacy_message)
    assert is_legacy_message_shape(legacy_message)


def test_fragment_list_is_current(current_message):
    assert is_current_message_shape(current_message)
    assert not is_legacy_message_shape(current_message)


def test_empty_fragment_list_is_still_current():
    assert is_current_message_shape({"fragments": []})


@pytest.mark.parametrize("record", [
    {"fragments": None},
    {"fragments": "text"},
    {"fragments": {"0": {}}},
    {},
    None,
    "fragments",
    42,
    ["fragments"],
])
def test_malformed_input_is_not_current(record):
    assert is_current_message_shape(record) is False


def test_text_alongside_fragments_is_current():
    assert is_current_message_shape({"text": "old", "fragments": []})


def test_count_message_shapes(legacy_message, current_message):
    counts = count_message_shapes([legacy_message, current_message, current_message, "junk"])
    assert (counts.current, counts.legacy, counts.unknown) == (2, 1, 1)
    assert counts.total == 4
    assert count_message_shapes(None).total == 0
