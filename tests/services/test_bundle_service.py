"""Tests for decoding export payloads and re-exporting them."""
import json

import pytest

from chatstore.services.bundle_service import dump_bundle, load_bundle
from chatstore.utils.exceptions import BundleFormatError


@pytest.fixture
def bundle(legacy_conversation, current_message):
    current_chat = {
        "id": "conv-2",
        "messages": [current_message],
        "systemPurposeId": "Generic",
        "autoTitle": "Auto",
        "created": 1710000000000,
        "updated": None,
    }
    return {
        "conversations": [legacy_conversation, {"title": "no id"}, current_chat],
        "models": {"sources": [{"id": "openai", "label": "OpenAI"}]},
        "folders": {
            "folders": [
                {"id": "f1", "title": "Work", "conversationIds": ["conv-1"]},
                {"id": "f2"},
            ],
            "enableFolders": True,
        },
    }


def test_load_bundle(bundle, registry):
    result = load_bundle(bundle, registry.valid_ids)

    assert [c.id for c in result.conversations] == ["conv-1", "conv-2"]
    assert result.skipped_conversations == 1
    assert [f.id for f in result.folders] == ["f1"]
    assert result.skipped_folders == 1
    assert result.enable_folders is True
    assert result.model_sources == [{"id": "openai", "label": "OpenAI"}]
    assert (result.shape_counts.current, result.shape_counts.legacy) == (1, 1)


def test_load_bundle_from_json_text_and_bytes(bundle):
    text = json.dumps(bundle)
    assert len(load_bundle(text).conversations) == 2
    assert len(load_bundle(text.encode("utf-8")).conversations) == 2


def test_load_single_exported_chat(legacy_conversation):
    result = load_bundle(legacy_conversation)
    assert [c.id for c in result.conversations] == ["conv-1"]
    assert result.folders == []
    assert result.model_sources == []


def test_bundle_without_folders(legacy_conversation):
    result = load_bundle({"conversations": [legacy_conversation], "models": {"sources": []}})
    assert result.folders == []
    assert result.enable_folders is False


@pytest.mark.parametrize("payload", ["{not json", "[1, 2]", json.dumps({"something": "else"})])
def test_unrecognized_payloads_raise(payload):
    with pytest.raises(BundleFormatError):
        load_bundle(payload)


def test_reexport_upgrades_every_message(bundle):
    result = load_bundle(bundle)
    data = json.loads(dump_bundle(result.to_bundle(), indent=0))

    assert [c["id"] for c in data["conversations"]] == ["conv-1", "conv-2"]
    for chat in data["conversations"]:
        for message in chat["messages"]:
            assert "fragments" in message and "text" not in message
    assert data["folders"]["enableFolders"] is True
    assert data["models"]["sources"][0]["id"] == "openai"

    # a second load of the re-export is stable
    again = load_bundle(data)
    assert [c.messages for c in again.conversations] == [c.messages for c in result.conversations]
