"""Tests for the frozen V1 export format."""
import pytest
from pydantic import ValidationError

from chatstore.conversation.at_rest import (
    RestChatJsonV1,
    recreate_conversation_from_at_rest,
    recreate_folders_from_at_rest,
    to_export_bundle,
    to_export_conversation,
)
from chatstore.conversation.fragments import RawPart, create_attachment_fragment, create_error_content_fragment
from chatstore.conversation.models import Folder, create_conversation, create_message_text_content
from chatstore.conversation.upgrade import upgrade_conversation


@pytest.fixture
def conversation():
    conversation = create_conversation("Developer")
    conversation.id = "conv-9"
    conversation.user_title = "Refactor plan"
    conversation.created = 1720000000000
    conversation.updated = 1720000005000
    conversation.token_count = 99
    conversation.abort_controller = object()

    question = create_message_text_content("user", "How do I split this module?")
    question.id = "m1"
    answer = create_message_text_content("assistant", "Start with the models.")
    answer.id = "m2"
    answer.origin_llm = "gpt-4o"
    answer.fragments.append(create_error_content_fragment("rate limited"))
    answer.fragments.append(
        create_attachment_fragment("plan.md", RawPart({"pt": "doc", "data": {"text": "..."}}), live_file_id="live-1")
    )
    conversation.messages = [question, answer]
    return conversation


def test_export_conversation_has_exactly_the_frozen_fields(conversation):
    data = to_export_conversation(conversation).to_json_dict()
    assert set(data) == {"id", "messages", "systemPurposeId", "userTitle", "created", "updated"}
    assert data["systemPurposeId"] == "Developer"
    assert data["updated"] == 1720000005000


def test_export_keeps_required_null_updated(conversation):
    conversation.updated = None
    data = to_export_conversation(conversation).to_json_dict()
    assert "updated" in data and data["updated"] is None


def test_round_trip_through_export(conversation, registry):
    exported = to_export_conversation(conversation)
    restored = upgrade_conversation(exported, registry.valid_ids)

    assert restored.id == conversation.id
    assert restored.user_title == conversation.user_title
    assert restored.auto_title == conversation.auto_title
    assert restored.created == conversation.created
    assert restored.updated == conversation.updated
    assert restored.system_purpose_id == conversation.system_purpose_id
    assert restored.messages == conversation.messages


def test_round_trip_through_json_dict(conversation, registry):
    data = to_export_conversation(conversation).to_json_dict()
    restored = recreate_conversation_from_at_rest(data, registry.valid_ids)
    assert restored.messages == conversation.messages


def test_export_bundle_layout(conversation):
    folder = Folder(id="f1", title="Work", conversation_ids=["conv-9"])
    sources = [{"id": "openai", "label": "OpenAI", "setup": {"key": "..."}}]
    data = to_export_bundle([conversation], sources, [folder], True).to_json_dict()

    assert set(data) == {"conversations", "models", "folders"}
    assert data["models"] == {"sources": sources}
    assert data["folders"] == {
        "folders": [{"id": "f1", "title": "Work", "conversationIds": ["conv-9"]}],
        "enableFolders": True,
    }
    assert [c["id"] for c in data["conversations"]] == ["conv-9"]


def test_export_bundle_tolerates_empty_inputs():
    data = to_export_bundle(None, None, None, False).to_json_dict()
    assert data == {
        "conversations": [],
        "models": {"sources": []},
        "folders": {"folders": [], "enableFolders": False},
    }


def test_rest_chat_requires_updated_key():
    with pytest.raises(ValidationError):
        RestChatJsonV1(id="x", messages=[], systemPurposeId="Generic", created=1)


def test_recreate_folders_from_at_rest():
    folders = recreate_folders_from_at_rest([
        {"id": "f1", "title": "Work", "conversationIds": ["c1"], "color": "#0f0"},
        {"id": "f2"},
    ])
    assert folders == [Folder(id="f1", title="Work", conversation_ids=["c1"], color="#0f0")]


def test_folders_with_numeric_conversation_ids_export():
    folders = recreate_folders_from_at_rest([{"id": "f", "title": "W", "conversationIds": [1, 2]}])
    data = to_export_bundle([], [], folders, True).to_json_dict()
    assert data["folders"]["folders"][0]["conversationIds"] == ["1", "2"]
