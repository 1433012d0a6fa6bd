"""Tests for in-place sanitation of Head entities."""
import copy

from chatstore.conversation.fragments import (
    ErrorPart,
    RawPart,
    TextPart,
    create_attachment_fragment,
    create_placeholder_content_fragment,
    create_text_content_fragment,
    is_error_fragment,
)
from chatstore.conversation.models import Message, create_conversation, create_message_text_content
from chatstore.conversation.sanitize import (
    register_message_fixup,
    sanitize_conversation,
    sanitize_message,
    unregister_message_fixup,
)


def _attachment(live_file_id):
    return create_attachment_fragment(
        "notes.md",
        RawPart({"pt": "doc", "data": {"idt": "text", "text": "# notes"}}),
        live_file_id=live_file_id,
    )


def test_placeholder_becomes_error_at_same_position():
    message = Message(
        role="assistant",
        fragments=[
            create_text_content_fragment("before"),
            create_placeholder_content_fragment("partial answer"),
            create_text_content_fragment("after"),
        ],
    )
    sanitize_message(message)

    assert message.fragments[0].part == TextPart(text="before")
    assert message.fragments[2].part == TextPart(text="after")
    healed = message.fragments[1]
    assert is_error_fragment(healed)
    assert "partial answer" in healed.part.error
    assert "did not complete" in healed.part.error


def test_stale_live_file_reference_is_pruned():
    message = Message(role="user", fragments=[_attachment("live-42")])
    sanitize_message(message, lambda: {"live-7"})

    assert len(message.fragments) == 1
    assert message.fragments[0].live_file_id is None
    assert message.fragments[0].title == "notes.md"


def test_valid_live_file_reference_is_kept():
    message = Message(role="user", fragments=[_attachment("live-42")])
    sanitize_message(message, lambda: {"live-42"})
    assert message.fragments[0].live_file_id == "live-42"


def test_default_provider_prunes_every_reference():
    message = Message(role="user", fragments=[_attachment("live-42")])
    sanitize_message(message)
    assert message.fragments[0].live_file_id is None


def test_valid_ids_are_queried_on_every_call(registry):
    message = Message(role="user", fragments=[_attachment("live-1")])
    sanitize_message(message, registry.valid_ids)
    assert message.fragments[0].live_file_id == "live-1"

    other = Message(role="user", fragments=[_attachment("live-1")])
    registry.discard("live-1")
    sanitize_message(other, registry.valid_ids)
    assert other.fragments[0].live_file_id is None


def test_transient_and_legacy_fields_are_cleared():
    message = create_message_text_content("user", "hi")
    message.pending_incomplete = True
    message.extra.update({"sender": "You", "typing": True, "avatar": None, "keep": 1})
    sanitize_message(message)

    assert message.pending_incomplete is None
    assert message.extra == {"keep": 1}


def test_sanitize_message_is_idempotent():
    message = Message(
        role="assistant",
        fragments=[
            create_placeholder_content_fragment("partial"),
            _attachment("live-1"),
            _attachment("live-2"),
        ],
        pending_incomplete=True,
        extra={"sender": "Bot"},
    )
    valid = lambda: {"live-1"}  # noqa: E731
    sanitize_message(message, valid)
    once = copy.deepcopy(message)
    sanitize_message(message, valid)
    assert message == once


def test_sanitize_conversation_resets_runtime_state():
    conversation = create_conversation()
    conversation.abort_controller = object()
    conversation.messages = None
    sanitize_conversation(conversation)
    assert conversation.abort_controller is None
    assert conversation.messages == []


def test_sanitize_conversation_sanitizes_every_message():
    conversation = create_conversation()
    conversation.messages = [
        Message(role="assistant", fragments=[create_placeholder_content_fragment("a")]),
        Message(role="assistant", fragments=[create_placeholder_content_fragment("b")]),
    ]
    sanitize_conversation(conversation)
    assert all(is_error_fragment(m.fragments[0]) for m in conversation.messages)


def test_registered_fixups_run_last():
    seen = []

    @register_message_fixup
    def _record(message):
        seen.append([type(f.part) for f in message.fragments])

    message = Message(role="assistant", fragments=[create_placeholder_content_fragment("x")])
    sanitize_message(message)
    assert seen == [[ErrorPart]]


def test_unregistered_fixup_no_longer_runs():
    seen = []

    @register_message_fixup
    def _record(message):
        seen.append(message.id)

    unregister_message_fixup(_record)
    sanitize_message(Message(role="user"))
    assert seen == []
