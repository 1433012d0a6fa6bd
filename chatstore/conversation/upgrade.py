"""
chatstore.conversation.upgrade
==============================

Recreate Head entities from older records.

Input is untyped JSON from the V3 store or from a V1 export bundle. A V1
exported chat overlaps with a V3 conversation almost field for field, so one
path handles both; the messages inside either may be V3 or already Head and
are routed one by one through the shape detector.

Failure policy:

- a corrupt conversation or folder is skipped (``None`` plus a warning) so
  one bad record never blocks the rest of an import
- a corrupt message is never dropped; it is recreated with default fields
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Iterable, List, Mapping, Optional

from chatstore.conversation.models import (
    Conversation,
    Folder,
    Message,
    coerce_optional_str,
    coerce_record_id,
    coerce_role,
    coerce_timestamp,
    coerce_token_count,
    coerce_user_flags,
    create_conversation,
    create_message_text_content,
)
from chatstore.conversation.sanitize import ValidIdsProvider, no_live_files, sanitize_message
from chatstore.conversation.shapes import is_current_message_shape
from chatstore.utils.i18n import get_message

logger = logging.getLogger(__name__)


def _as_record(record: Any) -> Any:
    """Accept the pydantic at-rest models wherever a raw record is expected."""
    if not isinstance(record, Mapping) and hasattr(record, "model_dump"):
        return record.model_dump(by_alias=True)
    return record


def _record_id(record: Any) -> Optional[str]:
    if not isinstance(record, Mapping):
        return None
    return coerce_record_id(record.get("id"))


# --------------------------------------------------------------------------- #
# Conversations                                                               #
# --------------------------------------------------------------------------- #
def upgrade_conversation(
    record: Any,
    valid_ids: ValidIdsProvider = no_live_files,
) -> Optional[Conversation]:
    """
    Recreate a Head conversation from a V3 or V1-at-rest record.

    Returns ``None`` when the record has no id or no message list. Titles
    only overwrite the defaults when truthy; timestamps when present.
    """
    record = _as_record(record)
    record_id = _record_id(record)
    if record_id is None or not isinstance(record.get("messages"), (list, tuple)):
        logger.warning(get_message("import.invalid_conversation", record_id=record_id))
        return None

    conversation = create_conversation(coerce_optional_str(record.get("systemPurposeId")))
    conversation.id = record_id
    conversation.messages = [upgrade_message(m, valid_ids) for m in record["messages"]]

    user_title = record.get("userTitle")
    if user_title and isinstance(user_title, str):
        conversation.user_title = user_title
    auto_title = record.get("autoTitle")
    if auto_title and isinstance(auto_title, str):
        conversation.auto_title = auto_title

    created = coerce_timestamp(record.get("created"))
    if created is not None:
        conversation.created = created
    updated = coerce_timestamp(record.get("updated"))
    if updated is not None:
        conversation.updated = updated

    if "tokenCount" in record:
        conversation.token_count = coerce_token_count(record["tokenCount"])

    return conversation


def upgrade_conversations(
    records: Optional[Iterable[Any]],
    valid_ids: ValidIdsProvider = no_live_files,
) -> List[Conversation]:
    """Batch form of :func:`upgrade_conversation`; invalid records are skipped, order kept."""
    conversations = []
    for record in records or []:
        conversation = upgrade_conversation(record, valid_ids)
        if conversation is not None:
            conversations.append(conversation)
    return conversations


# --------------------------------------------------------------------------- #
# Folders                                                                     #
# --------------------------------------------------------------------------- #
def upgrade_folder(record: Any) -> Optional[Folder]:
    """Copy a folder record; ``None`` when id, title or conversationIds is missing."""
    record = _as_record(record)
    record_id = _record_id(record)
    if (
        record_id is None
        or not record.get("title")
        or not isinstance(record.get("conversationIds"), (list, tuple))
    ):
        logger.warning(get_message("import.invalid_folder", record_id=record_id))
        return None

    return Folder(
        id=record_id,
        title=str(record["title"]),
        conversation_ids=[
            cid for cid in (coerce_record_id(v) for v in record["conversationIds"]) if cid is not None
        ],
        color=coerce_optional_str(record.get("color")),
    )


def upgrade_folders(records: Optional[Iterable[Any]]) -> List[Folder]:
    return [f for f in (upgrade_folder(r) for r in records or []) if f is not None]


# --------------------------------------------------------------------------- #
# Messages                                                                    #
# --------------------------------------------------------------------------- #
def upgrade_message(record: Any, valid_ids: ValidIdsProvider = no_live_files) -> Message:
    """
    Recreate a Head message from a V3 or Head record.

    Head records are copied structurally; anything else is treated as V3.
    Either way the result is sanitized once before it is returned.
    """
    record = _as_record(record)
    if is_current_message_shape(record):
        message = Message.from_dict(record)
    else:
        message = _message_from_v3(record)

    sanitize_message(message, valid_ids)
    return message


def _message_from_v3(record: Any) -> Message:
    if not isinstance(record, Mapping):
        logger.warning(get_message("import.invalid_message", kind=type(record).__name__))
        record = {}

    text = record.get("text")
    message = create_message_text_content(
        coerce_role(record.get("role")),
        "" if text is None else str(text),
    )

    record_id = _record_id(record)
    if record_id:
        message.id = record_id
    purpose_id = coerce_optional_str(record.get("purposeId"))
    if purpose_id:
        message.purpose_id = purpose_id
    origin_llm = coerce_optional_str(record.get("originLLM"))
    if origin_llm:
        message.origin_llm = origin_llm
    metadata = record.get("metadata")
    if metadata and isinstance(metadata, Mapping):
        message.metadata = copy.deepcopy(dict(metadata))
    message.user_flags = coerce_user_flags(record.get("userFlags"))
    message.token_count = coerce_token_count(record.get("tokenCount"))
    created = coerce_timestamp(record.get("created"))
    if created is not None:
        message.created = created
    updated = coerce_timestamp(record.get("updated"))
    if updated is not None:
        message.updated = updated

    return message
