"""
chatstore.services.bundle_service
=================================

Decode export payloads and run them through the migration core.

Accepts the two payload kinds the app ever wrote:

- a full V1B bundle: ``{"conversations": [...], "models": ..., "folders": ...}``
- a single exported chat: ``{"id": ..., "messages": [...], ...}``

Reading and writing files is left to the caller; this module works on
``dict``/``str``/``bytes`` payloads and JSON text.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from chatstore.config.settings import settings
from chatstore.conversation.at_rest import (
    RestAllJsonV1B,
    recreate_conversation_from_at_rest,
    recreate_folders_from_at_rest,
    to_export_bundle,
)
from chatstore.conversation.models import Conversation, Folder
from chatstore.conversation.sanitize import ValidIdsProvider, no_live_files
from chatstore.conversation.shapes import ShapeCounts, count_message_shapes
from chatstore.utils.exceptions import BundleFormatError
from chatstore.utils.i18n import get_message

logger = logging.getLogger(__name__)

Payload = Union[Mapping[str, Any], str, bytes]


@dataclass
class BundleImportResult:
    """Everything recovered from one payload, plus what had to be skipped."""
    conversations: List[Conversation] = field(default_factory=list)
    folders: List[Folder] = field(default_factory=list)
    enable_folders: bool = False
    model_sources: List[Dict[str, Any]] = field(default_factory=list)
    skipped_conversations: int = 0
    skipped_folders: int = 0
    shape_counts: ShapeCounts = field(default_factory=ShapeCounts)

    def to_bundle(self) -> RestAllJsonV1B:
        """Re-export what was loaded as a V1B bundle."""
        return to_export_bundle(
            self.conversations,
            self.model_sources,
            self.folders,
            self.enable_folders,
        )


def _coerce_payload(payload: Payload) -> Any:
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8", errors="replace")
    if isinstance(payload, str):
        try:
            return json.loads(payload)
        except json.JSONDecodeError as exc:
            raise BundleFormatError(get_message("bundle.invalid_json", error=exc)) from exc
    return payload


def _is_single_chat(data: Mapping[str, Any]) -> bool:
    return "id" in data and "messages" in data and "conversations" not in data


def load_bundle(payload: Payload, valid_ids: ValidIdsProvider = no_live_files) -> BundleImportResult:
    """
    Upgrade and sanitize every conversation and folder in *payload*.

    Corrupt conversations and folders are skipped and counted; the rest of
    the payload still loads.

    Raises
    ------
    BundleFormatError
        If the payload is not JSON or is neither a bundle nor a single chat.
    """
    data = _coerce_payload(payload)
    if not isinstance(data, Mapping):
        raise BundleFormatError(get_message("bundle.unrecognized"))

    if _is_single_chat(data):
        chat_records: List[Any] = [data]
        folder_records: List[Any] = []
        folders_part: Mapping[str, Any] = {}
        models_part: Any = {}
    elif isinstance(data.get("conversations"), list):
        chat_records = data["conversations"]
        folders_part = data.get("folders") if isinstance(data.get("folders"), Mapping) else {}
        folder_records = folders_part.get("folders") if isinstance(folders_part.get("folders"), list) else []
        models_part = data.get("models")
    else:
        raise BundleFormatError(get_message("bundle.unrecognized"))

    result = BundleImportResult()
    for record in chat_records:
        if isinstance(record, Mapping):
            result.shape_counts.add(count_message_shapes(record.get("messages") or []))
        conversation = recreate_conversation_from_at_rest(record, valid_ids)
        if conversation is None:
            result.skipped_conversations += 1
        else:
            result.conversations.append(conversation)

    result.folders = recreate_folders_from_at_rest(folder_records)
    result.skipped_folders = len(folder_records) - len(result.folders)
    result.enable_folders = bool(folders_part.get("enableFolders", False))

    sources = models_part.get("sources") if isinstance(models_part, Mapping) else None
    result.model_sources = [dict(s) for s in sources or [] if isinstance(s, Mapping)]

    logger.info(get_message(
        "import.summary",
        conversations=len(result.conversations),
        folders=len(result.folders),
        skipped_conversations=result.skipped_conversations,
        skipped_folders=result.skipped_folders,
    ))
    return result


def dump_bundle(bundle: RestAllJsonV1B, indent: Optional[int] = None) -> str:
    """Serialize *bundle* to JSON text; indent defaults to ``settings.export_indent``."""
    if indent is None:
        indent = settings.export_indent
    return json.dumps(bundle.to_json_dict(), indent=indent, ensure_ascii=False)
