"""
chatstore.conversation.models
=============================

Head (current) in-memory data models: conversations, messages and folders.

These are the shapes the application works with. They are never written to
disk as-is; the frozen export contract lives in
:mod:`chatstore.conversation.at_rest`.
"""

from __future__ import annotations

import copy
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional

from chatstore.config.settings import settings
from chatstore.conversation.fragments import (
    Fragment,
    create_error_content_fragment,
    create_text_content_fragment,
    fragment_from_dict,
)
from chatstore.utils.i18n import get_message

logger = logging.getLogger(__name__)

MessageRole = Literal["user", "assistant", "system"]
MESSAGE_ROLES = ("user", "assistant", "system")
DEFAULT_MESSAGE_ROLE: MessageRole = "user"

# Keys of the persisted Head message that map onto Message attributes
_MESSAGE_KEYS = frozenset({
    "id", "role", "fragments", "purposeId", "originLLM", "metadata",
    "userFlags", "tokenCount", "created", "updated", "pendingIncomplete",
})


def now_ms() -> int:
    """Current time as epoch milliseconds, the unit used by all timestamps."""
    return int(time.time() * 1000)


def new_id() -> str:
    return str(uuid.uuid4())


def coerce_role(value: Any) -> MessageRole:
    if value in MESSAGE_ROLES:
        return value
    logger.debug("Unknown message role %r, using %r", value, DEFAULT_MESSAGE_ROLE)
    return DEFAULT_MESSAGE_ROLE


def coerce_user_flags(value: Any) -> List[str]:
    """User flags behave as a set; keep first-seen order for stable output."""
    if not isinstance(value, (list, tuple)):
        return []
    return list(dict.fromkeys(flag for flag in value if isinstance(flag, str)))


def coerce_token_count(value: Any) -> int:
    """0 means 'not yet computed'."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        return 0
    return int(value)


def coerce_optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def coerce_record_id(value: Any) -> Optional[str]:
    """Ids are kept verbatim; numbers are stringified, empty values count as missing."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    return value if isinstance(value, str) else str(value)


def coerce_timestamp(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


@dataclass
class Message:
    """
    A single Head message: an ordered list of fragments plus metadata.

    ``pending_incomplete`` is set while a response is streaming and is
    cleared whenever the message is loaded. ``extra`` keeps any keys of the
    source record this model does not know about.
    """
    role: MessageRole
    fragments: List[Fragment] = field(default_factory=list)
    id: str = field(default_factory=new_id)
    purpose_id: Optional[str] = None
    origin_llm: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    user_flags: List[str] = field(default_factory=list)
    token_count: int = 0
    created: int = field(default_factory=now_ms)
    updated: Optional[int] = None
    pending_incomplete: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Persisted (camelCase) form of the message."""
        result: Dict[str, Any] = {
            "id": self.id,
            "role": self.role,
            "fragments": [f.to_dict() for f in self.fragments],
        }
        if self.purpose_id:
            result["purposeId"] = self.purpose_id
        if self.origin_llm:
            result["originLLM"] = self.origin_llm
        if self.metadata:
            result["metadata"] = copy.deepcopy(self.metadata)
        if self.user_flags:
            result["userFlags"] = list(self.user_flags)
        result["tokenCount"] = self.token_count
        result["created"] = self.created
        result["updated"] = self.updated
        if self.pending_incomplete:
            result["pendingIncomplete"] = True
        for key, value in self.extra.items():
            result.setdefault(key, copy.deepcopy(value))
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Message:
        """
        Structural copy of a record already in Head shape.

        The source record is not modified and shares no mutable state with
        the result. Missing fields get the same defaults a new message has.
        """
        fragments: List[Fragment] = []
        for raw in data.get("fragments") or []:
            if isinstance(raw, Mapping):
                fragments.append(fragment_from_dict(raw))
            else:
                logger.warning(get_message("import.invalid_fragment", kind=type(raw).__name__))
                fragments.append(create_error_content_fragment(repr(raw)))

        record_id = coerce_record_id(data.get("id"))
        created = coerce_timestamp(data.get("created"))
        metadata = data.get("metadata")
        return cls(
            id=record_id if record_id is not None else new_id(),
            role=coerce_role(data.get("role")),
            fragments=fragments,
            purpose_id=coerce_optional_str(data.get("purposeId")),
            origin_llm=coerce_optional_str(data.get("originLLM")),
            metadata=copy.deepcopy(dict(metadata)) if isinstance(metadata, Mapping) and metadata else None,
            user_flags=coerce_user_flags(data.get("userFlags")),
            token_count=coerce_token_count(data.get("tokenCount")),
            created=created if created is not None else now_ms(),
            updated=coerce_timestamp(data.get("updated")),
            pending_incomplete=bool(data.get("pendingIncomplete")) or None,
            extra={k: copy.deepcopy(v) for k, v in data.items() if k not in _MESSAGE_KEYS},
        )


@dataclass
class Conversation:
    """
    A Head conversation.

    ``abort_controller`` is runtime-only: it holds the handle of an in-flight
    generation, is never exported, and is reset to ``None`` on every load.
    """
    system_purpose_id: str
    id: str = field(default_factory=new_id)
    messages: List[Message] = field(default_factory=list)
    user_title: Optional[str] = None
    auto_title: Optional[str] = None
    token_count: int = 0
    created: int = field(default_factory=now_ms)
    updated: Optional[int] = field(default_factory=now_ms)
    abort_controller: Optional[Any] = field(default=None, compare=False, repr=False)

    @property
    def title(self) -> Optional[str]:
        return self.user_title or self.auto_title


@dataclass
class Folder:
    id: str
    title: str
    conversation_ids: List[str] = field(default_factory=list)
    color: Optional[str] = None


# --------------------------------------------------------------------------- #
# Constructors                                                                #
# --------------------------------------------------------------------------- #


def create_conversation(system_purpose_id: Optional[str] = None) -> Conversation:
    """New empty conversation; falls back to the configured default purpose."""
    return Conversation(
        system_purpose_id=system_purpose_id or settings.default_system_purpose_id,
    )


def create_message_text_content(role: MessageRole, text: str) -> Message:
    """New message holding a single text content fragment."""
    return Message(
        role=role,
        fragments=[create_text_content_fragment(text)],
    )
