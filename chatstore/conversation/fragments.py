"""
chatstore.conversation.fragments
================================

Message fragments: the ordered units a Head message is made of.

A fragment is either *content* (text, an error notice, or a placeholder for
text still being generated) or an *attachment* (a document or image the user
attached, optionally linked to a live file). Part kinds this layer does not
interpret are kept verbatim in :class:`RawPart` so nothing is lost on a
load/export cycle.

The JSON keys written by ``to_dict`` are the persisted store keys
(``ft``, ``fId``, ``pt``, ``pText``, ``liveFileId``) and must not change.
"""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Mapping, Optional, Union


def new_fragment_id() -> str:
    """Short random id, unique within a message."""
    return uuid.uuid4().hex[:8]


# --------------------------------------------------------------------------- #
# Parts                                                                       #
# --------------------------------------------------------------------------- #


@dataclass
class TextPart:
    text: str = ""
    pt: ClassVar[str] = "text"

    def to_dict(self) -> Dict[str, Any]:
        return {"pt": self.pt, "text": self.text}


@dataclass
class ErrorPart:
    error: str = ""
    pt: ClassVar[str] = "error"

    def to_dict(self) -> Dict[str, Any]:
        return {"pt": self.pt, "error": self.error}


@dataclass
class PlaceholderPart:
    """Marks content that was still streaming; never valid once loaded."""
    p_text: str = ""
    pt: ClassVar[str] = "ph"

    def to_dict(self) -> Dict[str, Any]:
        return {"pt": self.pt, "pText": self.p_text}


@dataclass
class RawPart:
    """Any other part kind (doc, image_ref, tool calls...), stored as-is."""
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def pt(self) -> Optional[str]:
        return self.data.get("pt")

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.data)


Part = Union[TextPart, ErrorPart, PlaceholderPart, RawPart]


def _part_text(value: Any) -> str:
    return "" if value is None else value if isinstance(value, str) else str(value)


def part_from_dict(data: Any) -> Part:
    """
    Build a part from its JSON form, deciding on ``pt`` alone.

    A known kind with a malformed text field is still that kind, so the
    sanitizer sees every placeholder. Other shapes become :class:`RawPart`.
    """
    if not isinstance(data, Mapping):
        return RawPart({"pt": None, "value": copy.deepcopy(data)})
    pt = data.get("pt")
    if pt == TextPart.pt:
        return TextPart(text=_part_text(data.get("text")))
    if pt == ErrorPart.pt:
        return ErrorPart(error=_part_text(data.get("error")))
    if pt == PlaceholderPart.pt:
        return PlaceholderPart(p_text=_part_text(data.get("pText")))
    return RawPart(copy.deepcopy(dict(data)))


# --------------------------------------------------------------------------- #
# Fragments                                                                   #
# --------------------------------------------------------------------------- #


@dataclass
class ContentFragment:
    part: Part
    f_id: str = field(default_factory=new_fragment_id)
    ft: ClassVar[str] = "content"

    def to_dict(self) -> Dict[str, Any]:
        return {"ft": self.ft, "fId": self.f_id, "part": self.part.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ContentFragment:
        return cls(
            part=part_from_dict(data.get("part")),
            f_id=_fragment_id(data),
        )


@dataclass
class AttachmentFragment:
    """
    A user attachment. ``live_file_id`` links it to a live file owned by
    another subsystem; the link is dropped on load if that file is gone.
    """
    title: str
    part: Part
    caption: str = ""
    created: Optional[int] = None
    live_file_id: Optional[str] = None
    f_id: str = field(default_factory=new_fragment_id)
    ft: ClassVar[str] = "attachment"

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "ft": self.ft,
            "fId": self.f_id,
            "title": self.title,
            "caption": self.caption,
            "part": self.part.to_dict(),
        }
        if self.created is not None:
            result["created"] = self.created
        if self.live_file_id:
            result["liveFileId"] = self.live_file_id
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AttachmentFragment:
        live_file_id = data.get("liveFileId")
        created = data.get("created")
        return cls(
            title=str(data.get("title") or ""),
            part=part_from_dict(data.get("part")),
            caption=str(data.get("caption") or ""),
            created=created if isinstance(created, (int, float)) else None,
            live_file_id=live_file_id if isinstance(live_file_id, str) and live_file_id else None,
            f_id=_fragment_id(data),
        )


@dataclass
class RawFragment:
    """A fragment of a kind this layer does not know, kept for round-trips."""
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def f_id(self) -> Optional[str]:
        return self.data.get("fId")

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.data)


Fragment = Union[ContentFragment, AttachmentFragment, RawFragment]


def _fragment_id(data: Mapping[str, Any]) -> str:
    f_id = data.get("fId")
    return f_id if isinstance(f_id, str) and f_id else new_fragment_id()


def fragment_from_dict(data: Mapping[str, Any]) -> Fragment:
    """Dispatch on ``ft``; callers guarantee *data* is a mapping."""
    ft = data.get("ft")
    # Content without a part mapping is kept verbatim
    if ft == ContentFragment.ft and isinstance(data.get("part"), Mapping):
        return ContentFragment.from_dict(data)
    if ft == AttachmentFragment.ft:
        return AttachmentFragment.from_dict(data)
    return RawFragment(copy.deepcopy(dict(data)))


# --------------------------------------------------------------------------- #
# Constructors & predicates                                                   #
# --------------------------------------------------------------------------- #


def create_text_content_fragment(text: str) -> ContentFragment:
    return ContentFragment(part=TextPart(text=text))


def create_error_content_fragment(error: str) -> ContentFragment:
    return ContentFragment(part=ErrorPart(error=error))


def create_placeholder_content_fragment(placeholder_text: str) -> ContentFragment:
    return ContentFragment(part=PlaceholderPart(p_text=placeholder_text))


def create_attachment_fragment(
    title: str,
    part: Part,
    caption: str = "",
    created: Optional[int] = None,
    live_file_id: Optional[str] = None,
) -> AttachmentFragment:
    return AttachmentFragment(
        title=title,
        part=part,
        caption=caption,
        created=created,
        live_file_id=live_file_id,
    )


def is_content_fragment(fragment: Any) -> bool:
    return isinstance(fragment, ContentFragment)


def is_attachment_fragment(fragment: Any) -> bool:
    return isinstance(fragment, AttachmentFragment)


def is_placeholder_fragment(fragment: Any) -> bool:
    return is_content_fragment(fragment) and isinstance(fragment.part, PlaceholderPart)


def is_error_fragment(fragment: Any) -> bool:
    return is_content_fragment(fragment) and isinstance(fragment.part, ErrorPart)
