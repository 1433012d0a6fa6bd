"""
chatstore.conversation.at_rest
==============================

The V1 at-rest export format and the Head -> V1 projection.

DO NOT change these models. They describe files users keep as backups: a
field may be added, but never removed or renamed, or old backups stop
loading. The in-memory models in :mod:`chatstore.conversation.models` are
free to evolve; the mapping between the two is kept explicit here.

Format::

    {"conversations": [{"id", "messages", "systemPurposeId", "userTitle"?,
                        "autoTitle"?, "created", "updated"}],
     "models": {"sources": [...]},
     "folders"?: {"folders": [{"id", "title", "conversationIds", "color"?}],
                  "enableFolders": bool}}
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from chatstore.conversation.models import Conversation, Folder
from chatstore.conversation.sanitize import ValidIdsProvider, no_live_files
from chatstore.conversation.upgrade import upgrade_conversation, upgrade_folders


class _RestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RestChatJsonV1(_RestModel):
    """One exported conversation. ``messages`` may hold V3 or Head records."""
    id: str
    messages: List[Dict[str, Any]]
    system_purpose_id: str = Field(alias="systemPurposeId")
    user_title: Optional[str] = Field(default=None, alias="userTitle")
    auto_title: Optional[str] = Field(default=None, alias="autoTitle")
    created: int
    updated: Optional[int]

    def to_json_dict(self) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True)
        for key in ("userTitle", "autoTitle"):
            if data[key] is None:
                del data[key]
        return data


class RestFolderJsonV1(_RestModel):
    id: str
    title: str
    conversation_ids: List[str] = Field(alias="conversationIds")
    color: Optional[str] = None

    def to_json_dict(self) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True)
        if data["color"] is None:
            del data["color"]
        return data


class RestModelsJsonV1(_RestModel):
    sources: List[Dict[str, Any]] = Field(default_factory=list)


class RestFoldersJsonV1(_RestModel):
    folders: List[RestFolderJsonV1] = Field(default_factory=list)
    enable_folders: bool = Field(default=False, alias="enableFolders")


class RestAllJsonV1B(_RestModel):
    """A full export: every conversation, the model sources and folders."""
    conversations: List[RestChatJsonV1] = Field(default_factory=list)
    models: RestModelsJsonV1 = Field(default_factory=RestModelsJsonV1)
    folders: Optional[RestFoldersJsonV1] = None

    def to_json_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "conversations": [c.to_json_dict() for c in self.conversations],
            "models": self.models.model_dump(by_alias=True),
        }
        if self.folders is not None:
            data["folders"] = {
                "folders": [f.to_json_dict() for f in self.folders.folders],
                "enableFolders": self.folders.enable_folders,
            }
        return data


# --------------------------------------------------------------------------- #
# Rest V1 -> Head                                                             #
# --------------------------------------------------------------------------- #
def recreate_conversation_from_at_rest(
    record: Any,
    valid_ids: ValidIdsProvider = no_live_files,
) -> Optional[Conversation]:
    """Load one exported chat; ``None`` if the record is unusable."""
    # A V1 chat overlaps with a V3 conversation, so the V3 path handles both.
    return upgrade_conversation(record, valid_ids)


def recreate_folders_from_at_rest(records: Optional[Iterable[Any]]) -> List[Folder]:
    return upgrade_folders(records)


# --------------------------------------------------------------------------- #
# Head -> Rest V1                                                             #
# --------------------------------------------------------------------------- #
def to_export_conversation(conversation: Conversation) -> RestChatJsonV1:
    """Project *conversation* onto the frozen field set; runtime state is dropped."""
    return RestChatJsonV1(
        id=conversation.id,
        messages=[m.to_dict() for m in conversation.messages],
        system_purpose_id=conversation.system_purpose_id,
        user_title=conversation.user_title,
        auto_title=conversation.auto_title,
        created=conversation.created,
        updated=conversation.updated,
    )


def to_export_folder(folder: Folder) -> RestFolderJsonV1:
    return RestFolderJsonV1(
        id=folder.id,
        title=folder.title,
        conversation_ids=list(folder.conversation_ids),
        color=folder.color,
    )


def to_export_bundle(
    conversations: Optional[Iterable[Conversation]],
    model_sources: Optional[Iterable[Mapping[str, Any]]],
    folders: Optional[Iterable[Folder]],
    folders_enabled: bool,
) -> RestAllJsonV1B:
    """Assemble a full V1B bundle; model sources and folders pass through unchanged."""
    return RestAllJsonV1B(
        conversations=[to_export_conversation(c) for c in conversations or []],
        models=RestModelsJsonV1(sources=[copy.deepcopy(dict(s)) for s in model_sources or []]),
        folders=RestFoldersJsonV1(
            folders=[to_export_folder(f) for f in folders or []],
            enable_folders=folders_enabled,
        ),
    )
