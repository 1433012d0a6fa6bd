# tests/conftest.py
import shutil
from pathlib import Path

import pytest

from chatstore.conversation import sanitize
from chatstore.services.live_files import LiveFileRegistry


@pytest.fixture(autouse=True)
def isolate_fs(tmp_path: Path, monkeypatch):
    """Prevent tests from accidentally touching real project files."""
    monkeypatch.chdir(tmp_path)
    yield
    # cleanup
    shutil.rmtree(tmp_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def no_message_fixups(monkeypatch):
    """Each test starts with an empty fix-up hook list."""
    monkeypatch.setattr(sanitize, "_MESSAGE_FIXUPS", [])


@pytest.fixture
def registry():
    return LiveFileRegistry(["live-1"])


@pytest.fixture
def legacy_message():
    """A V3 message as written by the store before fragments existed."""
    return {
        "id": "msg-v3",
        "text": "Hello from 2023",
        "sender": "You",
        "avatar": None,
        "typing": False,
        "role": "user",
        "purposeId": "Developer",
        "metadata": {"inReplyToText": "hi"},
        "userFlags": ["starred"],
        "tokenCount": 7,
        "created": 1700000000000,
        "updated": 1700000001000,
    }


@pytest.fixture
def current_message():
    """A Head message with one text fragment and one attachment."""
    return {
        "id": "msg-v4",
        "role": "assistant",
        "fragments": [
            {"ft": "content", "fId": "f1", "part": {"pt": "text", "text": "Answer"}},
            {
                "ft": "attachment",
                "fId": "f2",
                "title": "notes.md",
                "caption": "",
                "created": 1710000000000,
                "part": {"pt": "doc", "vdt": "text/markdown", "data": {"idt": "text", "text": "# notes"}},
                "liveFileId": "live-1",
            },
        ],
        "originLLM": "gpt-4o",
        "tokenCount": 12,
        "created": 1710000000000,
        "updated": None,
    }


@pytest.fixture
def legacy_conversation(legacy_message):
    return {
        "id": "conv-1",
        "messages": [legacy_message],
        "systemPurposeId": "Developer",
        "userTitle": "Old chat",
        "autoTitle": "",
        "tokenCount": 42,
        "created": 1700000000000,
        "updated": 1700000002000,
    }
