"""
chatstore.conversation.sanitize
===============================

In-place repair of Head entities, run on every load.

Sanitation resets runtime-only state, drops references to live files that no
longer exist, and turns content left mid-stream into a visible error. It is
idempotent: a second pass over a sanitized entity changes nothing.

The set of valid live-file ids belongs to another subsystem and is passed in
as a zero-argument callable. It is called once per message so the result
always reflects the registry's current state.
"""

from __future__ import annotations

import logging
from typing import Callable, FrozenSet, Iterable, List

from chatstore.conversation.fragments import (
    create_error_content_fragment,
    is_attachment_fragment,
    is_placeholder_fragment,
)
from chatstore.conversation.models import Conversation, Message

logger = logging.getLogger(__name__)

ValidIdsProvider = Callable[[], Iterable[str]]
MessageFixup = Callable[[Message], None]

# Display fields from before fragments existed; only ever stray leftovers
LEGACY_MESSAGE_KEYS = ("sender", "avatar", "typing")

INCOMPLETE_SUFFIX = " (did not complete)"

_MESSAGE_FIXUPS: List[MessageFixup] = []


def no_live_files() -> FrozenSet[str]:
    """Provider for callers without a live-file registry: nothing is valid."""
    return frozenset()


# --------------------------------------------------------------------------- #
# Same-major-version fix-ups                                                  #
# --------------------------------------------------------------------------- #
def register_message_fixup(fixup: MessageFixup) -> MessageFixup:
    """
    Decorator adding *fixup* to the hooks run at the end of every message
    sanitation. Fix-ups must be idempotent. None are registered by default.
    """
    _MESSAGE_FIXUPS.append(fixup)
    logger.debug("Registered message fixup %s", getattr(fixup, "__name__", fixup))
    return fixup


def unregister_message_fixup(fixup: MessageFixup) -> None:
    if fixup in _MESSAGE_FIXUPS:
        _MESSAGE_FIXUPS.remove(fixup)


def run_message_fixups(message: Message) -> None:
    for fixup in list(_MESSAGE_FIXUPS):
        fixup(message)


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #
def sanitize_conversation(
    conversation: Conversation,
    valid_ids: ValidIdsProvider = no_live_files,
) -> None:
    """Repair *conversation* and all of its messages in place."""
    conversation.abort_controller = None

    if conversation.messages is None:
        conversation.messages = []
    for message in conversation.messages:
        sanitize_message(message, valid_ids)


def sanitize_message(message: Message, valid_ids: ValidIdsProvider = no_live_files) -> None:
    """
    Repair *message* in place.

    - clears the in-flight marker
    - removes pre-fragment display fields carried over by old imports
    - unlinks attachments from live files that are no longer valid
    - replaces each placeholder fragment, at the same position, with an error
      fragment that keeps the partial text
    """
    message.pending_incomplete = None

    for key in LEGACY_MESSAGE_KEYS:
        message.extra.pop(key, None)

    valid_live_file_ids = frozenset(valid_ids())
    for index, fragment in enumerate(message.fragments):

        if is_attachment_fragment(fragment) and fragment.live_file_id:
            if fragment.live_file_id not in valid_live_file_ids:
                logger.debug(
                    "Message %s: dropping stale live file reference %s",
                    message.id, fragment.live_file_id,
                )
                fragment.live_file_id = None

        elif is_placeholder_fragment(fragment):
            message.fragments[index] = create_error_content_fragment(
                f"{fragment.part.p_text}{INCOMPLETE_SUFFIX}"
            )

    run_message_fixups(message)
