"""
chatstore.conversation
======================

Conversation data models and the migration pipeline between their shapes:

- ``shapes``    structural V3/Head detection for message records
- ``upgrade``   V3 / V1-at-rest records -> Head entities
- ``sanitize``  idempotent in-place repair of Head entities
- ``at_rest``   the frozen V1 export format and Head -> V1 projection
"""

from chatstore.conversation.models import (
    Conversation,
    Message,
    Folder,
    create_conversation,
    create_message_text_content,
)

from chatstore.conversation.shapes import (
    is_current_message_shape,
    count_message_shapes,
)

from chatstore.conversation.sanitize import (
    sanitize_conversation,
    sanitize_message,
    register_message_fixup,
    no_live_files,
)

from chatstore.conversation.upgrade import (
    upgrade_conversation,
    upgrade_conversations,
    upgrade_folder,
    upgrade_folders,
    upgrade_message,
)

from chatstore.conversation.at_rest import (
    RestAllJsonV1B,
    RestChatJsonV1,
    to_export_bundle,
    to_export_conversation,
)

__all__ = [
    # Models
    'Conversation',
    'Message',
    'Folder',
    'create_conversation',
    'create_message_text_content',

    # Shape detection
    'is_current_message_shape',
    'count_message_shapes',

    # Sanitation
    'sanitize_conversation',
    'sanitize_message',
    'register_message_fixup',
    'no_live_files',

    # Upgrade
    'upgrade_conversation',
    'upgrade_conversations',
    'upgrade_folder',
    'upgrade_folders',
    'upgrade_message',

    # Export
    'RestAllJsonV1B',
    'RestChatJsonV1',
    'to_export_bundle',
    'to_export_conversation',
]
