"""
chatstore package initialization.

Schema migration for persisted conversations: detects V3 vs Head message
records, upgrades them to Head entities, sanitizes loaded entities and
projects them back onto the frozen V1 export format.
"""
import logging

__version__ = "0.1.0"

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# --------------------------------------------------------------------------- #
# Config                                                                      #
# --------------------------------------------------------------------------- #
from chatstore.config.settings import settings, load_settings

# --------------------------------------------------------------------------- #
# Migration core                                                              #
# --------------------------------------------------------------------------- #
from chatstore.conversation import (
    Conversation,
    Message,
    Folder,
    is_current_message_shape,
    upgrade_conversation,
    upgrade_conversations,
    upgrade_folder,
    upgrade_folders,
    upgrade_message,
    sanitize_conversation,
    sanitize_message,
    to_export_conversation,
    to_export_bundle,
)
