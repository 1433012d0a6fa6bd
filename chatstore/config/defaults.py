"""Default configuration values for the chat data migration layer.

These defaults are overridden by ``config.yaml``, ``CHATSTORE_*`` environment
variables and programmatic overrides at runtime.
"""

# Default configuration dictionary
DEFAULT_CONFIG = {
    # -------------------------------------------------------------------------
    # Conversation defaults
    # -------------------------------------------------------------------------
    # Purpose assigned to conversations recreated without a systemPurposeId
    "DEFAULT_SYSTEM_PURPOSE_ID": "Generic",

    # -------------------------------------------------------------------------
    # Export formatting
    # -------------------------------------------------------------------------
    "EXPORT_INDENT": 2,  # None writes compact JSON

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------
    "DEFAULT_LANGUAGE": "en",
    "SUPPORTED_LANGUAGES": ["en", "sv"],

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    "LOG_LEVEL": "WARNING",
    "LOG_TO_FILE": False,
    "LOG_DIR": "logs",
}
