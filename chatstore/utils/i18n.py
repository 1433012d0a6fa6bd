"""
chatstore.utils.i18n
====================

Message catalog for user-facing text (CLI output, help, diagnostics).

- Built-in messages in English and Swedish
- Dynamic message formatting
- Fallback to English, then to the key itself
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from chatstore.config.settings import settings

logger = logging.getLogger(__name__)

# Default language if not specified
DEFAULT_LANGUAGE = "en"


class I18nManager:
    """
    Holds the translated messages and the active language.

    The active language comes from ``settings.default_language`` and can be
    switched at runtime with :meth:`set_language`.
    """

    def __init__(self):
        self._messages: Dict[str, Dict[str, str]] = {}
        self._current_language = settings.get("DEFAULT_LANGUAGE") or DEFAULT_LANGUAGE
        self._supported_languages = settings.get("SUPPORTED_LANGUAGES", [DEFAULT_LANGUAGE])

        # Initialize with built-in messages
        self._init_built_in_messages()

    def _init_built_in_messages(self) -> None:
        """Initialize with built-in messages."""
        self._messages = {
            # General messages
            "command.failure": {
                "en": "❌ Error: {error}",
                "sv": "❌ Fel: {error}"
            },
            "file.written": {
                "en": "Output written to {output_path}",
                "sv": "Utdata skrevs till {output_path}"
            },
            "file.not_found": {
                "en": "File not found: {path}",
                "sv": "Filen hittades inte: {path}"
            },
            "error.message_not_found": {
                "en": "Message not found: {key}",
                "sv": "Meddelande hittades inte: {key}"
            },

            # Import diagnostics
            "import.invalid_conversation": {
                "en": "Skipping invalid conversation record (id={record_id!r})",
                "sv": "Hoppar över ogiltig konversationspost (id={record_id!r})"
            },
            "import.invalid_folder": {
                "en": "Skipping invalid folder record (id={record_id!r})",
                "sv": "Hoppar över ogiltig mappost (id={record_id!r})"
            },
            "import.invalid_message": {
                "en": "Message record is not an object ({kind}); recreating it empty",
                "sv": "Meddelandeposten är inte ett objekt ({kind}); återskapar den tom"
            },
            "import.invalid_fragment": {
                "en": "Unreadable fragment ({kind}) replaced with an error fragment",
                "sv": "Oläsbart fragment ({kind}) ersatt med ett felfragment"
            },
            "import.summary": {
                "en": "Imported {conversations} conversations and {folders} folders "
                      "({skipped_conversations} conversations, {skipped_folders} folders skipped)",
                "sv": "Importerade {conversations} konversationer och {folders} mappar "
                      "({skipped_conversations} konversationer, {skipped_folders} mappar överhoppade)"
            },
            "bundle.invalid_json": {
                "en": "Payload is not valid JSON: {error}",
                "sv": "Innehållet är inte giltig JSON: {error}"
            },
            "bundle.unrecognized": {
                "en": "Payload is neither an export bundle nor an exported chat",
                "sv": "Innehållet är varken ett exportpaket eller en exporterad chatt"
            },

            # Help messages
            "help.cli": {
                "en": "Inspect and upgrade chat export bundles",
                "sv": "Granska och uppgradera exportpaket för chattar"
            },
            "help.log_level": {
                "en": "Python logging level (DEBUG, INFO, WARNING, ERROR)",
                "sv": "Python loggningsnivå (DEBUG, INFO, WARNING, ERROR)"
            },
            "help.inspect": {
                "en": "Report the message shapes found in an export file",
                "sv": "Visa meddelandeformaten i en exportfil"
            },
            "help.upgrade": {
                "en": "Re-import an export file and write a sanitized V1 bundle",
                "sv": "Importera om en exportfil och skriv ett sanerat V1-paket"
            },
            "param.source": {
                "en": "Export file to read",
                "sv": "Exportfil att läsa"
            },
            "param.output": {
                "en": "Destination file for the upgraded bundle",
                "sv": "Målfil för det uppgraderade paketet"
            },
            "param.live_file_id": {
                "en": "Live file id that is still valid (repeatable)",
                "sv": "Id för en livefil som fortfarande är giltig (upprepningsbar)"
            },

            # Inspect table
            "inspect.title": {
                "en": "Export bundle: {path}",
                "sv": "Exportpaket: {path}"
            },
            "inspect.conversations": {"en": "Conversations", "sv": "Konversationer"},
            "inspect.skipped_conversations": {"en": "Skipped conversations", "sv": "Överhoppade konversationer"},
            "inspect.folders": {"en": "Folders", "sv": "Mappar"},
            "inspect.skipped_folders": {"en": "Skipped folders", "sv": "Överhoppade mappar"},
            "inspect.current_messages": {"en": "Current-shape messages", "sv": "Meddelanden i nuvarande format"},
            "inspect.legacy_messages": {"en": "Legacy (V3) messages", "sv": "Äldre (V3) meddelanden"},
            "inspect.unknown_messages": {"en": "Unreadable messages", "sv": "Oläsbara meddelanden"},
            "inspect.model_sources": {"en": "Model sources", "sv": "Modellkällor"},
        }

    def set_language(self, language: str) -> bool:
        """
        Set the current language for messages.

        Returns True if language was set, False if not supported.
        """
        if language in self._supported_languages:
            self._current_language = language
            logger.info("Language set to: %s", language)
            return True
        logger.warning("Language not supported: %s", language)
        return False

    def get_message(self, key: str, language: Optional[str] = None, **kwargs) -> str:
        """
        Get a translated message by key.

        Args:
            key: The message identifier
            language: Optional language override (defaults to current language)
            **kwargs: Format variables to insert into the message

        Returns:
            The translated and formatted message
        """
        lang = language or self._current_language

        if key in self._messages and lang in self._messages[key]:
            message = self._messages[key][lang]
        elif key in self._messages and DEFAULT_LANGUAGE in self._messages[key]:
            message = self._messages[key][DEFAULT_LANGUAGE]
            logger.debug("Falling back to %s for message: %s", DEFAULT_LANGUAGE, key)
        else:
            message = self._messages["error.message_not_found"][DEFAULT_LANGUAGE].format(key=key)
            logger.warning(message)
            return message

        try:
            return message.format(**kwargs)
        except KeyError as e:
            logger.warning("Missing format parameter in message %s: %s", key, e)
            return message

    @property
    def current_language(self) -> str:
        """Get the current language code."""
        return self._current_language

    @property
    def supported_languages(self) -> List[str]:
        """Get the list of supported languages."""
        return list(self._supported_languages)

    def add_message(self, key: str, translations: Dict[str, str]) -> None:
        """Add or extend a message in the catalog."""
        self._messages.setdefault(key, {}).update(translations)
        logger.debug("Added message: %s", key)


# Singleton instance
i18n_manager = I18nManager()


def get_message(key: str, **kwargs) -> str:
    """
    Get a translated message by key with variable substitution.
    """
    return i18n_manager.get_message(key, **kwargs)
