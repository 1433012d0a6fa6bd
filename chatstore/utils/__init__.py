"""
Utility functions and classes.

Shared exceptions, logging setup and the message catalog
(``chatstore.utils.i18n``, imported directly since it reads settings).
"""

from chatstore.utils.exceptions import (
    CoreException, ConfigurationError, BundleFormatError
)

__all__ = [
    'CoreException',
    'ConfigurationError',
    'BundleFormatError',
]
