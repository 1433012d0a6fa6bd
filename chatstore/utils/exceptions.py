"""
chatstore.utils.exceptions
==========================

Custom exceptions for the migration layer and its outer surfaces.

The conversion core never raises for malformed input data; these are raised
by configuration loading and by the bundle service when a payload cannot be
decoded at all.
"""

class CoreException(Exception):
    """Base exception for all chatstore errors."""
    pass

class ConfigurationError(CoreException):
    """Error in configuration settings."""
    pass

class BundleFormatError(CoreException):
    """Payload is not a decodable export bundle or exported chat."""
    pass
