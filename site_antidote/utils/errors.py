"""
Exception hierarchy for site antidote.

Fatal errors abort a cure. Asset errors only affect a single element and are
handed to a reporter instead of being raised out of the cure.
"""

from typing import Optional


class AntidoteError(Exception):
    """Base class for all site antidote errors."""


class ConfigurationError(AntidoteError):
    """Raised when curing is attempted before a target was configured."""


class InvalidURL(AntidoteError):
    """Raised when the configured page URL cannot be parsed."""


class LoadError(AntidoteError):
    """Raised when the page cannot be fetched or parsed."""


class SerializationError(AntidoteError):
    """Raised when the cured document cannot be serialized."""


class AssetError(AntidoteError):
    """Base class for per-element failures."""

    def __init__(self, message: str, reference: Optional[str] = None):
        super().__init__(message)
        self.reference = reference


class MalformedReference(AssetError):
    """An asset reference could not be parsed as a URL."""


class PatternError(AssetError):
    """An extension pattern is not a valid regular expression."""


class FetchError(AssetError):
    """An asset could not be retrieved."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status: Optional[int] = None
    ):
        super().__init__(message, reference=url)
        self.url = url
        self.status = status
