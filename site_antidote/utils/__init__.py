"""
Utility modules for site antidote.

Contains logging, URL normalization, extension matching, errors and constants.
"""

from .log import setup_logger, get_logger
from .paths import normalize_source_url, parse_origin, add_http_protocol_if_not_exists
from .extensions import ExtensionMatcher, has_extension
from .errors import (
    AntidoteError,
    ConfigurationError,
    InvalidURL,
    LoadError,
    SerializationError,
    AssetError,
    MalformedReference,
    PatternError,
    FetchError,
)
from .constants import (
    DEFAULT_USER_AGENT,
    STYLE_EXTENSIONS,
    SCRIPT_EXTENSIONS,
    IMAGE_EXTENSIONS,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "normalize_source_url",
    "parse_origin",
    "add_http_protocol_if_not_exists",
    "ExtensionMatcher",
    "has_extension",
    "AntidoteError",
    "ConfigurationError",
    "InvalidURL",
    "LoadError",
    "SerializationError",
    "AssetError",
    "MalformedReference",
    "PatternError",
    "FetchError",
    "DEFAULT_USER_AGENT",
    "STYLE_EXTENSIONS",
    "SCRIPT_EXTENSIONS",
    "IMAGE_EXTENSIONS",
]
