"""
URL utilities for site antidote.

Turns asset references found in a page into fetchable URLs.

normalize_source_url() is a heuristic, not an RFC 3986 resolver:
every '../' segment is removed wherever it appears, so a path such as
'a/../b/c.css' becomes 'a/b/c.css' rather than 'b/c.css'. Callers must not
rely on it for deeply nested relative paths.
"""

import re
from urllib.parse import urlparse, ParseResult

from .errors import InvalidURL, MalformedReference


# Percent sign not followed by two hex digits
_BAD_ESCAPE_PATTERN = re.compile(r'%(?![0-9A-Fa-f]{2})')

# ASCII control characters are never valid inside a URL
_CONTROL_CHAR_PATTERN = re.compile(r'[\x00-\x1f\x7f]')


def parse_reference(reference: str) -> ParseResult:
    """
    Parse a URL or URL fragment, rejecting malformed input.

    Args:
        reference: URL string to parse

    Returns:
        Parsed URL

    Raises:
        ValueError: If the string is not a valid URL component
    """
    if _CONTROL_CHAR_PATTERN.search(reference):
        raise ValueError(f"invalid control character in URL: {reference!r}")

    if _BAD_ESCAPE_PATTERN.search(reference):
        raise ValueError(f"invalid URL escape in {reference!r}")

    parsed = urlparse(reference)

    # Accessing the port validates it
    parsed.port

    return parsed


def parse_origin(url: str) -> ParseResult:
    """
    Parse the page URL that relative asset references are resolved against.

    Args:
        url: Absolute page URL

    Returns:
        Parsed origin

    Raises:
        InvalidURL: If the URL cannot be parsed or is not absolute HTTP(S)
    """
    try:
        origin = parse_reference(url.strip())
    except ValueError as e:
        raise InvalidURL(f"Invalid URL {url!r}: {e}") from e

    if origin.scheme not in ('http', 'https') or not origin.netloc:
        raise InvalidURL(f"Invalid URL {url!r}: expected an absolute http(s) URL")

    return origin


def origin_host(origin: ParseResult) -> str:
    """Host and port of the origin, without any user:password@ prefix."""
    host = origin.hostname or ''

    # IPv6 literals keep their brackets
    if ':' in host:
        host = f'[{host}]'

    if origin.port is not None:
        host = f'{host}:{origin.port}'

    return host


def add_http_protocol_if_not_exists(url: str) -> str:
    """
    Prefix a URL with 'http://' unless it already carries a scheme.

    The check looks for 'http://' or 'https://' anywhere in the string.

    Args:
        url: URL without or with a scheme

    Returns:
        URL with an explicit scheme
    """
    if 'http://' in url or 'https://' in url:
        return url

    return 'http://' + url


def normalize_source_url(asset_path: str, origin: ParseResult) -> str:
    """
    Convert an asset reference into a requestable URL.

    Relative references like '/css/foo/bar.css' become
    'http://domain.com/css/foo/bar.css' based on the origin host.

    Args:
        asset_path: Raw href/src value from the page
        origin: Parsed URL of the page

    Returns:
        Absolute URL string

    Raises:
        MalformedReference: If the reference cannot be parsed
    """
    try:
        parsed = parse_reference(asset_path)
    except ValueError as e:
        raise MalformedReference(str(e), reference=asset_path) from e

    # //foo.bar/baz.css => foo.bar/baz.css
    if asset_path.startswith('//'):
        asset_path = asset_path[2:]

    # ../../app.css => app.css
    asset_path = asset_path.replace('../', '')

    if not parsed.netloc:
        asset_path = origin_host(origin) + '/' + asset_path.lstrip('/')

    return add_http_protocol_if_not_exists(asset_path)
