"""
Extension matching for asset classification.

Extensions are regular expressions searched anywhere in a reference, not
anchored to its end. '.css' therefore matches 'style.css?v=2' as well as
'/cssfiles/data.json'; the second case is a known misclassification.
Matching is case-sensitive.
"""

import re
from typing import Iterable, Tuple

from .errors import PatternError


def has_extension(src: str, *extensions: str) -> str:
    """
    Match an asset reference against candidate extensions.

    Args:
        src: Asset reference (href/src value)
        *extensions: Candidate extension patterns, tried in order

    Returns:
        The first matching extension, or an empty string

    Raises:
        PatternError: If a candidate is not a valid pattern
    """
    for extension in extensions:
        try:
            found = re.search(extension, src)
        except re.error as e:
            raise PatternError(
                f"Invalid extension pattern {extension!r}: {e}",
                reference=src
            ) from e

        if found:
            return extension

    return ""


class ExtensionMatcher:
    """
    Classifies asset references against a fixed set of extensions.

    The candidate set is frozen at construction.
    """

    def __init__(self, extensions: Iterable[str]):
        self._extensions: Tuple[str, ...] = tuple(extensions)

    @property
    def extensions(self) -> Tuple[str, ...]:
        return self._extensions

    def match(self, reference: str) -> str:
        """Return the first extension found in the reference, or ''."""
        return has_extension(reference, *self._extensions)

    def __repr__(self) -> str:
        return f"ExtensionMatcher({list(self._extensions)!r})"
