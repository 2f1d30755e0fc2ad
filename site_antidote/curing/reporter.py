"""
Reporters for per-asset failures.

A failing asset never aborts a cure. Its error is handed to a reporter and
the element stays as it was. Errors of the last cure are kept on
Antidote.summary, so reporters hold no state of their own.
"""

from typing import Protocol

from ..utils.errors import AssetError
from ..utils.log import get_logger


class CureReporter(Protocol):
    """Sink for errors raised while curing single elements."""

    def report(self, error: AssetError) -> None:
        ...


class LoggingReporter:
    """
    Logs asset errors as warnings.
    """

    def __init__(self, logger_name: str = "antidote"):
        self.logger = get_logger(logger_name)

    def report(self, error: AssetError) -> None:
        self.logger.warning(f"{type(error).__name__}: {error}")
