"""
Curing module for site antidote.

Contains the orchestrator, the asset fetcher, the transformers and reporters.
"""

from .antidote import Antidote, CureState, CureSummary, Ingredients
from .fetcher import AssetFetcher
from .reporter import CureReporter, LoggingReporter
from .transformers import inline_style, inline_script, inline_image

__all__ = [
    "Antidote",
    "CureState",
    "CureSummary",
    "Ingredients",
    "AssetFetcher",
    "CureReporter",
    "LoggingReporter",
    "inline_style",
    "inline_script",
    "inline_image",
]
