"""
Site Antidote - inline every external asset of a web page.

This package fetches a page, downloads its stylesheets, scripts and images
concurrently, and rewrites the document so it renders without any external
requests.
"""

from .curing import Antidote, CureState, Ingredients

__version__ = "1.0.0"
__author__ = "Site Antidote Team"

__all__ = ["Antidote", "CureState", "Ingredients"]
