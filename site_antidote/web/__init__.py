"""
Web API for site antidote.
"""

from .app import create_app, run_app

__all__ = ["create_app", "run_app"]
