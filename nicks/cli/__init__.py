"""
nicks.cli — command-line tooling for the name registry.
"""

from .main import app

__all__ = ["app"]
