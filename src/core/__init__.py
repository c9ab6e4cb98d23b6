"""
Core functionality for Exprolution.

This package contains the application-level configuration shared by the
command-line entry point.
"""

from src.core.config import settings, Settings

__all__ = [
    "settings",
    "Settings",
]
