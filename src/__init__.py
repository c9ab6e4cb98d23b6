"""
Exprolution - Source Package

This package contains the expression search: the expression evaluator,
the genetic algorithm components and the application settings.
"""

__version__ = "1.0.0"

# Package-level imports for convenience
from src.core.config import settings

__all__ = [
    "settings",
    "__version__"
]
