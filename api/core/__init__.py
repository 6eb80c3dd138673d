"""Core utilities for the mirror redirect service.

This module exports commonly used utilities for easy importing:
    from core import configure_logging, get_settings
"""

from core.config import get_settings
from core.logger import configure_logging

__all__ = [
    "configure_logging",
    "get_settings",
]
