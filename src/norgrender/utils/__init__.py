"""Utility modules for norgrender.

Provides:
- text: slugify, escape_attribute
- logger: get_logger
"""

from norgrender.utils.logger import get_logger
from norgrender.utils.text import escape_attribute, slugify

__all__ = [
    "escape_attribute",
    "get_logger",
    "slugify",
]
