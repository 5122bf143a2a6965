"""Logging helper for norgrender.

The library never installs handlers; applications configure the
``norgrender`` logger hierarchy themselves.

Example:
    >>> from norgrender.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.warning("Rendering is not implemented for %s", "RangedTag")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger namespaced under ``norgrender``.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> get_logger("parser").name
        'norgrender.parser'
    """
    if not (name == "norgrender" or name.startswith("norgrender.")):
        name = f"norgrender.{name}"
    return logging.getLogger(name)
