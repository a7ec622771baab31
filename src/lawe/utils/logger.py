"""Logging helpers for Lawe.

Example:
    >>> from lawe.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.warning("Invalid link target: %s", "wp>")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a standard library logger namespaced under "lawe.".

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> get_logger("processor").name
        'lawe.processor'
    """
    if not (name == "lawe" or name.startswith("lawe.")):
        name = f"lawe.{name}"
    return logging.getLogger(name)
