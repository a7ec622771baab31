"""Hashing helpers for cache keys.

Example:
    >>> from lawe.utils.hashing import hash_str
    >>> hash_str("hello", truncate=16)
    '2cf24dba5fb0a30e'
"""

import hashlib
from dataclasses import fields, is_dataclass
from typing import Any


def hash_str(
    content: str,
    truncate: int | None = None,
    algorithm: str = "sha256",
) -> str:
    """Hash string content.

    Args:
        content: String content to hash
        truncate: Truncate result to N characters (None = full hash)
        algorithm: Hash algorithm accepted by ``hashlib.new``

    Returns:
        Hex digest, optionally truncated
    """
    hasher = hashlib.new(algorithm)
    hasher.update(content.encode("utf-8"))
    digest = hasher.hexdigest()
    return digest[:truncate] if truncate is not None else digest


def hash_fields(obj: Any, *, truncate: int = 16) -> str:
    """Deterministic hash of a dataclass instance's field values."""
    if not is_dataclass(obj):
        raise TypeError(f"hash_fields expects a dataclass instance, got {type(obj).__name__}")

    parts = [type(obj).__name__]
    for field in fields(obj):
        parts.append(f"{field.name}={getattr(obj, field.name)!r}")
    return hash_str("|".join(parts), truncate=truncate)
