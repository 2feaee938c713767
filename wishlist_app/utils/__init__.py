"""Utilities package"""

from .validators import (
    normalize_text,
    sanitize_text,
    strip_or_none,
    validate_username,
    clean_tags,
)

__all__ = [
    "normalize_text",
    "sanitize_text",
    "strip_or_none",
    "validate_username",
    "clean_tags",
]
