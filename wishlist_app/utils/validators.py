"""Custom validators and sanitizers"""

import html
import re
from typing import List, Optional
import bleach

# Username pattern
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]{3,30}$")

MAX_TAG_LENGTH = 50

def normalize_text(text: str) -> str:
    """Normalize text input"""
    # Remove zero-width characters
    text = re.sub(r'[\u200b\u200c\u200d\ufeff]', '', text)

    # Trim
    return text.strip()

def sanitize_text(text: str, max_length: Optional[int] = None) -> str:
    """
    Strip any HTML markup from user supplied free text

    bleach escapes the text it keeps, so entities are decoded again to store
    what the user typed. The length limit applies to the final text.
    """
    text = normalize_text(html.unescape(bleach.clean(text, tags=[], attributes={}, strip=True)))
    if max_length is not None and len(text) > max_length:
        raise ValueError(f"Must be at most {max_length} characters")
    return text

def strip_or_none(value: Optional[str]) -> Optional[str]:
    """Trim value, mapping blank strings to None"""
    if value is None:
        return None
    value = normalize_text(value)
    return value or None

def validate_username(username: str) -> str:
    """Validate username format"""
    username = username.strip()

    if not USERNAME_PATTERN.match(username):
        raise ValueError(
            "Username must be 3-30 characters long and contain only "
            "letters, numbers, dots, underscores, and hyphens"
        )

    return username

def clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    """Trim tags, drop blanks and duplicates, keep first-seen order"""
    if tags is None:
        return None

    seen = []
    for tag in tags:
        tag = normalize_text(tag or "")
        if not tag:
            continue
        if len(tag) > MAX_TAG_LENGTH:
            raise ValueError(f"Tags must be at most {MAX_TAG_LENGTH} characters")
        if tag not in seen:
            seen.append(tag)
    return seen
