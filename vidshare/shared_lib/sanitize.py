"""
User text sanitization.
"""
import re
from typing import Tuple, Optional

_TAG_RE = re.compile(r"<[^>]*>")

_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#x27;"),
    ("/", "&#x2F;"),
)


def sanitize_text(text: Optional[str]) -> str:
    """Strip HTML tags, escape HTML-significant characters and trim."""
    if not text:
        return ""

    sanitized = _TAG_RE.sub("", text)
    for char, entity in _ESCAPES:
        sanitized = sanitized.replace(char, entity)

    return sanitized.strip()


def validate_comment_text(text, max_length: int = 2000) -> Tuple[bool, str]:
    """
    Validate raw comment text.

    Returns ``(True, sanitized)`` on success or ``(False, reason)``. Length is
    measured after sanitization, so escaped entities count in full.
    """
    if not text or not isinstance(text, str):
        return False, "Comment text is required"

    sanitized = sanitize_text(text)

    if not sanitized:
        return False, "Comment cannot be empty"

    if len(sanitized) > max_length:
        return False, f"Comment must not exceed {max_length} characters"

    return True, sanitized
