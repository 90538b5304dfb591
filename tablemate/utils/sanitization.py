"""
Input sanitization utilities for API payloads.
Provides functions to clean free-text inputs before they are stored.
"""

import re
from typing import Optional

_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]')


def sanitize_string(value: Optional[str]) -> Optional[str]:
    if not isinstance(value, str):
        return value
    # Remove leading/trailing whitespace and dangerous characters
    value = value.strip()
    # Remove control characters; newlines and tabs are legitimate in reviews
    value = _CONTROL_CHARS.sub('', value)
    # Escape HTML
    value = value.replace('<', '&lt;').replace('>', '&gt;')
    return value


def sanitize_optional(value: Optional[str]) -> Optional[str]:
    """Sanitize and collapse empty strings to ``None``."""
    value = sanitize_string(value)
    return value or None
