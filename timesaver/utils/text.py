"""Text utilities for cleaning user-supplied strings before they are logged."""
import re
from typing import Any, Optional

MAX_FIELD_LENGTH = 500


def sanitize_text(text: Any, max_length: int = MAX_FIELD_LENGTH) -> Optional[str]:
    """Normalize a free-text form value for safe log output.

    Removes control characters (including newlines, so one record stays on
    one log line), collapses whitespace and truncates to ``max_length``.

    Examples:
        >>> sanitize_text("  Acme\\n  Corp ")
        'Acme Corp'
        >>> sanitize_text(None) is None
        True
    """
    if text is None:
        return None

    text = str(text)
    text = re.sub(r'[\x00-\x1F\x7F-\x9F]', ' ', text)
    text = re.sub(r'\s+', ' ', text).strip()

    if len(text) > max_length:
        text = text[:max_length]

    return text
