"""
Upload validation.

Checks run on client-declared values before anything is written.
Nothing here looks at the actual bytes; the object's existence is
verified later, at confirmation time.
"""

from collections.abc import Collection

from upload_broker.config.settings import DEFAULT_ALLOWED_CONTENT_TYPES


def is_allowed_content_type(
    mime_type: str,
    allowed: Collection[str] = DEFAULT_ALLOWED_CONTENT_TYPES,
) -> bool:
    """True if the declared MIME type is on the allow-list."""
    return mime_type in allowed


def is_valid_size(size_bytes: int, max_bytes: int) -> bool:
    """True iff 0 < size_bytes <= max_bytes."""
    return 0 < size_bytes <= max_bytes
