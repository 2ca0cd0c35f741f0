"""
Object key derivation.

Turns a client-supplied file name into a collision-resistant, path-safe
storage key:

    y=2025/m=01/d=31/<uuid4>_<sanitized base><ext>

Uniqueness comes from the random token, never from the name.
"""

import re
import uuid
from datetime import datetime, timezone

MAX_BASE_NAME_LENGTH = 100

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f ]')


def split_extension(file_name: str) -> tuple[str, str]:
    """Split off the final extension: "a.b.c.png" -> ("a.b.c", ".png")."""
    idx = file_name.rfind(".")
    if idx == -1 or "/" in file_name[idx:]:
        return file_name, ""
    return file_name[:idx], file_name[idx:]


def sanitize(name: str) -> str:
    """Replace unsafe characters and spaces with underscores."""
    return _UNSAFE_CHARS.sub("_", name)


def derive_object_key(file_name: str, now: datetime | None = None) -> str:
    """
    Derive the storage key for a new upload.

    Args:
        file_name: Client-declared file name, used only for readability.
        now: Time for the date partition (defaults to current UTC time).

    Returns:
        A key safe to use as an object-store path.
    """
    now = now or datetime.now(timezone.utc)
    base, ext = split_extension(file_name)

    safe_base = sanitize(base)[:MAX_BASE_NAME_LENGTH]
    # ".png" is kept verbatim; only characters that would break the path go
    safe_ext = sanitize(ext)

    token = uuid.uuid4()
    return f"y={now.year}/m={now.month:02d}/d={now.day:02d}/{token}_{safe_base}{safe_ext}"
