# saivd/core/validation.py

import re
from urllib.parse import urlparse

# RFC 4122 versions 1-5, variant 8/9/a/b
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DIGITS_PATTERN = re.compile(r"^[0-9]+$")


def is_valid_uuid(value) -> bool:
    """
    True only for strings shaped like an RFC 4122 UUID.

    is_valid_uuid('550e8400-e29b-41d4-a716-446655440000')  -> True
    is_valid_uuid('invalid-uuid')                          -> False
    is_valid_uuid(None)                                    -> False
    """
    if not isinstance(value, str):
        return False
    # fullmatch so a trailing newline is rejected
    return UUID_PATTERN.fullmatch(value) is not None


def is_valid_email(value) -> bool:
    if not isinstance(value, str):
        return False
    return EMAIL_PATTERN.fullmatch(value) is not None


def is_valid_url(value) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def sanitize_string(value, max_length: int = 1000) -> str:
    """Trim, truncate and drop angle brackets before display."""
    if not isinstance(value, str):
        return ""
    return re.sub(r"[<>]", "", value.strip()[:max_length])


def parse_positive_int(value) -> int | None:
    """Return the integer for a plain digit string greater than zero."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if not isinstance(value, str) or DIGITS_PATTERN.fullmatch(value) is None:
        return None
    number = int(value)
    return number if number > 0 else None


def parse_int(value, default: int) -> int | None:
    """
    Query-string integer. Absent or empty gives default; anything that is
    not an optionally signed run of digits gives None.
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None
    value = value.strip()
    digits = value[1:] if value.startswith("-") else value
    if DIGITS_PATTERN.fullmatch(digits) is None:
        return None
    return -int(digits) if value.startswith("-") else int(digits)
