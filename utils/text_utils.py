"""
Text utilities for attribute keys and user-facing error messages.
"""

import re
from typing import Any, Optional

from exceptions import ApiRequestError, AppError

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def sanitize_key(key: Optional[str]) -> str:
    """
    Normalize a user-typed attribute name into a quality-spec key.

    Lower-cases and replaces every non-alphanumeric character with "_":
    - "Net Weight" → "net_weight"
    - "Shelf-life (days)" → "shelf_life__days_"
    - "Origen geográfico" → "origen_geogr_fico"

    Args:
        key: Attribute name as typed (may be None or blank)

    Returns:
        Sanitized key, or "" if nothing but whitespace was typed
    """
    if not key or not key.strip():
        return ""
    return _NON_ALNUM.sub("_", key.lower())


def slugify_issue_type(issue_type: str) -> str:
    """
    Turn a compliance issue type into a quality-spec key.

    "Shelf Life" → "shelf_life", "U.S. Label" → "u_s__label". Unlike
    sanitize_key, other punctuation is kept.
    """
    return issue_type.strip().lower().replace(" ", "_").replace(".", "_")


def _message_from_body(body: Any) -> Optional[str]:
    """Pull the backend's own message out of an error response body."""
    if isinstance(body, str):
        return body.strip() or None
    if not isinstance(body, dict):
        return None

    for key in ("message", "detail"):
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()

    error = body.get("error")
    if isinstance(error, dict):
        value = error.get("message")
        if isinstance(value, str) and value.strip():
            return value.strip()
    if isinstance(error, str) and error.strip():
        return error.strip()
    return None


def normalize_error_message(error: BaseException, fallback: str) -> str:
    """
    Convert any failure into a string fit for display.

    Preference order: the backend's message in the response body, then
    the exception's own message, then the fallback.

    Args:
        error: Exception raised by a remote call or callback
        fallback: Message used when nothing better is available

    Returns:
        Displayable message (never empty)
    """
    if isinstance(error, ApiRequestError):
        from_body = _message_from_body(error.body)
        if from_body:
            return from_body
    if isinstance(error, AppError) and error.message:
        return error.message

    text = str(error).strip()
    return text or fallback
