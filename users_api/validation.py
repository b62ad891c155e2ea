"""Validation rules for user payloads."""

from __future__ import annotations

from typing import Optional

NAME_REQUIRED = "Name is required."
INVALID_EMAIL = "Invalid email format."


def is_valid_email(email: Optional[str]) -> bool:
    # Substring checks only; not an RFC 5322 parser.
    if email is None or not email.strip():
        return False
    return "@" in email and "." in email


def validate_user(name: Optional[str], email: Optional[str]) -> Optional[str]:
    """Return the first validation error for a user payload, or ``None``."""

    if name is None or not name.strip():
        return NAME_REQUIRED
    if not is_valid_email(email):
        return INVALID_EMAIL
    return None


__all__ = ["INVALID_EMAIL", "NAME_REQUIRED", "is_valid_email", "validate_user"]
