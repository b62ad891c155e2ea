"""Static bearer token authentication for the user directory API."""
from __future__ import annotations

import os
import secrets
from typing import Iterable, List, Optional

DEFAULT_API_TOKENS = ("valid-token", "another-valid-token")


def extract_token(header_value: Optional[str]) -> str:
    """Return the text after the last space of an ``Authorization`` header."""

    if not header_value:
        return ""
    return header_value.split(" ")[-1]


class TokenAuthenticator:
    """Checks bearer tokens against an allow-list using constant-time comparisons."""

    def __init__(self, tokens: Iterable[str] = DEFAULT_API_TOKENS):
        token_list: List[str] = [token.strip() for token in tokens if token.strip()]
        if not token_list:
            raise ValueError("At least one API token must be provided")
        self._tokens = token_list

    def authenticate(self, header_value: Optional[str]) -> bool:
        provided = extract_token(header_value)
        if not provided:
            return False

        matched = False
        for token in self._tokens:
            if secrets.compare_digest(provided.encode("utf-8"), token.encode("utf-8")):
                matched = True
        return matched


def load_tokens_from_env() -> List[str]:
    raw = os.getenv("USERS_API_TOKENS", "")
    return [token.strip() for token in raw.split(",") if token.strip()]


__all__ = ["DEFAULT_API_TOKENS", "TokenAuthenticator", "extract_token", "load_tokens_from_env"]
