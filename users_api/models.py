"""Domain models for the user directory service."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """Represents a user record held by the in-memory store."""

    id: int
    name: str
    email: str


__all__ = ["User"]
