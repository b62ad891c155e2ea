"""Configuration management for the user directory service."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml

from .models import User
from .security import DEFAULT_API_TOKENS, load_tokens_from_env

DEFAULT_SEED_USERS: Tuple[User, ...] = (
    User(id=1, name="John Doe", email="john.doe@example.com"),
    User(id=2, name="Jane Smith", email="jane.smith@example.com"),
)

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the API application."""

    api_tokens: Tuple[str, ...] = DEFAULT_API_TOKENS
    environment: str = "production"
    log_level: str = "INFO"
    seed_users: Tuple[User, ...] = field(default_factory=lambda: DEFAULT_SEED_USERS)

    @property
    def is_development(self) -> bool:
        return self.environment.strip().lower() == "development"


def _user_from_dict(data: object) -> User:
    if not isinstance(data, dict):
        raise ValueError("Each user entry must be a mapping")
    required_fields = {"id", "name", "email"}
    missing = required_fields - data.keys()
    if missing:
        raise ValueError(f"Missing required user fields: {', '.join(sorted(missing))}")
    return User(id=int(data["id"]), name=str(data["name"]), email=str(data["email"]))


def _tokens_from_config(raw: object) -> Tuple[str, ...]:
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, (list, tuple)):
        raise ValueError("api_tokens must be a list of strings")
    return tuple(str(token).strip() for token in raw if str(token).strip())


def resolve_config_path(env_value: Optional[str]) -> Optional[Path]:
    """Resolve the path to the optional YAML configuration file."""
    if env_value:
        return Path(env_value).expanduser().resolve(strict=False)
    candidate = (Path(__file__).resolve().parent.parent / "config" / "users_api.yaml").resolve(strict=False)
    return candidate if candidate.exists() else None


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Build :class:`Settings` from an optional YAML file and the environment.

    Environment variables take precedence over values from the file.
    """
    if config_path is None:
        config_path = resolve_config_path(os.getenv("USERS_API_CONFIG"))

    raw: Dict[str, object] = {}
    if config_path is not None:
        with Path(config_path).open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
        if not isinstance(raw, dict):
            raise ValueError("Configuration file must contain a mapping at the top level")

    defaults = Settings()

    tokens = _tokens_from_config(raw["api_tokens"]) if "api_tokens" in raw else defaults.api_tokens
    env_tokens = load_tokens_from_env()
    if env_tokens:
        tokens = tuple(env_tokens)
    if not tokens:
        raise ValueError("At least one API token must be configured")

    users_raw = raw.get("users")
    if users_raw is None:
        seed_users = defaults.seed_users
    elif isinstance(users_raw, list):
        seed_users = tuple(_user_from_dict(item) for item in users_raw)
    else:
        raise ValueError("'users' must be a list of user mappings")

    environment = os.getenv("USERS_API_ENV") or str(raw.get("environment", defaults.environment))
    log_level = os.getenv("USERS_API_LOG_LEVEL") or str(raw.get("log_level", defaults.log_level))
    log_level = log_level.strip().upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level '{log_level}'; expected one of {', '.join(LOG_LEVELS)}")

    return Settings(
        api_tokens=tokens,
        environment=environment,
        log_level=log_level,
        seed_users=seed_users,
    )


__all__ = ["DEFAULT_SEED_USERS", "LOG_LEVELS", "Settings", "load_settings", "resolve_config_path"]
