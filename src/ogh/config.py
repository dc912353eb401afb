"""Configuration parsing and validation for ogh."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import AuthenticationError, ConfigurationError

DEFAULT_REPOSITORY = "apache/hadoop-ozone"
DEFAULT_CACHE_TTL_SECONDS = 180


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used by the API commands."""

    owner: str
    repo: str
    token: str
    cache_prefix: str = ""
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS


def split_repository(repository: str) -> tuple[str, str]:
    """Split an ``owner/name`` repository string.

    Raises:
        ConfigurationError: If the value is not of the form ``owner/name``.
    """
    owner, sep, name = repository.strip().partition("/")
    if not sep or not owner or not name or "/" in name:
        raise ConfigurationError(
            f"Invalid repository '{repository}': expected the form 'owner/name'."
        )
    return owner, name


def _cache_ttl_from_env() -> int:
    raw_value = os.getenv("OGH_CACHE_TTL", "").strip()
    if not raw_value:
        return DEFAULT_CACHE_TTL_SECONDS

    try:
        ttl = int(raw_value)
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid value for 'OGH_CACHE_TTL': expected an integer, got '{raw_value}'."
        ) from exc

    if ttl <= 0:
        raise ConfigurationError("Invalid value for 'OGH_CACHE_TTL': expected an integer greater than 0.")
    return ttl


def load_config(repository: str) -> Config:
    """Build and validate application configuration.

    Args:
        repository: Target GitHub repository as ``owner/name``.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If the repository or cache settings are invalid.
        AuthenticationError: If ``GITHUB_TOKEN`` is not configured.
    """
    owner, repo = split_repository(repository)

    token: str = os.getenv("GITHUB_TOKEN", "").strip()
    if not token:
        raise AuthenticationError(
            "Missing required GitHub token. "
            "Set the 'GITHUB_TOKEN' environment variable before running ogh."
        )

    return Config(
        owner=owner,
        repo=repo,
        token=token,
        cache_prefix=os.getenv("OGH_CACHE", "").strip(),
        cache_ttl_seconds=_cache_ttl_from_env(),
    )
