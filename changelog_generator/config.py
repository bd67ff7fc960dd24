"""
Runtime settings, read from the environment.
"""

import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, TypeVar

from .cache import DEFAULT_TTL_SECONDS

T = TypeVar("T", int, float)


def _number(env: Mapping[str, str], name: str, default: T, cast: Callable[[str], T]) -> T:
    value = env.get(name)
    if not value:
        return default
    try:
        return cast(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


@dataclass(frozen=True)
class Settings:
    github_token: Optional[str] = None
    # Seconds a cached GitHub response or changelog stays valid
    cache_ttl: float = DEFAULT_TTL_SECONDS
    # Per-request timeout for GitHub API calls, in seconds
    github_timeout: int = 15
    # Automatic retries of failed GitHub requests; 0 disables retrying
    github_retries: int = 0
    # Concurrent tag commit-date lookups
    max_workers: int = 8
    # HTTP API: generators (each with its own client and cache) kept for reuse
    max_generators: int = 32

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        env = os.environ if environ is None else environ
        return cls(
            github_token=env.get("GITHUB_TOKEN") or None,
            cache_ttl=_number(env, "CHANGELOG_CACHE_TTL", DEFAULT_TTL_SECONDS, float),
            github_timeout=_number(env, "GITHUB_TIMEOUT", 15, int),
            github_retries=_number(env, "GITHUB_RETRIES", 0, int),
            max_workers=max(1, _number(env, "CHANGELOG_MAX_WORKERS", 8, int)),
            max_generators=max(1, _number(env, "CHANGELOG_MAX_GENERATORS", 32, int)),
        )
