"""Token lookup.

The token is taken from the first non-empty source, in order:
1. the `token` configuration field
2. the GITLAB_TOKEN environment variable
3. the GL_TOKEN environment variable

Environment access goes through a CredentialSource so tests can supply fixed
values without touching os.environ.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

__all__ = [
    "TOKEN_ENV_VARS",
    "CredentialSource",
    "EnvCredentials",
    "StaticCredentials",
    "resolve_token",
]

TOKEN_ENV_VARS: tuple[str, ...] = ("GITLAB_TOKEN", "GL_TOKEN")


class CredentialSource(Protocol):
    def lookup(self, name: str) -> str:
        """Return the value of the named variable, or "" when unset."""
        ...


class EnvCredentials:
    """Reads credentials from the process environment."""

    def lookup(self, name: str) -> str:
        return os.environ.get(name, "")


def _empty_values() -> dict[str, str]:
    return {}


@dataclass(frozen=True)
class StaticCredentials:
    """In-memory credential source."""

    values: Mapping[str, str] = field(default_factory=_empty_values)

    def lookup(self, name: str) -> str:
        return self.values.get(name, "")


def resolve_token(config_token: str, credentials: CredentialSource) -> str:
    """Return the first non-empty token, or "" when none is available."""
    if config_token:
        return config_token
    for name in TOKEN_ENV_VARS:
        value = credentials.lookup(name)
        if value:
            return value
    return ""
