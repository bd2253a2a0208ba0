"""Result type for explicit error handling.

Operations that can fail for expected reasons (a bad asset path, a rejected
API call, an unreadable config file) return a Result instead of raising:

    def load(path: Path) -> Result[StrDict, ConfigError]:
        if not path.exists():
            return Err(ConfigError(f"config file not found: {path}", path=path))
        return Ok(parse(path))

    result = resolve_asset_path("dist/app.zip")
    if isinstance(result, Err):
        console.warning(result.error.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful outcome carrying a value."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed outcome carrying an error payload."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
