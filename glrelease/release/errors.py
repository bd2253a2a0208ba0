"""Error types for the release flow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "missing_project_id",
    "missing_token",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Fatal failure of the release step.

    `message` is what the host sees in the response error field; callers
    match on stable substrings such as "token is required".
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
