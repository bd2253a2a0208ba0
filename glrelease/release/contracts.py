"""Request/response shapes shared with the host orchestrator."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from glrelease.core.structured import get_str

__all__ = ["Artifact", "ExecuteResponse", "ReleaseContext"]


@dataclass(frozen=True, slots=True)
class ReleaseContext:
    """Release facts supplied by the host. Trusted; not validated here."""

    version: str = ""
    previous_version: str = ""
    tag_name: str = ""
    release_type: str = ""
    repository_owner: str = ""
    repository_name: str = ""
    branch: str = ""
    commit_sha: str = ""
    changelog: str = ""
    release_notes: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseContext:
        return cls(
            version=get_str(data, "version"),
            previous_version=get_str(data, "previous_version"),
            tag_name=get_str(data, "tag_name"),
            release_type=get_str(data, "release_type"),
            repository_owner=get_str(data, "repository_owner"),
            repository_name=get_str(data, "repository_name"),
            branch=get_str(data, "branch"),
            commit_sha=get_str(data, "commit_sha"),
            changelog=get_str(data, "changelog"),
            release_notes=get_str(data, "release_notes"),
        )


@dataclass(frozen=True, slots=True)
class Artifact:
    name: str
    type: str
    size: int

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, "type": self.type, "size": self.size}


def _empty_outputs() -> dict[str, object]:
    return {}


@dataclass(frozen=True, slots=True)
class ExecuteResponse:
    """Outcome of one hook invocation.

    Failures are values: `success=False` with `error` set, never an exception.
    """

    success: bool
    message: str = ""
    error: str = ""
    outputs: dict[str, object] = field(default_factory=_empty_outputs)
    artifacts: tuple[Artifact, ...] = ()

    @classmethod
    def ok(
        cls,
        message: str,
        outputs: dict[str, object] | None = None,
        artifacts: tuple[Artifact, ...] = (),
    ) -> ExecuteResponse:
        return cls(success=True, message=message, outputs=outputs or {}, artifacts=artifacts)

    @classmethod
    def failed(cls, error: str, outputs: dict[str, object] | None = None) -> ExecuteResponse:
        return cls(success=False, error=error, outputs=outputs or {})

    def to_dict(self) -> dict[str, object]:
        return {
            "success": self.success,
            "message": self.message,
            "error": self.error,
            "outputs": self.outputs,
            "artifacts": [a.to_dict() for a in self.artifacts],
        }
