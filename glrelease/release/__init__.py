"""Release composition: resolution rules, release creation, asset uploads."""

from .composer import create_release, resolve_release
from .contracts import Artifact, ExecuteResponse, ReleaseContext
from .errors import ReleaseError

__all__ = [
    "Artifact",
    "ExecuteResponse",
    "ReleaseContext",
    "ReleaseError",
    "create_release",
    "resolve_release",
]
