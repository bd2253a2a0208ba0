"""Asset path resolution confined to the working directory.

Asset paths come from configuration, so they are untrusted. A path is only
handed to the uploader after it has been resolved to a real, symlink-free
location inside the working directory.

Checks run in this order:
1. empty input is rejected
2. the lexically normalized path must stay inside the working directory
   (catches `../x`, `a/../../x` and absolute paths elsewhere)
3. the path must exist (a NUL byte never does); it is canonicalized with
   symlinks followed
4. the canonical path must still be inside the canonical working directory
   (catches symlinks pointing outside)
5. the target must be a regular file
"""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from .result import Err, Ok, Result

__all__ = ["PathError", "PathErrorKind", "resolve_asset_path"]

PathErrorKind = Literal["empty", "traversal", "not_accessible", "is_directory"]


@dataclass(frozen=True, slots=True)
class PathError:
    """Why an asset path was rejected."""

    kind: PathErrorKind
    message: str
    path: str = ""

    def __str__(self) -> str:
        return self.message


def _is_within(path: Path, root: Path) -> bool:
    return path == root or root in path.parents


def _traversal(path: str, detail: str) -> Err[PathError]:
    return Err(
        PathError(
            kind="traversal",
            message=f"path traversal not allowed: {path} ({detail})",
            path=path,
        )
    )


def resolve_asset_path(path: str, *, cwd: Path | None = None) -> Result[Path, PathError]:
    """Resolve an asset path to its canonical location inside cwd.

    Args:
        path: Relative or absolute path from configuration.
        cwd: Directory the path must stay within (defaults to the process cwd).

    Returns:
        Ok with the canonical absolute path, or Err(PathError).
    """
    if path == "":
        return Err(PathError(kind="empty", message="asset path cannot be empty"))

    base = Path(os.path.abspath(cwd if cwd is not None else os.getcwd()))
    try:
        real_base = base.resolve(strict=True)
    except (OSError, RuntimeError, ValueError) as e:
        return Err(
            PathError(
                kind="not_accessible",
                message=f"working directory not accessible: {e}",
                path=path,
            )
        )

    # join() discards base when path is absolute
    lexical = Path(os.path.normpath(os.path.join(base, path)))
    if not (_is_within(lexical, base) or _is_within(lexical, real_base)):
        return _traversal(path, "resolves outside working directory")

    try:
        real = lexical.resolve(strict=True)
        st = real.stat()
    except (OSError, RuntimeError, ValueError) as e:
        return Err(
            PathError(
                kind="not_accessible",
                message=f"asset file not accessible: {path}: {e}",
                path=path,
            )
        )

    if not _is_within(real, real_base):
        return _traversal(path, "symlink target outside working directory")

    if stat.S_ISDIR(st.st_mode):
        return Err(
            PathError(
                kind="is_directory",
                message=f"asset path is a directory: {path}",
                path=path,
            )
        )
    if not stat.S_ISREG(st.st_mode):
        return Err(
            PathError(
                kind="not_accessible",
                message=f"asset file not accessible: {path}: not a regular file",
                path=path,
            )
        )

    return Ok(real)
