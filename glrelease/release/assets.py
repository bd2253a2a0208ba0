"""Sequential asset uploads with per-asset failure isolation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from glrelease.core.cancel import CancelToken
from glrelease.core.paths import resolve_asset_path
from glrelease.core.result import Err, Ok, Result
from glrelease.gitlab.api import GitLabApi
from glrelease.output.console import ConsoleProtocol

from .contracts import Artifact

__all__ = [
    "GENERIC_PACKAGE_TYPE",
    "AssetUploads",
    "SkippedAsset",
    "upload_asset",
    "upload_assets",
]

GENERIC_PACKAGE_TYPE = "generic_package"


@dataclass(frozen=True, slots=True)
class SkippedAsset:
    path: str
    error: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "error": self.error}


@dataclass(frozen=True, slots=True)
class AssetUploads:
    artifacts: tuple[Artifact, ...] = ()
    skipped: tuple[SkippedAsset, ...] = ()
    cancelled: bool = False


def upload_asset(
    api: GitLabApi,
    *,
    project_id: str,
    tag_name: str,
    asset_path: str,
    cwd: Path | None = None,
) -> Result[Artifact, str]:
    """Validate one asset path and upload it as a generic package file."""
    resolved = resolve_asset_path(asset_path, cwd=cwd)
    if isinstance(resolved, Err):
        return Err(resolved.error.message)

    path = resolved.value
    try:
        size = path.stat().st_size
    except OSError as e:
        return Err(f"asset file not accessible: {asset_path}: {e}")

    file_name = Path(asset_path).name
    result = api.upload_generic_package(
        project_id,
        version=tag_name,
        file_name=file_name,
        path=path,
    )
    if isinstance(result, Err):
        return Err(f"failed to upload {file_name}: {result.error}")

    return Ok(Artifact(name=file_name, type=GENERIC_PACKAGE_TYPE, size=size))


def upload_assets(
    api: GitLabApi,
    *,
    project_id: str,
    tag_name: str,
    assets: Sequence[str],
    console: ConsoleProtocol,
    cancel: CancelToken,
    cwd: Path | None = None,
) -> AssetUploads:
    """Upload assets in order; a failing asset is recorded and skipped."""
    artifacts: list[Artifact] = []
    skipped: list[SkippedAsset] = []

    for index, asset_path in enumerate(assets):
        if cancel.cancelled:
            console.warning(f"cancelled: {len(assets) - index} asset(s) not uploaded")
            skipped.extend(SkippedAsset(path=p, error="cancelled") for p in assets[index:])
            return AssetUploads(tuple(artifacts), tuple(skipped), cancelled=True)

        result = upload_asset(
            api,
            project_id=project_id,
            tag_name=tag_name,
            asset_path=asset_path,
            cwd=cwd,
        )
        if isinstance(result, Err):
            console.warning(f"skipping asset {asset_path!r}: {result.error}")
            skipped.append(SkippedAsset(path=asset_path, error=result.error))
            continue

        artifact = result.value
        console.success(f"uploaded {artifact.name} ({artifact.size} bytes)")
        artifacts.append(artifact)

    return AssetUploads(tuple(artifacts), tuple(skipped))
