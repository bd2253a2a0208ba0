"""Compose and publish a GitLab release from configuration and host context.

Resolution rules:
- project: config.project_id, else "{owner}/{name}" from the context
- name: config.name, else "Release {version}"
- description: config.description, else release notes, else changelog
- ref: config.ref, else the tag name

The token must be resolvable even for dry runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from glrelease.core.cancel import CancelToken
from glrelease.core.config import Configuration
from glrelease.core.credentials import CredentialSource, resolve_token
from glrelease.core.result import Err, Ok, Result
from glrelease.gitlab.api import GitLabApi, ReleaseRequest
from glrelease.gitlab.http import HttpClient
from glrelease.output.console import ConsoleProtocol

from .assets import upload_assets
from .contracts import ExecuteResponse, ReleaseContext
from .errors import ReleaseError

__all__ = [
    "ResolvedRelease",
    "create_release",
    "release_url",
    "resolve_description",
    "resolve_project_id",
    "resolve_release",
]


@dataclass(frozen=True, slots=True)
class ResolvedRelease:
    project_id: str
    token: str
    tag_name: str
    name: str
    description: str
    ref: str

    def outputs(self) -> dict[str, object]:
        return {
            "tag_name": self.tag_name,
            "project_id": self.project_id,
            "name": self.name,
            "ref": self.ref,
        }


def resolve_project_id(config: Configuration, ctx: ReleaseContext) -> Result[str, ReleaseError]:
    if config.project_id:
        return Ok(config.project_id)
    if ctx.repository_owner and ctx.repository_name:
        return Ok(f"{ctx.repository_owner}/{ctx.repository_name}")
    return Err(
        ReleaseError(
            kind="missing_project_id",
            message="project_id is required (or repository owner/name in the release context)",
        )
    )


def resolve_description(config: Configuration, ctx: ReleaseContext) -> str:
    return config.description or ctx.release_notes or ctx.changelog or ""


def resolve_release(
    config: Configuration,
    ctx: ReleaseContext,
    credentials: CredentialSource,
) -> Result[ResolvedRelease, ReleaseError]:
    project = resolve_project_id(config, ctx)
    if isinstance(project, Err):
        return project

    token = resolve_token(config.token, credentials)
    if not token:
        return Err(
            ReleaseError(
                kind="missing_token",
                message="GitLab token is required",
                hint="set token in config, or GITLAB_TOKEN / GL_TOKEN",
            )
        )

    return Ok(
        ResolvedRelease(
            project_id=project.value,
            token=token,
            tag_name=ctx.tag_name,
            name=config.name or f"Release {ctx.version}",
            description=resolve_description(config, ctx),
            ref=config.ref or ctx.tag_name,
        )
    )


def release_url(config: Configuration, project_id: str, tag_name: str) -> str:
    return f"{config.web_base_url}/{project_id}/-/releases/{tag_name}"


def _released_at(value: str, console: ConsoleProtocol) -> str:
    if not value:
        return ""
    try:
        datetime.fromisoformat(value)
    except ValueError:
        console.warning(f"ignoring released_at {value!r}: not an ISO-8601 timestamp")
        return ""
    return value


def create_release(
    config: Configuration,
    ctx: ReleaseContext,
    *,
    dry_run: bool,
    credentials: CredentialSource,
    http: HttpClient,
    console: ConsoleProtocol,
    cancel: CancelToken | None = None,
    cwd: Path | None = None,
) -> ExecuteResponse:
    """Create the release, then upload assets one by one.

    Only release creation can fail the call; asset problems are reported in
    `outputs["skipped_assets"]`.
    """
    resolved_result = resolve_release(config, ctx, credentials)
    if isinstance(resolved_result, Err):
        return ExecuteResponse.failed(resolved_result.error.pretty())
    resolved = resolved_result.value

    if dry_run:
        console.info(f"dry run: release {resolved.name!r} on {resolved.project_id} at {resolved.ref}")
        return ExecuteResponse.ok(
            f"Would create GitLab release for {resolved.project_id}: {resolved.tag_name}",
            outputs={
                **resolved.outputs(),
                "description": resolved.description,
                "dry_run": True,
            },
        )

    cancel = cancel or CancelToken()
    api = GitLabApi(
        base_url=config.web_base_url,
        token=resolved.token,
        http=http,
        cancel=cancel,
    )

    request = ReleaseRequest(
        tag_name=resolved.tag_name,
        name=resolved.name,
        description=resolved.description,
        ref=resolved.ref,
        released_at=_released_at(config.released_at, console),
        milestones=config.milestones,
        links=config.asset_links,
    )
    created = api.create_release(resolved.project_id, request)
    if isinstance(created, Err):
        console.error(f"release creation failed: {created.error}")
        return ExecuteResponse.failed(
            f"failed to create release: {created.error}",
            outputs=resolved.outputs(),
        )

    uploads = upload_assets(
        api,
        project_id=resolved.project_id,
        tag_name=resolved.tag_name,
        assets=config.assets,
        console=console,
        cancel=cancel,
        cwd=cwd,
    )

    url = release_url(config, resolved.project_id, resolved.tag_name)
    outputs: dict[str, object] = {
        **resolved.outputs(),
        "release_url": url,
        "skipped_assets": [s.to_dict() for s in uploads.skipped],
    }
    if uploads.cancelled:
        outputs["cancelled"] = True

    return ExecuteResponse.ok(
        f"Created GitLab release: {url}",
        outputs=outputs,
        artifacts=uploads.artifacts,
    )
