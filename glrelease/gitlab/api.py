"""GitLab REST v4 calls used by the release flow.

Only two endpoints are needed:
- POST /projects/:id/releases
- PUT  /projects/:id/packages/generic/:package/:version/:file
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import quote

from glrelease.core.cancel import CancelToken
from glrelease.core.config import AssetLink
from glrelease.core.result import Err, Result

from .http import HttpClient, HttpError

__all__ = ["GENERIC_PACKAGE_NAME", "GitLabApi", "ReleaseRequest", "link_payload"]

GENERIC_PACKAGE_NAME = "release"


@dataclass(frozen=True, slots=True)
class ReleaseRequest:
    tag_name: str
    name: str
    description: str
    ref: str
    released_at: str = ""
    milestones: tuple[str, ...] = ()
    links: tuple[AssetLink, ...] = ()

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "tag_name": self.tag_name,
            "name": self.name,
            "description": self.description,
            "tag_message": self.description,
            "ref": self.ref,
            "assets": {"links": [link_payload(link) for link in self.links]},
        }
        if self.released_at:
            payload["released_at"] = self.released_at
        if self.milestones:
            payload["milestones"] = list(self.milestones)
        return payload


def link_payload(link: AssetLink) -> dict[str, str]:
    """Map an AssetLink onto GitLab's release link shape."""
    out = {"name": link.name, "url": link.url}
    if link.filepath:
        out["direct_asset_path"] = link.filepath
    if link.link_type:
        out["link_type"] = link.link_type
    return out


def _segment(value: str) -> str:
    return quote(value, safe="")


class GitLabApi:
    """Thin wrapper binding an HttpClient to one GitLab instance and token."""

    def __init__(
        self,
        *,
        base_url: str,
        token: str,
        http: HttpClient,
        cancel: CancelToken | None = None,
    ) -> None:
        self.api_url = f"{base_url.removesuffix('/')}/api/v4"
        self._headers = {"PRIVATE-TOKEN": token, "Accept": "application/json"}
        self._http = http
        self._cancel = cancel or CancelToken()

    def _cancelled(self, url: str) -> Err[HttpError] | None:
        if self._cancel.cancelled:
            return Err(HttpError(url=url, status=0, message="cancelled"))
        return None

    def create_release(
        self, project_id: str, request: ReleaseRequest
    ) -> Result[dict[str, Any], HttpError]:
        url = f"{self.api_url}/projects/{_segment(project_id)}/releases"
        cancelled = self._cancelled(url)
        if cancelled is not None:
            return cancelled
        return self._http.post_json(
            url,
            request.to_payload(),
            headers=self._headers,
            timeout=self._cancel.timeout(),
        )

    def upload_generic_package(
        self,
        project_id: str,
        *,
        version: str,
        file_name: str,
        path: Path,
        package_name: str = GENERIC_PACKAGE_NAME,
    ) -> Result[dict[str, Any], HttpError]:
        url = (
            f"{self.api_url}/projects/{_segment(project_id)}/packages/generic/"
            f"{_segment(package_name)}/{_segment(version)}/{_segment(file_name)}"
        )
        cancelled = self._cancelled(url)
        if cancelled is not None:
            return cancelled
        return self._http.put_file(
            url,
            path,
            headers=self._headers,
            timeout=self._cancel.timeout(),
        )
