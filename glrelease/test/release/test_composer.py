"""Tests for release composition (dry run and live against MockHttpClient)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from glrelease.core.cancel import CancelToken
from glrelease.core.config import AssetLink, Configuration
from glrelease.core.credentials import StaticCredentials
from glrelease.core.result import Err, Ok, Result
from glrelease.gitlab.http import HttpError, MockHttpClient
from glrelease.output.console import MockConsole
from glrelease.release.composer import (
    create_release,
    release_url,
    resolve_description,
    resolve_project_id,
    resolve_release,
)
from glrelease.release.contracts import ReleaseContext

NO_ENV = StaticCredentials()
API = "https://gitlab.com/api/v4"
RELEASES = f"{API}/projects/group%2Fproject/releases"
CTX = ReleaseContext(version="1.0.0", tag_name="v1.0.0", release_notes="Test release notes")


def _run(
    config: Configuration,
    ctx: ReleaseContext = CTX,
    *,
    dry_run: bool = False,
    http: MockHttpClient | None = None,
    console: MockConsole | None = None,
    cancel: CancelToken | None = None,
    cwd: Path | None = None,
    credentials: StaticCredentials = NO_ENV,
):
    return create_release(
        config,
        ctx,
        dry_run=dry_run,
        credentials=credentials,
        http=http or MockHttpClient(),
        console=console or MockConsole(),
        cancel=cancel,
        cwd=cwd,
    )


def _http_with_release(url: str = RELEASES) -> MockHttpClient:
    http = MockHttpClient()
    http.set_response("POST", url, {"tag_name": "v1.0.0", "name": "Release 1.0.0"})
    return http


class TestResolution:
    def test_project_id_from_config(self) -> None:
        ctx = ReleaseContext(repository_owner="o", repository_name="n")
        assert resolve_project_id(Configuration(project_id="group/project"), ctx) == Ok("group/project")

    def test_project_id_inferred(self) -> None:
        ctx = ReleaseContext(repository_owner="mygroup", repository_name="myproject")
        assert resolve_project_id(Configuration(), ctx) == Ok("mygroup/myproject")

    @pytest.mark.parametrize(
        "ctx",
        [
            ReleaseContext(),
            ReleaseContext(repository_owner="mygroup"),
            ReleaseContext(repository_name="myproject"),
        ],
    )
    def test_project_id_missing(self, ctx: ReleaseContext) -> None:
        result = resolve_project_id(Configuration(), ctx)
        assert isinstance(result, Err)
        assert "project_id is required" in result.error.message

    @pytest.mark.parametrize(
        ("description", "notes", "changelog", "expected"),
        [
            ("Custom", "X", "Y", "Custom"),
            ("", "X", "Y", "X"),
            ("", "", "Y", "Y"),
            ("", "", "", ""),
        ],
    )
    def test_description_priority(
        self, description: str, notes: str, changelog: str, expected: str
    ) -> None:
        config = Configuration(description=description)
        ctx = ReleaseContext(release_notes=notes, changelog=changelog)
        assert resolve_description(config, ctx) == expected

    def test_name_and_ref_defaults(self) -> None:
        result = resolve_release(Configuration(token="t", project_id="g/p"), CTX, NO_ENV)
        assert isinstance(result, Ok)
        assert result.value.name == "Release 1.0.0"
        assert result.value.ref == "v1.0.0"

    def test_name_and_ref_overrides(self) -> None:
        config = Configuration(token="t", project_id="g/p", name="Custom", ref="develop")
        result = resolve_release(config, CTX, NO_ENV)
        assert isinstance(result, Ok)
        assert result.value.name == "Custom"
        assert result.value.ref == "develop"

    def test_token_from_env(self) -> None:
        creds = StaticCredentials({"GL_TOKEN": "gl"})
        result = resolve_release(Configuration(project_id="g/p"), CTX, creds)
        assert isinstance(result, Ok)
        assert result.value.token == "gl"

    @pytest.mark.parametrize(
        ("base_url", "expected"),
        [
            ("", "https://gitlab.com/group/project/-/releases/v1.0.0"),
            ("https://gitlab.example.com", "https://gitlab.example.com/group/project/-/releases/v1.0.0"),
            ("https://gitlab.example.com/", "https://gitlab.example.com/group/project/-/releases/v1.0.0"),
        ],
    )
    def test_release_url(self, base_url: str, expected: str) -> None:
        assert release_url(Configuration(base_url=base_url), "group/project", "v1.0.0") == expected


class TestDryRun:
    def test_with_project_id(self) -> None:
        http = MockHttpClient()
        ctx = ReleaseContext(version="1.2.3", tag_name="v1.2.3")

        resp = _run(Configuration(token="t", project_id="group/project"), ctx, dry_run=True, http=http)

        assert resp.success is True
        assert resp.message == "Would create GitLab release for group/project: v1.2.3"
        assert resp.outputs["name"] == "Release 1.2.3"
        assert resp.outputs["tag_name"] == "v1.2.3"
        assert resp.outputs["project_id"] == "group/project"
        assert http.requests == []

    def test_infers_project(self) -> None:
        ctx = ReleaseContext(repository_owner="mygroup", repository_name="myproject", tag_name="v1.2.3")

        resp = _run(Configuration(token="t"), ctx, dry_run=True)

        assert resp.success
        assert resp.outputs["project_id"] == "mygroup/myproject"
        assert resp.message == "Would create GitLab release for mygroup/myproject: v1.2.3"

    def test_custom_name(self) -> None:
        config = Configuration(token="t", project_id="g/p", name="My Custom Release")
        resp = _run(config, dry_run=True)
        assert resp.outputs["name"] == "My Custom Release"

    def test_description_in_outputs(self) -> None:
        ctx = ReleaseContext(version="1.0.0", tag_name="v1.0.0", changelog="## Changelog")
        resp = _run(Configuration(token="t", project_id="g/p"), ctx, dry_run=True)
        assert resp.outputs["description"] == "## Changelog"

    def test_requires_token(self) -> None:
        resp = _run(Configuration(project_id="group/project"), dry_run=True)
        assert resp.success is False
        assert "token is required" in resp.error

    def test_requires_project_id(self) -> None:
        resp = _run(Configuration(token="t"), ReleaseContext(tag_name="v1"), dry_run=True)
        assert resp.success is False
        assert "project_id is required" in resp.error


class TestLive:
    def test_success(self) -> None:
        http = _http_with_release()

        resp = _run(Configuration(token="glpat-test", project_id="group/project"), http=http)

        assert resp.success
        assert resp.message == "Created GitLab release: https://gitlab.com/group/project/-/releases/v1.0.0"
        assert resp.outputs["release_url"] == "https://gitlab.com/group/project/-/releases/v1.0.0"
        assert resp.outputs["tag_name"] == "v1.0.0"
        assert resp.outputs["project_id"] == "group/project"
        assert resp.outputs["name"] == "Release 1.0.0"
        assert resp.artifacts == ()

    def test_request_payload(self) -> None:
        http = _http_with_release()
        config = Configuration(
            token="glpat-test",
            project_id="group/project",
            milestones=("v1.0.0", "Q4-2024"),
            released_at="2024-01-15T10:00:00Z",
            asset_links=(
                AssetLink(name="Download", url="https://example.com/download", link_type="package"),
                AssetLink(name="Docs", url="https://docs.example.com", filepath="/docs"),
            ),
        )

        _run(config, http=http)

        request = http.requests[0]
        assert request.headers["PRIVATE-TOKEN"] == "glpat-test"
        assert request.json == {
            "tag_name": "v1.0.0",
            "name": "Release 1.0.0",
            "description": "Test release notes",
            "tag_message": "Test release notes",
            "ref": "v1.0.0",
            "released_at": "2024-01-15T10:00:00Z",
            "milestones": ["v1.0.0", "Q4-2024"],
            "assets": {
                "links": [
                    {"name": "Download", "url": "https://example.com/download", "link_type": "package"},
                    {"name": "Docs", "url": "https://docs.example.com", "direct_asset_path": "/docs"},
                ]
            },
        }

    def test_invalid_released_at_is_dropped(self) -> None:
        http = _http_with_release()
        console = MockConsole()

        _run(
            Configuration(token="t", project_id="group/project", released_at="next tuesday"),
            http=http,
            console=console,
        )

        assert http.requests[0].json is not None
        assert "released_at" not in http.requests[0].json
        assert console.find("released_at")

    def test_custom_base_url(self) -> None:
        http = _http_with_release("https://gl.example.com/api/v4/projects/group%2Fproject/releases")
        config = Configuration(token="t", project_id="group/project", base_url="https://gl.example.com/")

        resp = _run(config, http=http)

        assert resp.success
        assert resp.outputs["release_url"] == "https://gl.example.com/group/project/-/releases/v1.0.0"

    def test_create_failure(self) -> None:
        http = MockHttpClient()
        http.set_response(
            "POST", RELEASES, HttpError(url=RELEASES, status=500, message="Internal Server Error")
        )

        resp = _run(Configuration(token="t", project_id="group/project"), http=http)

        assert resp.success is False
        assert "failed to create release" in resp.error
        assert "Internal Server Error" in resp.error
        assert resp.artifacts == ()

    def test_create_failure_skips_uploads(self, tmp_path: Path) -> None:
        (tmp_path / "app.zip").write_bytes(b"x")
        http = MockHttpClient()

        resp = _run(
            Configuration(token="t", project_id="group/project", assets=("app.zip",)),
            http=http,
            cwd=tmp_path,
        )

        assert not resp.success
        assert [r.method for r in http.requests] == ["POST"]

    def test_cancelled_before_release(self) -> None:
        http = _http_with_release()
        cancel = CancelToken()
        cancel.cancel()

        resp = _run(Configuration(token="t", project_id="group/project"), http=http, cancel=cancel)

        assert resp.success is False
        assert "failed to create release: cancelled" in resp.error
        assert http.requests == []


class TestLiveAssets:
    @pytest.fixture
    def workdir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
        work = tmp_path / "work"
        (work / "dist").mkdir(parents=True)
        (work / "app.zip").write_bytes(b"test asset content")
        (work / "dist" / "cli.tar.gz").write_bytes(b"cli")
        (tmp_path / "outside.zip").write_bytes(b"secret")
        monkeypatch.chdir(work)
        return work

    @staticmethod
    def _upload_url(name: str) -> str:
        return f"{API}/projects/group%2Fproject/packages/generic/release/v1.0.0/{name}"

    def test_uploads_in_order(self, workdir: Path) -> None:
        http = _http_with_release()
        http.set_response("PUT", self._upload_url("app.zip"), {"message": "201 Created"})
        http.set_response("PUT", self._upload_url("cli.tar.gz"), {"message": "201 Created"})
        config = Configuration(token="t", project_id="group/project", assets=("app.zip", "dist/cli.tar.gz"))

        resp = _run(config, http=http)

        assert resp.success
        assert [(a.name, a.type, a.size) for a in resp.artifacts] == [
            ("app.zip", "generic_package", len(b"test asset content")),
            ("cli.tar.gz", "generic_package", 3),
        ]
        assert [r.method for r in http.requests] == ["POST", "PUT", "PUT"]
        assert resp.outputs["skipped_assets"] == []

    def test_traversal_asset_is_skipped(self, workdir: Path) -> None:
        http = _http_with_release()
        http.set_response("PUT", self._upload_url("app.zip"), {"message": "201 Created"})
        console = MockConsole()
        config = Configuration(token="t", project_id="group/project", assets=("../outside.zip", "app.zip"))

        resp = _run(config, http=http, console=console)

        assert resp.success
        assert [a.name for a in resp.artifacts] == ["app.zip"]
        skipped = resp.outputs["skipped_assets"]
        assert isinstance(skipped, list) and len(skipped) == 1
        assert skipped[0]["path"] == "../outside.zip"
        assert "path traversal" in skipped[0]["error"]
        assert console.has_warning()
        # nothing outside the working directory was sent
        assert all(r.content != b"secret" for r in http.requests)

    def test_invalid_assets_do_not_fail_release(self, workdir: Path) -> None:
        http = _http_with_release()
        config = Configuration(
            token="t",
            project_id="group/project",
            assets=("", "missing.zip", "dist", "/etc/passwd"),
        )

        resp = _run(config, http=http)

        assert resp.success
        assert resp.artifacts == ()
        skipped = resp.outputs["skipped_assets"]
        assert isinstance(skipped, list) and len(skipped) == 4
        assert [r.method for r in http.requests] == ["POST"]

    def test_nul_byte_asset_is_skipped(self, workdir: Path) -> None:
        http = _http_with_release()
        http.set_response("PUT", self._upload_url("app.zip"), {"message": "201 Created"})
        config = Configuration(token="t", project_id="group/project", assets=("app\x00.zip", "app.zip"))

        resp = _run(config, http=http)

        assert resp.success
        assert [a.name for a in resp.artifacts] == ["app.zip"]
        skipped = resp.outputs["skipped_assets"]
        assert isinstance(skipped, list)
        assert skipped[0]["path"] == "app\x00.zip"
        assert "not accessible" in skipped[0]["error"]

    def test_upload_failure_is_non_fatal(self, workdir: Path) -> None:
        http = _http_with_release()
        http.set_response(
            "PUT",
            self._upload_url("app.zip"),
            HttpError(url=self._upload_url("app.zip"), status=500, message="boom"),
        )
        http.set_response("PUT", self._upload_url("cli.tar.gz"), {"message": "201 Created"})
        config = Configuration(token="t", project_id="group/project", assets=("app.zip", "dist/cli.tar.gz"))

        resp = _run(config, http=http)

        assert resp.success
        assert [a.name for a in resp.artifacts] == ["cli.tar.gz"]
        skipped = resp.outputs["skipped_assets"]
        assert isinstance(skipped, list)
        assert "failed to upload app.zip" in skipped[0]["error"]

    def test_cancel_during_uploads_keeps_partial_artifacts(self, workdir: Path) -> None:
        cancel = CancelToken()

        class CancellingHttp(MockHttpClient):
            def put_file(self, url: str, path: Path, **kwargs: Any) -> Result[dict[str, Any], HttpError]:
                result = super().put_file(url, path, **kwargs)
                cancel.cancel()
                return result

        http = CancellingHttp()
        http.set_response("POST", RELEASES, {"tag_name": "v1.0.0"})
        http.set_response("PUT", self._upload_url("app.zip"), {"message": "201 Created"})
        config = Configuration(token="t", project_id="group/project", assets=("app.zip", "dist/cli.tar.gz"))

        resp = _run(config, http=http, cancel=cancel)

        assert resp.success
        assert [a.name for a in resp.artifacts] == ["app.zip"]
        assert resp.outputs["cancelled"] is True
        assert resp.outputs["skipped_assets"] == [{"path": "dist/cli.tar.gz", "error": "cancelled"}]
        assert [r.method for r in http.requests] == ["POST", "PUT"]
