"""Plugin entry points called by the host: info, validate, execute."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from glrelease import __version__
from glrelease.core.cancel import CancelToken
from glrelease.core.config import normalize
from glrelease.core.credentials import CredentialSource, EnvCredentials
from glrelease.core.validation import ValidationResult, validate
from glrelease.gitlab.http import HttpClient, RealHttpClient
from glrelease.output.console import ConsoleProtocol, MockConsole
from glrelease.release.composer import create_release
from glrelease.release.contracts import ExecuteResponse, ReleaseContext

from .hooks import Hook, parse_hook
from .schema import config_schema_json

__all__ = ["GitLabPlugin", "PluginInfo", "PLUGIN_HOOKS"]

PLUGIN_HOOKS: tuple[Hook, ...] = (Hook.POST_PUBLISH, Hook.ON_SUCCESS, Hook.ON_ERROR)


@dataclass(frozen=True, slots=True)
class PluginInfo:
    name: str
    version: str
    description: str
    author: str
    hooks: tuple[Hook, ...]
    config_schema: str

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "author": self.author,
            "hooks": [str(h) for h in self.hooks],
            "config_schema": self.config_schema,
        }


def _quiet_console() -> ConsoleProtocol:
    return MockConsole()


@dataclass
class GitLabPlugin:
    """Stateless hook dispatcher.

    Collaborators are injectable; defaults talk to the real environment and
    network. The default console discards output; the CLI passes a RichConsole.
    """

    credentials: CredentialSource = field(default_factory=EnvCredentials)
    http: HttpClient = field(default_factory=RealHttpClient)
    console: ConsoleProtocol = field(default_factory=_quiet_console)
    cwd: Path | None = None

    def get_info(self) -> PluginInfo:
        return PluginInfo(
            name="gitlab",
            version=__version__,
            description="Create GitLab releases and upload assets",
            author="Relicta Team",
            hooks=PLUGIN_HOOKS,
            config_schema=config_schema_json(),
        )

    def validate(self, config: Mapping[str, object]) -> ValidationResult:
        return validate(config, self.credentials)

    def execute(
        self,
        hook: str,
        config: Mapping[str, object],
        context: ReleaseContext,
        *,
        dry_run: bool = False,
        cancel: CancelToken | None = None,
    ) -> ExecuteResponse:
        parsed = parse_hook(hook)
        if parsed is None:
            return ExecuteResponse.failed(f"unknown hook: {hook}")

        match parsed:
            case Hook.POST_PUBLISH:
                return create_release(
                    normalize(config),
                    context,
                    dry_run=dry_run,
                    credentials=self.credentials,
                    http=self.http,
                    console=self.console,
                    cancel=cancel,
                    cwd=self.cwd,
                )
            case Hook.ON_SUCCESS:
                return ExecuteResponse.ok("Release successful")
            case Hook.ON_ERROR:
                return ExecuteResponse.ok("Release failed notification acknowledged")
            case _:
                return ExecuteResponse.ok(f"Hook {parsed} not handled")
