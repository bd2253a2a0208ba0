from __future__ import annotations

import json
from pathlib import Path

import typer

from glrelease import __version__
from glrelease.core.cancel import CancelToken
from glrelease.core.config import load_document
from glrelease.core.errors import ErrorCode
from glrelease.core.result import Err
from glrelease.core.structured import StrDict
from glrelease.output.console import RichConsole
from glrelease.plugin.dispatcher import GitLabPlugin
from glrelease.release.contracts import ReleaseContext

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _emit(payload: object) -> None:
    typer.echo(json.dumps(payload, indent=2))


def _load(path: Path) -> StrDict:
    result = load_document(path)
    if isinstance(result, Err):
        typer.echo(f"error: {result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))
    return result.value


def build_plugin() -> GitLabPlugin:
    return GitLabPlugin(console=RichConsole())


@app.command()
def info() -> None:
    """Print plugin metadata and config schema as JSON."""
    _emit(build_plugin().get_info().to_dict())


@app.command()
def validate(
    config: Path = typer.Argument(..., help="Config file (.toml, .yaml, .yml or .json)"),
) -> None:
    """Validate a configuration file."""
    result = build_plugin().validate(_load(config))
    _emit(result.to_dict())
    if not result.valid:
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))


@app.command()
def execute(
    hook: str = typer.Argument(..., help="Hook name (e.g. post-publish)"),
    config: Path = typer.Option(..., "--config", "-c", help="Config file"),
    context: Path | None = typer.Option(None, "--context", help="Release context file"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Resolve the release without API calls"),
    timeout: float | None = typer.Option(
        None, "--timeout", min=0.0, help="Overall deadline in seconds"
    ),
) -> None:
    """Run one hook and print the response as JSON."""
    raw = _load(config)
    ctx = ReleaseContext.from_dict(_load(context)) if context is not None else ReleaseContext()
    cancel = CancelToken.with_timeout(timeout) if timeout is not None else None

    response = build_plugin().execute(hook, raw, ctx, dry_run=dry_run, cancel=cancel)
    _emit(response.to_dict())
    if not response.success:
        raise typer.Exit(code=int(ErrorCode.RELEASE_ERROR))


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))


def main() -> None:
    app()
