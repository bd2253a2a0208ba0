"""Typed plugin configuration.

The host passes configuration as an untyped mapping. `normalize` turns it
into a frozen Configuration and never fails: mistyped scalars become "",
non-string array elements are skipped, and asset links without both a name
and a url are dropped. Reporting those defects is the job of
`glrelease.core.validation`.
"""

from __future__ import annotations

import json
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import yaml

from .result import Err, Ok, Result
from .structured import StrDict, as_obj_list, as_str_dict, get_str, get_str_list

__all__ = [
    "AssetLink",
    "Configuration",
    "ConfigError",
    "CONFIG_FIELDS",
    "DEFAULT_BASE_URL",
    "LINK_TYPES",
    "load_document",
    "normalize",
]

DEFAULT_BASE_URL = "https://gitlab.com"

LINK_TYPES: tuple[str, ...] = ("other", "runbook", "image", "package")

CONFIG_FIELDS: tuple[str, ...] = (
    "base_url",
    "project_id",
    "token",
    "name",
    "description",
    "ref",
    "released_at",
    "milestones",
    "assets",
    "asset_links",
)


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when a config or context document cannot be loaded."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class AssetLink:
    """External link attached to the release.

    `filepath` is the virtual path GitLab serves the link under; it never
    touches the local filesystem. An empty `link_type` lets GitLab pick.
    """

    name: str
    url: str
    filepath: str = ""
    link_type: str = ""


@dataclass(frozen=True, slots=True)
class Configuration:
    base_url: str = ""
    project_id: str = ""
    token: str = ""
    name: str = ""
    description: str = ""
    ref: str = ""
    released_at: str = ""
    milestones: tuple[str, ...] = ()
    assets: tuple[str, ...] = ()
    asset_links: tuple[AssetLink, ...] = ()

    @property
    def web_base_url(self) -> str:
        """Base URL for browsable links, without a trailing slash."""
        if not self.base_url:
            return DEFAULT_BASE_URL
        return self.base_url.removesuffix("/")


def _parse_asset_links(value: object) -> tuple[AssetLink, ...]:
    items = as_obj_list(value)
    if items is None:
        return ()

    links: list[AssetLink] = []
    for item in items:
        entry = as_str_dict(item)
        if entry is None:
            continue
        name = get_str(entry, "name")
        url = get_str(entry, "url")
        if not name or not url:
            continue
        links.append(
            AssetLink(
                name=name,
                url=url,
                filepath=get_str(entry, "filepath"),
                link_type=get_str(entry, "link_type"),
            )
        )
    return tuple(links)


def normalize(raw: Mapping[str, object]) -> Configuration:
    """Build a Configuration from an untyped mapping, dropping what cannot be used."""
    return Configuration(
        base_url=get_str(raw, "base_url"),
        project_id=get_str(raw, "project_id"),
        token=get_str(raw, "token"),
        name=get_str(raw, "name"),
        description=get_str(raw, "description"),
        ref=get_str(raw, "ref"),
        released_at=get_str(raw, "released_at"),
        milestones=get_str_list(raw, "milestones"),
        assets=get_str_list(raw, "assets"),
        asset_links=_parse_asset_links(raw.get("asset_links")),
    )


def _parse_text(path: Path, text: str) -> object:
    suffix = path.suffix.lower()
    if suffix == ".toml":
        return tomllib.loads(text)
    if suffix in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)


def load_document(path: Path) -> Result[StrDict, ConfigError]:
    """Load a TOML, YAML or JSON document whose root is a mapping.

    The format is picked from the file suffix; anything that is not .toml,
    .yaml or .yml is parsed as JSON.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(ConfigError(f"file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"permission denied reading: {path}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"error reading {path}: {e}", path=path))

    try:
        data_obj = _parse_text(path, text)
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"invalid TOML syntax: {e}", path=path))
    except yaml.YAMLError as e:
        return Err(ConfigError(f"invalid YAML syntax: {e}", path=path))
    except json.JSONDecodeError as e:
        return Err(ConfigError(f"invalid JSON syntax: {e}", path=path))

    if data_obj is None:
        return Ok({})
    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("document root must be a mapping", path=path))
    return Ok(data)
