"""Field-addressable validation of raw plugin configuration.

Validation reads the same untyped mapping as `normalize` but, instead of
silently discarding bad fragments, reports each one with a dotted/indexed
field path (`asset_links[0].url`) and an error code.

Checks run in a fixed order and all errors are collected:
token, base_url, assets, milestones, asset_links.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

from .config import LINK_TYPES
from .credentials import CredentialSource, resolve_token
from .structured import as_obj_list, as_str_dict, get_str

__all__ = [
    "ValidationCode",
    "ValidationError",
    "ValidationResult",
    "validate",
]

ValidationCode = Literal["required", "format", "type", "enum"]


@dataclass(frozen=True, slots=True)
class ValidationError:
    field: str
    code: ValidationCode
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "code": self.code, "message": self.message}


@dataclass(frozen=True, slots=True)
class ValidationResult:
    errors: tuple[ValidationError, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, object]:
        return {"valid": self.valid, "errors": [e.to_dict() for e in self.errors]}


def _check_token(raw: Mapping[str, object], credentials: CredentialSource) -> list[ValidationError]:
    if resolve_token(get_str(raw, "token"), credentials):
        return []
    return [
        ValidationError(
            field="token",
            code="required",
            message="GitLab token is required (set token, GITLAB_TOKEN or GL_TOKEN)",
        )
    ]


def _check_base_url(raw: Mapping[str, object]) -> list[ValidationError]:
    value = raw.get("base_url")
    if value is None:
        return []
    if not isinstance(value, str):
        return [ValidationError(field="base_url", code="type", message="base_url must be a string")]
    if not value or value.startswith(("http://", "https://")):
        return []
    return [
        ValidationError(
            field="base_url",
            code="format",
            message="base_url must start with http:// or https://",
        )
    ]


def _check_string_array(raw: Mapping[str, object], key: str) -> list[ValidationError]:
    value = raw.get(key)
    if value is None:
        return []
    items = as_obj_list(value)
    if items is None:
        return [ValidationError(field=key, code="type", message=f"{key} must be an array")]

    return [
        ValidationError(
            field=f"{key}[{i}]",
            code="type",
            message=f"{key} entries must be strings, got {type(item).__name__}",
        )
        for i, item in enumerate(items)
        if not isinstance(item, str)
    ]


def _check_asset_links(raw: Mapping[str, object]) -> list[ValidationError]:
    value = raw.get("asset_links")
    if value is None:
        return []
    items = as_obj_list(value)
    if items is None:
        return [
            ValidationError(field="asset_links", code="type", message="asset_links must be an array")
        ]

    errors: list[ValidationError] = []
    for i, item in enumerate(items):
        entry = as_str_dict(item)
        if entry is None:
            # Not interpretable as a link at all; normalize drops it too.
            continue
        prefix = f"asset_links[{i}]"
        if not get_str(entry, "name"):
            errors.append(
                ValidationError(
                    field=f"{prefix}.name", code="required", message="asset link name is required"
                )
            )
        if not get_str(entry, "url"):
            errors.append(
                ValidationError(
                    field=f"{prefix}.url", code="required", message="asset link url is required"
                )
            )
        link_type = get_str(entry, "link_type")
        if link_type and link_type not in LINK_TYPES:
            errors.append(
                ValidationError(
                    field=f"{prefix}.link_type",
                    code="enum",
                    message=f"link_type must be one of: {', '.join(LINK_TYPES)}",
                )
            )
    return errors


def validate(raw: Mapping[str, object], credentials: CredentialSource) -> ValidationResult:
    """Validate a raw configuration mapping.

    Args:
        raw: Configuration as supplied by the host.
        credentials: Source consulted when `token` is not configured.

    Returns:
        ValidationResult with every error found, in check order.
    """
    errors = [
        *_check_token(raw, credentials),
        *_check_base_url(raw),
        *_check_string_array(raw, "assets"),
        *_check_string_array(raw, "milestones"),
        *_check_asset_links(raw),
    ]
    return ValidationResult(errors=tuple(errors))
