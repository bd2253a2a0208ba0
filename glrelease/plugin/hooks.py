"""Lifecycle hook names sent by the release orchestrator."""

from __future__ import annotations

from enum import StrEnum

__all__ = ["Hook", "parse_hook"]


class Hook(StrEnum):
    PRE_INIT = "pre-init"
    POST_INIT = "post-init"
    PRE_PLAN = "pre-plan"
    POST_PLAN = "post-plan"
    PRE_VERSION = "pre-version"
    POST_VERSION = "post-version"
    PRE_NOTES = "pre-notes"
    POST_NOTES = "post-notes"
    PRE_APPROVE = "pre-approve"
    POST_APPROVE = "post-approve"
    PRE_PUBLISH = "pre-publish"
    POST_PUBLISH = "post-publish"
    ON_SUCCESS = "on-success"
    ON_ERROR = "on-error"


def parse_hook(name: str) -> Hook | None:
    try:
        return Hook(name)
    except ValueError:
        return None
