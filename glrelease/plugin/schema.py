"""JSON Schema describing the plugin configuration."""

from __future__ import annotations

import json

from glrelease.core.config import LINK_TYPES

__all__ = ["CONFIG_SCHEMA", "config_schema_json"]

CONFIG_SCHEMA: dict[str, object] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "base_url": {
            "type": "string",
            "description": "GitLab instance URL",
            "default": "https://gitlab.com",
        },
        "project_id": {
            "type": "string",
            "description": "Project ID or path (e.g. group/project); defaults to owner/name",
        },
        "token": {
            "type": "string",
            "description": "GitLab token (falls back to GITLAB_TOKEN, then GL_TOKEN)",
        },
        "name": {
            "type": "string",
            "description": "Release name (default: 'Release {version}')",
        },
        "description": {
            "type": "string",
            "description": "Release description (default: release notes, then changelog)",
        },
        "ref": {
            "type": "string",
            "description": "Commit SHA, branch or tag to create the tag from (default: tag name)",
        },
        "released_at": {
            "type": "string",
            "description": "ISO-8601 release date (default: now)",
        },
        "milestones": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Milestone titles to associate with the release",
        },
        "assets": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Files to upload as generic packages (inside the working directory)",
        },
        "asset_links": {
            "type": "array",
            "description": "External links to attach to the release",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Link name"},
                    "url": {"type": "string", "description": "Link URL"},
                    "filepath": {
                        "type": "string",
                        "description": "Permanent path served by GitLab for this link",
                    },
                    "link_type": {
                        "type": "string",
                        "enum": list(LINK_TYPES),
                        "description": "Link type",
                    },
                },
                "required": ["name", "url"],
            },
        },
    },
}


def config_schema_json() -> str:
    return json.dumps(CONFIG_SCHEMA, indent=2)
