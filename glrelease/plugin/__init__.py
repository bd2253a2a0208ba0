"""Host-facing plugin surface."""

from .dispatcher import PLUGIN_HOOKS, GitLabPlugin, PluginInfo
from .hooks import Hook, parse_hook
from .schema import CONFIG_SCHEMA, config_schema_json

__all__ = [
    "CONFIG_SCHEMA",
    "PLUGIN_HOOKS",
    "GitLabPlugin",
    "Hook",
    "PluginInfo",
    "config_schema_json",
    "parse_hook",
]
