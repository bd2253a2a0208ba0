"""GitLab release adapter for release orchestrators."""

__version__ = "2.0.0"
