"""GitLab REST API access."""

from .api import GENERIC_PACKAGE_NAME, GitLabApi, ReleaseRequest
from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient

__all__ = [
    "GENERIC_PACKAGE_NAME",
    "GitLabApi",
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    "ReleaseRequest",
]
