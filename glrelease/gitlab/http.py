"""HTTP client abstraction for the GitLab REST API.

This module provides:
- HttpClient: Protocol for HTTP operations (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Records requests and serves canned responses
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, cast, runtime_checkable

from glrelease import __version__
from glrelease.core.cancel import DEFAULT_TIMEOUT_SECONDS
from glrelease.core.result import Err, Ok, Result
from glrelease.core.structured import as_str_dict

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "MockRequest",
    "RealHttpClient",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for the two request shapes the GitLab API needs."""

    def post_json(
        self,
        url: str,
        body: Mapping[str, object],
        *,
        headers: Mapping[str, str],
        timeout: float | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        """POST a JSON body and parse the JSON response."""
        ...

    def put_file(
        self,
        url: str,
        path: Path,
        *,
        headers: Mapping[str, str],
        timeout: float | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        """PUT a file's bytes as the request body, streamed from disk."""
        ...


def _error_detail(raw: bytes, fallback: str) -> str:
    """Pull GitLab's `message`/`error` field out of an error body."""
    try:
        data = as_str_dict(json.loads(raw.decode("utf-8")))
    except (json.JSONDecodeError, UnicodeDecodeError):
        data = None
    if data is not None:
        for key in ("message", "error"):
            value = data.get(key)
            if value:
                return value if isinstance(value, str) else json.dumps(value)
    text = raw.decode("utf-8", errors="replace").strip()
    return text or fallback


def _parse_body(url: str, raw: bytes) -> Result[dict[str, Any], HttpError]:
    if not raw.strip():
        return Ok({})
    try:
        data_obj: object = json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))
    data = as_str_dict(data_obj)
    if data is None:
        return Ok({"data": data_obj})
    # Values are dynamic; preserve as Any for callers.
    return Ok(cast(dict[str, Any], data))


class RealHttpClient:
    """HTTP client using urllib.

    Handles:
    - HTTPS with system certificates
    - JSON request/response bodies
    - Streaming file uploads
    - Timeout handling
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = f"glrelease/{__version__}",
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def _send(self, req: urllib.request.Request, timeout: float | None) -> Result[bytes, HttpError]:
        url = req.full_url
        try:
            with urllib.request.urlopen(
                req,
                timeout=timeout if timeout is not None else self.timeout,
                context=self._ssl_context,
            ) as response:
                return Ok(response.read())
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=_error_detail(e.read(), e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

    def post_json(
        self,
        url: str,
        body: Mapping[str, object],
        *,
        headers: Mapping[str, str],
        timeout: float | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        try:
            req = urllib.request.Request(
                url,
                data=json.dumps(body).encode("utf-8"),
                headers={
                    **headers,
                    "User-Agent": self.user_agent,
                    "Content-Type": "application/json",
                },
                method="POST",
            )
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

        result = self._send(req, timeout)
        if isinstance(result, Err):
            return result
        return _parse_body(url, result.value)

    def put_file(
        self,
        url: str,
        path: Path,
        *,
        headers: Mapping[str, str],
        timeout: float | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        try:
            size = path.stat().st_size
            with open(path, "rb") as f:
                req = urllib.request.Request(
                    url,
                    data=f,
                    headers={
                        **headers,
                        "User-Agent": self.user_agent,
                        "Content-Type": "application/octet-stream",
                        "Content-Length": str(size),
                    },
                    method="PUT",
                )
                result = self._send(req, timeout)
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=f"cannot read {path}: {e}"))

        if isinstance(result, Err):
            return result
        return _parse_body(url, result.value)


@dataclass(frozen=True, slots=True)
class MockRequest:
    """A request captured by MockHttpClient."""

    method: str
    url: str
    headers: dict[str, str]
    json: dict[str, object] | None = None
    content: bytes | None = None


def _empty_requests() -> list[MockRequest]:
    return []


def _empty_responses() -> dict[tuple[str, str], dict[str, Any] | HttpError]:
    return {}


@dataclass
class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_response("POST", "https://gitlab.com/api/v4/projects/1/releases", {})
        result = client.post_json(url, {"tag_name": "v1"}, headers={})
        assert client.requests[0].json == {"tag_name": "v1"}

    Unregistered URLs answer 404.
    """

    responses: dict[tuple[str, str], dict[str, Any] | HttpError] = field(
        default_factory=_empty_responses
    )
    requests: list[MockRequest] = field(default_factory=_empty_requests)

    def set_response(self, method: str, url: str, response: dict[str, Any] | HttpError) -> None:
        self.responses[(method, url)] = response

    def _respond(self, method: str, url: str) -> Result[dict[str, Any], HttpError]:
        response = self.responses.get((method, url))
        if response is None:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def post_json(
        self,
        url: str,
        body: Mapping[str, object],
        *,
        headers: Mapping[str, str],
        timeout: float | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        self.requests.append(MockRequest("POST", url, dict(headers), json=dict(body)))
        return self._respond("POST", url)

    def put_file(
        self,
        url: str,
        path: Path,
        *,
        headers: Mapping[str, str],
        timeout: float | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        self.requests.append(MockRequest("PUT", url, dict(headers), content=path.read_bytes()))
        return self._respond("PUT", url)
