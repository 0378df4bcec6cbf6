"""Shared fixtures: a recording httpx transport and GitLab clients/sessions on top of it."""

from __future__ import annotations

import httpx
import pytest

from gitkeeper.gitlab import GitLabClient, GitLabSession

SERVER = "https://gitlab.example.com"
GROUP_ID = 7
GROUP_NAME = "infra"
PROJECT_NAME = "manifests"


class MockTransport(httpx.BaseTransport):
    """Transport that records requests and returns canned responses.

    Responses are keyed by ``"METHOD /raw/path?query"`` relative to the
    server root, e.g. ``"GET /api/v4/groups/7/projects?simple=true"``.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses: dict[str, tuple[int, object]] = {}
        self.errors: dict[str, Exception] = {}

    def set_response(self, method: str, path: str, status: int, body: object):
        self.responses[f"{method.upper()} {path}"] = (status, body)

    def set_error(self, method: str, path: str, error: Exception):
        self.errors[f"{method.upper()} {path}"] = error

    def calls(self, method: str | None = None) -> list[str]:
        """Recorded request keys, optionally filtered by method."""
        keys = [f"{r.method} {r.url.raw_path.decode()}" for r in self.requests]
        if method:
            keys = [k for k in keys if k.startswith(method.upper() + " ")]
        return keys

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = f"{request.method} {request.url.raw_path.decode()}"

        if key in self.errors:
            raise self.errors[key]

        if key in self.responses:
            status, body = self.responses[key]
            if isinstance(body, (bytes, str)):
                return httpx.Response(status_code=status, content=body, request=request)
            return httpx.Response(status_code=status, json=body, request=request)

        # Default: 404
        return httpx.Response(
            status_code=404,
            json={"message": f"404 No mock for {key}"},
            request=request,
        )


@pytest.fixture
def mock_transport():
    return MockTransport()


@pytest.fixture
def client(mock_transport):
    """A GitLabClient backed by the mock transport."""
    gl = GitLabClient(SERVER, "glpat-test", transport=mock_transport)
    yield gl
    gl.close()


@pytest.fixture
def session(client):
    """A session for infra/manifests (group 7)."""
    return GitLabSession(client, GROUP_ID, GROUP_NAME, PROJECT_NAME)


@pytest.fixture
def projects_listed(mock_transport):
    """Group 7 lists projects a (1), b (2) and manifests (42)."""
    mock_transport.set_response(
        "GET",
        f"/api/v4/groups/{GROUP_ID}/projects?simple=true",
        200,
        [
            {"id": 1, "name": "a", "path_with_namespace": "infra/a"},
            {"id": 2, "name": "b", "path_with_namespace": "infra/b"},
            {"id": 42, "name": PROJECT_NAME, "path_with_namespace": "infra/manifests"},
        ],
    )
    return mock_transport
