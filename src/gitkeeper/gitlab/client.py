"""GitLab API client for project, webhook, commit, file and tag operations.

Supports GitLab self-hosted and GitLab.com (API v4).
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)


class GitLabError(Exception):
    """Raised when a GitLab API request fails."""

    def __init__(self, message: str, status_code: int = 0, response: str = ""):
        self.message = message
        self.status_code = status_code
        self.response = response
        super().__init__(message)


class NotFoundError(GitLabError):
    """Raised when a looked-up project or webhook does not exist."""


class AlreadyExistsError(GitLabError):
    """Raised when creating something whose key is already taken."""


class RenderError(GitLabError):
    """Raised when a content renderer fails to produce file content."""


def encode_path(value: str | int) -> str:
    """URL-encode a project path or file path for use as a path segment."""
    return quote(str(value), safe="")


class GitLabClient:
    """Client for GitLab REST API v4.

    Uses a Personal Access Token sent as ``PRIVATE-TOKEN`` by default, or
    as an OAuth bearer token when ``auth="bearer"``.
    """

    def __init__(
        self,
        server: str,
        token: str,
        timeout: float = 30.0,
        auth: str = "private-token",
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = server.rstrip("/")
        self.token = token

        try:
            url = httpx.URL(self.base_url)
        except httpx.InvalidURL as e:
            raise GitLabError(f"Invalid GitLab server URL: {server!r}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise GitLabError(f"Invalid GitLab server URL: {server!r}")

        if auth == "bearer":
            auth_header = {"Authorization": f"Bearer {token}"}
        elif auth == "private-token":
            auth_header = {"PRIVATE-TOKEN": token}
        else:
            raise GitLabError(f"Unknown auth scheme: {auth!r}")

        self._client = httpx.Client(
            base_url=f"{self.base_url}/api/v4",
            headers={
                **auth_header,
                "Accept": "application/json",
            },
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    def _send(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send an authenticated request and return the raw response.

        Raises:
            GitLabError: On HTTP errors or connection failures.
        """
        logger.debug("%s %s", method, endpoint)
        try:
            response = self._client.request(
                method,
                endpoint,
                params=params,
                json=json,
            )

            if response.status_code >= 400:
                detail = ""
                try:
                    body = response.json()
                    if isinstance(body, dict):
                        detail = body.get("message", body.get("error", str(body)))
                    else:
                        detail = str(body)
                except ValueError:
                    detail = response.text[:200]

                raise GitLabError(
                    f"GitLab API error: {response.status_code} {detail}",
                    status_code=response.status_code,
                    response=response.text[:500],
                )

            return response

        except httpx.ConnectError as e:
            raise GitLabError(f"Cannot connect to GitLab: {e}") from e
        except httpx.TimeoutException as e:
            raise GitLabError(f"Request timed out: {method} {endpoint}") from e
        except GitLabError:
            raise
        except Exception as e:
            raise GitLabError(f"Unexpected error: {e}") from e

    def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Make an authenticated request to the GitLab API.

        Returns parsed JSON response (dict or list).
        """
        response = self._send(method, endpoint, params=params, json=json)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise GitLabError(
                f"Invalid JSON in response: {method} {endpoint}",
                status_code=response.status_code,
                response=response.text[:500],
            ) from e

    # --- Groups / projects ---

    def list_group_projects(self, group_id: int | str, simple: bool = True) -> list[dict]:
        """List projects in a group.

        GET /api/v4/groups/{id}/projects?simple=true

        Only the first page is returned.
        """
        params = {"simple": "true" if simple else "false"}
        return self._request("GET", f"/groups/{encode_path(group_id)}/projects", params=params)

    def create_project(
        self,
        name: str,
        namespace_id: int | None = None,
        visibility: str = "private",
        description: str = "",
        merge_requests_enabled: bool | None = None,
        snippets_enabled: bool | None = None,
    ) -> dict:
        """Create a new project.

        POST /api/v4/projects

        Args:
            name: Project name.
            namespace_id: Namespace/group ID (optional, defaults to user namespace).
            visibility: Project visibility (private, internal, public).
            description: Project description.
            merge_requests_enabled: Enable merge requests (server default if None).
            snippets_enabled: Enable snippets (server default if None).

        Returns:
            Created project dict.
        """
        data: dict[str, Any] = {
            "name": name,
            "visibility": visibility,
        }
        if namespace_id is not None:
            data["namespace_id"] = namespace_id
        if description:
            data["description"] = description
        if merge_requests_enabled is not None:
            data["merge_requests_enabled"] = merge_requests_enabled
        if snippets_enabled is not None:
            data["snippets_enabled"] = snippets_enabled

        return self._request("POST", "/projects", json=data)

    # --- Webhooks ---

    def list_project_hooks(self, project_id: int | str) -> list[dict]:
        """List a project's webhooks.

        GET /api/v4/projects/{id}/hooks
        """
        return self._request("GET", f"/projects/{encode_path(project_id)}/hooks")

    def add_project_hook(
        self,
        project_id: int | str,
        url: str,
        push_events: bool | None = None,
        tag_push_events: bool | None = None,
        push_events_branch_filter: str | None = None,
        enable_ssl_verification: bool | None = None,
    ) -> dict:
        """Add a webhook to a project.

        POST /api/v4/projects/{id}/hooks

        Options left as None are not sent and take the server default.
        """
        data: dict[str, Any] = {"url": url}
        if push_events is not None:
            data["push_events"] = push_events
        if tag_push_events is not None:
            data["tag_push_events"] = tag_push_events
        if push_events_branch_filter is not None:
            data["push_events_branch_filter"] = push_events_branch_filter
        if enable_ssl_verification is not None:
            data["enable_ssl_verification"] = enable_ssl_verification

        return self._request("POST", f"/projects/{encode_path(project_id)}/hooks", json=data)

    # --- Commits ---

    def list_commits(self, project_id: int | str, ref_name: str | None = None) -> list[dict]:
        """List repository commits.

        GET /api/v4/projects/{id}/repository/commits?ref_name=...
        """
        params = {"ref_name": ref_name} if ref_name else None
        return self._request(
            "GET",
            f"/projects/{encode_path(project_id)}/repository/commits",
            params=params,
        )

    def revert_commit(self, project_id: int | str, sha: str, branch: str) -> dict:
        """Revert a commit in a given branch.

        POST /api/v4/projects/{id}/repository/commits/{sha}/revert
        """
        return self._request(
            "POST",
            f"/projects/{encode_path(project_id)}/repository/commits/{encode_path(sha)}/revert",
            json={"branch": branch},
        )

    # --- Repository files ---

    def _file_endpoint(self, project_id: int | str, file_path: str) -> str:
        return f"/projects/{encode_path(project_id)}/repository/files/{encode_path(file_path)}"

    def get_file(self, project_id: int | str, file_path: str, ref: str) -> dict:
        """Get file metadata and base64 content.

        GET /api/v4/projects/{id}/repository/files/{file_path}?ref=...
        """
        return self._request("GET", self._file_endpoint(project_id, file_path), params={"ref": ref})

    def get_raw_file(self, project_id: int | str, file_path: str, ref: str) -> bytes:
        """Get raw file content.

        GET /api/v4/projects/{id}/repository/files/{file_path}/raw?ref=...
        """
        response = self._send(
            "GET",
            f"{self._file_endpoint(project_id, file_path)}/raw",
            params={"ref": ref},
        )
        return response.content

    def create_file(
        self,
        project_id: int | str,
        file_path: str,
        branch: str,
        content: str,
        commit_message: str,
    ) -> dict:
        """Create a new repository file.

        POST /api/v4/projects/{id}/repository/files/{file_path}
        """
        return self._request(
            "POST",
            self._file_endpoint(project_id, file_path),
            json={"branch": branch, "content": content, "commit_message": commit_message},
        )

    def update_file(
        self,
        project_id: int | str,
        file_path: str,
        branch: str,
        content: str,
        commit_message: str,
    ) -> dict:
        """Update an existing repository file.

        PUT /api/v4/projects/{id}/repository/files/{file_path}
        """
        return self._request(
            "PUT",
            self._file_endpoint(project_id, file_path),
            json={"branch": branch, "content": content, "commit_message": commit_message},
        )

    # --- Tags ---

    def create_tag(
        self,
        project_id: int | str,
        tag_name: str,
        ref: str,
        message: str = "",
    ) -> dict:
        """Create a new tag.

        POST /api/v4/projects/{id}/repository/tags
        """
        data: dict[str, Any] = {"tag_name": tag_name, "ref": ref}
        if message:
            data["message"] = message
        return self._request(
            "POST",
            f"/projects/{encode_path(project_id)}/repository/tags",
            json=data,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()
