"""Tests for GitLabClient HTTP communication."""

from __future__ import annotations

import json

import httpx
import pytest

from gitkeeper.gitlab import GitLabClient, GitLabError
from gitkeeper.gitlab.client import encode_path


class TestClientInit:
    def test_private_token_header(self, mock_transport, client):
        mock_transport.set_response("GET", "/api/v4/groups/7/projects?simple=true", 200, [])

        client.list_group_projects(7)

        request = mock_transport.requests[0]
        assert request.headers["PRIVATE-TOKEN"] == "glpat-test"
        assert "Authorization" not in request.headers

    def test_bearer_auth(self, mock_transport):
        mock_transport.set_response("GET", "/api/v4/groups/7/projects?simple=true", 200, [])
        gl = GitLabClient(
            "https://gitlab.example.com/",
            "oauth-token",
            auth="bearer",
            transport=mock_transport,
        )

        gl.list_group_projects(7)

        request = mock_transport.requests[0]
        assert request.headers["Authorization"] == "Bearer oauth-token"
        assert "PRIVATE-TOKEN" not in request.headers
        gl.close()

    def test_trailing_slash_stripped(self):
        gl = GitLabClient("https://gitlab.example.com/", "t")
        assert gl.base_url == "https://gitlab.example.com"
        gl.close()

    @pytest.mark.parametrize("server", ["gitlab.example.com", "ftp://gitlab.example.com", "http://", ""])
    def test_malformed_url_rejected(self, server):
        with pytest.raises(GitLabError, match="Invalid GitLab server URL"):
            GitLabClient(server, "t")

    def test_unknown_auth_scheme(self):
        with pytest.raises(GitLabError, match="Unknown auth scheme"):
            GitLabClient("https://gitlab.example.com", "t", auth="basic")


class TestClientErrors:
    def test_http_error_uses_message_field(self, mock_transport, client):
        mock_transport.set_response(
            "GET", "/api/v4/groups/7/projects?simple=true", 403, {"message": "403 Forbidden"}
        )

        with pytest.raises(GitLabError) as exc_info:
            client.list_group_projects(7)

        assert exc_info.value.status_code == 403
        assert "403 Forbidden" in exc_info.value.message

    def test_http_error_uses_error_field(self, mock_transport, client):
        mock_transport.set_response(
            "GET", "/api/v4/groups/7/projects?simple=true", 401, {"error": "invalid_token"}
        )

        with pytest.raises(GitLabError) as exc_info:
            client.list_group_projects(7)

        assert exc_info.value.status_code == 401
        assert "invalid_token" in exc_info.value.message

    def test_http_error_with_text_body(self, mock_transport, client):
        mock_transport.set_response(
            "GET", "/api/v4/groups/7/projects?simple=true", 502, b"Bad Gateway"
        )

        with pytest.raises(GitLabError) as exc_info:
            client.list_group_projects(7)

        assert exc_info.value.status_code == 502
        assert "Bad Gateway" in exc_info.value.message

    def test_connect_error(self, mock_transport, client):
        mock_transport.set_error(
            "GET",
            "/api/v4/groups/7/projects?simple=true",
            httpx.ConnectError("connection refused"),
        )

        with pytest.raises(GitLabError, match="Cannot connect to GitLab") as exc_info:
            client.list_group_projects(7)

        assert exc_info.value.status_code == 0
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_timeout(self, mock_transport, client):
        mock_transport.set_error(
            "GET",
            "/api/v4/groups/7/projects?simple=true",
            httpx.ReadTimeout("slow"),
        )

        with pytest.raises(GitLabError, match="Request timed out"):
            client.list_group_projects(7)

    def test_invalid_json(self, mock_transport, client):
        mock_transport.set_response(
            "GET", "/api/v4/groups/7/projects?simple=true", 200, b"<html>login</html>"
        )

        with pytest.raises(GitLabError, match="Invalid JSON"):
            client.list_group_projects(7)


class TestClientEndpoints:
    def test_create_project_body(self, mock_transport, client):
        mock_transport.set_response("POST", "/api/v4/projects", 201, {"id": 42, "name": "manifests"})

        result = client.create_project(
            name="manifests",
            namespace_id=7,
            description="desc",
            merge_requests_enabled=True,
            snippets_enabled=True,
        )

        assert result["id"] == 42
        body = json.loads(mock_transport.requests[0].content)
        assert body == {
            "name": "manifests",
            "visibility": "private",
            "namespace_id": 7,
            "description": "desc",
            "merge_requests_enabled": True,
            "snippets_enabled": True,
        }

    def test_add_project_hook_omits_unset_options(self, mock_transport, client):
        mock_transport.set_response("POST", "/api/v4/projects/42/hooks", 201, {"id": 9, "url": "u"})

        client.add_project_hook(42, "https://ci.example.com/hook", tag_push_events=True)

        body = json.loads(mock_transport.requests[0].content)
        assert body == {"url": "https://ci.example.com/hook", "tag_push_events": True}

    def test_list_commits_ref_name(self, mock_transport, client):
        mock_transport.set_response(
            "GET", "/api/v4/projects/42/repository/commits?ref_name=main", 200, []
        )

        assert client.list_commits(42, ref_name="main") == []

    def test_file_paths_are_encoded(self, mock_transport, client):
        mock_transport.set_response(
            "PUT",
            "/api/v4/projects/infra%2Fmanifests/repository/files/apps%2Fweb%2Fdeploy.yaml",
            200,
            {"file_path": "apps/web/deploy.yaml", "branch": "main"},
        )

        client.update_file("infra/manifests", "apps/web/deploy.yaml", "main", "kind: Deployment\n", "msg")

        body = json.loads(mock_transport.requests[0].content)
        assert body == {"branch": "main", "content": "kind: Deployment\n", "commit_message": "msg"}

    def test_get_raw_file_returns_bytes(self, mock_transport, client):
        mock_transport.set_response(
            "GET",
            "/api/v4/projects/infra%2Fmanifests/repository/files/values.yaml/raw?ref=main",
            200,
            b"replicas: 3\n",
        )

        assert client.get_raw_file("infra/manifests", "values.yaml", ref="main") == b"replicas: 3\n"

    def test_create_tag_without_message(self, mock_transport, client):
        mock_transport.set_response(
            "POST", "/api/v4/projects/42/repository/tags", 201, {"name": "v1", "target": "abc"}
        )

        client.create_tag(42, "v1", ref="main")

        body = json.loads(mock_transport.requests[0].content)
        assert body == {"tag_name": "v1", "ref": "main"}

    def test_empty_body_returns_empty_dict(self, mock_transport, client):
        mock_transport.set_response("POST", "/api/v4/projects/42/repository/commits/abc/revert", 201, b"")

        assert client.revert_commit(42, "abc", branch="main") == {}


def test_encode_path():
    assert encode_path("infra/manifests") == "infra%2Fmanifests"
    assert encode_path(42) == "42"
    assert encode_path("a b.yaml") == "a%20b.yaml"
