"""Data models for GitLab integration."""

from __future__ import annotations

import base64
import binascii
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict

from .client import GitLabError


@dataclass
class GitLabConfig:
    """GitLab connection and project context configuration.

    Credentials are stored in ~/.gitkeeper/gitlab.yaml
    with restricted file permissions (600).
    """

    server: str = ""
    token: str = ""  # Personal Access Token
    group_id: int | None = None
    group_name: str = ""
    project_name: str = ""
    timeout: float = 30.0  # seconds per request

    CONFIG_FILE: Path = field(
        default_factory=lambda: Path.home() / ".gitkeeper" / "gitlab.yaml",
        repr=False,
    )

    def is_configured(self) -> bool:
        """Check if the server, credentials and project context are all set."""
        return bool(
            self.server
            and self.token
            and self.group_id is not None
            and self.group_name
            and self.project_name
        )

    def missing_fields(self) -> list[str]:
        """Names of the settings still needed for is_configured()."""
        missing = []
        if not self.server:
            missing.append("server")
        if not self.token:
            missing.append("token")
        if self.group_id is None:
            missing.append("group_id")
        if not self.group_name:
            missing.append("group_name")
        if not self.project_name:
            missing.append("project_name")
        return missing

    @classmethod
    def load(cls, config_path: Path | None = None, env: bool = True) -> GitLabConfig:
        """Load GitLab config from file and environment variables.

        Priority (highest wins):
          1. Environment variables (GITLAB_SERVER, GITLAB_TOKEN, GITLAB_GROUP_ID,
             GITLAB_GROUP_NAME, GITLAB_PROJECT, GITLAB_TIMEOUT), unless env=False
          2. Config file (~/.gitkeeper/gitlab.yaml or custom path)
          3. Defaults

        Raises:
            GitLabError: If GITLAB_GROUP_ID or GITLAB_TIMEOUT is not a number.
        """
        config = cls()
        file_path = config_path or config.CONFIG_FILE

        # Load from file if exists
        if file_path.exists():
            try:
                with open(file_path) as f:
                    data = yaml.safe_load(f) or {}

                if isinstance(data, dict):
                    config.server = data.get("server", "")
                    config.token = data.get("token", "")
                    if data.get("group_id") is not None:
                        config.group_id = int(data["group_id"])
                    config.group_name = data.get("group_name", "")
                    config.project_name = data.get("project_name", "")
                    config.timeout = float(data.get("timeout", config.timeout))
            except (yaml.YAMLError, OSError, ValueError):
                pass

        if not env:
            return config

        # Environment variables override file config
        config.server = os.environ.get("GITLAB_SERVER", config.server)
        config.token = os.environ.get("GITLAB_TOKEN", config.token)
        config.group_name = os.environ.get("GITLAB_GROUP_NAME", config.group_name)
        config.project_name = os.environ.get("GITLAB_PROJECT", config.project_name)

        try:
            if env_group := os.environ.get("GITLAB_GROUP_ID"):
                config.group_id = int(env_group)
        except ValueError as e:
            raise GitLabError(f"GITLAB_GROUP_ID must be an integer, got {env_group!r}") from e
        try:
            if env_timeout := os.environ.get("GITLAB_TIMEOUT"):
                config.timeout = float(env_timeout)
        except ValueError as e:
            raise GitLabError(f"GITLAB_TIMEOUT must be a number, got {env_timeout!r}") from e

        return config

    def save(self, config_path: Path | None = None) -> None:
        """Save config to secure file with restricted permissions."""
        file_path = config_path or self.CONFIG_FILE
        file_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "server": self.server,
            "token": self.token,
            "group_id": self.group_id,
            "group_name": self.group_name,
            "project_name": self.project_name,
            "timeout": self.timeout,
        }

        with open(file_path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False)

        # Set file permissions to owner read/write only (600)
        file_path.chmod(0o600)


class GitLabRecord(BaseModel):
    """Base for API records. Unknown response fields are kept."""

    model_config = ConfigDict(extra="allow")


class Project(GitLabRecord):
    id: int
    name: str
    path: str = ""
    path_with_namespace: str = ""
    web_url: str = ""
    default_branch: str | None = None


class ProjectHook(GitLabRecord):
    id: int
    url: str
    push_events: bool = False
    tag_push_events: bool = False
    push_events_branch_filter: str | None = None
    enable_ssl_verification: bool = True


class Commit(GitLabRecord):
    id: str
    short_id: str
    title: str = ""
    author_name: str = ""
    message: str = ""


class CommitSummary(BaseModel):
    """Short view of a commit: short id, title and author."""

    commit_id: str
    commit_message: str
    commit_author: str

    @classmethod
    def from_commit(cls, commit: Commit) -> CommitSummary:
        return cls(
            commit_id=commit.short_id,
            commit_message=commit.title,
            commit_author=commit.author_name,
        )


class Tag(GitLabRecord):
    name: str
    message: str | None = None
    target: str = ""


class RepositoryFile(GitLabRecord):
    file_path: str
    branch: str = ""
    file_name: str = ""
    size: int = 0
    ref: str = ""
    encoding: str = ""
    content: str = ""
    blob_id: str = ""
    last_commit_id: str = ""

    @property
    def text(self) -> str:
        """Decoded file content (metadata fetches return base64)."""
        if self.encoding != "base64":
            return self.content
        try:
            return base64.b64decode(self.content).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ValueError(f"Cannot decode content of {self.file_path}: {e}") from e
