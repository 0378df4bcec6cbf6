"""GitLab session bound to a single group and project.

Every operation that needs the project id looks the project up again by
name in the group's project list. Nothing is cached between calls, so
results always reflect the current state on the server.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from .client import (
    AlreadyExistsError,
    GitLabClient,
    GitLabError,
    NotFoundError,
    RenderError,
)
from .models import (
    Commit,
    CommitSummary,
    GitLabConfig,
    Project,
    ProjectHook,
    RepositoryFile,
    Tag,
)
from .render import ContentRenderer

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_DESCRIPTION = "kubernetes runtime resource manifests"


def _parse(model: type, data: Any, what: str):
    """Validate an API payload into a record, or a list of records."""
    try:
        if isinstance(data, list):
            return [model.model_validate(item) for item in data]
        return model.model_validate(data)
    except ValidationError as e:
        raise GitLabError(f"Unexpected {what} response from GitLab: {e}") from e


class GitLabSession:
    """Project, webhook, commit, file and tag operations for one project.

    Args:
        client: Configured GitLab API client.
        group_id: Numeric id of the group that owns the project.
        group_name: Group path, used to build the project path.
        project_name: Name of the target project within the group.
    """

    def __init__(
        self,
        client: GitLabClient,
        group_id: int,
        group_name: str,
        project_name: str,
    ):
        self.client = client
        self.group_id = group_id
        self.group_name = group_name
        self.project_name = project_name

    @classmethod
    def from_config(cls, config: GitLabConfig) -> GitLabSession:
        """Build a session from a loaded config.

        Raises:
            GitLabError: If the config is incomplete or the server URL is malformed.
        """
        if not config.is_configured():
            raise GitLabError(
                "GitLab not configured, missing: "
                + ", ".join(config.missing_fields())
                + ". Run 'gitkeeper config set' or set GITLAB_* environment variables."
            )
        client = GitLabClient(config.server, config.token, timeout=config.timeout)
        return cls(client, config.group_id, config.group_name, config.project_name)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> GitLabSession:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def project_path(self) -> str:
        """Full path of the project, ``<group>/<project>``."""
        return f"{self.group_name}/{self.project_name}"

    # --- Projects ---

    def create_project(
        self,
        description: str = DEFAULT_PROJECT_DESCRIPTION,
        visibility: str = "private",
    ) -> str:
        """Create the project in the configured group.

        Returns:
            Status message including the new project id.
        """
        try:
            data = self.client.create_project(
                name=self.project_name,
                namespace_id=self.group_id,
                visibility=visibility,
                description=description,
                merge_requests_enabled=True,
                snippets_enabled=True,
            )
        except GitLabError as e:
            raise GitLabError(
                f"create project: <{self.project_name}> error: {e.message}",
                status_code=e.status_code,
                response=e.response,
            ) from e

        project = _parse(Project, data, "project")
        logger.info("Created project %s (id %d)", self.project_name, project.id)
        return f"create project: <{self.project_name}> ok, project_id: {project.id}"

    def list_projects(self) -> list[Project]:
        """List the group's projects (simple view)."""
        data = self.client.list_group_projects(self.group_id, simple=True)
        return _parse(Project, data, "project list")

    def _find_project(self) -> Project | None:
        for project in self.list_projects():
            if project.name == self.project_name:
                return project
        return None

    def get_project(self) -> Project:
        """Find the configured project by exact name.

        Raises:
            NotFoundError: If no project in the group has that name.
        """
        project = self._find_project()
        if project is None:
            raise NotFoundError(f"project {self.project_name} not found")
        return project

    def get_project_id(self) -> int:
        """Resolve the configured project's numeric id."""
        project = self._find_project()
        if project is None:
            raise NotFoundError(f"project {self.project_name} not exists")
        return project.id

    def project_exists(self) -> bool:
        """Check whether the configured project exists in the group."""
        return self._find_project() is not None

    # --- Webhooks ---

    def list_project_hooks(self) -> list[ProjectHook]:
        """List webhooks of the configured project."""
        project_id = self.get_project_id()
        data = self.client.list_project_hooks(project_id)
        return _parse(ProjectHook, data, "project hook list")

    def project_hook_exists(self, url: str) -> bool:
        """Check for a webhook with exactly this URL."""
        return any(hook.url == url for hook in self.list_project_hooks())

    def _add_hook(self, url: str, **options: Any) -> str:
        project_id = self.get_project_id()

        if self.project_hook_exists(url):
            raise AlreadyExistsError(f"url: {url} already exists")

        try:
            data = self.client.add_project_hook(project_id, url, **options)
        except GitLabError as e:
            raise GitLabError(
                f"add project hook: <{self.project_name}> error: {e.message}",
                status_code=e.status_code,
                response=e.response,
            ) from e

        hook = _parse(ProjectHook, data, "project hook")
        logger.info("Added hook %d on %s -> %s", hook.id, self.project_name, url)
        return f"add project hook: <{self.project_name}> ok, hook_id: {hook.id}"

    def create_push_hook(
        self,
        url: str,
        branch: str,
        push_events: bool = True,
        enable_ssl_verification: bool = True,
    ) -> str:
        """Add a webhook fired on pushes to ``branch``.

        Raises:
            AlreadyExistsError: If a webhook with the same URL is already set.
        """
        return self._add_hook(
            url,
            push_events_branch_filter=branch,
            push_events=push_events,
            enable_ssl_verification=enable_ssl_verification,
        )

    def create_tag_hook(
        self,
        url: str,
        branch: str,
        tag_push_events: bool = True,
        enable_ssl_verification: bool = True,
    ) -> str:
        """Add a webhook fired on tag pushes.

        Raises:
            AlreadyExistsError: If a webhook with the same URL is already set.
        """
        return self._add_hook(
            url,
            push_events_branch_filter=branch,
            tag_push_events=tag_push_events,
            enable_ssl_verification=enable_ssl_verification,
        )

    # --- Commits ---

    def list_commits(self, branch: str) -> list[Commit]:
        """List commits on a branch, newest first."""
        project_id = self.get_project_id()
        data = self.client.list_commits(project_id, ref_name=branch)
        return _parse(Commit, data, "commit list")

    def list_commits_formatted(self, branch: str) -> list[CommitSummary]:
        """List commits on a branch as (short id, title, author) summaries."""
        return [CommitSummary.from_commit(commit) for commit in self.list_commits(branch)]

    def revert_commit(self, branch: str, commit_id: str) -> str:
        """Revert a commit on a branch."""
        project_id = self.get_project_id()
        try:
            data = self.client.revert_commit(project_id, commit_id, branch)
        except GitLabError as e:
            raise GitLabError(
                f"rollback commit {branch}/{commit_id} error: {e.message}",
                status_code=e.status_code,
                response=e.response,
            ) from e

        revert = _parse(Commit, data, "revert commit")
        logger.info("Reverted %s on %s as %s", commit_id, branch, revert.short_id)
        return f"rollback commit {branch}/{commit_id} ok"

    # --- Repository files ---

    def _write_file(
        self,
        action: str,
        branch: str,
        file_path: str,
        content: str,
        commit_message: str,
    ) -> str:
        write = self.client.create_file if action == "create" else self.client.update_file
        try:
            write(self.project_path, file_path, branch, content, commit_message)
        except GitLabError as e:
            raise GitLabError(
                f"{action} file: <{file_path}> error: {e.message}",
                status_code=e.status_code,
                response=e.response,
            ) from e

        logger.info("%s %s on %s/%s", action.capitalize(), file_path, self.project_path, branch)
        return f"{action} file: <{file_path}> ok"

    @staticmethod
    def _render(renderer: ContentRenderer) -> str:
        try:
            content = renderer.render()
        except Exception as e:
            raise RenderError(f"render content error: {e}") from e
        try:
            return content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise RenderError(f"render content error: output is not UTF-8: {e}") from e

    def create_file(self, branch: str, file_path: str, content: str, commit_message: str) -> str:
        """Create a repository file with literal content."""
        return self._write_file("create", branch, file_path, content, commit_message)

    def update_file(self, branch: str, file_path: str, content: str, commit_message: str) -> str:
        """Update a repository file with literal content."""
        return self._write_file("update", branch, file_path, content, commit_message)

    def create_file_from(
        self,
        branch: str,
        file_path: str,
        renderer: ContentRenderer,
        commit_message: str,
    ) -> str:
        """Create a repository file with content produced by ``renderer``.

        Raises:
            RenderError: If the renderer fails; no API call is made.
        """
        content = self._render(renderer)
        return self._write_file("create", branch, file_path, content, commit_message)

    def update_file_from(
        self,
        branch: str,
        file_path: str,
        renderer: ContentRenderer,
        commit_message: str,
    ) -> str:
        """Update a repository file with content produced by ``renderer``.

        Raises:
            RenderError: If the renderer fails; no API call is made.
        """
        content = self._render(renderer)
        return self._write_file("update", branch, file_path, content, commit_message)

    def get_raw_file(self, branch: str, file_path: str) -> str:
        """Fetch a file's content as text.

        Raises:
            GitLabError: If the fetch fails or the content is not UTF-8.
        """
        try:
            body = self.client.get_raw_file(self.project_path, file_path, ref=branch)
        except GitLabError as e:
            raise GitLabError(
                f"get file: <{file_path}> error: {e.message}",
                status_code=e.status_code,
                response=e.response,
            ) from e
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise GitLabError(f"get file: <{file_path}> error: content is not UTF-8: {e}") from e

    def get_file(self, branch: str, file_path: str) -> RepositoryFile:
        """Fetch a file's metadata and base64 content."""
        data = self.client.get_file(self.project_path, file_path, ref=branch)
        return _parse(RepositoryFile, data, "repository file")

    def file_exists(self, branch: str, file_path: str) -> bool:
        """Check whether a file can be read on a branch.

        Any API failure counts as "does not exist": a 404 and an auth or
        network error give the same answer.
        """
        try:
            self.client.get_file(self.project_path, file_path, ref=branch)
        except GitLabError as e:
            logger.debug("File %s on %s treated as missing: %s", file_path, branch, e)
            return False
        return True

    # --- Tags ---

    def create_tag(self, branch: str, tag_name: str, message: str) -> Tag:
        """Create a tag pointing at ``branch``."""
        project_id = self.get_project_id()
        data = self.client.create_tag(project_id, tag_name, ref=branch, message=message)
        tag = _parse(Tag, data, "tag")
        logger.info("Created tag %s at %s (%s)", tag.name, branch, tag.target)
        return tag
