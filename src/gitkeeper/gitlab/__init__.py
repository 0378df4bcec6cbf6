"""GitLab integration: projects, webhooks, commits, files and tags."""

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
from .render import ContentRenderer, TextRenderer, YamlRenderer
from .session import GitLabSession

__all__ = [
    "AlreadyExistsError",
    "Commit",
    "CommitSummary",
    "ContentRenderer",
    "GitLabClient",
    "GitLabConfig",
    "GitLabError",
    "GitLabSession",
    "NotFoundError",
    "Project",
    "ProjectHook",
    "RenderError",
    "RepositoryFile",
    "Tag",
    "TextRenderer",
    "YamlRenderer",
]
