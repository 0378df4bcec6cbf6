"""gitkeeper: manage a GitLab project's hooks, commits, files and tags.

Usage:
    # CLI
    $ gitkeeper project list
    $ gitkeeper hook add https://ci.example.com/hook --branch main

    # Python API
    from gitkeeper import GitLabConfig, GitLabSession

    with GitLabSession.from_config(GitLabConfig.load()) as session:
        print(session.list_commits_formatted("main"))
"""

try:
    from importlib.metadata import version as _get_version

    __version__ = _get_version("gitkeeper")
except Exception:
    __version__ = "0.0.0-dev"


# Lazy imports keep `gitkeeper --help` fast
def __getattr__(name: str):
    """Lazy import for main classes."""
    if name == "GitLabSession":
        from .gitlab.session import GitLabSession

        return GitLabSession
    if name == "GitLabConfig":
        from .gitlab.models import GitLabConfig

        return GitLabConfig
    if name == "GitLabError":
        from .gitlab.client import GitLabError

        return GitLabError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "__version__",
    "GitLabSession",
    "GitLabConfig",
    "GitLabError",
]
