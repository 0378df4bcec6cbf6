"""Shared CLI state: config loading, session creation, error reporting."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import typer

from ..gitlab import GitLabConfig, GitLabError, GitLabSession
from .output import print_error


@dataclass
class CliState:
    """Options given to the top-level command, stored on ``ctx.obj``."""

    config_path: Path | None = None
    project: str | None = None
    group: str | None = None
    group_id: int | None = None


def load_config(ctx: typer.Context) -> GitLabConfig:
    """Load config and apply command-line overrides."""
    state: CliState = ctx.obj or CliState()
    config = GitLabConfig.load(config_path=state.config_path)
    if state.project:
        config.project_name = state.project
    if state.group:
        config.group_name = state.group
    if state.group_id is not None:
        config.group_id = state.group_id
    return config


def open_session(ctx: typer.Context) -> GitLabSession:
    """Create a session for the current command, exiting on bad config."""
    try:
        return GitLabSession.from_config(load_config(ctx))
    except GitLabError as e:
        print_error(e.message)
        raise typer.Exit(1)


@contextmanager
def session_for(ctx: typer.Context) -> Iterator[GitLabSession]:
    """Yield an open session; GitLab errors are printed and exit with code 1."""
    session = open_session(ctx)
    try:
        yield session
    except GitLabError as e:
        print_error(e.message)
        raise typer.Exit(1)
    finally:
        session.close()
