"""Main CLI application using Typer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from .commands import commits, config, files, hooks, projects, tags
from .context import CliState
from .output import console

app = typer.Typer(
    name="gitkeeper",
    help="Manage a GitLab project's hooks, commits, files and tags",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register command groups
app.add_typer(config.app, name="config")
app.add_typer(projects.app, name="project")
app.add_typer(hooks.app, name="hook")
app.add_typer(commits.app, name="commit")
app.add_typer(files.app, name="file")
app.add_typer(tags.app, name="tag")


@app.callback()
def main(
    ctx: typer.Context,
    project: Annotated[
        Optional[str],
        typer.Option("--project", "-p", help="Project name (overrides config)"),
    ] = None,
    group: Annotated[
        Optional[str],
        typer.Option("--group", "-g", help="Group path (overrides config)"),
    ] = None,
    group_id: Annotated[
        Optional[int],
        typer.Option("--group-id", help="Group id (overrides config)"),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", help="Path to a gitlab.yaml config file"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log API requests"),
    ] = False,
):
    """Work with one GitLab project in one group.

    Examples:
        gitkeeper project exists
        gitkeeper hook add https://ci.example.com/hook --branch main
        gitkeeper commit list main
        gitkeeper file put main deploy.yaml --from deploy.yaml -m "update deploy"
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    ctx.obj = CliState(
        config_path=config_path,
        project=project,
        group=group,
        group_id=group_id,
    )


@app.command("version")
def version():
    """Show version information."""
    from .. import __version__

    console.print(f"gitkeeper {__version__}")


def run():
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
