"""Repository file commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer

from ...gitlab.render import TextRenderer
from ..context import session_for
from ..output import console, print_error, print_info, print_success

app = typer.Typer(help="Read and write repository files")


@app.command("get")
def get_file(
    ctx: typer.Context,
    branch: Annotated[str, typer.Argument(help="Branch name")],
    path: Annotated[str, typer.Argument(help="File path in the repository")],
):
    """Print a file's raw content."""
    with session_for(ctx) as session:
        content = session.get_raw_file(branch, path)
    console.print(content, end="", markup=False, highlight=False)


@app.command("exists")
def file_exists(
    ctx: typer.Context,
    branch: Annotated[str, typer.Argument(help="Branch name")],
    path: Annotated[str, typer.Argument(help="File path in the repository")],
):
    """Exit 0 if the file can be read on the branch, 1 otherwise."""
    with session_for(ctx) as session:
        exists = session.file_exists(branch, path)

    if exists:
        print_success(f"{path} exists on {branch}")
    else:
        print_info(f"{path} not found on {branch}")
        raise typer.Exit(1)


@app.command("put")
def put_file(
    ctx: typer.Context,
    branch: Annotated[str, typer.Argument(help="Branch name")],
    path: Annotated[str, typer.Argument(help="File path in the repository")],
    source: Annotated[
        Optional[Path],
        typer.Option("--from", "-f", help="Local file to upload"),
    ] = None,
    content: Annotated[
        Optional[str],
        typer.Option("--content", "-c", help="Literal file content"),
    ] = None,
    message: Annotated[str, typer.Option("--message", "-m", help="Commit message")] = "",
    update: Annotated[
        bool,
        typer.Option("--update", "-u", help="Update an existing file instead of creating it"),
    ] = False,
):
    """Create or update a repository file."""
    if (source is None) == (content is None):
        print_error("Give exactly one of --from or --content")
        raise typer.Exit(1)

    commit_message = message or f"{'update' if update else 'create'} {path}"

    with session_for(ctx) as session:
        if source is not None:
            try:
                renderer = TextRenderer(source.read_text())
            except OSError as e:
                print_error(f"Cannot read {source}: {e}")
                raise typer.Exit(1)
            write = session.update_file_from if update else session.create_file_from
            result = write(branch, path, renderer, commit_message)
        else:
            write = session.update_file if update else session.create_file
            result = write(branch, path, content, commit_message)
    print_success(result)
