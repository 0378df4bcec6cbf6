"""Tag commands."""

from __future__ import annotations

from typing import Annotated

import typer

from ..context import session_for
from ..output import print_success

app = typer.Typer(help="Create tags")


@app.command("create")
def create_tag(
    ctx: typer.Context,
    branch: Annotated[str, typer.Argument(help="Branch (or ref) to tag")],
    name: Annotated[str, typer.Argument(help="Tag name")],
    message: Annotated[str, typer.Option("--message", "-m", help="Tag message")] = "",
):
    """Create a tag at the head of a branch."""
    with session_for(ctx) as session:
        tag = session.create_tag(branch, name, message)
    print_success(f"create tag: <{tag.name}> ok, target: {tag.target or branch}")
