"""Commit commands."""

from __future__ import annotations

from typing import Annotated

import typer

from ..context import session_for
from ..output import console, create_table, print_info, print_success

app = typer.Typer(help="List and revert commits")


@app.command("list")
def list_commits(
    ctx: typer.Context,
    branch: Annotated[str, typer.Argument(help="Branch name")],
    full: Annotated[
        bool,
        typer.Option("--full", help="Show full SHAs and commit dates"),
    ] = False,
):
    """List commits on a branch, newest first."""
    with session_for(ctx) as session:
        if full:
            commits = session.list_commits(branch)
        else:
            summaries = session.list_commits_formatted(branch)

    if full:
        if not commits:
            print_info(f"No commits on {branch}")
            return
        table = create_table(f"Commits on {branch}", [("SHA", "dim"), ("Title", ""), ("Author", "cyan"), ("Date", "dim")])
        for commit in commits:
            table.add_row(commit.id, commit.title, commit.author_name, str(getattr(commit, "created_at", "") or ""))
    else:
        if not summaries:
            print_info(f"No commits on {branch}")
            return
        table = create_table(f"Commits on {branch}", [("ID", "dim"), ("Title", ""), ("Author", "cyan")])
        for summary in summaries:
            table.add_row(summary.commit_id, summary.commit_message, summary.commit_author)
    console.print(table)


@app.command("revert")
def revert_commit(
    ctx: typer.Context,
    branch: Annotated[str, typer.Argument(help="Branch to revert on")],
    commit_id: Annotated[str, typer.Argument(help="Commit SHA or short id")],
):
    """Revert a commit on a branch."""
    with session_for(ctx) as session:
        print_success(session.revert_commit(branch, commit_id))
