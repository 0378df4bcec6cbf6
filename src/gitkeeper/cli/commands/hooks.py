"""Webhook commands."""

from __future__ import annotations

from typing import Annotated

import typer

from ..context import session_for
from ..output import console, create_table, print_info, print_success

app = typer.Typer(help="Manage project webhooks")


@app.command("list")
def list_hooks(ctx: typer.Context):
    """List the project's webhooks."""
    with session_for(ctx) as session:
        hooks = session.list_project_hooks()

    if not hooks:
        print_info("No webhooks configured")
        return

    table = create_table(
        "Webhooks",
        [("ID", "dim"), ("URL", "cyan"), ("Events", ""), ("Branch filter", ""), ("SSL", "")],
    )
    for hook in hooks:
        events = [name for name, on in (("push", hook.push_events), ("tag", hook.tag_push_events)) if on]
        table.add_row(
            str(hook.id),
            hook.url,
            ", ".join(events) or "-",
            hook.push_events_branch_filter or "-",
            "yes" if hook.enable_ssl_verification else "no",
        )
    console.print(table)


@app.command("add")
def add_hook(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="Webhook URL")],
    branch: Annotated[
        str,
        typer.Option("--branch", "-b", help="Push events branch filter"),
    ] = "main",
    tag: Annotated[
        bool,
        typer.Option("--tag", help="Trigger on tag pushes instead of pushes"),
    ] = False,
    ssl_verify: Annotated[
        bool,
        typer.Option("--ssl-verify/--no-ssl-verify", help="Verify the receiver's certificate"),
    ] = True,
):
    """Add a webhook, refusing duplicates of the same URL."""
    with session_for(ctx) as session:
        if tag:
            message = session.create_tag_hook(url, branch, enable_ssl_verification=ssl_verify)
        else:
            message = session.create_push_hook(url, branch, enable_ssl_verification=ssl_verify)
    print_success(message)


@app.command("exists")
def hook_exists(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="Webhook URL (exact match)")],
):
    """Exit 0 if a webhook with this exact URL exists, 1 otherwise."""
    with session_for(ctx) as session:
        exists = session.project_hook_exists(url)
        name = session.project_name

    if exists:
        print_success(f"project {name} hook already exists")
    else:
        print_info(f"no hook for {url}")
        raise typer.Exit(1)
