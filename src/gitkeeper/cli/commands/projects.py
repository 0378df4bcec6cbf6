"""Project commands."""

from __future__ import annotations

from typing import Annotated

import typer

from ...gitlab.session import DEFAULT_PROJECT_DESCRIPTION
from ..context import session_for
from ..output import console, create_table, print_info, print_success

app = typer.Typer(help="Create and inspect the project")


@app.command("create")
def create_project(
    ctx: typer.Context,
    description: Annotated[
        str,
        typer.Option("--description", "-d", help="Project description"),
    ] = DEFAULT_PROJECT_DESCRIPTION,
    visibility: Annotated[
        str,
        typer.Option("--visibility", help="private, internal or public"),
    ] = "private",
):
    """Create the configured project in its group."""
    with session_for(ctx) as session:
        print_success(session.create_project(description=description, visibility=visibility))


@app.command("list")
def list_projects(ctx: typer.Context):
    """List projects in the configured group."""
    with session_for(ctx) as session:
        projects = session.list_projects()

    if not projects:
        print_info("No projects found")
        return

    table = create_table(
        "Projects",
        [("ID", "dim"), ("Name", "cyan"), ("Path", ""), ("Default branch", "green")],
    )
    for project in projects:
        table.add_row(
            str(project.id),
            project.name,
            project.path_with_namespace,
            project.default_branch or "-",
        )
    console.print(table)


@app.command("show")
def show_project(ctx: typer.Context):
    """Show the configured project."""
    with session_for(ctx) as session:
        project = session.get_project()

    console.print(f"[bold]{project.name}[/bold] (id {project.id})")
    if project.path_with_namespace:
        console.print(f"  path: {project.path_with_namespace}")
    if project.web_url:
        console.print(f"  url: {project.web_url}")
    console.print(f"  default branch: {project.default_branch or '-'}")


@app.command("exists")
def project_exists(ctx: typer.Context):
    """Exit 0 if the configured project exists, 1 otherwise."""
    with session_for(ctx) as session:
        exists = session.project_exists()
        name = session.project_name

    if exists:
        print_success(f"project name {name} already exists")
    else:
        print_info(f"project {name} not found")
        raise typer.Exit(1)
