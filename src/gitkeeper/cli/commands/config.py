"""Configuration commands."""

from __future__ import annotations

from typing import Annotated

import typer

from ...gitlab import GitLabConfig, GitLabError
from ..context import CliState, load_config
from ..output import console, print_error, print_info, print_success, print_warning

app = typer.Typer(help="Manage GitLab connection settings")

# CLI key -> GitLabConfig attribute
KEYS = {
    "server": "server",
    "token": "token",
    "group_id": "group_id",
    "group": "group_name",
    "project": "project_name",
    "timeout": "timeout",
}


def _mask(token: str) -> str:
    if not token:
        return "(not set)"
    if len(token) <= 8:
        return "****"
    return f"{token[:4]}...{token[-4:]}"


@app.command("show")
def show_config(ctx: typer.Context):
    """Show current configuration."""
    try:
        config = load_config(ctx)
    except GitLabError as e:
        print_error(e.message)
        raise typer.Exit(1)
    state: CliState = ctx.obj or CliState()

    console.print("[cyan]Current Configuration[/cyan]\n")
    console.print(f"  server: {config.server or '(not set)'}")
    console.print(f"  token: {_mask(config.token)}")
    console.print(f"  group_id: {config.group_id if config.group_id is not None else '(not set)'}")
    console.print(f"  group: {config.group_name or '(not set)'}")
    console.print(f"  project: {config.project_name or '(not set)'}")
    console.print(f"  timeout: {config.timeout}s")

    config_file = state.config_path or config.CONFIG_FILE
    console.print()
    console.print(f"[bold]Config file:[/bold] {config_file}")
    if not config.is_configured():
        print_warning(f"Missing: {', '.join(config.missing_fields())}")
    elif config_file.exists():
        print_info("Config file exists")
    else:
        print_info("No config file (using environment)")


@app.command("set")
def set_config(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Config key (server, token, group_id, group, project, timeout)")],
    value: Annotated[str, typer.Argument(help="Config value")],
):
    """Set a configuration value and save it to the config file."""
    if key not in KEYS:
        print_error(f"Unknown key: {key}")
        console.print(f"Available: {', '.join(KEYS)}")
        raise typer.Exit(1)

    state: CliState = ctx.obj or CliState()
    # File values only: env vars and --project/--group overrides are not saved
    config = GitLabConfig.load(config_path=state.config_path, env=False)
    attr = KEYS[key]

    try:
        if attr == "group_id":
            setattr(config, attr, int(value))
        elif attr == "timeout":
            setattr(config, attr, float(value))
        else:
            setattr(config, attr, value)
    except ValueError:
        print_error(f"Invalid value for {key}: {value}")
        raise typer.Exit(1)

    config.save(config_path=state.config_path)
    shown = _mask(value) if key == "token" else value
    print_success(f"Set {key} = {shown}")
