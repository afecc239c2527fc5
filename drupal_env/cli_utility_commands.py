"""Utility CLI commands - theme, requirements, xdebug-phpstorm."""
from typing import Optional

import typer
from rich.console import Console

from drupal_env.cli_support import (
    get_task_context,
    handle_cli_error,
    is_verbose,
    print_error,
    print_success,
)
from drupal_env.core.errors import DrupalEnvError
from drupal_env.core.ide import add_phpstorm_debug_server
from drupal_env.core.software import check_software, render_software_table
from drupal_env.core.themes import ThemePicker, themes_for

# Module-level console instance (will be set by register function)
console: Console = Console()


def theme(
    name: Optional[str] = typer.Argument(None, help="Theme to enable (asks when omitted)"),
    admin: bool = typer.Option(False, "--admin", help="Pick the administration theme"),
):
    """Install and enable a front-end or administration theme.

    Examples:
        drupal-env theme              # Choose a front-end theme
        drupal-env theme gin --admin  # Use Gin as the admin theme
    """
    available = themes_for(admin)
    ctx = get_task_context(console)

    if name is None:
        options = {key: f"{t.machine_name} - {t.description}" for key, t in available.items()}
        name = ctx.prompter.choice("Which theme would you like to use?", options)

    if name not in available:
        kind = "admin theme" if admin else "theme"
        print_error(console, f"Unknown {kind} '{name}'. Choose one of: {', '.join(available)}")
        raise typer.Exit(1)

    try:
        picker = ThemePicker(ctx.runner, ctx.installer())
        enabled = picker.enable(available[name], ctx.drush())
    except DrupalEnvError as e:
        handle_cli_error(e, console, is_verbose())
        return

    if not enabled:
        raise typer.Exit(1)
    print_success(console, f"{name} is enabled")


def requirements():
    """Check that the software drupal-env relies on is installed."""
    ctx = get_task_context(console)
    rows, missing = check_software(ctx.runner)
    try:
        render_software_table(console, rows, missing)
    except DrupalEnvError as e:
        handle_cli_error(e, console, is_verbose())


def xdebug_phpstorm():
    """Add the server PhpStorm needs for Xdebug in the local environment.

    Works with .run/appserver.run.xml to map the project onto /app.
    """
    ctx = get_task_context(console)
    try:
        server_id = add_phpstorm_debug_server(ctx.project_dir / ".idea" / "php.xml")
    except DrupalEnvError as e:
        handle_cli_error(e, console, is_verbose())
        return

    print_success(console, f"Added the appserver debug server ({server_id})")


def register_utility_commands(app: typer.Typer, shared_console: Console) -> None:
    """Register utility commands with the main Typer app."""
    global console
    console = shared_console

    app.command()(theme)
    app.command()(requirements)
    app.command("xdebug-phpstorm")(xdebug_phpstorm)
