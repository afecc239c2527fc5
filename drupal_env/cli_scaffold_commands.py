"""Scaffolding commands - scaffold, locate."""
import shlex
from typing import Optional

import typer
from rich.console import Console

from drupal_env.cli_support import (
    get_task_context,
    handle_cli_error,
    is_verbose,
    print_info,
    print_success,
)
from drupal_env.core.errors import DrupalEnvError
from drupal_env.core.pre_scaffold import pre_scaffold_for
from drupal_env.core.scaffolding import ScaffoldReconciler, docker_composer

# Module-level console instance (will be set by register function)
console: Console = Console()


def scaffold(
    package: Optional[str] = typer.Argument(
        None, help="Package to scaffold (defaults to mpbixal/drupal-env)"
    ),
    no_pre_steps: bool = typer.Option(
        False, "--no-pre-steps", help="Skip the package's preparation steps"
    ),
):
    """Enable scaffolding for a package, run it, then disable it again.

    Scaffolding is only allowed for the duration of this command so that
    'composer install' does not overwrite scaffolded files every time.
    If composer.json changed along the way, composer.lock is refreshed.

    Examples:
        drupal-env scaffold                            # Scaffold mpbixal/drupal-env
        drupal-env scaffold mpbixal/drupal-env-lando   # Scaffold another package
    """
    ctx = get_task_context(console)
    package_name = package or ctx.settings.scaffold_package
    pre_scaffold = None if no_pre_steps else pre_scaffold_for(package_name)

    try:
        reconciler = ScaffoldReconciler(ctx.project_dir, ctx.runner, ctx.settings)
        report = reconciler.reconcile(package_name, pre_scaffold)
    except DrupalEnvError as e:
        handle_cli_error(e, console, is_verbose())
        return

    if report.lock_updated:
        print_info(console, "composer.json changed, composer.lock was updated.")
    print_success(console, f"Scaffolding for {report.package_name} is up to date")


def locate(
    name: str = typer.Argument(..., help="Binary to locate (composer, drush, php...)"),
    no_host: bool = typer.Option(
        False, "--no-host", help="Always run through the local environment"
    ),
):
    """Show how a binary will be invoked, asking where it lives if needed."""
    ctx = get_task_context(console)
    fallback = docker_composer(ctx.runner, ctx.settings) if name == "composer" else []
    try:
        invocation = ctx.locator.resolve(name, fallback, allow_host_machine=not no_host)
    except DrupalEnvError as e:
        handle_cli_error(e, console, is_verbose())
        return

    console.print(shlex.join(invocation))


def register_scaffold_commands(app: typer.Typer, shared_console: Console) -> None:
    """Register scaffolding commands with the main Typer app."""
    global console
    console = shared_console

    app.command()(scaffold)
    app.command()(locate)
