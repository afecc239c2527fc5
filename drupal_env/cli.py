#!/usr/bin/env python3
"""drupal-env CLI - bootstrap and maintain a Drupal project's local environment."""
from typing import Optional

import typer
from rich.console import Console

from drupal_env.cli_admin_commands import register_admin_commands
from drupal_env.cli_scaffold_commands import register_scaffold_commands
from drupal_env.cli_support import set_project_dir, set_verbose, setup_file_logging
from drupal_env.cli_utility_commands import register_utility_commands
from drupal_env.core.logger import get_logger, set_log_level

app = typer.Typer(
    name="drupal-env",
    help="""drupal-env - local environments for Drupal projects

Quick start:
  drupal-env init          # Required dependencies and config/sync
  drupal-env local         # Pick and install a local environment
  drupal-env scaffold      # Bring scaffolded files up to date

More commands: drupal-env --help
""",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


@app.callback()
def main(
    project: Optional[str] = typer.Option(
        None, "--project", "-p", help="Drupal project root (defaults to the nearest composer.json)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging and tracebacks"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also write logs to this file"),
):
    """Options shared by every command."""
    set_project_dir(project)
    set_verbose(verbose)
    set_log_level(verbose)
    if verbose or log_file:
        setup_file_logging(log_file=log_file, verbose=verbose)


# Attach modular subcommands
register_admin_commands(app, console)
register_scaffold_commands(app, console)
register_utility_commands(app, console)

if __name__ == "__main__":
    app()
