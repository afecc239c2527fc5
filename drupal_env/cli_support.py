"""Shared utilities for drupal-env CLI modules."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from drupal_env.core.binary_locator import BinaryLocator
from drupal_env.core.config_store import ConfigStore
from drupal_env.core.installer import DependencyInstaller
from drupal_env.core.process import ProcessRunner
from drupal_env.core.prompts import Prompter
from drupal_env.core.scaffolding import docker_composer
from drupal_env.core.settings import DrupalEnvSettings, get_settings, is_mock

_project_dir: Optional[Path] = None
_verbose = False


def find_project_dir(project: Optional[str] = None) -> Path:
    """Locate the Drupal project root.

    Order: explicit path, DRUPAL_ENV_PROJECT, the nearest directory above
    the current one holding composer.json, then the current directory.
    """
    if project:
        return Path(project).resolve()

    if env_project := os.environ.get("DRUPAL_ENV_PROJECT"):
        return Path(env_project).resolve()

    cwd = Path.cwd()
    for candidate in (cwd, *cwd.parents):
        if (candidate / get_settings().manifest_file).exists():
            return candidate

    return cwd


def set_project_dir(project: Optional[str]) -> Path:
    global _project_dir
    _project_dir = find_project_dir(project)
    return _project_dir


def get_project_dir() -> Path:
    return _project_dir if _project_dir is not None else find_project_dir()


def set_verbose(verbose: bool) -> None:
    global _verbose
    _verbose = verbose


def is_verbose() -> bool:
    return _verbose


@dataclass
class TaskContext:
    """The collaborators every command works with."""

    project_dir: Path
    runner: ProcessRunner
    config: ConfigStore
    prompter: Prompter
    settings: DrupalEnvSettings = field(default_factory=get_settings)

    @property
    def locator(self) -> BinaryLocator:
        return BinaryLocator(self.config, self.runner, self.prompter, self.settings)

    def composer(self) -> List[str]:
        """Composer invocation, asking the operator once where it lives."""
        return self.locator.resolve("composer", docker_composer(self.runner, self.settings))

    def drush(self) -> List[str]:
        """Drush always runs the way the local environment runs it."""
        return self.locator.resolve("drush", allow_host_machine=False)

    def installer(self) -> DependencyInstaller:
        return DependencyInstaller(
            self.runner,
            self.composer(),
            drush=self.drush,
            prompter=self.prompter,
            settings=self.settings,
        )


def get_task_context(console: Optional[Console] = None) -> TaskContext:
    """Build the task context for the active project."""
    project_dir = get_project_dir()
    settings = get_settings()
    return TaskContext(
        project_dir=project_dir,
        runner=ProcessRunner(project_dir, mock=is_mock()),
        config=ConfigStore(project_dir, settings),
        prompter=Prompter(console),
        settings=settings,
    )


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Set up file logging for CLI commands.

    Args:
        log_file: Path to log file (optional)
        verbose: Enable verbose logging
    """
    from drupal_env.core.logger import setup_file_logging as _setup_file_logging
    _setup_file_logging(log_file=log_file, verbose=verbose)


def handle_cli_error(
    e: Exception,
    console: Console,
    verbose: bool = False,
    exit_code: int = 1
) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        e: Exception to handle
        console: Rich console for output
        verbose: Show exception traceback if True
        exit_code: Exit code to use
    """
    console.print(f"[red]Error:[/red] {e}")
    if verbose:
        console.print_exception()
    raise typer.Exit(exit_code)


def print_success(console: Console, message: str, prefix: str = "✓") -> None:
    console.print(f"[green]{prefix}[/green] {message}")


def print_error(console: Console, message: str, prefix: str = "✗") -> None:
    console.print(f"[red]{prefix}[/red] {message}")


def print_warning(console: Console, message: str, prefix: str = "⚠") -> None:
    console.print(f"[yellow]{prefix}[/yellow] {message}")


def print_info(console: Console, message: str, prefix: str = "ℹ") -> None:
    console.print(f"[cyan]{prefix}[/cyan] {message}")
