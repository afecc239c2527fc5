"""Operator prompts.

Wraps typer/rich so core logic can ask questions through one object and
tests can replay scripted answers.
"""
from typing import Dict, Optional

import typer
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table


class Prompter:
    """Interactive questions on the terminal."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def confirm(self, message: str, default: bool = True) -> bool:
        return typer.confirm(message, default=default)

    def ask(self, message: str, default: Optional[str] = None) -> str:
        """Ask for free text; an empty answer returns the default (or "")."""
        answer = typer.prompt(message, default=default if default is not None else "", show_default=bool(default))
        return str(answer).strip()

    def choice(self, message: str, options: Dict[str, str], default: Optional[str] = None) -> str:
        """Pick one of options (key -> label) and return the chosen key."""
        table = Table(show_header=False, box=None)
        for key, label in options.items():
            table.add_row(f"[cyan]{key}[/cyan]", label)
        self.console.print(table)
        return Prompt.ask(message, choices=list(options), default=default, console=self.console)

    def note(self, message: str) -> None:
        self.console.print(f"[cyan]ℹ[/cyan] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {message}")
