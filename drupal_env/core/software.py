"""Check that the software a project needs is installed on this machine."""
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from rich.console import Console
from rich.table import Table

from drupal_env.core.errors import MissingDependencyError
from drupal_env.core.process import ProcessRunner

NOT_FOUND = "!!! Does not exist !!!"

TABLE_HEADERS = {
    "name": "Name",
    "bin": "Bin Searched",
    "file_path": "Found At",
    "download": "Download",
    "requirements": "Requirements",
}


@dataclass(frozen=True)
class SoftwareRequirement:
    name: str
    binary: str
    download: str
    requirements: str


DEFAULT_REQUIREMENTS = [
    SoftwareRequirement(
        name="Git",
        binary="git",
        download="https://git-scm.com/downloads",
        requirements="https://git-scm.com/book/en/v2/Getting-Started-Installing-Git",
    ),
    SoftwareRequirement(
        name="Docker",
        binary="docker",
        download="https://docs.docker.com/get-docker/",
        requirements="https://docs.docker.com/engine/install/#supported-platforms",
    ),
    SoftwareRequirement(
        name="Lando",
        binary="lando",
        download="https://github.com/lando/lando/releases",
        requirements="https://docs.lando.dev/getting-started/requirements.html",
    ),
]


def check_software(
    runner: ProcessRunner,
    requirements: Sequence[SoftwareRequirement] = DEFAULT_REQUIREMENTS,
) -> Tuple[List[Dict[str, str]], bool]:
    """Look up every requirement on this machine.

    Returns:
        Tuple of (table rows, True if anything is missing)
    """
    rows = []
    missing = False
    for requirement in requirements:
        file_path = runner.which(requirement.binary)
        if file_path is None:
            missing = True
        rows.append({
            "name": requirement.name,
            "bin": requirement.binary,
            "file_path": file_path or NOT_FOUND,
            "download": requirement.download,
            "requirements": requirement.requirements,
        })
    return rows, missing


def render_software_table(console: Console, rows: List[Dict[str, str]], missing: bool) -> None:
    """Print the requirements table.

    Raises:
        MissingDependencyError: If any row was not found
    """
    table = Table(title="Software requirements")
    for header in TABLE_HEADERS.values():
        table.add_column(header)
    for row in rows:
        style = "red" if row["file_path"] == NOT_FOUND else None
        table.add_row(*(row[key] for key in TABLE_HEADERS), style=style)
    console.print(table)

    if missing:
        raise MissingDependencyError("You are missing a piece of software, please download and re-run.")
    console.print("[green]✓[/green] All software found.")
