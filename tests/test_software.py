"""Tests for the software requirements table."""
import pytest
from rich.console import Console

from drupal_env.core.errors import MissingDependencyError
from drupal_env.core.software import NOT_FOUND, SoftwareRequirement, check_software, render_software_table

REQUIREMENTS = [
    SoftwareRequirement("Git", "git", "https://git-scm.com", "https://git-scm.com/req"),
    SoftwareRequirement("Docker", "docker", "https://docker.com", "https://docker.com/req"),
]


def test_all_found(runner):
    runner.executables.update({"git": "/usr/bin/git", "docker": "/usr/bin/docker"})
    console = Console(record=True, width=200)

    rows, missing = check_software(runner, REQUIREMENTS)
    render_software_table(console, rows, missing)

    assert missing is False
    assert rows[0]["file_path"] == "/usr/bin/git"
    assert "All software found" in console.export_text()


def test_missing_software(runner):
    runner.executables["git"] = "/usr/bin/git"
    console = Console(record=True, width=200)

    rows, missing = check_software(runner, REQUIREMENTS)

    assert missing is True
    assert rows[1]["file_path"] == NOT_FOUND
    with pytest.raises(MissingDependencyError):
        render_software_table(console, rows, missing)
    assert "Docker" in console.export_text()
