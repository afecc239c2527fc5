"""Error types raised by drupal-env tasks.

Core code raises these; only the CLI boundary turns them into exit codes.
"""
from typing import Optional, Sequence


class DrupalEnvError(Exception):
    """Base class for every failure drupal-env reports to the operator."""
    pass


class MissingDependencyError(DrupalEnvError):
    """A required external tool (composer, docker, drush...) is absent."""

    def __init__(self, message: str, tool: Optional[str] = None):
        super().__init__(message)
        self.tool = tool


class NotInitializedError(MissingDependencyError):
    """The local environment has not been chosen for this project yet."""
    pass


class InvalidArgumentError(DrupalEnvError, ValueError):
    """Options were combined inconsistently."""
    pass


class StorageError(DrupalEnvError, OSError):
    """Reading or writing a project file failed."""
    pass


class SerializationError(DrupalEnvError):
    """Content meant for a config file does not round-trip as YAML."""
    pass


class ExternalCommandError(DrupalEnvError):
    """A shelled-out command exited with a nonzero status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed with exit code {returncode}: {' '.join(self.command)}"
        if stderr:
            message += f"\n{stderr.strip()}"
        super().__init__(message)
