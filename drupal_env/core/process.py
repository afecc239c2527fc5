"""Process execution for drupal-env tasks.

Every external command (composer, docker, drush, which...) goes through
ProcessRunner so callers never concatenate shell strings and tests can
substitute a fake runner.
"""
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from drupal_env.core.errors import ExternalCommandError, MissingDependencyError
from drupal_env.core.logger import get_logger

logger = get_logger(__name__)

Invocation = List[str]


@dataclass
class CommandResult:
    """Outcome of a single external command."""

    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ProcessRunner:
    """Runs external commands relative to the project directory."""

    def __init__(self, cwd: Optional[Union[str, Path]] = None, mock: bool = False):
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()
        self.mock = mock

    def run(
        self,
        args: Sequence[str],
        capture: bool = False,
        timeout: Optional[int] = None,
    ) -> CommandResult:
        """Run a command and return its result without raising on failure.

        Args:
            args: Full argv list (the executable first)
            capture: Capture stdout/stderr instead of streaming to the terminal
            timeout: Seconds before the command is abandoned

        Raises:
            MissingDependencyError: If the executable cannot be started
        """
        cmd = [str(arg) for arg in args]
        if self.mock:
            logger.info(f"MOCK: Would run {' '.join(cmd)}")
            return CommandResult(cmd, 0)

        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            completed = subprocess.run(
                cmd,
                cwd=self.cwd,
                capture_output=capture,
                text=True,
                check=False,
                timeout=timeout,
            )
        except FileNotFoundError as e:
            raise MissingDependencyError(f"{cmd[0]} could not be found on your system.", tool=cmd[0]) from e
        except subprocess.TimeoutExpired:
            logger.warning(f"Timed out after {timeout}s: {' '.join(cmd)}")
            return CommandResult(cmd, 124, "", f"timed out after {timeout}s")

        return CommandResult(
            cmd,
            completed.returncode,
            completed.stdout or "",
            completed.stderr or "",
        )

    def check(self, args: Sequence[str], capture: bool = False) -> CommandResult:
        """Run a command and raise ExternalCommandError if it fails."""
        result = self.run(args, capture=capture)
        if not result.ok:
            raise ExternalCommandError(result.args, result.returncode, result.stderr)
        return result

    def which(self, name: str) -> Optional[str]:
        """Return the full path to an executable, or None if not found.

        Accepts a bare name (searched on PATH) or a path to a file.
        """
        if not name:
            return None
        if "/" in name:
            return self._executable_path(name)
        return shutil.which(name)

    def _executable_path(self, path: str) -> Optional[str]:
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.cwd / candidate
        found = shutil.which(str(candidate))
        return path if found else None
