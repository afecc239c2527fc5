"""Shared test fixtures for drupal-env tests."""
import json
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

from drupal_env.core.config_store import ConfigStore
from drupal_env.core.logger import close_file_logging, set_log_level
from drupal_env.core.process import CommandResult
from drupal_env.core.settings import DrupalEnvSettings, set_settings


class FakeRunner:
    """Records commands instead of running them.

    handlers maps a command prefix (tuple of argv items) to either an exit
    code or a callable(args) -> exit code, so tests can simulate composer
    rewriting files or failing.
    """

    def __init__(self, cwd: Path, executables: Optional[Dict[str, str]] = None):
        self.cwd = Path(cwd)
        self.mock = False
        self.calls: List[List[str]] = []
        self.executables = dict(executables or {})
        self.handlers: Dict[tuple, object] = {}

    def on(self, prefix: List[str], result) -> None:
        self.handlers[tuple(prefix)] = result

    def run(self, args, capture=False, timeout=None) -> CommandResult:
        cmd = [str(arg) for arg in args]
        self.calls.append(cmd)
        returncode = 0
        for prefix in sorted(self.handlers, key=len, reverse=True):
            if tuple(cmd[:len(prefix)]) == prefix:
                handler = self.handlers[prefix]
                returncode = handler(cmd) if callable(handler) else handler
                break
        return CommandResult(cmd, returncode or 0)

    def check(self, args, capture=False) -> CommandResult:
        from drupal_env.core.errors import ExternalCommandError

        result = self.run(args, capture=capture)
        if not result.ok:
            raise ExternalCommandError(result.args, result.returncode, result.stderr)
        return result

    def which(self, name: str) -> Optional[str]:
        if name in self.executables:
            return self.executables[name]
        if name in self.executables.values():
            return name
        return None

    def called(self, prefix: List[str]) -> List[List[str]]:
        return [call for call in self.calls if call[:len(prefix)] == prefix]


class FakePrompter:
    """Replays scripted answers in order."""

    def __init__(self, answers: Optional[List] = None):
        self.answers = list(answers or [])
        self.questions: List[str] = []
        self.warnings: List[str] = []
        self.notes: List[str] = []

    def _next(self, message):
        self.questions.append(message)
        if not self.answers:
            raise AssertionError(f"Unexpected question: {message}")
        return self.answers.pop(0)

    def confirm(self, message: str, default: bool = True) -> bool:
        return self._next(message)

    def ask(self, message: str, default: Optional[str] = None) -> str:
        answer = self._next(message)
        if answer is None:
            return default or ""
        return answer

    def choice(self, message: str, options: Dict[str, str], default: Optional[str] = None) -> str:
        answer = self._next(message)
        assert answer in options, f"{answer!r} is not one of {list(options)}"
        return answer

    def note(self, message: str) -> None:
        self.notes.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    """Isolate every test from DRUPAL_ENV_* variables."""
    for var in ("DRUPAL_ENV_LOCAL", "DRUPAL_ENV_MOCK", "DRUPAL_ENV_PROJECT"):
        monkeypatch.delenv(var, raising=False)
    set_settings(DrupalEnvSettings())
    yield
    set_settings(None)
    close_file_logging()
    set_log_level(False)


@pytest.fixture
def write_manifest(tmp_path) -> Callable[[dict], Path]:
    """Write composer.json in the project directory."""
    def _write(data: dict) -> Path:
        path = tmp_path / "composer.json"
        path.write_text(json.dumps(data, indent=4) + "\n")
        return path
    return _write


@pytest.fixture
def project(tmp_path, write_manifest):
    """A minimal Drupal project."""
    write_manifest({
        "name": "acme/site",
        "require": {"drupal/core-recommended": "^10"},
        "extra": {
            "drupal-scaffold": {
                "locations": {"web-root": "web/"},
            },
        },
    })
    return tmp_path


@pytest.fixture
def runner(tmp_path):
    return FakeRunner(tmp_path, executables={"composer": "/usr/bin/composer"})


@pytest.fixture
def prompter():
    return FakePrompter()


@pytest.fixture
def config(tmp_path):
    return ConfigStore(tmp_path)
