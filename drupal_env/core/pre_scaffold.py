"""Idempotent project adjustments that run before a package is scaffolded.

Every helper checks its precondition first and returns True only when it
changed something, so running them again is a no-op.
"""
import secrets
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from drupal_env.core.logger import get_logger
from drupal_env.core.manifest import KeyPath, ManifestStore, as_list, get_path, set_path
from drupal_env.core.process import ProcessRunner

logger = get_logger(__name__)


@dataclass
class ScaffoldContext:
    """Everything a pre-scaffold step may touch."""

    project_dir: Path
    manifest: ManifestStore
    runner: ProcessRunner
    composer: List[str]

    def path(self, relative: str) -> Path:
        return self.project_dir / relative


class PreScaffold(Protocol):
    """Package-specific changes applied before scaffolding runs."""

    package_name: str

    def pre_scaffold_changes(self, context: ScaffoldContext) -> None:
        ...


def ensure_secret_file(context: ScaffoldContext, relative_path: str, nbytes: int = 55) -> bool:
    """Write a random URL-safe secret to relative_path if it does not exist."""
    target = context.path(relative_path)
    if target.exists():
        return False
    target.write_text(secrets.token_urlsafe(nbytes))
    logger.info(f"Generated {relative_path}")
    return True


def ensure_required_dependency(context: ScaffoldContext, package: str) -> bool:
    """Require package through composer unless the manifest already has it."""
    if context.manifest.is_required(package):
        return False
    logger.info(f"Requiring {package}")
    context.runner.check(context.composer + ["require", package])
    return True


def ensure_settings_file(context: ScaffoldContext) -> bool:
    """Copy default.settings.php to settings.php so scaffolding can append to it."""
    sites_default = context.path(context.manifest.web_root()) / "sites" / "default"
    settings = sites_default / "settings.php"
    template = sites_default / "default.settings.php"
    if settings.exists() or not template.exists():
        return False
    shutil.copyfile(template, settings)
    logger.info(f"Created {settings.relative_to(context.project_dir)}")
    return True


def ensure_autoload_path(context: ScaffoldContext, namespace: str, path: str, scheme: str = "psr-4") -> bool:
    """Register an autoload path for namespace unless path is already mapped."""
    manifest = context.manifest.load()
    mapping = get_path(manifest, ["autoload", scheme], {}) or {}
    if path in mapping.values():
        return False
    context.manifest.save(set_path(manifest, ["autoload", scheme, namespace], path))
    return True


def ensure_file(context: ScaffoldContext, relative_path: str) -> bool:
    """Create an empty file if it does not exist."""
    target = context.path(relative_path)
    if target.exists():
        return False
    target.parent.mkdir(parents=True, exist_ok=True)
    target.touch()
    return True


def ensure_directory(context: ScaffoldContext, relative_path: str, mode: int = 0o755) -> bool:
    """Create a directory (and parents) if it does not exist."""
    target = context.path(relative_path)
    if target.is_dir():
        return False
    target.mkdir(mode=mode, parents=True, exist_ok=True)
    return True


def upsert_script_command(context: ScaffoldContext, hook: str, marker: str, command: str) -> bool:
    """Make sure scripts.<hook> contains command.

    Existing entries are found by marker, a substring that stays stable
    across versions of command. Matches that differ are replaced in place;
    with no match the command is appended.
    """
    manifest = context.manifest.load()
    commands = as_list(get_path(manifest, ["scripts", hook]))

    matches = [index for index, existing in enumerate(commands) if marker in existing]
    changed = False
    if matches:
        for index in matches:
            if commands[index] != command:
                commands[index] = command
                changed = True
    else:
        commands.append(command)
        changed = True

    if changed:
        context.manifest.save(set_path(manifest, ["scripts", hook], commands))
    return changed


def ensure_manifest_value(context: ScaffoldContext, path: KeyPath, value: Any) -> bool:
    """Write value at path in the manifest if it currently differs."""
    manifest = context.manifest.load()
    if get_path(manifest, path, None) == value:
        return False
    context.manifest.save(set_path(manifest, path, value))
    return True


def ensure_composer_config(context: ScaffoldContext, key: str, value: str) -> bool:
    """Set a manifest key through 'composer config' if it currently differs."""
    if context.manifest.get(key, "") == value:
        return False
    context.runner.check(context.composer + ["config", key, value])
    return True


EXECUTABLE_HOOK = "post-drupal-scaffold-cmd"
EXECUTABLE_MARKER = "Allowing orchestration files to be executed"
EXECUTABLE_COMMAND = (
    f"echo '{EXECUTABLE_MARKER}...' && chmod -f +x ./orch/*.sh ./composer ./php ./robo ./drsh"
)


class DrupalEnvPreScaffold:
    """Prepares a project for the mpbixal/drupal-env scaffold files."""

    package_name = "mpbixal/drupal-env"

    def pre_scaffold_changes(self, context: ScaffoldContext) -> None:
        # Hash salt exists before install so settings.php is never rewritten.
        ensure_secret_file(context, "drupal_hash_salt.txt")

        # Core scaffolding patches need composer-patches in place first.
        ensure_required_dependency(context, "cweagans/composer-patches")

        ensure_settings_file(context)
        ensure_autoload_path(context, "RoboEnv\\", "./RoboEnv/")
        ensure_file(context, ".gitignore")

        # Scaffolded files must not be appended to .gitignore.
        ensure_manifest_value(context, ["extra", "drupal-scaffold", "gitignore"], False)

        upsert_script_command(context, EXECUTABLE_HOOK, EXECUTABLE_MARKER, EXECUTABLE_COMMAND)
        ensure_composer_config(context, "extra.patches-file", "composer.patches.json")


SCAFFOLD_PACKAGES: Dict[str, PreScaffold] = {
    DrupalEnvPreScaffold.package_name: DrupalEnvPreScaffold(),
}


def pre_scaffold_for(package_name: str) -> Optional[PreScaffold]:
    """Return the registered adjustments for package_name, if any."""
    return SCAFFOLD_PACKAGES.get(package_name)
