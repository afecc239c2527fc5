"""Run composer's drupal:scaffold for a single package, safely.

Scaffolding is a bracket, not a standing grant: the package is added to
extra.drupal-scaffold.allowed-packages right before the generator runs and
removed again afterwards, even when the generator fails. If composer.json
ends up different from how it started, the lock file is refreshed.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from drupal_env.core.errors import MissingDependencyError
from drupal_env.core.logger import get_logger
from drupal_env.core.manifest import ALLOWED_PACKAGES, ManifestStore, as_list, get_path, set_path
from drupal_env.core.pre_scaffold import PreScaffold, ScaffoldContext
from drupal_env.core.process import ProcessRunner
from drupal_env.core.settings import DrupalEnvSettings, get_settings

logger = get_logger(__name__)


def docker_composer(runner: ProcessRunner, settings: DrupalEnvSettings) -> List[str]:
    """Return the composer invocation that runs through plain docker."""
    return [
        "docker", "run", "--rm", "-i", "--tty",
        "-v", f"{runner.cwd}:/app",
        settings.composer_image,
    ]


def resolve_package_manager(runner: ProcessRunner, settings: Optional[DrupalEnvSettings] = None) -> List[str]:
    """Return the composer invocation, preferring a native install.

    Raises:
        MissingDependencyError: If neither composer nor docker is installed
    """
    settings = settings or get_settings()
    if runner.which("composer"):
        return ["composer"]
    if runner.which("docker"):
        return docker_composer(runner, settings)
    raise MissingDependencyError("Either composer or docker must be installed to continue", tool="composer")


def enable_scaffolding(manifest: ManifestStore, package_name: str) -> bool:
    """Allow package_name to scaffold.

    Returns:
        True if composer.json needed to be updated
    """
    data = manifest.load()
    allowed = as_list(get_path(data, ALLOWED_PACKAGES))
    if package_name in allowed:
        return False
    allowed.append(package_name)
    manifest.save(set_path(data, ALLOWED_PACKAGES, allowed))
    return True


def disable_scaffolding(manifest: ManifestStore, package_name: str) -> bool:
    """Stop package_name from scaffolding on every composer install.

    Returns:
        True if composer.json needed to be updated
    """
    data = manifest.load()
    allowed = as_list(get_path(data, ALLOWED_PACKAGES))
    if package_name not in allowed:
        return False
    remaining = [package for package in allowed if package != package_name]
    manifest.save(set_path(data, ALLOWED_PACKAGES, remaining))
    return True


@dataclass
class ScaffoldReport:
    """What a reconcile run did."""

    package_name: str
    pre_steps_ran: bool
    manifest_changed: bool
    lock_updated: bool


class ScaffoldReconciler:
    """Brings a project's scaffolded files up to date for one package."""

    def __init__(
        self,
        project_dir: Union[str, Path],
        runner: ProcessRunner,
        settings: Optional[DrupalEnvSettings] = None,
        composer: Optional[List[str]] = None,
    ):
        self.project_dir = Path(project_dir)
        self.runner = runner
        self.settings = settings or get_settings()
        self.manifest = ManifestStore(self.project_dir / self.settings.manifest_file)
        self._composer = composer

    @property
    def composer(self) -> List[str]:
        if self._composer is None:
            self._composer = resolve_package_manager(self.runner, self.settings)
        return self._composer

    def reconcile(self, package_name: str, pre_scaffold: Optional[PreScaffold] = None) -> ScaffoldReport:
        """Run one scaffolding cycle for package_name.

        Args:
            package_name: Composer package whose scaffold files are applied
            pre_scaffold: Adjustments to run first, or None to skip them

        Raises:
            MissingDependencyError: If composer cannot be run at all
            ExternalCommandError: If a composer command fails; scaffolding
                is still disabled again before this propagates
            StorageError: If composer.json cannot be read or written
        """
        composer = self.composer
        hash_before = self.manifest.file_hash()
        if hash_before is None:
            self.manifest.load()  # raises StorageError naming the missing file

        if pre_scaffold is not None:
            logger.info(f"Preparing the project for {package_name}")
            pre_scaffold.pre_scaffold_changes(
                ScaffoldContext(self.project_dir, self.manifest, self.runner, composer)
            )

        enable_scaffolding(self.manifest, package_name)
        try:
            self.runner.check(composer + ["drupal:scaffold"])
        finally:
            disable_scaffolding(self.manifest, package_name)

        manifest_changed = self.manifest.file_hash() != hash_before
        if manifest_changed:
            logger.info("composer.json changed, updating composer.lock")
            self.runner.check(composer + ["update", "--lock"])

        logger.info(
            f"The scaffolding has been enabled and run for {package_name}, bringing in any new "
            f"scaffolded files. Afterwards, it was disabled so that scaffolding is not updated "
            f"every time composer install is called."
        )
        return ScaffoldReport(
            package_name=package_name,
            pre_steps_ran=pre_scaffold is not None,
            manifest_changed=manifest_changed,
            lock_updated=manifest_changed,
        )
