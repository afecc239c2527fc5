"""Install composer packages, optionally asking the operator about each one."""
from typing import Callable, Dict, List, Optional

from drupal_env.core.errors import DrupalEnvError, InvalidArgumentError
from drupal_env.core.logger import get_logger
from drupal_env.core.process import ProcessRunner
from drupal_env.core.prompts import Prompter
from drupal_env.core.settings import DrupalEnvSettings, get_settings

logger = get_logger(__name__)

DEV_LABEL = " (Development only dependency)"


def module_names(packages: List[str]) -> List[str]:
    """Return Drupal machine names for the drupal/* packages in packages.

    drupal/core-* packages are tooling, not modules.
    """
    return [
        package.split("/", 1)[1]
        for package in packages
        if package.startswith("drupal/") and not package.startswith("drupal/core")
    ]


class DependencyInstaller:
    """Installs the missing packages from a package -> description mapping.

    Args:
        runner: Process runner used for composer and drush
        composer: Composer invocation (e.g. ["composer"] or a docker wrapper)
        drush: Callable returning the drush invocation. Called lazily so a
            missing local environment only affects activation.
        prompter: Operator prompts for interactive installs
    """

    def __init__(
        self,
        runner: ProcessRunner,
        composer: List[str],
        drush: Optional[Callable[[], List[str]]] = None,
        prompter: Optional[Prompter] = None,
        settings: Optional[DrupalEnvSettings] = None,
    ):
        self.runner = runner
        self.composer = list(composer)
        self.drush = drush
        self.prompter = prompter or Prompter()
        self.settings = settings or get_settings()

    def is_installed(self, package: str) -> bool:
        """Return True if composer reports package as installed.

        A mock runner reports nothing as installed, so the require commands
        an install would run still get logged.
        """
        if self.runner.mock:
            return False
        result = self.runner.run(
            self.composer + ["show", package],
            capture=True,
            timeout=self.settings.command_timeout,
        )
        return result.ok

    def install(
        self,
        interactive: bool,
        packages: Dict[str, str],
        dev: bool = False,
        ask_dev: bool = False,
    ) -> bool:
        """Install every package in packages that is not installed yet.

        Args:
            interactive: Ask before installing each package
            packages: Package name -> description shown to the operator
            dev: Install as development only dependencies
            ask_dev: Ask per package whether it is a dev dependency

        Returns:
            True if every composer call succeeded

        Raises:
            InvalidArgumentError: If ask_dev is requested without interactive
        """
        if ask_dev and not interactive:
            raise InvalidArgumentError("You must ask before install if you want to ask for a dev dependency.")

        missing = {
            package: description
            for package, description in packages.items()
            if not self.is_installed(package)
        }
        if not missing:
            return True

        regular: List[str] = []
        development: List[str] = []
        if interactive:
            label = DEV_LABEL if dev and not ask_dev else ""
            for package, description in missing.items():
                if not self.prompter.confirm(f"Would you like to install {package}{label}? {description}"):
                    continue
                if label or (ask_dev and self.prompter.confirm("Would you like this to be a dev only dependency?", default=dev)):
                    development.append(package)
                else:
                    regular.append(package)
        elif dev:
            development = list(missing)
        else:
            regular = list(missing)

        results = []
        if regular:
            results.append(self._install_batch(regular, dev=False))
        if development:
            results.append(self._install_batch(development, dev=True))
        return all(results)

    def _install_batch(self, packages: List[str], dev: bool) -> bool:
        for package in packages:
            if dev:
                logger.info(f"Installing {package} as a development only dependency")
            else:
                logger.info(f"Installing {package}")

        args = self.composer + ["require"]
        if dev:
            args.append("--dev")
        result = self.runner.run(args + packages)
        if not result.ok:
            logger.error(f"composer require failed for {', '.join(packages)}")
            return False

        self._activate(packages)
        return True

    def _activate(self, packages: List[str]) -> None:
        """Enable the installed modules in Drupal; failures are not fatal."""
        modules = module_names(packages)
        if not modules or self.drush is None:
            return
        try:
            result = self.runner.run(self.drush() + ["en", "-y", ",".join(modules)])
        except DrupalEnvError as e:
            logger.debug(f"Skipping module activation: {e}")
            return
        if not result.ok:
            logger.debug(f"drush could not enable {', '.join(modules)}")
