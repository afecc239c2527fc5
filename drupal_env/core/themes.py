"""Pick, install and enable a Drupal theme."""
from dataclasses import dataclass
from typing import Dict, List, Optional

from drupal_env.core.installer import DependencyInstaller
from drupal_env.core.logger import get_logger
from drupal_env.core.process import ProcessRunner

logger = get_logger(__name__)


@dataclass(frozen=True)
class Theme:
    """A theme that can be set as the site's default or admin theme.

    A theme without a package ships with Drupal core.
    """

    machine_name: str
    description: str
    package: Optional[str] = None
    admin: bool = False


THEMES: Dict[str, Theme] = {
    "olivero": Theme("olivero", "Drupal core's default front-end theme."),
    "claro": Theme("claro", "Drupal core's administration theme.", admin=True),
    "gin": Theme(
        "gin",
        "A modern administration theme built on top of Claro.",
        package="drupal/gin",
        admin=True,
    ),
    "radix": Theme(
        "radix",
        "A Bootstrap 5 base theme with component-based sub-theming.",
        package="drupal/radix",
    ),
    "bootstrap5": Theme(
        "bootstrap5",
        "A simple Bootstrap 5 base theme.",
        package="drupal/bootstrap5",
    ),
}


def themes_for(admin: bool) -> Dict[str, Theme]:
    return {key: theme for key, theme in THEMES.items() if theme.admin == admin}


class ThemePicker:
    """Installs a theme and makes it the default (or admin) theme."""

    def __init__(self, runner: ProcessRunner, installer: DependencyInstaller):
        self.runner = runner
        self.installer = installer

    def enable(self, theme: Theme, drush: List[str]) -> bool:
        """Install theme if needed, enable it and set it as the site theme.

        Raises:
            ExternalCommandError: If drush fails to enable or configure the theme
        """
        if theme.package:
            if not self.installer.install(False, {theme.package: theme.description}):
                logger.error(f"There was an issue installing {theme.package}.")
                return False

        setting = "admin" if theme.admin else "default"
        self.runner.check(drush + ["theme:enable", theme.machine_name])
        self.runner.check(drush + ["config:set", "system.theme", setting, theme.machine_name, "-y"])
        logger.info(f"{theme.machine_name} is now the {setting} theme")
        return True
