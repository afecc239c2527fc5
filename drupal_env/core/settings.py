"""drupal-env runtime settings."""
import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class DrupalEnvSettings:
    """Runtime settings for drupal-env tasks.

    Attributes:
        manifest_file: Project manifest read and written by composer
        project_config_file: Shared config layer, committed with the project
        local_config_file: Host-specific config layer, never committed
        composer_image: Image used when composer runs through plain docker
        local_env_marker: Variable set inside the containerized local environment
        scaffold_package: Package scaffolded when none is named
        command_timeout: Timeout in seconds for presence probes
    """

    manifest_file: str = "composer.json"
    project_config_file: str = "roboConfDrupalEnv.yml"
    local_config_file: str = "roboConfDrupalEnv.local.yml"
    composer_image: str = "composer:2"
    local_env_marker: str = "DRUPAL_ENV_LOCAL"
    scaffold_package: str = "mpbixal/drupal-env"
    command_timeout: int = 60

    @classmethod
    def from_env(cls) -> "DrupalEnvSettings":
        """Create settings from environment variables.

        Environment variables:
            DRUPAL_ENV_COMPOSER_IMAGE: Docker image for the composer fallback
            DRUPAL_ENV_SCAFFOLD_PACKAGE: Default package to scaffold
            DRUPAL_ENV_COMMAND_TIMEOUT: Probe timeout in seconds

        Returns:
            DrupalEnvSettings instance with values from environment or defaults
        """
        return cls(
            composer_image=os.getenv("DRUPAL_ENV_COMPOSER_IMAGE", cls.composer_image),
            scaffold_package=os.getenv("DRUPAL_ENV_SCAFFOLD_PACKAGE", cls.scaffold_package),
            command_timeout=int(
                os.getenv("DRUPAL_ENV_COMMAND_TIMEOUT", cls.command_timeout)
            ),
        )


# Global settings instance (can be overridden)
_settings: Optional[DrupalEnvSettings] = None


def get_settings() -> DrupalEnvSettings:
    """Get the global drupal-env settings.

    Returns:
        DrupalEnvSettings instance (creates from environment if not set)
    """
    global _settings
    if _settings is None:
        _settings = DrupalEnvSettings.from_env()
    return _settings


def set_settings(settings: Optional[DrupalEnvSettings]):
    """Set the global drupal-env settings.

    Args:
        settings: DrupalEnvSettings instance to use globally, or None to reset
    """
    global _settings
    _settings = settings


def is_mock() -> bool:
    """Return True when commands should only be logged, not executed."""
    return os.environ.get("DRUPAL_ENV_MOCK") == "1"
