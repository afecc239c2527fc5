"""Containerized local environments a project can be set up with."""
from dataclasses import dataclass
from typing import Dict, List, Optional

from drupal_env.core.config_store import ConfigStore
from drupal_env.core.errors import InvalidArgumentError


@dataclass(frozen=True)
class LocalEnvironment:
    """A local environment package and how to reach binaries inside it."""

    key: str
    name: str
    package: str
    cli: str
    description: str
    post_install_command: List[str]

    def command(self, binary: str, inside: bool = True) -> List[str]:
        """Return the invocation for binary in this environment.

        Args:
            binary: Executable name inside the environment (composer, drush...)
            inside: True when already running inside the environment
        """
        if inside:
            return [binary]
        return [self.cli, binary]


LOCAL_ENVIRONMENTS: Dict[str, LocalEnvironment] = {
    "lando": LocalEnvironment(
        key="lando",
        name="Lando",
        package="mpbixal/drupal-env-lando",
        cli="lando",
        description=(
            "https://lando.dev/ Push-button development environments hosted on your "
            "computer or in the cloud. Automate your developer workflow and share it "
            "with your team."
        ),
        post_install_command=["drupal-env", "scaffold", "mpbixal/drupal-env-lando"],
    ),
}


def get_local_environment(key: str) -> Optional[LocalEnvironment]:
    return LOCAL_ENVIRONMENTS.get(key)


def default_local_environment(config: ConfigStore) -> LocalEnvironment:
    """Return the local environment recorded for this host.

    Raises:
        NotInitializedError: If none has been chosen yet
        InvalidArgumentError: If the recorded type is not a known environment
    """
    entry = config.default_local_environment()
    env_type = entry.get("type", "")
    environment = get_local_environment(env_type)
    if environment is None:
        raise InvalidArgumentError(f"Unknown local environment type: {env_type!r}")
    return environment
