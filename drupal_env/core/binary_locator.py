"""Decide where an external binary is run from.

A binary can be run from the host machine, through the containerized local
environment, or through a plain docker image. The operator's choice is
stored per binary in the local config layer under flags.common.paths.<name>
and re-validated before it is reused.
"""
import os
import shlex
from typing import List, Optional, Sequence, Union

from drupal_env.core.config_store import ConfigStore
from drupal_env.core.errors import InvalidArgumentError, MissingDependencyError
from drupal_env.core.local_environments import default_local_environment
from drupal_env.core.logger import get_logger
from drupal_env.core.process import ProcessRunner
from drupal_env.core.prompts import Prompter
from drupal_env.core.settings import DrupalEnvSettings, get_settings

logger = get_logger(__name__)

LOCAL_MACHINE = "local_machine"
LOCAL_ENVIRONMENT = "local_environment"
DOCKER = "docker"

LOCATION_CHOICES = {
    LOCAL_MACHINE: "Local Machine",
    LOCAL_ENVIRONMENT: "Local Environment",
    DOCKER: "Docker",
}


def location_key(name: str) -> str:
    return f"flags.common.paths.{name}"


class BinaryLocator:
    """Resolves the invocation for a named binary."""

    def __init__(
        self,
        config: ConfigStore,
        runner: ProcessRunner,
        prompter: Optional[Prompter] = None,
        settings: Optional[DrupalEnvSettings] = None,
    ):
        self.config = config
        self.runner = runner
        self.prompter = prompter or Prompter()
        self.settings = settings or get_settings()

    def inside_local_environment(self) -> bool:
        return os.environ.get(self.settings.local_env_marker) is not None

    def resolve(
        self,
        name: str,
        container_fallback: Union[str, Sequence[str]] = "",
        allow_host_machine: bool = True,
    ) -> List[str]:
        """Return the argv prefix used to run name.

        Args:
            name: Binary name (composer, drush, php...)
            container_fallback: Invocation used when the operator picks plain docker
            allow_host_machine: False forces the local environment's wrapper, for
                binaries that must run the way the environment runs them

        Raises:
            MissingDependencyError: If the chosen location is not usable
            NotInitializedError: If the local environment is needed but not chosen
        """
        if self.inside_local_environment():
            return default_local_environment(self.config).command(name, inside=True)

        if not allow_host_machine:
            return default_local_environment(self.config).command(name, inside=False)

        fallback = self._fallback(container_fallback)
        stored = self.config.get(location_key(name), {}, local=True) or {}
        location_type = stored.get("type") if isinstance(stored, dict) else None

        if location_type == LOCAL_ENVIRONMENT:
            return default_local_environment(self.config).command(name, inside=False)

        if location_type == DOCKER:
            return fallback

        if location_type == LOCAL_MACHINE:
            path = stored.get("path")
            if path and self.runner.which(path):
                return [path]
            self.prompter.warning(f"Your path to {name} ({path or '<not set>'}) no longer exists.")
        else:
            self.prompter.warning(f"You have not chosen where {name} lives on your system yet.")

        return self.ask_for_location(name, fallback)

    def ask_for_location(self, name: str, fallback: List[str]) -> List[str]:
        """Ask the operator where name should run and persist the answer."""
        self.prompter.note(f"Running {name} on your own machine is usually faster than running through docker.")
        choice = self.prompter.choice(
            f"Would you like to run {name} from your local machine, through your local "
            f"environment (usually uses docker), or directly through docker?",
            LOCATION_CHOICES,
        )

        if choice == LOCAL_MACHINE:
            return self._choose_local_machine(name)

        if choice == LOCAL_ENVIRONMENT:
            environment = default_local_environment(self.config)
            self.config.set(location_key(name), {"type": LOCAL_ENVIRONMENT}, local=True)
            return environment.command(name, inside=False)

        if choice == DOCKER:
            if not self.runner.which("docker"):
                raise MissingDependencyError("Docker could not be found on your system.", tool="docker")
            if not fallback:
                raise InvalidArgumentError(f"There is no docker command available to run {name}.")
            self.config.set(location_key(name), {"type": DOCKER}, local=True)
            return fallback

        raise InvalidArgumentError(f"Invalid operation when choosing path to {name}")

    def _choose_local_machine(self, name: str) -> List[str]:
        default_path = self.runner.which(name)
        self.prompter.note(f"Showing possible locations for {name}")
        try:
            self.runner.run(["whereis", name])
        except MissingDependencyError:
            logger.debug("whereis is not available, skipping location hints")

        binary_location = self.prompter.ask(f"Enter the full path to {name}", default_path)
        if not binary_location:
            raise InvalidArgumentError("A path is required.")
        if not self.runner.which(binary_location):
            raise MissingDependencyError(
                f"The path '{binary_location}' does not exist on your machine.",
                tool=name,
            )

        self.config.set(location_key(name), {"type": LOCAL_MACHINE, "path": binary_location}, local=True)
        logger.info(f"Using {binary_location} for {name}")
        return [binary_location]

    @staticmethod
    def _fallback(container_fallback: Union[str, Sequence[str]]) -> List[str]:
        if isinstance(container_fallback, str):
            return shlex.split(container_fallback)
        return list(container_fallback)
