"""Tests for resolving where binaries run from."""
import pytest

from drupal_env.core.binary_locator import BinaryLocator, location_key
from drupal_env.core.errors import InvalidArgumentError, MissingDependencyError, NotInitializedError

DOCKER_COMPOSER = "docker run --rm -i --tty -v /project:/app composer:2"


@pytest.fixture
def lando(config):
    config.set("flags.common.defaultLocalEnvironment", {"type": "lando"}, local=True)
    return config


def make_locator(config, runner, prompter):
    return BinaryLocator(config, runner, prompter)


class TestEnvironmentShortcuts:
    """Decisions that never consult the stored choice."""

    def test_inside_local_environment_ignores_stored_choice(self, lando, runner, prompter, monkeypatch):
        monkeypatch.setenv("DRUPAL_ENV_LOCAL", "1")
        lando.set(location_key("composer"), {"type": "docker"}, local=True)

        invocation = make_locator(lando, runner, prompter).resolve("composer", DOCKER_COMPOSER)

        assert invocation == ["composer"]
        assert prompter.questions == []

    def test_host_machine_not_allowed_uses_environment_wrapper(self, lando, runner, prompter):
        invocation = make_locator(lando, runner, prompter).resolve("drush", allow_host_machine=False)
        assert invocation == ["lando", "drush"]

    def test_host_machine_not_allowed_without_environment(self, config, runner, prompter):
        with pytest.raises(NotInitializedError):
            make_locator(config, runner, prompter).resolve("drush", allow_host_machine=False)


class TestStoredChoice:
    """Reusing the persisted location."""

    def test_local_machine_path_reused(self, config, runner, prompter):
        runner.executables["/opt/bin/composer"] = "/opt/bin/composer"
        config.set(location_key("composer"), {"type": "local_machine", "path": "/opt/bin/composer"}, local=True)

        invocation = make_locator(config, runner, prompter).resolve("composer", DOCKER_COMPOSER)

        assert invocation == ["/opt/bin/composer"]
        assert prompter.questions == []

    def test_local_environment_choice(self, lando, runner, prompter):
        lando.set(location_key("composer"), {"type": "local_environment"}, local=True)
        assert make_locator(lando, runner, prompter).resolve("composer") == ["lando", "composer"]

    def test_docker_choice_returns_fallback(self, config, runner, prompter):
        config.set(location_key("composer"), {"type": "docker"}, local=True)

        invocation = make_locator(config, runner, prompter).resolve("composer", DOCKER_COMPOSER)

        assert invocation == DOCKER_COMPOSER.split()

    def test_stale_local_machine_path_prompts_again(self, config, runner, prompter):
        config.set(location_key("composer"), {"type": "local_machine", "path": "/gone/composer"}, local=True)
        runner.executables["/usr/local/bin/composer"] = "/usr/local/bin/composer"
        prompter.answers = ["local_machine", "/usr/local/bin/composer"]

        invocation = make_locator(config, runner, prompter).resolve("composer", DOCKER_COMPOSER)

        assert invocation == ["/usr/local/bin/composer"]
        assert any("/gone/composer" in warning for warning in prompter.warnings)
        assert config.get(location_key("composer"), local=True) == {
            "type": "local_machine",
            "path": "/usr/local/bin/composer",
        }


class TestInteractiveResolution:
    """First-time questions and their persistence."""

    def test_local_machine_uses_which_default(self, config, runner, prompter):
        prompter.answers = ["local_machine", None]

        invocation = make_locator(config, runner, prompter).resolve("composer", DOCKER_COMPOSER)

        assert invocation == ["/usr/bin/composer"]
        assert runner.called(["whereis", "composer"])
        assert config.get(location_key("composer"), local=True)["path"] == "/usr/bin/composer"

    def test_choice_saved_to_local_layer_only(self, config, runner, prompter):
        prompter.answers = ["local_machine", None]
        make_locator(config, runner, prompter).resolve("composer")

        assert config.get(location_key("composer"), None, local=False) is None

    def test_empty_path_rejected(self, config, runner, prompter):
        runner.executables.clear()
        prompter.answers = ["local_machine", ""]

        with pytest.raises(InvalidArgumentError, match="A path is required"):
            make_locator(config, runner, prompter).resolve("composer")
        assert config.get(location_key("composer"), None, local=True) is None

    def test_non_executable_path_rejected(self, config, runner, prompter):
        prompter.answers = ["local_machine", "/not/here"]

        with pytest.raises(MissingDependencyError, match="/not/here"):
            make_locator(config, runner, prompter).resolve("composer")
        assert config.get(location_key("composer"), None, local=True) is None

    def test_local_environment_choice_persisted(self, lando, runner, prompter):
        prompter.answers = ["local_environment"]

        invocation = make_locator(lando, runner, prompter).resolve("php")

        assert invocation == ["lando", "php"]
        assert lando.get(location_key("php"), local=True) == {"type": "local_environment"}

    def test_docker_choice_requires_docker(self, config, runner, prompter):
        prompter.answers = ["docker"]

        with pytest.raises(MissingDependencyError, match="Docker could not be found"):
            make_locator(config, runner, prompter).resolve("composer", DOCKER_COMPOSER)
        assert config.get(location_key("composer"), None, local=True) is None

    def test_docker_choice_persisted(self, config, runner, prompter):
        runner.executables["docker"] = "/usr/bin/docker"
        prompter.answers = ["docker"]

        invocation = make_locator(config, runner, prompter).resolve("composer", DOCKER_COMPOSER.split())

        assert invocation == DOCKER_COMPOSER.split()
        assert config.get(location_key("composer"), local=True) == {"type": "docker"}
