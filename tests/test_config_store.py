"""Tests for the layered YAML config store."""
import pytest
import yaml

from drupal_env.core.config_store import ConfigStore, save_yaml
from drupal_env.core.errors import NotInitializedError, SerializationError, StorageError


class TestConfigLayers:
    """Project and local layers are read and written independently."""

    def test_get_missing_file_returns_default(self, config):
        assert config.get("flags.demo", "fallback") == "fallback"
        assert config.get("flags.demo", "fallback", local=True) == "fallback"

    def test_layer_isolation(self, config):
        config.set("flags.demo", True, local=True)

        assert config.get("flags.demo", False, local=True) is True
        assert config.get("flags.demo", False, local=False) is False

    def test_set_writes_expected_files(self, config, tmp_path):
        config.set("flags.installedOptionalDependencies", 1)
        config.set("flags.common.paths.composer", {"type": "docker"}, local=True)

        project = yaml.safe_load((tmp_path / "roboConfDrupalEnv.yml").read_text())
        local = yaml.safe_load((tmp_path / "roboConfDrupalEnv.local.yml").read_text())
        assert project == {"flags": {"installedOptionalDependencies": 1}}
        assert local == {"flags": {"common": {"paths": {"composer": {"type": "docker"}}}}}

    def test_set_preserves_other_keys(self, config, tmp_path):
        (tmp_path / "roboConfDrupalEnv.yml").write_text("site:\n  name: Acme\nflags:\n  a: 1\n")
        config.set("flags.b", 2)

        assert config.get("site.name") == "Acme"
        assert config.get("flags.a") == 1
        assert config.get("flags.b") == 2

    def test_options_never_persisted(self, config, tmp_path):
        (tmp_path / "roboConfDrupalEnv.yml").write_text("options:\n  verbose: true\nflags: {}\n")
        config.set("flags.x", "y")

        saved = yaml.safe_load((tmp_path / "roboConfDrupalEnv.yml").read_text())
        assert "options" not in saved
        assert saved["flags"] == {"x": "y"}

    def test_set_unserializable_value_refused(self, config, tmp_path):
        config.set("flags.ok", True)
        before = (tmp_path / "roboConfDrupalEnv.yml").read_text()

        with pytest.raises(SerializationError):
            config.set("flags.bad", object())

        assert (tmp_path / "roboConfDrupalEnv.yml").read_text() == before

    def test_invalid_yaml_layer(self, config, tmp_path):
        (tmp_path / "roboConfDrupalEnv.local.yml").write_text("flags: [unclosed\n")
        with pytest.raises(StorageError):
            config.get("flags", local=True)

    def test_non_mapping_layer(self, config, tmp_path):
        (tmp_path / "roboConfDrupalEnv.yml").write_text("- a\n- b\n")
        with pytest.raises(StorageError):
            config.get("anything")

    def test_default_local_environment(self, config):
        with pytest.raises(NotInitializedError):
            config.default_local_environment()

        config.set("flags.common.defaultLocalEnvironment", {"type": "lando"}, local=True)
        assert config.default_local_environment() == {"type": "lando"}


class TestSaveYaml:
    """Validation before writing YAML."""

    def test_save_yaml_string(self, tmp_path):
        target = tmp_path / "out.yml"
        save_yaml(target, "a: 1\nb:\n  c: two\n")
        assert yaml.safe_load(target.read_text()) == {"a": 1, "b": {"c": "two"}}

    def test_save_yaml_invalid_string_refused(self, tmp_path):
        target = tmp_path / "out.yml"
        target.write_text("keep: me\n")

        with pytest.raises(SerializationError):
            save_yaml(target, "a: [1, 2\n")

        assert target.read_text() == "keep: me\n"
