"""Layered YAML configuration for drupal-env.

Two independent layers live in the project root:

* the project layer (roboConfDrupalEnv.yml) is committed and shared
* the local layer (roboConfDrupalEnv.local.yml) holds host-specific choices

Every get/set names its layer explicitly and reads that file fresh.
"""
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from drupal_env.core.errors import NotInitializedError, SerializationError, StorageError
from drupal_env.core.logger import get_logger
from drupal_env.core.manifest import get_path, set_path
from drupal_env.core.settings import DrupalEnvSettings, get_settings

logger = get_logger(__name__)

# Runtime-only command line flags, never persisted.
EPHEMERAL_KEY = "options"

DEFAULT_LOCAL_ENVIRONMENT_KEY = "flags.common.defaultLocalEnvironment"


def save_yaml(file_path: Union[str, Path], contents: Union[Dict[str, Any], str]) -> None:
    """Write a mapping (or YAML text) to file_path.

    The dump is parsed back before anything is written; content that does
    not round-trip is refused and the existing file is left alone.

    Raises:
        SerializationError: If contents cannot be represented as YAML
        StorageError: If the file cannot be written
    """
    file_path = Path(file_path)

    try:
        if isinstance(contents, str):
            contents = yaml.safe_load(contents) or {}
        dumped = yaml.safe_dump(contents, default_flow_style=False, indent=2, sort_keys=False)
        if yaml.safe_load(dumped) != contents:
            raise SerializationError(f"Config for {file_path} does not survive a YAML round trip")
    except yaml.YAMLError as e:
        raise SerializationError(f"Refusing to write invalid YAML to {file_path}: {e}") from e

    temp_file = file_path.with_name(file_path.name + ".tmp")
    try:
        temp_file.write_text(dumped, encoding="utf-8")
        temp_file.replace(file_path)
    except OSError as e:
        temp_file.unlink(missing_ok=True)
        raise StorageError(f"Failed to write {file_path}: {e}") from e


class ConfigStore:
    """Get and set dotted keys in the project or local config layer."""

    def __init__(
        self,
        project_dir: Union[str, Path, None] = None,
        settings: Optional[DrupalEnvSettings] = None,
    ):
        self.project_dir = Path(project_dir) if project_dir is not None else Path.cwd()
        self.settings = settings or get_settings()

    def layer_path(self, local: bool = False) -> Path:
        name = self.settings.local_config_file if local else self.settings.project_config_file
        return self.project_dir / name

    def load(self, local: bool = False) -> Dict[str, Any]:
        """Load one layer; a missing or empty file is an empty mapping.

        Raises:
            StorageError: If the file exists but cannot be read or parsed
        """
        path = self.layer_path(local)
        if not path.exists():
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise StorageError(f"{path} must contain a mapping at the top level")
        return data

    def get(self, key: str, default: Any = None, local: bool = False) -> Any:
        """Return the value at a dotted key in the chosen layer."""
        return get_path(self.load(local), key, default)

    def set(self, key: str, value: Any, local: bool = False) -> None:
        """Store value at a dotted key and persist the layer immediately.

        Raises:
            SerializationError: If the updated layer is not valid YAML
            StorageError: If the layer cannot be written
        """
        data = set_path(self.load(local), key, value)
        data.pop(EPHEMERAL_KEY, None)
        save_yaml(self.layer_path(local), data)
        logger.debug(f"Saved {key} to {self.layer_path(local).name}")

    def default_local_environment(self) -> Dict[str, Any]:
        """Return the chosen local environment entry from the local layer.

        Raises:
            NotInitializedError: If no local environment has been chosen
        """
        config = self.get(DEFAULT_LOCAL_ENVIRONMENT_KEY, {}, local=True)
        if not config:
            raise NotInitializedError(
                "Cannot call this until the local environment has been initialized. "
                "Run 'drupal-env local' first."
            )
        return config
