"""Read/write access to the project's composer.json manifest."""
import copy
import hashlib
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from drupal_env.core.errors import StorageError
from drupal_env.core.logger import get_logger

logger = get_logger(__name__)

KeyPath = Union[str, Sequence[str]]

ALLOWED_PACKAGES = ("extra", "drupal-scaffold", "allowed-packages")
WEB_ROOT = ("extra", "drupal-scaffold", "locations", "web-root")

_MISSING = object()


def _split(path: KeyPath) -> List[str]:
    if isinstance(path, str):
        return [part for part in path.split(".") if part]
    return list(path)


def get_path(manifest: Dict[str, Any], path: KeyPath, default: Any = None) -> Any:
    """Return the value at a nested key path, or default when any key is absent.

    Args:
        manifest: Decoded manifest tree
        path: Dotted string ("extra.drupal-scaffold.gitignore") or key sequence.
            Use a sequence when a key itself contains a dot.
        default: Value returned when the path does not exist
    """
    node: Any = manifest
    for key in _split(path):
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return node


def set_path(manifest: Dict[str, Any], path: KeyPath, value: Any) -> Dict[str, Any]:
    """Return a copy of the manifest with value stored at path.

    Intermediate mappings are created as needed; every other path is left
    exactly as it was.
    """
    keys = _split(path)
    if not keys:
        raise ValueError("An empty key path cannot be set")

    updated = copy.deepcopy(manifest)
    node = updated
    for key in keys[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[keys[-1]] = copy.deepcopy(value)
    return updated


def delete_path(manifest: Dict[str, Any], path: KeyPath) -> Dict[str, Any]:
    """Return a copy of the manifest without the key at path."""
    keys = _split(path)
    updated = copy.deepcopy(manifest)
    node: Any = updated
    for key in keys[:-1]:
        if not isinstance(node, dict) or key not in node:
            return updated
        node = node[key]
    if isinstance(node, dict):
        node.pop(keys[-1], None)
    return updated


def as_list(value: Any) -> List[Any]:
    """Read a JSON value that should be a list.

    PHP re-encodes an array with a hole in it as an object ({"1": "drupal/core"}),
    and composer accepts a single string where it expects a list.
    """
    if value is None:
        return []
    if isinstance(value, dict):
        return list(value.values())
    if isinstance(value, str):
        return [value]
    return list(value)


class ManifestStore:
    """Loads and saves composer.json.

    The manifest is never cached: composer may rewrite the file between any
    two steps, so every read goes back to disk.
    """

    def __init__(self, manifest_file: Union[str, Path] = "composer.json"):
        self.manifest_file = Path(manifest_file)

    def exists(self) -> bool:
        return self.manifest_file.exists()

    def load(self) -> Dict[str, Any]:
        """Load the manifest from disk.

        Raises:
            StorageError: If the file is missing, unreadable or not a JSON object
        """
        try:
            with open(self.manifest_file, "r", encoding="utf-8") as f:
                manifest = json.load(f)
        except FileNotFoundError as e:
            raise StorageError(f"Manifest not found: {self.manifest_file}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read {self.manifest_file}: {e}") from e

        if not isinstance(manifest, dict):
            raise StorageError(f"{self.manifest_file} does not contain a JSON object")
        return manifest

    def save(self, manifest: Dict[str, Any]) -> None:
        """Write the whole manifest in one pass.

        The document is serialized before the file is touched and then moved
        into place, so a failure leaves the previous file intact.

        Raises:
            StorageError: If the manifest cannot be written
        """
        content = json.dumps(manifest, indent=4, ensure_ascii=False) + "\n"
        temp_file = self.manifest_file.with_name(self.manifest_file.name + ".tmp")
        try:
            temp_file.write_text(content, encoding="utf-8")
            temp_file.replace(self.manifest_file)
        except OSError as e:
            temp_file.unlink(missing_ok=True)
            raise StorageError(f"Failed to write {self.manifest_file}: {e}") from e
        logger.debug(f"Saved {self.manifest_file}")

    def get(self, path: KeyPath, default: Any = None) -> Any:
        """Shortcut for get_path() against a freshly loaded manifest."""
        return get_path(self.load(), path, default)

    def set(self, path: KeyPath, value: Any) -> None:
        """Load, update a single path and save."""
        self.save(set_path(self.load(), path, value))

    def file_hash(self) -> Optional[str]:
        """Return an md5 of the manifest bytes, or None if the file is missing."""
        try:
            return hashlib.md5(self.manifest_file.read_bytes()).hexdigest()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {self.manifest_file}: {e}") from e

    # Well-known paths

    def allowed_packages(self) -> List[str]:
        return as_list(get_path(self.load(), ALLOWED_PACKAGES))

    def web_root(self) -> str:
        web_root = get_path(self.load(), WEB_ROOT, "web") or "web"
        return str(web_root).rstrip("/") or "web"

    def is_required(self, package: str) -> bool:
        """Return True if package appears in require or require-dev."""
        manifest = self.load()
        return any(
            package in (get_path(manifest, [section], {}) or {})
            for section in ("require", "require-dev")
        )
