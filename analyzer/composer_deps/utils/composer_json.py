"""Reader for the parts of composer.json the analysis needs."""

import json
import logging
import os
from typing import Any, Dict, Union

from ..exceptions import InvalidConfigError, InvalidPathError
from . import path as paths

logger = logging.getLogger(__name__)

AUTOLOAD_TYPES = ("psr-0", "psr-4", "files", "classmap")


def normalize_extension_name(extension: str) -> str:
    """Requirement name Composer uses for a PHP extension.

    >>> normalize_extension_name("Zend OPcache")
    'ext-zend-opcache'
    """
    return "ext-" + extension.lower().replace(" ", "-")


class ComposerJson:
    """Declared dependencies and autoload paths of a Composer project.

    Attributes:
        composer_json_path: Absolute path of the composer.json file.
        base_dir: Directory containing composer.json.
        dependencies: Package name -> True when declared in require-dev.
            Extensions keep their ext-* name, other platform requirements
            (php, lib-*) are left out.
        autoload_paths: Absolute path -> True when declared in autoload-dev.
        vendor_dir: Absolute path of the install directory (config.vendor-dir).
    """

    def __init__(self, composer_json_path: str) -> None:
        """Load and validate composer.json.

        Args:
            composer_json_path: Path to the composer.json file.

        Raises:
            InvalidPathError: If the file does not exist or is unreadable.
            InvalidConfigError: If the file is not a JSON object or declares
                no packages at all.
        """
        self.composer_json_path = paths.realpath(composer_json_path)
        self.base_dir = os.path.dirname(self.composer_json_path)

        data = self._read(self.composer_json_path)

        self.dependencies: Dict[str, bool] = {}
        for section, is_dev in (("require", False), ("require-dev", True)):
            for package in self._mapping(data, section):
                if "/" in package:
                    self.dependencies[package.lower()] = is_dev
                elif package.lower().startswith("ext-"):
                    self.dependencies[normalize_extension_name(package[4:])] = is_dev

        if not self.dependencies:
            raise InvalidConfigError(
                f"No packages found in {self.composer_json_path} "
                "(no \"require\" nor \"require-dev\" section?)"
            )

        self.autoload_paths: Dict[str, bool] = {}
        for section, is_dev in (("autoload", False), ("autoload-dev", True)):
            autoload = self._mapping(data, section)
            for autoload_type in AUTOLOAD_TYPES:
                for entry in self._iter_paths(autoload.get(autoload_type, [])):
                    resolved = paths.resolve(self.base_dir, entry)
                    self.autoload_paths[resolved] = is_dev

        config = self._mapping(data, "config")
        vendor_dir = config.get("vendor-dir", "vendor")
        if not isinstance(vendor_dir, str):
            raise InvalidConfigError(f"config.vendor-dir in {self.composer_json_path} must be a string")
        self.vendor_dir = paths.resolve(self.base_dir, vendor_dir)

        logger.debug(
            "Loaded %s: %d dependencies, %d autoload paths",
            self.composer_json_path,
            len(self.dependencies),
            len(self.autoload_paths),
        )

    @staticmethod
    def _read(composer_json_path: str) -> Dict[str, Any]:
        try:
            with open(composer_json_path, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise InvalidPathError(f"Unable to read {composer_json_path}: {e.strerror or e}") from e
        except json.JSONDecodeError as e:
            raise InvalidConfigError(f"Failure while parsing {composer_json_path}: {e}") from e

        if not isinstance(data, dict):
            raise InvalidConfigError(f"{composer_json_path} must contain a JSON object")
        return data

    def _mapping(self, data: Dict[str, Any], key: str) -> Dict[str, Any]:
        value = data.get(key, {})
        # PHP's json_encode writes empty objects as []
        if value == []:
            return {}
        if not isinstance(value, dict):
            raise InvalidConfigError(f"\"{key}\" in {self.composer_json_path} must be an object")
        return value

    @staticmethod
    def _iter_paths(entries: Union[Dict[str, Any], list]):
        # psr-0 / psr-4 map namespaces to a path or a list of paths,
        # files / classmap are plain lists
        values = entries.values() if isinstance(entries, dict) else entries
        for value in values:
            if isinstance(value, str):
                yield value
            elif isinstance(value, list):
                yield from (item for item in value if isinstance(item, str))

    def is_dev_dependency(self, package: str) -> bool:
        return self.dependencies.get(package, False)
