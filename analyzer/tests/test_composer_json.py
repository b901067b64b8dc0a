"""Tests for composer.json loading."""

import json
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from composer_deps.exceptions import InvalidConfigError, InvalidPathError
from composer_deps.utils.composer_json import ComposerJson, normalize_extension_name


def write_composer_json(directory, data):
    path = directory / "composer.json"
    path.write_text(json.dumps(data) if not isinstance(data, str) else data)
    return str(path)


class TestComposerJson:
    """Test suite for ComposerJson."""

    def test_dependencies(self, tmp_path):
        """Test that package and extension requirements are kept, dev flagged."""
        path = write_composer_json(
            tmp_path,
            {
                "require": {
                    "php": "^8.1",
                    "lib-libxml": "*",
                    "ext-json": "*",
                    "EXT-Zend OPcache": "*",
                    "Psr/Log": "^3.0",
                },
                "require-dev": {"phpunit/phpunit": "^10.0", "ext-xdebug": "*"},
            },
        )

        composer_json = ComposerJson(path)

        assert composer_json.dependencies == {
            "ext-json": False,
            "ext-zend-opcache": False,
            "psr/log": False,
            "phpunit/phpunit": True,
            "ext-xdebug": True,
        }
        assert composer_json.is_dev_dependency("phpunit/phpunit")
        assert not composer_json.is_dev_dependency("psr/log")

    def test_normalize_extension_name(self):
        assert normalize_extension_name("Zend OPcache") == "ext-zend-opcache"
        assert normalize_extension_name("mbstring") == "ext-mbstring"

    def test_dev_section_wins_for_duplicates(self, tmp_path):
        path = write_composer_json(
            tmp_path,
            {"require": {"psr/log": "*"}, "require-dev": {"psr/log": "*"}},
        )

        assert ComposerJson(path).dependencies == {"psr/log": True}

    def test_autoload_paths(self, tmp_path):
        """Test that every autoload type contributes absolute paths."""
        root = tmp_path.resolve()
        path = write_composer_json(
            tmp_path,
            {
                "require": {"psr/log": "*"},
                "autoload": {
                    "psr-4": {"App\\": "src/", "Lib\\": ["lib", "lib2"]},
                    "psr-0": {"Legacy_": "legacy"},
                    "files": ["helpers.php"],
                    "classmap": ["extra"],
                },
                "autoload-dev": {"psr-4": {"App\\Tests\\": "tests/"}},
            },
        )

        composer_json = ComposerJson(path)

        assert composer_json.autoload_paths == {
            str(root / "src"): False,
            str(root / "lib"): False,
            str(root / "lib2"): False,
            str(root / "legacy"): False,
            str(root / "helpers.php"): False,
            str(root / "extra"): False,
            str(root / "tests"): True,
        }

    def test_vendor_dir(self, tmp_path):
        """Test default and custom vendor directories."""
        default = ComposerJson(write_composer_json(tmp_path, {"require": {"a/b": "*"}}))
        assert default.vendor_dir == str(tmp_path.resolve() / "vendor")

        custom = ComposerJson(
            write_composer_json(
                tmp_path, {"require": {"a/b": "*"}, "config": {"vendor-dir": "libs"}}
            )
        )
        assert custom.vendor_dir == str(tmp_path.resolve() / "libs")

    def test_empty_sections_written_as_lists(self, tmp_path):
        """Test that [] is accepted for empty objects."""
        path = write_composer_json(tmp_path, {"require": {"a/b": "*"}, "autoload": []})

        assert ComposerJson(path).autoload_paths == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidPathError):
            ComposerJson(str(tmp_path / "composer.json"))

    def test_invalid_json(self, tmp_path):
        with pytest.raises(InvalidConfigError):
            ComposerJson(write_composer_json(tmp_path, "{not json"))

    def test_no_packages(self, tmp_path):
        """Test that a manifest without packages is rejected."""
        with pytest.raises(InvalidConfigError, match="No packages found"):
            ComposerJson(write_composer_json(tmp_path, {"require": {"php": "^8.1"}}))
