"""Tests for loading Python configuration files."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from composer_deps.config.configuration import Configuration
from composer_deps.config.loader import load_configuration
from composer_deps.exceptions import InvalidConfigError, InvalidPathError


class TestLoadConfiguration:
    """Test suite for load_configuration()."""

    def test_loads_config_variable(self, tmp_path):
        """Test that the module-level config object is returned."""
        (tmp_path / "bin").mkdir()
        config_file = tmp_path / "composer-deps.py"
        config_file.write_text(
            "from pathlib import Path\n"
            "from composer_deps.config import Configuration\n"
            "\n"
            "config = (\n"
            "    Configuration()\n"
            "    .add_path_to_scan(str(Path(__file__).parent / 'bin'), is_dev=False)\n"
            "    .ignore_errors(['unused-dependency'])\n"
            ")\n"
        )

        config = load_configuration(str(config_file))

        assert isinstance(config, Configuration)
        assert [path.path for path in config.paths_to_scan] == [str((tmp_path / "bin").resolve())]

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidPathError):
            load_configuration(str(tmp_path / "composer-deps.py"))

    def test_missing_config_variable(self, tmp_path):
        config_file = tmp_path / "composer-deps.py"
        config_file.write_text("settings = {}\n")

        with pytest.raises(InvalidConfigError, match="must define a 'config' variable"):
            load_configuration(str(config_file))

    def test_exception_while_executing(self, tmp_path):
        """Test that arbitrary errors are wrapped with the file name."""
        config_file = tmp_path / "composer-deps.py"
        config_file.write_text("raise ValueError('boom')\n")

        with pytest.raises(InvalidConfigError, match="boom"):
            load_configuration(str(config_file))

    def test_analyzer_errors_pass_through(self, tmp_path):
        """Test that configuration errors raised by the file keep their type."""
        config_file = tmp_path / "composer-deps.py"
        config_file.write_text(
            "from composer_deps.config import Configuration\n"
            "config = Configuration().add_path_to_scan('/definitely/missing', is_dev=False)\n"
        )

        with pytest.raises(InvalidPathError):
            load_configuration(str(config_file))
