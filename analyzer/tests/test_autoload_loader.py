"""Tests for reading Composer's generated autoload files."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from composer_deps.autoload.loader import load_classmap, read_autoload_array
from composer_deps.exceptions import InvalidConfigError
from composer_deps.models.symbol import SymbolKind

CLASSMAP_PHP = """<?php

// autoload_classmap.php @generated by Composer

$vendorDir = dirname(__DIR__);
$baseDir = dirname($vendorDir);

return array(
    'App\\\\Kernel' => $baseDir . '/src/Kernel.php',
    'Composer\\\\InstalledVersions' => $vendorDir . '/composer/InstalledVersions.php',
    'Psr\\\\Log\\\\LoggerInterface' => $vendorDir . '/psr/log/src/LoggerInterface.php',
);
"""

PSR4_PHP = """<?php

// autoload_psr4.php @generated by Composer

$vendorDir = dirname(__DIR__);
$baseDir = dirname($vendorDir);

return array(
    'Monolog\\\\' => array($vendorDir . '/monolog/monolog/src/Monolog'),
    'App\\\\' => array($baseDir . '/src', $baseDir . '/lib'),
);
"""

FILES_PHP = """<?php

// autoload_files.php @generated by Composer

$vendorDir = dirname(__DIR__);
$baseDir = dirname($vendorDir);

return array(
    'a1b2c3d4' => $vendorDir . '/acme/util/src/functions.php',
    'deadbeef' => $vendorDir . '/acme/missing/src/gone.php',
);
"""

FUNCTIONS_PHP = """<?php
namespace Acme\\Util;

const VERSION = '1.0';

function format($value) {}
"""


class TestLoadClassmap:
    """Test suite for load_classmap()."""

    @pytest.fixture
    def project(self, tmp_path):
        """Create a project with a dumped vendor/composer directory."""
        root = tmp_path.resolve()
        composer_dir = root / "vendor" / "composer"
        composer_dir.mkdir(parents=True)
        (composer_dir / "autoload_classmap.php").write_text(CLASSMAP_PHP)
        (composer_dir / "autoload_psr4.php").write_text(PSR4_PHP)
        (composer_dir / "autoload_files.php").write_text(FILES_PHP)

        util_dir = root / "vendor" / "acme" / "util" / "src"
        util_dir.mkdir(parents=True)
        (util_dir / "functions.php").write_text(FUNCTIONS_PHP)
        return root

    def test_classes_are_resolved_against_vendor_and_base_dir(self, project):
        """Test $vendorDir and $baseDir substitution."""
        classmap = load_classmap(str(project / "vendor"))

        assert classmap.locate("App\\Kernel", SymbolKind.CLASSLIKE) == str(project / "src" / "Kernel.php")
        assert classmap.locate("Psr\\Log\\LoggerInterface", SymbolKind.CLASSLIKE) == str(
            project / "vendor" / "psr" / "log" / "src" / "LoggerInterface.php"
        )
        assert classmap.class_count == 3

    def test_autoloaded_files_provide_functions_and_constants(self, project):
        """Test that files-autoload entries are scanned for declarations."""
        classmap = load_classmap(str(project / "vendor"))
        functions_file = str(project / "vendor" / "acme" / "util" / "src" / "functions.php")

        assert classmap.locate("Acme\\Util\\format", SymbolKind.FUNCTION) == functions_file
        assert classmap.locate("Acme\\Util\\VERSION", SymbolKind.CONSTANT) == functions_file

    def test_missing_autoloaded_file_is_skipped_with_warning(self, project, caplog):
        """Test that a stale autoload_files.php entry does not abort."""
        with caplog.at_level("WARNING"):
            load_classmap(str(project / "vendor"))

        assert "gone.php" in caplog.text

    def test_psr4_prefixes(self, project):
        """Test that PSR-4 prefixes are used for files missing in the class map."""
        handler_dir = project / "vendor" / "monolog" / "monolog" / "src" / "Monolog"
        handler_dir.mkdir(parents=True)
        (handler_dir / "Logger.php").write_text("<?php\n")

        classmap = load_classmap(str(project / "vendor"))

        assert classmap.locate("Monolog\\Logger", SymbolKind.CLASSLIKE) == str(handler_dir / "Logger.php")

    def test_missing_classmap_file(self, tmp_path):
        """Test that an un-dumped vendor directory is a configuration error."""
        with pytest.raises(InvalidConfigError, match="dump-autoload"):
            load_classmap(str(tmp_path / "vendor"))


class TestReadAutoloadArray:
    """Test suite for read_autoload_array()."""

    def test_list_values(self, tmp_path):
        """Test that array(...) values become lists."""
        composer_dir = tmp_path / "vendor" / "composer"
        composer_dir.mkdir(parents=True)
        (composer_dir / "autoload_psr4.php").write_text(PSR4_PHP)
        vendor_dir = str(tmp_path / "vendor")

        entries = read_autoload_array(str(composer_dir / "autoload_psr4.php"), vendor_dir)

        assert entries == {
            "Monolog\\": [f"{vendor_dir}/monolog/monolog/src/Monolog"],
            "App\\": [f"{tmp_path}/src", f"{tmp_path}/lib"],
        }

    def test_dir_constant(self, tmp_path):
        """Test __DIR__ as used by autoload_static-style files."""
        file_path = tmp_path / "autoload_classmap.php"
        file_path.write_text("<?php\nreturn array(\n    'A' => __DIR__ . '/../a/A.php',\n);\n")

        entries = read_autoload_array(str(file_path), str(tmp_path))

        assert entries == {"A": str(tmp_path.parent / "a" / "A.php")}
