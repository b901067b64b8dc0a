"""Tests for path helpers."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from composer_deps.exceptions import InvalidPathError
from composer_deps.utils import path as paths


class TestPathHelpers:
    """Test suite for utils.path."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("/app/./src//Foo", "/app/src/Foo"),
            ("/app/src/../lib/", "/app/lib"),
            ("/", "/"),
            ("relative/../x", "x"),
        ],
    )
    def test_normalize(self, raw, expected):
        assert paths.normalize(raw) == expected

    def test_resolve(self):
        """Test that absolute paths are kept and relative ones joined."""
        assert paths.resolve("/app", "src") == "/app/src"
        assert paths.resolve("/app", "/etc/x") == "/etc/x"
        assert paths.resolve("/app", "../lib") == "/lib"

    @pytest.mark.parametrize(
        "candidate, expected",
        [("/app", True), ("C:\\app", True), ("phar://x.phar/y", True), ("app", False)],
    )
    def test_is_absolute(self, candidate, expected):
        assert paths.is_absolute(candidate) is expected

    def test_is_within_respects_segment_boundaries(self):
        """Test that sibling directories sharing a prefix do not match."""
        assert paths.is_within("/app/src/Foo.php", "/app/src")
        assert paths.is_within("/app/src", "/app/src/")
        assert not paths.is_within("/app/src-legacy/Foo.php", "/app/src")

    def test_realpath_requires_existing_path(self, tmp_path):
        assert paths.realpath(str(tmp_path)) == str(tmp_path.resolve())
        with pytest.raises(InvalidPathError):
            paths.realpath(str(tmp_path / "missing"))
