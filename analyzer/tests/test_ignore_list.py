"""Tests for IgnoreList matching and usage tracking."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from composer_deps.config.ignore_list import IgnoreList, IgnoreRules
from composer_deps.exceptions import InvalidConfigError
from composer_deps.models.error_type import ErrorType
from composer_deps.models.symbol import SymbolKind
from composer_deps.models.unused_ignore import UnusedErrorIgnore, UnusedSymbolIgnore

SHADOW = ErrorType.SHADOW_DEPENDENCY
UNUSED = ErrorType.UNUSED_DEPENDENCY


class TestIgnoreList:
    """Test suite for IgnoreList."""

    def test_global_rule(self):
        """Test that a global rule matches everywhere and is then used."""
        ignore_list = IgnoreList(IgnoreRules(errors=[SHADOW]))

        assert ignore_list.unused_ignores() == [UnusedErrorIgnore(SHADOW)]
        assert ignore_list.should_ignore_error(SHADOW, "/app/src/A.php", "psr/log")
        assert not ignore_list.should_ignore_error(UNUSED, None, "psr/log")
        assert ignore_list.unused_ignores() == []

    def test_path_rule_matches_only_below_its_path(self):
        """Test segment-aware path prefixes."""
        ignore_list = IgnoreList(IgnoreRules(on_path={"/app/src/legacy": [SHADOW]}))

        assert ignore_list.should_ignore_error(SHADOW, "/app/src/legacy/Old.php", "psr/log")
        assert not ignore_list.should_ignore_error(SHADOW, "/app/src/New.php", "psr/log")
        assert not ignore_list.should_ignore_error(SHADOW, "/app/src/legacy2/Old.php", "psr/log")
        assert not ignore_list.should_ignore_error(SHADOW, None, "psr/log")

    def test_most_specific_path_rule_fires(self):
        """Test that only the longest matching path rule is marked used."""
        ignore_list = IgnoreList(
            IgnoreRules(on_path={"/app": [SHADOW], "/app/src": [SHADOW]})
        )

        assert ignore_list.should_ignore_error(SHADOW, "/app/src/A.php", "psr/log")

        assert ignore_list.unused_ignores() == [UnusedErrorIgnore(SHADOW, path="/app")]

    def test_package_rule(self):
        ignore_list = IgnoreList(IgnoreRules(on_package={"psr/log": [UNUSED]}))

        assert ignore_list.should_ignore_error(UNUSED, None, "psr/log")
        assert not ignore_list.should_ignore_error(UNUSED, None, "monolog/monolog")

    def test_package_and_path_rule(self):
        """Test that both the package and the path must match."""
        ignore_list = IgnoreList(
            IgnoreRules(on_package_and_path={("psr/log", "/app/tests"): [SHADOW]})
        )

        assert ignore_list.should_ignore_error(SHADOW, "/app/tests/ATest.php", "psr/log")
        assert not ignore_list.should_ignore_error(SHADOW, "/app/src/A.php", "psr/log")
        assert not ignore_list.should_ignore_error(SHADOW, "/app/tests/ATest.php", "other/pkg")

    def test_every_matching_scope_is_marked_used(self):
        """Test that a narrower rule shadowed by a global one is not reported unused."""
        ignore_list = IgnoreList(
            IgnoreRules(
                errors=[SHADOW],
                on_path={"/app/src": [SHADOW]},
                on_package={"psr/log": [SHADOW]},
            )
        )

        ignore_list.should_ignore_error(SHADOW, "/app/src/A.php", "psr/log")

        assert ignore_list.unused_ignores() == []

    def test_unknown_symbol_rules(self):
        """Test exact and regex symbol rules per kind."""
        ignore_list = IgnoreList(
            IgnoreRules(
                unknown_classes=["Legacy\\Thing"],
                unknown_function_regexes=["^xdebug_"],
            )
        )

        assert ignore_list.should_ignore_unknown_class("Legacy\\Thing", "/app/a.php")
        assert not ignore_list.should_ignore_unknown_class("Legacy\\Other", "/app/a.php")
        assert ignore_list.should_ignore_unknown_function("xdebug_info", "/app/a.php")
        assert not ignore_list.should_ignore_unknown_function("Legacy\\Thing", "/app/a.php")

    def test_function_names_compare_case_insensitively(self):
        ignore_list = IgnoreList(IgnoreRules(unknown_functions=["My\\Helper"]))

        assert ignore_list.should_ignore_symbol("my\\helper", SymbolKind.FUNCTION)

    def test_unknown_class_error_rule_on_path(self):
        """Test that unknown-class errors can be ignored for a path."""
        ignore_list = IgnoreList(IgnoreRules(on_path={"/app/generated": [ErrorType.UNKNOWN_CLASS]}))

        assert ignore_list.should_ignore_unknown_class("Any\\Thing", "/app/generated/X.php")
        assert not ignore_list.should_ignore_unknown_class("Any\\Thing", "/app/src/X.php")

    def test_unused_ignores_report_every_kind(self):
        """Test that unused rules are listed per scope in declaration order."""
        ignore_list = IgnoreList(
            IgnoreRules(
                errors=[UNUSED],
                on_path={"/app/src": [SHADOW]},
                on_package={"psr/log": [UNUSED]},
                on_package_and_path={("psr/log", "/app/src"): [SHADOW]},
                unknown_classes=["A"],
                unknown_class_regexes=["^B"],
                unknown_functions=["c"],
            )
        )

        assert ignore_list.unused_ignores() == [
            UnusedErrorIgnore(UNUSED),
            UnusedErrorIgnore(SHADOW, path="/app/src"),
            UnusedErrorIgnore(UNUSED, package="psr/log"),
            UnusedErrorIgnore(SHADOW, path="/app/src", package="psr/log"),
            UnusedSymbolIgnore("A", False, SymbolKind.CLASSLIKE),
            UnusedSymbolIgnore("^B", True, SymbolKind.CLASSLIKE),
            UnusedSymbolIgnore("c", False, SymbolKind.FUNCTION),
        ]

    def test_duplicate_rules_are_reported_once(self):
        ignore_list = IgnoreList(IgnoreRules(errors=[SHADOW, SHADOW]))

        assert ignore_list.unused_ignores() == [UnusedErrorIgnore(SHADOW)]

    def test_each_list_tracks_usage_independently(self):
        """Test that two lists built from the same rules do not share state."""
        rules = IgnoreRules(errors=[SHADOW])
        first = IgnoreList(rules)
        second = IgnoreList(rules)

        first.should_ignore_error(SHADOW)

        assert first.unused_ignores() == []
        assert second.unused_ignores() == [UnusedErrorIgnore(SHADOW)]

    def test_invalid_regex(self):
        with pytest.raises(InvalidConfigError):
            IgnoreList(IgnoreRules(unknown_class_regexes=["("]))
