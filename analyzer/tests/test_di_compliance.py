"""Tests for dependency injection compliance across the codebase.

This module verifies that components properly accept injected dependencies
rather than hardcoding instantiations, enabling testability and flexibility.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from composer_deps.analysis.analyzer import DependencyAnalyzer
from composer_deps.analysis.stopwatch import Stopwatch
from composer_deps.autoload.classmap import Classmap
from composer_deps.config.configuration import Configuration
from composer_deps.main import create_analyzer
from composer_deps.models.symbol import SymbolKind
from composer_deps.parsers.base_parser import BaseParser


class TestDependencyAnalyzerDI:
    """Test that DependencyAnalyzer accepts a custom parser and stopwatch."""

    def test_analyzer_with_mock_parser(self, tmp_path):
        """Verify DependencyAnalyzer works with an injected mock parser."""
        root = tmp_path.resolve()
        (root / "src").mkdir()
        test_file = root / "src" / "Service.php"
        test_file.write_text("<?php\n")

        mock_parser = MagicMock(spec=BaseParser)
        mock_parser.parse_file.return_value = {
            SymbolKind.CLASSLIKE: {"Psr\\Log\\NullLogger": [7]},
        }
        classmap = Classmap(
            [str(root / "vendor")],
            classes={"Psr\\Log\\NullLogger": str(root / "vendor/psr/log/src/NullLogger.php")},
        )
        config = Configuration().add_path_to_scan(str(root / "src"), is_dev=False)

        analyzer = DependencyAnalyzer(
            parser=mock_parser, classmap=classmap, config=config, dependencies={}
        )
        result = analyzer.analyze()

        mock_parser.parse_file.assert_called_once_with(str(test_file))
        assert list(result.shadow_dependency_errors) == ["psr/log"]
        usage = result.shadow_dependency_errors["psr/log"]["Psr\\Log\\NullLogger"][0]
        assert usage.line_number == 7

    def test_analyzer_with_custom_stopwatch(self, tmp_path):
        """Verify DependencyAnalyzer reports the injected stopwatch's time."""
        (tmp_path / "src").mkdir()
        mock_stopwatch = MagicMock(spec=Stopwatch)
        mock_stopwatch.stop.return_value = 1.5

        analyzer = DependencyAnalyzer(
            parser=MagicMock(spec=BaseParser),
            classmap=Classmap([str(tmp_path / "vendor")]),
            config=Configuration().add_path_to_scan(str(tmp_path / "src"), is_dev=False),
            dependencies={},
            stopwatch=mock_stopwatch,
        )
        result = analyzer.analyze()

        mock_stopwatch.start.assert_called_once()
        assert result.elapsed_time == 1.5
        assert result.scanned_files_count == 0


class TestFactoryFunctions:
    """Test that factory functions in main.py wire injected dependencies."""

    def test_create_analyzer_passes_dependencies(self):
        mock_parser = MagicMock(spec=BaseParser)
        classmap = Classmap(["/app/vendor"])
        config = Configuration()

        analyzer = create_analyzer(mock_parser, classmap, config, {"psr/log": False})

        assert analyzer.parser is mock_parser
        assert analyzer.classmap is classmap
        assert analyzer.config is config
        assert analyzer.dependencies == {"psr/log": False}
        assert isinstance(analyzer.stopwatch, Stopwatch)
