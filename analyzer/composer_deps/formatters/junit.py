"""JUnit XML report for CI systems."""

import sys
import xml.etree.ElementTree as ET
from typing import Dict, List, Union

from rich.console import Console

from ..config.configuration import Configuration
from ..models.analysis_result import AnalysisResult, PackageUsages, SymbolUsages
from ..models.symbol import SymbolKind
from ..models.unused_ignore import UnusedErrorIgnore, UnusedSymbolIgnore
from .base import FormatterOptions, ResultFormatter

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


class JunitFormatter(ResultFormatter):
    """Renders findings as ``<testsuites>``.

    Each finding bucket becomes a ``<testsuite>``, each symbol or package a
    ``<testcase>`` and each shown usage a ``<failure>``.
    """

    def __init__(self, cwd: str, console: Console) -> None:
        super().__init__(cwd)
        self.console = console

    def format(
        self,
        result: AnalysisResult,
        options: FormatterOptions,
        configuration: Configuration,
    ) -> int:
        root = self.build_xml(
            result,
            options.max_shown_usages(),
            configuration.should_report_unmatched_ignored_errors,
        )
        has_error = len(root) > 0

        ET.indent(root)
        xml = ET.tostring(root, encoding="unicode", short_empty_elements=False)
        self.console.out(f"{XML_DECLARATION}\n{xml}", highlight=False)
        return 1 if has_error else 0

    def build_xml(
        self, result: AnalysisResult, max_shown: int, report_unmatched_ignores: bool
    ) -> ET.Element:
        """Build the ``<testsuites>`` tree.

        Args:
            result: Analysis result to render.
            max_shown: Maximum usages shown per testcase.
            report_unmatched_ignores: Whether to add the ``unused-ignore`` suite.

        Returns:
            Root element; it has no children when nothing was reported.
        """
        root = ET.Element("testsuites")

        if result.unknown_class_errors:
            self._add_symbol_suite(root, "unknown classes", result.unknown_class_errors, max_shown)
        if result.unknown_function_errors:
            self._add_symbol_suite(root, "unknown functions", result.unknown_function_errors, max_shown)
        if result.shadow_dependency_errors:
            self._add_package_suite(root, "shadow dependencies", result.shadow_dependency_errors, max_shown)
        if result.dev_dependency_in_production_errors:
            self._add_package_suite(
                root,
                "dev dependencies in production code",
                result.dev_dependency_in_production_errors,
                max_shown,
            )
        if result.prod_dependency_only_in_dev_errors:
            self._add_package_suite(
                root,
                "prod dependencies used only in dev paths",
                {package: {} for package in result.prod_dependency_only_in_dev_errors},
                max_shown,
            )
        if result.unused_dependency_errors:
            self._add_package_suite(
                root,
                "unused dependencies",
                {package: {} for package in result.unused_dependency_errors},
                max_shown,
            )
        if result.unused_ignores and report_unmatched_ignores:
            self._add_unused_ignores_suite(root, result.unused_ignores)

        if len(root) > 0:
            root.append(ET.Comment(f" {_usages_comment(max_shown)} "))
        return root

    def _add_symbol_suite(
        self, root: ET.Element, title: str, errors: SymbolUsages, max_shown: int
    ) -> None:
        suite = _testsuite(root, title, len(errors))
        for symbol, usages in errors.items():
            testcase = ET.SubElement(suite, "testcase", name=symbol)
            for usage in usages[:max_shown]:
                ET.SubElement(testcase, "failure").text = self.relativize_usage(usage)

    def _add_package_suite(
        self,
        root: ET.Element,
        title: str,
        errors: Union[PackageUsages, Dict[str, SymbolUsages]],
        max_shown: int,
    ) -> None:
        suite = _testsuite(root, title, len(errors))
        for package, per_symbol in errors.items():
            testcase = ET.SubElement(suite, "testcase", name=package)
            printed = 0
            for symbol, usages in per_symbol.items():
                for usage in usages[:max_shown]:
                    failure = ET.SubElement(testcase, "failure", message=symbol)
                    failure.text = self.relativize_usage(usage)
                    printed += 1
                    if printed == max_shown:
                        break
                if printed == max_shown:
                    break

    def _add_unused_ignores_suite(
        self, root: ET.Element, unused_ignores: List[Union[UnusedErrorIgnore, UnusedSymbolIgnore]]
    ) -> None:
        suite = _testsuite(root, "unused-ignore", len(unused_ignores))
        for unused_ignore in unused_ignores:
            if isinstance(unused_ignore, UnusedSymbolIgnore):
                kind = "class" if unused_ignore.kind is SymbolKind.CLASSLIKE else "function"
                regex = " regex" if unused_ignore.is_regex else ""
                name = unused_ignore.symbol
                message = f"Unknown {kind}{regex} '{name}' was ignored, but it was never applied."
            else:
                name = unused_ignore.error_type.value
                message = f"'{name}' {self._ignore_scope(unused_ignore)}, but it was never applied."
            testcase = ET.SubElement(suite, "testcase", name=name)
            ET.SubElement(testcase, "failure").text = message

    def _ignore_scope(self, unused_ignore: UnusedErrorIgnore) -> str:
        package = unused_ignore.package
        path = self.relativize_path(unused_ignore.path) if unused_ignore.path else None
        if package is None and path is None:
            return "was globally ignored"
        if path is None:
            return f"was ignored for package '{package}'"
        if package is None:
            return f"was ignored for path '{path}'"
        return f"was ignored for package '{package}' and path '{path}'"


def _testsuite(root: ET.Element, title: str, failures: int) -> ET.Element:
    return ET.SubElement(root, "testsuite", name=title, failures=str(failures))


def _usages_comment(max_shown: int) -> str:
    if max_shown == sys.maxsize:
        return "showing all failure usages"
    if max_shown == 1:
        return "showing only first example failure usage"
    return f"showing only first {max_shown} example failure usages"
