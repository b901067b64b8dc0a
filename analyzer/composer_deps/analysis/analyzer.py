"""Core dependency analyzer with dependency injection."""

import logging
import os
from dataclasses import replace
from typing import Dict, Iterator, List, Optional, Set, Tuple

from ..autoload.classmap import Classmap
from ..config.configuration import Configuration, PathToScan
from ..exceptions import InvalidPathError
from ..models.analysis_result import AnalysisResult, PackageUsages, SymbolUsages
from ..models.error_type import ErrorType
from ..models.symbol import SymbolKind, SymbolUsage
from ..parsers.base_parser import BaseParser
from ..utils.path import is_within
from .php_builtins import CORE_EXTENSIONS, extension_of, is_builtin
from .stopwatch import Stopwatch

logger = logging.getLogger(__name__)

FORCE_USED_KINDS = (SymbolKind.FUNCTION, SymbolKind.CONSTANT, SymbolKind.CLASSLIKE)


class DependencyAnalyzer:
    """Classifies the symbol usages of a project against its composer.json.

    This class coordinates the analysis workflow by discovering files,
    dispatching them to the parser, attributing every used symbol to a
    package through the classmap, and bucketing the results into findings.
    It uses dependency injection for all major components to enable
    testability.

    Attributes:
        parser: Parser extracting used symbols from one file.
        classmap: Symbol locations and package attribution.
        config: Scan paths, exclusions and ignore rules.
        dependencies: Declared packages, name -> True for require-dev.
    """

    def __init__(
        self,
        parser: BaseParser,
        classmap: Classmap,
        config: Configuration,
        dependencies: Dict[str, bool],
        stopwatch: Optional[Stopwatch] = None,
    ) -> None:
        """Initialize the analyzer with injected dependencies.

        Args:
            parser: Parser used for every scanned file.
            classmap: Classmap built from Composer's autoload metadata.
            config: Run configuration.
            dependencies: Package name -> is dev dependency, as declared in
                composer.json.
            stopwatch: Optional Stopwatch (creates default if None).
        """
        self.parser = parser
        self.classmap = classmap
        self.config = config
        self.dependencies = dependencies
        self.stopwatch = stopwatch or Stopwatch()

    def analyze(self) -> AnalysisResult:
        """Scan every configured path and classify what was found.

        Returns:
            AnalysisResult with every bucket sorted.

        Raises:
            InvalidPathError: If a file to scan cannot be listed or read. The
                whole run is aborted, since a skipped file could hide a real
                dependency problem. The stopwatch is stopped either way.
        """
        self.stopwatch.start()
        try:
            result = self._analyze()
        finally:
            elapsed = self.stopwatch.stop()

        logger.debug("Scanned %d files in %.3f s", result.scanned_files_count, elapsed)
        return replace(result, elapsed_time=elapsed)

    def _analyze(self) -> AnalysisResult:
        ignore_list = self.config.get_ignore_list()
        scanned_files_count = 0
        usages: PackageUsages = {}
        unknown_classes: SymbolUsages = {}
        unknown_functions: SymbolUsages = {}
        shadow_errors: PackageUsages = {}
        dev_in_prod_errors: PackageUsages = {}
        used_packages: Set[str] = set()
        packages_used_in_prod: Set[str] = set()

        for file_path, is_dev in self.iter_files_to_scan():
            scanned_files_count += 1
            used_symbols = self.parser.parse_file(file_path)

            for kind in SymbolKind:
                for name, lines in used_symbols.get(kind, {}).items():
                    if is_builtin(name, kind):
                        continue

                    symbol_usages = [SymbolUsage(file_path, line, kind) for line in lines]
                    package = extension_of(name, kind)

                    if package is None:
                        symbol_path = self.classmap.locate(name, kind)

                        if symbol_path is None:
                            if kind is SymbolKind.CLASSLIKE:
                                if not ignore_list.should_ignore_unknown_class(name, file_path):
                                    unknown_classes.setdefault(name, []).extend(symbol_usages)
                            elif kind is SymbolKind.FUNCTION:
                                if not ignore_list.should_ignore_unknown_function(name, file_path):
                                    unknown_functions.setdefault(name, []).extend(symbol_usages)
                            continue

                        if not self.classmap.is_vendor_path(symbol_path):
                            continue  # local symbol

                        package = self.classmap.package_of(symbol_path)

                    if package not in self.dependencies and not ignore_list.should_ignore_error(
                        ErrorType.SHADOW_DEPENDENCY, file_path, package
                    ):
                        _add(shadow_errors, package, name, symbol_usages)

                    if (
                        not is_dev
                        and self.dependencies.get(package) is True
                        and not ignore_list.should_ignore_error(
                            ErrorType.DEV_DEPENDENCY_IN_PROD, file_path, package
                        )
                    ):
                        _add(dev_in_prod_errors, package, name, symbol_usages)

                    if not is_dev and self.dependencies.get(package) is False:
                        packages_used_in_prod.add(package)

                    used_packages.add(package)
                    _add(usages, package, name, symbol_usages)

        force_used_packages = self._force_used_packages()
        used_packages |= force_used_packages

        if self.config.should_report_unused_dev_dependencies:
            candidates = list(self.dependencies)
        else:
            # dev dependencies are typically used only in CI
            candidates = [name for name, is_dev in self.dependencies.items() if not is_dev]
        unused_packages = [
            package
            for package in candidates
            if package not in used_packages and package not in CORE_EXTENSIONS
        ]
        unused_errors = [
            package
            for package in unused_packages
            if not ignore_list.should_ignore_error(ErrorType.UNUSED_DEPENDENCY, None, package)
        ]

        prod_only_in_dev = [
            package
            for package, is_dev in self.dependencies.items()
            if not is_dev
            and package not in packages_used_in_prod
            and package not in force_used_packages
            and package not in unused_packages
            and package not in CORE_EXTENSIONS
        ]
        prod_only_in_dev_errors = [
            package
            for package in prod_only_in_dev
            if not ignore_list.should_ignore_error(
                ErrorType.PROD_DEPENDENCY_ONLY_IN_DEV, None, package
            )
        ]

        return AnalysisResult(
            scanned_files_count=scanned_files_count,
            elapsed_time=0.0,
            usages=_sort_packages(usages),
            unknown_class_errors=_sort_symbols(unknown_classes),
            unknown_function_errors=_sort_symbols(unknown_functions),
            shadow_dependency_errors=_sort_packages(shadow_errors),
            dev_dependency_in_production_errors=_sort_packages(dev_in_prod_errors),
            prod_dependency_only_in_dev_errors=sorted(prod_only_in_dev_errors),
            unused_dependency_errors=sorted(unused_errors),
            unused_ignores=ignore_list.unused_ignores(),
        )

    def iter_files_to_scan(self) -> Iterator[Tuple[str, bool]]:
        """Lazily yield (file path, is dev) for every file to scan.

        Scan paths are walked in configuration order. A file reachable from
        several scan paths is yielded once, flagged by the most specific
        (longest) scan path containing it, so overlapping composer.json
        autoload sections never scan a file twice.
        """
        scan_paths = self.config.paths_to_scan
        seen: Set[str] = set()

        for inner in scan_paths:
            for outer in scan_paths:
                if inner.path != outer.path and is_within(inner.path, outer.path):
                    logger.debug("Scan path %s is nested in %s", inner.path, outer.path)

        for scan_path in scan_paths:
            for file_path in self._discover_files(scan_path.path):
                if file_path in seen or self.config.is_excluded_filepath(file_path):
                    continue
                seen.add(file_path)
                yield file_path, self._owning_scan_path(file_path, scan_paths, scan_path).is_dev

    def _discover_files(self, path: str) -> Iterator[str]:
        """Discover all scannable files in a directory tree.

        Args:
            path: File or directory to search. A file is yielded as is,
                regardless of its extension.

        Returns:
            Iterator over absolute file paths, in sorted order per directory.
        """
        if os.path.isfile(path):
            yield path
            return
        if not os.path.isdir(path):
            raise InvalidPathError(f"Unable to list files in {path}")

        extensions = {f".{extension}" for extension in self.config.file_extensions}

        def fail(error: OSError) -> None:
            raise InvalidPathError(f"Unable to list files in {error.filename}") from error

        for root, dirs, filenames in os.walk(path, onerror=fail):
            dirs.sort()  # deterministic traversal
            for filename in sorted(filenames):
                if os.path.splitext(filename)[1] in extensions:
                    yield os.path.join(root, filename)

    @staticmethod
    def _owning_scan_path(
        file_path: str, scan_paths: List[PathToScan], found_in: PathToScan
    ) -> PathToScan:
        owner = found_in
        for scan_path in scan_paths:
            if not is_within(file_path, scan_path.path):
                continue
            if len(scan_path.path) >= len(owner.path):
                owner = scan_path
        return owner

    def _force_used_packages(self) -> Set[str]:
        packages: Set[str] = set()
        for symbol in self.config.force_used_symbols:
            if any(is_builtin(symbol, kind) for kind in SymbolKind):
                continue
            extensions = [extension_of(symbol, kind) for kind in FORCE_USED_KINDS]
            extension = next((name for name in extensions if name is not None), None)
            if extension is not None:
                packages.add(extension)
                continue
            symbol_path = self.classmap.locate(symbol)
            if symbol_path is None or not self.classmap.is_vendor_path(symbol_path):
                continue
            packages.add(self.classmap.package_of(symbol_path))
        return packages


def _add(bucket: PackageUsages, package: str, name: str, symbol_usages: List[SymbolUsage]) -> None:
    bucket.setdefault(package, {}).setdefault(name, []).extend(symbol_usages)


def _sort_symbols(bucket: SymbolUsages) -> SymbolUsages:
    return {
        name: sorted(bucket[name], key=SymbolUsage.sort_key)
        for name in sorted(bucket)
    }


def _sort_packages(bucket: PackageUsages) -> PackageUsages:
    return {package: _sort_symbols(bucket[package]) for package in sorted(bucket)}
