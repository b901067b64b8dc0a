"""Fluent configuration of an analysis run."""

from dataclasses import dataclass
from typing import Iterable, List, Union

from ..exceptions import InvalidConfigError
from ..models.error_type import ErrorType
from ..utils.path import is_within, realpath
from .ignore_list import IgnoreList, IgnoreRules, compile_regex

ErrorTypeLike = Union[ErrorType, str]


@dataclass(frozen=True)
class PathToScan:
    """A file or directory to scan.

    Attributes:
        path: Absolute, symlink-free path.
        is_dev: Whether code under this path only runs in development
            (tests, tooling), where require-dev packages are allowed.
    """

    path: str
    is_dev: bool


class Configuration:
    """Collects scan paths, exclusions and ignore rules.

    Every mutator returns the configuration itself so calls can be chained,
    which keeps config files short:

        config = (
            Configuration()
            .add_path_to_scan("bin", is_dev=False)
            .ignore_errors_on_package("psr/log", [ErrorType.UNUSED_DEPENDENCY])
        )

    Paths are resolved when added and must exist.
    """

    def __init__(self) -> None:
        self._scan_composer_autoload_paths = True
        self._report_unused_dev_dependencies = False
        self._report_unmatched_ignores = True
        self._file_extensions: List[str] = ["php"]
        self._force_used_symbols: List[str] = []
        self._paths_to_scan: List[PathToScan] = []
        self._paths_to_exclude: List[str] = []
        self._ignore_rules = IgnoreRules()

    def disable_composer_autoload_path_scan(self) -> "Configuration":
        """Do not add the autoload / autoload-dev paths of composer.json."""
        self._scan_composer_autoload_paths = False
        return self

    def disable_reporting_unmatched_ignores(self) -> "Configuration":
        self._report_unmatched_ignores = False
        return self

    def enable_analysis_of_unused_dev_dependencies(self) -> "Configuration":
        """Report unused require-dev packages too."""
        self._report_unused_dev_dependencies = True
        return self

    def set_file_extensions(self, extensions: Iterable[str]) -> "Configuration":
        self._file_extensions = [extension.lstrip(".") for extension in extensions]
        return self

    def add_force_used_symbol(self, symbol: str) -> "Configuration":
        """Count the package providing symbol as used even without a reference.

        Useful for packages only used through configuration or reflection.
        """
        self._force_used_symbols.append(symbol.lstrip("\\"))
        return self

    def add_force_used_symbols(self, symbols: Iterable[str]) -> "Configuration":
        for symbol in symbols:
            self.add_force_used_symbol(symbol)
        return self

    def add_path_to_scan(self, path: str, is_dev: bool) -> "Configuration":
        self._paths_to_scan.append(PathToScan(realpath(path), is_dev))
        return self

    def add_paths_to_scan(self, paths: Iterable[str], is_dev: bool) -> "Configuration":
        for path in paths:
            self.add_path_to_scan(path, is_dev)
        return self

    def add_path_to_exclude(self, path: str) -> "Configuration":
        self._paths_to_exclude.append(realpath(path))
        return self

    def add_paths_to_exclude(self, paths: Iterable[str]) -> "Configuration":
        for path in paths:
            self.add_path_to_exclude(path)
        return self

    def ignore_errors(self, error_types: Iterable[ErrorTypeLike]) -> "Configuration":
        """Ignore the given error types everywhere."""
        self._ignore_rules.errors.extend(_error_types(error_types))
        return self

    def ignore_errors_on_path(
        self, path: str, error_types: Iterable[ErrorTypeLike]
    ) -> "Configuration":
        """Ignore the given error types for findings in files under path.

        Raises:
            InvalidConfigError: For error types not tied to a file.
        """
        types = _error_types(error_types)
        _require_path_scoped(types)
        self._ignore_rules.on_path.setdefault(realpath(path), []).extend(types)
        return self

    def ignore_errors_on_paths(
        self, paths: Iterable[str], error_types: Iterable[ErrorTypeLike]
    ) -> "Configuration":
        types = _error_types(error_types)
        for path in paths:
            self.ignore_errors_on_path(path, types)
        return self

    def ignore_errors_on_package(
        self, package: str, error_types: Iterable[ErrorTypeLike]
    ) -> "Configuration":
        """Ignore the given error types for one package.

        Raises:
            InvalidConfigError: For unknown-symbol error types, which are never
                attributed to a package.
        """
        types = _error_types(error_types)
        _require_package_scoped(types)
        self._ignore_rules.on_package.setdefault(package, []).extend(types)
        return self

    def ignore_errors_on_packages(
        self, packages: Iterable[str], error_types: Iterable[ErrorTypeLike]
    ) -> "Configuration":
        types = _error_types(error_types)
        for package in packages:
            self.ignore_errors_on_package(package, types)
        return self

    def ignore_errors_on_package_and_path(
        self, package: str, path: str, error_types: Iterable[ErrorTypeLike]
    ) -> "Configuration":
        types = _error_types(error_types)
        _require_package_scoped(types)
        _require_path_scoped(types)
        key = (package, realpath(path))
        self._ignore_rules.on_package_and_path.setdefault(key, []).extend(types)
        return self

    def ignore_errors_on_package_and_paths(
        self, package: str, paths: Iterable[str], error_types: Iterable[ErrorTypeLike]
    ) -> "Configuration":
        types = _error_types(error_types)
        for path in paths:
            self.ignore_errors_on_package_and_path(package, path, types)
        return self

    def ignore_errors_on_packages_and_paths(
        self,
        packages: Iterable[str],
        paths: Iterable[str],
        error_types: Iterable[ErrorTypeLike],
    ) -> "Configuration":
        types = _error_types(error_types)
        paths = list(paths)
        for package in packages:
            self.ignore_errors_on_package_and_paths(package, paths, types)
        return self

    def ignore_unknown_classes(self, names: Iterable[str]) -> "Configuration":
        self._ignore_rules.unknown_classes.extend(name.lstrip("\\") for name in names)
        return self

    def ignore_unknown_classes_regex(self, regex: str) -> "Configuration":
        """Ignore unknown class-likes whose name matches regex (re.search)."""
        compile_regex(regex)
        self._ignore_rules.unknown_class_regexes.append(regex)
        return self

    def ignore_unknown_functions(self, names: Iterable[str]) -> "Configuration":
        self._ignore_rules.unknown_functions.extend(name.lstrip("\\") for name in names)
        return self

    def ignore_unknown_functions_regex(self, regex: str) -> "Configuration":
        """Ignore unknown functions whose name matches regex (re.search)."""
        compile_regex(regex)
        self._ignore_rules.unknown_function_regexes.append(regex)
        return self

    def get_ignore_list(self) -> IgnoreList:
        """Build a fresh IgnoreList; its usage tracking belongs to one run."""
        return IgnoreList(self._ignore_rules)

    @property
    def file_extensions(self) -> List[str]:
        return list(self._file_extensions)

    @property
    def force_used_symbols(self) -> List[str]:
        return list(self._force_used_symbols)

    @property
    def paths_to_scan(self) -> List[PathToScan]:
        return list(self._paths_to_scan)

    @property
    def paths_to_exclude(self) -> List[str]:
        return list(self._paths_to_exclude)

    @property
    def paths_with_ignore(self) -> List[str]:
        return list(self._ignore_rules.on_path)

    @property
    def should_scan_composer_autoload_paths(self) -> bool:
        return self._scan_composer_autoload_paths

    @property
    def should_report_unused_dev_dependencies(self) -> bool:
        return self._report_unused_dev_dependencies

    @property
    def should_report_unmatched_ignored_errors(self) -> bool:
        return self._report_unmatched_ignores

    def is_excluded_filepath(self, file_path: str) -> bool:
        return any(is_within(file_path, excluded) for excluded in self._paths_to_exclude)


def _error_types(values: Iterable[ErrorTypeLike]) -> List[ErrorType]:
    types = []
    for value in values:
        try:
            types.append(ErrorType(value))
        except ValueError as e:
            valid = ", ".join(error_type.value for error_type in ErrorType)
            raise InvalidConfigError(f"Unknown error type '{value}', expected one of: {valid}") from e
    return types


def _require_path_scoped(error_types: List[ErrorType]) -> None:
    for error_type in error_types:
        if not error_type.is_path_scoped:
            raise InvalidConfigError(f"{error_type.value} errors cannot be ignored on a path")


def _require_package_scoped(error_types: List[ErrorType]) -> None:
    for error_type in error_types:
        if not error_type.is_package_scoped:
            raise InvalidConfigError(f"{error_type.value} errors cannot be ignored on a package")
