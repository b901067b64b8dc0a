"""Suppression rules with per-run usage tracking."""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Pattern, Tuple, Union

from ..exceptions import InvalidConfigError
from ..models.error_type import ErrorType
from ..models.symbol import SymbolKind
from ..models.unused_ignore import UnusedErrorIgnore, UnusedSymbolIgnore
from ..utils.path import is_within


@dataclass
class _ErrorRule:
    error_type: ErrorType
    path: Optional[str] = None
    package: Optional[str] = None
    triggered: bool = False


@dataclass
class _SymbolRule:
    symbol: str
    kind: SymbolKind
    pattern: Optional[Pattern[str]] = None
    triggered: bool = False

    @property
    def is_regex(self) -> bool:
        return self.pattern is not None

    def matches(self, name: str) -> bool:
        if self.pattern is not None:
            return self.pattern.search(name) is not None
        if self.kind is SymbolKind.FUNCTION:
            return self.symbol.lower() == name.lower()
        return self.symbol == name


@dataclass
class IgnoreRules:
    """Declarative ignore configuration, copied into a fresh IgnoreList per run.

    Attributes:
        errors: Error types ignored everywhere.
        on_path: Path -> error types ignored for findings under that path.
        on_package: Package -> error types ignored for that package.
        on_package_and_path: (package, path) -> error types.
        unknown_classes: Exact class names never reported unknown.
        unknown_class_regexes: Regexes of class names never reported unknown.
        unknown_functions: Exact function names never reported unknown.
        unknown_function_regexes: Regexes of function names never reported
            unknown.
    """

    errors: List[ErrorType] = field(default_factory=list)
    on_path: Dict[str, List[ErrorType]] = field(default_factory=dict)
    on_package: Dict[str, List[ErrorType]] = field(default_factory=dict)
    on_package_and_path: Dict[Tuple[str, str], List[ErrorType]] = field(default_factory=dict)
    unknown_classes: List[str] = field(default_factory=list)
    unknown_class_regexes: List[str] = field(default_factory=list)
    unknown_functions: List[str] = field(default_factory=list)
    unknown_function_regexes: List[str] = field(default_factory=list)


class IgnoreList:
    """Answers whether a finding is suppressed and remembers which rules fired.

    Every scope is evaluated for every question (global, path, package,
    package and path, symbol), and every rule that matches is marked as
    triggered, so that a rule shadowed by a broader one is not reported as
    unused. Among path rules only the most specific one fires: the longest
    matching path, or the first declared one when several paths have the
    same length.

    A marked rule is never unmarked; unused_ignores() lists the rules that
    never fired during the run.
    """

    def __init__(self, rules: IgnoreRules) -> None:
        self._global = [_ErrorRule(error_type) for error_type in _unique(rules.errors)]
        self._on_path = [
            _ErrorRule(error_type, path=path)
            for path, error_types in rules.on_path.items()
            for error_type in _unique(error_types)
        ]
        self._on_package = [
            _ErrorRule(error_type, package=package)
            for package, error_types in rules.on_package.items()
            for error_type in _unique(error_types)
        ]
        self._on_package_and_path = [
            _ErrorRule(error_type, path=path, package=package)
            for (package, path), error_types in rules.on_package_and_path.items()
            for error_type in _unique(error_types)
        ]
        self._symbols = (
            [_SymbolRule(name, SymbolKind.CLASSLIKE) for name in _unique(rules.unknown_classes)]
            + [
                _SymbolRule(regex, SymbolKind.CLASSLIKE, compile_regex(regex))
                for regex in _unique(rules.unknown_class_regexes)
            ]
            + [_SymbolRule(name, SymbolKind.FUNCTION) for name in _unique(rules.unknown_functions)]
            + [
                _SymbolRule(regex, SymbolKind.FUNCTION, compile_regex(regex))
                for regex in _unique(rules.unknown_function_regexes)
            ]
        )

    def should_ignore_error(
        self,
        error_type: ErrorType,
        file_path: Optional[str] = None,
        package: Optional[str] = None,
    ) -> bool:
        """Whether a finding of error_type is suppressed.

        Args:
            error_type: Category of the finding.
            file_path: Absolute path of the file the finding comes from, if
                the finding is tied to a file.
            package: Package the finding is about, if any.

        Returns:
            True when at least one rule matched.
        """
        matched = [
            self._fire(self._global, lambda rule: rule.error_type is error_type),
            file_path is not None and self._fire_on_path(self._on_path, error_type, file_path),
            package is not None
            and self._fire(
                self._on_package,
                lambda rule: rule.error_type is error_type and rule.package == package,
            ),
            file_path is not None
            and package is not None
            and self._fire_on_path(
                [rule for rule in self._on_package_and_path if rule.package == package],
                error_type,
                file_path,
            ),
        ]
        return any(matched)

    def should_ignore_unknown_class(self, name: str, file_path: str) -> bool:
        """Whether an unknown class-like found in file_path is suppressed."""
        return self._should_ignore_unknown(
            ErrorType.UNKNOWN_CLASS, SymbolKind.CLASSLIKE, name, file_path
        )

    def should_ignore_unknown_function(self, name: str, file_path: str) -> bool:
        """Whether an unknown function found in file_path is suppressed."""
        return self._should_ignore_unknown(
            ErrorType.UNKNOWN_FUNCTION, SymbolKind.FUNCTION, name, file_path
        )

    def should_ignore_symbol(self, name: str, kind: SymbolKind) -> bool:
        """Whether a symbol rule matches name; marks every matching rule."""
        return self._fire(
            self._symbols, lambda rule: rule.kind is kind and rule.matches(name)
        )

    def unused_ignores(self) -> List[Union[UnusedErrorIgnore, UnusedSymbolIgnore]]:
        """Return every rule that never fired, in declaration order per scope."""
        unused: List[Union[UnusedErrorIgnore, UnusedSymbolIgnore]] = []
        for rules in (self._global, self._on_path, self._on_package, self._on_package_and_path):
            unused.extend(
                UnusedErrorIgnore(rule.error_type, rule.path, rule.package)
                for rule in rules
                if not rule.triggered
            )
        unused.extend(
            UnusedSymbolIgnore(rule.symbol, rule.is_regex, rule.kind)
            for rule in self._symbols
            if not rule.triggered
        )
        return unused

    def _should_ignore_unknown(
        self, error_type: ErrorType, kind: SymbolKind, name: str, file_path: str
    ) -> bool:
        by_error = self.should_ignore_error(error_type, file_path)
        by_symbol = self.should_ignore_symbol(name, kind)
        return by_error or by_symbol

    @staticmethod
    def _fire(rules: Iterable, predicate) -> bool:
        fired = False
        for rule in rules:
            if predicate(rule):
                rule.triggered = True
                fired = True
        return fired

    @staticmethod
    def _fire_on_path(rules: List[_ErrorRule], error_type: ErrorType, file_path: str) -> bool:
        candidates = [
            rule
            for rule in rules
            if rule.error_type is error_type and is_within(file_path, rule.path)
        ]
        if not candidates:
            return False
        # max() keeps the first of equally long paths
        most_specific = max(candidates, key=lambda rule: len(rule.path))
        most_specific.triggered = True
        return True


def compile_regex(regex: str) -> Pattern[str]:
    """Compile a symbol regex, reporting invalid ones as configuration errors."""
    try:
        return re.compile(regex)
    except re.error as e:
        raise InvalidConfigError(f"Invalid regex '{regex}': {e}") from e


def _unique(values: Iterable) -> list:
    return list(dict.fromkeys(values))
