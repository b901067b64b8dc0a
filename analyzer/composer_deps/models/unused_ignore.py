"""Ignore rules reported back because they never suppressed anything."""

from dataclasses import dataclass, asdict
from typing import Optional

from .error_type import ErrorType
from .symbol import SymbolKind


@dataclass(frozen=True)
class UnusedErrorIgnore:
    """An error-type rule that matched no finding.

    Attributes:
        error_type: The suppressed finding category.
        path: Path scope of the rule, or None for global and package rules.
        package: Package scope of the rule, or None.
    """

    error_type: ErrorType
    path: Optional[str] = None
    package: Optional[str] = None

    def to_dict(self) -> dict:
        result = asdict(self)
        result["error_type"] = self.error_type.value
        return result


@dataclass(frozen=True)
class UnusedSymbolIgnore:
    """A symbol rule (exact name or regex) that matched no unknown symbol.

    Attributes:
        symbol: The name or regular expression from configuration.
        is_regex: Whether symbol is a regular expression.
        kind: Symbol table the rule applies to.
    """

    symbol: str
    is_regex: bool
    kind: SymbolKind

    def to_dict(self) -> dict:
        result = asdict(self)
        result["kind"] = self.kind.value
        return result
