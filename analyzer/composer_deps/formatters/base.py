"""Shared pieces of the result formatters."""

import os
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..config.configuration import Configuration
from ..models.analysis_result import AnalysisResult
from ..models.symbol import SymbolUsage

VERBOSE_SHOWN_USAGES = 3


@dataclass(frozen=True)
class FormatterOptions:
    """Output switches taken from the command line.

    Attributes:
        verbose: Show a few usages per finding instead of one.
        show_all_usages: Show every usage per finding.
        dump_usages: Package name pattern (fnmatch) whose usages to dump
            instead of reporting findings.
    """

    verbose: bool = False
    show_all_usages: bool = False
    dump_usages: Optional[str] = None

    def max_shown_usages(self) -> int:
        if self.show_all_usages:
            return sys.maxsize
        if self.verbose:
            return VERBOSE_SHOWN_USAGES
        return 1


class ResultFormatter(ABC):
    """Renders an AnalysisResult and decides the process exit code."""

    def __init__(self, cwd: str) -> None:
        self.cwd = cwd

    @abstractmethod
    def format(
        self,
        result: AnalysisResult,
        options: FormatterOptions,
        configuration: Configuration,
    ) -> int:
        """Write the report.

        Returns:
            Exit code: 1 when anything was reported, 0 otherwise.
        """

    def relativize_path(self, path: str) -> str:
        if path.startswith(self.cwd + os.sep):
            return path[len(self.cwd) + 1:]
        return path

    def relativize_usage(self, usage: SymbolUsage) -> str:
        return f"{self.relativize_path(usage.filepath)}:{usage.line_number}"


def pluralize(count: int, singular: str) -> str:
    """English plural of singular unless count is 1."""
    if count == 1:
        return singular
    if singular.endswith(("s", "x", "sh", "ch")):
        return singular + "es"
    if singular.endswith("y") and singular[-2:-1] not in ("a", "e", "i", "o", "u"):
        return singular[:-1] + "ies"
    return singular + "s"
