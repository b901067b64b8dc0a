"""Renderers turning an AnalysisResult into a report and an exit code."""

from .base import FormatterOptions, ResultFormatter
from .console import ConsoleFormatter
from .junit import JunitFormatter

__all__ = ["ConsoleFormatter", "FormatterOptions", "JunitFormatter", "ResultFormatter"]
