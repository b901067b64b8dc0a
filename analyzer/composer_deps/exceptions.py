"""Exceptions raised when a run cannot proceed.

Findings about dependencies are never raised; they are collected in
AnalysisResult. These exceptions signal broken preconditions that abort the
whole run.
"""


class AnalyzerError(RuntimeError):
    """Base class for fatal analyzer errors."""


class InvalidPathError(AnalyzerError):
    """A required file or directory is missing, unreadable or misplaced."""


class InvalidConfigError(AnalyzerError):
    """composer.json, autoload metadata or the configuration is invalid."""


class InvalidCliError(AnalyzerError):
    """Command-line arguments cannot be honoured."""
