"""Analysis module for orchestrating dependency analysis."""

from .analyzer import DependencyAnalyzer
from .stopwatch import Stopwatch

__all__ = ['DependencyAnalyzer', 'Stopwatch']
