"""Data models shared by the extractor, analyzer and formatters.

- SymbolKind: Kind of a referenced symbol (class-like, function, constant)
- SymbolUsage: One occurrence of a symbol in a scanned file
- ErrorType: Category of a dependency finding
- AnalysisResult: Sorted findings of one analysis run
- UnusedErrorIgnore / UnusedSymbolIgnore: Ignore rules that never fired
"""

from .analysis_result import AnalysisResult
from .error_type import ErrorType
from .symbol import SymbolKind, SymbolUsage
from .unused_ignore import UnusedErrorIgnore, UnusedSymbolIgnore

__all__ = [
    "AnalysisResult",
    "ErrorType",
    "SymbolKind",
    "SymbolUsage",
    "UnusedErrorIgnore",
    "UnusedSymbolIgnore",
]
