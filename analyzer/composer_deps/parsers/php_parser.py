"""PHP parser built on the lexical symbol extractor."""

import logging

from ..exceptions import InvalidPathError
from .base_parser import BaseParser
from .symbol_extractor import UsedSymbolExtractor, UsedSymbols

logger = logging.getLogger(__name__)


class PhpParser(BaseParser):
    """
    Parser for PHP source files.

    Reads the file, tokenizes it and runs UsedSymbolExtractor over the
    tokens. No syntax tree is built, so files with syntax errors are still
    scanned as far as their tokens allow.
    """

    def __init__(self, legacy_names: bool = False) -> None:
        """
        Parameters
        ----------
        legacy_names : bool
            Tokenize namespaced names as segment runs (PHP 7 token shape)
        """
        self.legacy_names = legacy_names

    def parse_file(self, filepath: str) -> UsedSymbols:
        """
        Parse a PHP file and extract used symbols.

        Parameters
        ----------
        filepath : str
            Path to the PHP source file

        Returns
        -------
        UsedSymbols
            Mapping of symbol kind to fully qualified name to line numbers

        Raises
        ------
        InvalidPathError
            If the file does not exist or cannot be read
        """
        source = read_source(filepath)
        logger.debug("Scanning %s", filepath)
        extractor = UsedSymbolExtractor.from_source(source, legacy_names=self.legacy_names)
        return extractor.parse_used_symbols()


def read_source(filepath: str) -> str:
    """Read a PHP file, failing loudly when it is missing or unreadable."""
    try:
        with open(filepath, encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError as e:
        raise InvalidPathError(f"Unable to read {filepath}: {e.strerror or e}") from e
