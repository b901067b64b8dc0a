"""Abstract base class for source file parsers."""

from abc import ABC, abstractmethod

from .symbol_extractor import UsedSymbols


class BaseParser(ABC):
    """
    Abstract base class defining the interface for source file parsers.

    Parser implementations extract every external symbol a file refers to,
    resolved to its fully qualified name.
    """

    @abstractmethod
    def parse_file(self, filepath: str) -> UsedSymbols:
        """
        Parse a source file and extract used symbols.

        Parameters
        ----------
        filepath : str
            Absolute path to the source file to parse

        Returns
        -------
        UsedSymbols
            Mapping of symbol kind to fully qualified name to line numbers

        Raises
        ------
        InvalidPathError
            If the file does not exist or cannot be read
        """
        pass
