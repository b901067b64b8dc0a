"""Parser modules for extracting symbols from PHP source files."""

from .base_parser import BaseParser
from .declared_symbols import DeclaredSymbolExtractor
from .import_table import ImportTable
from .php_parser import PhpParser
from .symbol_extractor import UsedSymbolExtractor
from .tokenizer import Token, TokenKind, tokenize

__all__ = [
    'BaseParser',
    'DeclaredSymbolExtractor',
    'ImportTable',
    'PhpParser',
    'Token',
    'TokenKind',
    'UsedSymbolExtractor',
    'tokenize',
]
