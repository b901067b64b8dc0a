"""Extraction of the functions, constants and class-likes a PHP file declares.

Composer registers files listed under ``autoload.files`` by including them
eagerly, so their declarations never appear in the classmap. Scanning those
files tells which package provides each such function or constant.
"""

from typing import Dict, Optional, Sequence, Set

from ..models.symbol import SymbolKind
from .symbol_extractor import merge_name_runs
from .tokenizer import TRIVIA, TYPE_KEYWORDS, Token, TokenKind, tokenize

DeclaredSymbols = Dict[SymbolKind, Set[str]]


class DeclaredSymbolExtractor:
    """Collects top-level declarations of one PHP file.

    Functions declared inside a conditional block (the usual polyfill
    ``if (!function_exists('foo')) { function foo() {} }``) count as
    declarations; methods do not.
    """

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens = [
            token
            for token in merge_name_runs(tokens)
            if token.kind not in TRIVIA
            and token.kind not in (TokenKind.INLINE_HTML, TokenKind.OPEN_TAG)
        ]

    @classmethod
    def from_source(cls, source: str) -> "DeclaredSymbolExtractor":
        return cls(tokenize(source))

    def parse_declared_symbols(self) -> DeclaredSymbols:
        """Return declared names by kind, fully qualified."""
        declared: DeclaredSymbols = {kind: set() for kind in SymbolKind}
        tokens = self.tokens
        namespace = ""
        scope_depth = 0
        type_body_depth: Optional[int] = None

        index = 0
        while index < len(tokens):
            token = tokens[index]
            previous = self._kind_at(index - 1)
            following = self._token_at(index + 1)
            member = previous in (
                TokenKind.DOUBLE_COLON,
                TokenKind.OBJECT_OPERATOR,
                TokenKind.NULLSAFE_OBJECT_OPERATOR,
            )

            if token.kind is TokenKind.NAMESPACE and not member:
                if following is not None and following.kind in (
                    TokenKind.NAME,
                    TokenKind.NAME_QUALIFIED,
                ):
                    namespace = following.text
                    index += 2
                    continue
                namespace = ""

            elif token.kind in TYPE_KEYWORDS and not member and previous is not TokenKind.CONST:
                if type_body_depth is None:
                    type_body_depth = scope_depth + 1
                if following is not None and following.kind is TokenKind.NAME and previous is not TokenKind.NEW:
                    declared[SymbolKind.CLASSLIKE].add(self._qualify(namespace, following.text))

            elif token.kind is TokenKind.USE and type_body_depth is None:
                # imports name symbols of other files
                while index < len(tokens) and tokens[index].text != ";":
                    index += 1

            elif token.kind is TokenKind.FUNCTION and type_body_depth is None:
                name_index = index + 2 if self._text_at(index + 1) == "&" else index + 1
                name = self._token_at(name_index)
                if name is not None and name.kind is TokenKind.NAME:
                    declared[SymbolKind.FUNCTION].add(self._qualify(namespace, name.text))

            elif token.kind is TokenKind.CONST and type_body_depth is None:
                index = self._parse_const_statement(index + 1, namespace, declared)
                continue

            elif token.kind is TokenKind.NAME and token.text.lower() == "define" and not member:
                constant = self._define_argument(index)
                if constant is not None:
                    declared[SymbolKind.CONSTANT].add(constant)

            elif token.kind is TokenKind.OPERATOR:
                if token.text == "{":
                    scope_depth += 1
                elif token.text == "}":
                    if type_body_depth is not None and scope_depth == type_body_depth:
                        type_body_depth = None
                    scope_depth = max(scope_depth - 1, 0)

            index += 1

        return declared

    def _parse_const_statement(self, index: int, namespace: str, declared: DeclaredSymbols) -> int:
        """Register ``const A = 1, B = [2, 3];`` and return the index after it."""
        depth = 0
        expect_name = True
        while index < len(self.tokens):
            token = self.tokens[index]
            if expect_name and token.kind is TokenKind.NAME:
                declared[SymbolKind.CONSTANT].add(self._qualify(namespace, token.text))
                expect_name = False
            elif token.text in ("(", "[", "{"):
                depth += 1
            elif token.text in (")", "]", "}"):
                depth -= 1
            elif token.text == "," and depth == 0:
                expect_name = True
            elif token.text == ";" and depth == 0:
                return index + 1
            index += 1
        return index

    def _define_argument(self, index: int) -> Optional[str]:
        # define('NAME', value) always declares a global constant
        if self._text_at(index + 1) != "(":
            return None
        argument = self._token_at(index + 2)
        if argument is None or argument.kind is not TokenKind.STRING:
            return None
        if argument.text[:1] not in ("'", '"') or self._text_at(index + 3) != ",":
            return None
        return argument.text[1:-1].replace("\\\\", "\\").lstrip("\\")

    @staticmethod
    def _qualify(namespace: str, name: str) -> str:
        return f"{namespace}\\{name}" if namespace else name

    def _token_at(self, index: int) -> Optional[Token]:
        if 0 <= index < len(self.tokens):
            return self.tokens[index]
        return None

    def _kind_at(self, index: int) -> Optional[TokenKind]:
        token = self._token_at(index)
        return token.kind if token is not None else None

    def _text_at(self, index: int) -> str:
        token = self._token_at(index)
        return token.text if token is not None else ""
