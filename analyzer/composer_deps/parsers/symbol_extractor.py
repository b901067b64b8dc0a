"""Extraction of used classes, functions and constants from PHP tokens.

The extractor is a single forward pass over the token stream. It never builds
a syntax tree; it tracks just enough state to resolve names the way PHP does:

- the ``use`` imports of the current namespace block (an ImportTable),
- the brace nesting depth, and the depth at which the current class-like body
  started, so that trait ``use`` inside a class body is not mistaken for an
  import,
- the current namespace, for ``namespace\\Foo`` relative names.

Only names that can be resolved to a fully qualified name are reported:
fully qualified names, qualified names (through an imported leading segment
when one exists), namespace-relative names, and bare names that match an
import. A bare name without an import is never reported, as it may just as
well refer to a symbol of the current namespace or a global fallback.
"""

from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from ..models.symbol import SymbolKind
from .import_table import ImportTable
from .tokenizer import NAME_KINDS, TRIVIA, TYPE_KEYWORDS, Token, TokenKind, tokenize

# kind -> fully qualified name -> line numbers, one entry per occurrence
UsedSymbols = Dict[SymbolKind, Dict[str, List[int]]]

_MEMBER_OPERATORS = frozenset(
    {
        TokenKind.DOUBLE_COLON,
        TokenKind.OBJECT_OPERATOR,
        TokenKind.NULLSAFE_OBJECT_OPERATOR,
    }
)

# A name right after one of these is declared or accessed, never referenced
_DECLARING_KINDS = _MEMBER_OPERATORS | TYPE_KEYWORDS | {
    TokenKind.FUNCTION,
    TokenKind.CONST,
    TokenKind.AS,
    TokenKind.NAMESPACE,
}

# A name right after one of these is always a class-like
_CLASS_CONTEXT_KINDS = frozenset(
    {
        TokenKind.NEW,
        TokenKind.INSTANCEOF,
        TokenKind.EXTENDS,
        TokenKind.IMPLEMENTS,
        TokenKind.INSTEADOF,
        TokenKind.USE,
        TokenKind.ATTRIBUTE,
    }
)

_SKIPPED_KINDS = TRIVIA | {TokenKind.INLINE_HTML, TokenKind.OPEN_TAG}


def merge_name_runs(tokens: Sequence[Token]) -> List[Token]:
    """Merge NAME / NS_SEPARATOR segment runs into compound name tokens.

    Older PHP runtimes tokenize ``Foo\\Bar`` as three tokens and allow
    whitespace and comments between the segments. Such runs are rewritten
    into the single-token shape (NAME_QUALIFIED, NAME_FULLY_QUALIFIED or
    NAME_RELATIVE) on the line of their first segment. Compound tokens and
    every other token pass through unchanged, so the function is safe to
    apply to either tokenization.

    Args:
        tokens: Raw token stream including trivia.

    Returns:
        New token list with every segment run merged.
    """
    result: List[Token] = []
    index = 0
    while index < len(tokens):
        merged = _merge_run_at(tokens, index)
        if merged is None:
            result.append(tokens[index])
            index += 1
        else:
            token, index = merged
            result.append(token)
    return result


def _merge_run_at(tokens: Sequence[Token], start: int) -> Optional[Tuple[Token, int]]:
    first = tokens[start]
    if first.kind is TokenKind.NAME:
        parts, kind, position = [first.text], TokenKind.NAME_QUALIFIED, start + 1
    elif first.kind is TokenKind.NS_SEPARATOR:
        parts, kind, position = [""], TokenKind.NAME_FULLY_QUALIFIED, start
    elif first.kind is TokenKind.NAMESPACE:
        parts, kind, position = [first.text], TokenKind.NAME_RELATIVE, start + 1
    else:
        return None

    segments = 0
    while True:
        separator = _skip_trivia(tokens, position)
        if separator >= len(tokens) or tokens[separator].kind is not TokenKind.NS_SEPARATOR:
            break
        name = _skip_trivia(tokens, separator + 1)
        if name >= len(tokens) or tokens[name].kind is not TokenKind.NAME:
            break
        parts.append(tokens[name].text)
        segments += 1
        position = name + 1

    if segments == 0:
        return None
    return Token(kind, "\\".join(parts), first.line), position


def _skip_trivia(tokens: Sequence[Token], index: int) -> int:
    while index < len(tokens) and tokens[index].kind in TRIVIA:
        index += 1
    return index


class UsedSymbolExtractor:
    """Finds every class, function and constant a PHP file refers to.

    Attributes:
        tokens: Significant tokens of the file (trivia and inline HTML
            removed, segment runs merged into compound names).
    """

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens = [
            token for token in merge_name_runs(tokens) if token.kind not in _SKIPPED_KINDS
        ]

    @classmethod
    def from_source(cls, source: str, legacy_names: bool = False) -> "UsedSymbolExtractor":
        """Tokenize source and build an extractor for it."""
        return cls(tokenize(source, legacy_names=legacy_names))

    def parse_used_symbols(self) -> UsedSymbols:
        """Collect every used symbol with all the lines it occurs on.

        Returns:
            Mapping of kind to fully qualified name to line numbers. Kinds
            without any usage are absent.
        """
        used: UsedSymbols = {}
        for kind, name, line in self.iter_used_symbols():
            used.setdefault(kind, {}).setdefault(name, []).append(line)
        return used

    def iter_used_symbols(self) -> Iterator[Tuple[SymbolKind, str, int]]:
        """Yield (kind, fully qualified name, line) for each reference, in order."""
        tokens = self.tokens
        imports = ImportTable()
        namespace = ""
        scope_depth = 0
        type_body_depth: Optional[int] = None
        # Inside "extends A, B" / "implements A, B" / trait "use A, B"
        heritage_list = False

        index = 0
        while index < len(tokens):
            token = tokens[index]
            kind = token.kind
            previous = self._kind_at(index - 1)

            if kind in TYPE_KEYWORDS:
                if (
                    type_body_depth is None
                    and previous not in _MEMBER_OPERATORS
                    and previous not in (TokenKind.CONST, TokenKind.FUNCTION)
                    and not self._is_named_argument(index)
                ):
                    type_body_depth = scope_depth + 1

            elif kind is TokenKind.USE:
                if self._text_at(index + 1) == "(":
                    pass  # closure "use ($x)"
                elif type_body_depth is None:
                    index = self._parse_use_statement(index + 1, imports)
                    continue
                else:
                    heritage_list = True

            elif kind is TokenKind.NAMESPACE:
                if previous not in _DECLARING_KINDS:
                    imports.reset()
                    following = self._token_at(index + 1)
                    if following is not None and following.kind in (
                        TokenKind.NAME,
                        TokenKind.NAME_QUALIFIED,
                    ):
                        namespace = following.text
                        index += 2
                        continue
                    namespace = ""

            elif kind in (TokenKind.EXTENDS, TokenKind.IMPLEMENTS):
                heritage_list = True

            elif kind in NAME_KINDS:
                occurrence = self._resolve_name(index, imports, namespace, heritage_list)
                if occurrence is not None:
                    yield occurrence[0], occurrence[1], token.line

            elif kind is TokenKind.OPERATOR:
                if token.text == "{":
                    scope_depth += 1
                    heritage_list = False
                elif token.text == "}":
                    if type_body_depth is not None and scope_depth == type_body_depth:
                        type_body_depth = None
                    scope_depth = max(scope_depth - 1, 0)
                elif token.text == ";":
                    heritage_list = False

            elif kind is TokenKind.CLOSE_TAG:
                heritage_list = False

            index += 1

    def _resolve_name(
        self,
        index: int,
        imports: ImportTable,
        namespace: str,
        heritage_list: bool,
    ) -> Optional[Tuple[SymbolKind, str]]:
        token = self.tokens[index]
        context = self._infer_kind(index, heritage_list)
        if context is None:
            return None
        kind, certain = context

        if token.kind is TokenKind.NAME_FULLY_QUALIFIED:
            return kind, token.text.lstrip("\\")

        if token.kind is TokenKind.NAME_RELATIVE:
            relative = token.text.split("\\", 1)[1]
            return kind, f"{namespace}\\{relative}" if namespace else relative

        if token.kind is TokenKind.NAME_QUALIFIED:
            return kind, imports.resolve(token.text, kind) or token.text

        candidates = [kind] if certain else [kind, SymbolKind.CLASSLIKE, SymbolKind.CONSTANT]
        for candidate in candidates:
            resolved = imports.resolve(token.text, candidate)
            if resolved is not None:
                return candidate, resolved
        return None

    def _infer_kind(self, index: int, heritage_list: bool) -> Optional[Tuple[SymbolKind, bool]]:
        """Guess the kind of the name at index from its neighbours.

        Returns:
            (kind, certain) or None when the name is a declaration, a member
            name, a named argument or a label rather than a reference.
        """
        previous = self._kind_at(index - 1)
        previous_text = self._text_at(index - 1)
        following = self._kind_at(index + 1)
        following_text = self._text_at(index + 1)

        if previous in _DECLARING_KINDS:
            return None
        if previous is TokenKind.KEYWORD and previous_text.lower() == "goto":
            return None
        if self._is_named_argument(index):
            return None

        if previous in _CLASS_CONTEXT_KINDS or heritage_list:
            return SymbolKind.CLASSLIKE, True
        if following is TokenKind.DOUBLE_COLON:
            return SymbolKind.CLASSLIKE, True
        if following_text == "(":
            return SymbolKind.FUNCTION, True
        if following in (TokenKind.VARIABLE, TokenKind.ELLIPSIS):
            return SymbolKind.CLASSLIKE, True
        if following_text == "&" and self._kind_at(index + 2) in (
            TokenKind.VARIABLE,
            TokenKind.ELLIPSIS,
        ):
            return SymbolKind.CLASSLIKE, True
        if previous_text == ":" and self._text_at(index - 2) == ")":
            return SymbolKind.CLASSLIKE, True
        if previous_text == "?" and self._text_at(index - 2) == ":":
            return SymbolKind.CLASSLIKE, True

        last_segment = self.tokens[index].text.rsplit("\\", 1)[-1]
        if last_segment.isupper():
            return SymbolKind.CONSTANT, False
        return SymbolKind.CLASSLIKE, False

    def _parse_use_statement(self, index: int, imports: ImportTable) -> int:
        """Register the imports of one ``use`` statement.

        Args:
            index: Position right after the ``use`` keyword.
            imports: Table receiving the declared aliases.

        Returns:
            Position of the first token not belonging to the statement. A
            token that cannot continue the statement is left unconsumed.
        """
        kind, index = self._use_modifier(index, SymbolKind.CLASSLIKE)

        while index < len(self.tokens):
            token = self.tokens[index]
            if token.kind not in (
                TokenKind.NAME,
                TokenKind.NAME_QUALIFIED,
                TokenKind.NAME_FULLY_QUALIFIED,
            ):
                return index
            name = token.text.lstrip("\\")
            index += 1

            if self._kind_at(index) is TokenKind.NS_SEPARATOR and self._text_at(index + 1) == "{":
                index = self._parse_use_group(index + 2, name, kind, imports)
            else:
                alias, index = self._use_alias(index, name)
                imports.declare(alias, name, kind)

            separator = self._text_at(index)
            if separator == ",":
                index += 1
            elif separator == ";":
                return index + 1
            else:
                return index
        return index

    def _parse_use_group(
        self, index: int, prefix: str, kind: SymbolKind, imports: ImportTable
    ) -> int:
        """Register the members of ``use Prefix\\{A, B as C, function d}``."""
        while index < len(self.tokens):
            text = self._text_at(index)
            if text == "}":
                return index + 1
            if text == ",":
                index += 1
                continue

            item_kind, index = self._use_modifier(index, kind)
            token = self._token_at(index)
            if token is None or token.kind not in (TokenKind.NAME, TokenKind.NAME_QUALIFIED):
                return index
            name = f"{prefix}\\{token.text}"
            alias, index = self._use_alias(index + 1, name)
            imports.declare(alias, name, item_kind)
        return index

    def _use_modifier(self, index: int, default: SymbolKind) -> Tuple[SymbolKind, int]:
        kind = self._kind_at(index)
        if kind is TokenKind.FUNCTION:
            return SymbolKind.FUNCTION, index + 1
        if kind is TokenKind.CONST:
            return SymbolKind.CONSTANT, index + 1
        return default, index

    def _use_alias(self, index: int, name: str) -> Tuple[str, int]:
        if self._kind_at(index) is TokenKind.AS and self._kind_at(index + 1) is TokenKind.NAME:
            return self.tokens[index + 1].text, index + 2
        return name.rsplit("\\", 1)[-1], index

    def _is_named_argument(self, index: int) -> bool:
        return self._text_at(index - 1) in ("(", ",") and self._text_at(index + 1) == ":"

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
