"""Lexical tokenizer for PHP source code.

Produces a flat list of Token(kind, text, line) covering the whole input, the
same way PHP's own lexer does: inline HTML outside of PHP tags, trivia
(whitespace and comments) kept as tokens, and namespaced identifiers emitted
as one compound token (``Foo\\Bar``, ``\\Foo\\Bar``, ``namespace\\Foo``).

With ``legacy_names=True`` compound identifiers are instead emitted as runs of
NAME / NS_SEPARATOR segment tokens, mirroring the older tokenization used by
PHP 7 runtimes. The extractor accepts both shapes.

String literals are opaque single tokens; expressions interpolated into
double-quoted strings and heredocs are not tokenized.
"""

import re
from enum import Enum
from typing import List, NamedTuple


class TokenKind(Enum):
    """Kind of a lexical token."""

    INLINE_HTML = "inline_html"
    OPEN_TAG = "open_tag"
    CLOSE_TAG = "close_tag"
    WHITESPACE = "whitespace"
    COMMENT = "comment"
    DOC_COMMENT = "doc_comment"
    VARIABLE = "variable"
    NAME = "name"
    NAME_QUALIFIED = "name_qualified"
    NAME_FULLY_QUALIFIED = "name_fully_qualified"
    NAME_RELATIVE = "name_relative"
    NS_SEPARATOR = "ns_separator"
    STRING = "string"
    NUMBER = "number"
    KEYWORD = "keyword"
    CLASS = "class"
    INTERFACE = "interface"
    TRAIT = "trait"
    ENUM = "enum"
    USE = "use"
    NAMESPACE = "namespace"
    FUNCTION = "function"
    CONST = "const"
    AS = "as"
    NEW = "new"
    INSTANCEOF = "instanceof"
    EXTENDS = "extends"
    IMPLEMENTS = "implements"
    INSTEADOF = "insteadof"
    DOUBLE_COLON = "double_colon"
    OBJECT_OPERATOR = "object_operator"
    NULLSAFE_OBJECT_OPERATOR = "nullsafe_object_operator"
    ATTRIBUTE = "attribute"
    ELLIPSIS = "ellipsis"
    OPERATOR = "operator"


class Token(NamedTuple):
    """A single lexical token.

    Attributes:
        kind: Token kind.
        text: Exact source text of the token.
        line: 1-based line on which the token starts.
    """

    kind: TokenKind
    text: str
    line: int


TRIVIA = frozenset({TokenKind.WHITESPACE, TokenKind.COMMENT, TokenKind.DOC_COMMENT})

NAME_KINDS = frozenset(
    {
        TokenKind.NAME,
        TokenKind.NAME_QUALIFIED,
        TokenKind.NAME_FULLY_QUALIFIED,
        TokenKind.NAME_RELATIVE,
    }
)

TYPE_KEYWORDS = frozenset(
    {TokenKind.CLASS, TokenKind.INTERFACE, TokenKind.TRAIT, TokenKind.ENUM}
)

KEYWORDS = {
    "class": TokenKind.CLASS,
    "interface": TokenKind.INTERFACE,
    "trait": TokenKind.TRAIT,
    "use": TokenKind.USE,
    "namespace": TokenKind.NAMESPACE,
    "function": TokenKind.FUNCTION,
    "const": TokenKind.CONST,
    "as": TokenKind.AS,
    "new": TokenKind.NEW,
    "instanceof": TokenKind.INSTANCEOF,
    "extends": TokenKind.EXTENDS,
    "implements": TokenKind.IMPLEMENTS,
    "insteadof": TokenKind.INSTEADOF,
}

# Reserved words that can never name a class, function or constant
RESERVED_WORDS = frozenset(
    """
    abstract and array break callable case catch clone continue declare
    default die do echo else elseif empty enddeclare endfor endforeach endif
    endswitch endwhile eval exit final finally fn for foreach global goto if
    include include_once isset list match or print private protected public
    readonly require require_once return static switch throw try unset var
    while xor yield __halt_compiler
    """.split()
)

_IDENT = r"[A-Za-z_\x80-\U0010ffff][A-Za-z0-9_\x80-\U0010ffff]*"

_OPEN_TAG_RE = re.compile(r"<\?(?:php(?:[ \t]|\r?\n|\Z)|=)", re.IGNORECASE)

_PHP_RE = re.compile(
    r"""
    (?P<whitespace>[ \t\r\n\f\v]+)
    |(?P<close_tag>\?>(?:\r?\n)?)
    |(?P<attribute>\#\[)
    |(?P<doc_comment>/\*\*[ \t\r\n][\s\S]*?(?:\*/|\Z))
    |(?P<comment>/\*[\s\S]*?(?:\*/|\Z)|(?:\#|//)[^\r\n?]*(?:\?(?!>)[^\r\n?]*)*)
    |(?P<variable>\$IDENT)
    |(?P<fully_qualified>\\IDENT(?:\\IDENT)*)
    |(?P<relative>(?i:namespace)\\IDENT(?:\\IDENT)*)
    |(?P<word>IDENT(?:\\IDENT)*)
    |(?P<number>
        0[xX][0-9a-fA-F_]+
        |0[bB][01_]+
        |(?:[0-9][0-9_]*(?:\.[0-9_]*)?|\.[0-9][0-9_]*)(?:[eE][+-]?[0-9_]+)?
    )
    |(?P<single_quoted>'(?:[^'\\]|\\[\s\S])*(?:'|\Z))
    |(?P<heredoc><<<[ \t]*(?:"(?P<hd_label>IDENT)"|'(?P<nd_label>IDENT)'|(?P<label>IDENT))\r?\n)
    |(?P<interpolated>["`])
    |(?P<operator>
        \?->|\.\.\.|::|->|=>|\*\*=|<=>|===|!==|<<=|>>=|\?\?=
        |\?\?|==|!=|<>|<=|>=|&&|\|\||\+\+|--|\+=|-=|\*=|/=|\.=|%=|&=|\|=|\^=
        |<<|>>|\*\*
    )
    |(?P<ns_separator>\\)
    |(?P<char>[\s\S])
    """.replace("IDENT", _IDENT),
    re.VERBOSE,
)

_ENUM_DECLARATION_RE = re.compile(r"[ \t\r\n]+(" + _IDENT + r")")
_HALT_COMPILER_RE = re.compile(r"\s*\(\s*\)\s*(?:;|\?>(?:\r?\n)?)")
_SINGLE_QUOTED_RE = re.compile(r"'(?:[^'\\]|\\[\s\S])*(?:'|\Z)")

_OPERATOR_KINDS = {
    "::": TokenKind.DOUBLE_COLON,
    "->": TokenKind.OBJECT_OPERATOR,
    "?->": TokenKind.NULLSAFE_OBJECT_OPERATOR,
    "...": TokenKind.ELLIPSIS,
}


def tokenize(source: str, legacy_names: bool = False) -> List[Token]:
    """Split PHP source into tokens.

    Args:
        source: Full contents of a PHP file.
        legacy_names: Emit namespaced identifiers as NAME / NS_SEPARATOR runs
            instead of compound tokens.

    Returns:
        List of tokens whose texts concatenate back to ``source``.
    """
    tokens = _Lexer(source).run()
    if legacy_names:
        return _split_compound_names(tokens)
    return tokens


class _Lexer:
    """Single-pass scanner over one source string."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0
        self.line = 1
        self.tokens: List[Token] = []
        # The word right after -> or ?-> is always a plain member name
        self.member_access = False

    def emit(self, kind: TokenKind, end: int) -> None:
        text = self.source[self.pos:end]
        self.tokens.append(Token(kind, text, self.line))
        self.line += text.count("\n")
        self.pos = end

    def run(self) -> List[Token]:
        length = len(self.source)
        while self.pos < length:
            self._scan_inline_html()
            if self.pos < length:
                self._scan_php()
        return self.tokens

    def _scan_inline_html(self) -> None:
        match = _OPEN_TAG_RE.search(self.source, self.pos)
        if match is None:
            self.emit(TokenKind.INLINE_HTML, len(self.source))
            return
        if match.start() > self.pos:
            self.emit(TokenKind.INLINE_HTML, match.start())
        self.emit(TokenKind.OPEN_TAG, match.end())

    def _scan_php(self) -> None:
        source = self.source
        length = len(source)
        while self.pos < length:
            match = _PHP_RE.match(source, self.pos)
            group = match.lastgroup
            end = match.end()

            if group == "whitespace":
                self.emit(TokenKind.WHITESPACE, end)
                continue
            if group in ("comment", "doc_comment"):
                kind = TokenKind.COMMENT if group == "comment" else TokenKind.DOC_COMMENT
                self.emit(kind, end)
                continue

            member_access, self.member_access = self.member_access, False

            if group == "close_tag":
                self.emit(TokenKind.CLOSE_TAG, end)
                return
            if group == "word":
                self._emit_word(match.group(), end, member_access)
            elif group == "heredoc":
                self._emit_heredoc(match)
            elif group == "interpolated":
                self.emit(TokenKind.STRING, _scan_interpolated(source, self.pos))
            elif group == "single_quoted":
                self.emit(TokenKind.STRING, end)
            elif group == "variable":
                self.emit(TokenKind.VARIABLE, end)
            elif group == "fully_qualified":
                self.emit(TokenKind.NAME_FULLY_QUALIFIED, end)
            elif group == "relative":
                self.emit(TokenKind.NAME_RELATIVE, end)
            elif group == "number":
                self.emit(TokenKind.NUMBER, end)
            elif group == "attribute":
                self.emit(TokenKind.ATTRIBUTE, end)
            elif group == "ns_separator":
                self.emit(TokenKind.NS_SEPARATOR, end)
            else:
                text = match.group()
                self.emit(_OPERATOR_KINDS.get(text, TokenKind.OPERATOR), end)
                if text in ("->", "?->"):
                    self.member_access = True

    def _emit_word(self, text: str, end: int, member_access: bool) -> None:
        if "\\" in text:
            self.emit(TokenKind.NAME_QUALIFIED, end)
            return
        if member_access:
            self.emit(TokenKind.NAME, end)
            return

        lowered = text.lower()
        if lowered == "enum":
            self.emit(self._classify_enum(end), end)
        elif lowered in KEYWORDS:
            self.emit(KEYWORDS[lowered], end)
        elif lowered in RESERVED_WORDS:
            self.emit(TokenKind.KEYWORD, end)
            if lowered == "__halt_compiler":
                self._halt_compiler()
        else:
            self.emit(TokenKind.NAME, end)

    def _classify_enum(self, end: int) -> TokenKind:
        # "enum" is a soft keyword: only a declaration when a name follows
        following = _ENUM_DECLARATION_RE.match(self.source, end)
        if following is None:
            return TokenKind.NAME
        if following.group(1).lower() in ("extends", "implements"):
            return TokenKind.NAME
        return TokenKind.ENUM

    def _emit_heredoc(self, match: "re.Match[str]") -> None:
        label = match.group("hd_label") or match.group("nd_label") or match.group("label")
        closing = re.compile(
            r"^[ \t]*" + re.escape(label) + r"(?![A-Za-z0-9_\x80-\U0010ffff])",
            re.MULTILINE,
        )
        found = closing.search(self.source, match.end())
        self.emit(TokenKind.STRING, found.end() if found else len(self.source))

    def _halt_compiler(self) -> None:
        match = _HALT_COMPILER_RE.match(self.source, self.pos)
        if match is None:
            return
        self.emit(TokenKind.OPERATOR, match.end())
        if self.pos < len(self.source):
            self.emit(TokenKind.INLINE_HTML, len(self.source))


def _scan_interpolated(source: str, start: int) -> int:
    """Return the end offset of the double-quoted or backtick string at start."""
    quote = source[start]
    length = len(source)
    pos = start + 1
    while pos < length:
        char = source[pos]
        if char == "\\":
            pos += 2
        elif char == quote:
            return pos + 1
        elif source.startswith("{$", pos):
            pos = _skip_braced(source, pos)
        else:
            pos += 1
    return length


def _skip_braced(source: str, start: int) -> int:
    """Return the offset just past a ``{$...}`` interpolation starting at start."""
    depth = 0
    length = len(source)
    pos = start
    while pos < length:
        char = source[pos]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return pos + 1
        elif char == "'":
            pos = _SINGLE_QUOTED_RE.match(source, pos).end()
            continue
        elif char == '"':
            pos = _scan_interpolated(source, pos)
            continue
        pos += 1
    return length


def _split_compound_names(tokens: List[Token]) -> List[Token]:
    """Rewrite compound name tokens into NAME / NS_SEPARATOR segment runs."""
    result: List[Token] = []
    for token in tokens:
        if token.kind not in (
            TokenKind.NAME_QUALIFIED,
            TokenKind.NAME_FULLY_QUALIFIED,
            TokenKind.NAME_RELATIVE,
        ):
            result.append(token)
            continue

        segments = token.text.split("\\")
        for index, segment in enumerate(segments):
            if index > 0:
                result.append(Token(TokenKind.NS_SEPARATOR, "\\", token.line))
            if segment == "":
                continue
            if index == 0 and token.kind == TokenKind.NAME_RELATIVE:
                result.append(Token(TokenKind.NAMESPACE, segment, token.line))
            else:
                result.append(Token(TokenKind.NAME, segment, token.line))
    return result

