"""Symbol kinds and symbol usage records."""

from dataclasses import dataclass, asdict
from enum import Enum


class SymbolKind(Enum):
    """Kind of a referenced PHP symbol.

    PHP keeps separate symbol tables for class-likes (classes, interfaces,
    traits, enums), functions and constants, so imports and lookups are
    always done per kind.
    """

    CLASSLIKE = "classlike"
    FUNCTION = "function"
    CONSTANT = "constant"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SymbolUsage:
    """One occurrence of a symbol in a scanned file.

    Attributes:
        filepath: Absolute path of the file containing the reference.
        line_number: 1-based line of the reference.
        kind: Kind of the referenced symbol.
    """

    filepath: str
    line_number: int
    kind: SymbolKind

    def to_dict(self) -> dict:
        """Serialize SymbolUsage to a JSON-compatible dictionary."""
        result = asdict(self)
        result["kind"] = self.kind.value
        return result

    def sort_key(self) -> tuple[str, int]:
        """Key ordering usages by file, then line."""
        return (self.filepath, self.line_number)
