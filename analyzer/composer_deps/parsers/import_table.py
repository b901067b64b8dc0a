"""Per-namespace table of ``use`` imports."""

from typing import Dict, Optional

from ..models.symbol import SymbolKind


class ImportTable:
    """Maps import aliases to the fully qualified names they stand for.

    PHP keeps one alias table per symbol kind: ``use Foo\\Bar`` imports a
    class-like (or a namespace), ``use function Foo\\bar`` a function and
    ``use const Foo\\BAR`` a constant. Class-like and function aliases are
    case-insensitive, constant aliases are case-sensitive.

    The table only lives for one namespace block and is cleared with reset()
    whenever a new namespace declaration starts.
    """

    def __init__(self) -> None:
        self._aliases: Dict[SymbolKind, Dict[str, str]] = {
            kind: {} for kind in SymbolKind
        }

    def declare(
        self, alias: str, root_name: str, kind: SymbolKind = SymbolKind.CLASSLIKE
    ) -> None:
        """Register alias as standing for root_name.

        Args:
            alias: Local name introduced by the import.
            root_name: Fully qualified name, leading separator optional.
            kind: Symbol table the import belongs to.
        """
        self._aliases[kind][self._key(alias, kind)] = root_name.lstrip("\\")

    def resolve(self, name: str, kind: SymbolKind = SymbolKind.CLASSLIKE) -> Optional[str]:
        """Resolve a bare or relatively qualified name through the imports.

        An exact alias match returns the imported name. Otherwise the leading
        segment of a qualified name is looked up among class-like imports
        (namespaces are imported with a plain ``use``) and substituted, so
        ``Foo\\Bar`` resolves to ``Vendor\\Foo\\Bar`` after
        ``use Vendor\\Foo``.

        Args:
            name: Name as written in the source, without leading separator.
            kind: Contextual kind of the name.

        Returns:
            The fully qualified name, or None when no import applies.
        """
        exact = self._aliases[kind].get(self._key(name, kind))
        if exact is not None:
            return exact

        if "\\" not in name:
            return None

        leading, remainder = name.split("\\", 1)
        root = self._aliases[SymbolKind.CLASSLIKE].get(leading.lower())
        if root is None:
            return None
        return f"{root}\\{remainder}"

    def reset(self) -> None:
        """Forget every import (a new namespace block started)."""
        for aliases in self._aliases.values():
            aliases.clear()

    def __len__(self) -> int:
        return sum(len(aliases) for aliases in self._aliases.values())

    @staticmethod
    def _key(alias: str, kind: SymbolKind) -> str:
        return alias if kind is SymbolKind.CONSTANT else alias.lower()
