"""Lookup of symbol definitions and their owning packages."""

import os
from typing import Dict, List, Mapping, Optional, Sequence

from ..exceptions import InvalidPathError
from ..models.symbol import SymbolKind
from ..utils.path import is_within, normalize


class Classmap:
    """Immutable table of where symbols are defined.

    Class-likes are looked up in the class map first (exact spelling, then
    case-insensitively, as PHP does), then through the PSR-4 and PSR-0
    prefixes the way Composer's class loader would; results of prefix
    lookups are cached. Functions (case-insensitive) and constants come from
    scanning the files Composer includes eagerly.

    Attributes:
        vendor_dirs: Absolute paths of the directories packages are
            installed into.
    """

    def __init__(
        self,
        vendor_dirs: Sequence[str],
        classes: Optional[Mapping[str, str]] = None,
        functions: Optional[Mapping[str, str]] = None,
        constants: Optional[Mapping[str, str]] = None,
        psr4: Optional[Mapping[str, Sequence[str]]] = None,
        psr0: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> None:
        self.vendor_dirs = [normalize(vendor_dir) for vendor_dir in vendor_dirs]
        self._classes = {name.lstrip("\\"): normalize(path) for name, path in (classes or {}).items()}
        self._classes_lower = {name.lower(): path for name, path in self._classes.items()}
        self._functions = {
            name.lstrip("\\").lower(): normalize(path) for name, path in (functions or {}).items()
        }
        self._constants = {name.lstrip("\\"): normalize(path) for name, path in (constants or {}).items()}
        # Longest prefix first, as Composer's ClassLoader tries them
        self._psr4 = sorted((psr4 or {}).items(), key=lambda item: -len(item[0]))
        self._psr0 = sorted((psr0 or {}).items(), key=lambda item: -len(item[0]))
        self._prefix_cache: Dict[str, Optional[str]] = {}

    def locate(self, name: str, kind: Optional[SymbolKind] = None) -> Optional[str]:
        """Return the absolute path of the file defining name, if known.

        Args:
            name: Fully qualified name, leading separator optional.
            kind: Symbol table to search; None searches functions, then
                class-likes, then constants.

        Returns:
            Normalized absolute path, or None when the symbol is unknown.
        """
        name = name.lstrip("\\")
        if kind is SymbolKind.FUNCTION:
            return self._functions.get(name.lower())
        if kind is SymbolKind.CONSTANT:
            return self._constants.get(name)
        if kind is SymbolKind.CLASSLIKE:
            return self._locate_class(name)
        return (
            self._functions.get(name.lower())
            or self._locate_class(name)
            or self._constants.get(name)
        )

    def is_vendor_path(self, path: str) -> bool:
        """Whether path lies in one of the vendor directories."""
        return any(is_within(path, vendor_dir) for vendor_dir in self.vendor_dirs)

    def package_of(self, path: str) -> str:
        """Return the ``vendor/package`` name owning a file in a vendor directory.

        Raises:
            InvalidPathError: If path is not under a vendor directory or has
                fewer than two segments below it.
        """
        for vendor_dir in self.vendor_dirs:
            if not is_within(path, vendor_dir):
                continue
            segments = [
                segment for segment in path[len(vendor_dir):].replace("\\", "/").split("/") if segment
            ]
            if len(segments) < 2:
                raise InvalidPathError(
                    f"Path '{path}' does not point into a package of {vendor_dir}"
                )
            return f"{segments[0]}/{segments[1]}"

        raise InvalidPathError(
            f"Path '{path}' not found in vendor. "
            "package_of() can be called only when is_vendor_path() returns True"
        )

    @property
    def class_count(self) -> int:
        return len(self._classes)

    @property
    def function_count(self) -> int:
        return len(self._functions)

    @property
    def constant_count(self) -> int:
        return len(self._constants)

    def _locate_class(self, name: str) -> Optional[str]:
        path = self._classes.get(name) or self._classes_lower.get(name.lower())
        if path is not None:
            return path
        if name not in self._prefix_cache:
            self._prefix_cache[name] = self._find_by_prefix(name)
        return self._prefix_cache[name]

    def _find_by_prefix(self, name: str) -> Optional[str]:
        for prefix, directories in self._psr4:
            if not name.startswith(prefix):
                continue
            relative = name[len(prefix):].replace("\\", "/") + ".php"
            found = _first_file(directories, relative)
            if found is not None:
                return found

        namespace, _, class_name = name.rpartition("\\")
        relative = "/".join(filter(None, [namespace.replace("\\", "/"), class_name.replace("_", "/")]))
        for prefix, directories in self._psr0:
            if name.startswith(prefix):
                found = _first_file(directories, relative + ".php")
                if found is not None:
                    return found
        return None


def _first_file(directories: Sequence[str], relative: str) -> Optional[str]:
    candidates: List[str] = [normalize(f"{directory}/{relative}") for directory in directories]
    for candidate in candidates:
        if os.path.isfile(candidate):
            return candidate
    return None
