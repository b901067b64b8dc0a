"""Filesystem path helpers working on plain string paths."""

import os
import re

from ..exceptions import InvalidPathError

_ABSOLUTE_RE = re.compile(r"(?:[a-z]:)?[/\\]|[a-z][a-z0-9+.-]*://", re.IGNORECASE)
_SEPARATORS_RE = re.compile(r"[/\\]+")


def realpath(path: str) -> str:
    """Resolve symlinks in an existing path.

    Raises:
        InvalidPathError: If path is neither a file nor a directory.
    """
    if not os.path.isfile(path) and not os.path.isdir(path):
        raise InvalidPathError(f"'{path}' is not a file nor directory")
    return os.path.realpath(path)


def resolve(base_path: str, path: str) -> str:
    """Join path onto base_path unless it is already absolute."""
    if is_absolute(path):
        return path
    return normalize(f"{base_path}/{path}")


def is_absolute(path: str) -> bool:
    """Whether path is absolute (POSIX, Windows drive or stream wrapper)."""
    return _ABSOLUTE_RE.match(path) is not None


def normalize(path: str) -> str:
    """Collapse separators, ``.`` and ``..`` segments without touching disk."""
    parts = _SEPARATORS_RE.split(path) if path else []
    result: list[str] = []
    for part in parts:
        if part == ".." and result and result[-1] not in ("..", ""):
            result.pop()
        elif part != ".":
            result.append(part)
    if len(result) > 1 and result[-1] == "":
        result.pop()
    if result == [""]:
        return os.sep
    return os.sep.join(result)


def is_within(path: str, root: str) -> bool:
    """Whether path equals root or lies below it.

    The comparison respects segment boundaries, so ``/app/src-legacy`` is not
    within ``/app/src``.
    """
    root = root.rstrip("/\\")
    if path == root:
        return True
    return path.startswith(root) and path[len(root):len(root) + 1] in ("/", "\\")
