"""Builds a Classmap from the autoload files Composer generates.

``composer dump-autoload`` writes PHP arrays into ``vendor/composer/``:

- ``autoload_classmap.php``: class name => file
- ``autoload_psr4.php``: namespace prefix => directories
- ``autoload_namespaces.php``: PSR-0 prefix => directories
- ``autoload_files.php``: files included on every request

The arrays are read textually; their values are concatenations of
``$vendorDir``, ``$baseDir``, ``__DIR__`` and single-quoted literals.
"""

import logging
import os
import re
from typing import Dict, List, Union

from ..exceptions import InvalidConfigError, InvalidPathError
from ..models.symbol import SymbolKind
from ..parsers.declared_symbols import DeclaredSymbolExtractor
from ..parsers.php_parser import read_source
from ..utils.path import normalize
from .classmap import Classmap

logger = logging.getLogger(__name__)

_LITERAL = r"'(?:[^'\\]|\\[\s\S])*'"
_OPERAND = r"(?:\$\w+|__DIR__|" + _LITERAL + r")"
_CONCAT = _OPERAND + r"(?:\s*\.\s*" + _OPERAND + r")*"

_ENTRY_RE = re.compile(
    r"(?P<key>" + _LITERAL + r")\s*=>\s*"
    r"(?:array\s*\((?P<list>(?:\s*" + _CONCAT + r"\s*,?)*)\s*\)|(?P<value>" + _CONCAT + r"))"
)
_OPERAND_RE = re.compile(_OPERAND)
_CONCAT_RE = re.compile(_CONCAT)
_BASE_DIR_RE = re.compile(r"\$baseDir\s*=\s*([^;]*);")

AutoloadArray = Dict[str, Union[str, List[str]]]


def load_classmap(vendor_dir: str) -> Classmap:
    """Read Composer's generated autoload files of one vendor directory.

    Args:
        vendor_dir: Absolute path of the vendor directory.

    Returns:
        Classmap covering classes, PSR-4 / PSR-0 prefixes and the functions
        and constants declared by autoloaded files.

    Raises:
        InvalidConfigError: If autoload_classmap.php does not exist.
    """
    if os.path.isdir(vendor_dir):
        vendor_dir = os.path.realpath(vendor_dir)
    composer_dir = os.path.join(vendor_dir, "composer")
    classmap_file = os.path.join(composer_dir, "autoload_classmap.php")
    if not os.path.isfile(classmap_file):
        raise InvalidConfigError(
            f"{classmap_file} not found, run 'composer install' or 'composer dump-autoload' first"
        )

    classes = _single_values(read_autoload_array(classmap_file, vendor_dir))
    psr4 = _list_values(_read_optional(os.path.join(composer_dir, "autoload_psr4.php"), vendor_dir))
    psr0 = _list_values(
        _read_optional(os.path.join(composer_dir, "autoload_namespaces.php"), vendor_dir)
    )
    files = _single_values(_read_optional(os.path.join(composer_dir, "autoload_files.php"), vendor_dir))

    functions: Dict[str, str] = {}
    constants: Dict[str, str] = {}
    for file_path in files.values():
        if not os.path.isfile(file_path):
            logger.warning("Autoloaded file %s does not exist, skipping", file_path)
            continue
        declared = DeclaredSymbolExtractor.from_source(read_source(file_path)).parse_declared_symbols()
        for name in declared[SymbolKind.FUNCTION]:
            functions.setdefault(name, file_path)
        for name in declared[SymbolKind.CONSTANT]:
            constants.setdefault(name, file_path)
        for name in declared[SymbolKind.CLASSLIKE]:
            classes.setdefault(name, file_path)

    logger.debug(
        "Loaded autoload metadata from %s: %d classes, %d functions, %d constants",
        composer_dir,
        len(classes),
        len(functions),
        len(constants),
    )
    return Classmap(
        [vendor_dir],
        classes=classes,
        functions=functions,
        constants=constants,
        psr4=psr4,
        psr0=psr0,
    )


def read_autoload_array(file_path: str, vendor_dir: str) -> AutoloadArray:
    """Evaluate the ``return array(...)`` of a generated autoload file.

    Args:
        file_path: Path of the generated PHP file.
        vendor_dir: Value of ``$vendorDir`` for the file.

    Returns:
        Mapping of array keys to a path or a list of paths.
    """
    source = read_source(file_path)
    base_dir = _base_dir(source, vendor_dir)
    variables = {
        "$vendorDir": vendor_dir,
        "$baseDir": base_dir,
        "__DIR__": os.path.dirname(file_path),
    }

    body_start = source.find("return")
    entries: AutoloadArray = {}
    for match in _ENTRY_RE.finditer(source, body_start if body_start >= 0 else 0):
        key = _unescape(match.group("key"))
        if match.group("value") is not None:
            entries[key] = _evaluate(match.group("value"), variables)
        else:
            entries[key] = [
                _evaluate(item.group(), variables)
                for item in _CONCAT_RE.finditer(match.group("list"))
            ]
    return entries


def _read_optional(file_path: str, vendor_dir: str) -> AutoloadArray:
    if not os.path.isfile(file_path):
        return {}
    return read_autoload_array(file_path, vendor_dir)


def _base_dir(source: str, vendor_dir: str) -> str:
    match = _BASE_DIR_RE.search(source)
    levels = match.group(1).count("dirname(") if match else 1
    base_dir = vendor_dir
    for _ in range(levels):
        base_dir = os.path.dirname(base_dir)
    return base_dir


def _evaluate(expression: str, variables: Dict[str, str]) -> str:
    parts = []
    for operand in _OPERAND_RE.findall(expression):
        if operand.startswith("'"):
            parts.append(_unescape(operand))
        elif operand in variables:
            parts.append(variables[operand])
        else:
            raise InvalidPathError(f"Unsupported expression '{operand}' in Composer autoload file")
    return normalize("".join(parts))


def _unescape(literal: str) -> str:
    return re.sub(r"\\([\\'])", r"\1", literal[1:-1])


def _single_values(entries: AutoloadArray) -> Dict[str, str]:
    return {key: value if isinstance(value, str) else value[0] for key, value in entries.items() if value}


def _list_values(entries: AutoloadArray) -> Dict[str, List[str]]:
    return {key: [value] if isinstance(value, str) else value for key, value in entries.items()}
