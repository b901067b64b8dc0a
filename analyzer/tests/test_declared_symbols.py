"""Tests for DeclaredSymbolExtractor."""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from composer_deps.models.symbol import SymbolKind
from composer_deps.parsers.declared_symbols import DeclaredSymbolExtractor

PROJECT_ROOT = Path(__file__).parent.parent.parent
PHP_SAMPLES = PROJECT_ROOT / "test-samples" / "php"


def declared(source):
    return DeclaredSymbolExtractor.from_source(source).parse_declared_symbols()


class TestDeclaredSymbolExtractor:
    """Test suite for DeclaredSymbolExtractor."""

    def test_autoloaded_functions_file(self):
        """Test functions, constants and class-likes of a files-autoload entry."""
        source = (PHP_SAMPLES / "autoload-functions.php").read_text(encoding="utf-8")

        result = declared(source)

        assert result[SymbolKind.FUNCTION] == {
            "Acme\\Util\\format",
            "Acme\\Util\\reference_helper",
        }
        assert result[SymbolKind.CONSTANT] == {
            "Acme\\Util\\VERSION",
            "Acme\\Util\\BUILD",
            "ACME_GLOBAL",
        }
        assert result[SymbolKind.CLASSLIKE] == {"Acme\\Util\\Helper"}

    def test_global_namespace(self):
        """Test that declarations outside a namespace are unqualified."""
        result = declared("<?php function helper() {} interface Contract {}")

        assert result[SymbolKind.FUNCTION] == {"helper"}
        assert result[SymbolKind.CLASSLIKE] == {"Contract"}

    def test_methods_and_closures_are_not_functions(self):
        """Test that only named top-level functions count."""
        source = (
            "<?php\n"
            "trait T { public function method() {} }\n"
            "$f = function () { return 1; };\n"
            "$g = fn() => 2;\n"
        )

        assert declared(source)[SymbolKind.FUNCTION] == set()

    def test_use_function_is_not_a_declaration(self):
        """Test that importing a function does not declare it."""
        source = "<?php\nnamespace A;\nuse function B\\c;\nuse const B\\D;\n"

        result = declared(source)

        assert result[SymbolKind.FUNCTION] == set()
        assert result[SymbolKind.CONSTANT] == set()

    def test_define_with_escaped_namespace(self):
        """Test that define() names are global and unescaped."""
        result = declared("<?php define('Foo\\\\BAR', 1); define($dynamic, 2);")

        assert result[SymbolKind.CONSTANT] == {"Foo\\BAR"}

    def test_enum_declaration(self):
        """Test that enums count as class-likes."""
        result = declared("<?php namespace App; enum Suit: string { case Hearts = 'H'; }")

        assert result[SymbolKind.CLASSLIKE] == {"App\\Suit"}

    def test_braced_namespaces(self):
        """Test that every braced namespace block qualifies its own symbols."""
        source = "<?php namespace A { function f() {} } namespace B { function f() {} }"

        assert declared(source)[SymbolKind.FUNCTION] == {"A\\f", "B\\f"}
