"""Tests for UsedSymbolExtractor name resolution."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from composer_deps.exceptions import InvalidPathError
from composer_deps.models.symbol import SymbolKind
from composer_deps.parsers.php_parser import PhpParser
from composer_deps.parsers.symbol_extractor import UsedSymbolExtractor, merge_name_runs
from composer_deps.parsers.tokenizer import TokenKind, tokenize

PROJECT_ROOT = Path(__file__).parent.parent.parent
PHP_SAMPLES = PROJECT_ROOT / "test-samples" / "php"

CLASSLIKE = SymbolKind.CLASSLIKE
FUNCTION = SymbolKind.FUNCTION
CONSTANT = SymbolKind.CONSTANT

USED_SYMBOLS_EXPECTED = {
    CLASSLIKE: {
        "Attribute": [11],
        "Symfony\\Component\\Console\\Command\\Command": [12],
        "JsonSerializable": [12],
        "Some\\Helper\\LoggerTrait": [14],
        "Psr\\Log\\LoggerInterface": [16],
        "Symfony\\Component\\Console\\Input\\InputInterface": [20],
        "Doctrine\\ORM\\EntityManager": [20],
        "DateTimeImmutable": [25],
        "App\\Service\\Local\\Thing": [33],
    },
    FUNCTION: {
        "GuzzleHttp\\json_decode": [22],
        "Vendor\\Factory\\create_manager": [28],
    },
    CONSTANT: {
        "Monolog\\Logger\\API": [23],
    },
}


def used(source, legacy_names=False):
    return UsedSymbolExtractor.from_source(source, legacy_names=legacy_names).parse_used_symbols()


class TestUsedSymbolExtractor:
    """Test suite for UsedSymbolExtractor."""

    @pytest.fixture
    def parser(self):
        return PhpParser()

    @pytest.mark.parametrize("legacy_names", [False, True])
    def test_fixture_file(self, legacy_names):
        """Test resolution of every usage form in one realistic file."""
        parser = PhpParser(legacy_names=legacy_names)

        result = parser.parse_file(str(PHP_SAMPLES / "used-symbols.php"))

        assert result == USED_SYMBOLS_EXPECTED

    def test_namespace_declaration_resets_imports(self, parser):
        """Test that imports of one namespace block do not leak into the next."""
        result = parser.parse_file(str(PHP_SAMPLES / "multiple-namespaces.php"))

        assert result == {
            CLASSLIKE: {
                "Psr\\Log\\LoggerInterface": [7],
                "Psr\\Log\\NullLogger": [15],
            }
        }

    def test_comments_strings_and_halt_compiler(self, parser):
        """Test that only real code is scanned, including short echo tags."""
        result = parser.parse_file(str(PHP_SAMPLES / "strings-and-comments.php"))

        assert result == {
            CLASSLIKE: {"Vendor\\Mailer": [15]},
            FUNCTION: {"Template\\render": [2]},
        }

    def test_bare_name_without_import_is_never_emitted(self):
        """Test that unimported bare names are not reported at all."""
        source = "<?php\nnamespace App;\nnew Logger();\nLogger::create();\nhelper();\n$x = LEVEL;\n"

        assert used(source) == {}

    def test_qualified_name_without_import_is_kept_as_written(self):
        """Test that a relative qualified name without import stays as-is."""
        assert used("<?php\nnew Vendor\\Thing();") == {CLASSLIKE: {"Vendor\\Thing": [2]}}

    def test_every_occurrence_is_recorded(self):
        """Test one line entry per occurrence, duplicates included."""
        source = "<?php\nuse A\\B;\nnew B(); new B();\nB::x();\n"

        assert used(source) == {CLASSLIKE: {"A\\B": [3, 3, 4]}}

    def test_use_statement_names_are_not_usages(self):
        """Test that imports alone produce no usage."""
        assert used("<?php use A\\B; use function C\\d; use const E\\F;") == {}

    def test_group_use_with_mixed_kinds(self):
        """Test group imports with per-item function and const modifiers."""
        source = (
            "<?php\n"
            "use Acme\\{Client, function send, const TIMEOUT, Http\\Request as Req};\n"
            "new Client(); send(); $t = TIMEOUT; new Req();\n"
        )

        assert used(source) == {
            CLASSLIKE: {"Acme\\Client": [3], "Acme\\Http\\Request": [3]},
            FUNCTION: {"Acme\\send": [3]},
            CONSTANT: {"Acme\\TIMEOUT": [3]},
        }

    def test_comma_separated_use_with_function_modifier(self):
        """Test that the modifier applies to every name of the statement."""
        source = "<?php\nuse function A\\x, B\\y as z;\nx(); z();\n"

        assert used(source) == {FUNCTION: {"A\\x": [3], "B\\y": [3]}}

    def test_trait_use_inside_class_body_is_a_class_usage(self):
        """Test that use inside a class body names traits, not imports."""
        source = (
            "<?php\n"
            "use Vendor\\Loggable;\n"
            "class Foo {\n"
            "    use Loggable, \\Vendor\\Other { Loggable::log insteadof Other; }\n"
            "}\n"
            "new Loggable();\n"
        )

        assert used(source) == {
            CLASSLIKE: {"Vendor\\Loggable": [4, 4, 6], "Vendor\\Other": [4]}
        }

    def test_closure_use_is_not_an_import(self):
        """Test that function () use ($x) leaves imports alone."""
        source = "<?php\nuse A\\B;\n$f = function () use ($x) { return new B(); };\n"

        assert used(source) == {CLASSLIKE: {"A\\B": [3]}}

    def test_anonymous_class_body(self):
        """Test that use after an anonymous class body is an import again."""
        source = (
            "<?php\n"
            "$x = new class extends \\Base { use \\T; };\n"
            "use A\\B;\n"
            "new B();\n"
        )

        assert used(source) == {CLASSLIKE: {"Base": [2], "T": [2], "A\\B": [4]}}

    def test_namespace_relative_name(self):
        """Test that namespace\\X resolves against the current namespace."""
        source = "<?php\nnamespace App\\Sub;\nnamespace\\helper();\n"

        assert used(source) == {FUNCTION: {"App\\Sub\\helper": [3]}}

    def test_function_and_constant_imports(self):
        """Test resolution through use function and use const."""
        source = "<?php\nuse function Foo\\bar;\nuse const Foo\\BAZ;\nbar(BAZ);\n"

        assert used(source) == {FUNCTION: {"Foo\\bar": [4]}, CONSTANT: {"Foo\\BAZ": [4]}}

    def test_uppercase_bare_name_falls_back_to_class_import(self):
        """Test that a constant-looking bare name can still match a class import."""
        source = "<?php\nuse Vendor\\MONEY;\n$x = [MONEY];\n"

        assert used(source) == {CLASSLIKE: {"Vendor\\MONEY": [3]}}

    def test_type_positions(self):
        """Test parameter, variadic, by-reference and nullable return types."""
        source = (
            "<?php\n"
            "use A\\{P, V, R, N};\n"
            "function f(P $p, V ...$v, R &$r): ?N {}\n"
        )

        assert used(source) == {
            CLASSLIKE: {"A\\P": [3], "A\\V": [3], "A\\R": [3], "A\\N": [3]}
        }

    def test_member_names_and_declarations_are_skipped(self):
        """Test that declared names, members and named arguments are not usages."""
        source = (
            "<?php\n"
            "use A\\B;\n"
            "class B { const B = 1; function B() {} }\n"
            "$x->B; $x?->B(); $y = Foo::B;\n"
            "f(B: 1);\n"
            "goto B;\n"
        )

        assert used(source) == {}

    def test_keyword_spelled_member_names_leave_imports_alone(self):
        """Test that constants named like type keywords open no type body."""
        source = (
            "<?php\n"
            "use V\\Foo;\n"
            "class X { const ENUM = 1; const INTERFACE = 2; }\n"
            "$x = Foo::INTERFACE + Foo::ENUM;\n"
            "use A\\B;\n"
            "new B();\n"
        )

        assert used(source) == {CLASSLIKE: {"V\\Foo": [4, 4], "A\\B": [6]}}

    def test_trivia_after_member_operator(self):
        """Test that comments between an operator and a keyword member are skipped."""
        source = (
            "<?php\n"
            "use V\\Foo;\n"
            "$name = Foo:: /* c */ CLASS;\n"
            "$o-> /* c */ class;\n"
            "use V\\Bar;\n"
            "new Bar(); new Foo();\n"
        )

        assert used(source) == {CLASSLIKE: {"V\\Foo": [3, 6], "V\\Bar": [6]}}

    def test_instanceof_catch_and_attribute(self):
        """Test class contexts after instanceof and #[ attributes."""
        source = (
            "<?php\n"
            "use A\\{E, Attr, I};\n"
            "#[Attr]\n"
            "function f($x) { if ($x instanceof I) {} try {} catch (E $e) {} }\n"
        )

        assert used(source) == {
            CLASSLIKE: {"A\\Attr": [3], "A\\I": [4], "A\\E": [4]}
        }

    def test_interpolated_expressions_are_opaque(self):
        """Test that expressions inside double-quoted strings are not scanned."""
        source = '<?php\nuse A\\B;\n$s = "{$x->y(new B())}";\n'

        assert used(source) == {}

    def test_iter_used_symbols_preserves_source_order(self):
        """Test the streaming interface yields usages in file order."""
        extractor = UsedSymbolExtractor.from_source("<?php\n\\b();\nnew \\A();\n\\C;\n")

        assert list(extractor.iter_used_symbols()) == [
            (FUNCTION, "b", 2),
            (CLASSLIKE, "A", 3),
            (CONSTANT, "C", 4),
        ]

    def test_missing_file_raises(self, parser, tmp_path):
        """Test that unreadable files abort instead of being skipped."""
        with pytest.raises(InvalidPathError):
            parser.parse_file(str(tmp_path / "missing.php"))


class TestMergeNameRuns:
    """Test suite for the legacy token adapter."""

    def test_segments_with_trivia_are_merged(self):
        """Test that whitespace and comments between segments are allowed."""
        tokens = tokenize("<?php \\Foo /* x */ \\ Bar;", legacy_names=True)

        merged = [token for token in merge_name_runs(tokens) if token.kind is not TokenKind.WHITESPACE]

        assert merged[1].kind is TokenKind.NAME_FULLY_QUALIFIED
        assert merged[1].text == "\\Foo\\Bar"

    def test_compound_tokens_pass_through(self):
        """Test that already merged tokens are left untouched."""
        tokens = tokenize("<?php Foo\\Bar;")

        assert merge_name_runs(tokens) == tokens

    def test_both_shapes_give_identical_results(self):
        """Test that legacy tokenization resolves the same symbols."""
        source = (PHP_SAMPLES / "multiple-namespaces.php").read_text(encoding="utf-8")

        assert used(source, legacy_names=True) == used(source, legacy_names=False)
