"""Human-readable report printed with rich."""

import fnmatch
import sys
from typing import Dict, Union

from rich.console import Console
from rich.markup import escape

from ..config.configuration import Configuration
from ..models.analysis_result import AnalysisResult, PackageUsages, SymbolUsages
from ..models.symbol import SymbolKind
from ..models.unused_ignore import UnusedErrorIgnore, UnusedSymbolIgnore
from .base import VERBOSE_SHOWN_USAGES, FormatterOptions, ResultFormatter, pluralize


class ConsoleFormatter(ResultFormatter):
    """Prints findings grouped by category, with sample usages.

    By default one usage is shown per finding, three with --verbose and all
    of them with --show-all-usages.
    """

    def __init__(self, cwd: str, console: Console) -> None:
        super().__init__(cwd)
        self.console = console

    def format(
        self,
        result: AnalysisResult,
        options: FormatterOptions,
        configuration: Configuration,
    ) -> int:
        if options.dump_usages is not None:
            return self._print_result_usages(result, options.dump_usages, options.show_all_usages)
        return self._print_result_errors(
            result,
            options.max_shown_usages(),
            configuration.should_report_unmatched_ignored_errors,
        )

    def _print_result_usages(self, result: AnalysisResult, package: str, show_all: bool) -> int:
        usages = {
            name: per_symbol
            for name, per_symbol in result.usages.items()
            if fnmatch.fnmatchcase(name, package)
        }
        max_shown = sys.maxsize if show_all else VERBOSE_SHOWN_USAGES
        total_usages = sum(len(lines) for per_symbol in usages.values() for lines in per_symbol.values())
        total_symbols = sum(len(per_symbol) for per_symbol in usages.values())

        title = f"Dumping all usages of {package}" if show_all else f"Dumping sample usages of {package}"
        subtitle = (
            f"{total_usages} {pluralize(total_usages, 'usage')} of "
            f"{total_symbols} {pluralize(total_symbols, 'symbol')} in total"
        )
        self._print_package_based_errors(title, subtitle, usages, max_shown, color="orange1")

        if _will_limit_usages(usages, max_shown):
            self._line("[grey50]Use --show-all-usages to show all of them[/grey50]")
            self._line("")
        return 1

    def _print_result_errors(
        self, result: AnalysisResult, max_shown: int, report_unmatched_ignores: bool
    ) -> int:
        has_error = False

        if result.unknown_class_errors:
            has_error = True
            count = len(result.unknown_class_errors)
            self._print_symbol_based_errors(
                f"Found {count} unknown {pluralize(count, 'class')}!",
                "unable to autoload those, so we cannot check them",
                result.unknown_class_errors,
                max_shown,
            )

        if result.unknown_function_errors:
            has_error = True
            count = len(result.unknown_function_errors)
            self._print_symbol_based_errors(
                f"Found {count} unknown {pluralize(count, 'function')}!",
                "those are not declared, so we cannot check them",
                result.unknown_function_errors,
                max_shown,
            )

        if result.shadow_dependency_errors:
            has_error = True
            count = len(result.shadow_dependency_errors)
            self._print_package_based_errors(
                f"Found {count} shadow {pluralize(count, 'dependency')}!",
                "those are used, but not listed as dependency in composer.json",
                result.shadow_dependency_errors,
                max_shown,
            )

        if result.dev_dependency_in_production_errors:
            has_error = True
            count = len(result.dev_dependency_in_production_errors)
            self._print_package_based_errors(
                f"Found {count} dev {pluralize(count, 'dependency')} in production code!",
                'those should probably be moved to "require" section in composer.json',
                result.dev_dependency_in_production_errors,
                max_shown,
            )

        if result.prod_dependency_only_in_dev_errors:
            has_error = True
            count = len(result.prod_dependency_only_in_dev_errors)
            self._print_package_based_errors(
                f"Found {count} prod {pluralize(count, 'dependency')} used only in dev paths!",
                'those should probably be moved to "require-dev" section in composer.json',
                {package: {} for package in result.prod_dependency_only_in_dev_errors},
                max_shown,
            )

        if result.unused_dependency_errors:
            has_error = True
            count = len(result.unused_dependency_errors)
            self._print_package_based_errors(
                f"Found {count} unused {pluralize(count, 'dependency')}!",
                "those are listed in composer.json, but no usage was found in scanned paths",
                {package: {} for package in result.unused_dependency_errors},
                max_shown,
            )

        if result.unused_ignores and report_unmatched_ignores:
            has_error = True
            self._line("")
            self._line("[orange1]Some ignored issues never occurred:[/orange1]")
            for unused_ignore in result.unused_ignores:
                self._print_unused_ignore(unused_ignore)
            self._line("")

        if not has_error:
            self._line("")
            self._line("[green]No composer issues found[/green]")

        elapsed = round(result.elapsed_time, 3)
        self._line(
            f"[grey50](scanned[/grey50] {result.scanned_files_count} "
            f"[grey50]files in[/grey50] {elapsed} [grey50]s)[/grey50]"
        )
        self._line("")
        return 1 if has_error else 0

    def _print_symbol_based_errors(
        self, title: str, subtitle: str, errors: SymbolUsages, max_shown: int
    ) -> None:
        self._print_header(title, subtitle)

        for symbol, usages in errors.items():
            self._line(f"  • [orange1]{escape(symbol)}[/orange1]")

            if max_shown > 1:
                for index, usage in enumerate(usages):
                    self._line(f"      [grey50]{escape(self.relativize_usage(usage))}[/grey50]")
                    rest = len(usages) - index - 1
                    if index == max_shown - 1 and rest > 0:
                        self._line(f"      [grey50]+ {rest} more[/grey50]")
                        break
                self._line("")
            else:
                rest = len(usages) - 1
                suffix = f" (+ {rest} more)" if rest > 0 else ""
                self._line(f"    [grey50]in {escape(self.relativize_usage(usages[0]))}[/grey50]{suffix}")
                self._line("")

        self._line("")

    def _print_package_based_errors(
        self,
        title: str,
        subtitle: str,
        errors: Union[PackageUsages, Dict[str, SymbolUsages]],
        max_shown: int,
        color: str = "red",
    ) -> None:
        self._print_header(title, subtitle, color)

        for package, per_symbol in errors.items():
            self._line(f"  • [orange1]{escape(package)}[/orange1]")
            self._print_usages(per_symbol, max_shown)

        self._line("")

    def _print_usages(self, per_symbol: SymbolUsages, max_shown: int) -> None:
        if not per_symbol:
            return

        if max_shown == 1:
            total = sum(len(usages) for usages in per_symbol.values())
            symbol, usages = next(iter(per_symbol.items()))
            suffix = f" (+ {total - 1} more)" if total > 1 else ""
            self._line(
                f"      [grey50]e.g. [/grey50]{escape(symbol)}"
                f"[grey50] in {escape(self.relativize_usage(usages[0]))}[/grey50]{suffix}"
            )
            self._line("")
            return

        for printed, (symbol, usages) in enumerate(per_symbol.items(), 1):
            self._line(f"      {escape(symbol)}")
            for index, usage in enumerate(usages):
                self._line(f"        [grey50]{escape(self.relativize_usage(usage))}[/grey50]")
                rest = len(usages) - index - 1
                if index == max_shown - 1 and rest > 0:
                    self._line(f"        [grey50]+ {rest} more[/grey50]")
                    break

            rest_symbols = len(per_symbol) - printed
            if printed == max_shown and rest_symbols > 0:
                self._line(f"      + {rest_symbols} more {pluralize(rest_symbols, 'symbol')}")
                break

    def _print_header(self, title: str, subtitle: str, color: str = "red") -> None:
        self._line("")
        self._line(f"[{color}]{escape(title)}[/{color}]")
        self._line(f"[grey50]({escape(subtitle)})[/grey50]")
        self._line("")

    def _print_unused_ignore(self, unused_ignore: Union[UnusedErrorIgnore, UnusedSymbolIgnore]) -> None:
        if isinstance(unused_ignore, UnusedSymbolIgnore):
            kind = "class" if unused_ignore.kind is SymbolKind.CLASSLIKE else "function"
            regex = " regex" if unused_ignore.is_regex else ""
            self._line(
                f" • [grey50]Unknown {kind}{regex}[/grey50] '{escape(unused_ignore.symbol)}' "
                "[grey50]was ignored, but it was never applied.[/grey50]"
            )
            return

        error = f" • [grey50]Error[/grey50] '{unused_ignore.error_type.value}'"
        package = unused_ignore.package
        path = self.relativize_path(unused_ignore.path) if unused_ignore.path else None

        if package is None and path is None:
            scope = " [grey50]was globally ignored"
        elif path is None:
            scope = f" [grey50]was ignored for package[/grey50] '{escape(package)}'[grey50]"
        elif package is None:
            scope = f" [grey50]was ignored for path[/grey50] '{escape(path)}'[grey50]"
        else:
            scope = (
                f" [grey50]was ignored for package[/grey50] '{escape(package)}' "
                f"[grey50]and path[/grey50] '{escape(path)}'[grey50]"
            )
        self._line(f"{error}{scope}, but it was never applied.[/grey50]")

    def _line(self, text: str) -> None:
        self.console.print(text, highlight=False, soft_wrap=True)


def _will_limit_usages(usages: PackageUsages, limit: int) -> bool:
    for per_symbol in usages.values():
        if len(per_symbol) > limit:
            return True
        if any(len(symbol_usages) > limit for symbol_usages in per_symbol.values()):
            return True
    return False
