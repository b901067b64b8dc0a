"""AnalysisResult data model for the findings of one analysis run."""

from dataclasses import dataclass, field
from typing import Dict, List, Union

from .symbol import SymbolUsage
from .unused_ignore import UnusedErrorIgnore, UnusedSymbolIgnore

# symbol name -> usages
SymbolUsages = Dict[str, List[SymbolUsage]]
# package name -> symbol name -> usages
PackageUsages = Dict[str, SymbolUsages]
UnusedIgnore = Union[UnusedErrorIgnore, UnusedSymbolIgnore]


@dataclass(frozen=True)
class AnalysisResult:
    """Sorted findings of one dependency analysis run.

    Every mapping is ordered by key and every usage list by (file, line), so
    two runs over identical inputs compare equal regardless of the order in
    which the filesystem listed the files.

    Attributes:
        scanned_files_count: Number of distinct files scanned.
        elapsed_time: Wall-clock duration of the run in seconds.
        usages: Every vendor symbol usage, grouped by package and symbol.
        unknown_class_errors: Class-likes found neither in the classmap nor
            among runtime built-ins.
        unknown_function_errors: Functions found neither in the classmap nor
            among runtime built-ins.
        shadow_dependency_errors: Usages of packages not declared in
            composer.json.
        dev_dependency_in_production_errors: Usages of require-dev packages
            from production scan paths.
        prod_dependency_only_in_dev_errors: Production packages used only
            from dev scan paths.
        unused_dependency_errors: Declared packages never used.
        unused_ignores: Ignore rules that never suppressed a finding.
    """

    scanned_files_count: int
    elapsed_time: float
    usages: PackageUsages = field(default_factory=dict)
    unknown_class_errors: SymbolUsages = field(default_factory=dict)
    unknown_function_errors: SymbolUsages = field(default_factory=dict)
    shadow_dependency_errors: PackageUsages = field(default_factory=dict)
    dev_dependency_in_production_errors: PackageUsages = field(default_factory=dict)
    prod_dependency_only_in_dev_errors: List[str] = field(default_factory=list)
    unused_dependency_errors: List[str] = field(default_factory=list)
    unused_ignores: List[UnusedIgnore] = field(default_factory=list)

    def has_no_errors(self) -> bool:
        """Return True when no finding bucket holds anything.

        Unused ignores are not findings; callers decide whether to report them.
        """
        return not (
            self.unknown_class_errors
            or self.unknown_function_errors
            or self.shadow_dependency_errors
            or self.dev_dependency_in_production_errors
            or self.prod_dependency_only_in_dev_errors
            or self.unused_dependency_errors
        )

    def to_dict(self) -> dict:
        """Serialize AnalysisResult to a JSON-compatible dictionary.

        Returns:
            Dictionary representation with usages expanded to plain dicts.
        """

        def symbols(bucket: SymbolUsages) -> dict:
            return {
                name: [usage.to_dict() for usage in usages]
                for name, usages in bucket.items()
            }

        def packages(bucket: PackageUsages) -> dict:
            return {package: symbols(per_symbol) for package, per_symbol in bucket.items()}

        return {
            "scanned_files_count": self.scanned_files_count,
            "elapsed_time": self.elapsed_time,
            "usages": packages(self.usages),
            "unknown_class_errors": symbols(self.unknown_class_errors),
            "unknown_function_errors": symbols(self.unknown_function_errors),
            "shadow_dependency_errors": packages(self.shadow_dependency_errors),
            "dev_dependency_in_production_errors": packages(
                self.dev_dependency_in_production_errors
            ),
            "prod_dependency_only_in_dev_errors": list(
                self.prod_dependency_only_in_dev_errors
            ),
            "unused_dependency_errors": list(self.unused_dependency_errors),
            "unused_ignores": [ignore.to_dict() for ignore in self.unused_ignores],
        }

    def __repr__(self) -> str:
        """Human-readable representation for debugging."""
        return (
            f"AnalysisResult(files={self.scanned_files_count}, "
            f"unknown_classes={len(self.unknown_class_errors)}, "
            f"unknown_functions={len(self.unknown_function_errors)}, "
            f"shadow={len(self.shadow_dependency_errors)}, "
            f"dev_in_prod={len(self.dev_dependency_in_production_errors)}, "
            f"prod_only_in_dev={len(self.prod_dependency_only_in_dev_errors)}, "
            f"unused={len(self.unused_dependency_errors)})"
        )
