"""Categories of dependency findings."""

from enum import Enum


class ErrorType(str, Enum):
    """Category of a dependency finding.

    Values are the identifiers accepted by ignore rules and shown in reports.
    """

    UNKNOWN_CLASS = "unknown-class"
    UNKNOWN_FUNCTION = "unknown-function"
    SHADOW_DEPENDENCY = "shadow-dependency"
    UNUSED_DEPENDENCY = "unused-dependency"
    DEV_DEPENDENCY_IN_PROD = "dev-dependency-in-prod"
    PROD_DEPENDENCY_ONLY_IN_DEV = "prod-dependency-only-in-dev"

    def __str__(self) -> str:
        return self.value

    @property
    def is_package_scoped(self) -> bool:
        """Whether findings of this type are attributed to a package."""
        return self not in (ErrorType.UNKNOWN_CLASS, ErrorType.UNKNOWN_FUNCTION)

    @property
    def is_path_scoped(self) -> bool:
        """Whether findings of this type are attributed to a source file."""
        return self not in (
            ErrorType.UNUSED_DEPENDENCY,
            ErrorType.PROD_DEPENDENCY_ONLY_IN_DEV,
        )
