"""
Engine Exceptions.

Only fatal conditions are raised. Catalog misses and catalog integrity
problems degrade to placeholder BOM items instead (see expander.py).
"""

from typing import Any


class BomGenerationError(Exception):
    """Base exception for all BOM engine errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "BOM_GENERATION_ERROR"
        self.details = details or {}


class OrderValidationError(BomGenerationError):
    """Raised when the order configuration cannot be built as given."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        build_number: str | None = None,
    ):
        if build_number:
            message = f"Build {build_number}: {message}"
        super().__init__(
            message=message,
            code="ORDER_VALIDATION_ERROR",
            details={"field": field, "build_number": build_number},
        )
        self.field = field
        self.build_number = build_number


class RecursionDepthError(BomGenerationError):
    """Raised when expansion nests past the hard depth ceiling."""

    def __init__(self, identifier: str, depth: int):
        super().__init__(
            message=(
                f"Expansion of '{identifier}' exceeded the maximum depth "
                f"(depth {depth}); check the catalog for cycles"
            ),
            code="RECURSION_DEPTH_EXCEEDED",
            details={"identifier": identifier, "depth": depth},
        )
        self.identifier = identifier
        self.depth = depth


class ExpansionTimeoutError(BomGenerationError):
    """Raised when the expansion deadline passes mid-recursion."""

    def __init__(self, identifier: str, elapsed: float):
        super().__init__(
            message=(
                f"Expansion deadline exceeded while resolving '{identifier}' "
                f"after {elapsed:.2f}s"
            ),
            code="EXPANSION_TIMEOUT",
            details={"identifier": identifier, "elapsed": elapsed},
        )
        self.identifier = identifier


class CatalogRepositoryError(BomGenerationError):
    """Raised when the catalog repository itself fails (not a miss)."""

    def __init__(self, identifier: str, reason: str):
        super().__init__(
            message=f"Catalog lookup failed for '{identifier}': {reason}",
            code="CATALOG_REPOSITORY_ERROR",
            details={"identifier": identifier, "reason": reason},
        )
        self.identifier = identifier


class CustomPartError(BomGenerationError):
    """Raised when a custom part number cannot be generated."""

    def __init__(self, message: str, part_number: str | None = None):
        super().__init__(
            message=message,
            code="CUSTOM_PART_ERROR",
            details={"part_number": part_number},
        )
        self.part_number = part_number


class BuildGenerationError(BomGenerationError):
    """Wraps a fatal error with the build number being generated."""

    def __init__(self, build_number: str, cause: BomGenerationError):
        super().__init__(
            message=f"BOM generation failed for build {build_number}: {cause.message}",
            code="BUILD_GENERATION_FAILED",
            details={
                "build_number": build_number,
                "cause_code": cause.code,
                **cause.details,
            },
        )
        self.build_number = build_number
        self.cause = cause


class OrderLineGenerationError(BomGenerationError):
    """Wraps a fatal error raised on an order-level line such as the manuals kit."""

    def __init__(self, line: str, cause: BomGenerationError):
        super().__init__(
            message=f"BOM generation failed on the order-level {line} line: {cause.message}",
            code="ORDER_LINE_FAILED",
            details={"line": line, "cause_code": cause.code, **cause.details},
        )
        self.line = line
        self.cause = cause
