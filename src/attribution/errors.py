"""
Error types for Mantissa Attribution.

Fatal errors are raised as exceptions. Non-fatal problems such as a
missing license text are reported as warning records by the notice
builder instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from attribution.models import Identifier


class AttributionError(Exception):
    """Base exception for attribution errors."""

    pass


class InvalidLicenseExpressionError(AttributionError):
    """Raised when a license expression cannot be parsed."""

    def __init__(
        self,
        message: str,
        expression: str = "",
        position: int = -1,
        package_id: "Identifier | None" = None,
    ):
        self.reason = message
        self.expression = expression
        self.position = position
        self.package_id = package_id

        text = message
        if expression:
            text = f"{text} in '{expression}'"
        if position >= 0:
            text = f"{text} at position {position}"
        if package_id is not None:
            text = f"{package_id.to_coordinates()}: {text}"
        super().__init__(text)

    def for_package(self, package_id: "Identifier") -> "InvalidLicenseExpressionError":
        """Return a copy of this error attributed to a package."""
        return InvalidLicenseExpressionError(
            self.reason,
            expression=self.expression,
            position=self.position,
            package_id=package_id,
        )


class InvalidArgumentError(AttributionError, ValueError):
    """Raised when a caller violates a function contract."""

    pass


class ResolutionTimeoutError(AttributionError):
    """Raised when a batch resolution does not finish in time."""

    def __init__(self, timeout: float, completed: int, total: int):
        self.timeout = timeout
        self.completed = completed
        self.total = total
        super().__init__(
            f"License resolution timed out after {timeout}s "
            f"({completed} of {total} packages resolved)"
        )


class ConfigurationError(AttributionError):
    """Raised when a configuration or input file cannot be loaded."""

    def __init__(self, message: str, source_path: str | None = None):
        self.source_path = source_path
        prefix = f"{source_path}: " if source_path else ""
        super().__init__(f"{prefix}{message}")
