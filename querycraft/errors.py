"""Custom exception hierarchy for querycraft.

All public errors inherit from QueryCraftError so callers can catch the base
class for any querycraft-specific failure.
"""
from __future__ import annotations

from typing import Any


class QueryCraftError(Exception):
    """Base exception for all querycraft errors."""


class ModelError(QueryCraftError):
    """Raised when an operation references an entity the model does not hold.

    Args:
        message: Human-readable description.
        details: Extra context (entity ids, names) for debugging.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = details or {}


class InvalidJoinError(ModelError):
    """Raised when a join would connect two items of the same container."""

    def __init__(self, container_name: str | None) -> None:
        super().__init__(
            f"A join must connect two different containers, both columns are in "
            f"'{container_name}'.",
            details={"container": container_name},
        )


class JoinTopologyError(QueryCraftError):
    """Raised when the join index holds a join that is not attached to the
    container it is registered under.

    This signals a corrupted model and is never expected under correct API
    usage. The offending operation is aborted before anything is mutated.

    Args:
        container_name: Name of the container whose join list is inconsistent.
        join_name: Name of the join found under that container.
    """

    def __init__(self, container_name: str | None, join_name: str | None) -> None:
        super().__init__(
            f"Container '{container_name}' holds join '{join_name}' which is not "
            "connected to any of its columns."
        )
        self.container_name = container_name
        self.join_name = join_name


class ColumnNotDisplayableError(QueryCraftError):
    """Raised when a display property is requested for a column that has none.

    Row identifier columns have no display label. Callers are expected to
    catch this and show the column as not displayable.

    Args:
        column: Name of the column.
    """

    def __init__(self, column: str | None) -> None:
        super().__init__(f"Column '{column}' is a row identifier and is not displayable.")
        self.column = column


class SettingsError(QueryCraftError):
    """Raised when query settings or a data source definition are invalid.

    Args:
        message: Human-readable description.
        errors: The individual field errors reported by validation.
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors: list[dict[str, Any]] = errors or []
