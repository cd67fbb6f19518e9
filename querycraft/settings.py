"""Pydantic models for query execution settings and data sources.

Neither model changes the generated SQL text.  ``QuerySettings`` carries the
execution hints a query stores for whoever runs it; ``DataSource`` names the
engine the query targets, which selects the dialect converter and whether
the query streams.

Example::

    settings = QuerySettings.from_mapping({"row_limit": 50})
    query = Query(settings=settings)
    query.set_data_source(DataSource(name="warehouse", dialect="postgres"))
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from querycraft.errors import SettingsError


class QuerySettings(BaseModel):
    """Execution hints stored on a query.

    Attributes:
        row_limit: Maximum rows fetched by a one-shot execution.
        streaming_row_limit: Maximum rows kept by a streaming execution; the
            oldest rows are dropped once the limit is reached.
        streaming: Whether the query should be executed as a stream.
    """

    model_config = ConfigDict(extra="forbid")

    row_limit: int = Field(default=1000, ge=0)
    streaming_row_limit: int = Field(default=1000, ge=0)
    streaming: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> QuerySettings:
        """Validate ``data`` into settings.

        Raises:
            SettingsError: If a field is unknown or out of range.
        """
        try:
            return cls.model_validate(dict(data))
        except PydanticValidationError as exc:
            raise SettingsError(
                f"Invalid query settings: {exc.error_count()} error(s).",
                errors=[dict(e) for e in exc.errors()],
            ) from exc


class DataSource(BaseModel):
    """The database a query is written for.

    Attributes:
        name: Display name of the data source.
        dialect: Dialect name used to look up the constant converter.
        supports_streaming: Whether the engine supports streaming queries.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    dialect: str | None = None
    supports_streaming: bool = False
