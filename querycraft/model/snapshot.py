"""Pydantic models for table metadata handed to the query model.

Metadata discovery (which tables and columns exist, how they are qualified)
belongs to the caller.  The caller describes what it found as a
``SchemaSnapshot`` and the model builds containers from it.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ColumnInfo(BaseModel):
    """Metadata for a single column.

    Attributes:
        name: Column name.
        type: SQL type string (e.g. ``'TEXT'``, ``'INTEGER'``, ``'TIMESTAMP'``).
        nullable: Whether the column can be NULL.
        row_identifier: Whether the column is the engine's row id (no display
            label can be produced for it).
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    type: str = "VARCHAR"
    nullable: bool = True
    row_identifier: bool = False


class TableInfo(BaseModel):
    """Metadata for a single table.

    Attributes:
        name: Table name.
        catalog: Optional catalog (database) the table lives in.
        schema_name: Optional schema the table lives in.
        columns: Ordered list of column metadata.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    catalog: str | None = None
    schema_name: str | None = None
    columns: list[ColumnInfo] = Field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        """Returns ``catalog.schema.name`` with absent parts left out."""
        parts = [p for p in (self.catalog, self.schema_name, self.name) if p]
        return ".".join(parts)


class SchemaSnapshot(BaseModel):
    """The tables a caller discovered and offers to the query model.

    Attributes:
        tables: All tables available for querying.
    """

    model_config = ConfigDict(extra="forbid")

    tables: list[TableInfo] = Field(default_factory=list)

    def get_table(self, name: str) -> TableInfo | None:
        """Returns the TableInfo for the given table name, or ``None``."""
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def get_column(self, table_name: str, column_name: str) -> ColumnInfo | None:
        """Returns the ColumnInfo for a table.column pair, or ``None``."""
        table = self.get_table(table_name)
        if table is None:
            return None
        for col in table.columns:
            if col.name == column_name:
                return col
        return None

    @property
    def table_names(self) -> list[str]:
        """Returns all table names in the snapshot."""
        return [t.name for t in self.tables]
