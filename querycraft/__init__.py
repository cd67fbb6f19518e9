"""querycraft – a live, editable model of a SQL SELECT statement.

Draw the query, read the SQL.

Public API
----------
``Query``
    The aggregate root: tables, joins, selected and sorted items, filter and
    grouping state.  ``Query.generate_query()`` renders the current state.

``generate_sql``
    Convenience wrapper around ``Query.generate_query``.

Re-exported types
-----------------
Entity model (``Item`` and subclasses, ``Container`` and subclasses,
``Join``), table metadata (``SchemaSnapshot``, ``TableInfo``,
``ColumnInfo``), settings, events, and all error classes.

Extensibility
-------------
Constant pseudo-column rendering for a new engine can be registered via::

    from querycraft.compile.registry import ConverterFactory

    @ConverterFactory.register("db2")
    class DB2Converter(ConstantConverter):
        ...

After registration, any query whose ``DataSource`` has ``dialect="db2"``
uses it automatically.
"""

from __future__ import annotations

from querycraft.clone import clone_query
from querycraft.compile.base import ConstantConverter, DefaultConverter
from querycraft.compile.builder import QueryBuilder
from querycraft.compile.context import QueryState
from querycraft.compile.converters import (
    MySQLConverter,
    OracleConverter,
    PostgresConverter,
    SQLiteConverter,
    SQLServerConverter,
)
from querycraft.compile.registry import ConverterFactory
from querycraft.errors import (
    ColumnNotDisplayableError,
    InvalidJoinError,
    JoinTopologyError,
    ModelError,
    QueryCraftError,
    SettingsError,
)
from querycraft.events import (
    ContainerChildEvent,
    ListenerRegistry,
    PropertyChangeEvent,
    QueryChangeEvent,
    QueryChangeListener,
)
from querycraft.graph import DepthFirstSearch, JoinGraph
from querycraft.model import (
    ColumnInfo,
    ColumnItem,
    Container,
    ContainerChildListener,
    GroupFunction,
    Item,
    ItemContainer,
    Join,
    OrderByArgument,
    SchemaSnapshot,
    StringCountItem,
    StringItem,
    TableContainer,
    TableInfo,
)
from querycraft.query import Query
from querycraft.settings import DataSource, QuerySettings

# ---------------------------------------------------------------------------
# Register built-in converters with ConverterFactory
# ---------------------------------------------------------------------------

ConverterFactory.register_class("postgres", PostgresConverter)
ConverterFactory.register_class("mysql", MySQLConverter)
ConverterFactory.register_class("sqlite", SQLiteConverter)
ConverterFactory.register_class("sqlserver", SQLServerConverter)
ConverterFactory.register_class("oracle", OracleConverter)

__all__ = [
    # Core
    "Query",
    "generate_sql",
    "clone_query",
    # Entity model
    "Item",
    "ColumnItem",
    "StringItem",
    "StringCountItem",
    "Container",
    "ItemContainer",
    "TableContainer",
    "ContainerChildListener",
    "Join",
    "GroupFunction",
    "OrderByArgument",
    # Metadata
    "SchemaSnapshot",
    "TableInfo",
    "ColumnInfo",
    # Join graph
    "JoinGraph",
    "DepthFirstSearch",
    # Generation
    "QueryBuilder",
    "QueryState",
    "ConstantConverter",
    "DefaultConverter",
    "ConverterFactory",
    "PostgresConverter",
    "MySQLConverter",
    "SQLiteConverter",
    "SQLServerConverter",
    "OracleConverter",
    # Settings
    "QuerySettings",
    "DataSource",
    # Events
    "QueryChangeListener",
    "QueryChangeEvent",
    "PropertyChangeEvent",
    "ContainerChildEvent",
    "ListenerRegistry",
    # Errors
    "QueryCraftError",
    "ModelError",
    "InvalidJoinError",
    "JoinTopologyError",
    "ColumnNotDisplayableError",
    "SettingsError",
]


def generate_sql(query: Query) -> str:
    """Render ``query`` as SQL text.

    Equivalent to ``query.generate_query()``; provided so callers holding
    many queries can map over them::

        statements = [querycraft.generate_sql(q) for q in workspace]

    Args:
        query: The query model to render.

    Returns:
        The override text when the user edited the SQL by hand, ``""`` when
        nothing is selected, otherwise the generated SELECT statement.
    """
    return query.generate_query()
