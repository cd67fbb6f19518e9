"""querycraft entity model: items, containers, joins, and table metadata."""
from querycraft.model.container import (
    Container,
    ContainerChildListener,
    ItemContainer,
    TableContainer,
)
from querycraft.model.enums import GroupFunction, OrderByArgument
from querycraft.model.item import ColumnItem, Item, StringCountItem, StringItem
from querycraft.model.join import Join
from querycraft.model.snapshot import ColumnInfo, SchemaSnapshot, TableInfo

__all__ = [
    "ColumnInfo",
    "ColumnItem",
    "Container",
    "ContainerChildListener",
    "GroupFunction",
    "Item",
    "ItemContainer",
    "Join",
    "OrderByArgument",
    "SchemaSnapshot",
    "StringCountItem",
    "StringItem",
    "TableContainer",
    "TableInfo",
]
