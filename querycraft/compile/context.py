"""Compilation context value objects.

``QueryState`` freezes the parts of a query that SQL generation reads, so
the builders never touch the live model.  ``CompilationContext`` packages
that state together with the dialect converter shared by every clause
builder.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from querycraft.compile.base import ConstantConverter
from querycraft.model.container import Container
from querycraft.model.item import Item
from querycraft.model.join import Join


@dataclass(frozen=True)
class QueryState:
    """Read-only view of a query's generation inputs.

    Attributes:
        selected_columns: Projected items in projection order.
        order_by_list: Sorted items in sort precedence.
        from_tables: Tables in the order they were added.
        join_mapping: Container uuid to incident joins.
        constants_container: The query's constants holder.
        global_where_clause: Free text ANDed into WHERE.
        grouping_enabled: Whether GROUP BY / HAVING / aggregates apply.
    """

    selected_columns: tuple[Item, ...]
    order_by_list: tuple[Item, ...]
    from_tables: tuple[Container, ...]
    join_mapping: Mapping[str, tuple[Join, ...]]
    constants_container: Container
    global_where_clause: str | None
    grouping_enabled: bool

    def joins_for(self, container: Container) -> tuple[Join, ...]:
        return self.join_mapping.get(container.uuid, ())

    def is_from_table(self, container: Container | None) -> bool:
        return container is not None and any(t is container for t in self.from_tables)


@dataclass(frozen=True)
class CompilationContext:
    """Immutable context for a single generation run.

    Attributes:
        converter: Dialect-specific name renderer.
        state: The query state being rendered.
    """

    converter: ConstantConverter
    state: QueryState

    def qualifier(self, item: Item) -> str:
        """Return the ``<alias>.`` / ``<table>.`` prefix for ``item``.

        Container alias wins; otherwise the container name is used when the
        container is one of the FROM tables.  Items of other containers
        (the constants holder) are not qualified.
        """
        container = item.container
        if container is None:
            return ""
        if container.alias:
            return f"{container.alias}."
        if self.state.is_from_table(container):
            return f"{container.name}."
        return ""
