"""Deep copy of a query graph.

:func:`clone_query` duplicates every container, item, and join of a query
under fresh identifiers and rebinds all cross-references through an
old-uuid to new-entity map.  It never wires listeners: the clone is a
detached snapshot until :meth:`~querycraft.query.Query.connect_listeners`
is called on it.
"""
from __future__ import annotations

import logging

from querycraft.errors import ModelError
from querycraft.model.container import Container
from querycraft.model.item import Item
from querycraft.model.join import Join
from querycraft.query import Query

logger = logging.getLogger(__name__)


def clone_query(source: Query) -> Query:
    """Return a structurally independent copy of ``source``.

    The copy generates the same SQL text as ``source`` until either is
    edited.  Joins keep their position under each container in the join
    index, so the FROM clause comes out in the same order.

    Args:
        source: The query to duplicate.

    Returns:
        A new, unwired :class:`Query` with a fresh uuid.

    Raises:
        ModelError: If ``source`` lists an item or join whose container is
            not part of ``source``.
    """
    containers: dict[str, Container] = {}
    items: dict[str, Item] = {}

    def copy_container(old: Container) -> Container:
        new = old.create_copy()
        containers[old.uuid] = new
        for old_item, new_item in zip(old.items, new.items):
            items[old_item.uuid] = new_item
        return new

    from_tables = [copy_container(table) for table in source.from_table_list]
    constants = copy_container(source.constants_container)

    def new_item(old: Item) -> Item:
        try:
            return items[old.uuid]
        except KeyError:
            raise ModelError(
                f"Item '{old.name}' does not belong to the copied query.",
                details={"item": old.uuid},
            ) from None

    joins: dict[str, Join] = {}
    for old_join in source.get_joins():
        join = Join(
            new_item(old_join.left_column),
            new_item(old_join.right_column),
            comparator=old_join.comparator,
            name=old_join.name,
        )
        join.left_column_outer_join = old_join.left_column_outer_join
        join.right_column_outer_join = old_join.right_column_outer_join
        joins[old_join.uuid] = join

    join_mapping: dict[str, list[Join]] = {}
    for container_uuid, old_joins in source.join_mapping.items():
        new_container = containers.get(container_uuid)
        if new_container is None:
            raise ModelError(
                "The join index references a container outside the query.",
                details={"container": container_uuid},
            )
        join_mapping[new_container.uuid] = [joins[j.uuid] for j in old_joins]

    duplicate = Query(
        name=source.name,
        settings=source.settings,
        constants_container=constants,
        connect_listeners=False,
    )
    duplicate.set_data_source(source.data_source)
    duplicate.streaming = source.streaming
    duplicate.zoom_level = source.zoom_level
    duplicate._restore(
        from_tables=from_tables,
        selected_columns=[new_item(i) for i in source.selected_columns],
        order_by_list=[new_item(i) for i in source.order_by_list],
        join_mapping=join_mapping,
        global_where_clause=source.global_where_clause,
        grouping_enabled=source.grouping_enabled,
        user_modified_query=source.user_modified_query,
    )
    logger.debug("Copied query %s as %s", source.uuid, duplicate.uuid)
    return duplicate
