"""The query model: a live, editable SELECT statement.

``Query`` owns the tables in the FROM list, the joins between them, the
projection and ordering lists, and the filter and grouping state.  It keeps
those lists consistent as items and joins change, tells registered
:class:`~querycraft.events.QueryChangeListener` objects about every change,
and renders the current state as SQL text on demand.

Typical use::

    query = Query(name="orders by customer")
    customers = TableContainer.from_snapshot(snapshot, "customer")
    orders = TableContainer.from_snapshot(snapshot, "orders")
    query.add_table(customers)
    query.add_table(orders)
    query.add_join(Join(customers.get_item_by_name("id"),
                        orders.get_item_by_name("customer_id")))
    customers.get_item_by_name("name").selected = True
    sql = query.generate_query()

Synchronisation
---------------
The query subscribes one property listener to every item it holds.  When an
item's ``selected`` or ``order_by`` property changes, the listener calls
:meth:`Query._synchronize_selection` or :meth:`Query._synchronize_ordering`,
which are the only places the projection and ordering lists are edited
in response to item state.  Containers added to the query are watched for
new and removed items, so a column added to a table already in the query is
wired up immediately.
"""
from __future__ import annotations

import logging
import uuid as _uuid
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import Any

from querycraft.compile.base import ConstantConverter
from querycraft.compile.builder import QueryBuilder
from querycraft.compile.context import QueryState
from querycraft.compile.registry import ConverterFactory
from querycraft.errors import ColumnNotDisplayableError, JoinTopologyError, ModelError
from querycraft.events import (
    ContainerChildEvent,
    ListenerRegistry,
    PropertyChangeEvent,
    QueryChangeEvent,
    QueryChangeListener,
)
from querycraft.model.container import Container, ContainerChildListener, ItemContainer
from querycraft.model.enums import (
    CONSTANTS_CONTAINER_NAME,
    DEFAULT_GROUPING_FUNCTION,
    PSEUDO_COLUMNS,
    OrderByArgument,
)
from querycraft.model.item import Item, StringCountItem, StringItem
from querycraft.model.join import Join
from querycraft.settings import DataSource, QuerySettings

logger = logging.getLogger(__name__)


class _ContainerWatcher(ContainerChildListener):
    """Forwards container child events to the owning query."""

    def __init__(self, query: Query) -> None:
        self._query = query

    def child_added(self, event: ContainerChildEvent) -> None:
        self._query.add_item(event.child)

    def child_removed(self, event: ContainerChildEvent) -> None:
        self._query.remove_item(event.child)


class Query:
    """Editable model of a SELECT statement.

    Args:
        name: Display name of the query.
        uuid: Stable identifier; generated when omitted.
        settings: Execution hints; defaults to ``QuerySettings()``.
        data_source: The database the query targets; selects the dialect.
        constants_container: Use this constants holder instead of building
            one seeded with the pseudo-columns.
        connect_listeners: When False the constants holder is not wired to
            the query; call :meth:`connect_listeners` later.
    """

    ROW_LIMIT = "rowLimit"
    GROUPING_ENABLED = "groupingEnabled"
    GLOBAL_WHERE_CLAUSE = "globalWhereClause"
    USER_MODIFIED_QUERY = "userModifiedQuery"

    def __init__(
        self,
        name: str | None = None,
        uuid: str | None = None,
        settings: QuerySettings | None = None,
        data_source: DataSource | None = None,
        constants_container: Container | None = None,
        connect_listeners: bool = True,
    ) -> None:
        self._uuid = uuid or str(_uuid.uuid4())
        self.name = name
        self.zoom_level = 0

        settings = settings or QuerySettings()
        self._row_limit = settings.row_limit
        self._streaming_row_limit = settings.streaming_row_limit
        self._streaming = settings.streaming
        self._data_source: DataSource | None = None

        self._selected_columns: list[Item] = []
        self._order_by_list: list[Item] = []
        self._from_tables: list[Container] = []
        self._join_mapping: dict[str, list[Join]] = {}
        self._global_where_clause: str | None = None
        self._grouping_enabled = False
        self._user_modified_query: str | None = None
        self._can_execute_query = True

        self._listeners: ListenerRegistry[QueryChangeListener] = ListenerRegistry()
        self._container_watcher = _ContainerWatcher(self)
        self._item_listener: Callable[[PropertyChangeEvent], None] = self._on_item_change
        self._join_listener: Callable[[PropertyChangeEvent], None] = self._on_join_change

        if constants_container is None:
            constants_container = ItemContainer(
                CONSTANTS_CONTAINER_NAME,
                items=[StringItem(name) for name in PSEUDO_COLUMNS],
            )
        self._constants_container = constants_container
        if connect_listeners:
            self._watch_container(constants_container)

        if data_source is not None:
            self.set_data_source(data_source)

    def __repr__(self) -> str:
        return f"Query(name={self.name!r}, uuid={self._uuid!r})"

    def __str__(self) -> str:
        return self.name or ""

    # ------------------------------------------------------------------
    # SQL generation
    # ------------------------------------------------------------------

    def generate_query(self) -> str:
        """Render the current state as SQL text.

        Returns the user's override text verbatim when one is set, and
        ``""`` when no column is selected.
        """
        logger.debug("Data source is %s while generating the query.", self._data_source)
        if self._user_modified_query is not None:
            return self._user_modified_query
        return QueryBuilder(self.converter).build(self.state())

    def state(self) -> QueryState:
        """Return a frozen snapshot of the generation inputs."""
        return QueryState(
            selected_columns=tuple(self._selected_columns),
            order_by_list=tuple(self._order_by_list),
            from_tables=tuple(self._from_tables),
            join_mapping=MappingProxyType(
                {key: tuple(joins) for key, joins in self._join_mapping.items()}
            ),
            constants_container=self._constants_container,
            global_where_clause=self._global_where_clause,
            grouping_enabled=self._grouping_enabled,
        )

    @property
    def converter(self) -> ConstantConverter:
        dialect = self._data_source.dialect if self._data_source is not None else None
        return ConverterFactory.for_dialect(dialect)

    def define_user_modified_query(self, query: str) -> None:
        """Install ``query`` as override text returned by :meth:`generate_query`.

        Text identical to what the model would generate is ignored, so typing
        the generated statement back does not switch the query into
        override mode.
        """
        generated = self.generate_query()
        logger.debug("Generated query is %r and given query is %r", generated, query)
        if generated == query:
            return
        old = self._user_modified_query
        self._user_modified_query = query
        self._fire_property_change(self.USER_MODIFIED_QUERY, old, query)

    def remove_user_modifications(self) -> None:
        """Drop the override text so the model drives the SQL again."""
        logger.debug("Removing user modified query.")
        old = self._user_modified_query
        self._user_modified_query = None
        if old is not None:
            self._fire_property_change(self.USER_MODIFIED_QUERY, old, None)

    @property
    def user_modified_query(self) -> str | None:
        return self._user_modified_query

    @property
    def is_script_modified(self) -> bool:
        return self._user_modified_query is not None

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def add_table(self, container: Container) -> None:
        """Add ``container`` to the FROM list.

        Every item already in the container is treated as newly added: it is
        wired to the query and announced, but not selected.

        Raises:
            ModelError: If the container is already in the query.
        """
        if self._is_from_table(container):
            raise ModelError(
                f"Table '{container.name}' is already in the query.",
                details={"container": container.uuid},
            )
        logger.debug("Adding table %s", container.name)
        self._from_tables.append(container)
        container.add_child_listener(self._container_watcher)
        for item in container.items:
            self.add_item(item)
        event = QueryChangeEvent(self, container)
        self._listeners.fire(lambda listener: listener.container_added(event))

    def remove_table(self, container: Container) -> None:
        """Remove ``container`` from the FROM list along with its joins.

        Its items leave the projection and ordering lists and are unwired.

        Raises:
            ModelError: If the container is not in the query.
        """
        if not self._is_from_table(container):
            raise ModelError(
                f"Table '{container.name}' is not in the query.",
                details={"container": container.uuid},
            )
        logger.debug("Removing table %s", container.name)
        for join in list(self._join_mapping.get(container.uuid, ())):
            self.remove_join(join)
        self._from_tables = [t for t in self._from_tables if t is not container]
        container.remove_child_listener(self._container_watcher)
        for item in container.items:
            self.remove_item(item)
        event = QueryChangeEvent(self, container)
        self._listeners.fire(lambda listener: listener.container_removed(event))

    @property
    def from_table_list(self) -> tuple[Container, ...]:
        """Tables in the order they were added (not FROM-clause order)."""
        return tuple(self._from_tables)

    @property
    def constants_container(self) -> Container:
        return self._constants_container

    def new_constants_container(self, uuid: str) -> Container:
        """Replace the constants holder with an empty one identified by ``uuid``.

        Used when reloading a saved query: the loader adds the saved items
        afterwards and they are wired as they arrive.
        """
        old = self._constants_container
        old.remove_child_listener(self._container_watcher)
        for item in old.items:
            self.remove_item(item)
        self._constants_container = ItemContainer(CONSTANTS_CONTAINER_NAME, uuid=uuid)
        self._watch_container(self._constants_container)
        return self._constants_container

    def get_container(self, uuid: str) -> Container | None:
        """Returns the FROM table or constants holder with ``uuid``, or ``None``."""
        for container in self._containers():
            if container.uuid == uuid:
                return container
        return None

    def get_item(self, uuid: str) -> Item | None:
        """Returns the item with ``uuid`` from any container of the query."""
        for container in self._containers():
            item = container.get_item(uuid)
            if item is not None:
                return item
        return None

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def add_item(self, item: Item) -> None:
        """Wire ``item`` to the query and announce it.

        An item that arrives already selected or sorted joins the
        projection or ordering list.
        """
        if not item.has_property_change_listener(self._item_listener):
            item.add_property_change_listener(self._item_listener)
        self._synchronize_selection(item)
        self._synchronize_ordering(item)
        event = QueryChangeEvent(self, item)
        self._listeners.fire(lambda listener: listener.item_added(event))

    def remove_item(self, item: Item) -> None:
        """Unwire ``item`` and drop it from the projection and ordering lists."""
        logger.debug("Removing item %s", item.name)
        item.remove_property_change_listener(self._item_listener)
        self._remove_from(self._selected_columns, item)
        self._remove_from(self._order_by_list, item)
        event = QueryChangeEvent(self, item)
        self._listeners.fire(lambda listener: listener.item_removed(event))

    def move_item(self, item: Item, to_index: int) -> None:
        """Move a selected item to ``to_index`` in the projection list.

        Raises:
            ModelError: If the item is not selected.
        """
        if not self._contains(self._selected_columns, item):
            raise ModelError(
                f"Item '{item.name}' is not selected.", details={"item": item.uuid}
            )
        self._remove_from(self._selected_columns, item)
        self._selected_columns.insert(to_index, item)
        event = QueryChangeEvent(self, item)
        self._listeners.fire(lambda listener: listener.item_order_changed(event))

    def move_sorted_item_to_end(self, item: Item) -> None:
        """Give ``item`` the lowest sort precedence.

        Raises:
            ModelError: If the item is not sorted.
        """
        if not self._contains(self._order_by_list, item):
            raise ModelError(
                f"Item '{item.name}' is not sorted.", details={"item": item.uuid}
            )
        self._remove_from(self._order_by_list, item)
        self._order_by_list.append(item)

    @property
    def selected_columns(self) -> tuple[Item, ...]:
        return tuple(self._selected_columns)

    @property
    def order_by_list(self) -> tuple[Item, ...]:
        return tuple(self._order_by_list)

    def get_column_label(self, index: int) -> str:
        """Return the output label of the selected item at ``index``.

        Raises:
            ColumnNotDisplayableError: If the item is a row identifier.
            ModelError: If ``index`` is out of range.
        """
        try:
            item = self._selected_columns[index]
        except IndexError:
            raise ModelError(
                f"No selected column at index {index}.",
                details={"index": index, "count": len(self._selected_columns)},
            ) from None
        if item.row_identifier:
            raise ColumnNotDisplayableError(item.name)
        return item.alias if item.has_alias else item.name

    def _on_item_change(self, event: PropertyChangeEvent) -> None:
        item = event.source
        if event.property_name == Item.SELECTED:
            self._synchronize_selection(item)
        elif event.property_name == Item.ORDER_BY:
            self._remove_from(self._order_by_list, item)
            self._synchronize_ordering(item)
        self._listeners.fire(lambda listener: listener.item_property_changed(event))

    def _synchronize_selection(self, item: Item) -> None:
        """Make projection membership match ``item.selected``."""
        if item.selected:
            if not self._contains(self._selected_columns, item):
                self._selected_columns.append(item)
        else:
            self._remove_from(self._selected_columns, item)

    def _synchronize_ordering(self, item: Item) -> None:
        """Make ordering membership match ``item.order_by``.

        A newly sorted item goes to the end of the ordering list.
        """
        if item.order_by is OrderByArgument.NONE:
            self._remove_from(self._order_by_list, item)
        elif not self._contains(self._order_by_list, item):
            self._order_by_list.append(item)

    # ------------------------------------------------------------------
    # Joins
    # ------------------------------------------------------------------

    def add_join(self, join: Join) -> None:
        """Register ``join`` under both of its endpoint containers.

        On each side that already has joins, the new join takes the outer
        flag that the container's first join has on that container's side,
        so every join touching a table agrees on that table's outer side.

        Raises:
            ModelError: If the join is already registered or an endpoint item
                has no container.
            JoinTopologyError: If a container's first join is not attached
                to that container.  Nothing is changed in that case.
        """
        left, right = join.left_container, join.right_container
        if left is None or right is None:
            raise ModelError("Both join columns must belong to a container.")
        if any(j is join for j in self._join_mapping.get(left.uuid, ())):
            raise ModelError("The join is already in the query.", details={"join": join.uuid})

        left_outer = self._inherited_outer_join(left, join.left_column_outer_join)
        right_outer = self._inherited_outer_join(right, join.right_column_outer_join)
        join.left_column_outer_join = left_outer
        join.right_column_outer_join = right_outer

        self._join_mapping.setdefault(left.uuid, []).append(join)
        self._join_mapping.setdefault(right.uuid, []).append(join)
        join.add_join_change_listener(self._join_listener)
        logger.debug("Added join %r", join)
        event = QueryChangeEvent(self, join)
        self._listeners.fire(lambda listener: listener.join_added(event))

    def remove_join(self, join: Join) -> None:
        """Unregister ``join`` from both endpoint containers.

        Raises:
            ModelError: If the join is not in the query.
        """
        removed = False
        for container in (join.left_container, join.right_container):
            if container is None:
                continue
            joins = self._join_mapping.get(container.uuid, [])
            remaining = [j for j in joins if j is not join]
            removed = removed or len(remaining) != len(joins)
            if remaining:
                self._join_mapping[container.uuid] = remaining
            else:
                self._join_mapping.pop(container.uuid, None)
        if not removed:
            raise ModelError("The join is not in the query.", details={"join": join.uuid})
        join.remove_join_change_listener(self._join_listener)
        logger.debug("Removed join %r", join)
        event = QueryChangeEvent(self, join)
        self._listeners.fire(lambda listener: listener.join_removed(event))

    def get_joins(self) -> list[Join]:
        """Every join once, in join-index order."""
        seen: set[str] = set()
        joins: list[Join] = []
        for join_list in self._join_mapping.values():
            for join in join_list:
                if join.uuid not in seen:
                    seen.add(join.uuid)
                    joins.append(join)
        return joins

    @property
    def join_mapping(self) -> Mapping[str, tuple[Join, ...]]:
        """Read-only join index: container uuid to incident joins."""
        return MappingProxyType({key: tuple(joins) for key, joins in self._join_mapping.items()})

    def _inherited_outer_join(self, container: Container, default: bool) -> bool:
        joins = self._join_mapping.get(container.uuid)
        if not joins:
            return default
        previous = joins[0]
        if previous.left_container is container:
            return previous.left_column_outer_join
        if previous.right_container is container:
            return previous.right_column_outer_join
        raise JoinTopologyError(container.name, previous.name)

    def _on_join_change(self, event: PropertyChangeEvent) -> None:
        join: Join = event.source
        container: Container | None = None
        if event.property_name == Join.LEFT_JOIN_CHANGED:
            container = join.left_container
        elif event.property_name == Join.RIGHT_JOIN_CHANGED:
            container = join.right_container
        if container is not None:
            logger.debug("Outer join side of %s changed to %s", container.name, event.new_value)
            for other in list(self._join_mapping.get(container.uuid, ())):
                other.set_outer_join_for(container, event.new_value)
        self._listeners.fire(lambda listener: listener.join_property_changed(event))

    # ------------------------------------------------------------------
    # Filtering and grouping
    # ------------------------------------------------------------------

    @property
    def global_where_clause(self) -> str | None:
        return self._global_where_clause

    def set_global_where_clause(self, where_clause: str | None) -> None:
        old = self._global_where_clause
        if old == where_clause:
            return
        self._global_where_clause = where_clause
        self._fire_property_change(self.GLOBAL_WHERE_CLAUSE, old, where_clause)

    @property
    def grouping_enabled(self) -> bool:
        return self._grouping_enabled

    def set_grouping_enabled(self, enabled: bool) -> None:
        """Switch grouping on or off.

        Switching it on is a compound edit: every selected text item is set
        to ``COUNT`` before the change is announced, and execution readiness
        is signalled once at the end.
        """
        logger.debug("Setting grouping enabled to %s", enabled)
        old = self._grouping_enabled
        if old == enabled:
            return
        if not enabled:
            self._grouping_enabled = False
            self._fire_property_change(self.GROUPING_ENABLED, old, False)
            return
        self.start_compound_edit()
        try:
            for item in list(self._selected_columns):
                if isinstance(item, StringItem) and not isinstance(item, StringCountItem):
                    item.group_by = DEFAULT_GROUPING_FUNCTION
            self._grouping_enabled = True
            self._fire_property_change(self.GROUPING_ENABLED, old, True)
        finally:
            self.end_compound_edit()

    # ------------------------------------------------------------------
    # Execution hints
    # ------------------------------------------------------------------

    @property
    def data_source(self) -> DataSource | None:
        return self._data_source

    def set_data_source(self, data_source: DataSource | None) -> None:
        """Target ``data_source``; streaming follows the engine's support."""
        self._data_source = data_source
        if data_source is not None:
            self._streaming = data_source.supports_streaming

    @property
    def row_limit(self) -> int:
        return self._row_limit

    @row_limit.setter
    def row_limit(self, value: int) -> None:
        """Set the one-shot row limit.

        Raises:
            SettingsError: If ``value`` is negative.  Nothing changes then.
        """
        old = self._row_limit
        if old == value:
            return
        self._row_limit = self._validated_settings(row_limit=value).row_limit
        self._fire_property_change(self.ROW_LIMIT, old, value)

    @property
    def streaming_row_limit(self) -> int:
        return self._streaming_row_limit

    @streaming_row_limit.setter
    def streaming_row_limit(self, value: int) -> None:
        self._streaming_row_limit = self._validated_settings(
            streaming_row_limit=value
        ).streaming_row_limit

    @property
    def streaming(self) -> bool:
        return self._streaming

    @streaming.setter
    def streaming(self, value: bool) -> None:
        self._streaming = value

    @property
    def settings(self) -> QuerySettings:
        return QuerySettings(
            row_limit=self._row_limit,
            streaming_row_limit=self._streaming_row_limit,
            streaming=self._streaming,
        )

    def _validated_settings(self, **changes: Any) -> QuerySettings:
        current = {
            "row_limit": self._row_limit,
            "streaming_row_limit": self._streaming_row_limit,
            "streaming": self._streaming,
        }
        return QuerySettings.from_mapping({**current, **changes})

    # ------------------------------------------------------------------
    # Compound edits and listeners
    # ------------------------------------------------------------------

    def start_compound_edit(self) -> None:
        """Mark the query as mid-edit; observers should not execute it."""
        self.set_can_execute_query(False)

    def end_compound_edit(self) -> None:
        """End the edit and tell observers the query may be executed."""
        self.set_can_execute_query(True)

    @property
    def can_execute_query(self) -> bool:
        return self._can_execute_query

    def set_can_execute_query(self, can_execute: bool) -> None:
        """Set the readiness flag; only a False to True change is announced."""
        was_ready = self._can_execute_query
        self._can_execute_query = can_execute
        if can_execute and not was_ready:
            self._listeners.fire(lambda listener: listener.can_execute_query())

    def add_query_change_listener(self, listener: QueryChangeListener) -> None:
        self._listeners.add(listener)

    def remove_query_change_listener(self, listener: QueryChangeListener) -> None:
        self._listeners.remove(listener)

    def connect_listeners(self) -> None:
        """Wire every container, item, and join of the query to it.

        Already-wired entities are left alone.  No events are fired.
        """
        for container in self._containers():
            self._watch_container(container)
        for join in self.get_joins():
            if not join.has_join_change_listener(self._join_listener):
                join.add_join_change_listener(self._join_listener)

    def _watch_container(self, container: Container) -> None:
        if not container.has_child_listener(self._container_watcher):
            container.add_child_listener(self._container_watcher)
        for item in container.items:
            if not item.has_property_change_listener(self._item_listener):
                item.add_property_change_listener(self._item_listener)

    def _fire_property_change(self, property_name: str, old: Any, new: Any) -> None:
        event = PropertyChangeEvent(self, property_name, old, new)
        self._listeners.fire(lambda listener: listener.property_changed(event))

    # ------------------------------------------------------------------
    # Identity and copying
    # ------------------------------------------------------------------

    @property
    def uuid(self) -> str:
        return self._uuid

    def copy(self, connect_listeners: bool = True) -> Query:
        """Return an independent duplicate of this query.

        Args:
            connect_listeners: Wire the duplicate's entities to it so it is
                editable like this query.  When False the duplicate is a
                detached snapshot until :meth:`connect_listeners` is called.
        """
        from querycraft.clone import clone_query

        duplicate = clone_query(self)
        if connect_listeners:
            duplicate.connect_listeners()
        return duplicate

    def _restore(
        self,
        from_tables: Iterable[Container],
        selected_columns: Iterable[Item],
        order_by_list: Iterable[Item],
        join_mapping: Mapping[str, Iterable[Join]],
        global_where_clause: str | None,
        grouping_enabled: bool,
        user_modified_query: str | None,
    ) -> None:
        """Install model state wholesale without wiring or events."""
        self._from_tables = list(from_tables)
        self._selected_columns = list(selected_columns)
        self._order_by_list = list(order_by_list)
        self._join_mapping = {key: list(joins) for key, joins in join_mapping.items()}
        self._global_where_clause = global_where_clause
        self._grouping_enabled = grouping_enabled
        self._user_modified_query = user_modified_query

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _containers(self) -> list[Container]:
        return [*self._from_tables, self._constants_container]

    def _is_from_table(self, container: Container) -> bool:
        return any(t is container for t in self._from_tables)

    @staticmethod
    def _contains(items: list[Item], item: Item) -> bool:
        return any(i is item for i in items)

    @staticmethod
    def _remove_from(items: list[Item], item: Item) -> None:
        for index, candidate in enumerate(items):
            if candidate is item:
                del items[index]
                return
