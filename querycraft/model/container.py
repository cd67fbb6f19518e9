"""Containers: named groups of items.

``TableContainer``
    Wraps a real table described by :class:`~querycraft.model.snapshot.TableInfo`
    and holds one :class:`~querycraft.model.item.ColumnItem` per column.

``ItemContainer``
    A generic holder.  Every query owns exactly one, named ``Constants``,
    which holds the constant pseudo-columns and free-text expressions.

Item insertion order is display order.  Adding or removing an item notifies
child listeners with a :class:`~querycraft.events.ContainerChildEvent`.
"""
from __future__ import annotations

import uuid as _uuid
from collections.abc import Iterable

from querycraft.errors import ModelError
from querycraft.events import ContainerChildEvent, ListenerRegistry
from querycraft.model.item import ColumnItem, Item
from querycraft.model.snapshot import SchemaSnapshot, TableInfo


class ContainerChildListener:
    """Observer of item additions and removals on a container."""

    def child_added(self, event: ContainerChildEvent) -> None:
        pass

    def child_removed(self, event: ContainerChildEvent) -> None:
        pass


class Container:
    """Base class for item groups.

    Args:
        name: Display name; also the default FROM alias for tables.
        alias: Optional alias used to qualify the container's items.
        uuid: Stable identifier; generated when omitted.
    """

    def __init__(self, name: str, alias: str | None = None, uuid: str | None = None) -> None:
        self._uuid = uuid or str(_uuid.uuid4())
        self.name = name
        self.alias = alias
        self._items: list[Item] = []
        self._child_listeners: ListenerRegistry[ContainerChildListener] = ListenerRegistry()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, uuid={self._uuid!r})"

    @property
    def uuid(self) -> str:
        return self._uuid

    @property
    def items(self) -> tuple[Item, ...]:
        return tuple(self._items)

    @property
    def has_alias(self) -> bool:
        return bool(self.alias)

    @property
    def reference_name(self) -> str:
        """The alias when set, otherwise the container name."""
        return self.alias if self.alias else self.name

    @property
    def qualified_name(self) -> str:
        """Name used in the FROM clause; tables override with their full name."""
        return self.name

    # ------------------------------------------------------------------
    # Children
    # ------------------------------------------------------------------

    def add_item(self, item: Item, index: int | None = None) -> None:
        """Append ``item`` (or insert it at ``index``) and notify listeners."""
        item.attach_to(self)
        if index is None:
            index = len(self._items)
        self._items.insert(index, item)
        event = ContainerChildEvent(self, item, index)
        self._child_listeners.fire(lambda listener: listener.child_added(event))

    def remove_item(self, item: Item) -> None:
        """Remove ``item`` and notify listeners.

        Raises:
            ModelError: If ``item`` is not in this container.
        """
        try:
            index = self._items.index(item)
        except ValueError:
            raise ModelError(
                f"Item '{item.name}' is not in container '{self.name}'.",
                details={"item": item.uuid, "container": self._uuid},
            ) from None
        del self._items[index]
        event = ContainerChildEvent(self, item, index)
        self._child_listeners.fire(lambda listener: listener.child_removed(event))

    def get_item(self, uuid: str) -> Item | None:
        """Returns the item with the given uuid, or ``None``."""
        for item in self._items:
            if item.uuid == uuid:
                return item
        return None

    def get_item_by_name(self, name: str) -> Item | None:
        """Returns the first item called ``name``, or ``None``."""
        for item in self._items:
            if item.name == name:
                return item
        return None

    def add_child_listener(self, listener: ContainerChildListener) -> None:
        self._child_listeners.add(listener)

    def remove_child_listener(self, listener: ContainerChildListener) -> None:
        self._child_listeners.remove(listener)

    def has_child_listener(self, listener: ContainerChildListener) -> bool:
        return listener in self._child_listeners

    # ------------------------------------------------------------------
    # Copying
    # ------------------------------------------------------------------

    def create_copy(self) -> Container:
        """Return a copy with fresh uuids for the container and its items.

        Items keep their order and state.  Listeners are not copied.
        """
        copy = self._new_instance()
        copy.alias = self.alias
        for item in self._items:
            copy.add_item(item.create_copy())
        return copy

    def _new_instance(self) -> Container:
        raise NotImplementedError


class ItemContainer(Container):
    """A container not backed by a table (e.g. the constants holder)."""

    def __init__(
        self,
        name: str,
        uuid: str | None = None,
        items: Iterable[Item] = (),
    ) -> None:
        super().__init__(name, uuid=uuid)
        for item in items:
            self.add_item(item)

    def _new_instance(self) -> Container:
        return ItemContainer(self.name)


class TableContainer(Container):
    """A container wrapping a real table.

    Args:
        table: Table metadata; one column item is created per column.
        alias: Optional alias for the FROM clause and column qualification.
        uuid: Stable identifier; generated when omitted.
        populate: When False no column items are created (used when copying).
    """

    def __init__(
        self,
        table: TableInfo,
        alias: str | None = None,
        uuid: str | None = None,
        populate: bool = True,
    ) -> None:
        super().__init__(table.name, alias=alias, uuid=uuid)
        self._table = table
        if populate:
            for column in table.columns:
                self.add_item(ColumnItem(column))

    @classmethod
    def from_snapshot(
        cls,
        snapshot: SchemaSnapshot,
        table_name: str,
        alias: str | None = None,
    ) -> TableContainer:
        """Build a container for ``table_name`` described in ``snapshot``.

        Raises:
            ModelError: If the snapshot has no such table.
        """
        table = snapshot.get_table(table_name)
        if table is None:
            raise ModelError(
                f"Table '{table_name}' is not in the schema snapshot.",
                details={"table": table_name, "available": snapshot.table_names},
            )
        return cls(table, alias=alias)

    @property
    def table(self) -> TableInfo:
        return self._table

    @property
    def qualified_name(self) -> str:
        return self._table.qualified_name

    def _new_instance(self) -> Container:
        copy = TableContainer(self._table, populate=False)
        copy.name = self.name
        return copy
