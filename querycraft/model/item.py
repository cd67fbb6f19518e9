"""Items: the selectable and filterable units of a query.

An item is a table column, a free-text expression, or a constant
pseudo-column.  Each item belongs to exactly one container for its lifetime.

Item state changes are announced to subscribed callables as
:class:`~querycraft.events.PropertyChangeEvent` objects, and only when the
value actually changes.  The query subscribes one such callable per item and
keeps its selection and ordering lists in step with the ``selected`` and
``order_by`` properties.
"""
from __future__ import annotations

import uuid as _uuid
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from querycraft.errors import ModelError
from querycraft.events import ListenerRegistry, PropertyChangeEvent
from querycraft.model.enums import GroupFunction, OrderByArgument
from querycraft.model.snapshot import ColumnInfo

if TYPE_CHECKING:
    from querycraft.model.container import Container

#: Signature of an item property listener.
PropertyListener = Callable[[PropertyChangeEvent], None]


class Item:
    """Base class for every selectable unit.

    Args:
        name: Rendered identifier or expression text.
        alias: Optional output name used in ``AS <alias>``.
        uuid: Stable identifier; generated when omitted.
    """

    NAME = "name"
    ALIAS = "alias"
    SELECTED = "selected"
    GROUP_BY = "group_by"
    ORDER_BY = "order_by"
    WHERE = "where"
    HAVING = "having"

    def __init__(self, name: str, alias: str | None = None, uuid: str | None = None) -> None:
        self._uuid = uuid or str(_uuid.uuid4())
        self._name = name
        self._alias = alias
        self._selected = False
        self._group_by = GroupFunction.GROUP_BY
        self._order_by = OrderByArgument.NONE
        self._where: str | None = None
        self._having: str | None = None
        self._container: Container | None = None
        self._listeners: ListenerRegistry[PropertyListener] = ListenerRegistry()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, uuid={self._uuid!r})"

    # ------------------------------------------------------------------
    # Identity and ownership
    # ------------------------------------------------------------------

    @property
    def uuid(self) -> str:
        return self._uuid

    @property
    def container(self) -> Container | None:
        """The owning container, fixed by the first container the item joins."""
        return self._container

    def attach_to(self, container: Container) -> None:
        """Bind this item to its owning container.

        Raises:
            ModelError: If the item already belongs to another container.
        """
        if self._container is not None and self._container is not container:
            raise ModelError(
                f"Item '{self._name}' already belongs to container "
                f"'{self._container.name}'.",
                details={"item": self._uuid, "container": self._container.uuid},
            )
        self._container = container

    @property
    def row_identifier(self) -> bool:
        """True when the item is the engine's row id column."""
        return False

    # ------------------------------------------------------------------
    # Observed properties
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._change(self.NAME, "_name", value)

    @property
    def alias(self) -> str | None:
        return self._alias

    @alias.setter
    def alias(self, value: str | None) -> None:
        self._change(self.ALIAS, "_alias", value)

    @property
    def selected(self) -> bool:
        return self._selected

    @selected.setter
    def selected(self, value: bool) -> None:
        self._change(self.SELECTED, "_selected", bool(value))

    @property
    def group_by(self) -> GroupFunction:
        return self._group_by

    @group_by.setter
    def group_by(self, value: GroupFunction | str) -> None:
        self._change(self.GROUP_BY, "_group_by", GroupFunction(value))

    @property
    def order_by(self) -> OrderByArgument:
        return self._order_by

    @order_by.setter
    def order_by(self, value: OrderByArgument | str) -> None:
        self._change(self.ORDER_BY, "_order_by", OrderByArgument(value))

    @property
    def where(self) -> str | None:
        """Predicate fragment applied to this item alone (e.g. ``"> 5"``)."""
        return self._where

    @where.setter
    def where(self, value: str | None) -> None:
        self._change(self.WHERE, "_where", value)

    @property
    def having(self) -> str | None:
        """Predicate fragment applied to the aggregated item when grouping."""
        return self._having

    @having.setter
    def having(self, value: str | None) -> None:
        self._change(self.HAVING, "_having", value)

    @property
    def has_alias(self) -> bool:
        return bool(self._alias and self._alias.strip())

    @property
    def has_where(self) -> bool:
        return bool(self._where and self._where.strip())

    @property
    def has_having(self) -> bool:
        return bool(self._having and self._having.strip())

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_property_change_listener(self, listener: PropertyListener) -> None:
        self._listeners.add(listener)

    def remove_property_change_listener(self, listener: PropertyListener) -> None:
        self._listeners.remove(listener)

    def has_property_change_listener(self, listener: PropertyListener) -> bool:
        return listener in self._listeners

    def _change(self, property_name: str, attr: str, value: Any) -> None:
        old = getattr(self, attr)
        if old == value:
            return
        setattr(self, attr, value)
        event = PropertyChangeEvent(self, property_name, old, value)
        self._listeners.fire(lambda listener: listener(event))

    # ------------------------------------------------------------------
    # Copying
    # ------------------------------------------------------------------

    def create_copy(self) -> Item:
        """Return an unattached copy with a fresh uuid and the same state.

        Listeners are not copied.
        """
        copy = self._new_instance()
        copy._alias = self._alias
        copy._selected = self._selected
        copy._group_by = self._group_by
        copy._order_by = self._order_by
        copy._where = self._where
        copy._having = self._having
        return copy

    def _new_instance(self) -> Item:
        return type(self)(self._name)


class ColumnItem(Item):
    """An item backed by a real table column.

    Args:
        column: Column metadata supplied by the caller.
        uuid: Stable identifier; generated when omitted.
    """

    def __init__(self, column: ColumnInfo, uuid: str | None = None) -> None:
        super().__init__(column.name, uuid=uuid)
        self._column = column

    @property
    def column(self) -> ColumnInfo:
        return self._column

    @property
    def row_identifier(self) -> bool:
        return self._column.row_identifier

    def _new_instance(self) -> Item:
        copy = ColumnItem(self._column)
        copy._name = self._name
        return copy


class StringItem(Item):
    """A free-text item: an expression or a constant pseudo-column.

    Text items are never listed in ORDER BY and are the ones switched to
    ``COUNT`` when grouping is enabled on a query.
    """


class StringCountItem(StringItem):
    """A count-style projection rendered verbatim (e.g. ``COUNT(*)``).

    It is never qualified with a container name and never wrapped in an
    aggregate call.
    """

    def __init__(self, name: str = "COUNT(*)", alias: str | None = None, uuid: str | None = None) -> None:
        super().__init__(name, alias=alias, uuid=uuid)
