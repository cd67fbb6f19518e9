"""Joins: directed edges between items of two different containers.

The edge runs from the left column's container to the right column's
container.  The two outer-join flags are independent; together they choose
the join keyword::

    (left, right)  ->  keyword
    (F, F)             INNER JOIN
    (T, F)             LEFT OUTER JOIN
    (F, T)             RIGHT OUTER JOIN
    (T, T)             FULL OUTER JOIN
"""
from __future__ import annotations

import uuid as _uuid
from typing import TYPE_CHECKING, Any

from querycraft.errors import InvalidJoinError
from querycraft.events import ListenerRegistry, PropertyChangeEvent
from querycraft.model.item import Item, PropertyListener

if TYPE_CHECKING:
    from querycraft.model.container import Container


class Join:
    """A join condition between ``left_column`` and ``right_column``.

    Args:
        left_column: Item on the left side of the comparison.
        right_column: Item on the right side of the comparison.
        comparator: SQL comparison operator, ``=`` by default.
        name: Optional display name.
        uuid: Stable identifier; generated when omitted.

    Raises:
        InvalidJoinError: If both items belong to the same container.
    """

    LEFT_JOIN_CHANGED = "LEFT_JOIN_CHANGED"
    RIGHT_JOIN_CHANGED = "RIGHT_JOIN_CHANGED"
    COMPARATOR = "comparator"

    def __init__(
        self,
        left_column: Item,
        right_column: Item,
        comparator: str = "=",
        name: str | None = None,
        uuid: str | None = None,
    ) -> None:
        if left_column.container is right_column.container:
            container = left_column.container
            raise InvalidJoinError(container.name if container is not None else None)
        self._uuid = uuid or str(_uuid.uuid4())
        self._left_column = left_column
        self._right_column = right_column
        self._comparator = comparator
        self._left_column_outer_join = False
        self._right_column_outer_join = False
        self.name = name
        self._listeners: ListenerRegistry[PropertyListener] = ListenerRegistry()

    def __repr__(self) -> str:
        return (
            f"Join({self.left_column.name!r} {self._comparator} "
            f"{self.right_column.name!r}, uuid={self._uuid!r})"
        )

    @property
    def uuid(self) -> str:
        return self._uuid

    @property
    def left_column(self) -> Item:
        return self._left_column

    @property
    def right_column(self) -> Item:
        return self._right_column

    @property
    def left_container(self) -> Container | None:
        return self._left_column.container

    @property
    def right_container(self) -> Container | None:
        return self._right_column.container

    def other_container(self, container: Container) -> Container | None:
        """Returns the endpoint opposite ``container``."""
        if self.left_container is container:
            return self.right_container
        return self.left_container

    def touches(self, container: Container) -> bool:
        return self.left_container is container or self.right_container is container

    # ------------------------------------------------------------------
    # Observed properties
    # ------------------------------------------------------------------

    @property
    def comparator(self) -> str:
        return self._comparator

    @comparator.setter
    def comparator(self, value: str) -> None:
        self._change(self.COMPARATOR, "_comparator", value)

    @property
    def left_column_outer_join(self) -> bool:
        return self._left_column_outer_join

    @left_column_outer_join.setter
    def left_column_outer_join(self, value: bool) -> None:
        self._change(self.LEFT_JOIN_CHANGED, "_left_column_outer_join", bool(value))

    @property
    def right_column_outer_join(self) -> bool:
        return self._right_column_outer_join

    @right_column_outer_join.setter
    def right_column_outer_join(self, value: bool) -> None:
        self._change(self.RIGHT_JOIN_CHANGED, "_right_column_outer_join", bool(value))

    def outer_join_for(self, container: Container) -> bool:
        """Returns the outer flag on the side of this join attached to ``container``."""
        if self.left_container is container:
            return self._left_column_outer_join
        return self._right_column_outer_join

    def set_outer_join_for(self, container: Container, value: bool) -> None:
        """Sets the outer flag on the side of this join attached to ``container``."""
        if self.left_container is container:
            self.left_column_outer_join = value
        else:
            self.right_column_outer_join = value

    @property
    def join_type(self) -> str:
        left, right = self._left_column_outer_join, self._right_column_outer_join
        if left and right:
            return "FULL OUTER JOIN"
        if left:
            return "LEFT OUTER JOIN"
        if right:
            return "RIGHT OUTER JOIN"
        return "INNER JOIN"

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_join_change_listener(self, listener: PropertyListener) -> None:
        self._listeners.add(listener)

    def remove_join_change_listener(self, listener: PropertyListener) -> None:
        self._listeners.remove(listener)

    def has_join_change_listener(self, listener: PropertyListener) -> bool:
        return listener in self._listeners

    def _change(self, property_name: str, attr: str, value: Any) -> None:
        old = getattr(self, attr)
        if old == value:
            return
        setattr(self, attr, value)
        event = PropertyChangeEvent(self, property_name, old, value)
        self._listeners.fire(lambda listener: listener(event))
