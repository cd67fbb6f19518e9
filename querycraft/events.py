"""Change notification for the query model.

Three event value objects travel through the model:

``PropertyChangeEvent``
    A single property of an item, join, or query changed from ``old_value``
    to ``new_value``.

``ContainerChildEvent``
    An item was added to or removed from a container.

``QueryChangeEvent``
    A structural change on a :class:`~querycraft.query.Query` (item, container
    or join added/removed, item moved).

Observers of a query subclass :class:`QueryChangeListener` and override only
the callbacks they care about.  :class:`ListenerRegistry` dispatches to the
most-recently-registered observer first, so a UI layer registered on top of
a business-logic layer sees every event before the layer beneath it.
"""
from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, Generic, TypeVar


@dataclass(frozen=True)
class PropertyChangeEvent:
    """A property of ``source`` changed.

    Attributes:
        source: The object whose property changed.
        property_name: Name of the changed property.
        old_value: Value before the change.
        new_value: Value after the change.
    """

    source: Any
    property_name: str
    old_value: Any
    new_value: Any


@dataclass(frozen=True)
class ContainerChildEvent:
    """An item was added to or removed from ``source``.

    Attributes:
        source: The container.
        child: The item added or removed.
        index: Position of the child in the container at the time of the event.
    """

    source: Any
    child: Any
    index: int


@dataclass(frozen=True)
class QueryChangeEvent:
    """A structural change on a query.

    Attributes:
        source: The query that changed.
        subject: The item, container, or join involved.
    """

    source: Any
    subject: Any


class QueryChangeListener:
    """Observer of a :class:`~querycraft.query.Query`.

    Every callback is a no-op here; subclasses override what they need.
    """

    def item_added(self, event: QueryChangeEvent) -> None:
        pass

    def item_removed(self, event: QueryChangeEvent) -> None:
        pass

    def item_order_changed(self, event: QueryChangeEvent) -> None:
        pass

    def container_added(self, event: QueryChangeEvent) -> None:
        pass

    def container_removed(self, event: QueryChangeEvent) -> None:
        pass

    def join_added(self, event: QueryChangeEvent) -> None:
        pass

    def join_removed(self, event: QueryChangeEvent) -> None:
        pass

    def property_changed(self, event: PropertyChangeEvent) -> None:
        """A property of the query itself changed (grouping, where, limits)."""

    def item_property_changed(self, event: PropertyChangeEvent) -> None:
        """A property of an item in the query changed."""

    def join_property_changed(self, event: PropertyChangeEvent) -> None:
        """A property of a join in the query changed."""

    def can_execute_query(self) -> None:
        """The query left a compound edit and may be executed again."""


L = TypeVar("L")


class ListenerRegistry(Generic[L]):
    """Ordered collection of listeners with reverse-order dispatch.

    Example::

        registry: ListenerRegistry[QueryChangeListener] = ListenerRegistry()
        registry.add(business_layer)
        registry.add(ui_layer)
        registry.fire(lambda l: l.join_added(event))   # ui_layer first
    """

    def __init__(self) -> None:
        self._listeners: list[L] = []

    def add(self, listener: L) -> None:
        self._listeners.append(listener)

    def remove(self, listener: L) -> None:
        """Remove ``listener``; unknown listeners are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def fire(self, notify: Callable[[L], None]) -> None:
        """Call ``notify`` once per listener, last registered first.

        Iterates over a snapshot taken from the end so listeners may remove
        themselves while being notified.
        """
        for listener in list(reversed(self._listeners)):
            notify(listener)

    def __contains__(self, listener: object) -> bool:
        return listener in self._listeners

    def __iter__(self) -> Iterator[L]:
        return iter(list(self._listeners))

    def __len__(self) -> int:
        return len(self._listeners)
