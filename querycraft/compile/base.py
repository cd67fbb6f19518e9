"""Name resolution abstractions: the ``ConstantConverter`` ABC.

The Template Method pattern (GoF) is used:
- ``ConstantConverter`` defines how an item name and a table name are
  rendered.
- Dialect subclasses only supply the engine tokens for the constant
  pseudo-columns (``current_time``, ``current_date``, ``user``).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

from querycraft.model.container import Container
from querycraft.model.item import Item, StringCountItem, StringItem


class ConstantConverter(ABC):
    """Abstract base for dialect-specific name rendering.

    The query builder asks the converter for the rendered name of every
    projected item and for the FROM-clause name of every table.
    """

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (e.g. ``'postgres'``)."""

    @property
    @abstractmethod
    def constant_names(self) -> Mapping[str, str]:
        """Return pseudo-column name (lower case) to engine token."""

    def get_name(self, item: Item) -> str:
        """Return the text used for ``item`` in the SELECT list.

        Text items whose name is a known pseudo-column are replaced by the
        dialect's token; every other item renders its raw name.

        Args:
            item: The item being rendered.

        Returns:
            Dialect-specific item text.
        """
        if isinstance(item, StringItem) and not isinstance(item, StringCountItem):
            token = self.constant_names.get(item.name.lower())
            if token is not None:
                return token
        return item.name

    def qualified_name(self, container: Container) -> str:
        """Return the name used for ``container`` in the FROM clause."""
        return container.qualified_name


class DefaultConverter(ConstantConverter):
    """Renders every name verbatim.  Used when no dialect is known."""

    @property
    def dialect_name(self) -> str:
        return "default"

    @property
    def constant_names(self) -> Mapping[str, str]:
        return {}
