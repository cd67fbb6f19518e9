"""Converter registry (Open/Closed Principle).

``ConverterFactory`` maps dialect names to
:class:`~querycraft.compile.base.ConstantConverter` implementations so a new
engine can be supported without editing the query model.

Usage::

    from querycraft.compile.registry import ConverterFactory

    @ConverterFactory.register("db2")
    class DB2Converter(ConstantConverter):
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import ClassVar

from querycraft.compile.base import ConstantConverter, DefaultConverter

logger = logging.getLogger(__name__)


class ConverterFactory:
    """Registry mapping dialect names to :class:`ConstantConverter` classes.

    Callers register a converter class once; the query model obtains
    instances on demand via :meth:`for_dialect`.

    Example::

        @ConverterFactory.register("db2")
        class DB2Converter(ConstantConverter):
            ...

        converter = ConverterFactory.for_dialect("db2")
    """

    _converters: ClassVar[dict[str, type[ConstantConverter]]] = {}

    @classmethod
    def register(
        cls, name: str
    ) -> Callable[[type[ConstantConverter]], type[ConstantConverter]]:
        """Decorator that registers a converter class under ``name``.

        Args:
            name: The dialect name (e.g. ``"postgres"``).

        Returns:
            A decorator that registers and returns the converter class.
        """

        def decorator(converter_cls: type[ConstantConverter]) -> type[ConstantConverter]:
            cls._converters[name.lower()] = converter_cls
            return converter_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, converter_cls: type[ConstantConverter]) -> None:
        """Register a converter class without using the decorator form.

        Args:
            name: The dialect name.
            converter_cls: The :class:`ConstantConverter` subclass to register.
        """
        cls._converters[name.lower()] = converter_cls

    @classmethod
    def for_dialect(cls, name: str | None) -> ConstantConverter:
        """Instantiate the converter registered for ``name``.

        Unknown or missing dialects get a :class:`DefaultConverter`, which
        renders names verbatim.

        Args:
            name: The dialect name, or ``None`` when no data source is set.

        Returns:
            A fresh :class:`ConstantConverter` instance.
        """
        if name is None:
            return DefaultConverter()
        converter_cls = cls._converters.get(name.lower())
        if converter_cls is None:
            logger.debug(
                "No converter registered for dialect %r; registered: %s",
                name,
                cls.registered_dialects(),
            )
            return DefaultConverter()
        return converter_cls()

    @classmethod
    def registered_dialects(cls) -> list[str]:
        """Return the sorted list of registered dialect names."""
        return sorted(cls._converters)
