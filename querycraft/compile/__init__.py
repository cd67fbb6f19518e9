"""querycraft compilation layer: query state → SQL text."""
from querycraft.compile.base import ConstantConverter, DefaultConverter
from querycraft.compile.builder import QueryBuilder
from querycraft.compile.context import CompilationContext, QueryState
from querycraft.compile.registry import ConverterFactory

__all__ = [
    "CompilationContext",
    "ConstantConverter",
    "ConverterFactory",
    "DefaultConverter",
    "QueryBuilder",
    "QueryState",
]
