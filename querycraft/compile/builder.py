"""Query state → SQL text generation.

``QueryBuilder`` is the top-level orchestrator.  It wires together the
clause-level sub-builders and concatenates their output in statement
order.  Dialect-specific naming is delegated to the injected
``ConstantConverter``.

Sub-builder hierarchy
---------------------
QueryBuilder
  ├── SelectClauseBuilder   (clause_builders.py)
  ├── FromClauseBuilder     (clause_builders.py)
  ├── WhereClauseBuilder    (clause_builders.py)
  ├── GroupByClauseBuilder  (clause_builders.py, grouping only)
  ├── HavingClauseBuilder   (clause_builders.py, grouping only)
  └── OrderByClauseBuilder  (clause_builders.py)

Generation is a pure function of the :class:`QueryState` it is given.
"""

from __future__ import annotations

import logging

from querycraft.compile.base import ConstantConverter
from querycraft.compile.clause_builders import (
    FromClauseBuilder,
    GroupByClauseBuilder,
    HavingClauseBuilder,
    OrderByClauseBuilder,
    SelectClauseBuilder,
    WhereClauseBuilder,
)
from querycraft.compile.context import CompilationContext, QueryState

logger = logging.getLogger(__name__)


class QueryBuilder:
    """Renders a :class:`QueryState` as SQL text.

    Args:
        converter: Dialect-specific name renderer.
    """

    def __init__(self, converter: ConstantConverter) -> None:
        self._converter = converter

    def build(self, state: QueryState) -> str:
        """Render ``state`` as a SELECT statement.

        Args:
            state: Frozen generation inputs of a query.

        Returns:
            The SQL text, or ``""`` when no column is selected.
        """
        if not state.selected_columns:
            return ""
        ctx = CompilationContext(converter=self._converter, state=state)

        parts: list[str] = [
            SelectClauseBuilder(ctx).build(),
            FromClauseBuilder(ctx).build(),
            WhereClauseBuilder(ctx).build(),
        ]
        if state.grouping_enabled:
            parts.append(GroupByClauseBuilder(ctx).build())
            parts.append(HavingClauseBuilder(ctx).build())
        parts.append(OrderByClauseBuilder(ctx).build())

        sql = "".join(parts)
        logger.debug("Generated query (%s): %s", self._converter.dialect_name, sql)
        return sql
