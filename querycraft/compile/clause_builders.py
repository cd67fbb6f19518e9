"""Clause-level SQL builders.

Each class renders exactly one clause of the generated statement and
returns the text with its leading separator, so the full statement is the
plain concatenation of the builders' output.  The separators (a space
before each newline, a trailing space after the FROM list and after the
grouping clauses) are part of the generated text that callers compare
against, and must not be normalised.

Classes
-------
SelectClauseBuilder    ``SELECT <items>``
FromClauseBuilder      ``FROM <root> [<kind> JOIN <table> ON ...]...``
WhereClauseBuilder     ``WHERE <item predicates> AND <global where>``
GroupByClauseBuilder   ``GROUP BY <items>``
HavingClauseBuilder    ``HAVING <aggregated item predicates>``
OrderByClauseBuilder   ``ORDER BY <items> ASC|DESC``
"""
from __future__ import annotations

from querycraft.compile.context import CompilationContext
from querycraft.graph.join_graph import JoinGraph
from querycraft.graph.search import DepthFirstSearch
from querycraft.model.container import Container
from querycraft.model.enums import GroupFunction
from querycraft.model.item import Item, StringCountItem, StringItem
from querycraft.model.join import Join


def _wraps_in_aggregate(ctx: CompilationContext, item: Item) -> bool:
    return (
        ctx.state.grouping_enabled
        and item.group_by.is_aggregate
        and not isinstance(item, StringCountItem)
    )


def _aggregated_reference(ctx: CompilationContext, item: Item) -> str:
    """``FUNC(<qualifier><name>)`` when aggregated, else ``<qualifier><name>``."""
    reference = f"{ctx.qualifier(item)}{item.name}"
    if _wraps_in_aggregate(ctx, item):
        return f"{item.group_by}({reference})"
    return reference


class SelectClauseBuilder:
    """Builds the ``SELECT …`` clause."""

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def build(self) -> str:
        items = [self._build_item(item) for item in self._ctx.state.selected_columns]
        return "SELECT " + ", ".join(items)

    def _build_item(self, item: Item) -> str:
        if isinstance(item, StringCountItem):
            item_sql = item.name
        else:
            item_sql = f"{self._ctx.qualifier(item)}{self._ctx.converter.get_name(item)}"
            if _wraps_in_aggregate(self._ctx, item):
                item_sql = f"{item.group_by}({item_sql})"
        if item.has_alias:
            item_sql = f"{item_sql} AS {item.alias}"
        return item_sql


class FromClauseBuilder:
    """Builds the ``FROM`` clause with its joins.

    Tables are written in the finish order of a depth-first search over the
    join graph.  The first table is the FROM root.  Each later table is
    joined with the keyword chosen by a join between it and the table
    written just before it (INNER JOIN when there is none), and an ON
    condition ANDing every join between it and any table already written.
    A table with no such join is joined ``ON 0 = 0``.
    """

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def build(self) -> str:
        state = self._ctx.state
        if not state.from_tables:
            return " "
        graph = JoinGraph(state.from_tables, state.join_mapping)
        order = DepthFirstSearch().perform_search(graph).finish_order

        parts: list[str] = [" \nFROM"]
        for position, table in enumerate(order):
            table_sql = f"{self._ctx.converter.qualified_name(table)} {table.reference_name}"
            if position == 0:
                parts.append(f" {table_sql}")
                continue
            emitted = order[:position]
            keyword = self._join_keyword(table, emitted[-1])
            parts.append(f" \n{keyword} {table_sql} \n  ON {self._on_condition(table, emitted)}")
        parts.append(" ")
        return "".join(parts)

    def _join_keyword(self, table: Container, previous: Container) -> str:
        for join in self._ctx.state.joins_for(table):
            if join.other_container(table) is previous:
                return join.join_type
        return "INNER JOIN"

    def _on_condition(self, table: Container, emitted: list[Container]) -> str:
        conditions = [
            self._condition(join)
            for join in self._ctx.state.joins_for(table)
            if any(join.other_container(table) is e for e in emitted)
        ]
        if not conditions:
            return "0 = 0"
        return " \n    AND ".join(conditions)

    @staticmethod
    def _condition(join: Join) -> str:
        left = join.left_column
        right = join.right_column
        return (
            f"{left.container.reference_name}.{left.name} {join.comparator} "
            f"{right.container.reference_name}.{right.name}"
        )


class WhereClauseBuilder:
    """Builds the ``WHERE`` clause from per-item predicates and the global
    where text.

    Items are visited constants first, then each FROM table in the order
    the tables were added, then each table's items in display order.
    """

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def build(self) -> str:
        state = self._ctx.state
        predicates = [
            f"{self._ctx.qualifier(item)}{item.name} {item.where}"
            for item in self._filtered_items()
        ]
        sql = ""
        if predicates:
            sql = " \nWHERE " + " AND ".join(predicates)
        if state.global_where_clause:
            sql += " AND" if predicates else " \nWHERE "
            sql += f" {state.global_where_clause}"
        return sql

    def _filtered_items(self) -> list[Item]:
        state = self._ctx.state
        containers = [state.constants_container, *state.from_tables]
        return [item for c in containers for item in c.items if item.has_where]


class GroupByClauseBuilder:
    """Builds the ``GROUP BY`` clause.  Only used when grouping is enabled."""

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def build(self) -> str:
        items = [
            f"{self._ctx.qualifier(item)}{item.name}"
            for item in self._ctx.state.selected_columns
            if item.group_by is GroupFunction.GROUP_BY
        ]
        sql = "\nGROUP BY " + ", ".join(items) if items else ""
        return sql + " "


class HavingClauseBuilder:
    """Builds the ``HAVING`` clause.  Only used when grouping is enabled."""

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def build(self) -> str:
        items = [
            f"{_aggregated_reference(self._ctx, item)} {item.having}"
            for item in self._ctx.state.selected_columns
            if item.has_having
        ]
        sql = "\nHAVING " + ", ".join(items) if items else ""
        return sql + " "


class OrderByClauseBuilder:
    """Builds the ``ORDER BY`` clause.

    Text items are skipped: constants and free-text expressions are not
    sortable columns.
    """

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def build(self) -> str:
        items = [
            f"{_aggregated_reference(self._ctx, item)} {item.order_by} "
            for item in self._ctx.state.order_by_list
            if not isinstance(item, StringItem)
        ]
        if not items:
            return ""
        return "\nORDER BY " + ", ".join(items)
