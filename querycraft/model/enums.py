"""Enumerations and constants shared by the entity model and the compiler."""

from __future__ import annotations

from enum import Enum

# ---------------------------------------------------------------------------
# Per-item grouping and ordering
# ---------------------------------------------------------------------------


class GroupFunction(str, Enum):
    """How an item takes part in a grouped query.

    ``GROUP_BY`` places the item in the GROUP BY clause; the aggregate members
    wrap the item in the function call.  ``NONE`` does neither.
    """

    NONE = "NONE"
    GROUP_BY = "GROUP_BY"
    COUNT = "COUNT"
    SUM = "SUM"
    AVG = "AVG"
    MIN = "MIN"
    MAX = "MAX"

    @property
    def is_aggregate(self) -> bool:
        return self.value in AGGREGATE_FUNCTIONS

    def __str__(self) -> str:
        return self.value


class OrderByArgument(str, Enum):
    """Sort direction of an item in the ORDER BY clause."""

    ASC = "ASC"
    DESC = "DESC"
    NONE = "NONE"

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

#: Aggregate functions an item can be wrapped in.
AGGREGATE_FUNCTIONS: frozenset[str] = frozenset({"COUNT", "SUM", "AVG", "MIN", "MAX"})

#: Function assigned to selected text items when grouping is switched on.
DEFAULT_GROUPING_FUNCTION = GroupFunction.COUNT

#: Name of the synthetic container holding constant pseudo-columns.
CONSTANTS_CONTAINER_NAME = "Constants"

#: Pseudo-columns every query starts with, in display order.
PSEUDO_COLUMNS: tuple[str, ...] = ("current_time", "current_date", "user")

#: Join comparators offered by the model.
COMPARATORS: tuple[str, ...] = ("=", "<>", ">", "<", ">=", "<=")
