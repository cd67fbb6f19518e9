"""Built-in dialect converters for the constant pseudo-columns."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from querycraft.compile.base import ConstantConverter


class PostgresConverter(ConstantConverter):
    """PostgreSQL exposes all three pseudo-columns as SQL keywords."""

    _NAMES = MappingProxyType(
        {
            "current_time": "CURRENT_TIME",
            "current_date": "CURRENT_DATE",
            "user": "CURRENT_USER",
        }
    )

    @property
    def dialect_name(self) -> str:
        return "postgres"

    @property
    def constant_names(self) -> Mapping[str, str]:
        return self._NAMES


class MySQLConverter(ConstantConverter):
    """MySQL uses function calls for the pseudo-columns."""

    _NAMES = MappingProxyType(
        {
            "current_time": "CURTIME()",
            "current_date": "CURDATE()",
            "user": "CURRENT_USER()",
        }
    )

    @property
    def dialect_name(self) -> str:
        return "mysql"

    @property
    def constant_names(self) -> Mapping[str, str]:
        return self._NAMES


class SQLiteConverter(ConstantConverter):
    """SQLite has no session user; ``user`` is left as written."""

    _NAMES = MappingProxyType(
        {
            "current_time": "CURRENT_TIME",
            "current_date": "CURRENT_DATE",
        }
    )

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    @property
    def constant_names(self) -> Mapping[str, str]:
        return self._NAMES


class SQLServerConverter(ConstantConverter):
    """SQL Server derives date and time from ``GETDATE()``."""

    _NAMES = MappingProxyType(
        {
            "current_time": "CONVERT(TIME, GETDATE())",
            "current_date": "CONVERT(DATE, GETDATE())",
            "user": "SYSTEM_USER",
        }
    )

    @property
    def dialect_name(self) -> str:
        return "sqlserver"

    @property
    def constant_names(self) -> Mapping[str, str]:
        return self._NAMES


class OracleConverter(ConstantConverter):
    """Oracle has no CURRENT_TIME; the timestamp is used instead."""

    _NAMES = MappingProxyType(
        {
            "current_time": "CURRENT_TIMESTAMP",
            "current_date": "CURRENT_DATE",
            "user": "USER",
        }
    )

    @property
    def dialect_name(self) -> str:
        return "oracle"

    @property
    def constant_names(self) -> Mapping[str, str]:
        return self._NAMES
