"""Test fixtures: sample table metadata and a recording query listener."""

from __future__ import annotations

import json
from pathlib import Path

from querycraft.events import PropertyChangeEvent, QueryChangeEvent, QueryChangeListener
from querycraft.model.snapshot import SchemaSnapshot

_FIXTURES_DIR = Path(__file__).parent


def load_schema_snapshot() -> SchemaSnapshot:
    """Load the canonical sample SchemaSnapshot from schema.json."""
    data = json.loads((_FIXTURES_DIR / "schema.json").read_text())
    return SchemaSnapshot.model_validate(data)


class RecordingListener(QueryChangeListener):
    """Records every callback as ``(tag, callback_name, subject)``.

    Several recorders may share one ``log`` list to observe dispatch order.
    """

    def __init__(self, tag: str = "", log: list | None = None) -> None:
        self.tag = tag
        self.log: list = log if log is not None else []

    def _record(self, name: str, subject) -> None:
        self.log.append((self.tag, name, subject))

    def names(self) -> list[str]:
        return [name for _, name, _ in self.log]

    def item_added(self, event: QueryChangeEvent) -> None:
        self._record("item_added", event.subject)

    def item_removed(self, event: QueryChangeEvent) -> None:
        self._record("item_removed", event.subject)

    def item_order_changed(self, event: QueryChangeEvent) -> None:
        self._record("item_order_changed", event.subject)

    def container_added(self, event: QueryChangeEvent) -> None:
        self._record("container_added", event.subject)

    def container_removed(self, event: QueryChangeEvent) -> None:
        self._record("container_removed", event.subject)

    def join_added(self, event: QueryChangeEvent) -> None:
        self._record("join_added", event.subject)

    def join_removed(self, event: QueryChangeEvent) -> None:
        self._record("join_removed", event.subject)

    def property_changed(self, event: PropertyChangeEvent) -> None:
        self._record("property_changed", event)

    def item_property_changed(self, event: PropertyChangeEvent) -> None:
        self._record("item_property_changed", event)

    def join_property_changed(self, event: PropertyChangeEvent) -> None:
        self._record("join_property_changed", event)

    def can_execute_query(self) -> None:
        self._record("can_execute_query", None)
