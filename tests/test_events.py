"""Unit tests for listener dispatch and the query change protocol."""

from __future__ import annotations

from querycraft.events import ListenerRegistry, PropertyChangeEvent, QueryChangeListener
from querycraft.model.item import Item
from querycraft.query import Query
from tests.fixtures import RecordingListener


def _col(container, name):
    return container.get_item_by_name(name)


# ---------------------------------------------------------------------------
# ListenerRegistry
# ---------------------------------------------------------------------------


def test_registry_dispatches_last_registered_first():
    calls: list[str] = []
    registry: ListenerRegistry[str] = ListenerRegistry()
    for name in ("first", "second", "third"):
        registry.add(name)

    registry.fire(calls.append)

    assert calls == ["third", "second", "first"]


def test_registry_remove_ignores_unknown_listener():
    registry: ListenerRegistry[str] = ListenerRegistry()
    registry.add("a")
    registry.remove("b")
    registry.remove("a")

    assert len(registry) == 0
    assert "a" not in registry


def test_listener_may_remove_itself_while_notified():
    registry: ListenerRegistry = ListenerRegistry()
    calls: list[str] = []

    def once(name: str):
        def listener(_):
            calls.append(name)
            registry.remove(listener)

        return listener

    registry.add(once("a"))
    registry.add(once("b"))
    registry.fire(lambda listener: listener(None))
    registry.fire(lambda listener: listener(None))

    assert calls == ["b", "a"]


# ---------------------------------------------------------------------------
# Query listeners
# ---------------------------------------------------------------------------


def test_query_listeners_notified_in_reverse_registration_order(query, customer):
    log: list = []
    business = RecordingListener("business", log)
    ui = RecordingListener("ui", log)
    query.add_query_change_listener(business)
    query.add_query_change_listener(ui)

    query.add_table(customer)

    tags = [tag for tag, _, _ in log]
    assert tags == ["ui", "business"] * 4
    assert [name for _, name, _ in log[::2]] == ["item_added"] * 3 + ["container_added"]


def test_removed_query_listener_is_not_notified(query, customer, recorder):
    query.remove_query_change_listener(recorder)
    query.add_table(customer)
    assert recorder.log == []


def test_default_listener_callbacks_are_no_ops(query, customer):
    query.add_query_change_listener(QueryChangeListener())
    query.add_table(customer)
    _col(customer, "name").selected = True
    query.set_grouping_enabled(True)
    assert query.generate_query().startswith("SELECT customer.name")


def test_item_property_change_is_forwarded(query, customer, recorder):
    query.add_table(customer)
    name = _col(customer, "name")
    recorder.log.clear()

    name.where = "= 'Bob'"
    name.where = "= 'Bob'"

    assert recorder.names() == ["item_property_changed"]
    event: PropertyChangeEvent = recorder.log[0][2]
    assert event.source is name
    assert event.property_name == Item.WHERE
    assert event.new_value == "= 'Bob'"


def test_listener_sees_synchronised_selection(query, customer):
    seen: list = []

    class Observer(QueryChangeListener):
        def item_property_changed(self, event):
            seen.append(query.selected_columns)

    query.add_table(customer)
    query.add_query_change_listener(Observer())
    name = _col(customer, "name")

    name.selected = True

    assert seen == [(name,)]


# ---------------------------------------------------------------------------
# Override text
# ---------------------------------------------------------------------------


def test_defining_generated_text_is_ignored(query, customer, recorder):
    query.add_table(customer)
    _col(customer, "name").selected = True
    recorder.log.clear()

    query.define_user_modified_query(query.generate_query())

    assert query.is_script_modified is False
    assert query.user_modified_query is None
    assert recorder.log == []


def test_override_is_installed_before_event_fires(query, customer):
    seen: list = []

    class Observer(QueryChangeListener):
        def property_changed(self, event):
            seen.append((event.property_name, query.generate_query()))

    query.add_table(customer)
    _col(customer, "name").selected = True
    query.add_query_change_listener(Observer())

    query.define_user_modified_query("SELECT 42")

    assert seen == [(Query.USER_MODIFIED_QUERY, "SELECT 42")]
    assert query.is_script_modified is True


def test_remove_user_modifications_fires_only_when_set(query, recorder):
    query.remove_user_modifications()
    assert recorder.log == []

    query.define_user_modified_query("SELECT 1")
    query.remove_user_modifications()

    events = [event for _, _, event in recorder.log]
    assert [e.new_value for e in events] == ["SELECT 1", None]
    assert query.generate_query() == ""


# ---------------------------------------------------------------------------
# Execution readiness
# ---------------------------------------------------------------------------


def test_readiness_is_announced_only_on_false_to_true(query, recorder):
    query.set_can_execute_query(True)
    assert recorder.log == []

    query.start_compound_edit()
    assert query.can_execute_query is False
    query.start_compound_edit()
    assert recorder.log == []

    query.end_compound_edit()
    query.end_compound_edit()
    assert recorder.names() == ["can_execute_query"]
    assert query.can_execute_query is True
