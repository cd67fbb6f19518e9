"""Unit tests for items, containers, joins, and table metadata."""

from __future__ import annotations

import pytest

from querycraft.errors import InvalidJoinError, ModelError
from querycraft.model.container import ContainerChildListener, ItemContainer, TableContainer
from querycraft.model.enums import GroupFunction, OrderByArgument
from querycraft.model.item import ColumnItem, Item, StringCountItem, StringItem
from querycraft.model.join import Join
from querycraft.model.snapshot import ColumnInfo, SchemaSnapshot, TableInfo


def _col(container, name):
    return container.get_item_by_name(name)


class _ChildLog(ContainerChildListener):
    def __init__(self) -> None:
        self.events: list = []

    def child_added(self, event) -> None:
        self.events.append(("added", event.child, event.index))

    def child_removed(self, event) -> None:
        self.events.append(("removed", event.child, event.index))


# ---------------------------------------------------------------------------
# SchemaSnapshot
# ---------------------------------------------------------------------------


def test_snapshot_lookup(snapshot: SchemaSnapshot):
    assert snapshot.table_names == ["customer", "orders", "order_line", "product"]
    assert snapshot.get_table("missing") is None
    assert snapshot.get_column("orders", "rowid").row_identifier is True
    assert snapshot.get_column("orders", "missing") is None
    assert snapshot.get_column("missing", "id") is None


def test_table_qualified_name_skips_absent_parts(snapshot: SchemaSnapshot):
    assert snapshot.get_table("product").qualified_name == "shop.inventory.product"
    assert snapshot.get_table("customer").qualified_name == "customer"
    assert TableInfo(name="t", schema_name="s").qualified_name == "s.t"


def test_snapshot_rejects_unknown_fields():
    with pytest.raises(ValueError):
        TableInfo.model_validate({"name": "t", "owner": "x"})


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


def test_item_defaults():
    item = StringItem("x")
    assert item.selected is False
    assert item.group_by is GroupFunction.GROUP_BY
    assert item.order_by is OrderByArgument.NONE
    assert item.container is None
    assert item.row_identifier is False
    assert not (item.has_alias or item.has_where or item.has_having)


def test_item_fires_only_on_change():
    item = StringItem("x")
    events: list = []
    item.add_property_change_listener(events.append)

    item.selected = True
    item.selected = True
    item.alias = "y"
    item.alias = "y"

    assert [(e.property_name, e.old_value, e.new_value) for e in events] == [
        (Item.SELECTED, False, True),
        (Item.ALIAS, None, "y"),
    ]
    assert all(e.source is item for e in events)


def test_item_coerces_enum_values_from_strings():
    item = StringItem("x")
    item.group_by = "SUM"
    item.order_by = "DESC"
    assert item.group_by is GroupFunction.SUM
    assert item.order_by is OrderByArgument.DESC
    with pytest.raises(ValueError):
        item.group_by = "MEDIAN"


def test_removed_property_listener_is_silent():
    item = StringItem("x")
    events: list = []
    item.add_property_change_listener(events.append)
    item.remove_property_change_listener(events.append)

    item.where = "> 1"

    assert events == []
    assert not item.has_property_change_listener(events.append)


def test_item_belongs_to_one_container():
    item = StringItem("x")
    first, second = ItemContainer("first"), ItemContainer("second")
    first.add_item(item)

    with pytest.raises(ModelError):
        second.add_item(item)
    assert item.container is first
    assert second.items == ()


def test_column_item_reports_row_identifier(orders):
    assert _col(orders, "rowid").row_identifier is True
    assert _col(orders, "id").row_identifier is False
    assert isinstance(_col(orders, "id"), ColumnItem)


def test_item_copy_has_fresh_uuid_and_same_state():
    item = StringItem("x", alias="a")
    item.selected = True
    item.group_by = GroupFunction.MAX
    item.where = "> 1"
    events: list = []
    item.add_property_change_listener(events.append)

    copy = item.create_copy()

    assert copy.uuid != item.uuid
    assert type(copy) is StringItem
    assert (copy.name, copy.alias, copy.selected, copy.group_by, copy.where) == (
        "x", "a", True, GroupFunction.MAX, "> 1",
    )
    assert copy.container is None
    copy.selected = False
    assert events == []


def test_count_item_defaults_to_count_star():
    count = StringCountItem()
    assert count.name == "COUNT(*)"
    assert isinstance(count, StringItem)
    assert type(count.create_copy()) is StringCountItem


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------


def test_table_container_builds_column_items(customer):
    assert [i.name for i in customer.items] == ["id", "name", "city"]
    assert all(i.container is customer for i in customer.items)
    assert customer.reference_name == "customer"
    assert customer.qualified_name == "customer"


def test_table_container_from_unknown_table_raises(snapshot):
    with pytest.raises(ModelError) as exc_info:
        TableContainer.from_snapshot(snapshot, "missing")
    assert exc_info.value.details["table"] == "missing"


def test_alias_becomes_reference_name(snapshot):
    product = TableContainer.from_snapshot(snapshot, "product", alias="p")
    assert product.has_alias
    assert product.reference_name == "p"
    assert product.qualified_name == "shop.inventory.product"


def test_child_events_carry_index(customer):
    log = _ChildLog()
    customer.add_child_listener(log)
    expression = StringItem("1")

    customer.add_item(expression, index=1)
    customer.remove_item(expression)

    assert log.events == [("added", expression, 1), ("removed", expression, 1)]
    assert [i.name for i in customer.items] == ["id", "name", "city"]


def test_remove_unknown_item_raises(customer):
    with pytest.raises(ModelError):
        customer.remove_item(StringItem("ghost"))


def test_get_item_by_uuid_and_name(customer):
    name = _col(customer, "name")
    assert customer.get_item(name.uuid) is name
    assert customer.get_item("missing") is None
    assert customer.get_item_by_name("missing") is None


def test_container_copy(snapshot):
    product = TableContainer.from_snapshot(snapshot, "product", alias="p")
    _col(product, "price").selected = True
    log = _ChildLog()
    product.add_child_listener(log)

    copy = product.create_copy()

    assert copy.uuid != product.uuid
    assert copy.alias == "p"
    assert copy.qualified_name == "shop.inventory.product"
    assert [i.name for i in copy.items] == ["id", "name", "price"]
    assert all(i.container is copy for i in copy.items)
    assert _col(copy, "price").selected is True
    assert not copy.has_child_listener(log)
    assert log.events == []


# ---------------------------------------------------------------------------
# Joins
# ---------------------------------------------------------------------------


def test_join_requires_two_containers(customer):
    with pytest.raises(InvalidJoinError):
        Join(_col(customer, "id"), _col(customer, "name"))
    with pytest.raises(InvalidJoinError):
        Join(StringItem("a"), StringItem("b"))


@pytest.mark.parametrize(
    "left,right,keyword",
    [
        (False, False, "INNER JOIN"),
        (True, False, "LEFT OUTER JOIN"),
        (False, True, "RIGHT OUTER JOIN"),
        (True, True, "FULL OUTER JOIN"),
    ],
)
def test_join_type(customer, orders, left, right, keyword):
    join = Join(_col(customer, "id"), _col(orders, "customer_id"))
    join.left_column_outer_join = left
    join.right_column_outer_join = right
    assert join.join_type == keyword


def test_join_endpoints(customer, orders, product):
    join = Join(_col(customer, "id"), _col(orders, "customer_id"))

    assert join.left_container is customer
    assert join.right_container is orders
    assert join.other_container(customer) is orders
    assert join.other_container(orders) is customer
    assert join.touches(customer) and not join.touches(product)


def test_join_outer_flag_by_container(customer, orders):
    join = Join(_col(customer, "id"), _col(orders, "customer_id"))
    events: list = []
    join.add_join_change_listener(events.append)

    join.set_outer_join_for(orders, True)
    join.set_outer_join_for(orders, True)

    assert join.outer_join_for(orders) is True
    assert join.outer_join_for(customer) is False
    assert [e.property_name for e in events] == [Join.RIGHT_JOIN_CHANGED]
