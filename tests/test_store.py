import pytest

from reveng.core.keys import ColumnKey, TableIdentifier
from reveng.core.models import AssociationInfo, ForeignKeyInfo
from reveng.core.schema import DeclaredForeignKey, DeclaredTable
from reveng.core.store import OverrideMap, OverrideStore, is_empty


@pytest.mark.parametrize("value", [None, "", [], {}, (), set()])
def test_is_empty_for_missing_payloads(value):
    assert is_empty(value) is True


@pytest.mark.parametrize("value", [False, 0, "x", ["a"], {"k": "v"}])
def test_is_empty_keeps_real_payloads(value):
    assert is_empty(value) is False


def test_override_map_ignores_empty_writes():
    names: OverrideMap[str, str] = OverrideMap("names")

    assert names.set("a", "name") is True
    assert names.set("a", "") is False
    assert names.set("a", None) is False
    assert names.get("a") == "name"


def test_override_map_replaces_on_write():
    names: OverrideMap[str, str] = OverrideMap("names")
    names.set("a", "first")
    names.set("a", "second")

    assert names.get("a") == "second"
    assert len(names) == 1
    assert "a" in names
    assert names.get("b") is None


def test_sparse_foreign_key_merge_keeps_earlier_fields():
    store = OverrideStore()
    store.record_foreign_key_info("FK1", owning_name="orders")
    store.record_foreign_key_info("FK1", inverse_name="order")

    assert store.foreign_keys.get("FK1") == ForeignKeyInfo(
        owning_name="orders", inverse_name="order"
    )


def test_foreign_key_merge_handles_booleans_and_associations():
    store = OverrideStore()
    association = AssociationInfo(cascade="all", fetch="join")
    store.record_foreign_key_info("FK1", owning_exclude=False, owning_association=association)
    store.record_foreign_key_info("FK1", inverse_exclude=True, owning_name="")

    info = store.foreign_keys.get("FK1")
    assert info.owning_exclude is False
    assert info.inverse_exclude is True
    assert info.owning_association == association
    assert info.owning_name is None


def test_foreign_key_call_without_fields_stores_nothing():
    store = OverrideStore()
    store.record_foreign_key_info("FK1")

    assert "FK1" not in store.foreign_keys


def test_register_table_indexes_foreign_keys_by_referenced_table():
    customer = TableIdentifier("MAIN", "SALES", "CUSTOMER")
    fk_orders = DeclaredForeignKey(name="FK_ORDER_CUSTOMER", referenced_table=customer)
    fk_invoices = DeclaredForeignKey(name="FK_INVOICE_CUSTOMER", referenced_table=customer)

    store = OverrideStore()
    store.register_table(DeclaredTable("MAIN", "SALES", "ORDERS", (fk_orders,)), "Order")
    store.register_table(DeclaredTable("MAIN", "SALES", "INVOICES", (fk_invoices,)), "")

    assert store.foreign_keys_referencing(customer) == [fk_orders, fk_invoices]
    assert store.class_names.get(TableIdentifier("MAIN", "SALES", "ORDERS")) == "Order"
    assert TableIdentifier("MAIN", "SALES", "INVOICES") not in store.class_names
    assert store.foreign_keys_referencing(TableIdentifier("MAIN", "SALES", "ORDERS")) is None


def test_set_meta_copies_values_and_ignores_empty_maps():
    store = OverrideStore()
    key = ColumnKey(TableIdentifier(None, None, "ORDERS"), "ID")

    assert store.set_meta(store.column_meta, key, {}) is False
    assert store.set_meta(store.column_meta, key, {"use-in-equals": ("true",)}) is True
    assert store.column_meta.get(key) == {"use-in-equals": ["true"]}
