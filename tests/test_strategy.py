import pytest

from reveng.core.errors import DelegationError
from reveng.core.filters import TableFilter
from reveng.core.keys import TableIdentifier
from reveng.core.models import AssociationInfo, MetaAttribute, SchemaSelection
from reveng.core.schema import DeclaredForeignKey, DeclaredTable
from reveng.core.typemap import SQLTypeMapping, SqlType


class _Baseline:
    """Baseline strategy stub answering every question with a marker value."""

    def __init__(self):
        self.calls: list[str] = []

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)

        def answer(*args, **kwargs):
            self.calls.append(name)
            return f"baseline:{name}"

        return answer


class _NamingBaseline(_Baseline):
    def table_to_class_name(self, table):
        self.calls.append("table_to_class_name")
        return f"org.default.{table.name.title()}"


def _fk_args(repo_table, referenced):
    return (repo_table, ["CUSTOMER_ID"], referenced, ["ID"])


def test_simple_class_name_is_qualified_with_filter_package(repository, customer):
    repository.register_table(DeclaredTable("MAIN", "SALES", "CUSTOMER"), "Customer")
    repository.add_table_filter(TableFilter(match_name="CUSTOMER", package="com.acme"))

    strategy = repository.build_strategy(_Baseline())

    assert strategy.table_to_class_name(customer) == "com.acme.Customer"


def test_qualified_class_name_is_returned_unchanged(repository, customer):
    repository.register_table(
        DeclaredTable("MAIN", "SALES", "CUSTOMER"), "com.acme.v2.Customer"
    )
    repository.add_table_filter(TableFilter(package="com.other"))

    strategy = repository.build_strategy(_Baseline())

    assert strategy.table_to_class_name(customer) == "com.acme.v2.Customer"


def test_simple_class_name_without_package_stays_unqualified(repository, customer):
    repository.register_table(DeclaredTable("MAIN", "SALES", "CUSTOMER"), "Customer")
    baseline = _Baseline()

    assert repository.build_strategy(baseline).table_to_class_name(customer) == "Customer"
    assert baseline.calls == []


def test_baseline_class_name_moves_into_filter_package(repository, orders):
    repository.add_table_filter(TableFilter(match_schema="SALES", package="com.acme.sales"))
    strategy = repository.build_strategy(_NamingBaseline())

    assert strategy.table_to_class_name(orders) == "com.acme.sales.Orders"
    assert strategy.table_to_class_name(TableIdentifier("MAIN", "HR", "EMP")) == (
        "org.default.Emp"
    )


def test_column_override_beats_type_mapping(repository, orders):
    repository.add_type_mapping(SQLTypeMapping(SqlType.VARCHAR, "string"))
    repository.set_type_for_column(orders, "STATUS", "com.acme.StatusType")
    strategy = repository.build_strategy(_Baseline())

    assert (
        strategy.column_to_type_name(orders, "STATUS", SqlType.VARCHAR, 20, 0, 0, True, False)
        == "com.acme.StatusType"
    )
    assert (
        strategy.column_to_type_name(orders, "NOTE", SqlType.VARCHAR, 20, 0, 0, True, False)
        == "string"
    )


def test_type_name_falls_through_to_baseline(repository, orders):
    baseline = _Baseline()
    strategy = repository.build_strategy(baseline)

    assert (
        strategy.column_to_type_name(orders, "ID", SqlType.INTEGER, None, 10, 0, False, True)
        == "baseline:column_to_type_name"
    )
    assert baseline.calls == ["column_to_type_name"]


def test_type_mapping_applies_without_table(repository):
    repository.add_type_mapping(SQLTypeMapping(SqlType.INTEGER, "int"))
    strategy = repository.build_strategy()

    assert strategy.column_to_type_name(None, None, SqlType.INTEGER, None, 10, 0, True, False) == "int"


def test_empty_property_write_keeps_previous_value(repository, orders):
    repository.set_property_for_column(orders, "col", "name")
    repository.set_property_for_column(orders, "col", "")
    strategy = repository.build_strategy(_Baseline())

    assert strategy.column_to_property_name(orders, "col") == "name"
    assert strategy.column_to_property_name(orders, "other") == (
        "baseline:column_to_property_name"
    )


def test_table_exclusion_never_delegates(repository, orders):
    repository.add_table_filter(TableFilter(match_name="ORDERS", exclude=True))
    strategy = repository.build_strategy()

    assert strategy.exclude_table(orders) is True
    assert strategy.exclude_table(TableIdentifier("MAIN", "SALES", "OTHER")) is False


def test_column_exclusion_never_delegates(repository, orders):
    repository.set_excluded_column(orders, "AUDIT_TS")
    baseline = _Baseline()
    strategy = repository.build_strategy(baseline)

    assert strategy.exclude_column(orders, "AUDIT_TS") is True
    assert strategy.exclude_column(orders, "ID") is False
    assert baseline.calls == []
    assert repository.build_strategy(None).exclude_column(orders, "ID") is False


def test_identifier_and_primary_key_overrides(repository, orders, customer):
    repository.set_identifier_strategy_for_table(orders, "sequence", {"sequence": "ORD_SEQ"})
    repository.set_primary_key_info_for_table(
        orders, columns=["ORDER_ID"], property_name="id", composite_id_name="OrderId"
    )
    strategy = repository.build_strategy(_Baseline())

    assert strategy.get_table_identifier_strategy_name(orders) == "sequence"
    assert strategy.get_table_identifier_properties(orders) == {"sequence": "ORD_SEQ"}
    assert strategy.get_primary_key_column_names(orders) == ["ORDER_ID"]
    assert strategy.table_to_identifier_property_name(orders) == "id"
    assert strategy.table_to_composite_id_name(orders) == "OrderId"
    assert strategy.get_table_identifier_strategy_name(customer) == (
        "baseline:get_table_identifier_strategy_name"
    )
    assert strategy.get_table_identifier_properties(customer) == (
        "baseline:get_table_identifier_properties"
    )


def test_identifier_strategy_without_params_defers_properties(repository, orders):
    repository.set_identifier_strategy_for_table(orders, "identity")
    repository.set_identifier_strategy_for_table(orders, None, {"ignored": "x"})
    strategy = repository.build_strategy(_Baseline())

    assert strategy.get_table_identifier_strategy_name(orders) == "identity"
    assert strategy.get_table_identifier_properties(orders) == (
        "baseline:get_table_identifier_properties"
    )


def test_new_generator_drops_previous_generator_params(repository, orders):
    repository.set_identifier_strategy_for_table(orders, "sequence", {"sequence": "ORD_SEQ"})
    repository.set_identifier_strategy_for_table(orders, "identity")
    strategy = repository.build_strategy(_Baseline())

    assert strategy.get_table_identifier_strategy_name(orders) == "identity"
    assert strategy.get_table_identifier_properties(orders) == (
        "baseline:get_table_identifier_properties"
    )


def test_new_generator_params_replace_previous_ones(repository, orders):
    repository.set_identifier_strategy_for_table(orders, "sequence", {"sequence": "ORD_SEQ"})
    repository.set_identifier_strategy_for_table(orders, "hilo", {"max_lo": "100"})
    strategy = repository.build_strategy(_Baseline())

    assert strategy.get_table_identifier_properties(orders) == {"max_lo": "100"}


def test_foreign_key_overrides_by_constraint_name(repository, orders, customer):
    association = AssociationInfo(cascade="all")
    repository.record_foreign_key_info(
        "FK_ORDER_CUSTOMER",
        owning_name="buyer",
        inverse_name="orders",
        inverse_exclude=True,
        owning_association=association,
    )
    strategy = repository.build_strategy(_Baseline())
    args = _fk_args(orders, customer)
    fk = DeclaredForeignKey(name="FK_ORDER_CUSTOMER", referenced_table=customer)
    other = DeclaredForeignKey(name="FK_OTHER", referenced_table=customer)

    assert strategy.foreign_key_to_entity_name("FK_ORDER_CUSTOMER", *args, False) == "buyer"
    assert strategy.foreign_key_to_inverse_entity_name("FK_ORDER_CUSTOMER", *args, True) == "orders"
    assert strategy.foreign_key_to_collection_name("FK_ORDER_CUSTOMER", *args, False) == "orders"
    assert strategy.exclude_foreign_key_as_collection("FK_ORDER_CUSTOMER", *args) is True
    assert strategy.exclude_foreign_key_as_many_to_one("FK_ORDER_CUSTOMER", *args) == (
        "baseline:exclude_foreign_key_as_many_to_one"
    )
    assert strategy.foreign_key_to_association_info(fk) == association
    assert strategy.foreign_key_to_inverse_association_info(fk) == (
        "baseline:foreign_key_to_inverse_association_info"
    )
    assert strategy.foreign_key_to_entity_name("FK_OTHER", *args, False) == (
        "baseline:foreign_key_to_entity_name"
    )
    assert strategy.foreign_key_to_association_info(other) == (
        "baseline:foreign_key_to_association_info"
    )


def test_get_foreign_keys_uses_reverse_index(repository, orders, customer):
    fk = DeclaredForeignKey(name="FK_ORDER_CUSTOMER", referenced_table=customer)
    repository.register_table(DeclaredTable("MAIN", "SALES", "ORDERS", (fk,)))
    strategy = repository.build_strategy(_Baseline())

    assert strategy.get_foreign_keys(customer) == [fk]
    assert strategy.get_foreign_keys(orders) == "baseline:get_foreign_keys"


def test_schema_selections_override_baseline(repository):
    baseline = _Baseline()
    assert repository.build_strategy(baseline).get_schema_selections() == (
        "baseline:get_schema_selections"
    )

    selection = SchemaSelection(match_schema="SALES")
    repository.add_schema_selection(selection)

    assert repository.build_strategy(baseline).get_schema_selections() == [selection]


def test_meta_attributes_prefer_specific_then_filters(repository, orders, customer):
    repository.set_table_meta_attributes(orders, {"scope-class": ["abstract"]})
    repository.add_table_filter(
        TableFilter(match_schema="SALES", meta_attributes={"author": ["sales"]})
    )
    repository.set_column_meta_attributes(orders, "ID", {"use-in-tostring": ["true"]})
    strategy = repository.build_strategy(_Baseline())

    assert strategy.table_to_meta_attributes(orders) == {
        "scope-class": MetaAttribute("scope-class", ("abstract",))
    }
    assert strategy.table_to_meta_attributes(customer) == {
        "author": MetaAttribute("author", ("sales",))
    }
    assert strategy.column_to_meta_attributes(orders, "ID") == {
        "use-in-tostring": MetaAttribute("use-in-tostring", ("true",))
    }
    assert strategy.column_to_meta_attributes(orders, "STATUS") is None


def test_meta_attributes_without_overrides_are_none(repository, orders):
    strategy = repository.build_strategy(None)

    assert strategy.table_to_meta_attributes(orders) is None
    assert strategy.column_to_meta_attributes(orders, "ID") is None


def test_missing_baseline_fails_only_on_fallthrough(repository, orders):
    repository.set_property_for_column(orders, "ID", "id")
    strategy = repository.build_strategy(None)

    assert strategy.column_to_property_name(orders, "ID") == "id"
    with pytest.raises(DelegationError, match="column_to_property_name") as excinfo:
        strategy.column_to_property_name(orders, "STATUS")
    assert excinfo.value.method == "column_to_property_name"
