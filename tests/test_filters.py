import pytest

from reveng.core.filters import FilterChain, TableFilter
from reveng.core.keys import TableIdentifier

T1 = TableIdentifier("MAIN", "SALES", "ORDERS")
T2 = TableIdentifier("MAIN", "SALES", "INVOICES")


def test_filter_matches_whole_values():
    table_filter = TableFilter(match_name="ORD.*")

    assert table_filter.matches(T1) is True
    assert table_filter.matches(TableIdentifier("MAIN", "SALES", "XORDERS")) is False


def test_filter_without_patterns_matches_absent_parts():
    assert TableFilter().matches(TableIdentifier(None, None, "ORDERS")) is True
    assert TableFilter(match_schema="SALES").matches(TableIdentifier(None, None, "ORDERS")) is False


def test_filter_verdicts_are_none_when_not_matching():
    table_filter = TableFilter(match_name="ORDERS", exclude=True, package="com.acme")

    assert table_filter.exclude(T1) is True
    assert table_filter.package(T1) == "com.acme"
    assert table_filter.exclude(T2) is None
    assert table_filter.package(T2) is None


def test_invalid_regex_raises_value_error():
    with pytest.raises(ValueError, match="Invalid regex"):
        TableFilter(match_name="(")


def test_include_filter_narrows_universe():
    chain = FilterChain(
        [
            TableFilter(match_name="ORDERS", exclude=False),
            TableFilter(match_name="NOTHING_.*", exclude=True),
        ]
    )

    assert chain.is_excluded(T1) is False
    assert chain.is_excluded(T2) is True


def test_exclude_only_chain_keeps_unmentioned_tables():
    chain = FilterChain([TableFilter(match_name="NOTHING_.*", exclude=True)])

    assert chain.is_excluded(T2) is False


def test_empty_chain_includes_everything():
    assert FilterChain().is_excluded(T1) is False


def test_first_explicit_verdict_wins():
    chain = FilterChain(
        [
            TableFilter(match_name="ORDERS", exclude=True),
            TableFilter(match_name=".*", exclude=False),
        ]
    )

    assert chain.explicit_verdict(T1) is True
    assert chain.is_excluded(T1) is True
    assert chain.is_excluded(T2) is False


def test_default_verdict_is_independent_of_position():
    chain = FilterChain(
        [
            TableFilter(match_name="NOTHING_.*", exclude=True),
            TableFilter(match_name="ALSO_NOTHING", exclude=False),
        ]
    )

    assert chain.explicit_verdict(T2) is None
    assert chain.default_verdict() is True


def test_package_for_returns_first_package_in_chain_order():
    chain = FilterChain(
        [
            TableFilter(match_name="ORDERS", exclude=False),
            TableFilter(match_schema="SALES", package="com.acme.sales"),
            TableFilter(match_name=".*", package="com.acme"),
        ]
    )

    assert chain.package_for(T1) == "com.acme.sales"
    assert chain.package_for(TableIdentifier("MAIN", "HR", "EMP")) == "com.acme"


def test_general_attributes_for_returns_first_non_empty_map():
    chain = FilterChain(
        [
            TableFilter(match_name="ORDERS"),
            TableFilter(match_schema="SALES", meta_attributes={"author": ["sales"]}),
            TableFilter(meta_attributes={"author": ["everyone"]}),
        ]
    )

    assert chain.general_attributes_for(T1) == {"author": ["sales"]}
    assert chain.general_attributes_for(TableIdentifier("MAIN", "HR", "EMP")) == {
        "author": ["everyone"]
    }
    assert FilterChain().general_attributes_for(T1) is None
