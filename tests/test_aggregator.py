"""Tests for category aggregation and section boundaries."""

from decimal import Decimal

import pytest

from ledgerview.domain import classifier as classifiers
from ledgerview.domain.aggregator import (
    ORDER_AS_RECEIVED,
    ORDER_BY_CATEGORY,
    aggregate,
    category_sections,
    group_subgroups,
    order_rows,
    total_rows,
)
from ledgerview.domain.classifier import OTHER
from ledgerview.domain.entities import TransactionRow
from ledgerview.utils.number_format import format_amount

CLOSING = ("closing",)


def test_scenario_subtotals_and_grand_total(trial_balance_rows):
    result = aggregate(trial_balance_rows, classifiers.TRIAL_BALANCE, CLOSING)

    assert result.category_totals["Assets"].get("closing") == Decimal("50")
    assert result.category_totals["Liabilities"].get("closing") == Decimal("30")
    assert result.grand_total.get("closing") == Decimal("80")
    assert format_amount(result.grand_total.get("closing")) == "80.00"


def test_negative_subtotal_formats_in_parentheses(row_factory):
    rows = [
        row_factory("A100", closing=100),
        row_factory("A200", closing=-150),
        row_factory("L100", closing=30),
    ]
    result = aggregate(rows, classifiers.TRIAL_BALANCE, CLOSING)

    assets = result.category_totals["Assets"].get("closing")
    assert assets == Decimal("-50")
    assert format_amount(assets) == "(50.00)"


def test_known_categories_present_with_zero_rows(trial_balance_rows):
    result = aggregate(trial_balance_rows, classifiers.TRIAL_BALANCE, CLOSING)

    assert result.categories == ("Assets", "Expenditure", "Liabilities", "Revenue", OTHER)
    assert result.category_totals["Revenue"].get("closing") == 0
    assert result.category_totals["Revenue"].count == 0


def test_rollup_consistency(row_factory):
    rows = [
        row_factory("A1", opening=1.10, closing=2.205),
        row_factory("E1", opening=-3.3, closing=4),
        row_factory("Z9", opening=7, closing=-0.005),
        row_factory("R1", opening=0.01, closing=0.02),
    ]
    measures = ("opening", "closing")
    result = aggregate(rows, classifiers.TRIAL_BALANCE, measures)

    for m in measures:
        by_category = sum(
            (t.get(m) for t in result.category_totals.values()), Decimal("0")
        )
        by_row = sum((r.measure(m) for r in rows), Decimal("0"))
        assert result.grand_total.get(m) == by_category == by_row
    assert result.grand_total.count == len(rows)


def test_unmapped_rows_counted_under_fallback(row_factory):
    rows = [row_factory("Z1", closing=5), row_factory("", closing=2)]
    result = aggregate(rows, classifiers.TRIAL_BALANCE, CLOSING)

    assert result.category_totals[OTHER].get("closing") == Decimal("7")
    assert result.category_totals[OTHER].count == 2
    assert result.grand_total.get("closing") == Decimal("7")


def test_dirty_measures_read_as_zero():
    rows = [
        TransactionRow(code="A1", name="x", measures={"closing": None}),
        TransactionRow(code="A2", name="y", measures={}),
        TransactionRow(code="A3", name="z", measures={"closing": Decimal("4")}),
    ]
    result = aggregate(rows, classifiers.TRIAL_BALANCE, CLOSING)

    assert result.category_totals["Assets"].get("closing") == Decimal("4")
    assert result.category_totals["Assets"].count == 3


def test_empty_input():
    result = aggregate([], classifiers.TRIAL_BALANCE, CLOSING)

    assert result.grand_total.get("closing") == 0
    assert result.grand_total.count == 0
    assert all(t.count == 0 for t in result.category_totals.values())


def test_sections_follow_row_sequence(row_factory):
    rows = [
        row_factory("A1", closing=1),
        row_factory("A2", closing=2),
        row_factory("L1", closing=3),
        row_factory("R1", closing=4),
        row_factory("R2", closing=5),
    ]
    sections = category_sections(rows, classifiers.TRIAL_BALANCE, CLOSING)

    assert [s.category for s in sections] == ["Assets", "Liabilities", "Revenue"]
    assert [len(s.rows) for s in sections] == [2, 1, 2]
    assert [s.subtotal.get("closing") for s in sections] == [
        Decimal("3"),
        Decimal("3"),
        Decimal("9"),
    ]


def test_split_category_yields_two_sections(row_factory):
    rows = [
        row_factory("A1", closing=1),
        row_factory("L1", closing=3),
        row_factory("A2", closing=2),
    ]
    sections = category_sections(rows, classifiers.TRIAL_BALANCE, CLOSING)

    assert [s.category for s in sections] == ["Assets", "Liabilities", "Assets"]
    assert sections[0].subtotal.get("closing") == Decimal("1")
    assert sections[2].subtotal.get("closing") == Decimal("2")


def test_sections_empty_input():
    assert category_sections([], classifiers.TRIAL_BALANCE, CLOSING) == ()


@pytest.mark.parametrize(
    "ordering, expected",
    [
        (ORDER_AS_RECEIVED, ["X1", "I1", "X2", "I2"]),
        (ORDER_BY_CATEGORY, ["I1", "I2", "X1", "X2"]),
    ],
)
def test_order_rows(row_factory, ordering, expected):
    rows = [
        row_factory("X1", flag="X"),
        row_factory("I1", flag="I"),
        row_factory("X2", flag="X"),
        row_factory("I2", flag="I"),
    ]
    ordered = order_rows(rows, classifiers.INCOME_EXPENDITURE, ordering)
    assert [r.code for r in ordered] == expected


def test_group_subgroups_in_first_appearance_order(row_factory):
    rows = [
        row_factory("1", subgroup="SALES", actual=10),
        row_factory("2", subgroup="GRANTS", actual=5),
        row_factory("3", subgroup="SALES", actual=1),
    ]
    subgroups = group_subgroups(rows, ("actual",), label_of=str.title)

    assert [g.label for g in subgroups] == ["Sales", "Grants"]
    assert [len(g.rows) for g in subgroups] == [2, 1]
    assert subgroups[0].subtotal.get("actual") == Decimal("11")


def test_sections_with_subgroups(row_factory):
    rows = [
        row_factory("1", flag="I", subgroup="SALES", actual=10),
        row_factory("2", flag="I", subgroup="OTHER INCOME", actual=5),
        row_factory("3", flag="X", subgroup="SALARIES", actual=7),
    ]
    sections = category_sections(
        rows, classifiers.INCOME_EXPENDITURE, ("actual",), with_subgroups=True
    )

    assert [s.category for s in sections] == ["Income", "Expenditure"]
    assert [g.label for g in sections[0].subgroups] == ["SALES", "OTHER INCOME"]
    assert sections[0].subtotal.get("actual") == Decimal("15")


def test_total_rows(row_factory):
    totals = total_rows("all", [row_factory("A", debit=1.5), row_factory("B", debit=2)], ("debit",))
    assert totals.get("debit") == Decimal("3.5")
    assert totals.count == 2
