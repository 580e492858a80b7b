"""Tests for account x secondary-key cross tabulation."""

from decimal import Decimal

from ledgerview.domain import classifier as classifiers
from ledgerview.domain.crosstab import DEFAULT_KEY, build_cross_tab
from ledgerview.utils.number_format import format_amount


def _matrix_rows(row_factory):
    return [
        row_factory("1100", "Cash", secondary_key="CC2", closing=10),
        row_factory("1100", "Cash", secondary_key="CC1", closing=20),
        row_factory("2100", "Loans", secondary_key="CC1", closing=5),
    ]


def test_absent_cell_is_zero(row_factory):
    cross_tab = build_cross_tab(_matrix_rows(row_factory), "closing")

    assert cross_tab.secondary_keys == ("CC1", "CC2")
    loans = next(r for r in cross_tab.rows if r.code == "2100")
    assert loans.cells["CC2"] == 0
    assert format_amount(loans.cells["CC2"]) == "0.00"


def test_row_and_column_totals(row_factory):
    cross_tab = build_cross_tab(_matrix_rows(row_factory), "closing")

    cash = next(r for r in cross_tab.rows if r.code == "1100")
    assert cash.total == Decimal("30")
    assert cross_tab.column_totals == {"CC1": Decimal("25"), "CC2": Decimal("10")}
    assert cross_tab.grand_total == Decimal("35")
    assert sum(cross_tab.row_totals, Decimal("0")) == cross_tab.grand_total
    assert cross_tab.row_count == 3


def test_missing_secondary_key_goes_to_default_column(row_factory):
    rows = [
        row_factory("1100", secondary_key="CC1", closing=1),
        row_factory("1100", secondary_key=None, closing=2),
        row_factory("1200", secondary_key="  ", closing=3),
    ]
    cross_tab = build_cross_tab(rows, "closing")

    assert cross_tab.secondary_keys == ("CC1", DEFAULT_KEY)
    assert cross_tab.column_totals[DEFAULT_KEY] == Decimal("5")
    assert cross_tab.grand_total == Decimal("6")


def test_keys_sorted_lexicographically(row_factory):
    rows = [row_factory("1", secondary_key=key, closing=1) for key in ("10", "9", "2")]
    cross_tab = build_cross_tab(rows, "closing")
    assert cross_tab.secondary_keys == ("10", "2", "9")


def test_groups_by_category_and_omits_empty(row_factory):
    rows = [
        row_factory("2100", secondary_key="CC1", closing=5),
        row_factory("1100", secondary_key="CC1", closing=10),
        row_factory("1200", secondary_key="CC2", closing=1),
    ]
    cross_tab = build_cross_tab(
        rows, "closing", classifier=classifiers.PROVINCIAL_TRIAL_BALANCE
    )

    assert [g.category for g in cross_tab.groups] == ["Assets", "Liabilities"]
    assets = cross_tab.groups[0]
    assert [r.code for r in assets.rows] == ["1100", "1200"]
    assert assets.column_totals == {"CC1": Decimal("10"), "CC2": Decimal("1")}
    assert assets.total == Decimal("11")
    assert cross_tab.net_totals is None


def test_sort_accounts_orders_codes_within_category(row_factory):
    rows = [
        row_factory("1200", secondary_key="CC1", closing=1),
        row_factory("2100", secondary_key="CC1", closing=5),
        row_factory("1100", secondary_key="CC2", closing=10),
    ]
    cross_tab = build_cross_tab(
        rows, "closing", classifier=classifiers.PROVINCIAL_TRIAL_BALANCE, sort_accounts=True
    )

    assert [r.code for r in cross_tab.rows] == ["1100", "1200", "2100"]

    unsorted = build_cross_tab(rows, "closing", classifier=classifiers.PROVINCIAL_TRIAL_BALANCE)
    assert [r.code for r in unsorted.rows] == ["1200", "1100", "2100"]


def test_net_totals(row_factory):
    rows = [
        row_factory("I1", flag="I", secondary_key="01", actual=100),
        row_factory("I1", flag="I", secondary_key="02", actual=50),
        row_factory("X1", flag="X", secondary_key="01", actual=30),
        row_factory("X2", flag="X", secondary_key="02", actual=70),
    ]
    cross_tab = build_cross_tab(
        rows,
        "actual",
        classifier=classifiers.INCOME_EXPENDITURE,
        net_weights={"Income": 1, "Expenditure": -1},
    )

    assert cross_tab.net_totals == {"01": Decimal("70"), "02": Decimal("-20")}
    assert cross_tab.net_grand_total == Decimal("50")
    assert cross_tab.grand_total == Decimal("250")


def test_empty_input():
    cross_tab = build_cross_tab([], "closing")

    assert cross_tab.secondary_keys == ()
    assert cross_tab.rows == ()
    assert cross_tab.grand_total == 0
