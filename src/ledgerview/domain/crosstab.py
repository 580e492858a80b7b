"""Account x secondary-key cross tabulation."""

from decimal import Decimal
from typing import Callable, Mapping, Optional, Sequence

from ledgerview.domain.classifier import Classifier
from ledgerview.domain.entities import (
    CrossTab,
    CrossTabGroup,
    CrossTabRow,
    TransactionRow,
)
from ledgerview.logging_setup import get_logger
from ledgerview.utils.number_format import coerce_amount

logger = get_logger(__name__)

DEFAULT_KEY = "DEFAULT"


def default_secondary_key(row: TransactionRow) -> str:
    """Secondary key of a row, ``DEFAULT`` when it is missing or blank."""
    key = (row.secondary_key or "").strip()
    return key or DEFAULT_KEY


def _column_sums(
    rows: Sequence[CrossTabRow], keys: Sequence[str]
) -> dict[str, Decimal]:
    sums = {key: Decimal("0") for key in keys}
    for row in rows:
        for key in keys:
            sums[key] += row.cells[key]
    return sums


def build_cross_tab(
    rows: Sequence[TransactionRow],
    measure: str,
    secondary_key_of: Callable[[TransactionRow], str] = default_secondary_key,
    classifier: Optional[Classifier] = None,
    net_weights: Optional[Mapping[str, int]] = None,
    sort_accounts: bool = False,
) -> CrossTab:
    """Build an account x secondary-key matrix for one measure.

    Columns are the distinct secondary keys sorted ascending. Every
    (account, key) cell is present and zero when no row contributes to it.
    Rows without a secondary key land in the ``DEFAULT`` column so their
    amounts are never dropped.

    When a classifier is given, accounts are grouped per category (in the
    classifier's order, empty categories omitted) and the account key
    includes the category. ``net_weights`` maps categories to a sign used
    for the net row, e.g. ``{"Income": 1, "Expenditure": -1}``. With
    ``sort_accounts`` accounts are ordered by account code within their
    category instead of first appearance.

    Args:
        rows: Input rows
        measure: Measure name to tabulate
        secondary_key_of: Function returning a row's column key
        classifier: Optional classifier for category grouping
        net_weights: Optional per-category weights for a net row
        sort_accounts: Order accounts by code

    Returns:
        CrossTab with row, column and grand totals
    """
    def key_of(row: TransactionRow) -> str:
        return (secondary_key_of(row) or "").strip() or DEFAULT_KEY

    secondary_keys = tuple(sorted({key_of(row) for row in rows}))

    accounts: dict[tuple[Optional[str], str], dict] = {}
    for row in rows:
        category = classifier.classify_row(row) if classifier else None
        account_key = (category, row.code)
        if account_key not in accounts:
            accounts[account_key] = {
                "name": row.name,
                "category": category,
                "cells": {key: Decimal("0") for key in secondary_keys},
            }
        accounts[account_key]["cells"][key_of(row)] += coerce_amount(
            row.measures.get(measure)
        )

    account_rows = []
    for (category, code), data in accounts.items():
        cells = data["cells"]
        account_rows.append(
            CrossTabRow(
                code=code,
                name=data["name"],
                category=category,
                cells=cells,
                total=sum(cells.values(), Decimal("0")),
            )
        )

    if sort_accounts:
        account_rows.sort(key=lambda r: r.code)

    groups: tuple[CrossTabGroup, ...] = ()
    if classifier is not None:
        account_rows.sort(key=lambda r: classifier.order_of(r.category or ""))
        groups = _build_groups(account_rows, secondary_keys, classifier)

    column_totals = _column_sums(account_rows, secondary_keys)
    grand_total = sum(column_totals.values(), Decimal("0"))

    row_sum = sum((r.total for r in account_rows), Decimal("0"))
    if row_sum != grand_total:
        logger.error(
            "Cross tab totals disagree: rows %s, columns %s", row_sum, grand_total
        )

    net_totals = None
    net_grand_total = None
    if net_weights is not None:
        net_totals = {key: Decimal("0") for key in secondary_keys}
        for group in groups:
            weight = net_weights.get(group.category, 0)
            for key in secondary_keys:
                net_totals[key] += weight * group.column_totals[key]
        net_grand_total = sum(net_totals.values(), Decimal("0"))

    return CrossTab(
        secondary_keys=secondary_keys,
        rows=tuple(account_rows),
        column_totals=column_totals,
        grand_total=grand_total,
        groups=groups,
        net_totals=net_totals,
        net_grand_total=net_grand_total,
        row_count=len(rows),
    )


def _build_groups(
    account_rows: Sequence[CrossTabRow],
    secondary_keys: Sequence[str],
    classifier: Classifier,
) -> tuple[CrossTabGroup, ...]:
    by_category: dict[str, list[CrossTabRow]] = {}
    for row in account_rows:
        by_category.setdefault(row.category or classifier.fallback, []).append(row)

    groups = []
    for category in sorted(by_category, key=classifier.order_of):
        members = by_category[category]
        column_totals = _column_sums(members, secondary_keys)
        groups.append(
            CrossTabGroup(
                category=category,
                rows=tuple(members),
                column_totals=column_totals,
                total=sum(column_totals.values(), Decimal("0")),
            )
        )
    return tuple(groups)
