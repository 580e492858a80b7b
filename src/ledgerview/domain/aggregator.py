"""Category rollups and display sections over an ordered row set."""

from collections import defaultdict
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional, Sequence

from ledgerview.domain.classifier import Classifier
from ledgerview.domain.entities import (
    Aggregation,
    MeasureTotals,
    ReportSection,
    SubGroup,
    TransactionRow,
)
from ledgerview.logging_setup import get_logger
from ledgerview.utils.number_format import coerce_amount

logger = get_logger(__name__)

ORDER_AS_RECEIVED = "as_received"
ORDER_BY_CATEGORY = "by_category"

GRAND_TOTAL_LABEL = "Grand Total"


def _new_accumulator(measures: Sequence[str]) -> dict[str, Any]:
    return {"values": {m: Decimal("0") for m in measures}, "count": 0}


def _add_row(accumulator: dict[str, Any], row: TransactionRow, measures: Sequence[str]) -> None:
    for m in measures:
        accumulator["values"][m] += coerce_amount(row.measures.get(m))
    accumulator["count"] += 1


def sum_totals(
    label: str, totals: Iterable[MeasureTotals], measures: Sequence[str]
) -> MeasureTotals:
    """Field-wise sum of several totals records."""
    accumulator = _new_accumulator(measures)
    for total in totals:
        for m in measures:
            accumulator["values"][m] += total.get(m)
        accumulator["count"] += total.count
    return MeasureTotals(
        label=label, values=accumulator["values"], count=accumulator["count"]
    )


def total_rows(
    label: str, rows: Iterable[TransactionRow], measures: Sequence[str]
) -> MeasureTotals:
    """Sum measures over rows."""
    accumulator = _new_accumulator(measures)
    for row in rows:
        _add_row(accumulator, row, measures)
    return MeasureTotals(
        label=label, values=accumulator["values"], count=accumulator["count"]
    )


def aggregate(
    rows: Sequence[TransactionRow],
    classifier: Classifier,
    measures: Sequence[str],
) -> Aggregation:
    """Roll rows up into category totals and a grand total.

    Every known category of the classifier gets an entry, even with no rows.
    The grand total is computed from the category totals, never from the
    rows, so it always matches the displayed category totals.

    Args:
        rows: Rows in any order
        classifier: Classifier that buckets each row
        measures: Names of the numeric measures to accumulate

    Returns:
        Aggregation with ordered category totals and the grand total
    """
    accumulators: dict[str, dict[str, Any]] = {
        category: _new_accumulator(measures) for category in classifier.categories
    }
    unmapped = 0

    for row in rows:
        if not classifier.is_known_row(row):
            unmapped += 1
        category = classifier.classify_row(row)
        if category not in accumulators:
            accumulators[category] = _new_accumulator(measures)
        _add_row(accumulators[category], row, measures)

    if unmapped:
        logger.warning(
            "%d row(s) did not match the %s classification and were counted under %s",
            unmapped,
            classifier.name,
            classifier.fallback,
        )

    category_totals = {
        category: MeasureTotals(
            label=category, values=acc["values"], count=acc["count"]
        )
        for category, acc in accumulators.items()
    }
    grand_total = sum_totals(GRAND_TOTAL_LABEL, category_totals.values(), measures)
    return Aggregation(category_totals=category_totals, grand_total=grand_total)


def order_rows(
    rows: Sequence[TransactionRow], classifier: Classifier, ordering: str
) -> tuple[TransactionRow, ...]:
    """Order rows for display.

    ``as_received`` trusts the upstream order. ``by_category`` is a stable
    sort by the classifier's category order, so rows keep their relative
    order inside a category.
    """
    if ordering == ORDER_BY_CATEGORY:
        return tuple(
            sorted(rows, key=lambda row: classifier.order_of(classifier.classify_row(row)))
        )
    return tuple(rows)


def group_subgroups(
    rows: Sequence[TransactionRow],
    measures: Sequence[str],
    label_of: Optional[Callable[[str], str]] = None,
) -> tuple[SubGroup, ...]:
    """Group a section's rows by ``subgroup`` in order of first appearance."""
    grouped: dict[str, list[TransactionRow]] = defaultdict(list)
    for row in rows:
        grouped[row.subgroup or ""].append(row)

    subgroups = []
    for key, members in grouped.items():
        label = label_of(key) if label_of else key
        subgroups.append(
            SubGroup(
                label=label,
                rows=tuple(members),
                subtotal=total_rows(label, members, measures),
            )
        )
    return tuple(subgroups)


def category_sections(
    rows: Sequence[TransactionRow],
    classifier: Classifier,
    measures: Sequence[str],
    subgroup_label: Optional[Callable[[str], str]] = None,
    with_subgroups: bool = False,
) -> tuple[ReportSection, ...]:
    """Split an ordered row list at category boundaries.

    A section opens where a row's category differs from the previous row's
    and closes where it differs from the next row's. Boundaries come from
    the sequence itself, so a category split across two ranges yields two
    sections, each subtotalled over its own rows.
    """
    categories = [classifier.classify_row(row) for row in rows]
    sections: list[ReportSection] = []
    start = 0

    for index, category in enumerate(categories):
        is_last = index + 1 == len(categories) or categories[index + 1] != category
        if not is_last:
            continue

        members = tuple(rows[start : index + 1])
        subgroups: tuple[SubGroup, ...] = ()
        if with_subgroups:
            subgroups = group_subgroups(members, measures, subgroup_label)
        sections.append(
            ReportSection(
                category=category,
                rows=members,
                subtotal=total_rows(category, members, measures),
                subgroups=subgroups,
            )
        )
        start = index + 1

    seen: set[str] = set()
    for section in sections:
        if section.category in seen:
            logger.warning(
                "Category %s appears in more than one range; rows are not sorted by category",
                section.category,
            )
        seen.add(section.category)

    return tuple(sections)
