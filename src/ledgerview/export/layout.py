"""Line-by-line layout shared by the CSV and print exporters.

Both exporters walk the same sequence of ``Line`` objects, so a CSV file and
its printed counterpart always have the same sections, subtotals and totals.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Optional

from ledgerview.domain.entities import (
    CrossTab,
    CrossTabRow,
    MeasureTotals,
    ReportTable,
    TransactionRow,
)
from ledgerview.domain.reports import ReportSpec
from ledgerview.utils.number_format import NumberPolicy, format_amount

SECTION = "category-header"
SUBGROUP = "subgroup-header"
DATA = "data"
SUBGROUP_TOTAL = "subgroup-total"
SUBTOTAL = "category-total"
GRAND_TOTAL = "grand-total"
NET_TOTAL = "net-total"


@dataclass(frozen=True)
class Cell:
    text: str
    is_amount: bool = False


@dataclass(frozen=True)
class Line:
    """One output row. ``label`` is the display title of header lines."""

    kind: str
    cells: tuple[Cell, ...]
    label: str = ""


def headers(spec: ReportSpec, cross_tab: Optional[CrossTab] = None) -> tuple[str, ...]:
    """Column headers, including one per secondary key for cross tabs."""
    if spec.cross_tab is None:
        return spec.headers
    layout = spec.cross_tab
    keys = cross_tab.secondary_keys if cross_tab is not None else ()
    return (
        layout.code_header,
        layout.name_header,
        *(layout.header_for(key) for key in keys),
        layout.total_header,
    )


def _data_line(spec: ReportSpec, row: TransactionRow, policy: NumberPolicy) -> Line:
    cells = []
    for column in spec.columns:
        if column.is_amount:
            cells.append(Cell(format_amount(row.measures.get(column.source), policy), True))
        else:
            cells.append(Cell(column.text_of(row)))
    return Line(DATA, tuple(cells))


def _total_line(
    spec: ReportSpec, kind: str, label: str, totals: MeasureTotals, policy: NumberPolicy
) -> Line:
    label_index = spec.total_label_index
    cells = []
    for index, column in enumerate(spec.columns):
        if column.is_amount:
            cells.append(Cell(format_amount(totals.get(column.source), policy), True))
        else:
            cells.append(Cell(label if index == label_index else ""))
    return Line(kind, tuple(cells), label)


def _header_line(kind: str, text: str, label: str, position: int = 0) -> Line:
    cells = [Cell("")] * position + [Cell(text)]
    return Line(kind, tuple(cells), label)


def table_lines(table: ReportTable, spec: ReportSpec, policy: NumberPolicy) -> list[Line]:
    """Lay out a flat report: sections, rows, subtotals and the grand total.

    Reports that are not sectioned list their rows straight above the grand
    total.
    """
    lines: list[Line] = []
    for section in table.sections:
        if not spec.sectioned:
            lines.extend(_data_line(spec, row, policy) for row in section.rows)
            continue

        title = spec.section_title(section.category)
        lines.append(_header_line(SECTION, spec.section_marker_for(section.category), title))

        if any(subgroup.label for subgroup in section.subgroups):
            for subgroup in section.subgroups:
                lines.append(
                    _header_line(
                        SUBGROUP, subgroup.label, subgroup.label, spec.total_label_index
                    )
                )
                lines.extend(_data_line(spec, row, policy) for row in subgroup.rows)
                lines.append(
                    _total_line(
                        spec,
                        SUBGROUP_TOTAL,
                        f"TOTAL {subgroup.label}",
                        subgroup.subtotal,
                        policy,
                    )
                )
        else:
            lines.extend(_data_line(spec, row, policy) for row in section.rows)

        lines.append(
            _total_line(
                spec,
                SUBTOTAL,
                spec.subtotal_label_for(section.category),
                section.subtotal,
                policy,
            )
        )

    lines.append(
        _total_line(spec, GRAND_TOTAL, spec.grand_total_label, table.grand_total, policy)
    )
    return lines


def _matrix_line(
    kind: str,
    code: str,
    label: str,
    values: Mapping[str, Decimal],
    total: Decimal,
    keys: tuple[str, ...],
    policy: NumberPolicy,
) -> Line:
    cells = [Cell(code), Cell(label)]
    cells.extend(Cell(format_amount(values[key], policy), True) for key in keys)
    cells.append(Cell(format_amount(total, policy), True))
    return Line(kind, tuple(cells), label)


def _account_line(row: CrossTabRow, keys: tuple[str, ...], policy: NumberPolicy) -> Line:
    return _matrix_line(DATA, row.code, row.name, row.cells, row.total, keys, policy)


def cross_tab_lines(cross_tab: CrossTab, spec: ReportSpec, policy: NumberPolicy) -> list[Line]:
    """Lay out a cross tab: category groups, account rows and totals."""
    keys = cross_tab.secondary_keys
    lines: list[Line] = []

    if cross_tab.groups:
        for group in cross_tab.groups:
            title = spec.section_title(group.category)
            lines.append(_header_line(SECTION, spec.section_marker_for(group.category), title))
            lines.extend(_account_line(row, keys, policy) for row in group.rows)
            lines.append(
                _matrix_line(
                    SUBTOTAL,
                    "",
                    spec.subtotal_label_for(group.category),
                    group.column_totals,
                    group.total,
                    keys,
                    policy,
                )
            )
    else:
        lines.extend(_account_line(row, keys, policy) for row in cross_tab.rows)

    lines.append(
        _matrix_line(
            GRAND_TOTAL,
            "",
            spec.grand_total_label,
            cross_tab.column_totals,
            cross_tab.grand_total,
            keys,
            policy,
        )
    )

    layout = spec.cross_tab
    if layout is not None and cross_tab.net_totals is not None:
        lines.append(
            _matrix_line(
                NET_TOTAL,
                "",
                layout.net_label,
                cross_tab.net_totals,
                cross_tab.net_grand_total or Decimal("0"),
                keys,
                policy,
            )
        )
    return lines
