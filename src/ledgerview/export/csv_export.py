"""CSV export of report tables and cross tabs."""

from __future__ import annotations

import csv
import io
import re
from typing import Iterable

from ledgerview.domain.entities import CrossTab, ReportMetadata, ReportTable
from ledgerview.domain.reports import ReportSpec
from ledgerview.export import layout


def _writers(buffer: io.StringIO):
    body = csv.writer(buffer, lineterminator="\n")
    quoted = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_ALL)
    return body, quoted


def _write_header(quoted, body, meta: ReportMetadata, columns: Iterable[str]) -> None:
    quoted.writerow([meta.title])
    for line in meta.subtitle_lines:
        quoted.writerow([line])
    quoted.writerow([f"Generated on: {meta.generated_at:%Y-%m-%d %H:%M:%S}"])
    body.writerow([])
    body.writerow(list(columns))


def _write_lines(body, lines: Iterable[layout.Line]) -> None:
    for line in lines:
        if line.kind in (layout.SECTION, layout.GRAND_TOTAL):
            body.writerow([])
        body.writerow([cell.text for cell in line.cells])


def _write_summary(body, entries: Iterable[tuple[str, str]]) -> None:
    body.writerow([])
    body.writerow(["SUMMARY"])
    for label, value in entries:
        body.writerow([label, value])


def _write_footer(quoted, body, meta: ReportMetadata, extra: Iterable[str]) -> None:
    body.writerow([])
    for line in extra:
        quoted.writerow([line])
    if meta.footer:
        quoted.writerow([meta.footer])


def to_csv(table: ReportTable, spec: ReportSpec, meta: ReportMetadata) -> str:
    """Serialize a flat report to CSV text.

    Layout: quoted metadata lines, a blank line, the header row, then per
    section a marker line, its rows and its subtotal, then the grand total,
    the report's summary block if it has one, and a footer. Fields
    containing a comma, quote or newline are quoted with internal quotes
    doubled. An empty table still yields the header
    and a grand total of zeros.

    Args:
        table: Report table to export
        spec: Report configuration (columns, labels, number policy)
        meta: Title, scope and generation details

    Returns:
        CSV document
    """
    buffer = io.StringIO()
    body, quoted = _writers(buffer)

    _write_header(quoted, body, meta, layout.headers(spec))
    _write_lines(body, layout.table_lines(table, spec, spec.export_policy))
    if spec.footer_lines is not None and not table.is_empty:
        _write_summary(body, spec.footer_lines(table, spec.export_policy))
    _write_footer(quoted, body, meta, [f"Total Records: {table.row_count}"])
    return buffer.getvalue()


def cross_tab_to_csv(cross_tab: CrossTab, spec: ReportSpec, meta: ReportMetadata) -> str:
    """Serialize a cross tab to CSV text, one column per secondary key."""
    buffer = io.StringIO()
    body, quoted = _writers(buffer)

    _write_header(quoted, body, meta, layout.headers(spec, cross_tab))
    _write_lines(body, layout.cross_tab_lines(cross_tab, spec, spec.export_policy))
    _write_footer(
        quoted,
        body,
        meta,
        [
            f"Total Records: {cross_tab.row_count}",
            f"Number of Columns: {len(cross_tab.secondary_keys)}",
        ],
    )
    return buffer.getvalue()


def _slug(value: str) -> str:
    return re.sub(r"[^A-Za-z0-9.-]+", "_", value.strip()).strip("_") or "NA"


def export_filename(spec: ReportSpec, meta: ReportMetadata, extension: str = "csv") -> str:
    """File name ``{ReportName}_{ScopeId}_{Period}.{extension}``."""
    return f"{spec.file_stem}_{_slug(meta.scope_id)}_{_slug(meta.period)}.{extension}"
