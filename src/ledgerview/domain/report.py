"""Report building service."""

from datetime import datetime
from typing import Any, Optional, Sequence

from ledgerview.domain.aggregator import aggregate, category_sections, order_rows
from ledgerview.domain.crosstab import build_cross_tab
from ledgerview.domain.entities import (
    Aggregation,
    CrossTab,
    ReportMetadata,
    ReportSection,
    ReportTable,
    TransactionRow,
)
from ledgerview.domain.errors import ValidationError, cross_tab_report_required
from ledgerview.domain.ingest import normalize_rows, unwrap_payload
from ledgerview.domain.reports import ReportSpec
from ledgerview.export import csv_export, html_export
from ledgerview.logging_setup import get_logger
from ledgerview.utils.date_parser import Period

logger = get_logger(__name__)

NOT_AVAILABLE = "N/A"


def build_report_table(rows: Sequence[TransactionRow], spec: ReportSpec) -> ReportTable:
    """Order, aggregate and section rows for a flat report.

    Args:
        rows: Normalized rows in upstream order
        spec: Report configuration

    Returns:
        ReportTable with sections, aggregation and row count
    """
    if spec.prepare_rows is not None:
        rows = spec.prepare_rows(rows)
    ordered = order_rows(rows, spec.classifier, spec.ordering)
    aggregation = aggregate(ordered, spec.classifier, spec.measures)

    if not spec.sectioned:
        sections: tuple[ReportSection, ...] = ()
        if ordered:
            sections = (
                ReportSection(
                    category="", rows=tuple(ordered), subtotal=aggregation.grand_total
                ),
            )
    else:
        sections = category_sections(
            ordered,
            spec.classifier,
            spec.measures,
            subgroup_label=spec.subgroup_title,
            with_subgroups=spec.group_subgroups,
        )
        if ordered and spec.always_show:
            sections = _with_required_sections(sections, spec, aggregation)
    return ReportTable(sections=sections, aggregation=aggregation, row_count=len(ordered))


def _with_required_sections(
    sections: tuple[ReportSection, ...], spec: ReportSpec, aggregation: Aggregation
) -> tuple[ReportSection, ...]:
    """Add zero-total sections for required categories without rows.

    Each added section goes before the first section that sorts after its
    category.
    """
    result = list(sections)
    present = {section.category for section in sections}
    for category in spec.always_show:
        if category in present:
            continue
        empty = ReportSection(
            category=category, rows=(), subtotal=aggregation.category_totals[category]
        )
        position = spec.classifier.order_of(category)
        index = next(
            (
                i
                for i, section in enumerate(result)
                if spec.classifier.order_of(section.category) > position
            ),
            len(result),
        )
        result.insert(index, empty)
    return tuple(result)


class ReportService:
    """Service running one report from payload to export."""

    def __init__(self, spec: ReportSpec):
        """Initialize report service.

        Args:
            spec: Report configuration
        """
        self.spec = spec

    def load_rows(self, payload: Any) -> list[TransactionRow]:
        """Normalize a decoded JSON payload into rows.

        Raises:
            ValidationError: If the payload holds no row list
        """
        rows = normalize_rows(unwrap_payload(payload), self.spec.field_map)
        logger.info("Loaded %d row(s) for %s", len(rows), self.spec.name)
        return rows

    def build_table(self, rows: Sequence[TransactionRow]) -> ReportTable:
        """Build the flat report table.

        Raises:
            ValidationError: If the report is laid out as a cross tab
        """
        if self.spec.is_cross_tab:
            raise ValidationError(cross_tab_report_required(self.spec.name))
        return build_report_table(rows, self.spec)

    def build_cross_tab(self, rows: Sequence[TransactionRow]) -> CrossTab:
        """Build the account x secondary-key matrix of a cross-tab report.

        Raises:
            ValidationError: If the report has no cross-tab layout
        """
        layout = self.spec.cross_tab
        if layout is None:
            raise ValidationError(f"Report '{self.spec.name}' is not a cross-tab report")
        return build_cross_tab(
            rows,
            layout.measure,
            classifier=self.spec.classifier,
            net_weights=layout.net_weights,
            sort_accounts=layout.sort_accounts,
        )

    def build_metadata(
        self,
        scope_id: str,
        scope_name: str,
        period: Optional[Period],
        generated_at: Optional[datetime] = None,
        rows: Sequence[TransactionRow] = (),
    ) -> ReportMetadata:
        """Fill the report's title templates for one scope and period.

        Args:
            scope_id: Cost center, company or project identifier
            scope_name: Display name of the scope
            period: Reporting month, or None when the report has none
            generated_at: Generation timestamp (defaults to now)
            rows: Rows feeding report-specific summary lines

        Returns:
            ReportMetadata for the exporters
        """
        generated_at = generated_at or datetime.now()
        values = {
            "scope_id": scope_id,
            "scope_name": scope_name,
            "scope_name_upper": scope_name.upper(),
            "period_title": period.title if period else NOT_AVAILABLE,
            "period_name": f"{period.month_name} {period.year}" if period else NOT_AVAILABLE,
            "period_upper": (
                f"{period.month_name} {period.year}".upper() if period else NOT_AVAILABLE
            ),
        }

        subtitles = [line.format(**values) for line in self.spec.subtitle_lines]
        if self.spec.summary_lines is not None:
            subtitles.extend(self.spec.summary_lines(rows, self.spec.policy))

        year = period.year if period else generated_at.year
        return ReportMetadata(
            title=self.spec.title.format(**values),
            scope_id=scope_id,
            scope_name=scope_name,
            period=period.label if period else "",
            generated_at=generated_at,
            subtitle_lines=tuple(subtitles),
            footer=f"CEB@{year}",
        )

    def export_csv(self, rows: Sequence[TransactionRow], meta: ReportMetadata) -> str:
        """Render the report as CSV text."""
        if self.spec.is_cross_tab:
            return csv_export.cross_tab_to_csv(self.build_cross_tab(rows), self.spec, meta)
        return csv_export.to_csv(self.build_table(rows), self.spec, meta)

    def export_html(self, rows: Sequence[TransactionRow], meta: ReportMetadata) -> str:
        """Render the report as a print-ready HTML document."""
        if self.spec.is_cross_tab:
            return html_export.cross_tab_to_print_html(
                self.build_cross_tab(rows), self.spec, meta
            )
        return html_export.to_print_html(self.build_table(rows), self.spec, meta)

    def filename(self, meta: ReportMetadata, extension: str = "csv") -> str:
        """Export file name for this report and scope."""
        return csv_export.export_filename(self.spec, meta, extension)
