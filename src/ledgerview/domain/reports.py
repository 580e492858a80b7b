"""Report configurations.

Each report of the portal is a ``ReportSpec``: which classifier buckets its
rows, which measures it sums, how its columns are laid out and how it
displays zero, missing and negative amounts. The aggregation and export code
is shared; only this configuration differs between reports.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Callable, Mapping, Optional, Sequence

from ledgerview.domain import classifier as classifiers
from ledgerview.domain.aggregator import ORDER_AS_RECEIVED, ORDER_BY_CATEGORY
from ledgerview.domain.classifier import Classifier
from ledgerview.domain.entities import ReportTable, TransactionRow
from ledgerview.domain.errors import (
    NotFoundError,
    ValidationError,
    report_not_found,
    unknown_column_source,
)
from ledgerview.domain.ingest import FieldMap
from ledgerview.utils.number_format import (
    ACCOUNTING,
    DASH_MISSING,
    PLAIN,
    NumberPolicy,
    format_amount,
    percent_of,
    to_decimal,
)

ORGANISATION = "CEYLON ELECTRICITY BOARD"

COLUMN_TEXT = "text"
COLUMN_AMOUNT = "amount"

ROW_FIELDS = ("code", "name", "flag", "subgroup", "secondary_key")
ATTRIBUTE_PREFIX = "attr:"


@dataclass(frozen=True)
class Column:
    """One exported column: a row field, an attribute or a measure."""

    header: str
    source: str
    kind: str = COLUMN_AMOUNT

    @property
    def is_amount(self) -> bool:
        return self.kind == COLUMN_AMOUNT

    def text_of(self, row: TransactionRow) -> str:
        """Text value of a text column for a row."""
        if self.source.startswith(ATTRIBUTE_PREFIX):
            return row.attributes.get(self.source[len(ATTRIBUTE_PREFIX) :], "")
        return getattr(row, self.source, None) or ""


@dataclass(frozen=True)
class CrossTabLayout:
    """Column layout of a cross-tab report."""

    measure: str
    code_header: str = "Account Code"
    name_header: str = "Description"
    key_header: str = "{key}"
    total_header: str = "Total"
    net_weights: Optional[Mapping[str, int]] = None
    net_label: str = "NET TOTAL"
    sort_accounts: bool = False

    def header_for(self, key: str) -> str:
        return self.key_header.format(key=key)


@dataclass(frozen=True)
class ReportSpec:
    """Configuration of one report.

    ``always_show`` lists categories that get a section with zero totals
    when a non-empty report has no rows for them. A report that is not
    ``sectioned`` lists its rows without category markers or subtotals;
    ``prepare_rows`` reshapes the rows before aggregation.
    """

    name: str
    title: str
    file_stem: str
    classifier: Classifier
    measures: tuple[str, ...]
    field_map: FieldMap
    columns: tuple[Column, ...] = ()
    subtitle_lines: tuple[str, ...] = ()
    policy: NumberPolicy = ACCOUNTING
    csv_policy: Optional[NumberPolicy] = None
    ordering: str = ORDER_AS_RECEIVED
    section_titles: Mapping[str, str] = field(default_factory=dict)
    section_marker: str = "{title}"
    subtotal_label: str = "TOTAL {title}"
    grand_total_label: str = "GRAND TOTAL"
    group_subgroups: bool = False
    subgroup_titles: Mapping[str, str] = field(default_factory=dict)
    cross_tab: Optional[CrossTabLayout] = None
    label_column: Optional[int] = None
    summary_lines: Optional[
        Callable[[Sequence[TransactionRow], NumberPolicy], tuple[str, ...]]
    ] = None
    footer_lines: Optional[
        Callable[[ReportTable, NumberPolicy], tuple[tuple[str, str], ...]]
    ] = None
    always_show: tuple[str, ...] = ()
    sectioned: bool = True
    prepare_rows: Optional[
        Callable[[Sequence[TransactionRow]], list[TransactionRow]]
    ] = None

    def __post_init__(self):
        for column in self.columns:
            if column.is_amount and column.source not in self.measures:
                raise ValidationError(unknown_column_source(self.name, column.source))
            if (
                not column.is_amount
                and column.source not in ROW_FIELDS
                and not column.source.startswith(ATTRIBUTE_PREFIX)
            ):
                raise ValidationError(unknown_column_source(self.name, column.source))

    @property
    def is_cross_tab(self) -> bool:
        return self.cross_tab is not None

    @property
    def export_policy(self) -> NumberPolicy:
        """Policy for CSV cells; falls back to the display policy."""
        return self.csv_policy or self.policy

    @property
    def headers(self) -> tuple[str, ...]:
        return tuple(column.header for column in self.columns)

    @property
    def total_label_index(self) -> int:
        """Column that carries subtotal and total labels.

        Defaults to the last text column before the first amount column.
        """
        if self.label_column is not None:
            return self.label_column
        index = 0
        for position, column in enumerate(self.columns):
            if column.is_amount:
                break
            index = position
        return index

    def section_title(self, category: str) -> str:
        return self.section_titles.get(category, category.upper())

    def section_marker_for(self, category: str) -> str:
        return self.section_marker.format(title=self.section_title(category))

    def subtotal_label_for(self, category: str) -> str:
        return self.subtotal_label.format(title=self.section_title(category))

    def subgroup_title(self, code: str) -> str:
        return self.subgroup_titles.get(code, code)


INCOME_EXPENDITURE_SECTIONS = {"Income": "INCOME", "Expenditure": "EXPENDITURES"}

# Upstream category names carry typos and stray spaces.
CATEGORY_CODE_TITLES = {
    "PROFIT/ LOSS ON DISPOSAL OF PPE": "PROFIT/LOSS ON DISPOSAL OF PPE",
    "MICSELANIOUS INCOME": "MISCELLANEOUS INCOME",
}


def job_card_summary(
    rows: Sequence[TransactionRow], policy: NumberPolicy = ACCOUNTING
) -> tuple[str, ...]:
    """Header lines for a job card: estimate, commitment and variance.

    Estimated and committed cost repeat on every transaction of a job, so
    the first row carries them.
    """
    if not rows:
        return ()
    first = rows[0]
    estimated = first.measure("estimated")
    committed = first.measure("committed")
    variance = estimated - committed
    return (
        f"Estimated Cost: {format_amount(estimated, policy)}",
        f"Committed Cost: {format_amount(committed, policy)}",
        f"Variance in Rs.: {format_amount(variance, policy)}",
        f"Variance in %: {percent_of(variance, estimated)}",
    )


def income_expenditure_footer(
    table: ReportTable, policy: NumberPolicy = PLAIN
) -> tuple[tuple[str, str], ...]:
    """Closing summary of an income and expenditure statement.

    The net total adds the two cumulative figures as they arrive, so signed
    expenditure reduces income.
    """
    income = table.aggregation.category_totals.get("Income")
    expenditure = table.aggregation.category_totals.get("Expenditure")
    income_budget = income.get("budget") if income else Decimal("0")
    income_actual = income.get("actual") if income else Decimal("0")
    expenditure_budget = expenditure.get("budget") if expenditure else Decimal("0")
    expenditure_actual = expenditure.get("actual") if expenditure else Decimal("0")
    return (
        ("Total Income Budget", format_amount(income_budget, policy)),
        ("Total Income Cumulative", format_amount(income_actual, policy)),
        ("Total Expenditure Budget", format_amount(expenditure_budget, policy)),
        ("Total Expenditure Cumulative", format_amount(expenditure_actual, policy)),
        ("Net Total", format_amount(income_actual + expenditure_actual, policy)),
    )


JOB_CARD_RESOURCE_MEASURES = {
    "Labour": "labour",
    "Material": "material",
    classifiers.OTHER: "other",
}
JOB_CARD_MEASURES = (*JOB_CARD_RESOURCE_MEASURES.values(), "total")


def _spread_by_resource(row: TransactionRow) -> TransactionRow:
    amount = row.measure("amount")
    target = JOB_CARD_RESOURCE_MEASURES[classifiers.RESOURCE_TYPE.classify_row(row)]
    measures = dict(row.measures)
    for measure in JOB_CARD_RESOURCE_MEASURES.values():
        measures[measure] = amount if measure == target else Decimal("0")
    measures["total"] = amount
    return replace(row, measures=measures)


def _sequence_of(row: TransactionRow) -> Decimal:
    sequence = to_decimal(row.attributes.get("sequence"))
    return sequence if sequence is not None else Decimal("0")


def prepare_job_card_rows(rows: Sequence[TransactionRow]) -> list[TransactionRow]:
    """Lay out job card transactions one line per resource amount.

    Each amount moves into its resource-type column (unknown types count as
    other) with the line total alongside. Lines are grouped by document
    (year, profile, number and date) in order of first appearance and
    sorted by sequence number inside each document.

    Args:
        rows: Normalized job card transactions

    Returns:
        Reordered rows carrying labour, material, other and total measures
    """
    documents: dict[tuple[str, str, str, str], list[TransactionRow]] = {}
    for row in rows:
        key = (
            row.attributes.get("year", ""),
            row.attributes.get("profile", ""),
            row.code,
            row.attributes.get("date", ""),
        )
        documents.setdefault(key, []).append(_spread_by_resource(row))

    ordered: list[TransactionRow] = []
    for lines in documents.values():
        ordered.extend(sorted(lines, key=_sequence_of))
    return ordered


TRIAL_BALANCE = ReportSpec(
    name="trial_balance",
    title="MONTHLY TRIAL BALANCE - {period_title}",
    subtitle_lines=("Cost Center: {scope_id} - {scope_name}",),
    file_stem="TrialBalance",
    classifier=classifiers.TRIAL_BALANCE,
    measures=("opening", "debit", "credit", "closing"),
    field_map=FieldMap(
        code=("AcCd",),
        name=("GlName",),
        measures={
            "opening": ("OpSbal",),
            "debit": ("DrSamt",),
            "credit": ("CrSamt",),
            "closing": ("ClSbal",),
        },
    ),
    columns=(
        Column("Description/Name", "name", COLUMN_TEXT),
        Column("Opening Balance", "opening"),
        Column("Debit Amount", "debit"),
        Column("Credit Amount", "credit"),
        Column("Closing Balance", "closing"),
    ),
    section_marker="=== {title} ===",
)

INCOME_EXPENDITURE = ReportSpec(
    name="income_expenditure",
    title="INCOME & EXPENDITURE STATEMENT - Period Ended {period_name}",
    subtitle_lines=(
        ORGANISATION + " - FINANCIAL STATEMENT - COST CENTRE : {scope_id} / {scope_name_upper}",
    ),
    file_stem="IncomeExpenditure",
    classifier=classifiers.INCOME_EXPENDITURE,
    measures=("budget", "actual", "variance"),
    field_map=FieldMap(
        code=("AcCd",),
        name=("CatName",),
        measures={
            "budget": ("TotalBudget",),
            "actual": ("Clbal",),
            "variance": ("Varience", "Variance"),
        },
        flag=("CatFlag",),
        subgroup=("CatCode",),
        attributes={"title_code": ("TitleCode",), "cost_center": ("CctName",)},
    ),
    columns=(
        Column("Account Code", "code", COLUMN_TEXT),
        Column("Category Name", "name", COLUMN_TEXT),
        Column("Budget", "budget"),
        Column("Actual Cumulative Cost", "actual"),
        Column("Balance Budget (excess/shortfall)", "variance"),
    ),
    policy=DASH_MISSING,
    csv_policy=PLAIN,
    ordering=ORDER_BY_CATEGORY,
    section_titles=INCOME_EXPENDITURE_SECTIONS,
    grand_total_label="NET TOTAL",
    group_subgroups=True,
    subgroup_titles=CATEGORY_CODE_TITLES,
    always_show=("Income", "Expenditure"),
    footer_lines=income_expenditure_footer,
)

PROVINCIAL_TRIAL_BALANCE = ReportSpec(
    name="provincial_trial_balance",
    title="PROVINCE-WISE TRIAL BALANCE - {period_upper}",
    subtitle_lines=("Company : {scope_id} / {scope_name_upper}",),
    file_stem="ProvinceTrialBalance",
    classifier=classifiers.PROVINCIAL_TRIAL_BALANCE,
    measures=("closing",),
    field_map=FieldMap(
        code=("AccountCode",),
        name=("AccountName",),
        measures={"closing": ("ClosingBalance",)},
        secondary_key=("CostCenter",),
        secondary_key_prefix="CC -",
        flag=("TitleFlag",),
    ),
    policy=DASH_MISSING,
    csv_policy=PLAIN,
    ordering=ORDER_BY_CATEGORY,
    cross_tab=CrossTabLayout(
        measure="closing", name_header="Account Name", sort_accounts=True
    ),
)

PROVINCE_INCOME_EXPENDITURE = ReportSpec(
    name="province_income_expenditure",
    title="INCOME & EXPENDITURE STATEMENT - Period Ended {period_name}",
    subtitle_lines=(
        ORGANISATION + " - FINANCIAL STATEMENT - PROVINCE COMPANY : {scope_id} / {scope_name_upper}",
    ),
    file_stem="ProvinceIncomeExpenditure",
    classifier=classifiers.INCOME_EXPENDITURE,
    measures=("actual",),
    field_map=FieldMap(
        code=("Account",),
        name=("CatName",),
        measures={"actual": ("Actual",)},
        secondary_key=("AreaNum",),
        flag=("CatFlag",),
        subgroup=("CatCode",),
        attributes={"title_code": ("TitleCd",)},
    ),
    policy=DASH_MISSING,
    csv_policy=PLAIN,
    ordering=ORDER_BY_CATEGORY,
    section_titles={"Income": "INCOME", "Expenditure": "EXPENDITURE"},
    grand_total_label="TOTAL (INCOME + EXPENDITURE)",
    cross_tab=CrossTabLayout(
        measure="actual",
        key_header="Area {key}",
        total_header="Company Total",
        net_weights={"Income": 1, "Expenditure": -1},
    ),
)

JOB_CARD = ReportSpec(
    name="job_card",
    title="JOB CARD - PROJECT {scope_id}",
    subtitle_lines=("Cost Center: {scope_name}",),
    file_stem="JobCard",
    classifier=classifiers.RESOURCE_TYPE,
    measures=JOB_CARD_MEASURES,
    field_map=FieldMap(
        code=("DocumentNo",),
        name=("Description",),
        measures={
            "amount": ("TrxAmt",),
            "estimated": ("EstimatedCost",),
            "committed": ("CommitedCost", "CommittedCost"),
        },
        flag=("ResType",),
        attributes={
            "year": ("LogYear",),
            "month": ("LogMonth",),
            "profile": ("DocumentProfile",),
            "date": ("AccDate",),
            "sequence": ("SequenceNo",),
        },
    ),
    columns=(
        Column("Year", "attr:year", COLUMN_TEXT),
        Column("Month", "attr:month", COLUMN_TEXT),
        Column("Document Profile", "attr:profile", COLUMN_TEXT),
        Column("Document No.", "code", COLUMN_TEXT),
        Column("Date", "attr:date", COLUMN_TEXT),
        Column("Seq No.", "attr:sequence", COLUMN_TEXT),
        Column("Labour", "labour"),
        Column("Material", "material"),
        Column("Other", "other"),
        Column("Total", "total"),
    ),
    grand_total_label="TOTAL",
    label_column=0,
    summary_lines=job_card_summary,
    sectioned=False,
    prepare_rows=prepare_job_card_rows,
)

REPORTS: dict[str, ReportSpec] = {
    spec.name: spec
    for spec in (
        TRIAL_BALANCE,
        INCOME_EXPENDITURE,
        PROVINCIAL_TRIAL_BALANCE,
        PROVINCE_INCOME_EXPENDITURE,
        JOB_CARD,
    )
}


def list_reports() -> list[str]:
    """Names of the registered reports."""
    return sorted(REPORTS)


def get_report(name: str) -> ReportSpec:
    """Look up a report by name.

    Raises:
        NotFoundError: If no report has that name
    """
    spec = REPORTS.get(name.strip().lower())
    if spec is None:
        raise NotFoundError(report_not_found(name, list_reports()))
    return spec
