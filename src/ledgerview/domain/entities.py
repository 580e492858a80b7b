"""Domain model entities for ledgerview.

These are pure data classes describing report rows and the aggregates built
from them. They carry no formatting or export logic, so the same aggregate can
be rendered to the terminal, to CSV or to a print document.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Mapping, Optional


@dataclass(frozen=True)
class TransactionRow:
    """One ledger or report line, normalized from an upstream payload."""

    code: str
    name: str
    measures: Mapping[str, Decimal] = field(default_factory=dict)
    secondary_key: Optional[str] = None
    flag: Optional[str] = None
    subgroup: Optional[str] = None
    attributes: Mapping[str, str] = field(default_factory=dict)

    def measure(self, name: str) -> Decimal:
        """Return a measure value, zero when the row does not carry it."""
        return self.measures.get(name, Decimal("0"))


@dataclass(frozen=True)
class MeasureTotals:
    """Accumulated measures for a category or for the whole row set.

    ``values`` holds full-precision sums; rounding only happens when a value
    is formatted for display.
    """

    label: str
    values: Mapping[str, Decimal]
    count: int = 0

    def get(self, name: str) -> Decimal:
        return self.values.get(name, Decimal("0"))


@dataclass(frozen=True)
class Aggregation:
    """Category totals plus the grand total derived from them."""

    category_totals: Mapping[str, MeasureTotals]
    grand_total: MeasureTotals

    @property
    def categories(self) -> tuple[str, ...]:
        return tuple(self.category_totals.keys())


@dataclass(frozen=True)
class SubGroup:
    """Rows of one sub-group (e.g. a category code) inside a section."""

    label: str
    rows: tuple[TransactionRow, ...]
    subtotal: MeasureTotals


@dataclass(frozen=True)
class ReportSection:
    """A contiguous run of rows sharing a category in display order."""

    category: str
    rows: tuple[TransactionRow, ...]
    subtotal: MeasureTotals
    subgroups: tuple[SubGroup, ...] = ()


@dataclass(frozen=True)
class ReportTable:
    """Exportable unit: ordered sections followed by a grand total."""

    sections: tuple[ReportSection, ...]
    aggregation: Aggregation
    row_count: int = 0

    @property
    def grand_total(self) -> MeasureTotals:
        return self.aggregation.grand_total

    @property
    def is_empty(self) -> bool:
        return self.row_count == 0


@dataclass(frozen=True)
class CrossTabRow:
    """One account's cells across every observed secondary key."""

    code: str
    name: str
    category: Optional[str]
    cells: Mapping[str, Decimal]
    total: Decimal


@dataclass(frozen=True)
class CrossTabGroup:
    """Accounts of one category with their per-column totals."""

    category: str
    rows: tuple[CrossTabRow, ...]
    column_totals: Mapping[str, Decimal]
    total: Decimal


@dataclass(frozen=True)
class CrossTab:
    """Account x secondary-key matrix with its reductions."""

    secondary_keys: tuple[str, ...]
    rows: tuple[CrossTabRow, ...]
    column_totals: Mapping[str, Decimal]
    grand_total: Decimal
    groups: tuple[CrossTabGroup, ...] = ()
    net_totals: Optional[Mapping[str, Decimal]] = None
    net_grand_total: Optional[Decimal] = None
    row_count: int = 0

    @property
    def row_totals(self) -> tuple[Decimal, ...]:
        return tuple(row.total for row in self.rows)


@dataclass(frozen=True)
class ReportMetadata:
    """Descriptive header and footer data for an exported report."""

    title: str
    scope_id: str = ""
    scope_name: str = ""
    period: str = ""
    generated_at: datetime = field(default_factory=datetime.now)
    subtitle_lines: tuple[str, ...] = ()
    footer: str = ""
