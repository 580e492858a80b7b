"""Report period parsing utilities."""

from dataclasses import dataclass
from datetime import date, datetime
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


@dataclass(frozen=True)
class Period:
    """A reporting month."""

    year: int
    month: int

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month - 1]

    @property
    def label(self) -> str:
        """Label used in file names, e.g. ``March_2025``."""
        return f"{self.month_name}_{self.year}"

    @property
    def title(self) -> str:
        """Label used in report titles, e.g. ``MARCH/2025``."""
        return f"{self.month_name.upper()}/{self.year}"


def parse_period(period_str: str, today: date | None = None) -> Period:
    """Parse a period string into a Period.

    Supports:
    - "2025-03", "2025/03"
    - "March 2025", "mar 2025"
    - "this month", "last month"

    Args:
        period_str: Period string
        today: Reference date for relative periods (defaults to today)

    Returns:
        Period

    Raises:
        ValueError: If period string cannot be parsed
    """
    text = period_str.strip().lower()
    today = today or date.today()

    if text == "this month":
        return Period(today.year, today.month)
    if text == "last month":
        previous = today - relativedelta(months=1)
        return Period(previous.year, previous.month)

    # Pin the default day to 1 so "February 2025" parses on the 30th
    default = datetime(today.year, 1, 1)
    try:
        parsed = date_parser.parse(text.replace("/", "-"), default=default)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse period '{period_str}': {e}") from e
    return Period(parsed.year, parsed.month)
