"""Row classification by account-code or flag conventions."""

from dataclasses import dataclass, field
from typing import Mapping, Optional

from ledgerview.domain.entities import TransactionRow

OTHER = "Other"

KEY_CODE = "code"
KEY_FLAG = "flag"
KEY_FLAG_THEN_CODE = "flag_then_code"


@dataclass(frozen=True)
class Classifier:
    """Map a classification key to a category label.

    ``mapping`` is matched against the uppercased key: single-character
    entries match the first character, longer entries match the whole key.
    Unmatched keys fall into ``fallback``.

    With ``KEY_FLAG_THEN_CODE`` a row whose flag is listed in
    ``flag_mapping`` takes that category; every other row is classified by
    its code through ``mapping`` alone, so flag letters never match codes.
    Category display order follows ``flag_mapping`` then ``mapping``.
    """

    name: str
    mapping: Mapping[str, str]
    fallback: str = OTHER
    key_source: str = KEY_CODE
    flag_mapping: Mapping[str, str] = field(default_factory=dict)

    @property
    def categories(self) -> tuple[str, ...]:
        """Known categories in display order, fallback last."""
        ordered: list[str] = []
        for category in (*self.flag_mapping.values(), *self.mapping.values()):
            if category not in ordered:
                ordered.append(category)
        if self.fallback not in ordered:
            ordered.append(self.fallback)
        return tuple(ordered)

    def key_of(self, row: TransactionRow) -> str:
        """Pick the classification key from a row."""
        if self.key_source == KEY_FLAG:
            return row.flag or ""
        return self._row_flag(row) or row.code

    def classify(self, key: Optional[str]) -> str:
        """Return the category for a key. Never raises."""
        text = (key or "").strip().upper()
        if not text:
            return self.fallback
        if text in self.mapping:
            return self.mapping[text]
        return self.mapping.get(text[0], self.fallback)

    def is_known(self, key: Optional[str]) -> bool:
        """True when the key matches the mapping rather than the fallback."""
        text = (key or "").strip().upper()
        return bool(text) and (text in self.mapping or text[0] in self.mapping)

    def classify_row(self, row: TransactionRow) -> str:
        flag = self._row_flag(row)
        if flag is not None:
            return self.flag_mapping[flag]
        return self.classify(self.key_of(row))

    def is_known_row(self, row: TransactionRow) -> bool:
        """True when the row is classified by a mapping rather than the fallback."""
        return self._row_flag(row) is not None or self.is_known(self.key_of(row))

    def order_of(self, category: str) -> int:
        """Sort position of a category; unknown categories sort last."""
        try:
            return self.categories.index(category)
        except ValueError:
            return len(self.categories)

    def _row_flag(self, row: TransactionRow) -> Optional[str]:
        if self.key_source != KEY_FLAG_THEN_CODE:
            return None
        flag = (row.flag or "").strip().upper()
        return flag if flag in self.flag_mapping else None


TRIAL_BALANCE = Classifier(
    name="trial_balance",
    mapping={"A": "Assets", "E": "Expenditure", "L": "Liabilities", "R": "Revenue"},
)

INCOME_EXPENDITURE = Classifier(
    name="income_expenditure",
    mapping={"I": "Income", "X": "Expenditure", "E": "Expenditure"},
    key_source=KEY_FLAG,
)

# Title flag wins; otherwise the first digit of a numeric account code.
PROVINCIAL_TRIAL_BALANCE = Classifier(
    name="provincial_trial_balance",
    mapping={
        "1": "Assets",
        "5": "Expenditure",
        "6": "Expenditure",
        "2": "Liabilities",
        "3": "Liabilities",
        "4": "Revenue",
    },
    key_source=KEY_FLAG_THEN_CODE,
    flag_mapping={"A": "Assets", "E": "Expenditure", "L": "Liabilities", "R": "Revenue"},
)

RESOURCE_TYPE = Classifier(
    name="resource_type",
    mapping={
        "LABOUR": "Labour",
        "LAB": "Labour",
        "MATERIAL": "Material",
        "MAT": "Material",
        "OTHER": OTHER,
    },
    key_source=KEY_FLAG,
)


def classify_code(code: Optional[str]) -> str:
    """Classify a trial-balance account code by its first character."""
    return TRIAL_BALANCE.classify(code)


def classify_flag(flag: Optional[str]) -> str:
    """Classify an income/expenditure ``CatFlag``."""
    return INCOME_EXPENDITURE.classify(flag)
