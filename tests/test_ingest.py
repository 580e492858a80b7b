"""Tests for payload unwrapping and row normalization."""

from decimal import Decimal

import pytest

from ledgerview.domain.errors import ValidationError
from ledgerview.domain.ingest import FieldMap, normalize_rows, pick, unwrap_payload

FIELD_MAP = FieldMap(
    code=("AccountCode",),
    name=("AccountName",),
    measures={"closing": ("ClosingBalance",)},
    secondary_key=("CostCenter",),
    secondary_key_prefix="CC -",
    flag=("TitleFlag",),
    attributes={"status": ("Status",)},
)


@pytest.mark.parametrize(
    "payload",
    [
        [{"a": 1}],
        {"data": [{"a": 1}]},
        {"result": [{"a": 1}]},
        {"trialBalance": [{"a": 1}], "count": 1},
    ],
)
def test_unwrap_accepts_wrappers(payload):
    assert unwrap_payload(payload) == [{"a": 1}]


@pytest.mark.parametrize("payload", [None, 42, "rows", {"count": 1}, {"a": [], "b": []}])
def test_unwrap_rejects_other_shapes(payload):
    with pytest.raises(ValidationError):
        unwrap_payload(payload)


def test_pick_tolerates_casing():
    assert pick({"deptId": "7"}, "DeptId") == "7"
    assert pick({"DeptId": "8", "deptId": "7"}, "DeptId") == "8"
    assert pick({"DeptId": None, "Dept": "9"}, "DeptId", "Dept") == "9"
    assert pick({}, "DeptId") is None


def test_normalize_rows():
    rows = normalize_rows(
        [
            {
                "AccountCode": " 1100 ",
                "accountName": "Cash",
                "ClosingBalance": "1,250.50",
                "CostCenter": "CC - 510",
                "TitleFlag": "A",
                "Status": "Open",
            }
        ],
        FIELD_MAP,
    )

    row = rows[0]
    assert row.code == "1100"
    assert row.name == "Cash"
    assert row.measure("closing") == Decimal("1250.50")
    assert row.secondary_key == "510"
    assert row.flag == "A"
    assert row.attributes == {"status": "Open"}


def test_normalize_dirty_values():
    rows = normalize_rows(
        [{"AccountCode": 1100, "ClosingBalance": "n/a", "CostCenter": "", "TitleFlag": " "}],
        FIELD_MAP,
    )

    row = rows[0]
    assert row.code == "1100"
    assert row.name == ""
    assert row.measure("closing") == 0
    assert row.secondary_key is None
    assert row.flag is None
    assert row.subgroup is None


def test_normalize_rejects_non_object_rows():
    with pytest.raises(ValidationError, match="Row 1"):
        normalize_rows([{"AccountCode": "1"}, "oops"], FIELD_MAP)
