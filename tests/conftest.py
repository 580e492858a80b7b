"""Shared pytest fixtures for ledgerview tests."""

import json
from datetime import datetime
from decimal import Decimal

import pytest

from ledgerview.domain.entities import ReportMetadata, TransactionRow


def make_row(code, name="", flag=None, secondary_key=None, subgroup=None, attributes=None, **measures):
    """Build a TransactionRow with Decimal measures."""
    return TransactionRow(
        code=code,
        name=name or code,
        measures={k: Decimal(str(v)) for k, v in measures.items()},
        secondary_key=secondary_key,
        flag=flag,
        subgroup=subgroup,
        attributes=attributes or {},
    )


@pytest.fixture
def row_factory():
    """Return the TransactionRow builder."""
    return make_row


@pytest.fixture
def trial_balance_rows():
    """Two asset accounts and one liability, closing balances only."""
    return [
        make_row("A100", "Cash", closing=100),
        make_row("A200", "Debtors", closing=-50),
        make_row("L100", "Creditors", closing=30),
    ]


@pytest.fixture
def metadata():
    """Fixed report metadata."""
    return ReportMetadata(
        title="MONTHLY TRIAL BALANCE - MARCH/2025",
        scope_id="510.20",
        scope_name="Colombo",
        period="March_2025",
        generated_at=datetime(2025, 4, 1, 9, 30, 0),
        subtitle_lines=("Cost Center: 510.20 - Colombo",),
        footer="CEB@2025",
    )


@pytest.fixture
def write_payload(tmp_path):
    """Write a JSON payload to a temporary file and return its path."""

    def _write(payload, name="payload.json"):
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
