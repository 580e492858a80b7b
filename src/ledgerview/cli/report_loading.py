"""CLI helpers for resolving reports, payloads and periods."""

from __future__ import annotations

import json
from typing import Any

import click

from ledgerview.domain.errors import DomainError
from ledgerview.domain.reports import ReportSpec, get_report
from ledgerview.cli.error_handling import handle_domain_error
from ledgerview.utils.date_parser import Period, parse_period


def resolve_report_or_exit(ctx: click.Context, name: str) -> ReportSpec:
    """Look up a report by name, or exit with a CLI error."""
    try:
        return get_report(name)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def load_payload_or_exit(ctx: click.Context, path: str) -> Any:
    """Read and decode a JSON payload file, or exit with a CLI error."""
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        click.echo(f"Error: {path} is not valid JSON: {exc}", err=True)
        ctx.exit(1)
    except OSError as exc:
        click.echo(f"Error: Could not read {path}: {exc}", err=True)
        ctx.exit(1)


def resolve_period_or_exit(ctx: click.Context, period: str | None) -> Period | None:
    """Parse the --period option, or exit with a CLI error."""
    if not period:
        return None
    try:
        return parse_period(period)
    except ValueError as exc:
        click.echo(f"Error: Invalid period: {exc}", err=True)
        ctx.exit(1)
