"""Report listing and export commands."""

import os

import click

from ledgerview.cli.error_handling import handle_domain_error
from ledgerview.cli.report_loading import (
    load_payload_or_exit,
    resolve_period_or_exit,
    resolve_report_or_exit,
)
from ledgerview.domain.errors import DomainError
from ledgerview.domain.report import ReportService
from ledgerview.domain.reports import REPORTS, list_reports
from ledgerview.logging_setup import get_logger

logger = get_logger(__name__)


@click.command("reports")
def reports():
    """List available reports."""
    for name in list_reports():
        spec = REPORTS[name]
        layout = "cross tab" if spec.is_cross_tab else "flat"
        click.echo(f"{name:<30} {layout:<10} {spec.file_stem}")


@click.command("export")
@click.argument("report_name", metavar="REPORT")
@click.argument("input_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--scope-id", required=True, help="Cost center, company or project ID")
@click.option("--scope-name", default="", help="Display name of the scope")
@click.option("--period", help="Reporting month (e.g. '2025-03', 'March 2025', 'last month')")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["csv", "html", "both"]),
    default="csv",
    show_default=True,
    help="Export format",
)
@click.pass_context
def export(
    ctx,
    report_name: str,
    input_json: str,
    scope_id: str,
    scope_name: str,
    period: str | None,
    output_format: str,
):
    """Export a report from a JSON payload to CSV and/or HTML."""
    spec = resolve_report_or_exit(ctx, report_name)
    payload = load_payload_or_exit(ctx, input_json)
    parsed_period = resolve_period_or_exit(ctx, period)
    service = ReportService(spec)

    try:
        rows = service.load_rows(payload)
        meta = service.build_metadata(scope_id, scope_name, parsed_period, rows=rows)
        documents = []
        if output_format in ("csv", "both"):
            documents.append(("csv", service.export_csv(rows, meta)))
        if output_format in ("html", "both"):
            documents.append(("html", service.export_html(rows, meta)))
    except DomainError as e:
        handle_domain_error(ctx, e)

    output_dir = ctx.obj["output_dir"]
    os.makedirs(output_dir, exist_ok=True)
    for extension, content in documents:
        path = os.path.join(output_dir, service.filename(meta, extension))
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        logger.info("Wrote %s", path)
        click.echo(f"Wrote {path}")

    if not rows:
        click.echo("No rows found in payload; exported an empty report.")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(reports)
    cli.add_command(export)
