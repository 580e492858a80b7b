"""Summary command."""

import click

from ledgerview.cli.error_handling import handle_domain_error
from ledgerview.cli.report_loading import load_payload_or_exit, resolve_report_or_exit
from ledgerview.domain.errors import DomainError
from ledgerview.domain.report import ReportService, build_report_table
from ledgerview.domain.entities import MeasureTotals
from ledgerview.utils.number_format import format_amount

LABEL_WIDTH = 40
AMOUNT_WIDTH = 20
INDENT_SIZE = 4


def _amounts(totals: MeasureTotals, measures, policy) -> str:
    return " ".join(
        f"{format_amount(totals.get(m), policy):>{AMOUNT_WIDTH}}" for m in measures
    )


@click.command("summary")
@click.argument("report_name", metavar="REPORT")
@click.argument("input_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--expand", is_flag=True, help="List the rows under each category")
@click.pass_context
def summary(ctx, report_name: str, input_json: str, expand: bool):
    """Show category totals of a report."""
    spec = resolve_report_or_exit(ctx, report_name)
    payload = load_payload_or_exit(ctx, input_json)
    service = ReportService(spec)

    try:
        rows = service.load_rows(payload)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not rows:
        click.echo("No rows found.")

    table = build_report_table(rows, spec)
    table_rows = [row for section in table.sections for row in section.rows]
    measures = spec.measures
    policy = spec.policy

    header = " ".join(f"{m.capitalize():>{AMOUNT_WIDTH}}" for m in measures)
    click.echo(f"{'Category':<{LABEL_WIDTH}} {header}")

    for category, totals in table.aggregation.category_totals.items():
        title = f"{spec.section_title(category)} ({totals.count})"
        click.echo(f"{title:<{LABEL_WIDTH}} {_amounts(totals, measures, policy)}")

        if expand:
            for row in table_rows:
                if spec.classifier.classify_row(row) != category:
                    continue
                label = f"{' ' * INDENT_SIZE}{row.code} {row.name}"[:LABEL_WIDTH]
                values = " ".join(
                    f"{format_amount(row.measures.get(m), policy):>{AMOUNT_WIDTH}}"
                    for m in measures
                )
                click.echo(f"{label:<{LABEL_WIDTH}} {values}")

    click.echo("-" * (LABEL_WIDTH + (AMOUNT_WIDTH + 1) * len(measures)))
    click.echo(f"{'TOTAL':<{LABEL_WIDTH}} {_amounts(table.grand_total, measures, policy)}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
