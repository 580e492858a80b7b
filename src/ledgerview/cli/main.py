"""Main CLI entry point."""

import click

from ledgerview.logging_setup import configure_logging

# Import and register all commands at module level
from ledgerview.cli.commands import report, summary


@click.group()
@click.option(
    "--log-level",
    help="Logging level, e.g. INFO or DEBUG (overrides LEDGERVIEW_LOG_LEVEL environment variable)",
    envvar="LEDGERVIEW_LOG_LEVEL",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=".",
    show_default=True,
    help="Directory for exported files (overrides LEDGERVIEW_OUTPUT_DIR environment variable)",
    envvar="LEDGERVIEW_OUTPUT_DIR",
)
@click.pass_context
def cli(ctx, log_level: str | None, output_dir: str):
    """Ledgerview - Financial report exports.

    Aggregate ledger rows from the reporting API into trial balances,
    income & expenditure statements and job cards, and export them as CSV
    or print-ready HTML.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)
    ctx.obj["output_dir"] = output_dir


# Register all commands
report.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
