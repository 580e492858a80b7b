"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested report or resource does not exist."""


def report_not_found(name: str, available: list[str]) -> str:
    """Return message for an unknown report name."""
    return f"Report '{name}' not found. Available reports: {', '.join(available)}"


def unsupported_payload(type_name: str) -> str:
    """Return message for a payload that is neither a list nor a wrapper."""
    return (
        f"Unsupported payload of type {type_name}: expected a list of rows "
        "or an object wrapping one"
    )


def unknown_column_source(report: str, source: str) -> str:
    """Return message for a column that reads a field the report lacks."""
    return f"Report '{report}' has a column reading unknown field '{source}'"


def cross_tab_report_required(name: str) -> str:
    """Return message when a flat export is asked of a cross-tab report."""
    return f"Report '{name}' is a cross-tab report"
