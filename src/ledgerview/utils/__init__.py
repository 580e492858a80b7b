"""Utility functions for ledgerview."""

from ledgerview.utils.date_parser import parse_period
from ledgerview.utils.amount_parser import parse_amount
from ledgerview.utils.number_format import coerce_amount, format_amount, percent_of

__all__ = ["parse_period", "parse_amount", "coerce_amount", "format_amount", "percent_of"]
