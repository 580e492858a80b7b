"""CSV and print exporters for report tables."""
