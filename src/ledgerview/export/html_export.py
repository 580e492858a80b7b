"""Print-ready HTML export.

The document is meant to be opened in a new browser window and sent to the
print dialog; this module only builds the HTML string.
"""

from __future__ import annotations

from typing import Sequence

from jinja2 import BaseLoader, Environment, select_autoescape

from ledgerview.domain.entities import CrossTab, ReportMetadata, ReportTable
from ledgerview.domain.reports import ReportSpec
from ledgerview.export import layout

PRINT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{{ meta.title }}</title>
<style>
  @page {
    size: A4 {{ orientation }};
    margin: 15mm 10mm 18mm 10mm;
    @bottom-left {
      content: "Generated: {{ generated }}";
      font-size: 9px;
      color: #666;
    }
    @bottom-right {
      content: "Page " counter(page) " of " counter(pages);
      font-size: 9px;
      color: #666;
    }
  }
  body { font-family: Arial, sans-serif; margin: 20px; font-size: 12px; color: #333; }
  .header { text-align: center; margin-bottom: 20px; border-bottom: 2px solid #7A0000; padding-bottom: 10px; }
  .header h1 { color: #7A0000; font-size: 18px; margin: 0; }
  .header h2 { color: #7A0000; font-size: 14px; margin: 5px 0; }
  .header-info { margin-top: 8px; font-size: 12px; color: #666; }
  table { width: 100%; border-collapse: collapse; margin-bottom: 20px; }
  thead { display: table-header-group; }
  th { background-color: #7A0000; color: white; font-weight: bold; text-align: center; padding: 6px; border: 1px solid #7A0000; }
  td { padding: 5px; border: 1px solid #ddd; }
  td.amount { text-align: right; font-family: monospace; white-space: nowrap; }
  tr.category-header td { text-align: center; font-weight: bold; background-color: #f5f5f5; color: #7A0000; }
  tr.subgroup-header td { font-weight: bold; background-color: #fafafa; }
  tr.subgroup-total td, tr.category-total td { font-weight: bold; background-color: #f9f9f9; }
  tr.grand-total td, tr.net-total td { background-color: #7A0000; color: white; font-weight: bold; border-color: #7A0000; }
  .footer { margin-top: 20px; text-align: center; font-size: 10px; color: #666; border-top: 1px solid #ddd; padding-top: 10px; }
  @media print {
    body { margin: 0; }
    .header { page-break-inside: avoid; }
    table { page-break-inside: auto; }
    tr { page-break-inside: avoid; page-break-after: auto; }
  }
</style>
</head>
<body>
  <div class="header">
    <h1>{{ meta.title }}</h1>
    {% for line in meta.subtitle_lines %}<h2>{{ line }}</h2>
    {% endfor %}<div class="header-info">Generated on: {{ generated }} | Total Records: {{ record_count }}</div>
  </div>
  <table>
    <thead>
      <tr>{% for header in headers %}<th>{{ header }}</th>{% endfor %}</tr>
    </thead>
    <tbody>
    {% for line in lines %}
      {% if line.kind == "category-header" %}
      <tr class="category-header"><td colspan="{{ headers|length }}">{{ line.label }}</td></tr>
      {% else %}
      <tr class="{{ line.kind }}">{% for cell in line.cells %}<td{% if cell.is_amount %} class="amount"{% endif %}>{{ cell.text }}</td>{% endfor %}</tr>
      {% endif %}
    {% endfor %}
    </tbody>
  </table>
  <div class="footer">
    {% for line in footer_lines %}<p>{{ line }}</p>{% endfor %}
  </div>
</body>
</html>
"""

_env = Environment(loader=BaseLoader(), autoescape=select_autoescape(default_for_string=True))
_template = _env.from_string(PRINT_TEMPLATE)


def _render(
    meta: ReportMetadata,
    headers: Sequence[str],
    lines: Sequence[layout.Line],
    record_count: int,
    orientation: str,
) -> str:
    generated = f"{meta.generated_at:%Y-%m-%d %H:%M}"
    footer_lines = [f"Generated on: {generated}"]
    if meta.footer:
        footer_lines.append(meta.footer)
    return _template.render(
        meta=meta,
        headers=headers,
        lines=lines,
        record_count=record_count,
        generated=generated,
        orientation=orientation,
        footer_lines=footer_lines,
    )


def to_print_html(table: ReportTable, spec: ReportSpec, meta: ReportMetadata) -> str:
    """Render a flat report as a printable HTML document.

    Same grouping as the CSV export: a category header row spanning all
    columns, data rows, a subtotal row per section and a grand-total row.
    Text is HTML-escaped.
    """
    return _render(
        meta,
        layout.headers(spec),
        layout.table_lines(table, spec, spec.policy),
        table.row_count,
        "portrait",
    )


def cross_tab_to_print_html(
    cross_tab: CrossTab, spec: ReportSpec, meta: ReportMetadata
) -> str:
    """Render a cross tab as a printable HTML document in landscape."""
    return _render(
        meta,
        layout.headers(spec, cross_tab),
        layout.cross_tab_lines(cross_tab, spec, spec.policy),
        cross_tab.row_count,
        "landscape",
    )
