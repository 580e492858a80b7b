"""Tests for print-ready HTML export."""

from ledgerview.domain.crosstab import build_cross_tab
from ledgerview.domain.report import build_report_table
from ledgerview.domain.reports import JOB_CARD, PROVINCIAL_TRIAL_BALANCE, TRIAL_BALANCE
from ledgerview.domain import classifier as classifiers
from ledgerview.export.html_export import cross_tab_to_print_html, to_print_html


def test_one_category_header_per_section(trial_balance_rows, metadata):
    table = build_report_table(trial_balance_rows, TRIAL_BALANCE)
    html = to_print_html(table, TRIAL_BALANCE, metadata)

    assert html.count('<tr class="category-header">') == len(table.sections) == 2
    assert '<td colspan="5">ASSETS</td>' in html
    assert '<tr class="grand-total">' in html
    assert "size: A4 portrait" in html
    assert "display: table-header-group" in html
    assert "page-break-inside: avoid" in html


def test_markup_in_names_is_escaped(row_factory, metadata):
    rows = [row_factory("A1", "<b>R&D</b>", closing=-5)]
    html = to_print_html(build_report_table(rows, TRIAL_BALANCE), TRIAL_BALANCE, metadata)

    assert "<b>R&D</b>" not in html
    assert "&lt;b&gt;R&amp;D&lt;/b&gt;" in html
    assert '<td class="amount">(5.00)</td>' in html


def test_header_and_footer(metadata):
    html = to_print_html(build_report_table([], TRIAL_BALANCE), TRIAL_BALANCE, metadata)

    assert "<title>MONTHLY TRIAL BALANCE - MARCH/2025</title>" in html
    assert "<h2>Cost Center: 510.20 - Colombo</h2>" in html
    assert "Total Records: 0" in html
    assert "<p>CEB@2025</p>" in html
    assert 'class="category-header"' not in html.split("<tbody>")[1]


def test_job_card_spreads_amounts_by_resource(row_factory, metadata):
    rows = [
        row_factory(
            "DOC-1",
            flag="LABOUR",
            amount=1234.5,
            attributes={"year": "2025", "month": "3", "profile": "PIV", "date": "2025-03-02"},
        )
    ]
    html = to_print_html(build_report_table(rows, JOB_CARD), JOB_CARD, metadata)

    assert "<th>Labour</th><th>Material</th><th>Other</th><th>Total</th>" in html
    assert "<td>PIV</td>" in html
    assert (
        '<td class="amount">1,234.50</td><td class="amount">0.00</td>'
        '<td class="amount">0.00</td><td class="amount">1,234.50</td>'
    ) in html
    assert '<tr class="grand-total"><td>TOTAL</td>' in html
    assert 'class="category-header"' not in html
    assert "TOTAL LABOUR" not in html


def test_cross_tab_is_landscape(row_factory, metadata):
    rows = [
        row_factory("1100", "Cash", secondary_key="510", closing=10),
        row_factory("2100", "Loans", secondary_key="520", closing=4),
    ]
    cross_tab = build_cross_tab(
        rows, "closing", classifier=classifiers.PROVINCIAL_TRIAL_BALANCE
    )
    html = cross_tab_to_print_html(cross_tab, PROVINCIAL_TRIAL_BALANCE, metadata)

    assert "size: A4 landscape" in html
    assert "<th>510</th><th>520</th><th>Total</th>" in html
    assert html.count('<tr class="category-header">') == 2
    assert '<td class="amount">-</td>' not in html
