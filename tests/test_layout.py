import logging
from dataclasses import replace

import pytest

from invoice_document import InvoiceDocument, ItemRow
from item_table import HEADER_ROW_HEIGHT, measure_item_rows
from layout import (
    SECTION_GAP,
    STATUS_COLORS,
    TABLE_GAP,
    UNKNOWN_STATUS_COLOR,
    Geometry,
    Line,
    Link,
    Rect,
    RoundRect,
    Text,
    format_date,
    format_money,
    format_quantity,
    layout_document,
    layout_cards,
    layout_header,
    layout_identity,
    layout_items_table,
    layout_payment_notes,
    layout_summary,
    monogram,
)
from themes import resolve_color_scheme

GEOMETRY = Geometry()
SCHEME = resolve_color_scheme("professional")


def _texts(ops):
    return [op.text for op in ops if isinstance(op, Text)]


@pytest.fixture
def doc(invoice_payload):
    return InvoiceDocument.from_mapping(invoice_payload)


def test_header_band_uses_theme_primary(doc):
    header = layout_header(doc, SCHEME, GEOMETRY)
    band = header.ops[0]
    assert isinstance(band, Rect)
    assert (band.x, band.y, band.w, band.h) == (0, 0, GEOMETRY.page_width, 80)
    assert band.fill == (13, 60, 97)
    assert header.end_y == 80


def test_header_overlay_is_translucent(doc):
    header = layout_header(doc, SCHEME, GEOMETRY)
    alphas = [op.alpha for op in header.ops if hasattr(op, "alpha") and op.alpha < 1]
    assert alphas and all(a <= 0.1 for a in alphas)


def test_amount_cell_uses_currency_verbatim(doc):
    table = layout_items_table(doc, SCHEME, GEOMETRY, 150)
    texts = _texts(table.ops)
    assert "$1500.00" in texts
    assert "$150.00" in texts
    assert "10" in texts
    assert "Consulting Services" in texts


def test_currency_code_is_not_translated(doc):
    euro = replace(doc, client=replace(doc.client, currency="EUR "))
    assert "EUR 1500.00" in _texts(layout_items_table(euro, SCHEME, GEOMETRY, 150).ops)


def test_no_status_no_badge(doc):
    header = layout_header(replace(doc, status=None), SCHEME, GEOMETRY)
    assert not [op for op in header.ops if isinstance(op, RoundRect)]


@pytest.mark.parametrize("status", ["PAID", "DUE", "OVERDUE", "PENDING"])
def test_known_status_badge_color(doc, status):
    header = layout_header(replace(doc, status=status), SCHEME, GEOMETRY)
    badges = [op for op in header.ops if isinstance(op, RoundRect)]
    assert len(badges) == 1
    assert badges[0].fill == STATUS_COLORS[status]
    assert status in _texts(header.ops)


def test_unknown_status_is_gray_and_literal(doc):
    header = layout_header(replace(doc, status="unknown_value"), SCHEME, GEOMETRY)
    badges = [op for op in header.ops if isinstance(op, RoundRect)]
    assert badges[0].fill == UNKNOWN_STATUS_COLOR
    assert "unknown_value" in _texts(header.ops)


def test_monogram():
    assert monogram("acme studio") == "AC"
    assert monogram("") == "SI"
    assert monogram("  ") == "SI"
    assert monogram("x") == "X"


def test_identity_omits_missing_contacts(doc):
    header = layout_header(doc, SCHEME, GEOMETRY)
    full = _texts(layout_identity(doc, SCHEME, GEOMETRY, header).ops)
    assert "hello@acme.example" in full
    assert "+1 555 0100" in full

    bare = replace(doc, company=replace(doc.company, email=None, phone=None, website=None))
    texts = _texts(layout_identity(bare, SCHEME, GEOMETRY, header).ops)
    assert "hello@acme.example" not in texts
    assert "AC" in texts


def test_identity_never_ends_above_band(doc):
    header = layout_header(doc, SCHEME, GEOMETRY)
    assert layout_identity(doc, SCHEME, GEOMETRY, header).end_y >= header.end_y


def test_dates():
    assert format_date("2025-01-05") == "Jan 05, 2025"
    assert format_date("2025-01-05T10:30:00Z") == "Jan 05, 2025"
    assert format_date(None) == "N/A"
    assert format_date("") == "N/A"
    assert format_date("someday") == "someday"


def test_cards_show_metadata_and_client(doc, generated_at):
    page = layout_document(doc, GEOMETRY, generated_at)
    texts = _texts(page.ops)
    assert "Mar 01, 2025" in texts
    assert "Mar 31, 2025" in texts
    assert "Globex Corporation" in texts
    assert any("22AAAAA0000A1Z5" in t for t in texts)
    assert page.offsets["cards"] == 150


def test_missing_dates_render_na(doc, generated_at):
    page = layout_document(replace(doc, date=None, due_date=None), GEOMETRY, generated_at)
    assert _texts(page.ops).count("N/A") == 2


def test_long_client_name_is_clipped_to_two_lines(doc):
    name = " ".join(["Intercontinental"] * 12)
    cards = layout_cards(replace(doc, client=replace(doc.client, name=name)), SCHEME, GEOMETRY, 80)
    name_lines = [op.text for op in cards.ops
                  if isinstance(op, Text) and op.font == "Helvetica-Bold" and op.size == 10]
    assert len(name_lines) == 2
    assert name_lines[-1].endswith("...")


def test_summary_lines(doc):
    summary = layout_summary(doc, SCHEME, GEOMETRY, 200)
    texts = _texts(summary.ops)
    assert "$1500.00" in texts
    assert "Discount (10%)" in texts
    assert "-$150.00" in texts
    assert "Tax (18%)" in texts
    assert "+$243.00" in texts
    assert "$1593.00" in texts
    assert summary.ops[0].y == 200 + SECTION_GAP


def test_table_end_drives_summary_and_notes(doc, generated_at):
    long_desc = "Extended discovery workshop with stakeholder interviews " * 4
    doc = replace(doc, items=(ItemRow(long_desc, 1, 10, 10), ItemRow("Design", 2, 5, 10)))
    page = layout_document(doc, GEOMETRY, generated_at)
    metrics = measure_item_rows(doc.items, GEOMETRY.content_width)
    table_end = page.offsets["cards"] + TABLE_GAP + HEADER_ROW_HEIGHT + metrics.total_height
    assert page.offsets["items_table"] == table_end

    summary_card = next(op for op in page.ops if isinstance(op, RoundRect) and op.y == table_end + SECTION_GAP)
    assert summary_card.x == GEOMETRY.right - summary_card.w


def test_empty_items_header_only_table(doc, generated_at):
    empty = replace(doc, items=())
    page = layout_document(empty, GEOMETRY, generated_at)
    table_end = page.offsets["items_table"]
    assert table_end == page.offsets["cards"] + TABLE_GAP + HEADER_ROW_HEIGHT
    assert "Description" in _texts(page.ops)

    summary = layout_summary(empty, SCHEME, GEOMETRY, table_end)
    assert summary.ops[0].y == table_end + SECTION_GAP
    assert page.offsets["summary"] == summary.end_y


def test_large_quantity_prints_plain_digits(doc):
    rows = (ItemRow("Bolts", 1234567, 0.01, 12345.67),)
    table = layout_items_table(replace(doc, items=rows), SCHEME, GEOMETRY, 150)
    assert "1234567" in _texts(table.ops)


def test_row_separators_between_rows_only(doc):
    rows = tuple(ItemRow(f"Item {i}", 1, 1, 1) for i in range(4))
    table = layout_items_table(replace(doc, items=rows), SCHEME, GEOMETRY, 150)
    assert len([op for op in table.ops if isinstance(op, Line)]) == 3


def test_payment_card_follows_notes(doc):
    block = layout_payment_notes(doc, SCHEME, GEOMETRY, 200)
    link = next(op for op in block.ops if isinstance(op, Link))
    assert link.url == "https://pay.example/inv-2025-001"
    last_note_line = max(op.y for op in block.ops if isinstance(op, Text) and op.y < link.y)
    assert link.y > last_note_line
    assert block.end_y == link.y + link.h
    assert "Pay securely online" in _texts(block.ops)


def test_payment_card_without_notes_starts_at_baseline(doc):
    bare = replace(doc, notes=None, terms=None)
    block = layout_payment_notes(bare, SCHEME, GEOMETRY, 200)
    link = next(op for op in block.ops if isinstance(op, Link))
    assert link.y == 200 + SECTION_GAP


def test_nothing_optional_nothing_drawn(doc):
    bare = replace(doc, notes=None, terms=None, payment_link=None)
    block = layout_payment_notes(bare, SCHEME, GEOMETRY, 200)
    assert block.ops == ()
    assert block.end_y == 200 + SECTION_GAP


def test_long_notes_are_truncated(doc):
    notes = "This engagement covers the full redesign of the storefront. " * 10
    block = layout_payment_notes(replace(doc, notes=notes, terms=None, payment_link=None), SCHEME, GEOMETRY, 200)
    body = [op for op in block.ops if isinstance(op, Text) and op.font == "Helvetica"]
    assert len(body) == 3
    assert body[-1].text.endswith("...")


def test_footer(doc, generated_at):
    page = layout_document(doc, GEOMETRY, generated_at)
    texts = _texts(page.ops)
    assert "Mar 05, 2025 14:07" in texts
    assert "Generated by SmartInvoice" in texts
    assert page.offsets["footer_top"] == GEOMETRY.page_height - 20 - 14


def test_layout_is_idempotent(doc, generated_at):
    first = layout_document(doc, GEOMETRY, generated_at)
    second = layout_document(doc, GEOMETRY, generated_at)
    assert first == second


def test_string_and_native_empty_items_lay_out_identically(invoice_payload, generated_at):
    as_string = InvoiceDocument.from_mapping({**invoice_payload, "items": "[]"})
    as_list = InvoiceDocument.from_mapping({**invoice_payload, "items": []})
    assert layout_document(as_string, GEOMETRY, generated_at) == layout_document(as_list, GEOMETRY, generated_at)


def test_custom_colors_reach_the_header(invoice_payload, generated_at):
    doc = InvoiceDocument.from_mapping({**invoice_payload, "theme": "luxury", "customColors": {"primary": "#ff0000"}})
    page = layout_document(doc, GEOMETRY, generated_at)
    assert page.scheme.primary == (255, 0, 0)
    assert page.ops[1].fill == (255, 0, 0)


def test_overflow_is_logged(doc, generated_at, caplog):
    rows = tuple(ItemRow(f"Line item {i}", 1, 1, 1) for i in range(12))
    with caplog.at_level(logging.WARNING, logger="layout"):
        layout_document(replace(doc, items=rows), GEOMETRY, generated_at)
    assert "past the footer" in caplog.text


def test_format_money():
    assert format_money("$", 1500) == "$1500.00"
    assert format_money("₹", 12.5) == "₹12.50"
    assert format_money("", None) == "0.00"


def test_format_quantity():
    assert format_quantity(2) == "2"
    assert format_quantity(2.5) == "2.5"
    assert format_quantity(1500000) == "1500000"
    assert format_quantity(None) == "0"
