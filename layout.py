# layout.py
"""
Section layout for the single-page invoice.

Every stage is a plain function that takes the document, the resolved colors,
the page Geometry and the offset where the previous stage ended, and returns a
Stage: the draw operations it wants plus the offset where it ends. Nothing is
drawn here; pdf_canvas.draw_ops turns the ops into reportlab calls.

Coordinates are millimetres from the top-left corner of the page. Text y is
the baseline.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple, Optional

from invoice_document import InvoiceDocument
from item_table import (
    BODY_FONT,
    BODY_SIZE,
    CELL_PADDING,
    COLUMN_TITLES,
    HEADER_ROW_HEIGHT,
    LINE_HEIGHT,
    column_widths,
    description_lines,
    measure_item_rows,
)
from text_layout import text_width, truncate_lines, wrap_text
from themes import RGB, ColorScheme, resolve_color_scheme

logger = logging.getLogger(__name__)

HEADER_HEIGHT = 80
OVERLAY_ALPHA = 0.08

MONOGRAM_SIZE = 18
IDENTITY_TEXT_WIDTH = 60

CARD_TOP = 100
CARD_GAP = 20
CARD_W = 85
CARD_H = 50
CARD_RADIUS = 3

TABLE_GAP = 15
SECTION_GAP = 10

SUMMARY_W = 80
SUMMARY_ROW_STEP = 7

NOTES_MAX_LINES = 3
NOTES_LINE_HEIGHT = 4
PAYMENT_CARD_H = 16

FOOTER_OFFSET = 20
FOOTER_HEIGHT = 14

STATUS_COLORS: dict[str, RGB] = {
    "PAID": (16, 185, 129),
    "DUE": (245, 158, 11),
    "OVERDUE": (239, 68, 68),
    "PENDING": (99, 102, 241),
}
UNKNOWN_STATUS_COLOR: RGB = (148, 163, 184)


# -----------------------------
# Draw operations
# -----------------------------
@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float
    fill: Optional[RGB] = None
    stroke: Optional[RGB] = None
    line_width: float = 0.3
    alpha: float = 1.0


@dataclass(frozen=True)
class RoundRect:
    x: float
    y: float
    w: float
    h: float
    radius: float
    fill: Optional[RGB] = None
    stroke: Optional[RGB] = None
    line_width: float = 0.3


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    fill: RGB
    alpha: float = 1.0


@dataclass(frozen=True)
class Polygon:
    points: tuple[tuple[float, float], ...]
    fill: RGB
    alpha: float = 1.0


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    color: RGB
    width: float = 0.3


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    text: str
    font: str = "Helvetica"
    size: float = 9
    color: RGB = (0, 0, 0)
    align: str = "left"  # left | right | center


@dataclass(frozen=True)
class Link:
    x: float
    y: float
    w: float
    h: float
    url: str


# -----------------------------
# Geometry / results
# -----------------------------
@dataclass(frozen=True)
class Geometry:
    page_width: float = 210.0   # A4
    page_height: float = 297.0
    margin: float = 20.0

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def right(self) -> float:
        return self.page_width - self.margin


class Branding(NamedTuple):
    name: str = "SmartInvoice"
    tagline: str = "Professional Invoice Management"


class Stage(NamedTuple):
    ops: tuple
    end_y: float


class DocumentLayout(NamedTuple):
    scheme: ColorScheme
    ops: tuple
    offsets: dict


# -----------------------------
# Formatting
# -----------------------------
def format_money(currency: str, value) -> str:
    # currency is shown verbatim; no code -> symbol mapping
    return f"{currency or ''}{float(value or 0.0):.2f}"


def format_quantity(value) -> str:
    q = float(value or 0.0)
    # plain digits, never exponent notation
    return str(int(q)) if q.is_integer() else repr(q)


def format_rate(value) -> str:
    return f"{float(value or 0.0):g}%"


def format_date(value: Optional[str]) -> str:
    """ISO date -> 'Jan 05, 2025'. Missing -> 'N/A'; unparseable text is shown as-is."""
    raw = (value or "").strip()
    if not raw:
        return "N/A"
    for candidate in (raw.replace("Z", "+00:00"), raw[:10]):
        try:
            return datetime.fromisoformat(candidate).strftime("%b %d, %Y")
        except ValueError:
            continue
    return raw


def format_timestamp(dt: datetime) -> str:
    return dt.strftime("%b %d, %Y %H:%M")


def status_badge(status: Optional[str]) -> Optional[tuple[str, RGB]]:
    if not status:
        return None
    return status, STATUS_COLORS.get(status, UNKNOWN_STATUS_COLOR)


def monogram(company_name: str) -> str:
    return ((company_name or "").strip() or "SI")[:2].upper()


# -----------------------------
# Stages
# -----------------------------
def layout_header(doc: InvoiceDocument, scheme: ColorScheme, geometry: Geometry) -> Stage:
    W = geometry.page_width
    ops = [
        Rect(0, 0, W, HEADER_HEIGHT, fill=scheme.primary),
        # decorative overlay
        Circle(W - 25, 12, 38, fill=scheme.white, alpha=OVERLAY_ALPHA),
        Circle(W - 4, 72, 22, fill=scheme.white, alpha=OVERLAY_ALPHA),
        Polygon(
            ((W * 0.55, HEADER_HEIGHT), (W * 0.72, 0), (W * 0.80, 0), (W * 0.63, HEADER_HEIGHT)),
            fill=scheme.white,
            alpha=OVERLAY_ALPHA,
        ),
        Rect(0, HEADER_HEIGHT - 1.5, W, 1.5, fill=scheme.accent),
        Text(geometry.right, 30, "INVOICE", "Helvetica-Bold", 26, scheme.white, "right"),
        Text(geometry.right, 38, f"#{doc.invoice_number}", "Helvetica", 10, scheme.white, "right"),
    ]

    badge = status_badge(doc.status)
    if badge:
        label, color = badge
        badge_w = max(24.0, text_width(label, "Helvetica-Bold", 8) + 8)
        bx = geometry.right - badge_w
        ops.append(RoundRect(bx, 45, badge_w, 8, 2, fill=color))
        ops.append(Text(bx + badge_w / 2, 50.3, label, "Helvetica-Bold", 8, scheme.white, "center"))

    return Stage(tuple(ops), HEADER_HEIGHT)


def layout_identity(
    doc: InvoiceDocument,
    scheme: ColorScheme,
    geometry: Geometry,
    band: Stage,
    branding: Branding = Branding(),
) -> Stage:
    """Monogram, company name, tagline and contact lines, drawn inside the header band."""
    x = geometry.margin
    tile_y = 18
    ops = [
        RoundRect(x, tile_y, MONOGRAM_SIZE, MONOGRAM_SIZE, 3, fill=scheme.accent),
        Text(x + MONOGRAM_SIZE / 2, tile_y + 11.5, monogram(doc.company.name),
             "Helvetica-Bold", 12, scheme.white, "center"),
    ]

    text_x = x + MONOGRAM_SIZE + 6
    name = (doc.company.name or "").strip() or branding.name
    y = 24.0
    for ln in wrap_text(name, IDENTITY_TEXT_WIDTH, "Helvetica-Bold", 16):
        ops.append(Text(text_x, y, ln, "Helvetica-Bold", 16, scheme.white))
        y += 7

    y -= 1
    ops.append(Text(text_x, y, branding.tagline, "Helvetica", 9, scheme.light))
    y += 5.5

    contacts = [c for c in (doc.company.email, doc.company.phone, doc.company.website) if c][:3]
    for contact in contacts:
        for ln in wrap_text(contact, IDENTITY_TEXT_WIDTH, "Helvetica", 8.5):
            ops.append(Text(text_x, y, ln, "Helvetica", 8.5, scheme.white))
            y += 4.5

    return Stage(tuple(ops), max(band.end_y, y))


def _card_frame(x: float, y: float, title: str, scheme: ColorScheme) -> list:
    return [
        RoundRect(x, y, CARD_W, CARD_H, CARD_RADIUS, fill=scheme.bg, stroke=scheme.light),
        Text(x + 6, y + 8, title, "Helvetica-Bold", 8, scheme.primary),
    ]


def layout_cards(doc: InvoiceDocument, scheme: ColorScheme, geometry: Geometry, start_y: float) -> Stage:
    """Invoice details card on the left, bill-to card on the right."""
    y = max(CARD_TOP, start_y + CARD_GAP)

    # Metadata card
    left_x = geometry.margin
    ops = _card_frame(left_x, y, "INVOICE DETAILS", scheme)
    details = [
        ("Invoice No.", doc.invoice_number or "N/A"),
        ("Issue Date", format_date(doc.date)),
        ("Due Date", format_date(doc.due_date)),
        ("Currency", doc.client.currency or "N/A"),
    ]
    row_y = y + 17
    for label, value in details:
        ops.append(Text(left_x + 6, row_y, label, "Helvetica-Bold", 8.5, scheme.medium))
        ops.append(Text(left_x + CARD_W - 6, row_y, value, "Helvetica", 8.5, scheme.dark, "right"))
        row_y += 8

    # Client card
    right_x = geometry.right - CARD_W
    inner_w = CARD_W - 12
    ops.extend(_card_frame(right_x, y, "BILL TO", scheme))

    cursor = y + 16
    name_lines = truncate_lines(wrap_text(doc.client.name or "N/A", inner_w, "Helvetica-Bold", 10), 2,
                                "Helvetica-Bold", 10, inner_w)
    for ln in name_lines:
        ops.append(Text(right_x + 6, cursor, ln, "Helvetica-Bold", 10, scheme.dark))
        cursor += 5

    address = ", ".join(p.strip() for p in (doc.client.address or "").splitlines() if p.strip())
    parts = [
        doc.client.company,
        doc.client.email,
        address,
        f"GST: {doc.client.gst_number}" if doc.client.gst_number else None,
    ]
    block = " | ".join(p for p in parts if p)
    if block:
        cursor += 0.5
        line_h = 4.2
        bottom = y + CARD_H - 4
        fits = max(0, int((bottom - cursor) // line_h) + 1)
        lines = truncate_lines(wrap_text(block, inner_w, "Helvetica", 8), fits, "Helvetica", 8, inner_w)
        for ln in lines:
            ops.append(Text(right_x + 6, cursor, ln, "Helvetica", 8, scheme.medium))
            cursor += line_h

    return Stage(tuple(ops), y + CARD_H)


def layout_items_table(doc: InvoiceDocument, scheme: ColorScheme, geometry: Geometry, start_y: float) -> Stage:
    x = geometry.margin
    table_w = geometry.content_width
    widths = column_widths(table_w)
    y = start_y + TABLE_GAP

    ops = [Rect(x, y, table_w, HEADER_ROW_HEIGHT, fill=scheme.primary)]
    cx = x
    for i, title in enumerate(COLUMN_TITLES):
        if i == 0:
            ops.append(Text(cx + CELL_PADDING, y + 6.5, title, "Helvetica-Bold", 8.5, scheme.white))
        else:
            ops.append(Text(cx + widths[i] - CELL_PADDING, y + 6.5, title, "Helvetica-Bold", 8.5,
                            scheme.white, "right"))
        cx += widths[i]

    metrics = measure_item_rows(doc.items, table_w)
    currency = doc.client.currency
    row_y = y + HEADER_ROW_HEIGHT
    last = len(doc.items) - 1

    for idx, (item, h) in enumerate(zip(doc.items, metrics.row_heights)):
        if idx % 2 == 1:
            ops.append(Rect(x, row_y, table_w, h, fill=scheme.bg))

        lines = description_lines(item.description, table_w)
        text_top = row_y + (h - len(lines) * LINE_HEIGHT) / 2
        for k, ln in enumerate(lines):
            ops.append(Text(x + CELL_PADDING, text_top + 3.7 + k * LINE_HEIGHT, ln, BODY_FONT, BODY_SIZE,
                            scheme.dark))

        mid = row_y + (h - LINE_HEIGHT) / 2 + 3.7
        values = (format_quantity(item.quantity), format_money(currency, item.rate),
                  format_money(currency, item.amount))
        cx = x + widths[0]
        for i, value in enumerate(values, start=1):
            ops.append(Text(cx + widths[i] - CELL_PADDING, mid, value, BODY_FONT, BODY_SIZE, scheme.dark, "right"))
            cx += widths[i]

        if idx < last:
            ops.append(Line(x, row_y + h, x + table_w, row_y + h, scheme.light))
        row_y += h

    return Stage(tuple(ops), y + HEADER_ROW_HEIGHT + metrics.total_height)


def layout_summary(doc: InvoiceDocument, scheme: ColorScheme, geometry: Geometry, table_end: float) -> Stage:
    x = geometry.right - SUMMARY_W
    y = table_end + SECTION_GAP
    currency = doc.client.currency
    value_x = x + SUMMARY_W - 6
    card_h = 42

    ops = [RoundRect(x, y, SUMMARY_W, card_h, CARD_RADIUS, fill=scheme.bg, stroke=scheme.light)]
    rows = [
        ("Subtotal", format_money(currency, doc.subtotal)),
        (f"Discount ({format_rate(doc.discount_rate)})", "-" + format_money(currency, doc.discount_amount)),
        (f"Tax ({format_rate(doc.tax_rate)})", "+" + format_money(currency, doc.tax_amount)),
    ]
    row_y = y + 9
    for label, value in rows:
        ops.append(Text(x + 6, row_y, label, "Helvetica", 9, scheme.medium))
        ops.append(Text(value_x, row_y, value, "Helvetica", 9, scheme.dark, "right"))
        row_y += SUMMARY_ROW_STEP

    rule_y = row_y - 2
    ops.append(Line(x + 6, rule_y, value_x, rule_y, scheme.primary, 0.5))
    total_y = rule_y + 8
    ops.append(Text(x + 6, total_y, "Total", "Helvetica-Bold", 11, scheme.dark))
    ops.append(Text(value_x, total_y, format_money(currency, doc.amount), "Helvetica-Bold", 12,
                    scheme.primary, "right"))

    return Stage(tuple(ops), y + card_h)


def _preview_block(title: str, body: str, x: float, y: float, width: float, scheme: ColorScheme):
    ops = [Text(x, y + 4, title, "Helvetica-Bold", 9, scheme.dark)]
    lines = truncate_lines(wrap_text(body, width, "Helvetica", 8), NOTES_MAX_LINES, "Helvetica", 8, width)
    line_y = y + 9
    for ln in lines:
        ops.append(Text(x, line_y, ln, "Helvetica", 8, scheme.medium))
        line_y += NOTES_LINE_HEIGHT
    return ops, line_y + 1


def layout_payment_notes(doc: InvoiceDocument, scheme: ColorScheme, geometry: Geometry, table_end: float) -> Stage:
    """
    Notes, terms and the payment card share the left column beside the
    summary card. The payment card follows the measured end of the notes.
    """
    x = geometry.margin
    width = geometry.content_width - SUMMARY_W - SECTION_GAP
    cursor = table_end + SECTION_GAP
    ops = []

    for title, body in (("Notes", doc.notes), ("Terms & Conditions", doc.terms)):
        if body:
            block, cursor = _preview_block(title, body, x, cursor, width, scheme)
            ops.extend(block)

    if doc.payment_link:
        if ops:
            cursor += 2
        ops.append(RoundRect(x, cursor, width, PAYMENT_CARD_H, CARD_RADIUS, fill=scheme.accent))
        ops.append(Text(x + 6, cursor + 7, "Pay securely online", "Helvetica-Bold", 10, scheme.white))
        url_line = truncate_lines(wrap_text(doc.payment_link, width - 12, "Helvetica", 7), 1,
                                  "Helvetica", 7, width - 12)[0]
        ops.append(Text(x + 6, cursor + 12, url_line, "Helvetica", 7, scheme.white))
        ops.append(Link(x, cursor, width, PAYMENT_CARD_H, doc.payment_link))
        cursor += PAYMENT_CARD_H

    return Stage(tuple(ops), cursor)


def layout_footer(
    scheme: ColorScheme,
    geometry: Geometry,
    generated_at: datetime,
    branding: Branding = Branding(),
) -> Stage:
    anchor = geometry.page_height - FOOTER_OFFSET
    top = anchor - FOOTER_HEIGHT
    center = geometry.page_width / 2
    ops = (
        Line(geometry.margin, top, geometry.right, top, scheme.light, 0.5),
        Line(geometry.margin, top + 1.2, geometry.right, top + 1.2, scheme.accent, 0.3),
        Text(center, anchor - 8.5, f"Generated by {branding.name}", "Helvetica-Bold", 8, scheme.dark, "center"),
        Text(center, anchor - 4.5, branding.tagline, "Helvetica", 7, scheme.medium, "center"),
        Text(center, anchor, format_timestamp(generated_at), "Helvetica", 7, scheme.medium, "center"),
    )
    return Stage(ops, anchor)


# -----------------------------
# Whole page
# -----------------------------
def layout_document(
    doc: InvoiceDocument,
    geometry: Geometry = Geometry(),
    generated_at: Optional[datetime] = None,
    branding: Branding = Branding(),
) -> DocumentLayout:
    scheme = resolve_color_scheme(doc.theme, doc.custom_colors)
    generated_at = generated_at or datetime.now()

    page = Stage((Rect(0, 0, geometry.page_width, geometry.page_height, fill=scheme.white),), 0)
    header = layout_header(doc, scheme, geometry)
    identity = layout_identity(doc, scheme, geometry, header, branding)
    cards = layout_cards(doc, scheme, geometry, identity.end_y)
    table = layout_items_table(doc, scheme, geometry, cards.end_y)
    summary = layout_summary(doc, scheme, geometry, table.end_y)
    payment = layout_payment_notes(doc, scheme, geometry, table.end_y)
    footer = layout_footer(scheme, geometry, generated_at, branding)

    footer_top = footer.end_y - FOOTER_HEIGHT
    content_end = max(summary.end_y, payment.end_y)
    if content_end > footer_top:
        # TODO: paginate once multi-page invoices are agreed on; until then this overlaps the footer.
        logger.warning(
            "Invoice %s content ends at %.1fmm, past the footer at %.1fmm (%d items)",
            doc.invoice_number, content_end, footer_top, len(doc.items),
        )

    ops = page.ops + header.ops + identity.ops + cards.ops + table.ops + summary.ops + payment.ops + footer.ops
    offsets = {
        "header": header.end_y,
        "identity": identity.end_y,
        "cards": cards.end_y,
        "items_table": table.end_y,
        "summary": summary.end_y,
        "payment_notes": payment.end_y,
        "footer_top": footer_top,
    }
    return DocumentLayout(scheme, ops, offsets)
