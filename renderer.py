# renderer.py
from __future__ import annotations

import io
import logging
import re
import time
from datetime import datetime
from typing import Optional

from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from config import Config
from errors import RenderFailure
from invoice_document import coerce_document
from layout import Branding, Geometry, layout_document
from pdf_canvas import draw_ops

logger = logging.getLogger(__name__)


def _safe_filename(name: str) -> str:
    # strip characters not allowed on Windows/mac paths
    return re.sub(r'[\\/*?:"<>|]', "", (name or "")).strip() or "invoice"


def pdf_filename(document, preview: bool = False) -> str:
    number = coerce_document(document).invoice_number
    prefix = "invoice-preview" if preview else "invoice"
    return _safe_filename(f"{prefix}-{number}") + ".pdf"


class InvoiceRenderer:
    """
    One-page invoice PDF renderer.

    Page size and margin are fixed when the renderer is built. Every render()
    call gets its own canvas, buffer and color scheme, so one renderer can be
    shared between threads.
    """

    def __init__(
        self,
        geometry: Optional[Geometry] = None,
        branding: Optional[Branding] = None,
        invariant: Optional[bool] = None,
    ):
        # A4 in mm unless told otherwise
        self.geometry = geometry or Geometry()
        self.branding = branding or Branding(Config.BRAND_NAME, Config.BRAND_TAGLINE)
        self.invariant = Config.PDF_INVARIANT if invariant is None else bool(invariant)

    def layout(self, document, generated_at: Optional[datetime] = None):
        doc = coerce_document(document)
        return layout_document(doc, self.geometry, generated_at, self.branding)

    def render(self, document, generated_at: Optional[datetime] = None) -> bytes:
        """
        InvoiceDocument (or its JSON-shaped dict) -> PDF bytes.
        Raises RenderFailure; a half-drawn document is never returned.
        """
        started = time.perf_counter()
        number = getattr(document, "invoice_number", None)
        try:
            doc = coerce_document(document)
            number = doc.invoice_number
            page = self.layout(doc, generated_at)

            buf = io.BytesIO()
            pdf = canvas.Canvas(
                buf,
                pagesize=(self.geometry.page_width * mm, self.geometry.page_height * mm),
                invariant=int(self.invariant),
            )
            pdf.setTitle(f"Invoice #{doc.invoice_number}")
            pdf.setSubject("Invoice Document")
            pdf.setAuthor(doc.company.name or self.branding.name)
            pdf.setKeywords("invoice, billing, payment")
            pdf.setCreator(f"{self.branding.name} PDF Generator")

            draw_ops(pdf, page.ops, self.geometry.page_height)
            pdf.showPage()
            pdf.save()
            data = buf.getvalue()
        except Exception as e:
            raise RenderFailure(f"Failed to generate PDF for invoice {number or '?'}: {e}", number) from e

        logger.debug(
            "Rendered invoice %s (%d bytes) in %.1f ms",
            number, len(data), (time.perf_counter() - started) * 1000,
        )
        return data


def render_invoice_pdf(document, generated_at: Optional[datetime] = None) -> bytes:
    return InvoiceRenderer().render(document, generated_at)
