import pytest

import renderer as renderer_module
from errors import RenderFailure
from invoice_document import InvoiceDocument
from renderer import InvoiceRenderer, pdf_filename, render_invoice_pdf


def test_render_returns_pdf_bytes(invoice_payload, generated_at):
    data = InvoiceRenderer().render(invoice_payload, generated_at)
    assert isinstance(data, bytes)
    assert data.startswith(b"%PDF")
    assert data.rstrip().endswith(b"%%EOF")


def test_render_accepts_document_objects(invoice_payload, generated_at):
    doc = InvoiceDocument.from_mapping(invoice_payload)
    assert render_invoice_pdf(doc, generated_at).startswith(b"%PDF")


def test_invariant_output_is_byte_stable(invoice_payload, generated_at):
    r = InvoiceRenderer(invariant=True)
    assert r.render(invoice_payload, generated_at) == r.render(invoice_payload, generated_at)


def test_items_string_or_list_render_the_same(invoice_payload, generated_at):
    r = InvoiceRenderer(invariant=True)
    as_string = r.render({**invoice_payload, "items": "[]"}, generated_at)
    as_list = r.render({**invoice_payload, "items": []}, generated_at)
    assert as_string == as_list


def test_malformed_items_still_render(invoice_payload, generated_at):
    data = InvoiceRenderer().render({**invoice_payload, "items": "{broken"}, generated_at)
    assert data.startswith(b"%PDF")


@pytest.mark.parametrize("theme", [
    "professional", "modern", "luxury", "minimal", "elegant-black-gold",
    "minimal-white-silver", "ivory-serif-classic", "modern-rose-gold",
])
def test_every_theme_renders(invoice_payload, generated_at, theme):
    assert InvoiceRenderer().render({**invoice_payload, "theme": theme}, generated_at).startswith(b"%PDF")


def test_minimal_document_renders(generated_at):
    assert InvoiceRenderer().render({"invoiceNumber": "1"}, generated_at).startswith(b"%PDF")


def test_drawing_error_becomes_render_failure(invoice_payload, monkeypatch):
    def boom(*args, **kwargs):
        raise ValueError("font table exploded")

    monkeypatch.setattr(renderer_module, "draw_ops", boom)
    with pytest.raises(RenderFailure) as info:
        InvoiceRenderer().render(invoice_payload)
    assert info.value.invoice_number == "INV-2025-001"
    assert isinstance(info.value.__cause__, ValueError)


def test_bad_input_type_becomes_render_failure():
    with pytest.raises(RenderFailure):
        InvoiceRenderer().render(42)


def test_each_render_uses_its_own_canvas(invoice_payload, generated_at, monkeypatch):
    seen = []
    real_canvas = renderer_module.canvas.Canvas

    def tracking_canvas(*args, **kwargs):
        c = real_canvas(*args, **kwargs)
        seen.append(c)
        return c

    monkeypatch.setattr(renderer_module.canvas, "Canvas", tracking_canvas)
    r = InvoiceRenderer()
    r.render(invoice_payload, generated_at)
    r.render(invoice_payload, generated_at)
    assert len(seen) == 2
    assert seen[0] is not seen[1]


def test_pdf_filename(invoice_payload):
    assert pdf_filename(invoice_payload) == "invoice-INV-2025-001.pdf"
    assert pdf_filename(InvoiceDocument(invoice_number="A/7")) == "invoice-A7.pdf"
    assert pdf_filename(invoice_payload, preview=True) == "invoice-preview-INV-2025-001.pdf"


def test_pdf_filename_accepts_snake_case_number():
    assert pdf_filename({"invoice_number": "INV-9"}) == "invoice-INV-9.pdf"
    assert pdf_filename({"invoice_number": "INV-9"}, preview=True) == "invoice-preview-INV-9.pdf"
