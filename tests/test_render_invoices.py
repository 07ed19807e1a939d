import json

from render_invoices import main, render_json_file
from renderer import InvoiceRenderer


def test_render_json_file(tmp_path, invoice_payload):
    src = tmp_path / "invoice.json"
    src.write_text(json.dumps(invoice_payload), encoding="utf-8")
    out = tmp_path / "out" / "invoice.pdf"

    path = render_json_file(InvoiceRenderer(), str(src), str(out))

    assert path == str(out)
    assert out.read_bytes().startswith(b"%PDF")


def test_main_json_mode(tmp_path, invoice_payload, capsys):
    src = tmp_path / "invoice.json"
    src.write_text(json.dumps(invoice_payload), encoding="utf-8")
    out = tmp_path / "cli.pdf"

    main(["--json", str(src), "--out", str(out)])

    assert out.exists()
    assert "Wrote" in capsys.readouterr().out
