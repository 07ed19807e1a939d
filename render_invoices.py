# render_invoices.py
import argparse
import json
import logging
import os
from datetime import datetime
from pathlib import Path

from config import Config
from errors import RenderFailure
from models import Base, make_engine, make_session_factory, Invoice
from renderer import InvoiceRenderer, pdf_filename

logger = logging.getLogger("render_invoices")


def render_json_file(renderer: InvoiceRenderer, src: str, out: str | None) -> str:
    with open(src, "r", encoding="utf-8") as f:
        payload = json.load(f)

    data = renderer.render(payload)
    out_path = out or os.path.join(Config.EXPORTS_DIR, pdf_filename(payload))
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "wb") as f:
        f.write(data)
    return out_path


def render_stored_invoices(renderer: InvoiceRenderer, session, year: str = "") -> tuple[int, int]:
    q = session.query(Invoice).order_by(Invoice.created_at.asc())
    if year:
        q = q.filter(Invoice.date.startswith(year))
    invoices = q.all()

    if not invoices:
        print("No invoices found for the given filter.")
        return 0, 0

    total = len(invoices)
    generated = 0
    failed = 0
    for i, inv in enumerate(invoices, start=1):
        document = inv.to_document()
        out_dir = os.path.join(Config.EXPORTS_DIR, (inv.date or "undated")[:4])
        try:
            data = renderer.render(document)
        except RenderFailure as e:
            failed += 1
            logger.error("[%d/%d] FAIL  %s  (%s)", i, total, inv.invoice_number, e)
            continue

        os.makedirs(out_dir, exist_ok=True)
        path = os.path.join(out_dir, pdf_filename(document))
        with open(path, "wb") as f:
            f.write(data)
        inv.pdf_path = os.path.abspath(path)
        inv.pdf_generated_at = datetime.utcnow()
        session.commit()
        generated += 1
        logger.info("[%d/%d] DONE  %s -> %s", i, total, inv.invoice_number, path)

    return generated, failed


def main(argv=None):
    parser = argparse.ArgumentParser(description="Render invoice PDFs.")
    parser.add_argument("--json", type=str, default="", help="Render one InvoiceDocument JSON file.")
    parser.add_argument("--out", type=str, default="", help="Output path for --json (default: exports dir).")
    parser.add_argument("--year", type=str, default="", help="Only render stored invoices dated in YYYY.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    renderer = InvoiceRenderer()

    if args.json:
        path = render_json_file(renderer, args.json, args.out or None)
        print(f"✅ Wrote {path}")
        return

    target_year = (args.year or "").strip()
    if target_year and not (target_year.isdigit() and len(target_year) == 4):
        raise SystemExit("Year must be 4 digits, e.g. --year 2025")

    engine = make_engine(Config.SQLALCHEMY_DATABASE_URI, echo=Config.SQLALCHEMY_ECHO)
    Base.metadata.create_all(engine)
    SessionLocal = make_session_factory(engine)

    with SessionLocal() as s:
        generated, failed = render_stored_invoices(renderer, s, target_year)

    print("\n✅ PDF rendering complete.")
    print(f"Generated: {generated}")
    print(f"Failed:    {failed}")
    print(f"Exports:   {Config.EXPORTS_DIR}")


if __name__ == "__main__":
    main()
