# config.py
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env if present
load_dotenv()

BASE_DIR = Path(__file__).resolve().parent

class Config:
    # Flask
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-change-me")

    # Invoice store read by the PDF routes and the render CLI (SQLite by default)
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        f"sqlite:///{(BASE_DIR / 'instance' / 'invoices.db').as_posix()}"
    )
    SQLALCHEMY_ECHO = os.getenv("SQLALCHEMY_ECHO", "0") == "1"

    # Rendered PDFs written by the CLI
    EXPORTS_DIR = os.getenv("EXPORTS_DIR", (BASE_DIR / "exports").as_posix())

    APP_BASE_URL = os.getenv("APP_BASE_URL", "http://127.0.0.1:5000")

    # Footer / metadata branding
    BRAND_NAME = os.getenv("BRAND_NAME", "SmartInvoice")
    BRAND_TAGLINE = os.getenv("BRAND_TAGLINE", "Professional Invoice Management")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Byte-stable reportlab output (no creation date / random document id)
    PDF_INVARIANT = os.getenv("PDF_INVARIANT", "0") == "1"
