# models.py
from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    create_engine,
    String,
    Integer,
    Float,
    Text,
    DateTime,
    ForeignKey,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
    sessionmaker,
)

logger = logging.getLogger(__name__)


# -----------------------------
# SQLAlchemy base
# -----------------------------
class Base(DeclarativeBase):
    pass


# -----------------------------
# Tables
# -----------------------------
class User(Base):
    """Account owner; its business profile is the company block on the PDF."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(80), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    company_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    company_email: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    company_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    company_website: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    company_address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    company_gst: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    def company_profile(self) -> dict:
        return {
            "name": self.company_name or self.username,
            "address": self.company_address,
            "gst": self.company_gst,
            "email": self.company_email,
            "phone": self.company_phone,
            "website": self.company_website,
        }


class Client(Base):
    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    company: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    address: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    gst_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    # Printed verbatim in front of every amount ("$", "₹", "EUR ")
    currency: Mapped[str] = mapped_column(String(16), nullable=False, default="$")

    invoices: Mapped[list["Invoice"]] = relationship(back_populates="client")


class Invoice(Base):
    """
    Stored invoice. Money fields are computed when the invoice is saved;
    the PDF renderer only formats them.
    """
    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id: Mapped[int] = mapped_column(ForeignKey("clients.id"), nullable=False, index=True)

    invoice_number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, index=True)
    date: Mapped[str] = mapped_column(String(32), nullable=False, default="")       # ISO date
    due_date: Mapped[str] = mapped_column(String(32), nullable=False, default="")   # ISO date

    # JSON list of {description, quantity, rate, amount}
    items: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    subtotal: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    tax_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    tax_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    discount_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    discount_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # draft | sent | paid | overdue | pending
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")

    theme: Mapped[str] = mapped_column(String(40), nullable=False, default="professional")
    # JSON {primary, secondary, accent, background} or NULL
    custom_colors: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    terms: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    payment_link: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Last PDF written by the CLI
    pdf_path: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    pdf_generated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    client: Mapped["Client"] = relationship(back_populates="invoices")
    owner: Mapped["User"] = relationship()

    def render_status(self) -> Optional[str]:
        """Badge label for the PDF; drafts get no badge."""
        raw = (self.status or "").strip()
        if not raw or raw.lower() == "draft":
            return None
        return {"paid": "PAID", "sent": "DUE", "overdue": "OVERDUE", "pending": "PENDING"}.get(raw.lower(), raw)

    def custom_colors_dict(self) -> Optional[dict]:
        raw = (self.custom_colors or "").strip()
        if not raw:
            return None
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.warning("Invoice %s has unreadable custom_colors; using theme %s", self.invoice_number, self.theme)
            return None
        return parsed if isinstance(parsed, dict) else None

    def to_document(self) -> dict:
        """JSON-shaped renderer input. `items` stays the raw JSON text."""
        owner = self.owner
        client = self.client
        return {
            "invoiceNumber": self.invoice_number,
            "date": self.date,
            "dueDate": self.due_date,
            "client": {
                "name": client.name if client else "",
                "email": client.email if client else "",
                "company": client.company if client else None,
                "address": client.address if client else "",
                "gstNumber": client.gst_number if client else None,
                "currency": client.currency if client else "",
            },
            "company": owner.company_profile() if owner else {},
            "items": self.items,
            "subtotal": self.subtotal,
            "taxAmount": self.tax_amount,
            "discountAmount": self.discount_amount,
            "amount": self.amount,
            "taxRate": self.tax_rate,
            "discountRate": self.discount_rate,
            "status": self.render_status(),
            "theme": self.theme,
            "customColors": self.custom_colors_dict(),
            "notes": self.notes,
            "terms": self.terms,
            "paymentLink": self.payment_link,
        }


# -----------------------------
# Engine / Session factory
# -----------------------------
def make_engine(db_url: str, echo: bool = False):
    """
    Create SQLAlchemy engine.
    Note: SQLite path must exist (instance/ folder); db_init.py creates it.
    """
    return create_engine(db_url, echo=echo, future=True)


def make_session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
