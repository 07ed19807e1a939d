# invoice_document.py
"""
The renderer's input contract.

Upstream (database layer, preview API) hands over a JSON-shaped mapping that
has already had subtotal/tax/discount/amount computed. Everything here only
normalizes shape; no money is recalculated.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Optional

from errors import InputNormalizationWarning
from themes import ColorOverride, Theme

logger = logging.getLogger(__name__)


def _to_float(value, default=0.0) -> float:
    try:
        if value is None or (isinstance(value, str) and not value.strip()):
            return float(default)
        return float(value)
    except (TypeError, ValueError):
        return float(default)


def _opt_str(value) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _first(data: dict, *keys):
    for k in keys:
        if k in data and data[k] is not None:
            return data[k]
    return None


@dataclass(frozen=True)
class ItemRow:
    description: str
    quantity: float
    rate: float
    amount: float

    @classmethod
    def from_mapping(cls, data: dict) -> "ItemRow":
        return cls(
            description=str(data.get("description") or ""),
            quantity=_to_float(data.get("quantity")),
            rate=_to_float(data.get("rate")),
            amount=_to_float(data.get("amount")),
        )


@dataclass(frozen=True)
class ClientInfo:
    name: str = ""
    email: str = ""
    address: str = ""
    currency: str = ""
    company: Optional[str] = None
    gst_number: Optional[str] = None


@dataclass(frozen=True)
class CompanyInfo:
    name: str = ""
    address: Optional[str] = None
    gst: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None


def _parse_items_json(raw: str) -> list:
    try:
        parsed = json.loads(raw) if raw.strip() else []
    except ValueError as e:
        raise InputNormalizationWarning(f"items is not valid JSON: {e}") from e
    if not isinstance(parsed, list):
        raise InputNormalizationWarning(f"items JSON is a {type(parsed).__name__}, expected a list")
    return parsed


def normalize_items(raw) -> tuple[ItemRow, ...]:
    """
    Items arrive either as a JSON-encoded string (database column) or as a
    native list. Returns a tuple of ItemRow; malformed input degrades to ().
    """
    if raw is None:
        return ()

    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")

    if isinstance(raw, str):
        try:
            raw = _parse_items_json(raw)
        except InputNormalizationWarning as w:
            logger.warning("%s: %s; rendering an empty items table", type(w).__name__, w)
            return ()

    if not isinstance(raw, (list, tuple)):
        logger.warning(
            "InputNormalizationWarning: items is a %s; rendering an empty items table",
            type(raw).__name__,
        )
        return ()

    rows = []
    for idx, entry in enumerate(raw):
        if isinstance(entry, ItemRow):
            rows.append(entry)
        elif isinstance(entry, dict):
            rows.append(ItemRow.from_mapping(entry))
        else:
            logger.warning("InputNormalizationWarning: skipping item %d (%s)", idx, type(entry).__name__)
    return tuple(rows)


@dataclass(frozen=True)
class InvoiceDocument:
    invoice_number: str
    date: Optional[str] = None
    due_date: Optional[str] = None
    client: ClientInfo = field(default_factory=ClientInfo)
    company: CompanyInfo = field(default_factory=CompanyInfo)
    items: tuple[ItemRow, ...] = ()

    subtotal: float = 0.0
    tax_amount: float = 0.0
    discount_amount: float = 0.0
    amount: float = 0.0
    tax_rate: float = 0.0
    discount_rate: float = 0.0

    status: Optional[str] = None
    theme: str = Theme.PROFESSIONAL.value
    custom_colors: Optional[ColorOverride] = None

    notes: Optional[str] = None
    terms: Optional[str] = None
    payment_link: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: dict) -> "InvoiceDocument":
        """
        Build from the JSON-shaped payload. Accepts nested `client`/`company`
        objects as well as the flat clientName/companyName style keys.
        """
        data = dict(data or {})
        client_in = data.get("client") if isinstance(data.get("client"), dict) else {}
        company_in = data.get("company") if isinstance(data.get("company"), dict) else {}

        client = ClientInfo(
            name=str(_first(client_in, "name") or _first(data, "clientName") or ""),
            email=str(_first(client_in, "email") or _first(data, "clientEmail") or ""),
            address=str(_first(client_in, "address") or _first(data, "clientAddress") or ""),
            currency=str(_first(client_in, "currency") or _first(data, "clientCurrency", "currency") or ""),
            company=_opt_str(_first(client_in, "company") or _first(data, "clientCompany")),
            gst_number=_opt_str(_first(client_in, "gstNumber", "gst") or _first(data, "clientGST")),
        )
        company = CompanyInfo(
            name=str(_first(company_in, "name") or _first(data, "companyName") or ""),
            address=_opt_str(_first(company_in, "address") or _first(data, "companyAddress")),
            gst=_opt_str(_first(company_in, "gst", "gstNumber") or _first(data, "companyGST")),
            email=_opt_str(_first(company_in, "email") or _first(data, "companyEmail")),
            phone=_opt_str(_first(company_in, "phone") or _first(data, "companyPhone")),
            website=_opt_str(_first(company_in, "website") or _first(data, "companyWebsite")),
        )

        theme = _first(data, "theme")
        return cls(
            invoice_number=str(_first(data, "invoiceNumber", "invoice_number") or ""),
            date=_opt_str(_first(data, "date")),
            due_date=_opt_str(_first(data, "dueDate", "due_date")),
            client=client,
            company=company,
            items=normalize_items(data.get("items")),
            subtotal=_to_float(_first(data, "subtotal")),
            tax_amount=_to_float(_first(data, "taxAmount", "tax_amount")),
            discount_amount=_to_float(_first(data, "discountAmount", "discount_amount")),
            amount=_to_float(_first(data, "amount")),
            tax_rate=_to_float(_first(data, "taxRate", "tax_rate")),
            discount_rate=_to_float(_first(data, "discountRate", "discount_rate")),
            status=_opt_str(_first(data, "status", "invoiceStatus")),
            theme=Theme.parse(theme).value if theme is not None else Theme.PROFESSIONAL.value,
            custom_colors=ColorOverride.from_mapping(_first(data, "customColors", "custom_colors")),
            notes=_opt_str(_first(data, "notes")),
            terms=_opt_str(_first(data, "terms")),
            payment_link=_opt_str(_first(data, "paymentLink", "payment_link")),
        )


def coerce_document(document) -> InvoiceDocument:
    if isinstance(document, InvoiceDocument):
        return document
    if isinstance(document, dict):
        return InvoiceDocument.from_mapping(document)
    raise TypeError(f"Cannot render {type(document).__name__}; expected InvoiceDocument or dict")
