from datetime import datetime

import pytest


@pytest.fixture
def generated_at():
    return datetime(2025, 3, 5, 14, 7)


@pytest.fixture
def invoice_payload():
    return {
        "invoiceNumber": "INV-2025-001",
        "date": "2025-03-01",
        "dueDate": "2025-03-31",
        "client": {
            "name": "Globex Corporation",
            "email": "billing@globex.example",
            "company": "Globex",
            "address": "42 Main Street\nSpringfield",
            "gstNumber": "22AAAAA0000A1Z5",
            "currency": "$",
        },
        "company": {
            "name": "Acme Studio",
            "email": "hello@acme.example",
            "phone": "+1 555 0100",
            "website": "acme.example",
        },
        "items": [
            {"description": "Consulting Services", "quantity": 10, "rate": 150, "amount": 1500},
        ],
        "subtotal": 1500,
        "discountRate": 10,
        "discountAmount": 150,
        "taxRate": 18,
        "taxAmount": 243,
        "amount": 1593,
        "status": "DUE",
        "theme": "professional",
        "notes": "Thank you for your business.",
        "terms": "Payment due within 30 days.",
        "paymentLink": "https://pay.example/inv-2025-001",
    }
