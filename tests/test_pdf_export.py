import pytest

from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.models.invoice import Invoice
from backend.app.models.user import User
from backend.app.services.designs import DEFAULT_DESIGN_ID, list_designs, resolve_design
from backend.app.services.pdf_export import build_invoice_payload, export_invoice_pdf, pdf_filename


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def _create_invoice(db, **values):
    user = User(email="pdf@example.com", hashed_password="x", is_active=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    invoice = Invoice(
        owner_id=user.id,
        invoice_number="INV-010",
        issue_date="2024-03-20",
        from_party={"name": "Me"},
        to_party={"name": "Acme"},
        hourly_rate=10,
        daily_work_hours=[{"date": "2024-03-04", "hours": 8, "is_workday": True}],
        line_items=[{"id": "a", "description": "Extra", "quantity": 2, "unit_price": 5, "amount": 0}],
        status_history=[],
        tags=[],
        **values,
    )
    db.add(invoice)
    db.commit()
    db.refresh(invoice)
    return invoice


def test_payload_recomputes_totals_without_touching_the_row():
    with SessionLocal() as db:
        invoice = _create_invoice(db, total_amount=1)
        payload = build_invoice_payload(invoice)
        assert payload["total_hours"] == 8
        assert payload["line_items"][0]["amount"] == 10
        assert payload["total_amount"] == 90
        assert invoice.total_amount == 1


def test_export_passes_payload_and_design_to_renderer():
    calls = []

    def renderer(payload, design):
        calls.append((payload, design))
        return b"%PDF-fake"

    with SessionLocal() as db:
        invoice = _create_invoice(db, background_design_id="modern")
        assert export_invoice_pdf(invoice, renderer=renderer) == b"%PDF-fake"
        assert pdf_filename(invoice) == "invoice-INV-010-2024-03-20.pdf"

    payload, design = calls[0]
    assert payload["invoice_number"] == "INV-010"
    assert design.id == "modern"


def test_default_renderer_produces_a_pdf():
    with SessionLocal() as db:
        invoice = _create_invoice(db, page_size="A5", discount_percent=5, tax_percent=12)
        content = export_invoice_pdf(invoice)
    assert content.startswith(b"%PDF")


def test_unknown_design_falls_back_to_default():
    assert resolve_design("nope").id == DEFAULT_DESIGN_ID
    assert resolve_design(None).id == DEFAULT_DESIGN_ID
    assert DEFAULT_DESIGN_ID in {design.id for design in list_designs()}
