"""
PDF export for invoices.

The renderer receives a fully aggregated invoice payload and a resolved
background design and returns the PDF bytes. The default renderer uses
ReportLab's platypus layout.
"""

import io
import logging
from typing import Callable, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from backend.app.models.enums import PAGE_SIZES, PAYMENT_TERMS_LABELS, PageSize, PaymentTerms, PdfTheme
from backend.app.models.invoice import Invoice
from backend.app.schemas.invoice import InvoiceRead
from backend.app.services.billing import calculate_invoice_totals, format_money, recalculate_line_items
from backend.app.services.designs import BackgroundDesign, resolve_design

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
DARK_BACKGROUND = "#111827"
DARK_TEXT = "#f9fafb"
LIGHT_TEXT = "#111827"

Renderer = Callable[[dict, BackgroundDesign], bytes]


def build_invoice_payload(invoice: Invoice) -> dict:
    """Serialise an invoice with line item amounts and totals recomputed."""
    payload = InvoiceRead.model_validate(invoice).model_dump(mode="json")
    payload["line_items"] = recalculate_line_items(payload["line_items"])
    totals = calculate_invoice_totals(
        payload["daily_work_hours"],
        payload["hourly_rate"],
        payload["line_items"],
        payload["discount_percent"],
        payload["tax_percent"],
    )
    payload.update(totals.as_dict())
    return payload


def _styles(text_color: str, accent_color: str) -> dict:
    sheet = getSampleStyleSheet()
    body = ParagraphStyle("InvoiceBody", parent=sheet["Normal"], fontSize=9, leading=12, textColor=colors.HexColor(text_color))
    return {
        "title": ParagraphStyle(
            "InvoiceTitle", parent=sheet["Heading1"], fontSize=22, textColor=colors.HexColor(accent_color), spaceAfter=6
        ),
        "heading": ParagraphStyle(
            "InvoiceHeading", parent=sheet["Heading3"], fontSize=11, textColor=colors.HexColor(accent_color), spaceBefore=10
        ),
        "body": body,
    }


def _party_block(label: str, party: dict, styles: dict) -> List[Paragraph]:
    lines = [f"<b>{escape(label)}</b>", f"<b>{escape(party.get('name') or '')}</b>"]
    address = ", ".join(
        part for part in (party.get("address"), party.get("city"), party.get("state"), party.get("postal_code")) if part
    )
    for line in (address, party.get("country"), party.get("email"), party.get("phone")):
        if line:
            lines.append(escape(line))
    if party.get("tax_id"):
        lines.append(f"Tax ID: {escape(party['tax_id'])}")
    return [Paragraph(line, styles["body"]) for line in lines]


def _grid(data: list, widths: list, design: BackgroundDesign, text_color: str) -> Table:
    table = Table(data, colWidths=widths, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.HexColor(design.accent_color)),
                ("TEXTCOLOR", (0, 1), (-1, -1), colors.HexColor(text_color)),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
                ("LINEBELOW", (0, 0), (-1, 0), 0.8, colors.HexColor(design.border_color)),
                ("LINEBELOW", (0, 1), (-1, -1), 0.25, colors.HexColor(design.border_color)),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ]
        )
    )
    return table


def render_invoice_pdf(payload: dict, design: BackgroundDesign) -> bytes:
    page_width, page_height = PAGE_SIZES[PageSize(payload["page_size"])]
    page_size = (page_width * mm, page_height * mm)
    dark = payload.get("pdf_theme") == PdfTheme.DARK.value
    background = DARK_BACKGROUND if dark else design.background_color
    text_color = DARK_TEXT if dark else LIGHT_TEXT
    styles = _styles(text_color, design.accent_color)
    currency = payload["currency"]
    content_width = page_size[0] - 30 * mm

    def paint_page(canvas, doc):
        canvas.saveState()
        canvas.setFillColor(colors.HexColor(background))
        canvas.rect(0, 0, page_size[0], page_size[1], stroke=0, fill=1)
        canvas.setStrokeColor(colors.HexColor(design.border_color))
        canvas.setLineWidth(1.5)
        canvas.rect(8 * mm, 8 * mm, page_size[0] - 16 * mm, page_size[1] - 16 * mm, stroke=1, fill=0)
        canvas.restoreState()

    elements = [Paragraph("INVOICE", styles["title"])]
    meta = [
        f"<b>Invoice #:</b> {escape(payload['invoice_number'])}",
        f"<b>Issue date:</b> {payload['issue_date']}",
    ]
    if payload.get("due_date"):
        meta.append(f"<b>Due date:</b> {payload['due_date']}")
    if payload.get("period_start") and payload.get("period_end"):
        meta.append(f"<b>Period:</b> {payload['period_start']} to {payload['period_end']}")
    if payload.get("job_title"):
        meta.append(f"<b>Role:</b> {escape(payload['job_title'])}")
    elements.extend(Paragraph(line, styles["body"]) for line in meta)
    elements.append(Spacer(1, 6 * mm))

    parties = Table(
        [[_party_block("From", payload["from_party"], styles), _party_block("Bill To", payload["to_party"], styles)]],
        colWidths=[content_width / 2, content_width / 2],
    )
    parties.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
    elements.append(parties)

    if payload["total_hours"]:
        elements.append(Paragraph("Work Hours", styles["heading"]))
        rows = [["Description", "Days", "Hours", "Rate", "Amount"]]
        rows.append(
            [
                "Hourly work",
                str(payload["total_days"]),
                f"{payload['total_hours']:g}",
                format_money(payload["hourly_rate"], currency),
                format_money(payload["total_hours"] * payload["hourly_rate"], currency),
            ]
        )
        elements.append(_grid(rows, [content_width * share for share in (0.4, 0.12, 0.12, 0.18, 0.18)], design, text_color))

        if payload.get("show_detailed_hours"):
            detail = [["Date", "Hours", "Notes"]]
            for day in payload["daily_work_hours"]:
                if day["is_workday"] and day["hours"] > 0:
                    detail.append([day["date"], f"{day['hours']:g}", day.get("notes") or ""])
            elements.append(Spacer(1, 3 * mm))
            elements.append(_grid(detail, [content_width * share for share in (0.3, 0.2, 0.5)], design, text_color))

    if payload["line_items"]:
        elements.append(Paragraph("Line Items", styles["heading"]))
        rows = [["Description", "Qty", "Unit Price", "Amount"]]
        for item in payload["line_items"]:
            rows.append(
                [
                    item.get("description") or "",
                    f"{item['quantity']:g}",
                    format_money(item["unit_price"], currency),
                    format_money(item["amount"], currency),
                ]
            )
        elements.append(_grid(rows, [content_width * share for share in (0.5, 0.1, 0.2, 0.2)], design, text_color))

    totals = [["Subtotal", format_money(payload["subtotal"], currency)]]
    if payload["discount_percent"]:
        totals.append([f"Discount ({payload['discount_percent']:g}%)", f"-{format_money(payload['discount_amount'], currency)}"])
    if payload["tax_percent"]:
        totals.append([f"Tax ({payload['tax_percent']:g}%)", format_money(payload["tax_amount"], currency)])
    totals.append(["Total", format_money(payload["total_amount"], currency)])
    totals_table = Table(totals, colWidths=[content_width * 0.8, content_width * 0.2])
    totals_table.setStyle(
        TableStyle(
            [
                ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
                ("TEXTCOLOR", (0, 0), (-1, -1), colors.HexColor(text_color)),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("TEXTCOLOR", (0, -1), (-1, -1), colors.HexColor(design.accent_color)),
                ("LINEABOVE", (0, -1), (-1, -1), 0.8, colors.HexColor(design.border_color)),
            ]
        )
    )
    elements.append(Spacer(1, 4 * mm))
    elements.append(totals_table)

    terms = payload.get("custom_payment_terms") if payload["payment_terms"] == PaymentTerms.CUSTOM.value else None
    elements.append(Spacer(1, 4 * mm))
    elements.append(
        Paragraph(
            f"<b>Payment terms:</b> {escape(terms or PAYMENT_TERMS_LABELS[PaymentTerms(payload['payment_terms'])])}",
            styles["body"],
        )
    )
    bank = payload.get("bank_details") or {}
    bank_lines = [f"{label}: {escape(bank[key])}" for key, label in _BANK_LABELS if bank.get(key)]
    if bank_lines:
        elements.append(Paragraph("Bank Details", styles["heading"]))
        elements.extend(Paragraph(line, styles["body"]) for line in bank_lines)
    for heading, key in (("Notes", "notes"), ("Terms", "terms")):
        if payload.get(key):
            elements.append(Paragraph(heading, styles["heading"]))
            elements.append(Paragraph(escape(payload[key]).replace("\n", "<br/>"), styles["body"]))

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=page_size,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title=f"Invoice {payload['invoice_number']}",
    )
    doc.build(elements, onFirstPage=paint_page, onLaterPages=paint_page)
    return buffer.getvalue()


_BANK_LABELS = (
    ("bank_name", "Bank"),
    ("account_name", "Account name"),
    ("account_number", "Account number"),
    ("routing_number", "Routing number"),
    ("swift_code", "SWIFT"),
    ("iban", "IBAN"),
    ("branch", "Branch"),
)


def pdf_filename(invoice: Invoice) -> str:
    return f"invoice-{invoice.invoice_number}-{invoice.issue_date}.pdf"


def export_invoice_pdf(invoice: Invoice, renderer: Optional[Renderer] = None) -> bytes:
    payload = build_invoice_payload(invoice)
    design = resolve_design(invoice.background_design_id)
    pdf_bytes = (renderer or render_invoice_pdf)(payload, design)
    logger.info("Rendered PDF for invoice %s (%s bytes)", invoice.id, len(pdf_bytes))
    return pdf_bytes
