# services/export_service.py

import io
import logging
import random
from datetime import datetime
from typing import List, Mapping, Optional

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches

import config
from domain.models import CustomerInfo, ExportDocument, ExportSection, Ledger
from services.billing_service import group_by_brand, ledger_to_dataframe, total_quantity
from utils.barcode import barcode_png
from utils.docx_helpers import (
    HEADER_BLUE,
    MUTED_GREY,
    add_summary_row,
    add_table,
    add_text,
    end_alignment,
)
from utils.formatting import format_currency, format_date, format_datetime
from utils.i18n import get_labels, is_rtl

logger = logging.getLogger(__name__)

INVOICE = "invoice"
QUANTITY = "quantity"

EXPORT_KINDS = {
    INVOICE: {"prefix": "INV", "file_stem": "Vape_Invoice"},
    QUANTITY: {"prefix": "QTY", "file_stem": "Vape_Quantity"},
}

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
CSV_MIME = "text/csv"


class EmptyBillError(ValueError):
    """Raised when an export is requested for a bill with no line items."""


def generate_reference(kind: str) -> str:
    """e.g. "INV-483920" / "QTY-104233" """
    prefix = EXPORT_KINDS[kind]["prefix"]
    return f"{prefix}-{random.randint(100000, 999999)}"


def export_filename(kind: str, now: Optional[datetime] = None, ext: str = "docx") -> str:
    now = now or datetime.now()
    return f"{EXPORT_KINDS[kind]['file_stem']}_{now.strftime('%d-%m-%Y')}.{ext}"


def _company_lines(t: Mapping[str, str]) -> List[str]:
    return [
        config.STORE_NAME,
        config.STORE_ADDRESS,
        f"{t['tel']}: {config.STORE_PHONE}",
        f"{t['email']}: {config.STORE_EMAIL}",
    ]


def _customer_lines(customer: CustomerInfo, t: Mapping[str, str]) -> List[str]:
    na = t["not_available"]
    return [
        customer.name or t["customer"],
        f"{t['address']}: {customer.address or na}",
        f"{t['phone']}: {customer.phone or na}",
    ]


def _invoice_sections(ledger: Ledger, t: Mapping[str, str]) -> List[ExportSection]:
    sections = []
    for group in group_by_brand(ledger):
        rows = [
            [
                item.flavor_name,
                item.variant_name,
                str(item.quantity),
                format_currency(item.unit_price),
                format_currency(item.line_total),
            ]
            for item in group.items
        ]
        sections.append(
            ExportSection(
                brand_name=group.brand_name,
                brand_image=group.brand_image,
                caption=None,
                headers=[t["flavor"], t["variant"], t["quantity"], t["price"], t["total"]],
                rows=rows,
                footer_label=f"{t['subtotal']} ({group.brand_name})",
                footer_value=format_currency(group.subtotal),
                numeric_columns=(2, 3, 4),
            )
        )
    return sections


def _quantity_sections(ledger: Ledger, t: Mapping[str, str]) -> List[ExportSection]:
    sections = []
    for group in group_by_brand(ledger):
        rows = [
            [item.flavor_name, item.variant_name, str(item.quantity)]
            for item in group.items
        ]
        sections.append(
            ExportSection(
                brand_name=group.brand_name,
                brand_image=group.brand_image,
                caption=f"{t['total_quantity']}: {group.total_quantity}",
                headers=[t["flavor"], t["variant"], t["quantity"]],
                rows=rows,
                footer_label=t["brand_total_quantity"],
                footer_value=str(group.total_quantity),
                numeric_columns=(2,),
            )
        )
    return sections


def build_export_document(
        ledger: Ledger,
        customer: CustomerInfo,
        language: str,
        kind: str = INVOICE,
        now: Optional[datetime] = None,
        reference: Optional[str] = None,
) -> ExportDocument:
    """
    Snapshot the bill into a render-ready document.

    kind "invoice": price/total columns, brand subtotals, tax fixed at 0.00.
    kind "quantity": quantities only, brand and overall quantity totals.

    Raises EmptyBillError when the ledger has no items.
    """
    if kind not in EXPORT_KINDS:
        raise ValueError(f"Unknown export kind: {kind!r}")

    t = get_labels(language)
    if not ledger.items:
        raise EmptyBillError(t["empty_bill"])

    now = now or datetime.now()
    reference = reference or generate_reference(kind)

    if kind == INVOICE:
        title = t["invoice"]
        reference_label = t["invoice_no"]
        sections = _invoice_sections(ledger, t)
        totals = [
            (t["subtotal"], format_currency(ledger.grand_total)),
            (t["tax"], format_currency(0)),
            (t["total_amount"], format_currency(ledger.grand_total)),
        ]
        footer = f"{t['generated_on']} {format_datetime(now, language)}"
    else:
        title = t["quantity_summary"]
        reference_label = t["reference_no"]
        sections = _quantity_sections(ledger, t)
        totals = [
            (t["total_items"], str(len(ledger.items))),
            (t["total_quantity"], str(total_quantity(ledger))),
        ]
        footer = f"{t['quantity_generated_on']} {format_datetime(now, language)}"

    return ExportDocument(
        kind=kind,
        language=language,
        rtl=is_rtl(language),
        title=title,
        date_line=(t["date"], format_date(now, language)),
        reference_line=(reference_label, reference),
        reference=reference,
        company_lines=_company_lines(t),
        bill_to_label=t["bill_to"],
        customer_lines=_customer_lines(customer, t),
        sections=sections,
        totals=totals,
        footer=footer,
    )


def render_docx(document: ExportDocument, with_barcode: Optional[bool] = None) -> bytes:
    """
    Render an ExportDocument to .docx bytes.
    """
    with_barcode = config.EXPORT_BARCODE if with_barcode is None else with_barcode
    rtl = document.rtl
    doc = Document()

    # Header
    add_text(doc, document.title, rtl=rtl, bold=True, size=22, color=HEADER_BLUE)
    add_text(doc, f"{document.date_line[0]}: {document.date_line[1]}", rtl=rtl)
    add_text(doc, f"{document.reference_line[0]}: {document.reference_line[1]}", rtl=rtl)
    if with_barcode:
        doc.add_picture(barcode_png(document.reference), width=Inches(2))

    # Company + customer
    company_name, *company_rest = document.company_lines
    add_text(doc, company_name, rtl=rtl, bold=True, size=13)
    for line in company_rest:
        add_text(doc, line, rtl=rtl, size=9, color=MUTED_GREY)

    add_text(doc, f"{document.bill_to_label}:", rtl=rtl, bold=True, size=13)
    for line in document.customer_lines:
        add_text(doc, line, rtl=rtl, size=9, color=MUTED_GREY)

    # One table per brand
    for section in document.sections:
        add_text(doc, section.brand_name, rtl=rtl, bold=True, size=15, color=HEADER_BLUE)
        if section.caption:
            add_text(doc, section.caption, rtl=rtl, size=9, color=MUTED_GREY)
        table = add_table(
            doc,
            section.headers,
            section.rows,
            numeric_columns=section.numeric_columns,
            rtl=rtl,
        )
        add_summary_row(table, section.footer_label, section.footer_value, rtl=rtl)

    # Totals block
    for idx, (label, value) in enumerate(document.totals):
        last = idx == len(document.totals) - 1
        add_text(
            doc,
            f"{label}: {value}",
            rtl=rtl,
            bold=last,
            size=14 if last else None,
            color=HEADER_BLUE if last else None,
            align=end_alignment(rtl),
        )

    add_text(doc, document.footer, rtl=rtl, size=8, color=MUTED_GREY, align=WD_ALIGN_PARAGRAPH.CENTER)

    buf = io.BytesIO()
    doc.save(buf)
    logger.info(
        "Rendered %s %s (%d brand tables)",
        document.kind,
        document.reference,
        len(document.sections),
    )
    return buf.getvalue()


def render_csv(ledger: Ledger) -> bytes:
    if not ledger.items:
        raise EmptyBillError(get_labels(config.DEFAULT_LANGUAGE)["empty_bill"])
    return ledger_to_dataframe(ledger).to_csv(index=False).encode("utf-8")
