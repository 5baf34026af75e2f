"""
Tests for invoice / quantity-summary export.
"""
import io
import re
from datetime import datetime

import pytest
from docx import Document
from docx.oxml.ns import qn

import config
from domain.models import CustomerInfo, Ledger
from services.export_service import (
    INVOICE,
    QUANTITY,
    EmptyBillError,
    build_export_document,
    export_filename,
    generate_reference,
    render_csv,
    render_docx,
)
from utils.barcode import barcode_png

NOW = datetime(2026, 10, 19, 14, 5, 9)


def _all_text(data: bytes) -> str:
    doc = Document(io.BytesIO(data))
    parts = [p.text for p in doc.paragraphs]
    for table in doc.tables:
        for row in table.rows:
            parts.extend(cell.text for cell in row.cells)
    return "\n".join(parts)


class TestEmptyBillGuard:
    def test_invoice(self):
        with pytest.raises(EmptyBillError, match="Add items to the bill before exporting"):
            build_export_document(Ledger(), CustomerInfo(), "en", INVOICE)

    def test_quantity(self):
        with pytest.raises(EmptyBillError):
            build_export_document(Ledger(), CustomerInfo(), "ar", QUANTITY)

    def test_is_value_error(self):
        assert issubclass(EmptyBillError, ValueError)

    def test_csv(self):
        with pytest.raises(EmptyBillError):
            render_csv(Ledger())


class TestFullInvoice:
    def test_header(self, mixed_ledger, customer):
        doc = build_export_document(mixed_ledger, customer, "en", INVOICE, now=NOW, reference="INV-123456")

        assert doc.title == "INVOICE"
        assert doc.date_line == ("Date", "19/10/2026")
        assert doc.reference_line == ("Invoice No.", "INV-123456")
        assert doc.company_lines[0] == config.STORE_NAME
        assert doc.bill_to_label == "Bill To"
        assert doc.footer == "This invoice was generated on 19/10/2026, 14:05:09"
        assert not doc.rtl

    def test_random_reference(self, mixed_ledger, customer):
        doc = build_export_document(mixed_ledger, customer, "en", INVOICE)

        assert re.fullmatch(r"INV-[1-9]\d{5}", doc.reference)

    def test_one_table_per_brand(self, mixed_ledger, customer):
        doc = build_export_document(mixed_ledger, customer, "en", INVOICE, now=NOW)

        assert [s.brand_name for s in doc.sections] == ["ELFBAR", "SIERRA"]
        elfbar = doc.sections[0]
        assert elfbar.headers == ["Flavor", "Variant", "Quantity", "Price", "Total"]
        assert elfbar.rows[0] == ["BC10000", "Apple Ice 5%", "3", "$10.00", "$30.00"]
        assert elfbar.rows[1] == ["Ice King", "Mixed Berry 5%", "1", "$12.50", "$12.50"]
        assert (elfbar.footer_label, elfbar.footer_value) == ("Subtotal (ELFBAR)", "$42.50")

    def test_totals_with_zero_tax(self, mixed_ledger, customer):
        doc = build_export_document(mixed_ledger, customer, "en", INVOICE, now=NOW)

        assert doc.totals == [
            ("Subtotal", "$52.50"),
            ("Tax", "$0.00"),
            ("Total Amount", "$52.50"),
        ]

    def test_customer_block(self, mixed_ledger, customer):
        doc = build_export_document(mixed_ledger, customer, "en", INVOICE, now=NOW)

        assert doc.customer_lines == ["Ahmed Ali", "Address: Sharjah, UAE", "Phone: +971501234567"]

    def test_customer_fallbacks(self, mixed_ledger):
        doc = build_export_document(mixed_ledger, CustomerInfo(), "en", INVOICE, now=NOW)

        assert doc.customer_lines == ["Customer", "Address: N/A", "Phone: N/A"]


class TestQuantityOnly:
    def test_layout(self, mixed_ledger, customer):
        doc = build_export_document(mixed_ledger, customer, "en", QUANTITY, now=NOW, reference="QTY-654321")

        assert doc.title == "QUANTITY SUMMARY"
        assert doc.reference_line == ("Reference No.", "QTY-654321")
        elfbar = doc.sections[0]
        assert elfbar.headers == ["Flavor", "Variant", "Quantity"]
        assert elfbar.caption == "Total Quantity: 4"
        assert (elfbar.footer_label, elfbar.footer_value) == ("Brand Total Quantity", "4")
        assert doc.totals == [("Total Items", "3"), ("Total Quantity", "6")]
        assert doc.footer.startswith("This quantity summary was generated on")

    def test_no_prices(self, mixed_ledger, customer):
        doc = build_export_document(mixed_ledger, customer, "en", QUANTITY, now=NOW)

        for section in doc.sections:
            assert all(len(row) == 3 for row in section.rows)
            assert not any("$" in cell for row in section.rows for cell in row)

    def test_random_reference(self, mixed_ledger, customer):
        doc = build_export_document(mixed_ledger, customer, "en", QUANTITY)

        assert re.fullmatch(r"QTY-[1-9]\d{5}", doc.reference)


class TestArabic:
    def test_labels_and_direction(self, mixed_ledger):
        doc = build_export_document(mixed_ledger, CustomerInfo(), "ar", INVOICE, now=NOW)

        assert doc.rtl
        assert doc.title == "فاتورة"
        assert doc.date_line == ("التاريخ", "١٩/١٠/٢٠٢٦")
        assert doc.customer_lines[0] == "العميل"
        assert doc.sections[0].headers[0] == "النكهة"

    def test_numbers_unchanged(self, mixed_ledger):
        en = build_export_document(mixed_ledger, CustomerInfo(), "en", INVOICE, now=NOW)
        ar = build_export_document(mixed_ledger, CustomerInfo(), "ar", INVOICE, now=NOW)

        assert [v for _, v in en.totals] == [v for _, v in ar.totals]


class TestInvalidInput:
    def test_unknown_kind(self, mixed_ledger):
        with pytest.raises(ValueError, match="Unknown export kind"):
            build_export_document(mixed_ledger, CustomerInfo(), "en", "receipt")

    def test_unknown_language(self, mixed_ledger):
        with pytest.raises(ValueError, match="Unsupported language"):
            build_export_document(mixed_ledger, CustomerInfo(), "fr", INVOICE)


class TestRenderDocx:
    def test_invoice_docx(self, mixed_ledger, customer):
        doc = build_export_document(mixed_ledger, customer, "en", INVOICE, now=NOW, reference="INV-123456")
        data = render_docx(doc, with_barcode=False)

        parsed = Document(io.BytesIO(data))
        assert len(parsed.tables) == 2
        # header + 2 lines + subtotal row
        assert len(parsed.tables[0].rows) == 4

        text = _all_text(data)
        assert "INVOICE" in text
        assert "Invoice No.: INV-123456" in text
        assert "Subtotal (ELFBAR)" in text
        assert "Total Amount: $52.50" in text
        assert "Ahmed Ali" in text

    def test_quantity_docx_arabic(self, mixed_ledger):
        doc = build_export_document(mixed_ledger, CustomerInfo(), "ar", QUANTITY, now=NOW)
        data = render_docx(doc, with_barcode=False)
        text = _all_text(data)

        assert "ملخص الكميات" in text
        assert "$" not in text

        parsed = Document(io.BytesIO(data))
        paragraphs = [p for p in parsed.paragraphs if p.text]
        assert all(p._p.pPr.find(qn("w:bidi")) is not None for p in paragraphs)
        assert all(run.font.rtl for p in paragraphs for run in p.runs)
        assert len(parsed.tables) == 2
        for table in parsed.tables:
            assert table._tbl.tblPr.find(qn("w:bidiVisual")) is not None
            assert all(run.font.rtl for p in table.rows[0].cells[0].paragraphs for run in p.runs)

    def test_english_docx_is_left_to_right(self, mixed_ledger, customer):
        doc = build_export_document(mixed_ledger, customer, "en", INVOICE, now=NOW)
        parsed = Document(io.BytesIO(render_docx(doc, with_barcode=False)))

        assert not any(run.font.rtl for p in parsed.paragraphs for run in p.runs)
        assert all(t._tbl.tblPr.find(qn("w:bidiVisual")) is None for t in parsed.tables)

    def test_barcode(self, mixed_ledger, customer, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        doc = build_export_document(mixed_ledger, customer, "en", INVOICE, now=NOW, reference="INV-222333")

        parsed = Document(io.BytesIO(render_docx(doc, with_barcode=True)))

        assert len(parsed.inline_shapes) == 1

    def test_repeated_exports_leave_no_files(self, mixed_ledger, customer, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        before = set(config.BASE_DIR.rglob("*.png"))

        for _ in range(5):
            doc = build_export_document(mixed_ledger, customer, "en", INVOICE, now=NOW)
            render_docx(doc, with_barcode=True)

        assert list(tmp_path.iterdir()) == []
        assert set(config.BASE_DIR.rglob("*.png")) == before


class TestHelpers:
    def test_filenames(self):
        assert export_filename(INVOICE, NOW) == "Vape_Invoice_19-10-2026.docx"
        assert export_filename(QUANTITY, NOW) == "Vape_Quantity_19-10-2026.docx"
        assert export_filename(INVOICE, NOW, ext="csv") == "Vape_Invoice_19-10-2026.csv"

    def test_reference_range(self):
        for _ in range(50):
            number = int(generate_reference(INVOICE).split("-")[1])
            assert 100000 <= number <= 999999

    def test_csv(self, mixed_ledger):
        lines = render_csv(mixed_ledger).decode("utf-8").splitlines()

        assert lines[0] == "Brand,Flavor,Variant,Quantity,Unit Price,Total"
        assert lines[1] == "ELFBAR,BC10000,Apple Ice 5%,3,10.0,30.0"
        assert len(lines) == 4

    def test_barcode_png_in_memory(self):
        stream = barcode_png("INV-123456")

        assert stream.read(8) == b"\x89PNG\r\n\x1a\n"

    def test_barcode_png_rejects_empty(self):
        with pytest.raises(ValueError):
            barcode_png("")
