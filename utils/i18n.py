# utils/i18n.py

from types import MappingProxyType
from typing import Dict, Mapping

RTL_LANGUAGES = {"ar"}

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        "invoice": "INVOICE",
        "quantity_summary": "QUANTITY SUMMARY",
        "date": "Date",
        "invoice_no": "Invoice No.",
        "reference_no": "Reference No.",
        "bill_to": "Bill To",
        "customer": "Customer",
        "address": "Address",
        "phone": "Phone",
        "email": "Email",
        "tel": "Tel",
        "flavor": "Flavor",
        "variant": "Variant",
        "quantity": "Quantity",
        "price": "Price",
        "total": "Total",
        "subtotal": "Subtotal",
        "tax": "Tax",
        "total_amount": "Total Amount",
        "total_items": "Total Items",
        "total_quantity": "Total Quantity",
        "brand_total_quantity": "Brand Total Quantity",
        "generated_on": "This invoice was generated on",
        "quantity_generated_on": "This quantity summary was generated on",
        "not_available": "N/A",
        "empty_bill": "Add items to the bill before exporting",
    },
    "ar": {
        "invoice": "فاتورة",
        "quantity_summary": "ملخص الكميات",
        "date": "التاريخ",
        "invoice_no": "رقم الفاتورة",
        "reference_no": "الرقم المرجعي",
        "bill_to": "فاتورة إلى",
        "customer": "العميل",
        "address": "العنوان",
        "phone": "الهاتف",
        "email": "البريد الإلكتروني",
        "tel": "هاتف",
        "flavor": "النكهة",
        "variant": "النوع",
        "quantity": "الكمية",
        "price": "السعر",
        "total": "المجموع",
        "subtotal": "المجموع الفرعي",
        "tax": "الضريبة",
        "total_amount": "المبلغ الإجمالي",
        "total_items": "إجمالي الأصناف",
        "total_quantity": "إجمالي الكمية",
        "brand_total_quantity": "إجمالي كمية العلامة التجارية",
        "generated_on": "تم إنشاء هذه الفاتورة في",
        "quantity_generated_on": "تم إنشاء ملخص الكميات هذا في",
        "not_available": "غير متوفر",
        "empty_bill": "أضف أصنافًا إلى الفاتورة قبل التصدير",
    },
}

LANGUAGE_NAMES = {"en": "English", "ar": "Arabic"}


def get_labels(language: str) -> Mapping[str, str]:
    """Read-only display strings for `language` ("en" or "ar")."""
    try:
        return MappingProxyType(TRANSLATIONS[language])
    except KeyError:
        raise ValueError(f"Unsupported language: {language!r}") from None


def is_rtl(language: str) -> bool:
    return language in RTL_LANGUAGES
