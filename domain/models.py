# domain/models.py

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Variant:
    """
    A purchasable option of a flavor (e.g. nicotine strength).
    `quantity` and `price` are the defaults pre-filled in the billing form.
    """
    id: str
    name: str
    quantity: int = 0
    price: Decimal = Decimal("0")


@dataclass(frozen=True)
class Flavor:
    id: str
    name: str
    image: str
    variants: Tuple[Variant, ...] = ()


@dataclass(frozen=True)
class Brand:
    id: str
    name: str
    image: str
    flavors: Tuple[Flavor, ...] = ()


# ---------------------------------------------------------------------------
# Billing ledger
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LineItem:
    """
    One row of the bill. Identity is (flavor_id, variant_id).
    """
    flavor_id: str
    flavor_name: str
    variant_id: str
    variant_name: str
    quantity: int
    unit_price: Decimal
    brand_id: str
    brand_name: str
    brand_image: str

    @property
    def key(self) -> Tuple[str, str]:
        return self.flavor_id, self.variant_id

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Ledger:
    """
    Ordered line items (insertion order) of the current bill.
    """
    items: Tuple[LineItem, ...] = ()

    @property
    def grand_total(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class BrandGroup:
    brand_id: str
    brand_name: str
    brand_image: str
    items: List[LineItem] = field(default_factory=list)
    subtotal: Decimal = Decimal("0")

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)


@dataclass(frozen=True)
class CustomerInfo:
    name: str = ""
    address: str = ""
    phone: str = ""


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

@dataclass
class ExportSection:
    """
    One brand table in an exported document.
    """
    brand_name: str
    brand_image: str
    caption: Optional[str]  # e.g. "Total Quantity: 7" on quantity-only exports
    headers: List[str]
    rows: List[List[str]]
    footer_label: str  # e.g. "Subtotal (ELFBAR)"
    footer_value: str
    numeric_columns: Tuple[int, ...]  # right-aligned column indexes


@dataclass
class ExportDocument:
    """
    A locale-resolved snapshot of the bill, ready to be rendered.
    """
    kind: str  # "invoice" | "quantity"
    language: str
    rtl: bool
    title: str
    date_line: Tuple[str, str]
    reference_line: Tuple[str, str]
    reference: str
    company_lines: List[str]
    bill_to_label: str
    customer_lines: List[str]
    sections: List[ExportSection]
    totals: List[Tuple[str, str]]  # last entry is the emphasised total
    footer: str


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

BILL_STATUSES = ("completed", "pending", "cancelled")


@dataclass(frozen=True)
class BillRecord:
    id: str
    date: datetime
    customer: CustomerInfo
    items: Tuple[LineItem, ...]
    total_amount: Decimal
    status: str = "completed"
    reference: str = ""  # invoice number, e.g. "INV-483920"


@dataclass(frozen=True)
class ProductStat:
    name: str  # "<brand> - <flavor>"
    quantity: int
    revenue: Decimal


@dataclass(frozen=True)
class DashboardStats:
    total_sales: Decimal
    total_orders: int
    average_order_value: Decimal
    top_products: Tuple[ProductStat, ...]
