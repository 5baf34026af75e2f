# services/dashboard_service.py
import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

import pandas as pd

from domain.models import BILL_STATUSES, BillRecord, CustomerInfo, DashboardStats, Ledger, ProductStat

logger = logging.getLogger(__name__)

TOP_PRODUCTS_LIMIT = 5


def record_bill(
        history: List[BillRecord],
        ledger: Ledger,
        customer: CustomerInfo,
        now: Optional[datetime] = None,
        status: str = "completed",
        reference: str = "",
) -> List[BillRecord]:
    """
    Return a new history list with the current bill appended.
    Ids are sequential: "1", "2", ...
    `status` must be one of BILL_STATUSES.
    """
    if status not in BILL_STATUSES:
        raise ValueError(f"Unknown bill status: {status!r}")

    record = BillRecord(
        id=str(len(history) + 1),
        date=now or datetime.now(),
        customer=customer,
        items=ledger.items,
        total_amount=ledger.grand_total,
        status=status,
        reference=reference,
    )
    logger.info("Recorded bill #%s (%d items, total %s)", record.id, len(record.items), record.total_amount)
    return [*history, record]


def calculate_stats(history: List[BillRecord]) -> DashboardStats:
    total_sales = sum((bill.total_amount for bill in history), Decimal("0"))
    total_orders = len(history)
    average = total_sales / total_orders if total_orders else Decimal("0")

    products: Dict[str, Dict] = {}
    for bill in history:
        for item in bill.items:
            key = f"{item.brand_name} - {item.flavor_name}"
            entry = products.setdefault(key, {"quantity": 0, "revenue": Decimal("0")})
            entry["quantity"] += item.quantity
            entry["revenue"] += item.line_total

    # ties keep first-seen order
    ranked = sorted(products.items(), key=lambda kv: kv[1]["revenue"], reverse=True)
    top_products = tuple(
        ProductStat(name=name, quantity=data["quantity"], revenue=data["revenue"])
        for name, data in ranked[:TOP_PRODUCTS_LIMIT]
    )

    return DashboardStats(
        total_sales=total_sales,
        total_orders=total_orders,
        average_order_value=average,
        top_products=top_products,
    )


def filter_history(history: List[BillRecord], term: str) -> List[BillRecord]:
    """Match customer name (case-insensitive), bill id or reference substring."""
    term = (term or "").strip()
    if not term:
        return list(history)
    lowered = term.lower()
    return [
        bill for bill in history
        if lowered in bill.customer.name.lower() or term in bill.id or term in bill.reference
    ]


def history_to_dataframe(history: List[BillRecord]) -> pd.DataFrame:
    rows = [
        {
            "ID": bill.id,
            "Reference": bill.reference or "-",
            "Date": bill.date.strftime("%Y-%m-%d"),
            "Customer": bill.customer.name or "-",
            "Items": len(bill.items),
            "Amount": float(bill.total_amount),
            "Status": bill.status.capitalize(),
        }
        for bill in history
    ]
    return pd.DataFrame(rows, columns=["ID", "Reference", "Date", "Customer", "Items", "Amount", "Status"])


def top_products_to_dataframe(stats: DashboardStats) -> pd.DataFrame:
    rows = [
        {"Product": p.name, "Quantity": p.quantity, "Revenue": float(p.revenue)}
        for p in stats.top_products
    ]
    return pd.DataFrame(rows, columns=["Product", "Quantity", "Revenue"])
