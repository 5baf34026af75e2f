# services/billing_service.py
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

import pandas as pd

from domain.models import Brand, BrandGroup, Ledger, LineItem
from services.catalog_service import find_flavor, find_variant

logger = logging.getLogger(__name__)

LEDGER_COLUMNS = ["Brand", "Flavor", "Variant", "Quantity", "Unit Price", "Total"]


def _to_decimal(value) -> Decimal:
    try:
        dec = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")
    # NaN / Infinity never make a valid price
    return dec if dec.is_finite() else Decimal("0")


def _to_quantity(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        # NaN and +-Infinity fall through here too
        return 0


def upsert_line(
        ledger: Ledger,
        brand: Optional[Brand],
        flavor_id: str,
        variant_id: str,
        quantity: int,
        unit_price,
) -> Ledger:
    """
    Insert, replace or remove the line keyed by (flavor_id, variant_id).

    - quantity > 0 and unit_price > 0: a new line is appended, an existing
      line is replaced in place.
    - otherwise the line is removed (no-op when absent).

    `brand` is the currently active brand; unknown flavor/variant returns the
    ledger unchanged.
    """
    flavor = find_flavor(brand, flavor_id)
    variant = find_variant(flavor, variant_id)
    if variant is None:
        logger.debug("Ignoring update for unknown %s/%s", flavor_id, variant_id)
        return ledger

    qty = _to_quantity(quantity)
    price = _to_decimal(unit_price)

    if qty <= 0 or price <= 0:
        return delete_line(ledger, flavor_id, variant_id)

    line = LineItem(
        flavor_id=flavor.id,
        flavor_name=flavor.name,
        variant_id=variant.id,
        variant_name=variant.name,
        quantity=qty,
        unit_price=price,
        brand_id=brand.id,
        brand_name=brand.name,
        brand_image=brand.image,
    )

    items = list(ledger.items)
    idx = next((i for i, item in enumerate(items) if item.key == line.key), None)
    if idx is None:
        items.append(line)
    else:
        items[idx] = line

    logger.debug("Line %s/%s set to %d x %s", flavor_id, variant_id, qty, price)
    return Ledger(items=tuple(items))


def delete_line(ledger: Ledger, flavor_id: str, variant_id: str) -> Ledger:
    items = tuple(item for item in ledger.items if item.key != (flavor_id, variant_id))
    if len(items) == len(ledger.items):
        return ledger

    logger.debug("Removed line %s/%s", flavor_id, variant_id)
    return Ledger(items=items)


def group_by_brand(ledger: Ledger) -> List[BrandGroup]:
    """
    One group per brand, in order of first appearance in the ledger.
    """
    groups: Dict[str, BrandGroup] = {}
    for item in ledger.items:
        group = groups.get(item.brand_id)
        if group is None:
            group = BrandGroup(
                brand_id=item.brand_id,
                brand_name=item.brand_name,
                brand_image=item.brand_image,
            )
            groups[item.brand_id] = group
        group.items.append(item)
        group.subtotal += item.line_total

    return list(groups.values())


def total_quantity(ledger: Ledger) -> int:
    return sum(item.quantity for item in ledger.items)


def ledger_to_dataframe(ledger: Ledger) -> pd.DataFrame:
    """Line items as a DataFrame, money columns as floats."""
    rows = [
        {
            "Brand": item.brand_name,
            "Flavor": item.flavor_name,
            "Variant": item.variant_name,
            "Quantity": item.quantity,
            "Unit Price": float(item.unit_price),
            "Total": float(item.line_total),
        }
        for item in ledger.items
    ]
    return pd.DataFrame(rows, columns=LEDGER_COLUMNS)
