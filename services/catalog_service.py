# services/catalog_service.py
import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, List, Optional

import config
from domain.models import Brand, Flavor, Variant

logger = logging.getLogger(__name__)


def _to_decimal(value, default: Decimal) -> Decimal:
    if value in (None, ""):
        return default
    try:
        dec = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default
    return dec if dec.is_finite() else default


def _to_int(value, default: int) -> int:
    if value in (None, ""):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _require(entry: Dict, key: str, kind: str) -> str:
    val = entry.get(key)
    if val in (None, ""):
        raise ValueError(f"{kind} entry is missing '{key}': {entry!r}")
    return str(val)


def _parse_variant(entry: Dict) -> Variant:
    return Variant(
        id=_require(entry, "id", "Variant"),
        name=_require(entry, "name", "Variant"),
        quantity=max(0, _to_int(entry.get("quantity"), default=0)),
        price=max(Decimal("0"), _to_decimal(entry.get("price"), default=Decimal("0"))),
    )


def _parse_flavor(entry: Dict) -> Flavor:
    return Flavor(
        id=_require(entry, "id", "Flavor"),
        name=_require(entry, "name", "Flavor"),
        image=str(entry.get("image") or ""),
        variants=tuple(_parse_variant(v) for v in entry.get("variants", [])),
    )


def parse_catalog(data: Dict) -> List[Brand]:
    """
    Build Brand objects from the raw catalog structure:

      {"brands": [{"id", "name", "image", "flavors": [
          {"id", "name", "image", "variants": [
              {"id", "name", "quantity", "price"}]}]}]}
    """
    brands: List[Brand] = []
    for entry in data.get("brands", []):
        brands.append(
            Brand(
                id=_require(entry, "id", "Brand"),
                name=_require(entry, "name", "Brand"),
                image=str(entry.get("image") or ""),
                flavors=tuple(_parse_flavor(f) for f in entry.get("flavors", [])),
            )
        )
    return brands


def load_catalog(path: Path | str = None) -> List[Brand]:
    """Read the catalog JSON file. Raises FileNotFoundError / ValueError."""
    path = Path(path) if path else config.CATALOG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    brands = parse_catalog(data)
    logger.info("Loaded %d brands from %s", len(brands), path)
    return brands


def find_brand(brands: List[Brand], brand_id: Optional[str]) -> Optional[Brand]:
    return next((b for b in brands if b.id == brand_id), None)


def find_flavor(brand: Optional[Brand], flavor_id: str) -> Optional[Flavor]:
    if brand is None:
        return None
    return next((f for f in brand.flavors if f.id == flavor_id), None)


def find_variant(flavor: Optional[Flavor], variant_id: str) -> Optional[Variant]:
    if flavor is None:
        return None
    return next((v for v in flavor.variants if v.id == variant_id), None)
