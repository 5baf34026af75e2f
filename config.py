# config.py

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent


def _env_bool(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None or val.strip() == "":
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


# Static Brand -> Flavor -> Variant tree loaded at startup
CATALOG_PATH: Path = Path(os.getenv("VAPE_CATALOG_PATH", BASE_DIR / "data" / "vape_catalog.json"))

# Company block printed on every exported document
STORE_NAME: str = os.getenv("STORE_NAME", "Sierra Vape")
STORE_ADDRESS: str = os.getenv(
    "STORE_ADDRESS",
    "Office No. 2002-0117, Owned by Sheikha Maryam bint Rashid bin Saeed Al Maktoum - Al Rigga, Dubai, UAE",
)
STORE_PHONE: str = os.getenv("STORE_PHONE", "(971) 54 473 3331")
STORE_EMAIL: str = os.getenv("STORE_EMAIL", "info@myverna.com")

# "en" or "ar"
DEFAULT_LANGUAGE: str = os.getenv("DEFAULT_LANGUAGE", "en")
CURRENCY_SYMBOL: str = os.getenv("CURRENCY_SYMBOL", "$")

# Draw the reference number as a Code128 barcode in exported documents
EXPORT_BARCODE: bool = _env_bool("EXPORT_BARCODE", True)

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
