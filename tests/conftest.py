from decimal import Decimal

import pytest

from domain.models import Brand, CustomerInfo, Flavor, Ledger, Variant
from services.billing_service import upsert_line


@pytest.fixture
def elfbar():
    return Brand(
        id="elfbar",
        name="ELFBAR",
        image="images/elfbar.png",
        flavors=(
            Flavor(
                id="bc10000-apple",
                name="BC10000",
                image="images/bc10000.jpg",
                variants=(
                    Variant(id="apple-ice-5", name="Apple Ice 5%"),
                    Variant(id="grape-ice-5", name="Grape Ice 5%"),
                ),
            ),
            Flavor(
                id="iceking",
                name="Ice King",
                image="images/iceking.jpg",
                variants=(
                    Variant(id="mixed-berry-5", name="Mixed Berry 5%", quantity=1, price=Decimal("12.50")),
                ),
            ),
        ),
    )


@pytest.fixture
def sierra():
    return Brand(
        id="sierra",
        name="SIERRA",
        image="images/logo.png",
        flavors=(
            Flavor(
                id="premium-mint",
                name="Premium Mint",
                image="images/logo.png",
                variants=(
                    Variant(id="cool-mint", name="Cool Mint"),
                    Variant(id="ice-mint", name="Ice Mint"),
                ),
            ),
        ),
    )


@pytest.fixture
def mixed_ledger(elfbar, sierra):
    """ELFBAR, SIERRA, ELFBAR lines in that order."""
    ledger = Ledger()
    ledger = upsert_line(ledger, elfbar, "bc10000-apple", "apple-ice-5", 3, Decimal("10.00"))
    ledger = upsert_line(ledger, sierra, "premium-mint", "cool-mint", 2, Decimal("5.00"))
    ledger = upsert_line(ledger, elfbar, "iceking", "mixed-berry-5", 1, Decimal("12.50"))
    return ledger


@pytest.fixture
def customer():
    return CustomerInfo(name="Ahmed Ali", address="Sharjah, UAE", phone="+971501234567")
