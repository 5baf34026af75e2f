# services/ui_state.py
"""
State of the billing form (selected brand, open flavor cards, per-variant
draft quantity/price, customer info).

Every function returns a new BillingFormState; the page keeps exactly one
instance in st.session_state and swaps it on each interaction.
"""
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Dict, FrozenSet, Optional, Tuple

from domain.models import CustomerInfo, Flavor, Variant

DraftKey = Tuple[str, str]  # (flavor_id, variant_id)


@dataclass(frozen=True)
class VariantDraft:
    quantity: int = 0
    price: Decimal = Decimal("0")

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    @property
    def is_billable(self) -> bool:
        return self.quantity > 0 and self.price > 0


@dataclass(frozen=True)
class BillingFormState:
    selected_brand_id: Optional[str] = None
    language: str = "en"
    expanded_flavors: FrozenSet[str] = frozenset()
    selected_variants: Dict[str, str] = field(default_factory=dict)  # flavor_id -> variant_id
    drafts: Dict[DraftKey, VariantDraft] = field(default_factory=dict)
    customer: CustomerInfo = CustomerInfo()


def select_brand(state: BillingFormState, brand_id: str) -> BillingFormState:
    return replace(state, selected_brand_id=brand_id)


def back_to_brands(state: BillingFormState) -> BillingFormState:
    # drafts survive so the form matches the bill when the brand is reopened
    return replace(
        state,
        selected_brand_id=None,
        expanded_flavors=frozenset(),
        selected_variants={},
    )


def toggle_language(state: BillingFormState) -> BillingFormState:
    return replace(state, language="ar" if state.language == "en" else "en")


def toggle_flavor(state: BillingFormState, flavor_id: str) -> BillingFormState:
    expanded = set(state.expanded_flavors)
    if flavor_id in expanded:
        expanded.remove(flavor_id)
    else:
        expanded.add(flavor_id)
    return replace(state, expanded_flavors=frozenset(expanded))


def select_variant(state: BillingFormState, flavor_id: str, variant_id: str) -> BillingFormState:
    """Pick a variant inside a flavor card; picking it again deselects it."""
    selected = dict(state.selected_variants)
    if selected.get(flavor_id) == variant_id:
        selected.pop(flavor_id)
    else:
        selected[flavor_id] = variant_id
    return replace(state, selected_variants=selected)


def draft_for(state: BillingFormState, flavor_id: str, variant: Variant) -> VariantDraft:
    draft = state.drafts.get((flavor_id, variant.id))
    if draft is None:
        return VariantDraft(quantity=variant.quantity, price=variant.price)
    return draft


def _with_draft(state: BillingFormState, key: DraftKey, draft: VariantDraft) -> BillingFormState:
    drafts = dict(state.drafts)
    drafts[key] = draft
    return replace(state, drafts=drafts)


def update_draft_quantity(
        state: BillingFormState,
        flavor_id: str,
        variant: Variant,
        quantity,
) -> Tuple[BillingFormState, VariantDraft]:
    """
    New quantity for a variant. The price is the one already typed in, or the
    variant's default price when none was entered.
    """
    try:
        qty = max(0, int(quantity))
    except (TypeError, ValueError, OverflowError):
        qty = 0

    previous = state.drafts.get((flavor_id, variant.id))
    price = previous.price if previous and previous.price else variant.price
    draft = VariantDraft(quantity=qty, price=price)
    return _with_draft(state, (flavor_id, variant.id), draft), draft


def update_draft_price(
        state: BillingFormState,
        flavor_id: str,
        variant: Variant,
        price,
) -> Tuple[BillingFormState, VariantDraft]:
    """
    New price for a variant. The quantity is the one already typed in, or the
    variant's default quantity when none was entered.
    """
    try:
        new_price = Decimal(str(price))
    except (InvalidOperation, ValueError):
        new_price = Decimal("0")
    if not new_price.is_finite() or new_price < 0:
        new_price = Decimal("0")

    previous = state.drafts.get((flavor_id, variant.id))
    qty = previous.quantity if previous and previous.quantity else variant.quantity
    draft = VariantDraft(quantity=qty, price=new_price)
    return _with_draft(state, (flavor_id, variant.id), draft), draft


def clear_draft(state: BillingFormState, flavor_id: str, variant_id: str) -> BillingFormState:
    if (flavor_id, variant_id) not in state.drafts:
        return state
    drafts = dict(state.drafts)
    drafts.pop((flavor_id, variant_id))
    return replace(state, drafts=drafts)


def update_customer(state: BillingFormState, **fields) -> BillingFormState:
    return replace(state, customer=replace(state.customer, **fields))


def active_variant_count(state: BillingFormState, flavor: Flavor) -> int:
    """Variants of `flavor` with a positive draft quantity ("n in cart")."""
    return sum(
        1
        for v in flavor.variants
        if state.drafts.get((flavor.id, v.id), VariantDraft()).quantity > 0
    )
