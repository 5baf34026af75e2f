import logging

import streamlit as st

import config
from domain.models import Ledger
from element_component import export_dialog, get_catalog
from services.billing_service import delete_line, upsert_line
from services.catalog_service import find_brand, find_flavor, find_variant
from services.export_service import INVOICE, QUANTITY, EmptyBillError, build_export_document
from services.ui_state import (
    BillingFormState,
    active_variant_count,
    back_to_brands,
    clear_draft,
    draft_for,
    select_brand,
    select_variant,
    toggle_flavor,
    toggle_language,
    update_customer,
    update_draft_price,
    update_draft_quantity,
)
from utils.formatting import format_currency
from utils.i18n import LANGUAGE_NAMES

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

st.set_page_config(page_title="Vape Store Billing", page_icon="🧾")
st.title("🧾 Vape Store Billing System")
st.caption("Select flavors, add quantities and prices, and generate invoices")

brands = get_catalog()

# -----------------------------------------------------------------------------
# Session state
# -----------------------------------------------------------------------------
if "billing_form" not in st.session_state:
    st.session_state["billing_form"] = BillingFormState(language=config.DEFAULT_LANGUAGE)

if "ledger" not in st.session_state:
    st.session_state["ledger"] = Ledger()

if "bill_history" not in st.session_state:
    st.session_state["bill_history"] = []


# -----------------------------------------------------------------------------
# Callbacks (run before the next script pass)
# -----------------------------------------------------------------------------
def _on_select_brand(brand_id: str):
    st.session_state["billing_form"] = select_brand(st.session_state["billing_form"], brand_id)


def _on_back_to_brands():
    st.session_state["billing_form"] = back_to_brands(st.session_state["billing_form"])


def _on_toggle_language():
    st.session_state["billing_form"] = toggle_language(st.session_state["billing_form"])


def _on_toggle_flavor(flavor_id: str):
    st.session_state["billing_form"] = toggle_flavor(st.session_state["billing_form"], flavor_id)


def _on_select_variant(flavor_id: str, variant_id: str):
    st.session_state["billing_form"] = select_variant(
        st.session_state["billing_form"], flavor_id, variant_id
    )


def _on_quantity_change(brand, flavor_id: str, variant, widget_key: str):
    form, draft = update_draft_quantity(
        st.session_state["billing_form"], flavor_id, variant, st.session_state[widget_key]
    )
    st.session_state["billing_form"] = form
    st.session_state["ledger"] = upsert_line(
        st.session_state["ledger"], brand, flavor_id, variant.id, draft.quantity, draft.price
    )


def _on_price_change(brand, flavor_id: str, variant, widget_key: str):
    form, draft = update_draft_price(
        st.session_state["billing_form"], flavor_id, variant, st.session_state[widget_key]
    )
    st.session_state["billing_form"] = form
    st.session_state["ledger"] = upsert_line(
        st.session_state["ledger"], brand, flavor_id, variant.id, draft.quantity, draft.price
    )


def _on_delete_line(flavor_id: str, variant_id: str):
    st.session_state["ledger"] = delete_line(st.session_state["ledger"], flavor_id, variant_id)
    st.session_state["billing_form"] = clear_draft(
        st.session_state["billing_form"], flavor_id, variant_id
    )
    # reset the number inputs so they pick up the cleared draft
    for prefix in ("qty", "price"):
        st.session_state.pop(f"{prefix}_{flavor_id}_{variant_id}", None)


def _on_customer_change(field_name: str, widget_key: str):
    st.session_state["billing_form"] = update_customer(
        st.session_state["billing_form"], **{field_name: st.session_state[widget_key]}
    )


form: BillingFormState = st.session_state["billing_form"]
ledger: Ledger = st.session_state["ledger"]

# -----------------------------------------------------------------------------
# 1) Pick a brand
# -----------------------------------------------------------------------------
selected_brand = find_brand(brands, form.selected_brand_id)

if selected_brand is None:
    st.subheader("Select a Brand")
    if not brands:
        st.warning("Catalog is empty.")
        st.stop()

    cols = st.columns(min(len(brands), 3))
    for i, brand in enumerate(brands):
        with cols[i % len(cols)]:
            with st.container(border=True):
                st.markdown(f"### {brand.name}")
                st.caption(f"{len(brand.flavors)} flavors available")
                st.button(
                    "Select",
                    key=f"brand_{brand.id}",
                    on_click=_on_select_brand,
                    args=(brand.id,),
                    width="stretch",
                )
    st.stop()

# -----------------------------------------------------------------------------
# 2) Toolbar: back, language, exports
# -----------------------------------------------------------------------------
col_back, col_brand, col_lang = st.columns([1, 2, 2])
with col_back:
    st.button("⬅ Back to Brands", on_click=_on_back_to_brands)
with col_brand:
    st.markdown(f"**{selected_brand.name}** · {len(selected_brand.flavors)} Flavors")
with col_lang:
    st.button(
        f"🌐 {LANGUAGE_NAMES[form.language]}",
        key="language_toggle",
        help="Switch the export language between English and Arabic",
        on_click=_on_toggle_language,
    )

col_qty_export, col_invoice_export = st.columns(2)
with col_qty_export:
    export_quantity = st.button("Export Quantity", width="stretch")
with col_invoice_export:
    export_invoice = st.button("Export Full Invoice", type="primary", width="stretch")

if export_quantity or export_invoice:
    try:
        document = build_export_document(
            ledger,
            form.customer,
            form.language,
            kind=INVOICE if export_invoice else QUANTITY,
        )
    except EmptyBillError as e:
        logger.info("Export blocked: bill is empty")
        st.warning(str(e))
    else:
        export_dialog(document, ledger, form.customer)

st.divider()

# -----------------------------------------------------------------------------
# 3) Flavor cards
# -----------------------------------------------------------------------------
for flavor in selected_brand.flavors:
    with st.container(border=True):
        in_cart = active_variant_count(form, flavor)
        header = f"**{flavor.name}** · {len(flavor.variants)} variants available"
        if in_cart:
            header += f" · :green[{in_cart} in cart]"

        col_title, col_toggle = st.columns([5, 1])
        with col_title:
            st.markdown(header)
        is_open = flavor.id in form.expanded_flavors
        with col_toggle:
            st.button(
                "▲" if is_open else "▼",
                key=f"toggle_{flavor.id}",
                on_click=_on_toggle_flavor,
                args=(flavor.id,),
            )

        if not is_open:
            continue

        selected_variant_id = form.selected_variants.get(flavor.id)
        variant_cols = st.columns(4)
        for i, variant in enumerate(flavor.variants):
            draft = form.drafts.get((flavor.id, variant.id))
            with variant_cols[i % 4]:
                st.button(
                    variant.name,
                    key=f"variant_{flavor.id}_{variant.id}",
                    type="primary" if variant.id == selected_variant_id else "secondary",
                    icon="✅" if draft and draft.quantity > 0 else None,
                    on_click=_on_select_variant,
                    args=(flavor.id, variant.id),
                    width="stretch",
                )

        variant = find_variant(find_flavor(selected_brand, flavor.id), selected_variant_id)
        if variant is None:
            continue

        draft = draft_for(form, flavor.id, variant)
        st.markdown(f"##### {variant.name}")
        col_qty, col_price = st.columns(2)
        qty_key = f"qty_{flavor.id}_{variant.id}"
        price_key = f"price_{flavor.id}_{variant.id}"
        with col_qty:
            st.number_input(
                "Quantity",
                min_value=0,
                step=1,
                value=draft.quantity,
                key=qty_key,
                on_change=_on_quantity_change,
                args=(selected_brand, flavor.id, variant, qty_key),
            )
        with col_price:
            st.number_input(
                f"Price ({config.CURRENCY_SYMBOL})",
                min_value=0.0,
                step=0.01,
                format="%.2f",
                value=float(draft.price),
                key=price_key,
                on_change=_on_price_change,
                args=(selected_brand, flavor.id, variant, price_key),
            )
        if draft.is_billable:
            st.caption(f"Subtotal: **{format_currency(draft.subtotal)}**")

# -----------------------------------------------------------------------------
# 4) Customer information
# -----------------------------------------------------------------------------
if ledger.items:
    st.subheader("Customer Information")
    col_name, col_address, col_phone = st.columns(3)
    for col, field_name, label in (
            (col_name, "name", "Customer Name"),
            (col_address, "address", "Address"),
            (col_phone, "phone", "Phone Number"),
    ):
        widget_key = f"customer_{field_name}"
        with col:
            st.text_input(
                label,
                value=getattr(form.customer, field_name),
                key=widget_key,
                on_change=_on_customer_change,
                args=(field_name, widget_key),
            )

# -----------------------------------------------------------------------------
# 5) Billing summary
# -----------------------------------------------------------------------------
st.subheader("Billing Summary")

if not ledger.items:
    st.info("No items added to the bill yet. Select flavors and add quantities to see your bill.")
    st.stop()

widths = [2, 2, 1, 1.2, 1.2, 0.6]
for col, title in zip(st.columns(widths), ["Flavor", "Variant", "Qty", "Price", "Total", ""]):
    col.markdown(f"**{title}**")

for item in ledger.items:
    c_flavor, c_variant, c_qty, c_price, c_total, c_action = st.columns(widths)
    c_flavor.write(item.flavor_name)
    c_variant.write(item.variant_name)
    c_qty.write(str(item.quantity))
    c_price.write(format_currency(item.unit_price))
    c_total.write(format_currency(item.line_total))
    c_action.button(
        "🗑",
        key=f"delete_{item.flavor_id}_{item.variant_id}",
        help="Remove item",
        on_click=_on_delete_line,
        args=(item.flavor_id, item.variant_id),
    )

st.metric("Total", format_currency(ledger.grand_total))
