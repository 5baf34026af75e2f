import streamlit as st

from element_component import get_catalog
from services.dashboard_service import (
    calculate_stats,
    filter_history,
    history_to_dataframe,
    top_products_to_dataframe,
)
from utils.formatting import format_currency

st.set_page_config(page_title="Dashboard", page_icon="📊")
st.title("📊 Dashboard")

history = st.session_state.get("bill_history", [])
stats = calculate_stats(history)

tab_overview, tab_products = st.tabs(["Overview", "Products"])

with tab_overview:
    col_sales, col_orders, col_avg = st.columns(3)
    col_sales.metric("Total Sales", format_currency(stats.total_sales))
    col_orders.metric("Total Orders", stats.total_orders)
    col_avg.metric("Average Order Value", format_currency(stats.average_order_value))

    st.subheader("Top Products")
    if stats.top_products:
        df_top = top_products_to_dataframe(stats)
        df_top["Revenue"] = df_top["Revenue"].apply(format_currency)
        st.dataframe(df_top, hide_index=True, width="stretch")
    else:
        st.info("No invoices exported in this session yet.")

    st.subheader("Billing History")
    search = st.text_input("Search", placeholder="Search by customer or ID...")
    filtered = filter_history(history, search)

    if filtered:
        df_history = history_to_dataframe(filtered)
        df_history["Amount"] = df_history["Amount"].apply(format_currency)
        st.dataframe(df_history, hide_index=True, width="stretch")
    elif history:
        st.info("No bills match your search.")

with tab_products:
    for brand in get_catalog():
        with st.expander(f"{brand.name} · {len(brand.flavors)} flavors"):
            for flavor in brand.flavors:
                st.markdown(f"**{flavor.name}** · {len(flavor.variants)} variants")
                st.caption(", ".join(v.name for v in flavor.variants) or "-")
