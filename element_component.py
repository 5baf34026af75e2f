from typing import List

import streamlit as st

import config
from domain.models import Brand, CustomerInfo, ExportDocument, Ledger
from services.catalog_service import load_catalog
from services.dashboard_service import record_bill
from services.export_service import (
    CSV_MIME,
    DOCX_MIME,
    INVOICE,
    export_filename,
    render_csv,
    render_docx,
)


@st.cache_resource
def get_catalog() -> List[Brand]:
    """The catalog is read once per server process and shared by every page."""
    return load_catalog(config.CATALOG_PATH)


@st.dialog("Export")
def export_dialog(document: ExportDocument, ledger: Ledger, customer: CustomerInfo):
    st.subheader(document.title)
    st.caption(f"{document.reference_line[0]}: {document.reference}")

    for section in document.sections:
        st.markdown(f"**{section.brand_name}** - {section.footer_label}: {section.footer_value}")

    for label, value in document.totals:
        st.write(f"{label}: **{value}**")

    data = render_docx(document)
    st.download_button(
        "Download .docx",
        data=data,
        file_name=export_filename(document.kind),
        mime=DOCX_MIME,
        type="primary",
    )

    if document.kind == INVOICE:
        st.download_button(
            "Download as CSV",
            data=render_csv(ledger),
            file_name=export_filename(document.kind, ext="csv"),
            mime=CSV_MIME,
        )
        history = st.session_state.get("bill_history", [])
        # the dialog body re-runs on every click inside it
        if not any(bill.reference == document.reference for bill in history):
            st.session_state["bill_history"] = record_bill(
                history, ledger, customer, reference=document.reference
            )

    if st.button("Close"):
        st.rerun()
