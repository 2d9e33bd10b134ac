"""Streamlit UI for DocuFlow - upload, review and browse documents.

Run with: streamlit run ui/app.py
"""

# Add project root to sys.path for imports to work when run via streamlit
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio  # noqa: E402
from datetime import date  # noqa: E402
from typing import Any  # noqa: E402

import httpx  # noqa: E402
import streamlit as st  # noqa: E402

from backend.app.config import get_settings  # noqa: E402
from backend.app.extraction.poller import PollPolicy, PollTimeoutError  # noqa: E402
from ui.helpers import (  # noqa: E402
    cancel_document,
    commit_document,
    confidence_badge,
    get_document,
    get_json,
    mark_alert_read,
    prefill_form,
    upload_document,
    vendor_selection,
    wait_for_document,
)

# Configuration
BACKEND_URL = "http://localhost:8000"

settings = get_settings()
POLL_POLICY = PollPolicy(
    initial_interval=settings.poll_initial_interval_seconds,
    backoff_factor=settings.poll_backoff_factor,
    max_interval=settings.poll_max_interval_seconds,
    timeout=settings.poll_timeout_seconds,
)

# Page config
st.set_page_config(page_title="DocuFlow AI", page_icon="📄", layout="wide")

# Initialize session state
for key in ("review_document", "error", "notice"):
    if key not in st.session_state:
        st.session_state[key] = None

st.title("📄 DocuFlow AI")
st.markdown("*Upload invoices and contracts, review the extraction, save the record.*")
st.divider()


def _date_or_none(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _reset_review() -> None:
    st.session_state.review_document = None


# =============================================================================
# SUMMARY
# =============================================================================
try:
    summary = get_json(BACKEND_URL, "/analytics/summary")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Invoices", summary["total_invoices"])
    c2.metric("Pending payments", summary["pending_payments"])
    c3.metric("Vendors", summary["vendors"])
    c4.metric("Due this week", summary["due_this_week"])
except httpx.HTTPError as e:
    st.warning(f"Backend unavailable: {e}")

tab_upload, tab_invoices, tab_contracts, tab_vendors, tab_alerts, tab_spending = st.tabs(
    ["Upload", "Invoices", "Contracts", "Vendors", "Alerts", "Spending"]
)

# =============================================================================
# UPLOAD + REVIEW
# =============================================================================
with tab_upload:
    col_upload, col_review = st.columns([1, 2])

    with col_upload:
        st.subheader("📤 Upload")
        with st.form("upload_form", clear_on_submit=True):
            file_type = st.radio("Document type", options=["invoice", "contract"], horizontal=True)
            uploaded = st.file_uploader("File", type=["pdf", "png", "jpg", "jpeg", "webp"])
            submitted = st.form_submit_button("Upload & extract", type="primary", use_container_width=True)

        if submitted and uploaded is not None:
            try:
                created = upload_document(BACKEND_URL, uploaded.name, uploaded.getvalue(), file_type)
                document_id = created["document"]["id"]
                with st.spinner("Extracting data..."):
                    final_status = asyncio.run(wait_for_document(BACKEND_URL, document_id, POLL_POLICY))
                st.session_state.review_document = get_document(BACKEND_URL, document_id)
                if final_status.value == "error":
                    st.session_state.error = "Extraction failed; you can still discard the document."
            except PollTimeoutError as e:
                st.session_state.error = f"Still processing: {e}"
            except httpx.HTTPError as e:
                st.session_state.error = str(e)

        if st.session_state.error:
            st.error(f"❌ {st.session_state.error}")
        if st.session_state.notice:
            st.success(st.session_state.notice)

        st.markdown("#### Recent uploads")
        try:
            for doc in get_json(BACKEND_URL, "/documents")["documents"]:
                st.caption(f"{doc['file_name']} · {doc['file_type']} · {doc['status']}")
        except httpx.HTTPError:
            st.caption("_Unavailable_")

    with col_review:
        st.subheader("📝 Review")
        document = st.session_state.review_document

        if not document:
            st.info("👈 Upload a document to review its extracted data here.")
        elif document["status"] == "error":
            st.error(document.get("error_message") or "Extraction failed")
            if st.button("Discard document"):
                cancel_document(BACKEND_URL, document["id"])
                _reset_review()
                st.rerun()
        elif document["status"] == "saved":
            st.success(f"{document['file_name']} is already saved.")
        else:
            form = prefill_form(document)
            percent, colour = confidence_badge(form.get("confidence_score"))
            st.markdown(f"**{document['file_name']}** · :{colour}[AI Confidence: {percent}%]")

            file_url = get_json(BACKEND_URL, f"/documents/{document['id']}/file-url")
            st.link_button("View original", f"{BACKEND_URL}{file_url['url']}")

            vendors: list[dict[str, Any]] = get_json(BACKEND_URL, "/vendors")
            vendor_names = {v["id"]: v["name"] for v in vendors}

            with st.form("review_form"):
                existing_vendor = st.selectbox(
                    "Existing vendor",
                    options=[None, *vendor_names],
                    format_func=lambda vid: "(new vendor)" if vid is None else vendor_names[vid],
                )
                new_vendor = st.text_input("New vendor name")

                if form["kind"] == "invoice":
                    form["invoice_number"] = st.text_input("Invoice number", value=form.get("invoice_number", ""))
                    d1, d2 = st.columns(2)
                    invoice_date = d1.date_input("Invoice date", value=_date_or_none(form.get("invoice_date")))
                    due_date = d2.date_input("Due date", value=_date_or_none(form.get("due_date")))
                    form["invoice_date"] = invoice_date.isoformat() if invoice_date else ""
                    form["due_date"] = due_date.isoformat() if due_date else ""
                    a1, a2 = st.columns(2)
                    form["total_amount"] = a1.text_input("Total amount", value=form.get("total_amount", ""))
                    form["tax_amount"] = a2.text_input("Tax amount", value=form.get("tax_amount", ""))
                    edited_items = st.data_editor(
                        form.get("items", []),
                        num_rows="dynamic",
                        column_order=["description", "quantity", "unit_price", "amount"],
                    )
                    form["items"] = [{k: "" if v is None else v for k, v in row.items()} for row in edited_items]
                else:
                    parties_raw = st.text_area("Parties (one per line)", value="\n".join(form.get("parties", [])))
                    form["parties"] = parties_raw.splitlines()
                    d1, d2 = st.columns(2)
                    start_date = d1.date_input("Start date", value=_date_or_none(form.get("start_date")))
                    end_date = d2.date_input("End date", value=_date_or_none(form.get("end_date")))
                    form["start_date"] = start_date.isoformat() if start_date else ""
                    form["end_date"] = end_date.isoformat() if end_date else ""
                    form["payment_amount"] = st.text_input("Payment amount", value=form.get("payment_amount", ""))

                form["summary_text"] = st.text_area("Summary", value=form.get("summary_text", ""))

                save_col, cancel_col = st.columns(2)
                save = save_col.form_submit_button("💾 Save", type="primary", use_container_width=True)
                cancel = cancel_col.form_submit_button("🗑️ Cancel", use_container_width=True)

            if save:
                vendor = vendor_selection(existing_vendor, new_vendor)
                if not vendor["vendor_id"] and not vendor["vendor_name"]:
                    st.error("Please select or enter a vendor")
                else:
                    try:
                        commit_document(BACKEND_URL, document["id"], vendor, form)
                        st.session_state.notice = "Document saved"
                        st.session_state.error = None
                        _reset_review()
                        st.rerun()
                    except httpx.HTTPStatusError as e:
                        st.error(e.response.json().get("detail", str(e)))
            if cancel:
                cancel_document(BACKEND_URL, document["id"])
                st.session_state.notice = "Document discarded"
                _reset_review()
                st.rerun()

# =============================================================================
# RECORD TABS
# =============================================================================
with tab_invoices:
    search = st.text_input("Search invoices", key="invoice_search")
    st.dataframe(
        get_json(BACKEND_URL, "/invoices", search=search or None),
        column_order=["invoice_number", "vendor_name", "invoice_date", "due_date", "total_amount", "payment_status"],
        use_container_width=True,
    )

with tab_contracts:
    search = st.text_input("Search contracts", key="contract_search")
    st.dataframe(
        get_json(BACKEND_URL, "/contracts", search=search or None),
        column_order=["vendor_name", "parties", "start_date", "end_date", "payment_amount", "status"],
        use_container_width=True,
    )

with tab_vendors:
    st.dataframe(
        get_json(BACKEND_URL, "/vendors"),
        column_order=["name", "email", "phone", "address"],
        use_container_width=True,
    )

with tab_alerts:
    if st.button("🔔 Check for due invoices"):
        result = httpx.post(f"{BACKEND_URL}/functions/send-reminders", timeout=60.0).json()
        if "error" in result:
            st.error(result["error"])
        else:
            st.success(f"{result['message']} ({result['reminders_sent']} reminders)")

    for alert in get_json(BACKEND_URL, "/alerts"):
        marker = "" if alert["is_read"] else "🆕 "
        st.markdown(f"{marker}**{alert['title']}**")
        st.caption(alert.get("message") or "")
        if not alert["is_read"] and st.button("Mark read", key=f"read-{alert['id']}"):
            mark_alert_read(BACKEND_URL, alert["id"])
            st.rerun()

with tab_spending:
    spending = get_json(BACKEND_URL, "/analytics/spending")
    s1, s2 = st.columns(2)
    with s1:
        st.markdown("#### By vendor")
        st.bar_chart({b["label"]: b["total"] for b in spending["by_vendor"]})
    with s2:
        st.markdown("#### By month")
        st.line_chart({b["label"]: b["total"] for b in spending["by_month"]})
