# demo.py
# ------------------------------------------------------------
# Streamlit console for the Descript transcript proxy
# - Lookup panel   -> GET /api/transcript (pointer, optional raw JSON)
# - Forward panel  -> POST / (normalize + deliver to a webhook)
# Run with:  streamlit run demo.py   (backend on PROXY_API_BASE)
# ------------------------------------------------------------

import os

import requests
import streamlit as st

API = os.getenv("PROXY_API_BASE", "http://127.0.0.1:8000").rstrip("/")

st.set_page_config(page_title="Descript Transcript Proxy", layout="wide", page_icon="📝")
st.title("📝 Descript Transcript Proxy")

if "last_lookup" not in st.session_state:
    st.session_state.last_lookup = None
if "last_forward" not in st.session_state:
    st.session_state.last_forward = None

share_url = st.text_input("Share URL", placeholder="https://share.descript.com/view/...")

col_lookup, col_forward = st.columns([1, 1])

# ------------------------------------------------------------
# Lookup → /api/transcript
# ------------------------------------------------------------
with col_lookup:
    st.subheader("Lookup")
    expand = st.checkbox("Include raw transcript JSON", value=False)
    if st.button("🔎 Resolve transcript URL"):
        params = {"u": share_url}
        if expand:
            params["expand"] = "true"
        try:
            r = requests.get(f"{API}/api/transcript", params=params, timeout=60)
            st.session_state.last_lookup = (r.status_code, r.json())
        except Exception as e:
            st.error(f"Error contacting backend: {e}")

    if st.session_state.last_lookup:
        status, js = st.session_state.last_lookup
        if js.get("ok"):
            st.success(f"✅ {js['transcriptUrl']}")
            if "transcript" in js:
                st.json(js["transcript"], expanded=False)
        else:
            st.error(f"❌ HTTP {status}: {js.get('error')}")

# ------------------------------------------------------------
# Forward → POST /
# ------------------------------------------------------------
with col_forward:
    st.subheader("Forward to webhook")
    webhook_url = st.text_input("Webhook URL", placeholder="https://hook.make.com/...")
    if st.button("📤 Extract and forward"):
        payload = {"descript_url": share_url, "make_webhook_url": webhook_url}
        try:
            r = requests.post(f"{API}/", json=payload, timeout=120)
            st.session_state.last_forward = (r.status_code, r.json())
        except Exception as e:
            st.error(f"Error contacting backend: {e}")

    if st.session_state.last_forward:
        status, js = st.session_state.last_forward
        meta = js.get("metadata") or {}
        if js.get("success"):
            st.success(f"✅ Delivered in {meta.get('processing_time', 0)} ms")
        else:
            st.error(f"❌ HTTP {status}: {js.get('error')}")
        if meta.get("transcript_json_url"):
            st.caption(f"Transcript JSON: {meta['transcript_json_url']}")
        if js.get("transcript"):
            st.text_area("Transcript", value=js["transcript"], height=300, key="transcript_view")
