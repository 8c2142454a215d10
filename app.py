# app.py
# -----------------------------------------------------------
# NOTE-TAKER — drop a PDF or image → Markdown study notes
# - PDF text layer via PyMuPDF, OCR (Tesseract) for images/scans
# - Heuristic notes: title, key takeaways, outline, terms
# - Copy the Markdown straight into Notion
# Deps: streamlit, pymupdf, pytesseract, pillow, numpy
# Run:  streamlit run app.py
# -----------------------------------------------------------

import streamlit as st

from notetaker import NoteSession, NotesConfig

UPLOAD_TYPES = ["pdf", "png", "jpg", "jpeg", "webp", "bmp", "tif", "tiff", "gif", "txt"]

st.set_page_config(page_title="Notion Note-Taker", layout="wide")

# ---------------------- Session ----------------------

if "notes" not in st.session_state:
    st.session_state.notes = NoteSession(config=NotesConfig.from_env())
if "last_upload" not in st.session_state:
    st.session_state.last_upload = None
# bumped on "Start over" so the uploader comes back empty
if "upload_gen" not in st.session_state:
    st.session_state.upload_gen = 0

session: NoteSession = st.session_state.notes

# ---------------------- Layout ----------------------

st.title("📝 Notion Note-Taker")
st.caption("Drop a PDF or image → get Markdown notes you can paste into Notion.")

with st.sidebar:
    session.config.takeaways = st.slider("Key takeaways", 1, 12, min(12, max(1, session.config.takeaways)))
    session.config.terms = st.slider("Key terms", 3, 30, min(30, max(3, session.config.terms)))

upload = st.file_uploader(
    "Upload PDF / Image",
    type=UPLOAD_TYPES,
    disabled=session.busy,
    key=f"upload_{st.session_state.upload_gen}",
)

# Streamlit reruns the script on every interaction; only process new uploads
if upload is not None:
    upload_key = (upload.name, upload.size)
    if upload_key != st.session_state.last_upload:
        st.session_state.last_upload = upload_key
        status = st.empty()
        with st.spinner("Working…"):
            session.handle_file(upload, on_stage=status.info)
        status.empty()

if session.stage.startswith("Error:"):
    st.error(session.stage)
elif session.has_result:
    st.success(session.stage)
else:
    st.info(session.stage)

st.markdown("---")

# ---------------------- Results ----------------------

if session.has_result:
    col_raw, col_md = st.columns(2)

    with col_raw:
        st.subheader("Extracted Text")
        raw = st.text_area("Extracted text", value=session.raw_text, height=350, label_visibility="collapsed")
        if raw != session.raw_text:
            session.edit_raw(raw)
        if st.button("Condense again"):
            session.regenerate()
            st.rerun()

    with col_md:
        st.subheader("Markdown Notes")
        md = st.text_area("Markdown notes", value=session.markdown, height=350, label_visibility="collapsed")
        if md != session.markdown:
            session.edit_markdown(md)
        st.caption("Copy with the button in the corner of the block below:")
        st.code(session.markdown, language="markdown")

    if st.button("Start over", key="start_over"):
        session.reset()
        st.session_state.last_upload = None
        st.session_state.upload_gen += 1
        st.rerun()

# ---------------------- Footer ----------------------

st.caption(
    "Tip: Paste the Markdown into Notion (then use “Turn into heading/bullets”) for a clean study sheet."
)
st.caption(
    "Limitations: OCR can be imperfect on low-quality images; PDF extraction depends on embedded text availability."
)
