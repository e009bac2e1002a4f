import base64
from datetime import datetime

import streamlit as st

from meditrans import config
from meditrans.client import ApiClient
from meditrans.models import DOCTOR, PATIENT
from meditrans.session import ConversationSession
from meditrans.storage import ConversationStore, JsonFileBackend

st.set_page_config(page_title="MediTrans", page_icon="🩺", layout="wide")


def get_session() -> ConversationSession:
    if "meditrans" not in st.session_state:
        client = ApiClient(config.API_URL)
        session = ConversationSession(
            ConversationStore(JsonFileBackend(config.DATA_DIR)),
            translator=client,
            summarizer=client,
            notify=st.error,
        )
        session.start()
        st.session_state.meditrans = session
    return st.session_state.meditrans


def to_data_url(audio) -> str:
    encoded = base64.b64encode(audio.getvalue()).decode("ascii")
    return f"data:{audio.type or 'audio/wav'};base64,{encoded}"


def from_data_url(data_url: str) -> bytes:
    return base64.b64decode(data_url.split(",", 1)[-1])


session = get_session()

# -----------------------------
# Sidebar: history & search
# -----------------------------
st.sidebar.title("🩺 MediTrans")

if st.sidebar.button("➕ New consultation"):
    session.new_conversation()

query = st.sidebar.text_input("Search history...", value="")

for conv in session.search(query):
    day = datetime.fromtimestamp(conv.created_at / 1000).strftime("%Y-%m-%d")
    preview = conv.summary or conv.last_message or "New consultation"
    label = f"Visit {day}: {preview[:40]}"
    if st.sidebar.button(label, key=f"conv-{conv.id}"):
        session.select_conversation(conv)

# -----------------------------
# Two-column chat
# -----------------------------
st.subheader("Live Translation Session")

columns = {
    DOCTOR: ("👨‍⚕️ Doctor", "Type in English...", "Translating to Spanish"),
    PATIENT: ("👤 Patient", "Escribe en Español...", "Translating to English"),
}

for (role, (title, placeholder, caption)), col in zip(columns.items(), st.columns(2)):
    with col:
        st.markdown(f"### {title}")
        st.caption(caption)

        for m in session.messages:
            mine = m.role == role
            with st.chat_message("user" if mine else "assistant"):
                if m.audio_data:
                    st.audio(from_data_url(m.audio_data))
                st.markdown(m.original_text if mine else m.translated_text)
                if not mine:
                    st.caption(f'"{m.original_text}"')

        with st.form(f"{role}-form", clear_on_submit=True):
            text = st.text_input("Message", placeholder=placeholder, label_visibility="collapsed")
            submitted = st.form_submit_button("Send")
        if submitted and text.strip():
            with st.spinner("Applying medical translation..."):
                session.send_message(text, role)
            st.rerun()

        audio = st.audio_input("Record", key=f"{role}-audio")
        if audio is not None:
            # the widget keeps its value across reruns; repeats are dropped
            with st.spinner("Sending audio..."):
                sent = session.send_audio(role, to_data_url(audio))
            if sent is not None:
                st.rerun()

# -----------------------------
# Summary
# -----------------------------
st.divider()
st.subheader("📄 Medical Summary")

if st.button("Generate Summary", disabled=not session.messages):
    with st.spinner("Generating..."):
        session.generate_summary()

if session.summary:
    st.markdown(session.summary)
else:
    st.caption("Conversational analysis will appear here...")
