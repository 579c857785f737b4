import streamlit as st

from jurispol.client import RelayClient
from jurispol.logging_config import configure_logging
from jurispol.observability import setup_tracing
from jurispol.settings import settings
from jurispol.state import ChatSession, Role


@st.cache_resource(show_spinner=False)
def _bootstrap() -> None:
    # Streamlit reruns this file on every interaction; set up once per process
    configure_logging("jurispol-ui")
    if settings.otel_enabled:
        setup_tracing("jurispol-ui", settings.otel_endpoint, instrument_requests=True)


_bootstrap()

SUGGESTIONS = [
    "¿Cuál es el procedimiento en caso de riña callejera?",
    "Requisitos para un allanamiento sin orden judicial",
    "Uso progresivo de la fuerza y Ley 2197",
    "Derechos de una persona capturada",
    "Multas por porte de sustancias prohibidas",
    "Sanciones por ruidos excesivos en barrios",
]

KEY_LAWS = [
    ("Ley 1801 de 2016", "Código de Convivencia"),
    ("Ley 599 de 2000", "Código Penal"),
    ("Ley 2197 de 2022", "Seguridad Ciudadana"),
    ("Ley 906 de 2004", "Proc. Penal"),
]

st.set_page_config(page_title="JurisPol", page_icon="⚖️", layout="wide")

st.title("⚖️ JurisPol — Centro de Consulta Normativa")
st.caption("Asistente normativo de la Policía Nacional de Colombia. Verifica siempre con el manual institucional vigente.")

if "session" not in st.session_state:
    st.session_state.session = ChatSession(RelayClient(settings.api_url, settings.request_timeout))
session: ChatSession = st.session_state.session
state = session.state

pending = None

with st.sidebar:
    st.header("Normatividad clave")
    for label, desc in KEY_LAWS:
        st.markdown(f"**{label}** — {desc}")
    st.markdown("---")
    st.subheader("Historial de consulta")
    recent = [m for m in state.messages if m.role == Role.USER][-5:]
    if not recent:
        st.caption("No hay consultas previas")
    for m in recent:
        if st.button(m.content[:60], key=f"again-{m.id}", disabled=state.is_loading):
            pending = m.content
    st.markdown("---")
    if st.session_state.get("confirm_clear"):
        st.warning("¿Está seguro de que desea borrar el historial de consulta?")
        yes, no = st.columns(2)
        if yes.button("Sí, borrar", key="clear-yes", type="primary", use_container_width=True):
            session.clear()
            st.session_state.confirm_clear = False
            st.rerun()
        if no.button("Cancelar", key="clear-no", use_container_width=True):
            st.session_state.confirm_clear = False
            st.rerun()
    elif st.button("🗑️ Limpiar consulta", key="clear", use_container_width=True):
        st.session_state.confirm_clear = True
        st.rerun()

if not state.messages:
    st.subheader("Bienvenido a JurisPol")
    st.markdown("¿En qué normatividad puedo apoyarte hoy?")
    cols = st.columns(2)
    for i, suggestion in enumerate(SUGGESTIONS):
        if cols[i % 2].button(suggestion, key=f"suggestion-{i}", use_container_width=True):
            pending = suggestion

for m in state.messages:
    with st.chat_message(m.role.value):
        st.markdown(m.content)
        if m.sources:
            st.markdown("**Fuentes consultadas:**")
            for s in m.sources:
                title = s.title if len(s.title) <= 30 else s.title[:30] + "..."
                st.markdown(f"- [{title}]({s.uri})")
        st.caption(m.timestamp.strftime("%H:%M"))

if state.error:
    st.error(state.error)

prompt = st.chat_input(
    "Escriba su consulta normativa (ej: Procedimiento para riñas)...",
    disabled=state.is_loading,
)
text = prompt or pending
if text and text.strip():
    with st.spinner("Consultando Código Nacional..."):
        session.send(text)
    st.rerun()
