import streamlit as st

from apps.ui.common import get_store, require_session
from services.backend.base import BackendError
from services.registry.history import format_timestamp, list_history, status_label

st.set_page_config(page_title="Histórico de Envios", layout="centered")

session = require_session()
st.title("Histórico de Envios")

try:
    with st.spinner("Carregando..."):
        submissions = list_history(get_store(), session)
except BackendError as e:
    st.error(f"Erro ao carregar histórico: {e.detail}")
    st.stop()

if not submissions:
    st.info("Nenhum envio encontrado")

for sub in submissions:
    with st.container(border=True):
        left, right = st.columns([3, 1])
        with left:
            title = f"**{sub.cliente}**"
            if sub.nome_conta:
                title += f" ({sub.nome_conta})"
            st.markdown(title)
            st.caption(
                f"Instituição: {sub.instituicao} • Moeda: {sub.moeda} • Competência: {sub.competencia}"
            )
            if sub.tipos:
                st.markdown(" ".join(f"`{t}`" for t in sub.tipos))
        with right:
            st.markdown(f"**{status_label(sub.status)}**")
            st.caption(format_timestamp(sub.created_at))
