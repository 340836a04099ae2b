import streamlit as st

from apps.ui.common import get_store, notify, require_session
from domain.value_objects import Notice
from services.backend.base import BackendError
from services.registry.institutions import (
    InstitutionError,
    add_institution,
    delete_institution,
    list_institutions,
    rename_institution,
)

st.set_page_config(page_title="Instituições", layout="centered")

session = require_session()
store = get_store()
st.title("Gerenciar Instituições")


def _run(action, success: str) -> None:
    try:
        action()
    except (InstitutionError, BackendError) as e:
        notify(Notice("error", "Erro", getattr(e, "detail", None) or str(e)))
    else:
        notify(Notice("success", "Sucesso", success))
        # the statement form reloads its options on next mount
        st.session_state.pop("extratos_form", None)
    st.rerun()


with st.form("new_institution", clear_on_submit=True):
    name = st.text_input("Adicionar Nova Instituição", placeholder="Nome da instituição")
    if st.form_submit_button("Adicionar"):
        _run(lambda: add_institution(store, name), "Instituição adicionada")

st.subheader("Instituições Atuais")
try:
    institutions = list_institutions(store)
except BackendError as e:
    st.error(f"Erro ao carregar instituições: {e.detail}")
    st.stop()

for inst in institutions:
    col_name, col_save, col_delete = st.columns([4, 1, 1])
    with col_name:
        new_name = st.text_input(
            "Nome", value=inst.name, key=f"inst_{inst.id}", label_visibility="collapsed"
        )
    with col_save:
        if st.button("Salvar", key=f"save_{inst.id}", disabled=new_name.strip() == inst.name):
            _run(lambda: rename_institution(store, inst.id, new_name), "Instituição atualizada")
    with col_delete:
        if st.button("Excluir", key=f"del_{inst.id}"):
            _run(lambda: delete_institution(store, inst.id), "Instituição excluída")
