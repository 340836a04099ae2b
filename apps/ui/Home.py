import streamlit as st
from pydantic import ValidationError

from apps.ui.common import current_session, flush_notices, get_store, notify, sidebar
from domain.models import StatementType, UploadedFile
from domain.value_objects import Notice
from services.auth.forms import (
    LoginForm,
    SignupForm,
    form_errors,
    login_error_message,
    signup_error_message,
)
from services.backend.base import BackendError
from services.extratos.competence import COMPETENCE_MAX_LEN
from services.extratos.form import ExtratosForm

st.set_page_config(page_title="Extrato Clientes", layout="centered")


def _field_error(errors: dict, field: str) -> None:
    if field in errors:
        st.caption(f":red[{errors[field]}]")


def auth_screen() -> None:
    st.title("Extrato Clientes")
    st.caption("Faça login ou crie uma conta para continuar")
    store = get_store()
    login_tab, signup_tab = st.tabs(["Login", "Cadastro"])

    with login_tab, st.form("login"):
        email = st.text_input("Email", placeholder="seu@email.com")
        password = st.text_input("Senha", type="password")
        errors = st.session_state.get("login_errors", {})
        _field_error(errors, "email")
        _field_error(errors, "password")
        if st.form_submit_button("Entrar", type="primary"):
            try:
                data = LoginForm(email=email, password=password)
            except ValidationError as e:
                st.session_state.login_errors = form_errors(e)
                st.rerun()
            st.session_state.login_errors = {}
            try:
                with st.spinner("Entrando..."):
                    store.sign_in(data.email, data.password)
            except BackendError as e:
                notify(Notice("error", "Erro", login_error_message(e.detail)))
            else:
                notify(Notice("success", "Sucesso", "Login realizado com sucesso!"))
            st.rerun()

    with signup_tab, st.form("signup"):
        full_name = st.text_input("Nome Completo", placeholder="João Silva")
        s_email = st.text_input("Email", placeholder="seu@email.com", key="signup_email")
        s_password = st.text_input("Senha", type="password", key="signup_password")
        confirm = st.text_input("Confirmar Senha", type="password")
        errors = st.session_state.get("signup_errors", {})
        for f in ("full_name", "email", "password", "confirm_password"):
            _field_error(errors, f)
        if st.form_submit_button("Criar conta"):
            try:
                data = SignupForm(
                    full_name=full_name, email=s_email, password=s_password, confirm_password=confirm
                )
            except ValidationError as e:
                st.session_state.signup_errors = form_errors(e)
                st.rerun()
            st.session_state.signup_errors = {}
            try:
                with st.spinner("Criando conta..."):
                    store.sign_up(data.email, data.password, data.full_name)
            except BackendError as e:
                notify(Notice("error", "Erro", signup_error_message(e.detail)))
            else:
                notify(
                    Notice("success", "Sucesso", "Conta criada com sucesso! Você já pode fazer login.")
                )
            st.rerun()


def _get_form() -> ExtratosForm:
    form = st.session_state.get("extratos_form")
    if form is None:
        form = ExtratosForm(get_store(), notify)
        with st.spinner("Carregando..."):
            form.load_reference_data()
        st.session_state.extratos_form = form
        st.session_state.form_nonce = 0
    return form


def extratos_screen() -> None:
    form = _get_form()
    nonce = st.session_state.form_nonce
    messages = {k: v.message for k, v in form.errors.items()}

    st.title("Extrato Clientes")

    uploads = st.file_uploader("data *", accept_multiple_files=True, key=f"files_{nonce}")
    form.set_files(
        [UploadedFile(name=u.name, content_type=u.type or "", data=u.getvalue()) for u in uploads or []]
    )
    _field_error(messages, "files")

    client = st.selectbox(
        "Clientes *",
        form.clients,
        index=None,
        placeholder="Carregando..." if form.loading else "Select an option...",
        disabled=form.loading,
        key=f"client_{nonce}",
    )
    form.set_client(client or "")
    _field_error(messages, "client")

    st.markdown("Tipo *")
    for kind in StatementType:
        checked = st.checkbox(kind.value, key=f"tipo_{kind.name}_{nonce}")
        if checked != (kind in form.draft.statement_types):
            form.toggle_statement_type(kind, checked)
    _field_error(messages, "statement_types")

    institution = st.selectbox(
        "Instituição *",
        form.institutions,
        index=None,
        placeholder="Select an option...",
        key=f"institution_{nonce}",
    )
    form.set_institution(institution or "")
    _field_error(messages, "institution")

    comp_key = f"competence_{nonce}"

    def _format_competence() -> None:
        st.session_state[comp_key] = form.set_competence(st.session_state[comp_key])

    st.text_input(
        "Competência",
        placeholder="MM/AAAA",
        max_chars=COMPETENCE_MAX_LEN,
        key=comp_key,
        on_change=_format_competence,
    )
    if form.competence_error:
        st.caption(f":red[{form.competence_error.message}]")

    if st.button("Submit", type="primary", disabled=form.is_submitting, use_container_width=True):
        with st.spinner("Enviando..."):
            result = form.submit()
        if result.ok:
            st.session_state.form_nonce = nonce + 1
            if result.body:
                st.session_state.last_response = result.body
        st.rerun()

    if st.session_state.get("last_response"):
        with st.expander("Resposta do envio"):
            st.text(st.session_state.pop("last_response"))


session = current_session()
if session is None:
    flush_notices()
    auth_screen()
else:
    sidebar(session)
    flush_notices()
    extratos_screen()
