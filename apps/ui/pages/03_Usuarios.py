import pandas as pd
import streamlit as st
from pydantic import ValidationError

from apps.ui.common import get_store, notify, require_session
from domain.value_objects import Notice
from services.auth.forms import EditUserForm, SignupForm, form_errors, signup_error_message
from services.backend.base import BackendError
from services.registry.users import (
    UserAdminError,
    create_user,
    delete_user,
    filter_users,
    list_users,
    toggle_admin,
    update_user,
    user_stats,
)

st.set_page_config(page_title="Gerenciamento de Usuários", layout="wide")

session = require_session(admin=True)
store = get_store()
st.title("Gerenciamento de Usuários")

try:
    with st.spinner("Carregando..."):
        users = list_users(store)
except BackendError as e:
    st.error(f"Erro ao carregar usuários: {e.detail}")
    st.stop()

stats = user_stats(users)
c1, c2, c3 = st.columns(3)
c1.metric("Total de Usuários", stats.total)
c2.metric("Administradores", stats.admins)
c3.metric("Novos (7 dias)", stats.recent)

with st.expander("Criar Novo Usuário"):
    with st.form("create_user", clear_on_submit=True):
        full_name = st.text_input("Nome Completo", key="new_user_name")
        email = st.text_input("Email", key="new_user_email")
        password = st.text_input("Senha", type="password", key="new_user_password")
        confirm = st.text_input("Confirmar Senha", type="password", key="new_user_confirm")
        if st.form_submit_button("Criar"):
            try:
                form = SignupForm(
                    full_name=full_name, email=email, password=password, confirm_password=confirm
                )
                create_user(store, form)
            except ValidationError as e:
                notify(Notice("error", "Erro", next(iter(form_errors(e).values()))))
            except BackendError as e:
                notify(Notice("error", "Erro", signup_error_message(e.detail)))
            else:
                notify(Notice("success", "Sucesso", "Usuário criado com sucesso"))
            st.rerun()

term = st.text_input("Buscar por nome ou email...")
visible = filter_users(users, term)

st.dataframe(
    pd.DataFrame(
        [
            {
                "Nome": (u.full_name or "-") + (" (Você)" if u.id == session.user_id else ""),
                "Email": u.email,
                "Papéis": ", ".join(u.roles),
                "Criado em": u.created_at.strftime("%d/%m/%Y"),
            }
            for u in visible
        ]
    ),
    hide_index=True,
    use_container_width=True,
)

if not visible:
    st.stop()

labels = {u.id: f"{u.full_name or '-'} <{u.email}>" for u in visible}
selected_id = st.selectbox("Usuário", list(labels), format_func=labels.get)
selected = next(u for u in visible if u.id == selected_id)
is_self = selected.id == session.user_id

col_admin, col_delete = st.columns(2)
with col_admin:
    label = "Remover Admin" if selected.is_admin else "Tornar Admin"
    if st.button(label, disabled=is_self):
        try:
            notify(Notice("success", "Sucesso", toggle_admin(store, session, selected)))
        except UserAdminError as e:
            notify(Notice("error", "Erro", str(e)))
        except BackendError:
            notify(Notice("error", "Erro", "Erro ao atualizar privilégios"))
        st.rerun()

with col_delete:
    confirm_delete = st.checkbox(
        f"Confirmo a exclusão de {selected.full_name or selected.email}", disabled=is_self
    )
    if st.button("Excluir Usuário", disabled=is_self or not confirm_delete):
        try:
            delete_user(store, session, selected.id)
        except (UserAdminError, BackendError) as e:
            msg = getattr(e, "detail", None) or str(e) or "Erro ao excluir usuário"
            notify(Notice("error", "Erro", msg))
        else:
            notify(Notice("success", "Sucesso", "Usuário excluído com sucesso"))
        st.rerun()

st.subheader("Editar Usuário")
with st.form(f"edit_{selected.id}"):
    st.text_input(
        "Email",
        value=selected.email,
        disabled=True,
        help="O email não pode ser alterado",
        key=f"edit_email_{selected.id}",
    )
    new_name = st.text_input(
        "Nome Completo", value=selected.full_name or "", key=f"edit_name_{selected.id}"
    )
    new_password = st.text_input(
        "Nova Senha (opcional)", type="password", help="Deixe em branco para não alterar a senha"
    )
    confirm_password = st.text_input("Confirmar Nova Senha", type="password")
    if st.form_submit_button("Salvar Alterações"):
        try:
            form = EditUserForm(
                full_name=new_name, new_password=new_password, confirm_password=confirm_password
            )
            changed_password = update_user(store, selected.id, form)
        except ValidationError as e:
            notify(Notice("error", "Erro", next(iter(form_errors(e).values()))))
        except BackendError as e:
            notify(Notice("error", "Erro", e.detail or "Erro ao atualizar usuário"))
        else:
            notify(
                Notice(
                    "success",
                    "Sucesso",
                    "Usuário e senha atualizados com sucesso"
                    if changed_password
                    else "Usuário atualizado com sucesso",
                )
            )
        st.rerun()
