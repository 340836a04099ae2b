"""Helpers shared by the Streamlit pages: backend client, session gate, notices."""

from __future__ import annotations

import streamlit as st

from core.config import settings
from core.logging import configure_logging
from domain.value_objects import Notice, SessionContext
from services.backend.client import BackendClient

_ICONS = {"success": "✅", "error": "❌", "info": "ℹ️"}


def get_store() -> BackendClient:
    if "store" not in st.session_state:
        configure_logging()
        st.session_state.store = BackendClient(settings.API_URL)
    return st.session_state.store


def current_session() -> SessionContext | None:
    return get_store().get_session()


def notify(notice: Notice) -> None:
    """Queue a notice; it is shown on the next render, so it survives st.rerun()."""
    st.session_state.setdefault("notices", []).append(notice)


def flush_notices() -> None:
    for n in st.session_state.pop("notices", []):
        st.toast(f"**{n.title}** {n.description}", icon=_ICONS.get(n.level))


def sign_out() -> None:
    get_store().sign_out()
    for key in ("extratos_form", "notices"):
        st.session_state.pop(key, None)


def sidebar(session: SessionContext) -> None:
    with st.sidebar:
        st.markdown(f"**{session.display_name}**")
        if session.is_admin:
            st.caption("admin")
        if st.button("Sair"):
            sign_out()
            st.rerun()


def require_session(admin: bool = False) -> SessionContext:
    """Stop the page unless someone is signed in (and is an admin when asked)."""
    session = current_session()
    if session is None:
        st.warning("Faça login para continuar.")
        st.page_link("Home.py", label="Ir para o login")
        st.stop()
    if admin and not session.is_admin:
        st.error("Acesso restrito a administradores.")
        st.stop()
    sidebar(session)
    flush_notices()
    return session
