from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from domain.models import Role, UserProfile
from domain.value_objects import SessionContext
from services.auth.forms import EditUserForm, SignupForm
from services.backend.base import DataStore

logger = logging.getLogger(__name__)

RECENT_DAYS = 7


class UserAdminError(Exception): ...


@dataclass
class UserStats:
    total: int
    admins: int
    recent: int


def list_users(store: DataStore) -> list[UserProfile]:
    """Profiles (newest first) joined with their roles."""
    profiles = store.list_records("profiles", order="created_at", desc=True)
    roles = store.list_records("user_roles")
    by_user: dict[str, list[str]] = {}
    for r in roles:
        by_user.setdefault(str(r["user_id"]), []).append(r["role"])
    return [UserProfile(**p, roles=by_user.get(str(p["id"]), [])) for p in profiles]


def filter_users(users: list[UserProfile], term: str) -> list[UserProfile]:
    term = (term or "").lower()
    if not term:
        return list(users)
    return [
        u for u in users if term in (u.full_name or "").lower() or term in u.email.lower()
    ]


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def user_stats(users: list[UserProfile], now: datetime | None = None) -> UserStats:
    now = _aware(now or datetime.now(timezone.utc))
    cutoff = now - timedelta(days=RECENT_DAYS)
    return UserStats(
        total=len(users),
        admins=sum(1 for u in users if u.is_admin),
        recent=sum(1 for u in users if _aware(u.created_at) > cutoff),
    )


def _not_self(session: SessionContext, user_id: str) -> None:
    if session.user_id == str(user_id):
        raise UserAdminError("Você não pode alterar o próprio acesso.")


def toggle_admin(store: DataStore, session: SessionContext, user: UserProfile) -> str:
    _not_self(session, user.id)
    if user.is_admin:
        store.delete_record("user_roles", {"user_id": user.id, "role": Role.ADMIN.value})
        logger.info("admin role removed from %s", user.id)
        return "Privilégios de admin removidos"
    store.insert_record("user_roles", {"user_id": user.id, "role": Role.ADMIN.value})
    logger.info("admin role granted to %s", user.id)
    return "Usuário promovido a admin"


def create_user(store: DataStore, form: SignupForm) -> dict:
    return store.create_user(form.email, form.password, form.full_name)


def update_user(store: DataStore, user_id: str, form: EditUserForm) -> bool:
    """Saves the name and, when given, the new password. Returns True if the password changed."""
    store.update_record("profiles", {"full_name": form.full_name}, {"id": user_id})
    if not form.new_password:
        return False
    store.set_password(user_id, form.new_password)
    return True


def delete_user(store: DataStore, session: SessionContext, user_id: str) -> None:
    _not_self(session, user_id)
    if not store.delete_record("profiles", {"id": user_id}):
        raise UserAdminError("Usuário não encontrado.")
    logger.info("user deleted: %s", user_id)
