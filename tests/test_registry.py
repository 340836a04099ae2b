from datetime import datetime, timedelta, timezone

import pytest

from conftest import FakeStore
from domain.models import UserProfile
from services.auth.forms import EditUserForm, SignupForm
from services.registry.history import format_timestamp, list_history, status_label
from services.registry.institutions import (
    InstitutionError,
    add_institution,
    delete_institution,
    list_institutions,
    rename_institution,
)
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

NOW = datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc)


# --- institutions ---


def test_add_institution_trims_and_rejects_duplicates(store):
    inst = add_institution(store, "  Nubank ")
    assert inst.name == "Nubank"
    assert "Nubank" in [i.name for i in list_institutions(store)]

    with pytest.raises(InstitutionError):
        add_institution(store, "XP")
    with pytest.raises(InstitutionError):
        add_institution(store, "   ")


def test_rename_and_delete_institution(store):
    assert rename_institution(store, "i-1", " XP Investimentos ").name == "XP Investimentos"
    # keeping its own name is not a duplicate
    assert rename_institution(store, "i-2", "BTG").name == "BTG"
    with pytest.raises(InstitutionError):
        rename_institution(store, "i-2", "XP Investimentos")

    delete_institution(store, "i-2")
    assert [i.name for i in list_institutions(store)] == ["XP Investimentos"]
    with pytest.raises(InstitutionError):
        delete_institution(store, "i-2")


# --- users ---


@pytest.fixture
def user_store():
    return FakeStore(
        tables={
            "profiles": [
                {"id": "u-admin", "email": "root@example.com", "full_name": "Root", "created_at": NOW - timedelta(days=30)},
                {"id": "u-1", "email": "ana@example.com", "full_name": "Ana Souza", "created_at": NOW - timedelta(days=2)},
                {"id": "u-2", "email": "bruno@corp.com", "full_name": None, "created_at": NOW - timedelta(days=8)},
            ],
            "user_roles": [
                {"id": "r-1", "user_id": "u-admin", "role": "admin"},
                {"id": "r-2", "user_id": "u-admin", "role": "user"},
                {"id": "r-3", "user_id": "u-1", "role": "user"},
            ],
        }
    )


def test_list_users_joins_roles_newest_first(user_store):
    users = list_users(user_store)
    assert [u.id for u in users] == ["u-1", "u-2", "u-admin"]
    assert users[0].roles == ["user"]
    assert users[1].roles == []
    assert users[2].is_admin


def test_filter_users_by_name_or_email(user_store):
    users = list_users(user_store)
    assert [u.id for u in filter_users(users, "SOUZA")] == ["u-1"]
    assert [u.id for u in filter_users(users, "corp")] == ["u-2"]
    assert len(filter_users(users, "")) == 3


def test_user_stats(user_store):
    stats = user_stats(list_users(user_store), now=NOW)
    assert (stats.total, stats.admins, stats.recent) == (3, 1, 1)


def test_user_stats_accepts_naive_timestamps():
    users = [UserProfile(id="x", email="x@y.z", created_at=datetime(2024, 3, 19))]
    assert user_stats(users, now=NOW).recent == 1


def test_toggle_admin_grants_and_revokes(user_store, admin_session):
    ana = next(u for u in list_users(user_store) if u.id == "u-1")
    assert toggle_admin(user_store, admin_session, ana) == "Usuário promovido a admin"
    ana = next(u for u in list_users(user_store) if u.id == "u-1")
    assert ana.is_admin

    assert toggle_admin(user_store, admin_session, ana) == "Privilégios de admin removidos"
    ana = next(u for u in list_users(user_store) if u.id == "u-1")
    assert ana.roles == ["user"]


def test_admin_cannot_change_or_delete_self(user_store, admin_session):
    me = next(u for u in list_users(user_store) if u.id == "u-admin")
    with pytest.raises(UserAdminError):
        toggle_admin(user_store, admin_session, me)
    with pytest.raises(UserAdminError):
        delete_user(user_store, admin_session, "u-admin")


def test_update_user_name_and_optional_password(user_store):
    assert update_user(user_store, "u-2", EditUserForm(full_name="Bruno")) is False
    assert user_store.passwords == {}

    assert update_user(
        user_store, "u-2", EditUserForm(full_name="Bruno", new_password="secret1", confirm_password="secret1")
    )
    assert user_store.passwords["u-2"] == "secret1"
    bruno = next(u for u in list_users(user_store) if u.id == "u-2")
    assert bruno.full_name == "Bruno"


def test_create_and_delete_user(user_store, admin_session):
    row = create_user(
        user_store,
        SignupForm(full_name="Carla", email="carla@example.com", password="secret1", confirm_password="secret1"),
    )
    assert any(u.email == "carla@example.com" for u in list_users(user_store))

    delete_user(user_store, admin_session, row["id"])
    assert all(u.email != "carla@example.com" for u in list_users(user_store))
    with pytest.raises(UserAdminError):
        delete_user(user_store, admin_session, row["id"])


# --- history ---


def test_history_is_scoped_sorted_and_normalized(session):
    store = FakeStore(
        tables={
            "submissions": [
                {"id": "s-1", "user_id": "u-1", "created_at": NOW - timedelta(days=1), "cliente": "Acme", "instituicao": "XP", "competencia": "02/2024", "tipos": ["Batedor", 3, None], "status": "success"},
                {"id": "s-2", "user_id": "u-1", "created_at": NOW, "cliente": "Beta", "instituicao": "BTG", "competencia": "03/2024", "tipos": "oops", "status": "pending"},
                {"id": "s-3", "user_id": "u-9", "created_at": NOW, "cliente": "Other", "instituicao": "XP", "status": "error"},
            ]
        }
    )
    subs = list_history(store, session)
    assert [s.id for s in subs] == ["s-2", "s-1"]
    assert subs[0].tipos == []
    assert subs[1].tipos == ["Batedor"]


@pytest.mark.parametrize(
    "status, label",
    [("pending", "Pendente"), ("success", "Sucesso"), ("error", "Erro"), ("queued", "queued")],
)
def test_status_label(status, label):
    assert status_label(status) == label


def test_format_timestamp_naive_is_utc():
    assert format_timestamp(datetime(2024, 3, 5, 9, 7), tz=timezone.utc) == "05/03/2024 às 09:07"


def test_format_timestamp_converts_to_local_zone():
    sao_paulo = timezone(timedelta(hours=-3))
    stored = datetime(2024, 3, 5, 12, 7, tzinfo=timezone.utc)
    assert format_timestamp(stored, tz=sao_paulo) == "05/03/2024 às 09:07"
    assert format_timestamp(datetime(2024, 3, 5, 1, 30), tz=sao_paulo) == "04/03/2024 às 22:30"
