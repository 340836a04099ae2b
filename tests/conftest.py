from __future__ import annotations

import uuid
from datetime import datetime, timezone

import httpx
import pytest

from domain.models import StatementType, UploadedFile
from domain.value_objects import Notice, SessionContext
from services.backend.base import BackendError
from services.extratos.form import ExtratosForm

WEBHOOK = "https://hooks.example.test/extrato"


def _matches(row: dict, filters: dict | None) -> bool:
    return all(str(row.get(k)) == str(v) for k, v in (filters or {}).items())


class FakeStore:
    """In-memory DataStore; names in `fail` make that method raise BackendError."""

    def __init__(self, tables=None, rpc=None, session=None):
        self.tables: dict[str, list[dict]] = {
            k: [dict(r) for r in rows] for k, rows in (tables or {}).items()
        }
        self.rpc = rpc or {}
        self.session = session
        self.fail: set[str] = set()
        self.passwords: dict[str, str] = {}

    def _check(self, op: str) -> None:
        if op in self.fail:
            raise BackendError(500, f"{op} failed")

    def list_records(self, table, filters=None, order=None, desc=False):
        self._check("list_records")
        rows = [dict(r) for r in self.tables.get(table, []) if _matches(r, filters)]
        if order:
            rows.sort(key=lambda r: r.get(order), reverse=desc)
        return rows

    def insert_record(self, table, values):
        self._check("insert_record")
        row = {"id": str(uuid.uuid4()), **values}
        self.tables.setdefault(table, []).append(row)
        return dict(row)

    def update_record(self, table, values, filters):
        self._check("update_record")
        out = []
        for row in self.tables.get(table, []):
            if _matches(row, filters):
                row.update(values)
                out.append(dict(row))
        return out

    def delete_record(self, table, filters):
        self._check("delete_record")
        rows = self.tables.get(table, [])
        keep = [r for r in rows if not _matches(r, filters)]
        self.tables[table] = keep
        return len(rows) - len(keep)

    def call_rpc(self, name):
        self._check("call_rpc")
        return self.rpc.get(name, [])

    def sign_in(self, email, password):
        self._check("sign_in")
        self.session = SessionContext(user_id="u-1", email=email, access_token="tok")
        return self.session

    def sign_up(self, email, password, full_name):
        self._check("sign_up")
        return {"id": "u-new", "email": email, "full_name": full_name}

    def sign_out(self):
        self.session = None

    def get_session(self):
        return self.session

    def create_user(self, email, password, full_name):
        self._check("create_user")
        row = self.insert_record(
            "profiles",
            {"email": email, "full_name": full_name, "created_at": datetime.now(timezone.utc)},
        )
        self.passwords[row["id"]] = password
        return row

    def set_password(self, user_id, password):
        self._check("set_password")
        self.passwords[user_id] = password


class NoticeRecorder:
    def __init__(self):
        self.notices: list[Notice] = []

    def __call__(self, notice: Notice) -> None:
        self.notices.append(notice)

    @property
    def last(self) -> Notice:
        return self.notices[-1]


class WebhookStub:
    """MockTransport handler that records requests and replays a canned answer."""

    def __init__(self, response: httpx.Response | None = None, exc: Exception | None = None):
        self.response = response or httpx.Response(200, text="ok")
        self.exc = exc
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return self.response

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


@pytest.fixture
def session() -> SessionContext:
    return SessionContext(
        user_id="u-1", email="ana@example.com", access_token="tok", full_name="Ana", roles=("user",)
    )


@pytest.fixture
def admin_session() -> SessionContext:
    return SessionContext(
        user_id="u-admin",
        email="root@example.com",
        access_token="tok",
        full_name="Root",
        roles=("admin", "user"),
    )


@pytest.fixture
def store(session) -> FakeStore:
    return FakeStore(
        tables={
            "institutions": [
                {"id": "i-1", "name": "XP"},
                {"id": "i-2", "name": "BTG"},
            ]
        },
        rpc={"get_unique_clients": [{"Cliente": "Acme"}, {"Cliente": "Beta"}]},
        session=session,
    )


@pytest.fixture
def notices() -> NoticeRecorder:
    return NoticeRecorder()


@pytest.fixture
def pdf() -> UploadedFile:
    return UploadedFile(name="a.pdf", content_type="application/pdf", data=b"%PDF-1.4 test")


def make_form(store, notices, stub: WebhookStub) -> ExtratosForm:
    return ExtratosForm(store, notices, webhook_url=WEBHOOK, http_client=stub.client())


def fill(form: ExtratosForm, pdf: UploadedFile) -> None:
    form.set_files([pdf])
    form.set_client("Acme")
    form.toggle_statement_type(StatementType.PERFORMANCE, True)
    form.set_institution("XP")
    form.set_competence("03/2024")
