from __future__ import annotations

import logging
from typing import Any

import httpx

from domain.value_objects import SessionContext
from services.backend.base import BackendError, Record

logger = logging.getLogger(__name__)


class BackendClient:
    """httpx client for the data/auth service in apps/api (implements DataStore)."""

    def __init__(
        self,
        base_url: str,
        session: SessionContext | None = None,
        client: httpx.Client | None = None,
        timeout_s: int = 30,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self._client = client or httpx.Client(base_url=self.base_url, timeout=timeout_s)

    # --- plumbing ---

    def _headers(self, token: str | None = None) -> dict[str, str]:
        tok = token or (self.session.access_token if self.session else None)
        return {"Authorization": f"Bearer {tok}"} if tok else {}

    def _request(self, method: str, path: str, token: str | None = None, **kw) -> Any:
        try:
            r = self._client.request(method, path, headers=self._headers(token), **kw)
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise BackendError(0, str(e) or "connection failed") from e
        if not r.is_success:
            try:
                detail = r.json().get("detail", r.text)
            except ValueError:
                detail = r.text
            raise BackendError(r.status_code, str(detail or r.reason_phrase))
        if not r.content:
            return None
        return r.json()

    # --- records ---

    def list_records(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order: str | None = None,
        desc: bool = False,
    ) -> list[Record]:
        params: dict[str, Any] = dict(filters or {})
        if order:
            params["order"] = order
            params["desc"] = str(desc).lower()
        return self._request("GET", f"/records/{table}", params=params) or []

    def insert_record(self, table: str, values: Record) -> Record:
        return self._request("POST", f"/records/{table}", json=values)

    def update_record(self, table: str, values: Record, filters: dict[str, Any]) -> list[Record]:
        return self._request("PATCH", f"/records/{table}", params=filters, json=values) or []

    def delete_record(self, table: str, filters: dict[str, Any]) -> int:
        res = self._request("DELETE", f"/records/{table}", params=filters) or {}
        return int(res.get("deleted", 0))

    def call_rpc(self, name: str) -> list[Record]:
        return self._request("GET", f"/rpc/{name}") or []

    # --- auth ---

    def sign_in(self, email: str, password: str) -> SessionContext:
        tok = self._request("POST", "/auth/token", data={"username": email, "password": password})
        access_token = tok["access_token"]
        me = self._request("GET", "/auth/session", token=access_token)
        self.session = SessionContext(
            user_id=me["id"],
            email=me["email"],
            access_token=access_token,
            full_name=me.get("full_name"),
            roles=tuple(me.get("roles") or ()),
        )
        logger.info("signed in as %s", email)
        return self.session

    def sign_up(self, email: str, password: str, full_name: str) -> Record:
        return self._request(
            "POST",
            "/auth/signup",
            json={"email": email, "password": password, "full_name": full_name},
        )

    def sign_out(self) -> None:
        # tokens are stateless; dropping the context ends the session
        self.session = None

    def get_session(self) -> SessionContext | None:
        return self.session

    # --- admin ---

    def create_user(self, email: str, password: str, full_name: str) -> Record:
        return self._request(
            "POST",
            "/admin/users",
            json={"email": email, "password": password, "full_name": full_name},
        )

    def set_password(self, user_id: str, password: str) -> None:
        self._request("PUT", f"/admin/users/{user_id}/password", json={"password": password})
