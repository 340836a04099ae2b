from __future__ import annotations

from typing import Any, Protocol

from domain.value_objects import SessionContext

Record = dict[str, Any]


class BackendError(Exception):
    """Non-2xx answer (or no answer, status 0) from the data/auth service."""

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{status_code}: {detail}")


class DataStore(Protocol):
    """Capabilities the pages and the form pipeline need from the backend."""

    def list_records(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order: str | None = None,
        desc: bool = False,
    ) -> list[Record]: ...

    def insert_record(self, table: str, values: Record) -> Record: ...

    def update_record(self, table: str, values: Record, filters: dict[str, Any]) -> list[Record]: ...

    def delete_record(self, table: str, filters: dict[str, Any]) -> int: ...

    def call_rpc(self, name: str) -> list[Record]: ...

    def sign_in(self, email: str, password: str) -> SessionContext: ...

    def sign_up(self, email: str, password: str, full_name: str) -> Record: ...

    def sign_out(self) -> None: ...

    def get_session(self) -> SessionContext | None: ...

    def create_user(self, email: str, password: str, full_name: str) -> Record: ...

    def set_password(self, user_id: str, password: str) -> None: ...
