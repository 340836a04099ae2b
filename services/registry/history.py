from __future__ import annotations

from datetime import datetime, timezone, tzinfo

from domain.models import Submission
from domain.value_objects import SessionContext
from services.backend.base import DataStore

STATUS_LABELS = {
    "pending": "Pendente",
    "success": "Sucesso",
    "error": "Erro",
}


def list_history(store: DataStore, session: SessionContext) -> list[Submission]:
    rows = store.list_records(
        "submissions", filters={"user_id": session.user_id}, order="created_at", desc=True
    )
    out: list[Submission] = []
    for row in rows:
        tipos = row.get("tipos")
        row = {**row, "tipos": [t for t in tipos if isinstance(t, str)] if isinstance(tipos, list) else []}
        out.append(Submission(**row))
    return out


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def format_timestamp(dt: datetime, tz: tzinfo | None = None) -> str:
    """Render a stored (UTC) timestamp in local time, or in ``tz`` when given."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz).strftime("%d/%m/%Y às %H:%M")
