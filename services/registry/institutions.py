from __future__ import annotations

import logging

from domain.models import Institution
from services.backend.base import DataStore

logger = logging.getLogger(__name__)

TABLE = "institutions"


class InstitutionError(Exception): ...


def list_institutions(store: DataStore) -> list[Institution]:
    return [Institution(**row) for row in store.list_records(TABLE, order="name")]


def _clean(name: str, store: DataStore, keep_id: str | None = None) -> str:
    name = (name or "").strip()
    if not name:
        raise InstitutionError("Informe o nome da instituição.")
    taken = {i.name for i in list_institutions(store) if i.id != keep_id}
    if name in taken:
        raise InstitutionError(f"Instituição '{name}' já cadastrada.")
    return name


def add_institution(store: DataStore, name: str) -> Institution:
    name = _clean(name, store)
    row = store.insert_record(TABLE, {"name": name})
    logger.info("institution added: %s", name)
    return Institution(**row)


def rename_institution(store: DataStore, institution_id: str, name: str) -> Institution:
    name = _clean(name, store, keep_id=institution_id)
    rows = store.update_record(TABLE, {"name": name}, {"id": institution_id})
    if not rows:
        raise InstitutionError("Instituição não encontrada.")
    return Institution(**rows[0])


def delete_institution(store: DataStore, institution_id: str) -> None:
    if not store.delete_record(TABLE, {"id": institution_id}):
        raise InstitutionError("Instituição não encontrada.")
    logger.info("institution deleted: %s", institution_id)
