from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from domain.value_objects import Notice
from services.backend.base import DataStore
from services.extratos.errors import ReferenceLoadError

logger = logging.getLogger(__name__)

Notify = Callable[[Notice], None]

CLIENTS_RPC = "get_unique_clients"


def _distinct(values: Iterable) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for v in values:
        if not isinstance(v, str) or not v or v in seen:
            continue
        seen.add(v)
        out.append(v)
    return out


def _column(rows, key: str) -> list[str]:
    return _distinct(row.get(key) for row in rows or [] if isinstance(row, dict))


def fetch_clients(store: DataStore) -> list[str]:
    try:
        return _column(store.call_rpc(CLIENTS_RPC), "Cliente")
    except Exception as e:
        raise ReferenceLoadError("Erro ao carregar clientes.") from e


def fetch_institutions(store: DataStore) -> list[str]:
    try:
        return _column(store.list_records("institutions", order="name"), "name")
    except Exception as e:
        raise ReferenceLoadError("Erro ao carregar instituições.") from e


def _load(fetch: Callable[[DataStore], list[str]], store: DataStore, notify: Notify) -> list[str]:
    try:
        return fetch(store)
    except ReferenceLoadError as e:
        logger.exception("reference data load failed")
        notify(Notice("error", "Erro", e.message))
        return []


def load_clients(store: DataStore, notify: Notify) -> list[str]:
    """Known client names; degrades to [] with a notice, never raises."""
    return _load(fetch_clients, store, notify)


def load_institutions(store: DataStore, notify: Notify) -> list[str]:
    return _load(fetch_institutions, store, notify)
