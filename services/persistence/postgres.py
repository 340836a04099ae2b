from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import psycopg2
from psycopg2 import sql
from psycopg2.extras import Json, RealDictCursor

from core.config import settings

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")

# exposed columns per table; password_hash is only reachable through the auth queries
TABLES: dict[str, set[str]] = {
    "institutions": {"id", "name", "created_at"},
    "submissions": {
        "id",
        "user_id",
        "created_at",
        "cliente",
        "nome_conta",
        "instituicao",
        "moeda",
        "competencia",
        "tipos",
        "status",
    },
    "profiles": {"id", "email", "full_name", "created_at"},
    "user_roles": {"id", "user_id", "role"},
}
JSON_COLUMNS = {("submissions", "tipos")}


class RepositoryError(Exception): ...


def pg_conn(dsn: str | None = None):
    """One-liner Postgres connection (caller must close)."""
    return psycopg2.connect(dsn or settings.DATABASE_URL)


def _columns(table: str, names) -> list[str]:
    if table not in TABLES:
        raise RepositoryError(f"unknown table: {table}")
    bad = sorted(set(names) - TABLES[table])
    if bad:
        raise RepositoryError(f"unknown column(s) for {table}: {', '.join(bad)}")
    return list(names)


def _adapt(table: str, values: dict[str, Any]) -> dict[str, Any]:
    return {k: Json(v) if (table, k) in JSON_COLUMNS else v for k, v in values.items()}


def _where(filters: dict[str, Any]) -> sql.Composable:
    if not filters:
        return sql.SQL("")
    parts = [sql.SQL("{} = %s").format(sql.Identifier(k)) for k in filters]
    return sql.SQL(" where ") + sql.SQL(" and ").join(parts)


def _returning(table: str) -> sql.Composable:
    return sql.SQL(" returning ") + sql.SQL(", ").join(
        sql.Identifier(c) for c in sorted(TABLES[table])
    )


class PostgresRepository:
    """Row CRUD over the whitelisted tables plus the auth queries."""

    def __init__(self, dsn: str | None = None):
        self.dsn = dsn or settings.DATABASE_URL

    def _run(self, query, params=(), fetch: str = "all"):
        conn = pg_conn(self.dsn)
        try:
            with conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(query, params)
                if fetch == "all":
                    return [dict(r) for r in cur.fetchall()]
                if fetch == "one":
                    row = cur.fetchone()
                    return dict(row) if row else None
                return cur.rowcount
        except psycopg2.Error as e:
            logger.exception("query failed")
            raise RepositoryError(f"db error: {e}") from e
        finally:
            conn.close()

    # --- generic records ---

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order: str | None = None,
        desc: bool = False,
    ) -> list[dict[str, Any]]:
        filters = filters or {}
        _columns(table, filters)
        cols = sorted(TABLES[table])
        query = sql.SQL("select {} from {}").format(
            sql.SQL(", ").join(sql.Identifier(c) for c in cols), sql.Identifier(table)
        ) + _where(filters)
        if order:
            _columns(table, [order])
            query += sql.SQL(" order by {} {}").format(
                sql.Identifier(order), sql.SQL("desc" if desc else "asc")
            )
        return self._run(query, tuple(filters.values()))

    def insert(self, table: str, values: dict[str, Any]) -> dict[str, Any]:
        cols = _columns(table, values)
        if not cols:
            raise RepositoryError("nothing to insert")
        query = (
            sql.SQL("insert into {} ({}) values ({})").format(
                sql.Identifier(table),
                sql.SQL(", ").join(sql.Identifier(c) for c in cols),
                sql.SQL(", ").join(sql.Placeholder() for _ in cols),
            )
            + _returning(table)
        )
        return self._run(query, tuple(_adapt(table, values).values()), fetch="one")

    def update(
        self, table: str, values: dict[str, Any], filters: dict[str, Any]
    ) -> list[dict[str, Any]]:
        cols = _columns(table, values)
        _columns(table, filters)
        if not cols or not filters:
            raise RepositoryError("update needs values and at least one filter")
        query = (
            sql.SQL("update {} set {}").format(
                sql.Identifier(table),
                sql.SQL(", ").join(sql.SQL("{} = %s").format(sql.Identifier(c)) for c in cols),
            )
            + _where(filters)
            + _returning(table)
        )
        params = tuple(_adapt(table, values).values()) + tuple(filters.values())
        return self._run(query, params)

    def delete(self, table: str, filters: dict[str, Any]) -> int:
        _columns(table, filters)
        if not filters:
            raise RepositoryError("delete needs at least one filter")
        query = sql.SQL("delete from {}").format(sql.Identifier(table)) + _where(filters)
        return self._run(query, tuple(filters.values()), fetch="count")

    def unique_clients(self) -> list[dict[str, Any]]:
        return self._run(sql.SQL('select "Cliente" from get_unique_clients()'))

    # --- auth ---

    def get_credentials(self, email: str) -> dict[str, Any] | None:
        return self._run(
            "select id, email, full_name, password_hash from profiles where lower(email) = lower(%s)",
            (email,),
            fetch="one",
        )

    def get_profile(self, user_id: str) -> dict[str, Any] | None:
        rows = self.select("profiles", {"id": user_id})
        return rows[0] if rows else None

    def roles_for(self, user_id: str) -> list[str]:
        return [r["role"] for r in self.select("user_roles", {"user_id": user_id})]

    def create_user(
        self, email: str, password_hash: str, full_name: str, roles: list[str]
    ) -> dict[str, Any]:
        conn = pg_conn(self.dsn)
        try:
            with conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(
                    """
                    insert into profiles (email, full_name, password_hash)
                    values (%s, %s, %s)
                    returning id, email, full_name, created_at
                    """,
                    (email, full_name, password_hash),
                )
                profile = dict(cur.fetchone())
                for role in roles:
                    cur.execute(
                        "insert into user_roles (user_id, role) values (%s, %s)",
                        (profile["id"], role),
                    )
            return profile
        except psycopg2.Error as e:
            logger.exception("create_user failed")
            raise RepositoryError(f"db error: {e}") from e
        finally:
            conn.close()

    def set_password_hash(self, user_id: str, password_hash: str) -> bool:
        n = self._run(
            "update profiles set password_hash = %s where id = %s",
            (password_hash, user_id),
            fetch="count",
        )
        return n > 0


def init_schema(dsn: str | None = None, institutions: list[str] | None = None) -> None:
    """Apply schema.sql and seed the default institutions (idempotent)."""
    conn = pg_conn(dsn)
    try:
        with conn, conn.cursor() as cur:
            cur.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
            for name in institutions if institutions is not None else settings.DEFAULT_INSTITUTIONS:
                if name.strip():
                    cur.execute(
                        "insert into institutions (name) values (%s) on conflict (name) do nothing",
                        (name.strip(),),
                    )
    finally:
        conn.close()
    logger.info("schema ready")


if __name__ == "__main__":
    from core.logging import configure_logging

    configure_logging()
    init_schema()
