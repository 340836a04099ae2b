from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status

from apps.api.deps import get_current_user, get_repo
from services.persistence.policies import PolicyError, Principal, apply_policy
from services.persistence.postgres import PostgresRepository, RepositoryError

router = APIRouter(prefix="/records", tags=["records"])

RESERVED_PARAMS = {"order", "desc"}


def _filters(request: Request) -> dict[str, str]:
    """Every query parameter except order/desc is an equality filter."""
    return {k: v for k, v in request.query_params.items() if k not in RESERVED_PARAMS}


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, PolicyError):
        return HTTPException(status.HTTP_403_FORBIDDEN, str(e))
    if isinstance(e, RepositoryError) and "db error" not in str(e):
        return HTTPException(status.HTTP_400_BAD_REQUEST, str(e))
    return HTTPException(500, str(e))


@router.get("/{table}")
def list_records(
    table: str,
    request: Request,
    order: str | None = None,
    desc: bool = False,
    user: Principal = Depends(get_current_user),
    repo: PostgresRepository = Depends(get_repo),
) -> list[dict[str, Any]]:
    try:
        filters, _ = apply_policy(table, "read", user, _filters(request))
        return repo.select(table, filters, order=order, desc=desc)
    except (PolicyError, RepositoryError) as e:
        raise _http_error(e) from e


@router.post("/{table}", status_code=status.HTTP_201_CREATED)
def insert_record(
    table: str,
    values: dict[str, Any] = Body(...),  # noqa: B008 (FastAPI)
    user: Principal = Depends(get_current_user),
    repo: PostgresRepository = Depends(get_repo),
) -> dict[str, Any]:
    try:
        _, values = apply_policy(table, "insert", user, values=values)
        return repo.insert(table, values)
    except (PolicyError, RepositoryError) as e:
        raise _http_error(e) from e


@router.patch("/{table}")
def update_records(
    table: str,
    request: Request,
    values: dict[str, Any] = Body(...),  # noqa: B008 (FastAPI)
    user: Principal = Depends(get_current_user),
    repo: PostgresRepository = Depends(get_repo),
) -> list[dict[str, Any]]:
    requested = _filters(request)
    if not requested:
        raise HTTPException(400, "at least one filter is required")
    try:
        filters, values = apply_policy(table, "update", user, requested, values)
        return repo.update(table, values, filters)
    except (PolicyError, RepositoryError) as e:
        raise _http_error(e) from e


@router.delete("/{table}")
def delete_records(
    table: str,
    request: Request,
    user: Principal = Depends(get_current_user),
    repo: PostgresRepository = Depends(get_repo),
) -> dict[str, int]:
    requested = _filters(request)
    if not requested:
        raise HTTPException(400, "at least one filter is required")
    try:
        filters, _ = apply_policy(table, "delete", user, requested)
        return {"deleted": repo.delete(table, filters)}
    except (PolicyError, RepositoryError) as e:
        raise _http_error(e) from e
