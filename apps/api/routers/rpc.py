from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from apps.api.deps import get_current_user, get_repo
from services.persistence.postgres import PostgresRepository, RepositoryError

router = APIRouter(prefix="/rpc", tags=["rpc"])

# rpc name -> repository method
RPCS = {"get_unique_clients": "unique_clients"}


@router.get("/{name}")
def call_rpc(
    name: str,
    user=Depends(get_current_user),
    repo: PostgresRepository = Depends(get_repo),
) -> list[dict[str, Any]]:
    if name not in RPCS:
        raise HTTPException(404, f"unknown rpc: {name}")
    try:
        return getattr(repo, RPCS[name])()
    except RepositoryError as e:
        raise HTTPException(500, str(e)) from e
