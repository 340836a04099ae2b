from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from apps.api.deps import get_repo, require_admin
from apps.api.routers.auth import register_user
from apps.api.schemas import PasswordIn, ProfileOut, SignupIn
from core.security import hash_password
from domain.models import Role
from services.persistence.policies import Principal
from services.persistence.postgres import PostgresRepository, RepositoryError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/users", response_model=ProfileOut, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: SignupIn,
    admin: Principal = Depends(require_admin),
    repo: PostgresRepository = Depends(get_repo),
):
    profile = register_user(repo, payload, [Role.USER.value])
    logger.info("admin %s created user %s", admin.email, payload.email)
    return profile


@router.put("/users/{user_id}/password", status_code=status.HTTP_204_NO_CONTENT)
def reset_password(
    user_id: str,
    payload: PasswordIn,
    admin: Principal = Depends(require_admin),
    repo: PostgresRepository = Depends(get_repo),
) -> None:
    try:
        updated = repo.set_password_hash(user_id, hash_password(payload.password))
    except RepositoryError as e:
        raise HTTPException(500, str(e)) from e
    if not updated:
        raise HTTPException(404, "user not found")
    logger.info("admin %s reset password of %s", admin.email, user_id)
