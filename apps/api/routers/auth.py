from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from apps.api.deps import get_current_user, get_repo, get_settings
from apps.api.schemas import ProfileOut, SessionOut, SignupIn, TokenOut
from core.security import create_access_token, hash_password, verify_password
from domain.models import Role
from services.persistence.policies import Principal
from services.persistence.postgres import PostgresRepository, RepositoryError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _profile_out(row: dict) -> ProfileOut:
    return ProfileOut(**{**row, "id": str(row["id"])})


def register_user(repo: PostgresRepository, payload: SignupIn, roles: list[str]) -> ProfileOut:
    try:
        if repo.get_credentials(payload.email):
            raise HTTPException(status.HTTP_409_CONFLICT, "User already registered")
        row = repo.create_user(
            payload.email.strip(), hash_password(payload.password), payload.full_name.strip(), roles
        )
    except RepositoryError as e:
        raise HTTPException(500, str(e)) from e
    logger.info("user registered: %s", payload.email)
    return _profile_out(row)


@router.post("/token", response_model=TokenOut)
def login(
    form: OAuth2PasswordRequestForm = Depends(),  # noqa: B008 (FastAPI)
    repo: PostgresRepository = Depends(get_repo),
    settings=Depends(get_settings),
):
    try:
        creds = repo.get_credentials(form.username)
    except RepositoryError as e:
        raise HTTPException(500, str(e)) from e
    if not creds or not verify_password(form.password, creds.get("password_hash")):
        logger.info("failed login for %s", form.username)
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid login credentials")
    tok = create_access_token(sub=str(creds["id"]), minutes=settings.ACCESS_TOKEN_EXPIRE_MIN)
    return TokenOut(access_token=tok)


@router.post("/signup", response_model=ProfileOut, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupIn, repo: PostgresRepository = Depends(get_repo)):
    return register_user(repo, payload, [Role.USER.value])


@router.get("/session", response_model=SessionOut)
def session(
    user: Principal = Depends(get_current_user),
    repo: PostgresRepository = Depends(get_repo),
):
    try:
        profile = repo.get_profile(user.user_id)
    except RepositoryError as e:
        raise HTTPException(500, str(e)) from e
    if not profile:
        raise HTTPException(404, "user not found")
    return SessionOut(**{**profile, "id": str(profile["id"])}, roles=list(user.roles))
