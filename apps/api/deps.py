from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from core.config import settings
from core.security import TokenError, decode_token
from services.persistence.policies import Principal
from services.persistence.postgres import PostgresRepository, RepositoryError

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")


def get_settings():
    """Provides application settings/config globally."""
    return settings


def get_repo() -> PostgresRepository:
    """Dependency for the Postgres repository."""
    return PostgresRepository(settings.DATABASE_URL)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    repo: PostgresRepository = Depends(get_repo),
) -> Principal:
    try:
        user_id = decode_token(token)["sub"]
    except (TokenError, KeyError):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "invalid or expired token")
    try:
        profile = repo.get_profile(user_id)
        roles = repo.roles_for(user_id) if profile else []
    except RepositoryError as e:
        raise HTTPException(500, str(e)) from e
    if not profile:
        # account deleted after the token was issued
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "user not found")
    return Principal(user_id=str(profile["id"]), email=profile["email"], roles=tuple(roles))


def require_admin(user: Principal = Depends(get_current_user)) -> Principal:
    if not user.is_admin:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "admin only")
    return user
