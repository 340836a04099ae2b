from __future__ import annotations

import time
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
ALGO = "HS256"


class TokenError(Exception): ...


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)


def create_access_token(sub: str, minutes: int | None = None, secret: str | None = None) -> str:
    now = int(time.time())
    minutes = minutes if minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MIN
    payload = {"sub": sub, "iat": now, "exp": now + minutes * 60}
    return jwt.encode(payload, secret or settings.SECRET_KEY, algorithm=ALGO)


def decode_token(tok: str, secret: str | None = None) -> dict[str, Any]:
    try:
        return jwt.decode(tok, secret or settings.SECRET_KEY, algorithms=[ALGO])
    except JWTError as e:
        raise TokenError("invalid or expired token") from e
