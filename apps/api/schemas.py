from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class SignupIn(BaseModel):
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=2, max_length=100)


class PasswordIn(BaseModel):
    password: str = Field(min_length=6)


class ProfileOut(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    created_at: Optional[datetime] = None


class SessionOut(ProfileOut):
    roles: List[str] = []


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
