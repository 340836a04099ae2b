from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True)
class FieldError:
    code: str  # "required" | "invalid_format"
    message: str


@dataclass(frozen=True)
class Notice:
    level: Literal["success", "error", "info"]
    title: str
    description: str


@dataclass(frozen=True)
class SessionContext:
    """Authenticated user, created on sign-in and dropped on sign-out."""

    user_id: str
    email: str
    access_token: str
    full_name: str | None = None
    roles: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_admin(self) -> bool:
        return "admin" in self.roles

    @property
    def display_name(self) -> str:
        return self.full_name or self.email
