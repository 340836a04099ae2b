"""
Login / signup / edit-user input models.
Messages are user-facing (pt-BR) and surfaced next to the offending field.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ValidationError, field_validator, model_validator

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD = 6


def _email(v: str) -> str:
    v = (v or "").strip()
    if not EMAIL_RE.match(v):
        raise ValueError("Email inválido")
    if len(v) > 255:
        raise ValueError("Email deve ter no máximo 255 caracteres")
    return v


def _password(v: str) -> str:
    if len(v or "") < MIN_PASSWORD:
        raise ValueError(f"Senha deve ter no mínimo {MIN_PASSWORD} caracteres")
    return v


class LoginForm(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return _password(v)


class SignupForm(BaseModel):
    full_name: str
    email: str
    password: str
    confirm_password: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return _password(v)

    @field_validator("full_name")
    @classmethod
    def check_name(cls, v: str) -> str:
        v = (v or "").strip()
        if len(v) < 2:
            raise ValueError("Nome deve ter no mínimo 2 caracteres")
        if len(v) > 100:
            raise ValueError("Nome deve ter no máximo 100 caracteres")
        return v

    @model_validator(mode="after")
    def passwords_match(self) -> "SignupForm":
        if self.password != self.confirm_password:
            raise ValueError("Senhas não coincidem")
        return self


class EditUserForm(BaseModel):
    full_name: str
    new_password: str = ""
    confirm_password: str = ""

    @field_validator("full_name")
    @classmethod
    def check_name(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Nome não pode estar vazio")
        if len(v) > 100:
            raise ValueError("Nome deve ter no máximo 100 caracteres")
        return v

    @field_validator("new_password")
    @classmethod
    def check_new_password(cls, v: str) -> str:
        if v and len(v) < MIN_PASSWORD:
            raise ValueError(f"Senha deve ter no mínimo {MIN_PASSWORD} caracteres")
        return v

    @model_validator(mode="after")
    def passwords_match(self) -> "EditUserForm":
        if self.new_password and self.new_password != self.confirm_password:
            raise ValueError("As senhas não coincidem")
        return self


def form_errors(exc: ValidationError) -> dict[str, str]:
    """Map a pydantic ValidationError to {field: message}.

    Model-level checks only compare passwords, so they land on confirm_password.
    """
    out: dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ("confirm_password",)
        ctx_err = (err.get("ctx") or {}).get("error")
        msg = str(ctx_err) if ctx_err else err.get("msg", "")
        out.setdefault(str(loc[0]), msg)
    return out


def login_error_message(detail: str) -> str:
    if "Invalid login credentials" in detail:
        return "Email ou senha incorretos"
    if "Email not confirmed" in detail:
        return "Por favor, confirme seu email antes de fazer login"
    return "Erro ao fazer login"


def signup_error_message(detail: str) -> str:
    if "User already registered" in detail:
        return "Este email já está cadastrado"
    return "Erro ao criar conta"
