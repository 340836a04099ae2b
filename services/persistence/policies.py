"""
Row policies for /records, applied before the repository is called.

Non-admin callers are pinned to their own rows by overriding filters/values,
so a forged user_id in the query string has no effect.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

Action = Literal["read", "insert", "update", "delete"]


class PolicyError(Exception): ...


@dataclass(frozen=True)
class Principal:
    user_id: str
    email: str = ""
    roles: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_admin(self) -> bool:
        return "admin" in self.roles


PROFILE_EDITABLE = {"full_name"}


def apply_policy(
    table: str,
    action: Action,
    user: Principal,
    filters: dict[str, Any] | None = None,
    values: dict[str, Any] | None = None,
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Return the (filters, values) the caller is allowed to use, or raise PolicyError."""
    filters = dict(filters or {})
    values = dict(values or {})

    if table == "institutions":
        return filters, values

    if table == "submissions":
        if action == "read":
            if not user.is_admin:
                filters["user_id"] = user.user_id
        elif action == "insert":
            values["user_id"] = user.user_id
        elif not user.is_admin:
            raise PolicyError("only admins can change submissions")
        return filters, values

    if table == "profiles":
        if action == "insert":
            raise PolicyError("profiles are created through signup")
        if action == "delete" and not user.is_admin:
            raise PolicyError("only admins can delete users")
        if action == "update":
            extra = set(values) - PROFILE_EDITABLE
            if extra:
                raise PolicyError(f"read-only column(s): {', '.join(sorted(extra))}")
        if not user.is_admin:
            filters["id"] = user.user_id
        return filters, values

    if table == "user_roles":
        if action == "read":
            if not user.is_admin:
                filters["user_id"] = user.user_id
            return filters, values
        if not user.is_admin:
            raise PolicyError("only admins can change roles")
        return filters, values

    raise PolicyError(f"unknown table: {table}")
