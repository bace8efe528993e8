from __future__ import annotations

from dataclasses import dataclass

from .enums import Role


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller, passed explicitly into every core operation."""

    user_id: int
    role: Role
    school_id: int

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
