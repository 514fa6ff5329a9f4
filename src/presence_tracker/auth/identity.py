from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..core.enums import Role


@dataclass(frozen=True)
class Identity:
    """A verified caller: who they are and what role they act with."""

    employee_id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class IdentityProvider(Protocol):
    """External identity capability consumed by the gate.

    ``verify`` returns the employee id behind a bearer token, or None / raises
    InvalidTokenError when it cannot. ``role_of`` returns None when unmapped.
    """

    def verify(self, token: str) -> Optional[str]:
        raise NotImplementedError

    def role_of(self, employee_id: str) -> Optional[Role]:
        raise NotImplementedError


class RoleRepository(Protocol):
    def get_role(self, employee_id: str) -> Optional[Role]:
        raise NotImplementedError

    def set_role(self, employee_id: str, role: Role) -> None:
        raise NotImplementedError
