from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import ForbiddenError, InvalidTokenError
from .identity import Identity, IdentityProvider

logger = logging.getLogger(__name__)


class AuthorizationGate:
    """Stateless per-request gate: token -> Identity, then role check.

    An identity without a role mapping acts as ``default_role`` (employee).
    This is fail-open on purpose and kept configurable until it is decided
    whether unmapped users should be denied instead.
    """

    def __init__(self, identity: IdentityProvider, *, default_role: Role = Role.EMPLOYEE):
        self._identity = identity
        self._default_role = default_role

    @staticmethod
    def bearer_token(header: Optional[str]) -> str:
        """Extract the token from an ``Authorization: Bearer <token>`` header."""
        parts = (header or "").split()
        if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
            raise InvalidTokenError("Missing or malformed Authorization header")
        return parts[1]

    def authenticate(self, token: str) -> Identity:
        if not token:
            raise InvalidTokenError("Missing token")

        employee_id = self._identity.verify(token)
        if not employee_id:
            raise InvalidTokenError("Token does not resolve to an identity")

        role = self._identity.role_of(employee_id)
        if role is None:
            logger.info("No role mapping for %s, defaulting to %s", employee_id, self._default_role.value)
            role = self._default_role
        return Identity(employee_id=employee_id, role=role)

    def ensure_role(self, identity: Identity, required: Role) -> Identity:
        if identity.role != required:
            logger.warning(
                "Denied %s (role=%s): requires %s", identity.employee_id, identity.role.value, required.value
            )
            raise ForbiddenError(f"Requires role {required.value}")
        return identity

    def require(self, token: str, required: Role) -> Identity:
        return self.ensure_role(self.authenticate(token), required)
