from __future__ import annotations

import logging
from typing import Optional

import jwt

from ..core.enums import Role
from ..core.exceptions import InvalidTokenError
from .identity import IdentityProvider, RoleRepository

logger = logging.getLogger(__name__)


class JwtIdentityProvider(IdentityProvider):
    """Verify HS256 bearer tokens with a shared secret; roles come from the store.

    The token's ``sub`` claim carries the employee id.
    """

    def __init__(self, roles: RoleRepository, *, secret: str, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("JWT secret is not configured")
        self._roles = roles
        self._secret = secret
        self._algorithm = algorithm

    def verify(self, token: str) -> Optional[str]:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_signature": True, "verify_exp": True, "require": ["sub"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidTokenError("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            logger.debug("JWT rejected: %s", exc)
            raise InvalidTokenError("Invalid token") from exc

        subject = payload.get("sub")
        return str(subject) if subject else None

    def role_of(self, employee_id: str) -> Optional[Role]:
        return self._roles.get_role(employee_id)
