from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from presence_tracker.auth.gate import AuthorizationGate
from presence_tracker.auth.jwt_provider import JwtIdentityProvider
from presence_tracker.core.enums import Role
from presence_tracker.core.exceptions import ForbiddenError, InvalidTokenError

SECRET = "unit-test-secret-0123456789abcdef0123"


@pytest.fixture
def gate(identity):
    return AuthorizationGate(identity)


@pytest.mark.parametrize("header", [None, "", "Bearer", "Token abc", "Bearer a b"])
def test_malformed_authorization_header(header):
    with pytest.raises(InvalidTokenError):
        AuthorizationGate.bearer_token(header)


def test_bearer_token_extracted():
    assert AuthorizationGate.bearer_token("Bearer abc.def") == "abc.def"
    assert AuthorizationGate.bearer_token("bearer xyz") == "xyz"


def test_unknown_token_is_invalid(gate):
    with pytest.raises(InvalidTokenError):
        gate.authenticate("nope")


def test_verifier_failure_is_invalid(gate):
    with pytest.raises(InvalidTokenError):
        gate.authenticate("boom")


def test_admin_resolves_with_role(gate):
    ident = gate.require("admin-token", Role.ADMIN)
    assert ident.employee_id == "admin"
    assert ident.is_admin


def test_unmapped_role_defaults_to_employee(gate, roles_repo):
    assert roles_repo.get_role("bob") is None
    ident = gate.authenticate("bob-token")
    assert ident.role == Role.EMPLOYEE


def test_employee_forbidden_from_admin_operation(gate):
    with pytest.raises(ForbiddenError):
        gate.require("alice-token", Role.ADMIN)


def test_default_role_is_configurable(identity):
    gate = AuthorizationGate(identity, default_role=Role.ADMIN)
    assert gate.authenticate("bob-token").role == Role.ADMIN


def _token(sub="alice", *, secret=SECRET, expires_in=timedelta(minutes=5), **claims):
    payload = {"exp": datetime.now(timezone.utc) + expires_in, **claims}
    if sub is not None:
        payload["sub"] = sub
    return jwt.encode(payload, secret, algorithm="HS256")


def test_jwt_provider_round_trip(roles_repo):
    roles_repo.set_role("alice", Role.EMPLOYEE)
    gate = AuthorizationGate(JwtIdentityProvider(roles_repo, secret=SECRET))

    ident = gate.authenticate(_token("alice"))
    assert ident.employee_id == "alice"
    assert ident.role == Role.EMPLOYEE


@pytest.mark.parametrize(
    "token_kwargs",
    [
        {"expires_in": timedelta(minutes=-5)},
        {"secret": "another-secret-0123456789abcdef0123456"},
        {"sub": None},
    ],
)
def test_jwt_provider_rejects_bad_tokens(roles_repo, token_kwargs):
    provider = JwtIdentityProvider(roles_repo, secret=SECRET)
    with pytest.raises(InvalidTokenError):
        provider.verify(_token(**token_kwargs))


def test_jwt_provider_rejects_garbage(roles_repo):
    with pytest.raises(InvalidTokenError) as exc_info:
        JwtIdentityProvider(roles_repo, secret=SECRET).verify("not-a-jwt")
    assert isinstance(exc_info.value.__cause__, jwt.InvalidTokenError)


def test_expired_token_keeps_its_cause(roles_repo):
    with pytest.raises(InvalidTokenError) as exc_info:
        JwtIdentityProvider(roles_repo, secret=SECRET).verify(_token(expires_in=timedelta(minutes=-1)))
    assert isinstance(exc_info.value.__cause__, jwt.ExpiredSignatureError)


def test_jwt_provider_requires_secret(roles_repo):
    with pytest.raises(ValueError):
        JwtIdentityProvider(roles_repo, secret="")
