"""
Bearer-token authentication and route policies.

Tokens are issued by the external login service and signed with the shared
``JWT_SECRET``. This module only verifies them and evaluates the resulting
claims against the policy of the matched route:

- ``Policy.ADMINISTRATOR``: a valid token carrying the ``ADMIN_CLAIM`` claim.
- ``Policy.ANONYMOUS``: anyone, with or without a token.

Routers attach ``require_route_policy(...)`` as a router-level dependency, so
the check runs before the endpoint opens any storage work.
"""
import json
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwcrypto import jwk, jwt
from jwcrypto.common import JWException
from pydantic import BaseModel

from authors_api.core.config import settings
from authors_api.core.errors import PolicyDenied, Unauthenticated
from authors_api.core.logging import get_logger


class InvalidToken(Exception):
    """The bearer token failed signature, expiry or format checks."""


class Policy(str, Enum):
    ADMINISTRATOR = "administrator"
    ANONYMOUS = "anonymous"


class Decision(str, Enum):
    ALLOWED = "allowed"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


class Principal(BaseModel):
    subject: str
    claims: dict[str, object] = {}

    @property
    def is_admin(self) -> bool:
        return bool(self.claims.get(settings.ADMIN_CLAIM))


bearer_scheme = HTTPBearer(auto_error=False)


def _signing_key() -> jwk.JWK:
    return jwk.JWK.from_password(settings.JWT_SECRET)


def decode_token(token: str) -> Principal:
    """Verify a compact JWT and turn its claims into a Principal."""
    try:
        verified = jwt.JWT(jwt=token, key=_signing_key(), algs=settings.JWT_ALGORITHMS)
        claims = json.loads(verified.claims)
    except (JWException, ValueError) as ex:
        raise InvalidToken(str(ex)) from ex

    if not isinstance(claims, dict):
        raise InvalidToken("token claims must be a JSON object")

    subject = claims.get("sub") or claims.get("email") or "unknown"
    return Principal(subject=str(subject), claims=claims)


def get_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Principal | None:
    """Resolve the caller; None when no usable bearer token was sent."""
    if credentials is None:
        return None

    try:
        principal = decode_token(credentials.credentials)
    except InvalidToken as ex:
        get_logger(__name__, request).info("Rejected bearer token: %s", ex)
        return None

    request.state.principal = principal
    return principal


def evaluate(principal: Principal | None, policy: Policy) -> Decision:
    if policy is Policy.ANONYMOUS:
        return Decision.ALLOWED
    if principal is None:
        return Decision.UNAUTHENTICATED
    if policy is Policy.ADMINISTRATOR and principal.is_admin:
        return Decision.ALLOWED
    return Decision.FORBIDDEN


def require_route_policy(
    policies: Mapping[str, Policy],
    default: Policy = Policy.ADMINISTRATOR,
) -> Callable[..., None]:
    """
    Build a router dependency enforcing ``policies`` (route name -> policy).

    Routes missing from the table fall back to ``default``.
    """

    def authorize(
        request: Request,
        principal: Annotated[Principal | None, Depends(get_principal)],
    ) -> None:
        route_name = getattr(request.scope.get("route"), "name", None) or getattr(
            request.scope.get("endpoint"), "__name__", None
        )
        policy = policies.get(route_name, default) if route_name else default

        decision = evaluate(principal, policy)
        if decision is Decision.UNAUTHENTICATED:
            raise Unauthenticated()
        if decision is Decision.FORBIDDEN:
            get_logger(__name__, request).info(
                "Policy %s denied for route %s", policy.value, route_name
            )
            raise PolicyDenied(policy.value)

    return authorize
