"""Auth Guard — bearer-token extraction and verification for protected routes.

Per-request flow:
    NoHeader --extract--> HasCandidateToken --TokenService.verify--> Authenticated | Rejected

Invariants:
    - Missing header, wrong scheme, or empty token → NoTokenError
    - TokenService failures propagate unchanged (TOKEN_EXPIRED stays TOKEN_EXPIRED)
    - The returned Identity is frozen and lives in FastAPI's per-request dependency
      cache — no request can observe another request's identity

Design Decisions:
    - Dependency instead of ASGI middleware: public routes stay untouched and
      handlers receive the identity as an explicit, typed argument
    - Scheme compared case-insensitively (RFC 7235 auth-scheme is case-insensitive)
"""

from fastapi import Depends, Header

from taskvault.api.dependencies import get_token_service
from taskvault.core.domain_types import Identity
from taskvault.core.errors import NoTokenError
from taskvault.core.tokens import TokenService

BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token from an `Authorization: Bearer <token>` value."""
    if not authorization:
        raise NoTokenError()
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_SCHEME or not token or " " in token:
        raise NoTokenError()
    return token


async def require_identity(
    authorization: str | None = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """FastAPI dependency: the verified caller, or a 401 failure."""
    token = extract_bearer_token(authorization)
    return tokens.verify(token)
