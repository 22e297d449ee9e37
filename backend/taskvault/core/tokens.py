"""Token Service — issues and verifies signed, time-bounded bearer tokens.

Invariants:
    - Tokens are HS256 (configurable HMAC) JWTs: sub, email, iat, exp, optional nbf
    - Only the configured algorithm is accepted on verify (no "none", no downgrade)
    - verify() raises exactly one of TokenMalformedError / TokenExpiredError /
      TokenNotYetValidError, or returns an Identity built from sub + email only
    - Missing secret is a ServerMisconfigurationError on both issue and verify

Design Decisions:
    - PyJWT over hand-rolled HMAC: claim validation (exp/nbf/iat, leeway) for free
    - Stateless: no session table, no revocation list (refresh/rotation out of scope)
    - Clock injectable for issuance so tests can mint already-expired tokens
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable
from uuid import UUID

import jwt
from jwt.exceptions import (
    ExpiredSignatureError,
    ImmatureSignatureError,
    InvalidTokenError,
)

from taskvault.core.domain_types import Identity, UserId
from taskvault.core.errors import (
    ServerMisconfigurationError,
    TokenExpiredError,
    TokenMalformedError,
    TokenNotYetValidError,
)

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(days=7)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_datetime(value: Any) -> datetime:
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


class TokenService:
    """Signs and verifies bearer tokens with a single server secret."""

    def __init__(
        self,
        secret: str | None,
        algorithm: str = "HS256",
        ttl: timedelta = DEFAULT_TTL,
        not_before_delay: timedelta | None = None,
        leeway: timedelta = timedelta(0),
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl
        self._not_before_delay = not_before_delay
        self._leeway = leeway
        self._clock = clock

    @property
    def configured(self) -> bool:
        return bool(self._secret)

    def _require_secret(self) -> str:
        if not self._secret:
            logger.error("Token signing secret is not configured")
            raise ServerMisconfigurationError()
        return self._secret

    def issue(self, user_id: UUID, email: str) -> str:
        """Sign a token for the given identity."""
        secret = self._require_secret()
        issued_at = self._clock()
        claims: dict[str, Any] = {
            "sub": str(user_id),
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        if self._not_before_delay:
            claims["nbf"] = issued_at + self._not_before_delay
        return jwt.encode(claims, secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Identity:
        """Validate signature and time claims; return the embedded identity."""
        secret = self._require_secret()
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                leeway=self._leeway,
                options={"require": ["exp", "iat", "sub"]},
            )
        except ExpiredSignatureError:
            raise TokenExpiredError(self._unverified_time(token, "exp")) from None
        except ImmatureSignatureError:
            raise TokenNotYetValidError(
                self._unverified_time(token, "nbf", "iat"),
            ) from None
        except InvalidTokenError as e:
            logger.info(f"Rejected token: {type(e).__name__}")
            raise TokenMalformedError() from None
        return self._identity_from(payload)

    @staticmethod
    def _identity_from(payload: dict[str, Any]) -> Identity:
        email = payload.get("email")
        if not isinstance(email, str) or not email:
            raise TokenMalformedError()
        try:
            user_id = UUID(str(payload["sub"]))
        except ValueError:
            raise TokenMalformedError() from None
        return Identity(user_id=UserId(user_id), email=email)

    def _unverified_time(self, token: str, *claims: str) -> datetime:
        # Only reached after PyJWT has already checked the signature.
        payload = jwt.decode(
            token, options={"verify_signature": False},
            algorithms=[self._algorithm],
        )
        for claim in claims:
            if claim in payload:
                return _as_datetime(payload[claim])
        raise TokenMalformedError()
