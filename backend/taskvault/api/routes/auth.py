"""Auth Routes — registration, login and the current-identity endpoint.

Invariants:
    - register → 201 public identity (no hash); duplicate email → 409
    - login → 200 {token, user}; unknown email and wrong password share one 401
    - login with no signing secret → 500 SERVER_MISCONFIGURATION, checked before
      any password work so a misconfigured server does not burn CPU
    - /auth/me reads the user fresh from the store: a deleted account → 404

Design Decisions:
    - Thin handlers: all rules live in CredentialStore and TokenService
"""

import logging

from fastapi import APIRouter, Depends, status

from taskvault.api.auth_guard import require_identity
from taskvault.api.dependencies import get_credential_store, get_token_service
from taskvault.core.domain_types import Identity
from taskvault.core.errors import ServerMisconfigurationError
from taskvault.core.tokens import TokenService
from taskvault.schemas.auth import (
    LoginRequest,
    LoginResponse,
    LoginUser,
    RegisterRequest,
    UserResponse,
)
from taskvault.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register", response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest,
    store: CredentialStore = Depends(get_credential_store),
):
    """Create an account."""
    user = await store.register(body.email, body.password, body.name)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    store: CredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
):
    """Exchange email + password for a bearer token."""
    if not tokens.configured:
        logger.error("Login attempted without a signing secret")
        raise ServerMisconfigurationError()
    user = await store.verify(body.email, body.password)
    token = tokens.issue(user.id, user.email)
    logger.info("User logged in", extra={"user_id": user.id})
    return LoginResponse(token=token, user=LoginUser.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def me(
    identity: Identity = Depends(require_identity),
    store: CredentialStore = Depends(get_credential_store),
):
    """Return the caller's account."""
    user = await store.get(identity.user_id)
    return UserResponse.model_validate(user)
