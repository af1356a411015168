"""Access Dependencies — FastAPI dependencies that run the access chain per request.

Invariants:
    - Every protected route declares exactly one of current_user, require_roles(...)
      or require_api_key(...)
    - require_roles always resolves the bearer identity first
    - Resolved identities are attached to request.state and vanish with the request

Design Decisions:
    - Collaborators (identity verifier, DB session) come from app.state and get_db,
      so tests replace them without patching modules
"""

from collections.abc import Awaitable, Callable

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from sodav.core.domain_types import (
    ApiKeyGrant, PermissionPolicy, ResolvedUser, UserRole,
)
from sodav.core.repository_protocols import IdentityVerifier
from sodav.infrastructure.database import get_db
from sodav.services.access_control import AccessControl, authorize_role
from sodav.services.api_key_store import SqlApiKeyStore
from sodav.services.profile_store import SqlProfileStore


def get_identity_verifier(request: Request) -> IdentityVerifier:
    verifier = getattr(request.app.state, "identity_verifier", None)
    if verifier is None:
        raise RuntimeError("Identity verifier not initialized")
    return verifier


async def get_access_control(
    db: AsyncSession = Depends(get_db),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> AccessControl:
    return AccessControl(
        identity=verifier,
        profiles=SqlProfileStore(db),
        api_keys=SqlApiKeyStore(db),
    )


async def current_user(
    request: Request,
    authorization: str | None = Header(None),
    access: AccessControl = Depends(get_access_control),
) -> ResolvedUser:
    """Bearer identity resolution."""
    user = await access.resolve_bearer_identity(authorization)
    request.state.user = user
    return user


def require_roles(
    *roles: UserRole | str,
) -> Callable[..., Awaitable[ResolvedUser]]:
    """Dependency factory: bearer identity whose role is in `roles`."""
    allowed = tuple(roles)

    async def dependency(
        user: ResolvedUser = Depends(current_user),
    ) -> ResolvedUser:
        return authorize_role(user, allowed)

    return dependency


def require_api_key(
    *permissions: str,
    policy: PermissionPolicy = PermissionPolicy.ALL,
) -> Callable[..., Awaitable[ApiKeyGrant]]:
    """Dependency factory: X-API-Key holding `permissions` under `policy`."""
    required = tuple(getattr(p, "value", p) for p in permissions)

    async def dependency(
        request: Request,
        x_api_key: str | None = Header(None, alias="X-API-Key"),
        access: AccessControl = Depends(get_access_control),
    ) -> ApiKeyGrant:
        grant = await access.verify_api_key(x_api_key, required, policy)
        request.state.api_key = grant.key
        request.state.user = grant.user
        return grant

    return dependency
