"""Access Control — runs the request access chain against its external collaborators.

Bearer: header → identity provider → profile → ResolvedUser.
Role: ResolvedUser → allowed role set.
API key: header → key store → active/expiry/permissions → owner profile → ApiKeyGrant.

Invariants:
    - Every failure surfaces as a typed SodavError; nothing is downgraded to success
    - Identity-provider rejections and outages both surface as UnauthenticatedError
    - Key-store outages surface as DatabaseError, distinct from an unknown key
    - The last_used_at update is best-effort: its failure is logged, not raised
    - Raw tokens and keys never appear in logs

Design Decisions:
    - Decisions come from core/access_policy (pure); this class only does IO,
      logs, and raises denial.to_error()
    - Clock injected for expiry tests
"""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import NoReturn

from sodav.core.access_policy import (
    AccessDenial, check_api_key_present, check_profile_found, check_role,
    extract_bearer_token, merge_identity, to_resolved_key,
    validate_api_key_record, DenialKind,
)
from sodav.core.domain_types import (
    ApiKeyGrant, PermissionPolicy, ProviderIdentity, ResolvedUser,
)
from sodav.core.errors import (
    DatabaseError, ErrorContext, IdentityProviderError, ResourceNotFoundError,
    UnauthenticatedError,
)
from sodav.core.repository_protocols import (
    ApiKeyRepository, IdentityVerifier, ProfileRepository,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _raise_denial(denial: AccessDenial, **extra: str | None) -> NoReturn:
    logger.warning(
        f"Access denied: {denial.message}",
        extra={"denial": denial.kind.value, **extra},
    )
    raise denial.to_error(ErrorContext(
        user_id=extra.get("user_id"), api_key_id=extra.get("api_key_id"),
    ))


def authorize_role(
    user: ResolvedUser | None, allowed_roles: Iterable[str],
) -> ResolvedUser:
    """Return the user if their role is allowed, else raise."""
    denial = check_role(user, allowed_roles)
    if denial:
        _raise_denial(denial, user_id=user.id if user else None)
    return user


class AccessControl:
    """Bearer and API-key verification over injected collaborators."""

    def __init__(
        self,
        identity: IdentityVerifier,
        profiles: ProfileRepository,
        api_keys: ApiKeyRepository,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._identity = identity
        self._profiles = profiles
        self._api_keys = api_keys
        self._clock = clock

    async def resolve_bearer_identity(
        self, authorization: str | None,
    ) -> ResolvedUser:
        token = extract_bearer_token(authorization)
        if isinstance(token, AccessDenial):
            _raise_denial(token)

        identity = await self._verify_token(token)
        profile = await self._profiles.get_profile(identity.id)
        denial = check_profile_found(identity, profile)
        if denial:
            _raise_denial(denial, user_id=identity.id)
        return merge_identity(identity, profile)

    async def _verify_token(self, token: str) -> ProviderIdentity:
        try:
            identity = await self._identity.verify_token(token)
        except IdentityProviderError as e:
            logger.warning(
                f"Identity provider unavailable: {e.message}",
                extra={"error_code": e.code},
            )
            raise UnauthenticatedError(
                "Unable to verify credentials. Please sign in again.",
            ) from e
        if identity is None:
            _raise_denial(AccessDenial(
                DenialKind.UNAUTHENTICATED,
                "Invalid or expired token. Please sign in again.",
            ))
        return identity

    async def verify_api_key(
        self,
        raw_key: str | None,
        required_permissions: Iterable[str] = (),
        policy: PermissionPolicy = PermissionPolicy.ALL,
    ) -> ApiKeyGrant:
        denial = check_api_key_present(raw_key)
        if denial:
            _raise_denial(denial)

        # DatabaseError propagates: an unreachable store is not an unknown key
        record = await self._api_keys.find_by_raw_key(raw_key.strip())
        now = self._clock()
        denial = validate_api_key_record(
            record, tuple(required_permissions), policy, now,
        )
        if denial:
            _raise_denial(denial, api_key_id=record.id if record else None)

        profile = await self._profiles.get_profile(record.owner_user_id)
        if profile is None:
            raise ResourceNotFoundError(
                "User", record.owner_user_id,
                ErrorContext(api_key_id=record.id),
            )

        await self._touch_last_used(record.id, now)
        owner = merge_identity(
            ProviderIdentity(id=record.owner_user_id), profile,
        )
        return ApiKeyGrant(key=to_resolved_key(record), user=owner)

    async def _touch_last_used(self, key_id: str, used_at: datetime) -> None:
        try:
            await self._api_keys.touch_last_used(key_id, used_at)
        except DatabaseError as e:
            logger.warning(
                f"Could not record API key usage: {e.message}",
                extra={"api_key_id": key_id, "error_code": e.code},
            )
