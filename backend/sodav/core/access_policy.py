"""Access Policy — pure decisions behind the request access-control chain.

Chain: UNRESOLVED → IDENTITY_RESOLVED → AUTHORIZED → HANDLED, or a denial at
any stage. This module decides; services/access_control.py performs the IO
and raises.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return AccessDenial on violation, None (or the granted value) on success
    - Denial kinds keep status classes apart: 401 vs 403 vs 404
    - Keys without expires_at never expire
    - validate_api_key_record chains all key checks — first denial wins

Design Decisions:
    - Denials as values (not exceptions): every failure path is an explicit
      branch the shell has to handle, and tests need no pytest.raises
    - Naive datetimes are read as UTC (SQLite drops tzinfo on round-trip)
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from sodav.core.domain_types import (
    ApiKeyRecord, PermissionPolicy, ProviderIdentity, ResolvedApiKey,
    ResolvedUser,
)
from sodav.core.errors import (
    ErrorContext, ForbiddenError, ResourceNotFoundError, SodavError,
    UnauthenticatedError,
)

BEARER_SCHEME = "bearer"


class DenialKind(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class AccessDenial:
    """A rejected access check: what kind, and the client-facing message."""
    kind: DenialKind
    message: str
    resource_id: str | None = None

    def to_error(self, context: ErrorContext | None = None) -> SodavError:
        if self.kind is DenialKind.FORBIDDEN:
            return ForbiddenError(self.message, context)
        if self.kind is DenialKind.NOT_FOUND:
            return ResourceNotFoundError("User", self.resource_id or "", context)
        return UnauthenticatedError(self.message, context)


def _unauthenticated(message: str) -> AccessDenial:
    return AccessDenial(DenialKind.UNAUTHENTICATED, message)


def _forbidden(message: str) -> AccessDenial:
    return AccessDenial(DenialKind.FORBIDDEN, message)


# ─── Bearer identity ─────────────────────────────────────────────

def extract_bearer_token(authorization: str | None) -> str | AccessDenial:
    """Token from an `Authorization: Bearer <token>` header value."""
    if not authorization:
        return _unauthenticated("Missing bearer token. Please sign in.")
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_SCHEME or not token or " " in token:
        return _unauthenticated("Malformed Authorization header.")
    return token


def check_profile_found(
    identity: ProviderIdentity, profile: Mapping[str, Any] | None,
) -> AccessDenial | None:
    """Valid token but no local account record is an error, not a signup."""
    if profile is None:
        return AccessDenial(
            DenialKind.NOT_FOUND,
            "User account not found.",
            resource_id=identity.id,
        )
    return None


def merge_identity(
    identity: ProviderIdentity, profile: Mapping[str, Any],
) -> ResolvedUser:
    """Provider identity enriched with the profile; profile fields win."""
    merged = {**identity.claims, **profile}
    return ResolvedUser(
        id=str(profile.get("id") or identity.id),
        email=merged.get("email") or identity.email,
        role=str(merged.get("role") or ""),
        full_name=merged.get("full_name"),
        organization=merged.get("organization"),
        profile=dict(profile),
    )


# ─── Role authorization ──────────────────────────────────────────

def check_role(
    user: ResolvedUser | None, allowed_roles: Iterable[str],
) -> AccessDenial | None:
    """Identity must be resolved first; then its role must be allowed."""
    if user is None:
        return _unauthenticated("Missing bearer token. Please sign in.")
    allowed = {getattr(r, "value", r) for r in allowed_roles}
    if user.role not in allowed:
        return _forbidden("Insufficient role for this action.")
    return None


# ─── API keys ────────────────────────────────────────────────────

def check_api_key_present(raw_key: str | None) -> AccessDenial | None:
    if not raw_key or not raw_key.strip():
        return _unauthenticated("Missing API key.")
    return None


def check_api_key_active(record: ApiKeyRecord | None) -> AccessDenial | None:
    if record is None or not record.active:
        return _unauthenticated("Invalid or disabled API key.")
    return None


def is_expired(expires_at: datetime | None, now: datetime) -> bool:
    if expires_at is None:
        return False
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at < now


def check_api_key_expiry(
    record: ApiKeyRecord, now: datetime,
) -> AccessDenial | None:
    if is_expired(record.expires_at, now):
        return _unauthenticated("Expired API key.")
    return None


def has_permissions(
    granted: Iterable[str],
    required: Iterable[str],
    policy: PermissionPolicy = PermissionPolicy.ALL,
) -> bool:
    """ALL: granted ⊇ required. ANY: granted ∩ required ≠ ∅. Empty required passes."""
    required_set = {getattr(p, "value", p) for p in required}
    if not required_set:
        return True
    granted_set = set(granted)
    if policy is PermissionPolicy.ANY:
        return bool(granted_set & required_set)
    return required_set <= granted_set


def check_api_key_permissions(
    record: ApiKeyRecord,
    required: Iterable[str],
    policy: PermissionPolicy = PermissionPolicy.ALL,
) -> AccessDenial | None:
    if not has_permissions(record.permissions, required, policy):
        return _forbidden("API key lacks the required permissions.")
    return None


def validate_api_key_record(
    record: ApiKeyRecord | None,
    required: Iterable[str],
    policy: PermissionPolicy,
    now: datetime,
) -> AccessDenial | None:
    """Chain all key checks. Returns first denial or None."""
    denial = check_api_key_active(record)
    if denial:
        return denial
    return (
        check_api_key_expiry(record, now)
        or check_api_key_permissions(record, required, policy)
    )


def to_resolved_key(record: ApiKeyRecord) -> ResolvedApiKey:
    return ResolvedApiKey(
        id=record.id,
        name=record.name,
        permissions=frozenset(record.permissions),
        expires_at=record.expires_at,
    )
