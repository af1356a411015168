"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Roles and permissions encoded as str Enums — no raw string matching in core
    - ResolvedUser / ResolvedApiKey live for one request and are never persisted

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
    - Frozen dataclasses for per-request identity: handlers cannot mutate them
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """Account roles — maps to users.role column."""
    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"
    LISTENER = "listener"


class Permission(str, Enum):
    """Permissions that API routes require from API keys."""
    SONGS_READ = "songs:read"
    SONGS_WRITE = "songs:write"
    DETECTIONS_READ = "detections:read"
    DETECTIONS_WRITE = "detections:write"
    REPORTS_READ = "reports:read"


class PermissionPolicy(str, Enum):
    """How a key's permissions are matched against a required set."""
    ALL = "all"   # key must hold every required permission
    ANY = "any"   # key must hold at least one required permission


class ChannelType(str, Enum):
    """Broadcast medium of a monitored channel."""
    RADIO = "radio"
    TV = "tv"


class ChannelStatus(str, Enum):
    """Monitoring state of a channel."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    TESTING = "testing"


class RecognitionProvider(str, Enum):
    """Third-party identification services whose payloads carry ISRCs."""
    ACOUSTID = "acoustid"
    AUDD = "audd"


# ─── Per-request identity ────────────────────────────────────────

@dataclass(frozen=True)
class ProviderIdentity:
    """Minimal identity returned by the external identity provider."""
    id: str
    email: str | None = None
    claims: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResolvedUser:
    """Request identity: provider identity enriched with the local profile."""
    id: str
    email: str | None
    role: str
    full_name: str | None = None
    organization: str | None = None
    profile: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResolvedApiKey:
    """API key attached to a request after verification."""
    id: str
    name: str
    permissions: frozenset[str]
    expires_at: datetime | None = None


@dataclass(frozen=True)
class ApiKeyRecord:
    """Issued key as returned by the key store lookup."""
    id: str
    name: str
    owner_user_id: str
    active: bool
    permissions: frozenset[str]
    expires_at: datetime | None = None


@dataclass(frozen=True)
class ApiKeyGrant:
    """Successful API-key verification: the key and its owning user."""
    key: ResolvedApiKey
    user: ResolvedUser
