"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - "Not found" is a None return; "store unreachable" is a raised DatabaseError
      or IdentityProviderError, never a None

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO, the pure policy functions that
      consume their results are never async
"""

from datetime import datetime
from typing import Any, Protocol

from sodav.core.domain_types import ApiKeyRecord, ProviderIdentity


class IdentityVerifier(Protocol):
    """Verifies bearer tokens against the external identity provider."""
    async def verify_token(self, token: str) -> ProviderIdentity | None: ...


class ProfileRepository(Protocol):
    """Full user profile keyed by the identity provider's user id."""
    async def get_profile(self, user_id: str) -> dict[str, Any] | None: ...


class ApiKeyRepository(Protocol):
    """Issued API keys, looked up by raw key value."""
    async def find_by_raw_key(self, raw_key: str) -> ApiKeyRecord | None: ...
    async def touch_last_used(self, key_id: str, used_at: datetime) -> None: ...
