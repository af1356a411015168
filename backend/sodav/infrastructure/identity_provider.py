"""Supabase Identity Client — verifies bearer tokens against Supabase Auth (GoTrue).

Invariants:
    - 200 with a user id → ProviderIdentity
    - Any other HTTP status → None (token rejected)
    - Transport failures and timeouts → IdentityProviderError
    - The token is never logged

Design Decisions:
    - Wrapper over a raw httpx.AsyncClient: isolates the wire contract from the
      access-control service, which only sees the IdentityVerifier protocol
    - No retries: a failed verification fails the request, the client retries
    - One client per process, opened in the lifespan and closed on shutdown
"""

import logging

import httpx

from sodav.core.domain_types import ProviderIdentity
from sodav.core.errors import IdentityProviderError

logger = logging.getLogger(__name__)

USER_ENDPOINT = "/auth/v1/user"


class SupabaseIdentityClient:
    """Implements IdentityVerifier over the Supabase Auth REST API."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"apikey": anon_key},
            timeout=timeout_seconds,
            transport=transport,
        )

    async def verify_token(self, token: str) -> ProviderIdentity | None:
        try:
            response = await self._client.get(
                USER_ENDPOINT, headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.TimeoutException as e:
            raise IdentityProviderError(str(e) or "timed out", "timeout")
        except httpx.HTTPError as e:
            raise IdentityProviderError(str(e) or type(e).__name__, "transport")

        if response.status_code != httpx.codes.OK:
            logger.info(
                f"Identity provider rejected token (HTTP {response.status_code})",
            )
            return None

        try:
            data = response.json()
        except ValueError:
            raise IdentityProviderError("Response body is not JSON", "decode")

        if not isinstance(data, dict) or not data.get("id"):
            return None
        return ProviderIdentity(
            id=str(data["id"]), email=data.get("email"), claims=data,
        )

    async def aclose(self) -> None:
        await self._client.aclose()
