"""Supabase Identity Client — wire contract against a mocked Auth API.

Tests cover:
    - 200 with user id → ProviderIdentity carrying email and raw claims
    - 401 / 403 / 500 → None
    - Body without id → None
    - Timeout / transport failure / non-JSON body → IdentityProviderError
    - Request carries the bearer token and the project's anon key
"""

import httpx
import pytest

from sodav.core.errors import IdentityProviderError
from sodav.infrastructure.identity_provider import SupabaseIdentityClient


def _client(handler) -> SupabaseIdentityClient:
    return SupabaseIdentityClient(
        "https://project.supabase.co/", "anon-key",
        transport=httpx.MockTransport(handler),
    )


async def test_valid_token_returns_identity():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("authorization")
        seen["apikey"] = request.headers.get("apikey")
        return httpx.Response(200, json={
            "id": "6f1c2d3e-0000-4000-8000-000000000001",
            "email": "awa@sodav.sn",
            "role": "authenticated",
        })

    client = _client(handler)
    identity = await client.verify_token("jwt-token")
    await client.aclose()

    assert identity.id == "6f1c2d3e-0000-4000-8000-000000000001"
    assert identity.email == "awa@sodav.sn"
    assert identity.claims["role"] == "authenticated"
    assert seen["url"] == "https://project.supabase.co/auth/v1/user"
    assert seen["auth"] == "Bearer jwt-token"
    assert seen["apikey"] == "anon-key"


@pytest.mark.parametrize("status", [401, 403, 404, 500])
async def test_non_200_returns_none(status):
    client = _client(lambda request: httpx.Response(status, json={"msg": "bad"}))
    assert await client.verify_token("jwt-token") is None
    await client.aclose()


async def test_body_without_id_returns_none():
    client = _client(lambda request: httpx.Response(200, json={"email": "x@y"}))
    assert await client.verify_token("jwt-token") is None
    await client.aclose()


async def test_timeout_raises_provider_error():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    client = _client(handler)
    with pytest.raises(IdentityProviderError) as exc_info:
        await client.verify_token("jwt-token")
    await client.aclose()
    assert exc_info.value.failure_type == "timeout"
    assert exc_info.value.http_status == 502


async def test_transport_failure_raises_provider_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(IdentityProviderError) as exc_info:
        await client.verify_token("jwt-token")
    await client.aclose()
    assert exc_info.value.failure_type == "transport"


async def test_non_json_body_raises_provider_error():
    client = _client(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(IdentityProviderError) as exc_info:
        await client.verify_token("jwt-token")
    await client.aclose()
    assert exc_info.value.failure_type == "decode"
