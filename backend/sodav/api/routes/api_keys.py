"""API Keys — issue, list, revoke and test API keys.

Invariants:
    - Management routes (list/create/delete) require a bearer identity
    - /test requires an API key and no particular permission
    - The raw key appears only in the POST response
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from sodav.api.dependencies import current_user, require_api_key
from sodav.core.domain_types import ApiKeyGrant, ResolvedUser
from sodav.infrastructure.database import get_db
from sodav.schemas.api_key import (
    ApiKeyCreate, ApiKeyCreated, ApiKeyOwner, ApiKeySummary, ApiKeyTestResponse,
)
from sodav.services.api_key_service import ApiKeyService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/api-keys", tags=["api-keys"])


@router.get("", response_model=list[ApiKeySummary])
async def list_api_keys(
    user: ResolvedUser = Depends(current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the caller's API keys (masked)."""
    return await ApiKeyService(db).list_keys(user.id)


@router.get("/test", response_model=ApiKeyTestResponse)
async def test_api_key(grant: ApiKeyGrant = Depends(require_api_key())):
    """Check that the presented X-API-Key is valid."""
    return ApiKeyTestResponse(
        user=ApiKeyOwner(
            id=grant.user.id,
            email=grant.user.email,
            full_name=grant.user.full_name,
            role=grant.user.role,
        ),
        permissions=sorted(grant.key.permissions),
    )


@router.post(
    "", response_model=ApiKeyCreated, status_code=status.HTTP_201_CREATED,
)
async def create_api_key(
    body: ApiKeyCreate,
    user: ResolvedUser = Depends(current_user),
    db: AsyncSession = Depends(get_db),
):
    """Issue a key. The full key is returned once and cannot be recovered."""
    return await ApiKeyService(db).create_key(user.id, body)


@router.delete("/{key_id}")
async def delete_api_key(
    key_id: UUID,
    user: ResolvedUser = Depends(current_user),
    db: AsyncSession = Depends(get_db),
):
    await ApiKeyService(db).revoke_key(user.id, key_id)
    return {"success": True, "message": "API key deleted"}
