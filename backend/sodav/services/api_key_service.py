"""API Key Service — issue, list and revoke keys for the authenticated user.

Invariants:
    - The raw key leaves the service exactly once, in create_key's result
    - Listing masks every key as key_prefix + "..."
    - A key owned by another user is reported as not found (no ownership oracle)
    - expires_at in the past is rejected at creation

Design Decisions:
    - secrets.token_hex(32): 64 hex chars, 256 bits of entropy
    - Only the SHA-256 digest is stored (see api_key_store.hash_api_key)
"""

import logging
import secrets
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sodav.core.access_policy import is_expired
from sodav.core.errors import (
    DatabaseError, ResourceNotFoundError, ValidationError,
)
from sodav.models.api_key import ApiKey
from sodav.schemas.api_key import ApiKeyCreate, ApiKeyCreated, ApiKeySummary
from sodav.services.api_key_store import hash_api_key

logger = logging.getLogger(__name__)

KEY_PREFIX_LENGTH = 8


def generate_api_key() -> str:
    return secrets.token_hex(32)


def _summary(key: ApiKey) -> ApiKeySummary:
    return ApiKeySummary(
        id=key.id,
        name=key.name,
        key=f"{key.key_prefix}...",
        key_prefix=key.key_prefix,
        permissions=list(key.permissions or []),
        active=key.active,
        created_at=key.created_at,
        expires_at=key.expires_at,
        last_used_at=key.last_used_at,
    )


class ApiKeyService:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def list_keys(self, user_id: str) -> list[ApiKeySummary]:
        """Keys of user_id, newest first, masked."""
        result = await self._db.execute(
            select(ApiKey)
            .where(ApiKey.user_id == uuid.UUID(user_id))
            .order_by(ApiKey.created_at.desc()),
        )
        return [_summary(k) for k in result.scalars().all()]

    async def create_key(self, user_id: str, body: ApiKeyCreate) -> ApiKeyCreated:
        if is_expired(body.expires_at, datetime.now(timezone.utc)):
            raise ValidationError(
                "expires_at must be in the future", "expires_at",
            )
        raw_key = generate_api_key()
        key = ApiKey(
            user_id=uuid.UUID(user_id),
            name=body.name,
            key_hash=hash_api_key(raw_key),
            key_prefix=raw_key[:KEY_PREFIX_LENGTH],
            permissions=body.permissions,
            expires_at=body.expires_at,
        )
        self._db.add(key)
        try:
            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.error(f"Failed to create API key: {e}", extra={"user_id": user_id})
            raise DatabaseError("Could not store API key", "commit")
        await self._db.refresh(key)
        logger.info(
            f"API key '{key.name}' created",
            extra={"user_id": user_id, "api_key_id": str(key.id)},
        )
        return ApiKeyCreated(**{**_summary(key).model_dump(), "key": raw_key})

    async def revoke_key(self, user_id: str, key_id: uuid.UUID) -> None:
        result = await self._db.execute(
            select(ApiKey).where(
                ApiKey.id == key_id, ApiKey.user_id == uuid.UUID(user_id),
            ),
        )
        key = result.scalar_one_or_none()
        if key is None:
            raise ResourceNotFoundError("ApiKey", str(key_id))
        await self._db.delete(key)
        await self._db.commit()
        logger.info(
            "API key revoked",
            extra={"user_id": user_id, "api_key_id": str(key_id)},
        )
