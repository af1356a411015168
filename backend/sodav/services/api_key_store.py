"""API Key Store — SQL-backed ApiKeyRepository.

Invariants:
    - Keys are looked up by SHA-256 digest, never by raw value
    - Unknown key → None; store failure → DatabaseError (callers tell them apart)
    - touch_last_used rolls back its own failed write before raising
"""

import hashlib
import logging
import uuid
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sodav.core.domain_types import ApiKeyRecord
from sodav.core.errors import DatabaseError
from sodav.models.api_key import ApiKey

logger = logging.getLogger(__name__)


def hash_api_key(raw_key: str) -> str:
    return hashlib.sha256(raw_key.encode("utf-8")).hexdigest()


def to_record(key: ApiKey) -> ApiKeyRecord:
    return ApiKeyRecord(
        id=str(key.id),
        name=key.name,
        owner_user_id=str(key.user_id),
        active=key.active,
        permissions=frozenset(key.permissions or ()),
        expires_at=key.expires_at,
    )


class SqlApiKeyStore:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def find_by_raw_key(self, raw_key: str) -> ApiKeyRecord | None:
        try:
            result = await self._db.execute(
                select(ApiKey).where(ApiKey.key_hash == hash_api_key(raw_key)),
            )
        except SQLAlchemyError as e:
            logger.error(f"API key lookup failed: {e}")
            raise DatabaseError("API key lookup failed", "query")
        key = result.scalar_one_or_none()
        return to_record(key) if key else None

    async def touch_last_used(self, key_id: str, used_at: datetime) -> None:
        try:
            await self._db.execute(
                update(ApiKey)
                .where(ApiKey.id == uuid.UUID(key_id))
                .values(last_used_at=used_at),
            )
            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            raise DatabaseError(str(e), "update")
