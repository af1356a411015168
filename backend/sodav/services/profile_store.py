"""Profile Store — SQL-backed ProfileRepository.

Invariants:
    - Unknown or non-UUID user ids → None (not found)
    - SQLAlchemy failures → DatabaseError, never None
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sodav.core.errors import DatabaseError
from sodav.models.user import User

logger = logging.getLogger(__name__)


class SqlProfileStore:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def get_profile(self, user_id: str) -> dict | None:
        try:
            uid = uuid.UUID(str(user_id))
        except ValueError:
            return None
        try:
            result = await self._db.execute(select(User).where(User.id == uid))
        except SQLAlchemyError as e:
            logger.error(f"Profile lookup failed: {e}", extra={"user_id": str(uid)})
            raise DatabaseError("Profile lookup failed", "query")
        user = result.scalar_one_or_none()
        return user.to_profile() if user else None
