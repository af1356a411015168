"""Profile Service — self-service edits to the caller's own profile.

Invariants:
    - Only full_name and organization are writable; role and email are not
    - A profile that vanished between authentication and update → ResourceNotFoundError
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sodav.core.errors import ResourceNotFoundError
from sodav.models.user import User
from sodav.schemas.profile import ProfileResponse, ProfileUpdate

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def update_profile(
        self, user_id: str, body: ProfileUpdate,
    ) -> ProfileResponse:
        result = await self._db.execute(
            select(User).where(User.id == uuid.UUID(user_id)),
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise ResourceNotFoundError("User", user_id)
        for field, value in body.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        await self._db.commit()
        await self._db.refresh(user)
        logger.info("Profile updated", extra={"user_id": user_id})
        return ProfileResponse(
            id=str(user.id),
            email=user.email,
            full_name=user.full_name,
            organization=user.organization,
            role=user.role,
            created_at=user.created_at,
        )
