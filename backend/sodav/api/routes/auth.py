"""Auth — the caller's own profile.

Invariants:
    - Both routes act only on the bearer identity's own profile
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sodav.api.dependencies import current_user
from sodav.core.domain_types import ResolvedUser
from sodav.infrastructure.database import get_db
from sodav.schemas.profile import ProfileResponse, ProfileUpdate
from sodav.services.profile_service import ProfileService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(user: ResolvedUser = Depends(current_user)):
    return ProfileResponse.from_user(user)


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    body: ProfileUpdate,
    user: ResolvedUser = Depends(current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ProfileService(db).update_profile(user.id, body)
