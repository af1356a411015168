"""Channel Service — monitored stream CRUD.

Invariants:
    - Listing is ordered by name and filterable by type and status
    - Unknown channel id → ResourceNotFoundError
    - name and stream_url can never be set to null
"""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sodav.core.domain_types import ChannelStatus, ChannelType
from sodav.core.errors import ResourceNotFoundError, ValidationError
from sodav.models.channel import Channel
from sodav.schemas.channel import (
    ChannelCreate, ChannelPage, ChannelResponse, ChannelUpdate,
)
from sodav.schemas.common import page_of

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("name", "type", "stream_url", "status")


class ChannelService:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def list_channels(
        self,
        page: int = 1,
        limit: int = 20,
        channel_type: ChannelType | None = None,
        channel_status: ChannelStatus | None = None,
    ) -> ChannelPage:
        query = select(Channel)
        count_query = select(func.count()).select_from(Channel)
        if channel_type is not None:
            query = query.where(Channel.type == channel_type.value)
            count_query = count_query.where(Channel.type == channel_type.value)
        if channel_status is not None:
            query = query.where(Channel.status == channel_status.value)
            count_query = count_query.where(Channel.status == channel_status.value)

        total = (await self._db.execute(count_query)).scalar_one()
        result = await self._db.execute(
            query.order_by(Channel.name).limit(limit).offset((page - 1) * limit),
        )
        return ChannelPage(
            channels=[
                ChannelResponse.model_validate(c) for c in result.scalars().all()
            ],
            pagination=page_of(total, page, limit),
        )

    async def get_channel(self, channel_id: uuid.UUID) -> Channel:
        result = await self._db.execute(
            select(Channel).where(Channel.id == channel_id),
        )
        channel = result.scalar_one_or_none()
        if channel is None:
            raise ResourceNotFoundError("Channel", str(channel_id))
        return channel

    async def create_channel(self, body: ChannelCreate) -> Channel:
        channel = Channel(**body.model_dump(mode="json"))
        self._db.add(channel)
        await self._db.commit()
        await self._db.refresh(channel)
        logger.info(f"Channel created: {channel.id}")
        return channel

    async def update_channel(
        self, channel_id: uuid.UUID, body: ChannelUpdate,
    ) -> Channel:
        channel = await self.get_channel(channel_id)
        changes = body.model_dump(mode="json", exclude_unset=True)
        for field in _REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be empty", field)
        for field, value in changes.items():
            setattr(channel, field, value)
        await self._db.commit()
        await self._db.refresh(channel)
        logger.info(f"Channel updated: {channel.id}")
        return channel

    async def delete_channel(self, channel_id: uuid.UUID) -> None:
        channel = await self.get_channel(channel_id)
        await self._db.delete(channel)
        await self._db.commit()
        logger.info(f"Channel deleted: {channel_id}")
