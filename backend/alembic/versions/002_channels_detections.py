"""Channels, detections and manual corrections.

Revision ID: 002_channels_detections
Revises: 001_initial
Create Date: 2026-10-17
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '002_channels_detections'
down_revision: Union[str, None] = '001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'channels',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('type', sa.String(10), nullable=False),
        sa.Column('stream_url', sa.String(1000), nullable=False),
        sa.Column('logo_url', sa.String(1000), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('country', sa.String(100), nullable=True),
        sa.Column('language', sa.String(100), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column(
            'created_at', sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            'updated_at', sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index('ix_channels_name', 'channels', ['name'])

    op.create_table(
        'detections',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            'channel_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('channels.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'song_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('songs.id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column('provider', sa.String(20), nullable=False),
        sa.Column('isrc', sa.String(12), nullable=False),
        sa.Column('confidence', sa.Float(), nullable=True),
        sa.Column('played_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('api_key_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            'created_at', sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index('ix_detections_channel_id', 'detections', ['channel_id'])
    op.create_index('ix_detections_song_id', 'detections', ['song_id'])
    op.create_index('ix_detections_isrc', 'detections', ['isrc'])
    op.create_index('ix_detections_played_at', 'detections', ['played_at'])

    op.create_table(
        'manual_corrections',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            'detection_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('detections.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'previous_song_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('songs.id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column(
            'corrected_song_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('songs.id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column('reason', sa.String(500), nullable=False),
        sa.Column(
            'corrected_by', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column(
            'created_at', sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        'ix_manual_corrections_detection_id', 'manual_corrections', ['detection_id'],
    )


def downgrade() -> None:
    op.drop_index('ix_manual_corrections_detection_id', table_name='manual_corrections')
    op.drop_table('manual_corrections')
    op.drop_index('ix_detections_played_at', table_name='detections')
    op.drop_index('ix_detections_isrc', table_name='detections')
    op.drop_index('ix_detections_song_id', table_name='detections')
    op.drop_index('ix_detections_channel_id', table_name='detections')
    op.drop_table('detections')
    op.drop_index('ix_channels_name', table_name='channels')
    op.drop_table('channels')
