"""Create events and rsvps tables

Revision ID: 3f2a9c1e7b10
Revises:
Create Date: 2025-06-01 12:00:00

"""
from typing import Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy_utils import UUIDType

# revision identifiers, used by Alembic.
revision: str = '3f2a9c1e7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, None] = None
depends_on: Union[str, None] = None


def timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        'events',
        sa.Column('uuid', UUIDType(binary=False), primary_key=True),
        *timestamps(),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('cocktail_capacity', sa.Integer, nullable=True),
        sa.Column('food_capacity', sa.Integer, nullable=True),
        sa.Column('total_capacity', sa.Integer, nullable=True),
        sa.Column('waitlist_enabled', sa.Boolean, nullable=False),
        sa.Column('max_plus_ones_per_guest', sa.Integer, nullable=False),
        sa.Column('dinner_enabled', sa.Boolean, nullable=False),
        sa.Column('dinner_start_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('dinner_end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('dinner_seating_interval_hours', sa.Float, nullable=True),
        sa.Column('dinner_max_seats_per_slot', sa.Integer, nullable=True),
        sa.Column(
            'dinner_overflow_action',
            sa.Enum('WAITLIST', name='dinner_overflow_action_enum'),
            nullable=False,
        ),
    )
    op.create_index('ix_events_slug', 'events', ['slug'], unique=True)

    op.create_table(
        'rsvps',
        sa.Column('uuid', UUIDType(binary=False), primary_key=True),
        *timestamps(),
        sa.Column(
            'event_id',
            UUIDType(binary=False),
            sa.ForeignKey('events.uuid', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('plus_ones', sa.Integer, nullable=False),
        sa.Column(
            'booking_status',
            sa.Enum('CONFIRMED', 'WAITLIST', 'CANCELLED', name='booking_status_enum'),
            nullable=False,
        ),
        sa.Column('dinner_slot_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('dinner_party_size', sa.Integer, nullable=True),
        sa.Column(
            'dinner_booking_status',
            sa.Enum('CONFIRMED', 'WAITLIST', name='dinner_booking_status_enum'),
            nullable=True,
        ),
        sa.Column('dinner_pull_up_count', sa.Integer, nullable=False),
        sa.Column('cocktail_only_pull_up_count', sa.Integer, nullable=False),
        sa.UniqueConstraint('event_id', 'email', name='uq_rsvps_event_email'),
    )
    op.create_index('ix_rsvps_event_id', 'rsvps', ['event_id'])
    op.create_index('ix_rsvps_email', 'rsvps', ['email'])


def downgrade() -> None:
    op.drop_index('ix_rsvps_email', table_name='rsvps')
    op.drop_index('ix_rsvps_event_id', table_name='rsvps')
    op.drop_table('rsvps')
    op.drop_index('ix_events_slug', table_name='events')
    op.drop_table('events')
    op.execute('DROP TYPE IF EXISTS dinner_booking_status_enum')
    op.execute('DROP TYPE IF EXISTS booking_status_enum')
    op.execute('DROP TYPE IF EXISTS dinner_overflow_action_enum')
